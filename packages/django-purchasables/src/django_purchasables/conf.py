"""Django Purchasables configuration.

All settings can be overridden in your Django settings.py.

Example:
    # settings.py
    PURCHASABLES_DEFAULT_CURRENCY = 'EUR'
    PURCHASABLES_SALES_SERVICE = 'shop.sales.PromotionSalesService'
"""

from django.conf import settings


# =============================================================================
# DEFAULTS
# =============================================================================

DEFAULT_CURRENCY = 'USD'

DEFAULT_CATALOG_PRICING_SERVICE = 'django_purchasables.services.ModelCatalogPricingService'
DEFAULT_SALES_SERVICE = 'django_purchasables.services.NoSalesService'
DEFAULT_STORE_DIRECTORY = 'django_purchasables.services.ModelStoreDirectory'


def get_setting(name: str, default=None):
    """Get a setting with PURCHASABLES_ prefix.

    Read at call time so override_settings() is honoured.
    """
    return getattr(settings, f"PURCHASABLES_{name}", default)


def get_default_currency() -> str:
    """Currency assigned to new stores."""
    return get_setting('DEFAULT_CURRENCY', DEFAULT_CURRENCY)


def get_catalog_pricing_service_path() -> str:
    return get_setting('CATALOG_PRICING_SERVICE', DEFAULT_CATALOG_PRICING_SERVICE)


def get_sales_service_path() -> str:
    return get_setting('SALES_SERVICE', DEFAULT_SALES_SERVICE)


def get_store_directory_path() -> str:
    return get_setting('STORE_DIRECTORY', DEFAULT_STORE_DIRECTORY)


# =============================================================================
# DEFAULT SETTINGS REFERENCE
# =============================================================================

# PURCHASABLES_DEFAULT_CURRENCY = 'USD'  # Currency for new stores
# PURCHASABLES_CATALOG_PRICING_SERVICE = 'django_purchasables.services.ModelCatalogPricingService'
# PURCHASABLES_SALES_SERVICE = 'django_purchasables.services.NoSalesService'
# PURCHASABLES_STORE_DIRECTORY = 'django_purchasables.services.ModelStoreDirectory'
