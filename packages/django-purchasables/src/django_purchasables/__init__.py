"""Django Purchasables - Per-store pricing, stock and promotions for sellable items.

Provides:
- Purchasable: Sellable item with SKU, dimensions and tax/shipping categories
- PurchasableStore: Per-store override of price, stock and purchase flags
- CatalogPrice: Dynamically computed prices layered above the overrides
- PricingResolver: Price, promotional price and sale price resolution
- HasUnlimitedStockConditionRule: Product query condition on variant stock

Usage:
    INSTALLED_APPS = [
        ...
        'django_purchasables',
    ]

    from django_purchasables import get_resolver

    resolver = get_resolver(request.user)
    resolver.get_price(variant, store)

See conf.py for all configuration options.
"""

__version__ = "0.1.0"

__all__ = [
    "PricingResolver",
    "get_resolver",
    "SaleSnapshot",
    "HasUnlimitedStockConditionRule",
    "PurchasableError",
    "ConfigurationError",
    "InvalidStoreFieldError",
]


def __getattr__(name):
    """Lazy imports to prevent AppRegistryNotReady errors."""
    if name in ("PricingResolver", "get_resolver"):
        from django_purchasables import resolver

        return getattr(resolver, name)
    if name == "SaleSnapshot":
        from django_purchasables.value_objects import SaleSnapshot

        return SaleSnapshot
    if name == "HasUnlimitedStockConditionRule":
        from django_purchasables.conditions import HasUnlimitedStockConditionRule

        return HasUnlimitedStockConditionRule
    if name in ("PurchasableError", "ConfigurationError", "InvalidStoreFieldError"):
        from django_purchasables import exceptions

        return getattr(exceptions, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
