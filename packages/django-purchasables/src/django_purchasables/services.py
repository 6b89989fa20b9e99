"""Purchasable services.

- Default collaborators backed by the database (catalog prices, stores)
- Service loading from PURCHASABLES_* settings
- Save-time validation of purchasables and their store values
- Atomic save: the purchasable and every store's values, or nothing
"""
import logging
from decimal import Decimal
from typing import Optional

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Min
from django.utils.module_loading import import_string
from django.utils.translation import gettext as _

from django_purchasables import conf
from django_purchasables.exceptions import ConfigurationError
from django_purchasables.interfaces import StoreDirectory
from django_purchasables.models import CatalogPrice, Purchasable, Store

logger = logging.getLogger(__name__)


# =============================================================================
# Default collaborators
# =============================================================================

class ModelCatalogPricingService:
    """Catalog pricing backed by the CatalogPrice table.

    Returns the lowest current price for the purchasable in the store,
    considering prices for everyone and prices scoped to the user.
    """

    def get_price(
        self,
        purchasable_id,
        store_id,
        user_id=None,
        promotional: bool = False,
    ) -> Optional[Decimal]:
        if purchasable_id is None:
            return None
        result = (
            CatalogPrice.objects.current()
            .filter(purchasable_id=purchasable_id, store_id=store_id)
            .promotional(promotional)
            .for_user(user_id)
            .aggregate(lowest=Min('price'))
        )
        return result['lowest']


class NoSalesService:
    """Sales service for shops without sales: nothing ever matches."""

    def get_sales_for(self, purchasable, store) -> list:
        return []

    def get_sale_price_for(self, purchasable, store) -> Optional[Decimal]:
        return None

    def get_sales_related_to(self, purchasable) -> list:
        return []


class ModelStoreDirectory:
    """Store directory backed by the Store table."""

    def current_store(self) -> Store:
        """Return the primary store.

        Raises:
            ConfigurationError: If no primary store exists
        """
        store = Store.objects.primary().order_by('sort_order', 'pk').first()
        if store is None:
            raise ConfigurationError("No primary store is configured")
        return store

    def all_stores(self) -> list[Store]:
        return list(Store.objects.all())


# =============================================================================
# Service loading
# =============================================================================

def load_service(path: str):
    """Instantiate a service class from a dotted path.

    Raises:
        ConfigurationError: If the path cannot be imported
    """
    try:
        service_class = import_string(path)
    except ImportError as e:
        raise ConfigurationError(f"Cannot load service {path!r}: {e}") from e
    return service_class()


def get_catalog_pricing_service():
    return load_service(conf.get_catalog_pricing_service_path())


def get_sales_service():
    return load_service(conf.get_sales_service_path())


def get_store_directory():
    return load_service(conf.get_store_directory_path())


# =============================================================================
# Validation and persistence
# =============================================================================

def _add_error(errors: dict, field: str, message) -> None:
    errors.setdefault(field, []).append(message)


def validate_purchasable(purchasable: Purchasable, stores) -> None:
    """Validate a purchasable and its store values before saving.

    Rules:
    - SKU at most 255 characters
    - Numeric fields must parse as numbers
    - Enabled purchasables: SKU required and unique (case-insensitive),
      and in every store a price, and stock unless stock is unlimited

    Cleaned values are written back, so numeric strings become numbers.

    Raises:
        ValidationError: With a dict of field name -> messages
    """
    errors = {}

    try:
        purchasable.full_clean(
            exclude=['product', 'tax_category', 'shipping_category'],
            validate_constraints=False,
        )
    except ValidationError as e:
        for field, messages in e.message_dict.items():
            for message in messages:
                _add_error(errors, field, message)

    purchasable_stores = purchasable.get_purchasable_stores()
    for store in stores:
        purchasable_store = purchasable_stores.get(store.pk)
        if purchasable_store is None:
            continue

        try:
            purchasable_store.clean_fields(exclude=['purchasable', 'store'])
        except ValidationError as e:
            for field, messages in e.message_dict.items():
                for message in messages:
                    _add_error(errors, field, f"{store.name}: {message}")
            continue

        if not purchasable.enabled:
            continue

        if purchasable_store.price is None:
            _add_error(errors, 'price', _("%(store)s: Price cannot be blank.") % {
                'store': store.name,
            })
        if not purchasable_store.has_unlimited_stock and not purchasable_store.stock:
            _add_error(errors, 'stock', _(
                "%(store)s: Stock is required unless stock is unlimited."
            ) % {'store': store.name})

    if errors:
        raise ValidationError(errors)


def save_purchasable(
    purchasable: Purchasable,
    store_directory: Optional[StoreDirectory] = None,
) -> Purchasable:
    """Validate and save a purchasable with its values for every store.

    Every store in the directory must have values; missing default tax or
    shipping categories are configuration errors. Nothing is saved if
    any step fails.

    Args:
        purchasable: The purchasable to save
        store_directory: Optional StoreDirectory (defaults to settings)

    Returns:
        Purchasable: The saved purchasable

    Raises:
        ValidationError: If validation fails
        ConfigurationError: If a store has no values or no default category exists
    """
    directory = store_directory or get_store_directory()
    stores = list(directory.all_stores())

    validate_purchasable(purchasable, stores)

    purchasable_stores = purchasable.get_purchasable_stores()
    for store in stores:
        if store.pk not in purchasable_stores:
            raise ConfigurationError(
                f"Purchasable {purchasable.sku_as_text!r} has no values for store {store.handle!r}"
            )

    with transaction.atomic():
        purchasable.tax_category_id = purchasable.get_tax_category_id()
        purchasable.shipping_category_id = purchasable.get_shipping_category_id()
        purchasable.save()

        for store in stores:
            purchasable_store = purchasable_stores[store.pk]
            purchasable_store.purchasable = purchasable
            purchasable_store.store = store
            purchasable_store.save()

    logger.info(
        "Saved purchasable %s (%s) for %d store(s)",
        purchasable.pk,
        purchasable.sku_as_text,
        len(stores),
    )
    return purchasable


def delete_purchasable(purchasable: Purchasable) -> None:
    """Delete a purchasable along with its store values and catalog prices."""
    pk = purchasable.pk
    purchasable.delete()
    purchasable.set_purchasable_stores([])
    logger.info("Deleted purchasable %s", pk)
