"""Django Purchasables models.

Provides per-store commerce data for sellable items:
- Store: A sales channel with its own pricing and stock
- TaxCategory / ShippingCategory: Categorisation with a configurable default
- Product: Parent of one or more purchasable variants
- Purchasable: Sellable item (SKU, dimensions, categories)
- PurchasableStore: Per-store override of price, stock and purchase flags
- CatalogPrice: Dynamically computed prices layered above the overrides
"""

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models.functions import Lower
from django.utils.translation import gettext_lazy as _

from django_purchasables.conf import get_default_currency
from django_purchasables.exceptions import ConfigurationError, InvalidStoreFieldError
from django_purchasables.querysets import (
    CatalogPriceQuerySet,
    CategoryQuerySet,
    PurchasableQuerySet,
    PurchasableStoreQuerySet,
    StoreQuerySet,
)
from django_purchasables.utils import is_temp_sku


# Per-store values that can be read and written by key.
STORE_FIELDS = frozenset([
    'price',
    'promotional_price',
    'stock',
    'has_unlimited_stock',
    'min_qty',
    'max_qty',
    'promotable',
    'available_for_purchase',
    'free_shipping',
])


# =============================================================================
# Base Model
# =============================================================================

class PurchasablesBaseModel(models.Model):
    """Abstract base model with created/updated timestamps."""

    created_at = models.DateTimeField(_('created at'), auto_now_add=True)
    updated_at = models.DateTimeField(_('updated at'), auto_now=True)

    class Meta:
        abstract = True


# =============================================================================
# Store
# =============================================================================

class Store(PurchasablesBaseModel):
    """A sales channel with its own prices and stock."""

    name = models.CharField(_('name'), max_length=255)
    handle = models.SlugField(
        _('handle'),
        max_length=255,
        unique=True,
        help_text=_('Stable identifier, also used as the price cache key'),
    )
    currency = models.CharField(
        _('currency'),
        max_length=3,
        default=get_default_currency,
        help_text=_('ISO 4217 currency code for prices in this store'),
    )
    is_primary = models.BooleanField(
        _('is primary'),
        default=False,
        db_index=True,
    )
    sort_order = models.PositiveIntegerField(_('sort order'), default=0)

    objects = StoreQuerySet.as_manager()

    class Meta:
        verbose_name = _('store')
        verbose_name_plural = _('stores')
        ordering = ['sort_order', 'name']

    def __str__(self):
        return self.name


# =============================================================================
# Categories
# =============================================================================

class CategoryModel(PurchasablesBaseModel):
    """Abstract category with a single default."""

    name = models.CharField(_('name'), max_length=255)
    handle = models.SlugField(_('handle'), max_length=255, unique=True)
    is_default = models.BooleanField(_('is default'), default=False, db_index=True)

    objects = CategoryQuerySet.as_manager()

    class Meta:
        abstract = True
        ordering = ['name']

    def __str__(self):
        return self.name

    @classmethod
    def get_default(cls):
        """Return the default category.

        Raises:
            ConfigurationError: If no default category is configured
        """
        category = cls.objects.default().order_by('pk').first()
        if category is None:
            raise ConfigurationError(
                f"No default {cls._meta.verbose_name} is configured"
            )
        return category


class TaxCategory(CategoryModel):
    """Tax category applied to purchasables."""

    class Meta(CategoryModel.Meta):
        verbose_name = _('tax category')
        verbose_name_plural = _('tax categories')


class ShippingCategory(CategoryModel):
    """Shipping category applied to purchasables."""

    class Meta(CategoryModel.Meta):
        verbose_name = _('shipping category')
        verbose_name_plural = _('shipping categories')


# =============================================================================
# Product
# =============================================================================

class Product(PurchasablesBaseModel):
    """Parent of one or more purchasable variants."""

    title = models.CharField(_('title'), max_length=255)

    class Meta:
        verbose_name = _('product')
        verbose_name_plural = _('products')
        ordering = ['title']

    def __str__(self):
        return self.title


# =============================================================================
# Purchasable
# =============================================================================

class Purchasable(PurchasablesBaseModel):
    """A sellable item.

    Prices, stock and purchase flags live in PurchasableStore rows, one per
    store. They are read and written through the store-scoped accessors
    below, which keep an in-memory collection until save_purchasable()
    persists it.
    """

    product = models.ForeignKey(
        Product,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='variants',
        verbose_name=_('product'),
    )
    title = models.CharField(_('title'), max_length=255, blank=True)
    sku = models.CharField(
        _('SKU'),
        max_length=255,
        blank=True,
        db_index=True,
        help_text=_('Unique (case-insensitive) among enabled purchasables'),
    )
    enabled = models.BooleanField(
        _('enabled'),
        default=True,
        db_index=True,
        help_text=_('Enabled purchasables must have a SKU, price and stock'),
    )
    width = models.DecimalField(
        _('width'), max_digits=14, decimal_places=4, null=True, blank=True,
    )
    height = models.DecimalField(
        _('height'), max_digits=14, decimal_places=4, null=True, blank=True,
    )
    length = models.DecimalField(
        _('length'), max_digits=14, decimal_places=4, null=True, blank=True,
    )
    weight = models.DecimalField(
        _('weight'), max_digits=14, decimal_places=4, null=True, blank=True,
    )
    tax_category = models.ForeignKey(
        TaxCategory,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='purchasables',
        verbose_name=_('tax category'),
        help_text=_('Falls back to the default tax category'),
    )
    shipping_category = models.ForeignKey(
        ShippingCategory,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='purchasables',
        verbose_name=_('shipping category'),
        help_text=_('Falls back to the default shipping category'),
    )

    objects = PurchasableQuerySet.as_manager()

    # In-memory store values keyed by store pk, loaded on first access.
    _purchasable_stores = None

    class Meta:
        verbose_name = _('purchasable')
        verbose_name_plural = _('purchasables')
        ordering = ['sku']
        constraints = [
            models.UniqueConstraint(
                Lower('sku'),
                condition=models.Q(enabled=True),
                name='unique_live_purchasable_sku',
            ),
        ]

    def __str__(self):
        return self.title or self.sku_as_text

    def clean(self):
        """Enforce SKU rules for enabled purchasables."""
        super().clean()
        errors = {}

        if self.enabled:
            if not self.sku or is_temp_sku(self.sku):
                errors['sku'] = _('SKU cannot be blank.')
            else:
                qs = Purchasable.objects.live().with_sku(self.sku)
                if self.pk:
                    qs = qs.exclude(pk=self.pk)
                if qs.exists():
                    errors['sku'] = _('SKU “%(sku)s” has already been taken.') % {
                        'sku': self.sku,
                    }

        if errors:
            raise ValidationError(errors)

    # -------------------------------------------------------------------------
    # Store values collection
    # -------------------------------------------------------------------------

    def get_purchasable_stores(self) -> dict:
        """Return the in-memory store values, keyed by store pk."""
        if self._purchasable_stores is None:
            self._purchasable_stores = {}
            if self.pk:
                for purchasable_store in self.purchasable_stores.all():
                    self._purchasable_stores[purchasable_store.store_id] = purchasable_store
        return self._purchasable_stores

    def set_purchasable_stores(self, rows) -> None:
        """Replace the in-memory store values.

        Rows may be PurchasableStore instances or dicts of field values
        with a `store` (or `store_id`). Rows without a store are dropped.
        """
        purchasable_stores = {}
        for row in rows or []:
            if not isinstance(row, PurchasableStore):
                row = dict(row)
                if row.get('store') is None and row.get('store_id') is None:
                    continue
                row.pop('purchasable', None)
                row.pop('purchasable_id', None)
                row = PurchasableStore(**row)
            if self.pk:
                row.purchasable = self
            purchasable_stores[row.store_id] = row
        self._purchasable_stores = purchasable_stores

    def get_store_value(self, key: str, store):
        """Read a per-store value.

        Values written since the last save may still be raw input; they are
        parsed with the field's to_python(), and unparseable ones read as
        None until validation reports them. Returns None when the
        purchasable has no values for the store.

        Raises:
            InvalidStoreFieldError: If key is not a per-store field
        """
        if key not in STORE_FIELDS:
            raise InvalidStoreFieldError(key)
        if store is None:
            raise ConfigurationError("A store is required to read purchasable store values")

        purchasable_store = self.get_purchasable_stores().get(store.pk)
        if purchasable_store is None:
            return None

        value = getattr(purchasable_store, key)
        if value is None:
            return None
        try:
            return PurchasableStore._meta.get_field(key).to_python(value)
        except ValidationError:
            return None

    def set_store_value(self, key: str, value, store) -> None:
        """Write a per-store value, creating the store values if needed.

        Raises:
            InvalidStoreFieldError: If key is not a per-store field
        """
        if key not in STORE_FIELDS:
            raise InvalidStoreFieldError(key)
        if store is None:
            raise ConfigurationError("A store is required to write purchasable store values")

        purchasable_stores = self.get_purchasable_stores()
        purchasable_store = purchasable_stores.get(store.pk)
        if purchasable_store is None:
            purchasable_store = PurchasableStore(store=store)
            if self.pk:
                purchasable_store.purchasable = self
            purchasable_stores[store.pk] = purchasable_store

        setattr(purchasable_store, key, value)

    # -------------------------------------------------------------------------
    # Typed per-store accessors
    # -------------------------------------------------------------------------

    def get_base_price(self, store):
        return self.get_store_value('price', store)

    def set_base_price(self, price, store) -> None:
        self.set_store_value('price', price, store)

    def get_base_promotional_price(self, store):
        return self.get_store_value('promotional_price', store)

    def set_base_promotional_price(self, price, store) -> None:
        self.set_store_value('promotional_price', price, store)

    def get_stock(self, store):
        return self.get_store_value('stock', store)

    def set_stock(self, stock, store) -> None:
        self.set_store_value('stock', stock, store)

    def get_has_unlimited_stock(self, store) -> bool:
        return bool(self.get_store_value('has_unlimited_stock', store))

    def set_has_unlimited_stock(self, value: bool, store) -> None:
        self.set_store_value('has_unlimited_stock', value, store)

    def get_min_qty(self, store):
        return self.get_store_value('min_qty', store)

    def set_min_qty(self, min_qty, store) -> None:
        self.set_store_value('min_qty', min_qty, store)

    def get_max_qty(self, store):
        return self.get_store_value('max_qty', store)

    def set_max_qty(self, max_qty, store) -> None:
        self.set_store_value('max_qty', max_qty, store)

    def get_promotable(self, store) -> bool:
        return bool(self.get_store_value('promotable', store))

    def set_promotable(self, value: bool, store) -> None:
        self.set_store_value('promotable', value, store)

    def get_available_for_purchase(self, store) -> bool:
        return bool(self.get_store_value('available_for_purchase', store))

    def set_available_for_purchase(self, value: bool, store) -> None:
        self.set_store_value('available_for_purchase', value, store)

    def get_free_shipping(self, store) -> bool:
        return bool(self.get_store_value('free_shipping', store))

    def set_free_shipping(self, value: bool, store) -> None:
        self.set_store_value('free_shipping', value, store)

    def has_stock(self, store) -> bool:
        """Whether the purchasable can be sold from stock in the store.

        No store values means no stock.
        """
        if self.get_has_unlimited_stock(store):
            return True
        stock = self.get_stock(store)
        return stock is not None and stock > 0

    # -------------------------------------------------------------------------
    # Item attributes
    # -------------------------------------------------------------------------

    @property
    def sku_as_text(self) -> str:
        """The SKU, or a blank string for a generated placeholder."""
        if is_temp_sku(self.sku):
            return ''
        return self.sku or ''

    @property
    def description(self) -> str:
        return str(self)

    @property
    def is_shippable(self) -> bool:
        return True

    @property
    def is_taxable(self) -> bool:
        return True

    @property
    def promotion_relation_source(self):
        return self.pk

    def is_available(self, store) -> bool:
        return self.get_available_for_purchase(store)

    def is_promotable(self, store) -> bool:
        return self.get_promotable(store)

    def has_free_shipping(self, store) -> bool:
        return self.get_free_shipping(store)

    def get_tax_category_id(self) -> int:
        """Tax category pk, falling back to the default tax category.

        Raises:
            ConfigurationError: If unset and no default is configured
        """
        if self.tax_category_id is not None:
            return self.tax_category_id
        return TaxCategory.get_default().pk

    def get_shipping_category_id(self) -> int:
        """Shipping category pk, falling back to the default shipping category.

        Raises:
            ConfigurationError: If unset and no default is configured
        """
        if self.shipping_category_id is not None:
            return self.shipping_category_id
        return ShippingCategory.get_default().pk


# =============================================================================
# PurchasableStore - Per-store override
# =============================================================================

class PurchasableStore(PurchasablesBaseModel):
    """Per-store price, stock and purchase flags for a purchasable.

    One row per (purchasable, store). Deleted with its purchasable.
    """

    purchasable = models.ForeignKey(
        Purchasable,
        on_delete=models.CASCADE,
        related_name='purchasable_stores',
        verbose_name=_('purchasable'),
    )
    store = models.ForeignKey(
        Store,
        on_delete=models.CASCADE,
        related_name='purchasable_stores',
        verbose_name=_('store'),
    )
    price = models.DecimalField(
        _('price'), max_digits=14, decimal_places=4, null=True, blank=True,
    )
    promotional_price = models.DecimalField(
        _('promotional price'),
        max_digits=14,
        decimal_places=4,
        null=True,
        blank=True,
        help_text=_('Only applied when lower than the price'),
    )
    stock = models.IntegerField(_('stock'), null=True, blank=True)
    has_unlimited_stock = models.BooleanField(_('has unlimited stock'), default=False)
    min_qty = models.PositiveIntegerField(_('minimum quantity'), null=True, blank=True)
    max_qty = models.PositiveIntegerField(_('maximum quantity'), null=True, blank=True)
    promotable = models.BooleanField(
        _('promotable'),
        default=True,
        help_text=_('Whether sales and discounts can apply'),
    )
    available_for_purchase = models.BooleanField(
        _('available for purchase'),
        default=True,
    )
    free_shipping = models.BooleanField(_('free shipping'), default=False)

    objects = PurchasableStoreQuerySet.as_manager()

    class Meta:
        verbose_name = _('purchasable store')
        verbose_name_plural = _('purchasable stores')
        constraints = [
            models.UniqueConstraint(
                fields=['purchasable', 'store'],
                name='unique_purchasable_store',
            ),
        ]

    def __str__(self):
        return f"{self.purchasable_id} @ {self.store_id}"


# =============================================================================
# CatalogPrice
# =============================================================================

class CatalogPrice(PurchasablesBaseModel):
    """A computed price for a purchasable in a store.

    Optionally scoped to a user and bounded by dates. The lowest current
    price wins; see ModelCatalogPricingService.
    """

    purchasable = models.ForeignKey(
        Purchasable,
        on_delete=models.CASCADE,
        related_name='catalog_prices',
        verbose_name=_('purchasable'),
    )
    store = models.ForeignKey(
        Store,
        on_delete=models.CASCADE,
        related_name='catalog_prices',
        verbose_name=_('store'),
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('user'),
        help_text=_('Leave blank for prices that apply to everyone'),
    )
    price = models.DecimalField(_('price'), max_digits=14, decimal_places=4)
    is_promotional = models.BooleanField(_('is promotional'), default=False, db_index=True)
    date_from = models.DateTimeField(_('date from'), null=True, blank=True)
    date_to = models.DateTimeField(_('date to'), null=True, blank=True)

    objects = CatalogPriceQuerySet.as_manager()

    class Meta:
        verbose_name = _('catalog price')
        verbose_name_plural = _('catalog prices')
        indexes = [
            models.Index(
                fields=['purchasable', 'store', 'is_promotional'],
                name='purchasables_catprice_lookup',
            ),
        ]

    def __str__(self):
        return f"{self.price} ({self.purchasable_id} @ {self.store_id})"
