"""Pricing resolver for purchasables.

Resolution order for a purchasable in a store:
1. Price cached by this resolver
2. Catalog price from the catalog pricing service
3. Base price from the purchasable's store values

The promotional price follows the same order and only applies when it is
strictly lower than the resolved price. Sale prices come from the sales
service and are snapshotted per store until refresh_sales() is called.

A resolver caches per instance. Create one per request (see
get_resolver()) so prices resolved for one user never leak to another.
"""
import logging
import uuid
from decimal import Decimal
from typing import Optional

from django_purchasables.currency import round_price
from django_purchasables.exceptions import ConfigurationError
from django_purchasables.interfaces import CatalogPricingService, SalesService
from django_purchasables.value_objects import SaleSnapshot

logger = logging.getLogger(__name__)

# Instance attribute holding the cache identity of an unsaved purchasable.
UNSAVED_KEY_ATTR = '_pricing_cache_key'


class PricingResolver:
    """Resolves price, promotional price and sale status per store.

    Issues at most one catalog pricing call per
    (purchasable, store, promotional) for its lifetime, including calls
    that returned no price or failed.
    """

    def __init__(self, catalog_pricing: CatalogPricingService, sales: SalesService, user=None):
        """
        Args:
            catalog_pricing: A CatalogPricingService
            sales: A SalesService
            user: Optional user whose catalog prices apply
        """
        self.catalog_pricing = catalog_pricing
        self.sales = sales
        self.user = user
        self._prices = {}
        self._promotional_prices = {}
        self._sale_snapshots = {}

    @property
    def user_id(self):
        if self.user is None or not getattr(self.user, 'is_authenticated', True):
            return None
        return self.user.pk

    # -------------------------------------------------------------------------
    # Prices
    # -------------------------------------------------------------------------

    def get_base_price(self, purchasable, store) -> Optional[Decimal]:
        """The price from the purchasable's values for the store."""
        self._require_store(store)
        return purchasable.get_base_price(store)

    def get_price(self, purchasable, store) -> Optional[Decimal]:
        """Resolve the price: cache, then catalog price, then base price."""
        key = self._cache_key(purchasable, store)
        if key not in self._prices:
            self._prices[key] = self._lookup_catalog_price(purchasable, store, promotional=False)

        price = self._prices[key]
        if price is None:
            return purchasable.get_base_price(store)
        return price

    def set_price(self, purchasable, store, price: Optional[Decimal]) -> None:
        """Seed the cached price; None falls back to the base price."""
        self._prices[self._cache_key(purchasable, store)] = price

    def get_promotional_price(self, purchasable, store) -> Optional[Decimal]:
        """Resolve the promotional price.

        Returns None unless the promotional price is strictly lower than
        the resolved price.
        """
        key = self._cache_key(purchasable, store)
        if key not in self._promotional_prices:
            self._promotional_prices[key] = self._lookup_catalog_price(
                purchasable, store, promotional=True
            )

        price = self.get_price(purchasable, store)
        promotional_price = self._promotional_prices[key]
        if promotional_price is None:
            promotional_price = purchasable.get_base_promotional_price(store)

        if promotional_price is None or price is None:
            return None
        if promotional_price < price:
            return promotional_price
        return None

    def set_promotional_price(self, purchasable, store, price: Optional[Decimal]) -> None:
        """Seed the cached promotional price; None falls back to the base value."""
        self._promotional_prices[self._cache_key(purchasable, store)] = price

    # -------------------------------------------------------------------------
    # Sales
    # -------------------------------------------------------------------------

    def get_sale(self, purchasable, store) -> SaleSnapshot:
        """Return the sale snapshot, taking it on first access."""
        key = self._cache_key(purchasable, store)
        if key not in self._sale_snapshots:
            self._sale_snapshots[key] = self._load_sales(purchasable, store)
        return self._sale_snapshots[key]

    def get_sale_price(self, purchasable, store) -> Optional[Decimal]:
        return self.get_sale(purchasable, store).sale_price

    def get_sales(self, purchasable, store) -> list:
        return list(self.get_sale(purchasable, store).sales)

    def get_on_sale(self, purchasable, store) -> bool:
        """Whether the sale price differs from the price once rounded."""
        sale_price = self.get_sale_price(purchasable, store)
        price = self.get_price(purchasable, store)
        if sale_price is None or price is None:
            return False
        return round_price(sale_price, store.currency) != round_price(price, store.currency)

    def refresh_sales(self, purchasable, store=None) -> None:
        """Drop sale snapshots for a purchasable, in one store or all."""
        identities = self._identities(purchasable)
        for key in list(self._sale_snapshots):
            if key[0] in identities and (store is None or key[1] == store.handle):
                del self._sale_snapshots[key]

    def get_related_sales(self, purchasable) -> list:
        """Sales attached directly to the purchasable, in any store.

        Unlike get_sales(), which lists the sales currently applied to the
        purchasable in a store, this is not snapshotted.
        """
        if purchasable.pk is None:
            return []
        return list(self.sales.get_sales_related_to(purchasable))

    # -------------------------------------------------------------------------
    # Stock
    # -------------------------------------------------------------------------

    def has_stock(self, purchasable, store) -> bool:
        """Unlimited stock or stock above zero; no store values means no stock."""
        self._require_store(store)
        return purchasable.has_stock(store)

    # -------------------------------------------------------------------------
    # Cache
    # -------------------------------------------------------------------------

    def invalidate(self, purchasable=None) -> None:
        """Drop cached prices and sale snapshots for a purchasable, or everything."""
        if purchasable is None:
            self._prices.clear()
            self._promotional_prices.clear()
            self._sale_snapshots.clear()
            return

        identities = self._identities(purchasable)
        for cache in (self._prices, self._promotional_prices, self._sale_snapshots):
            for key in [k for k in cache if k[0] in identities]:
                del cache[key]

    def _identity(self, purchasable):
        """The pk, or a token stored on the instance while it is unsaved."""
        if purchasable.pk is not None:
            return purchasable.pk
        token = purchasable.__dict__.get(UNSAVED_KEY_ATTR)
        if token is None:
            token = ('unsaved', uuid.uuid4())
            purchasable.__dict__[UNSAVED_KEY_ATTR] = token
        return token

    def _identities(self, purchasable) -> set:
        # Entries cached before the purchasable was saved stay under its token.
        identities = {self._identity(purchasable)}
        token = purchasable.__dict__.get(UNSAVED_KEY_ATTR)
        if token is not None:
            identities.add(token)
        return identities

    def _cache_key(self, purchasable, store):
        self._require_store(store)
        return (self._identity(purchasable), store.handle)

    def _require_store(self, store) -> None:
        if store is None:
            raise ConfigurationError("A store is required to resolve prices")

    def _lookup_catalog_price(self, purchasable, store, promotional: bool) -> Optional[Decimal]:
        """Ask the catalog pricing service; failures count as no price."""
        if purchasable.pk is None:
            return None
        try:
            return self.catalog_pricing.get_price(
                purchasable.pk,
                store.pk,
                self.user_id,
                promotional=promotional,
            )
        except Exception:
            logger.warning(
                "Catalog pricing failed for purchasable %s in store %s (promotional=%s)",
                purchasable.pk,
                store.handle,
                promotional,
                exc_info=True,
            )
            return None

    def _load_sales(self, purchasable, store) -> SaleSnapshot:
        """Match sales; defaults to the rounded price with no sales."""
        sale_price = round_price(self.get_price(purchasable, store), store.currency)
        if purchasable.pk is None:
            return SaleSnapshot(sale_price=sale_price)

        try:
            sales = tuple(self.sales.get_sales_for(purchasable, store))
            matched_price = self.sales.get_sale_price_for(purchasable, store)
        except Exception:
            logger.warning(
                "Sales lookup failed for purchasable %s in store %s",
                purchasable.pk,
                store.handle,
                exc_info=True,
            )
            return SaleSnapshot(sale_price=sale_price)

        if matched_price is not None:
            sale_price = matched_price
        return SaleSnapshot(sale_price=sale_price, sales=sales)


def get_resolver(user=None) -> PricingResolver:
    """Build a resolver with the services configured in settings."""
    from django_purchasables.services import get_catalog_pricing_service, get_sales_service

    return PricingResolver(
        catalog_pricing=get_catalog_pricing_service(),
        sales=get_sales_service(),
        user=user,
    )
