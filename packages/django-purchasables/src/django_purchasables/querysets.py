"""QuerySet helpers for purchasables and their per-store data."""
from django.db import models
from django.db.models import Exists, OuterRef, Q
from django.utils import timezone


class StoreQuerySet(models.QuerySet):
    """QuerySet for stores."""

    def primary(self):
        """Return the primary store(s)."""
        return self.filter(is_primary=True)

    def by_handle(self, handle: str):
        return self.filter(handle=handle)


class CategoryQuerySet(models.QuerySet):
    """QuerySet shared by tax and shipping categories."""

    def default(self):
        """Return categories flagged as the default."""
        return self.filter(is_default=True)


class PurchasableQuerySet(models.QuerySet):
    """QuerySet for purchasables."""

    def live(self):
        """Return enabled purchasables (subject to live validation rules)."""
        return self.filter(enabled=True)

    def with_sku(self, sku: str):
        """Case-insensitive SKU match."""
        return self.filter(sku__iexact=sku)

    def has_unlimited_stock(self, value: bool, store):
        """
        Filter by the unlimited-stock flag in a store.

        Purchasables without store values for the store count as not
        having unlimited stock.

        Args:
            value: Flag value to match
            store: The store whose values are checked

        Returns:
            QuerySet of matching purchasables
        """
        store_values = self.model._meta.get_field('purchasable_stores').related_model
        unlimited = Exists(
            store_values.objects.filter(
                purchasable=OuterRef('pk'),
                store=store,
                has_unlimited_stock=True,
            )
        )
        if value:
            return self.filter(unlimited)
        return self.filter(~unlimited)

    def in_stock(self, store):
        """Purchasables with positive stock or unlimited stock in a store."""
        return self.filter(
            Q(purchasable_stores__has_unlimited_stock=True)
            | Q(purchasable_stores__stock__gt=0),
            purchasable_stores__store=store,
        ).distinct()


class PurchasableStoreQuerySet(models.QuerySet):
    """QuerySet for per-store purchasable values."""

    def for_store(self, store):
        return self.filter(store=store)

    def for_purchasable(self, purchasable):
        return self.filter(purchasable=purchasable)


class CatalogPriceQuerySet(models.QuerySet):
    """QuerySet for catalog prices."""

    def current(self, as_of=None):
        """
        Return prices valid at the given time.

        Query pattern: (date_from IS NULL OR date_from <= ts)
        AND (date_to IS NULL OR date_to >= ts)
        """
        check_time = as_of or timezone.now()
        return self.filter(
            Q(date_from__isnull=True) | Q(date_from__lte=check_time),
            Q(date_to__isnull=True) | Q(date_to__gte=check_time),
        )

    def for_user(self, user_id=None):
        """Prices with no user scope, plus those scoped to the given user."""
        if user_id is None:
            return self.filter(user__isnull=True)
        return self.filter(Q(user__isnull=True) | Q(user_id=user_id))

    def promotional(self, value: bool = True):
        return self.filter(is_promotional=value)
