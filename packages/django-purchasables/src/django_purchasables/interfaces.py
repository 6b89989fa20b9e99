"""Collaborator interfaces consumed by the pricing resolver.

Default implementations live in services.py; any object with matching
methods can be passed to PricingResolver instead.
"""

from decimal import Decimal
from typing import Optional, Protocol


class CatalogPricingService(Protocol):
    """Looks up dynamically computed prices."""

    def get_price(
        self,
        purchasable_id,
        store_id,
        user_id=None,
        promotional: bool = False,
    ) -> Optional[Decimal]:
        ...


class SalesService(Protocol):
    """Matches sales to purchasables."""

    def get_sales_for(self, purchasable, store) -> list:
        ...

    def get_sale_price_for(self, purchasable, store) -> Optional[Decimal]:
        ...

    def get_sales_related_to(self, purchasable) -> list:
        """Sales that reference the purchasable directly."""
        ...


class StoreDirectory(Protocol):
    """Provides the stores a purchasable is sold in."""

    def current_store(self):
        ...

    def all_stores(self) -> list:
        ...
