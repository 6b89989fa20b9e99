"""Value objects for django-purchasables."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class SaleSnapshot:
    """Immutable result of sale matching for a purchasable in a store.

    Snapshots are not recomputed when sales change; call
    PricingResolver.refresh_sales() to take a new one.
    """

    sale_price: Optional[Decimal]
    sales: tuple = ()

    @property
    def has_sales(self) -> bool:
        return bool(self.sales)
