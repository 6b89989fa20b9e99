"""Currency precision and rounding for price comparison."""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional, Union


# Currency precision rules for display and sale comparison
CURRENCY_DECIMALS = {
    'USD': 2, 'EUR': 2, 'GBP': 2, 'MXN': 2,
    'CAD': 2, 'AUD': 2, 'CHF': 2, 'CNY': 2,
    'JPY': 0, 'KRW': 0,  # No decimal currencies
}

DEFAULT_DECIMALS = 2


def get_decimals(currency: Optional[str] = None) -> int:
    """Number of decimal places for a currency, 2 if unknown."""
    if not currency:
        return DEFAULT_DECIMALS
    return CURRENCY_DECIMALS.get(currency.upper(), DEFAULT_DECIMALS)


def to_decimal(value: Union[Decimal, int, float, str]) -> Decimal:
    """Normalize a numeric value to Decimal.

    Floats go through str() to avoid binary precision artifacts.

    Raises:
        ValueError: If the value does not parse as a number.
    """
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError(f"Not a number: {value!r}")


def round_price(
    amount: Union[Decimal, int, float, str, None],
    currency: Optional[str] = None,
) -> Optional[Decimal]:
    """Round an amount to the currency precision using ROUND_HALF_UP.

    Returns None for None so callers can round optional prices directly.
    """
    if amount is None:
        return None
    decimals = get_decimals(currency)
    return to_decimal(amount).quantize(Decimal(10) ** -decimals, rounding=ROUND_HALF_UP)
