"""Fixed-point money helpers. Ledger amounts are Decimals with two fraction digits."""

from decimal import Decimal, ROUND_HALF_UP
from typing import Union

CENTS = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value: Union[Decimal, int, str, None]) -> Decimal:
    """Quantize to two decimals. ``None`` (e.g. SUM over no rows) becomes 0.00."""
    if value is None:
        return ZERO
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)
