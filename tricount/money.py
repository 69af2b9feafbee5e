from __future__ import annotations

from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Any, Tuple

CENT = Decimal("0.01")
ZERO = Decimal("0")

# Below this a balance is settled and a transfer is not worth suggesting.
NEGLIGIBLE_AMOUNT = Decimal("0.01")
NEGLIGIBLE_CENTS = 1

# Largest amount a single expense or payment may carry.
MAX_AMOUNT = Decimal("1e15")


def to_decimal(value: Any) -> Decimal:
    if isinstance(value, bool):
        raise ValueError("Cannot convert value to Decimal")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, float, str)):
        try:
            return Decimal(str(value).strip())
        except InvalidOperation:
            raise ValueError(f"Cannot convert {value!r} to Decimal") from None
    raise ValueError("Cannot convert value to Decimal")


def round_currency(value: Decimal) -> Decimal:
    # quantize needs room for every integer digit plus the two decimals
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + 4)
        return value.quantize(CENT, rounding=ROUND_HALF_UP)


def split_cents(value: Decimal) -> Tuple[int, Decimal]:
    """Return ``value`` as whole cents rounded down, plus the fraction of a cent left over."""
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, len(value.as_tuple().digits) + 4)
        scaled = value.scaleb(2)
        whole = scaled.to_integral_value(rounding=ROUND_FLOOR)
        return int(whole), scaled - whole


def from_cents(cents: int) -> Decimal:
    return Decimal((0 if cents >= 0 else 1, tuple(int(digit) for digit in str(abs(cents))), -2))


def is_negligible(value: Decimal) -> bool:
    return abs(value) < NEGLIGIBLE_AMOUNT


def amounts_close(a: Decimal, b: Decimal, tolerance: Decimal = NEGLIGIBLE_AMOUNT) -> bool:
    return abs(a - b) <= tolerance
