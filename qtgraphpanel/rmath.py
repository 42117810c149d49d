"""Decimal helpers used by the axis, tick and navigation math."""

from __future__ import annotations

from decimal import ROUND_CEILING, ROUND_FLOOR, ROUND_HALF_EVEN, Context, Decimal

DECIMAL_CONTEXT = Context(prec=60, rounding=ROUND_HALF_EVEN, Emin=-999999, Emax=999999)

_ONE = Decimal(1)


def to_decimal(value: Decimal | int | float | str) -> Decimal:
    """Coerce a number into a finite Decimal.

    Floats are converted through ``repr`` so ``0.1`` becomes ``Decimal("0.1")``
    instead of its binary expansion.
    """
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, float):
        result = Decimal(repr(value))
    else:
        result = Decimal(value)
    if not result.is_finite():
        raise ValueError(f"expected a finite number, got {value!r}")
    return result


def log10(x: Decimal) -> Decimal:
    if x <= 0:
        raise ValueError(f"log10 is undefined for {x}")
    return x.log10(context=DECIMAL_CONTEXT)


def flog10(x: Decimal) -> int:
    """Return floor(log10(|x|)), or 0 for zero."""
    if x == 0:
        return 0
    return x.adjusted()


def pow10(n: int) -> Decimal:
    return _ONE.scaleb(int(n), context=DECIMAL_CONTEXT)


def ceiling(x: Decimal) -> Decimal:
    return x.to_integral_value(rounding=ROUND_CEILING)


def floor(x: Decimal) -> Decimal:
    return x.to_integral_value(rounding=ROUND_FLOOR)
