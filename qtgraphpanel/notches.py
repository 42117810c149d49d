"""Tick ("notch") generation and SI-prefixed tick labels."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, localcontext

from .axis import LOG10_POS_MAX, LOG10_POS_MIN, AxisSettings, AxisType
from .rmath import DECIMAL_CONTEXT, ceiling, flog10, floor, log10, pow10, to_decimal

LOGGER = logging.getLogger(__name__)

_PREFIXES = "ryzafpnµm kMGTPEZYR"
PREFIX_OFFSET = 9
MAX_LINEAR_NOTCHES = 10
MIN_LINEAR_NOTCHES = 5
MIN_NOTCH_SPACING_PX = 30
_ONE_DECIMAL = Decimal("0.1")


@dataclass(frozen=True)
class Notch:
    value: Decimal
    text: str | None
    sub_line: bool = False


def si_prefix(r: Decimal | int | float | str, flog10: int, frac_digits: int) -> str:
    """Format ``r`` scaled into the SI prefix group of exponent ``flog10``.

    With ``frac_digits == 0`` at most one fractional digit is kept and a
    trailing zero is dropped. Magnitudes outside the prefix table use the
    outermost prefix. Zero never gets a prefix.
    """
    r = to_decimal(r)
    index = PREFIX_OFFSET
    if r != 0:
        index = flog10 // 3 + PREFIX_OFFSET
    index = min(max(index, 0), len(_PREFIXES) - 1)
    exp = (index - PREFIX_OFFSET) * 3
    frac = r.scaleb(-exp, context=DECIMAL_CONTEXT)

    if frac_digits > 0:
        quantum = Decimal(1).scaleb(-frac_digits)
        text = format(frac.quantize(quantum, rounding=ROUND_HALF_UP, context=DECIMAL_CONTEXT), "f")
    else:
        text = format(frac.quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP, context=DECIMAL_CONTEXT), "f")
        if text.endswith(".0"):
            text = text[:-2]
    if text.startswith("-") and Decimal(text) == 0:
        text = text[1:]

    if index == PREFIX_OFFSET:
        return text
    return text + _PREFIXES[index]


def generate_notches(axis: AxisSettings, pixel_extent: int | None = None) -> list[Notch]:
    """Return the ticks of the visible range of ``axis`` in ascending order.

    ``pixel_extent`` is the on-screen size of the axis. On a linear axis it caps
    the tick count at one tick per MIN_NOTCH_SPACING_PX pixels; log axes always
    tick every decade.
    """
    if axis.type is AxisType.LINEAR:
        return _linear_notches(axis, max_linear_notches(pixel_extent))
    if axis.type is AxisType.LOG10:
        return _log10_notches(axis)
    raise NotImplementedError(f"no notch generator for {axis.type}")


def linear_step(value_range: Decimal) -> Decimal:
    """Pick a 1-2-5 tick step for ``value_range`` before density limiting."""
    with localcontext(DECIMAL_CONTEXT):
        step = pow10(int(ceiling(log10(value_range))) - 1)
        if step * 2 > value_range:
            step /= 10
        elif step * 4 > value_range:
            step /= 5
        elif step * 8 > value_range:
            step /= 2
    return step


def _coarser_step(step: Decimal) -> Decimal:
    mantissa = step.scaleb(-step.adjusted()).normalize()
    with localcontext(DECIMAL_CONTEXT):
        if mantissa == 2:
            return step * Decimal("2.5")
        return step * 2


def max_linear_notches(pixel_extent: int | None) -> int:
    if pixel_extent is None:
        return MAX_LINEAR_NOTCHES
    fit = abs(int(pixel_extent)) // MIN_NOTCH_SPACING_PX
    return min(MAX_LINEAR_NOTCHES, max(MIN_LINEAR_NOTCHES, fit))


def _linear_notches(axis: AxisSettings, max_notches: int) -> list[Notch]:
    with localcontext(DECIMAL_CONTEXT):
        bottom = axis.pos_bottom
        top = axis.pos_top
        step = linear_step(axis.pos_range)
        origin = ceiling(bottom / step) * step
        count = int(floor((top - origin) / step))
        while count + 1 > max_notches:
            step = _coarser_step(step)
            origin = ceiling(bottom / step) * step
            count = int(floor((top - origin) / step))

        char_exp = flog10(max(abs(bottom), abs(top)))
        log_step = int(floor(log10(step)))
        frac_digits = max(0, (char_exp // 3) * 3 - log_step)

        notches: list[Notch] = []
        for i in range(count + 1):
            value = origin + step * i
            try:
                text = si_prefix(value, char_exp, frac_digits)
            except ArithmeticError:
                LOGGER.debug("Dropping unformattable tick %s", value)
                continue
            notches.append(Notch(value, text))
    return notches


def _log10_notches(axis: AxisSettings) -> list[Notch]:
    bottom = axis.pos_bottom
    top = axis.pos_top
    exp_start = int(max(Decimal(LOG10_POS_MIN), floor(bottom)))
    exp_end = int(min(Decimal(LOG10_POS_MAX), ceiling(top)))

    notches: list[Notch] = []
    for exp in range(exp_start, exp_end + 1):
        decade = pow10(exp)
        for mul in range(1, 10):
            value = decade * mul
            pos = log10(value)
            if not (bottom <= pos <= top):
                continue
            if mul != 1:
                notches.append(Notch(value, None, sub_line=True))
                continue
            try:
                text = si_prefix(value, flog10(value), 0)
            except ArithmeticError:
                LOGGER.debug("Dropping unformattable tick %s", value)
                continue
            notches.append(Notch(value, text))
    return notches
