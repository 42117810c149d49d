"""Axis and plot settings: the numeric state a graph panel navigates."""

from __future__ import annotations

import copy
from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal, localcontext
from enum import Enum

from .rmath import DECIMAL_CONTEXT, log10, to_decimal

LOG10_POS_MIN = -24
LOG10_POS_MAX = 24
LINEAR_POS_MIN = -(10**24)
LINEAR_POS_MAX = 10**24
RANGE_EXPONENT_LIMIT = 24

_DEFAULT_NUM_SAMPLES = 512
_OPTION_KEYS = {"x_type", "y_type", "x_range", "y_range", "num_samples"}

Number = Decimal | int | float | str


class AxisType(Enum):
    LINEAR = "linear"
    LOG10 = "log10"

    @classmethod
    def parse(cls, value: AxisType | str) -> AxisType:
        if isinstance(value, AxisType):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"unknown axis type {value!r}") from None


@dataclass
class AxisSettings:
    """Visible range of one axis, expressed in axis space.

    For a log axis ``pos_bottom`` and ``pos_range`` are exponents: the visible
    data range is ``10**pos_bottom .. 10**pos_top``.
    """

    type: AxisType = AxisType.LINEAR
    pos_bottom: Decimal = Decimal(-10)
    pos_range: Decimal = Decimal(20)

    def __setattr__(self, name: str, value: object) -> None:
        if name in ("pos_bottom", "pos_range"):
            value = to_decimal(value)  # type: ignore[arg-type]
            if name == "pos_range" and value <= 0:
                raise ValueError(f"pos_range must be > 0, got {value}")
        elif name == "type":
            value = AxisType.parse(value)  # type: ignore[arg-type]
        super().__setattr__(name, value)

    @property
    def pos_top(self) -> Decimal:
        with localcontext(DECIMAL_CONTEXT):
            return self.pos_bottom + self.pos_range

    @property
    def pos_min(self) -> Decimal:
        if self.type is AxisType.LOG10:
            return Decimal(LOG10_POS_MIN)
        return Decimal(LINEAR_POS_MIN)

    @property
    def pos_max(self) -> Decimal:
        if self.type is AxisType.LOG10:
            return Decimal(LOG10_POS_MAX)
        return Decimal(LINEAR_POS_MAX)

    def value_to_pos(self, value: Number) -> Decimal | None:
        """Convert a data value to axis space, or None when it has no position."""
        try:
            val = to_decimal(value)
        except (ValueError, ArithmeticError):
            return None
        if self.type is AxisType.LINEAR:
            return val
        if val <= 0:
            return None
        return log10(val)

    def pos_to_value(self, pos: Number) -> Decimal:
        pos = to_decimal(pos)
        if self.type is AxisType.LINEAR:
            return pos
        return DECIMAL_CONTEXT.power(Decimal(10), pos)

    def set_view(self, bottom: Number, top: Number) -> None:
        """Show the axis-space interval between two positions (any order)."""
        lo, hi = sorted((to_decimal(bottom), to_decimal(top)))
        if lo == hi:
            raise ValueError("view bounds must differ")
        self.pos_bottom = lo
        with localcontext(DECIMAL_CONTEXT):
            self.pos_range = hi - lo

    def set_value_range(self, low: Number, high: Number) -> None:
        """Show the data interval between two values (any order)."""
        pos_low = self.value_to_pos(low)
        pos_high = self.value_to_pos(high)
        if pos_low is None or pos_high is None:
            raise ValueError(
                f"values {low!r}, {high!r} cannot be shown on a {self.type.value} axis"
            )
        self.set_view(pos_low, pos_high)


@dataclass
class PlotSettings:
    """The X and Y axes plus the sampling resolution requested from the plotter."""

    x_axis: AxisSettings = field(default_factory=AxisSettings)
    y_axis: AxisSettings = field(default_factory=AxisSettings)
    num_samples: int = _DEFAULT_NUM_SAMPLES

    def snapshot(self) -> PlotSettings:
        return copy.deepcopy(self)

    @classmethod
    def from_options(cls, options: Mapping[str, object]) -> PlotSettings:
        """Build settings from ``x_type``/``y_type``/``x_range``/``y_range``/``num_samples``.

        Ranges are data-space ``(low, high)`` pairs; on a log axis both must be
        positive.
        """
        unknown = set(options) - _OPTION_KEYS
        if unknown:
            raise ValueError(f"unknown plot options: {', '.join(sorted(unknown))}")
        settings = cls()
        for name, axis in (("x", settings.x_axis), ("y", settings.y_axis)):
            axis_type = options.get(f"{name}_type")
            if axis_type is not None:
                axis.type = axis_type
            value_range = options.get(f"{name}_range")
            if value_range is None and axis.type is AxisType.LOG10:
                value_range = (1, 1000)
            if value_range is not None:
                low, high = value_range  # type: ignore[misc]
                axis.set_value_range(low, high)
        num_samples = options.get("num_samples")
        if num_samples is not None:
            settings.num_samples = int(num_samples)  # type: ignore[call-overload]
        if settings.num_samples < 2:
            raise ValueError("num_samples must be >= 2")
        return settings
