"""Mapping between axis values and pixel coordinates."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal, localcontext

import numpy as np
from numpy import isfinite, ndarray

from .axis import AxisSettings
from .rmath import DECIMAL_CONTEXT, to_decimal

PIXEL_LIMIT = 65536

Number = Decimal | int | float | str


@dataclass(frozen=True)
class PixelRect:
    """Integer pixel rectangle; ``right``/``bottom`` are exclusive edges."""

    left: int
    top: int
    width: int
    height: int

    @classmethod
    def from_ltrb(cls, left: int, top: int, right: int, bottom: int) -> PixelRect:
        return cls(left, top, right - left, bottom - top)

    @property
    def right(self) -> int:
        return self.left + self.width

    @property
    def bottom(self) -> int:
        return self.top + self.height

    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def contains(self, x: float, y: float) -> bool:
        return self.left <= x < self.right and self.top <= y < self.bottom


def project(
    axis: AxisSettings, value: Number, pixel_offset: float, pixel_extent: float
) -> float | None:
    """Project a data value to a pixel coordinate.

    Pass a negative ``pixel_extent`` with ``pixel_offset`` at the bottom edge
    for a vertical axis. Returns None when the value has no position on the
    axis or lands beyond +/-PIXEL_LIMIT.
    """
    pos = axis.value_to_pos(value)
    if pos is None:
        return None
    try:
        with localcontext(DECIMAL_CONTEXT):
            pixel = to_decimal(pixel_offset) + (pos - axis.pos_bottom) * to_decimal(
                pixel_extent
            ) / axis.pos_range
    except (ArithmeticError, ValueError):
        return None
    if not (-PIXEL_LIMIT < pixel < PIXEL_LIMIT):
        return None
    return float(pixel)


def unproject(
    axis: AxisSettings, pixel: float, pixel_offset: float, pixel_extent: float
) -> Decimal:
    """Axis-space position under ``pixel``; the inverse of :func:`project`."""
    with localcontext(DECIMAL_CONTEXT):
        return axis.pos_bottom + axis.pos_range * (
            to_decimal(pixel) - to_decimal(pixel_offset)
        ) / to_decimal(pixel_extent)


def unproject_value(
    axis: AxisSettings, pixel: float, pixel_offset: float, pixel_extent: float
) -> Decimal | None:
    """Data value under ``pixel``, or None when it cannot be represented."""
    try:
        return axis.pos_to_value(unproject(axis, pixel, pixel_offset, pixel_extent))
    except ArithmeticError:
        return None


def project_point(
    x_axis: AxisSettings, y_axis: AxisSettings, x: Number, y: Number, area: PixelRect
) -> tuple[float, float] | None:
    px = project(x_axis, x, area.left, area.width)
    if px is None:
        return None
    py = project(y_axis, y, area.bottom, -area.height)
    if py is None:
        return None
    return px, py


def project_polyline(
    x_axis: AxisSettings,
    y_axis: AxisSettings,
    points: ndarray | Iterable[tuple[float, float]],
    area: PixelRect,
) -> list[tuple[float, float]]:
    """Project data points into ``area``, dropping the ones that fail."""
    arr = np.asarray(points, dtype=float).reshape(-1, 2)
    projected: list[tuple[float, float]] = []
    for x_val, y_val in arr:
        if not (isfinite(x_val) and isfinite(y_val)):
            continue
        point = project_point(x_axis, y_axis, float(x_val), float(y_val), area)
        if point is not None:
            projected.append(point)
    return projected
