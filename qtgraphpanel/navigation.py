"""Pan, zoom and rubber-band navigation over a pair of axes."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal, localcontext
from enum import Enum, Flag, auto

from .axis import RANGE_EXPONENT_LIMIT, AxisSettings, AxisType, PlotSettings
from .projection import PixelRect, unproject
from .rmath import DECIMAL_CONTEXT, flog10, to_decimal

LOGGER = logging.getLogger(__name__)

GRAPH_AREA_MARGIN = 20
MIN_SELECTION_PX = 5
SCROLL_DIVISOR = 3000
_MIN_ZOOM_SCALE = Decimal("0.5")

Pixel = tuple[int, int]


class DragMode(Enum):
    IDLE = auto()
    PAN_XY = auto()
    PAN_X = auto()
    PAN_Y = auto()
    RECTANGLE_ZOOM_SELECT = auto()


class MouseButton(Flag):
    NONE = 0
    LEFT = auto()
    RIGHT = auto()
    MIDDLE = auto()


@dataclass(frozen=True)
class PanelAreas:
    """Graph area plus the X scale strip below it and the Y scale strip left of it."""

    graph: PixelRect
    x_scale: PixelRect
    y_scale: PixelRect

    @classmethod
    def layout(
        cls,
        width: int,
        height: int,
        y_scale_width: int = 0,
        x_scale_height: int = 0,
        margin: int = GRAPH_AREA_MARGIN,
    ) -> PanelAreas:
        left = margin + y_scale_width
        top = margin
        right = max(left, width - margin)
        bottom = max(top, height - margin - x_scale_height)
        graph = PixelRect.from_ltrb(left, top, right, bottom)
        x_scale = PixelRect.from_ltrb(left, bottom, right, max(bottom, height))
        y_scale = PixelRect.from_ltrb(0, top, left, bottom)
        return cls(graph=graph, x_scale=x_scale, y_scale=y_scale)


def _shift_axis(axis: AxisSettings, shift: Decimal) -> bool:
    if shift == 0:
        return False
    with localcontext(DECIMAL_CONTEXT):
        bottom = axis.pos_bottom + shift
        if shift < 0 and bottom < axis.pos_min:
            LOGGER.debug("Pan rejected: bottom %s below %s", bottom, axis.pos_min)
            return False
        if shift > 0 and bottom + axis.pos_range > axis.pos_max:
            LOGGER.debug("Pan rejected: top %s above %s", bottom + axis.pos_range, axis.pos_max)
            return False
    axis.pos_bottom = bottom
    return True


def scroll(axis: AxisSettings, delta: int) -> bool:
    """Pan by ``delta``/3000 of the visible range; False when out of bounds."""
    with localcontext(DECIMAL_CONTEXT):
        shift = axis.pos_range * Decimal(delta) / SCROLL_DIVISOR
    return _shift_axis(axis, shift)


def drag_pan(axis: AxisSettings, pixel_delta: float, pixel_extent: float) -> bool:
    """Move the axis so its content follows a pointer moved by ``pixel_delta``."""
    if pixel_extent == 0:
        return False
    with localcontext(DECIMAL_CONTEXT):
        shift = -axis.pos_range * to_decimal(pixel_delta) / to_decimal(pixel_extent)
    return _shift_axis(axis, shift)


def zoom(
    axis: AxisSettings, pixel_offset: float, pixel_extent: float, px: float, delta: int
) -> bool:
    """Rescale ``axis`` by a wheel ``delta`` keeping the value under ``px`` in place.

    Positive deltas zoom in (at most 2x per call). The call is rejected when the
    range exponent is already beyond +/-RANGE_EXPONENT_LIMIT in the direction of
    the zoom, or when a log axis would leave its exponent bounds.
    """
    if pixel_extent == 0:
        return False
    with localcontext(DECIMAL_CONTEXT):
        scale = max(_MIN_ZOOM_SCALE, 1 - Decimal(delta) / 1000)
        char_exp = flog10(axis.pos_range)
        if (char_exp > RANGE_EXPONENT_LIMIT and scale > 1) or (
            char_exp < -RANGE_EXPONENT_LIMIT and scale < 1
        ):
            LOGGER.debug("Zoom rejected: range %s at exponent limit", axis.pos_range)
            return False
        if scale == 1:
            return False
        anchor = unproject(axis, px, pixel_offset, pixel_extent)
        bottom = (axis.pos_bottom - anchor) * scale + anchor
        new_range = axis.pos_range * scale
        if axis.type is AxisType.LOG10 and (
            bottom < axis.pos_min or bottom + new_range > axis.pos_max
        ):
            LOGGER.debug("Zoom rejected: %s..%s leaves exponent bounds", bottom, bottom + new_range)
            return False
    axis.pos_bottom = bottom
    axis.pos_range = new_range
    return True


def rectangle_zoom(
    x_axis: AxisSettings,
    y_axis: AxisSettings,
    area: PixelRect,
    start: Pixel,
    end: Pixel,
) -> bool:
    """Zoom both axes to the pixel box spanned by ``start`` and ``end``.

    Boxes smaller than MIN_SELECTION_PX in both directions are ignored. An axis
    whose side of the box has zero length keeps its range.
    """
    px0, px1 = sorted((start[0], end[0]))
    py0, py1 = sorted((start[1], end[1]))
    if px1 - px0 < MIN_SELECTION_PX and py1 - py0 < MIN_SELECTION_PX:
        return False
    if area.is_empty():
        return False

    changed = False
    if px1 > px0:
        x_min = unproject(x_axis, px0, area.left, area.width)
        x_max = unproject(x_axis, px1, area.left, area.width)
        x_axis.set_view(x_min, x_max)
        changed = True
    if py1 > py0:
        y_min = unproject(y_axis, py1, area.bottom, -area.height)
        y_max = unproject(y_axis, py0, area.bottom, -area.height)
        y_axis.set_view(y_min, y_max)
        changed = True
    return changed


@dataclass
class NavigationState:
    """Pointer state of a graph panel and the drag-mode state machine."""

    mode: DragMode = DragMode.IDLE
    down_pos: Pixel = (0, 0)
    last_pos: Pixel = (0, 0)
    buttons: MouseButton = MouseButton.NONE

    def press(self, button: MouseButton, pos: Pixel, areas: PanelAreas) -> DragMode:
        self.down_pos = pos
        self.last_pos = pos
        self.buttons |= button
        self.mode = self._resolve_mode(pos, areas)
        return self.mode

    def _resolve_mode(self, pos: Pixel, areas: PanelAreas) -> DragMode:
        x, y = pos
        if self.buttons == MouseButton.LEFT:
            if areas.graph.contains(x, y):
                return DragMode.PAN_XY
            if areas.x_scale.contains(x, y):
                return DragMode.PAN_X
            if areas.y_scale.contains(x, y):
                return DragMode.PAN_Y
        elif self.buttons == MouseButton.RIGHT:
            if areas.graph.contains(x, y):
                return DragMode.RECTANGLE_ZOOM_SELECT
        elif self.buttons == MouseButton.MIDDLE:
            if areas.graph.contains(x, y):
                return DragMode.PAN_XY
        return DragMode.IDLE

    def move(self, pos: Pixel, settings: PlotSettings, areas: PanelAreas) -> bool:
        """Track the pointer; returns True when a pan changed an axis."""
        pan_x = self.mode in (DragMode.PAN_XY, DragMode.PAN_X)
        pan_y = self.mode in (DragMode.PAN_XY, DragMode.PAN_Y)
        changed = False
        if pan_x:
            dx = pos[0] - self.last_pos[0]
            changed |= drag_pan(settings.x_axis, dx, areas.graph.width)
        if pan_y:
            dy = pos[1] - self.last_pos[1]
            changed |= drag_pan(settings.y_axis, dy, -areas.graph.height)
        self.last_pos = pos
        return changed

    def release(
        self, button: MouseButton, settings: PlotSettings, areas: PanelAreas
    ) -> bool:
        """End the drag; returns True when a rubber-band zoom was applied."""
        committed = False
        if self.mode is DragMode.RECTANGLE_ZOOM_SELECT:
            committed = rectangle_zoom(
                settings.x_axis, settings.y_axis, areas.graph, self.down_pos, self.last_pos
            )
        self.buttons &= ~button
        self.mode = DragMode.IDLE
        return committed

    def reset(self) -> None:
        self.mode = DragMode.IDLE
        self.buttons = MouseButton.NONE

    def selection_rect(self) -> PixelRect | None:
        if self.mode is not DragMode.RECTANGLE_ZOOM_SELECT:
            return None
        (x0, y0), (x1, y1) = self.down_pos, self.last_pos
        return PixelRect.from_ltrb(min(x0, x1), min(y0, y1), max(x0, x1), max(y0, y1))

    def wheel(
        self, pos: Pixel, delta: int, settings: PlotSettings, areas: PanelAreas
    ) -> bool:
        """Anchored zoom of the axis (or both) whose region holds the cursor."""
        if delta == 0:
            return False
        x, y = pos
        graph = areas.graph
        zoom_x = graph.contains(x, y) or areas.x_scale.contains(x, y)
        zoom_y = graph.contains(x, y) or areas.y_scale.contains(x, y)
        changed = False
        if zoom_x:
            changed |= zoom(settings.x_axis, graph.left, graph.width, x, delta)
        if zoom_y:
            changed |= zoom(settings.y_axis, graph.bottom, -graph.height, y, delta)
        return changed
