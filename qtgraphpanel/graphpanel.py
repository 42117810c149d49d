"""PySide6 graph panel: SI-labelled linear/log axes with mouse navigation."""

from __future__ import annotations

import logging
from collections.abc import Callable, Hashable, Iterable
from decimal import Decimal

import matplotlib
from numpy import ndarray

try:
    from PySide6 import QtCore, QtGui, QtWidgets
except ImportError as exc:
    raise ImportError("PySide6 is required to use GraphPanel.") from exc

from .axis import AxisSettings, AxisType, PlotSettings
from .navigation import MouseButton, NavigationState, PanelAreas, scroll
from .notches import Notch, generate_notches
from .plotter import Plotter
from .projection import PixelRect, project, project_polyline, unproject_value
from .sampling import Graph, PlotCall, PlotRequest, PlotResult

LOGGER = logging.getLogger(__name__)

_COLORMAP_CACHE: dict[str, object] = {}
_SERIES_CMAP = "tab10"
_SERIES_LINE_WIDTH = 2.0
_WHITE_BACK_COLORS = (
    QtGui.QColor(192, 64, 64),
    QtGui.QColor(64, 192, 64),
    QtGui.QColor(64, 64, 192),
    QtGui.QColor(192, 64, 192),
)
_GRID_ALPHA = 64
_SELECTION_ALPHA = 128
_LABEL_GAP = 4
_BUTTONS = {
    QtCore.Qt.LeftButton: MouseButton.LEFT,
    QtCore.Qt.RightButton: MouseButton.RIGHT,
    QtCore.Qt.MiddleButton: MouseButton.MIDDLE,
}

PlotFunc = Callable[[ndarray], ndarray]


def _get_cmap(cmap: str):
    cmap_obj = _COLORMAP_CACHE.get(cmap)
    if cmap_obj is None:
        cmap_obj = matplotlib.colormaps[cmap]
        _COLORMAP_CACHE[cmap] = cmap_obj
    return cmap_obj


def _series_palette(white_back: bool) -> list[QtGui.QColor]:
    if white_back:
        return list(_WHITE_BACK_COLORS)
    cmap = _get_cmap(_SERIES_CMAP)
    return [QtGui.QColor.fromRgbF(*cmap(idx)) for idx in range(cmap.N)]


def _as_plot_call(item: PlotCall | PlotFunc) -> PlotCall:
    if isinstance(item, PlotCall):
        return item
    label = getattr(item, "__name__", None) or repr(item)
    return PlotCall(label=label, func=item)


def _flush_line(painter: QtGui.QPainter, points: list[QtCore.QPointF]) -> None:
    if not points:
        return
    if len(points) == 1:
        painter.drawPoint(points[0])
        return
    painter.drawPolyline(QtGui.QPolygonF(points))


def _to_qrect(rect: PixelRect) -> QtCore.QRect:
    return QtCore.QRect(rect.left, rect.top, rect.width, rect.height)


class GraphPanel(QtWidgets.QWidget):
    """Function plot surface with pan, wheel zoom and rubber-band zoom.

    Left/middle drag in the graph pans both axes, left drag on a scale pans
    that axis, right drag selects a box to zoom into, the wheel zooms around
    the cursor (Shift+wheel scrolls X, Ctrl+wheel scrolls Y), and a left
    double click restores the home view.
    """

    plotSettingsChanged = QtCore.Signal(object)
    cursorValueChanged = QtCore.Signal(object)

    def __init__(
        self,
        parent: QtWidgets.QWidget | None = None,
        *,
        x_type: AxisType | str = AxisType.LINEAR,
        y_type: AxisType | str = AxisType.LINEAR,
        x_range: tuple[float, float] | None = None,
        y_range: tuple[float, float] | None = None,
        white_back: bool = False,
    ) -> None:
        super().__init__(parent)
        options: dict[str, object] = {"x_type": x_type, "y_type": y_type}
        if x_range is not None:
            options["x_range"] = x_range
        if y_range is not None:
            options["y_range"] = y_range
        self.plot_settings = PlotSettings.from_options(options)
        self._home = self.plot_settings.snapshot()

        self._plotter = Plotter(self)
        self._plotter.plotted.connect(self._on_plotted)
        self._calls: dict[Hashable, tuple[PlotCall, ...]] = {}
        self._graphs: dict[Hashable, tuple[Graph, ...]] = {}

        self._nav = NavigationState()
        self._layout_invalidated = True
        self._y_scale_width = 0
        self._x_scale_height = 0
        self._white_back = bool(white_back)
        self._palette = _series_palette(self._white_back)

        self.setMinimumSize(360, 260)
        self.setFocusPolicy(QtCore.Qt.StrongFocus)
        self.setMouseTracking(True)
        self.setAttribute(QtCore.Qt.WA_OpaquePaintEvent, True)

    @property
    def white_back_mode(self) -> bool:
        return self._white_back

    @white_back_mode.setter
    def white_back_mode(self, enabled: bool) -> None:
        enabled = bool(enabled)
        if enabled == self._white_back:
            return
        self._white_back = enabled
        self._palette = _series_palette(enabled)
        self.update()

    @property
    def navigation(self) -> NavigationState:
        return self._nav

    @property
    def plotter(self) -> Plotter:
        return self._plotter

    def areas(self) -> PanelAreas:
        return PanelAreas.layout(
            self.width(), self.height(), self._y_scale_width, self._x_scale_height
        )

    def graphs(self) -> dict[Hashable, tuple[Graph, ...]]:
        return dict(self._graphs)

    def start_plot(self, key: Hashable, calls: Iterable[PlotCall | PlotFunc]) -> None:
        """Sample ``calls`` for the series ``key``, replacing its previous result."""
        plot_calls = tuple(_as_plot_call(call) for call in calls)
        self._calls[key] = plot_calls
        self._submit(key, plot_calls)

    def remove_plot(self, key: Hashable) -> None:
        self._calls.pop(key, None)
        self._plotter.cancel(key)
        if self._graphs.pop(key, None) is not None:
            self.update()

    def clear(self) -> None:
        """Remove every series."""
        for key in list(self._calls):
            self._plotter.cancel(key)
        self._calls.clear()
        self._graphs.clear()
        self.update()

    def replot(self) -> None:
        for key, calls in list(self._calls.items()):
            self._submit(key, calls)

    def commit_settings(self) -> None:
        """Publish a change of :attr:`plot_settings`.

        Invalidates the tick-label layout, emits ``plotSettingsChanged``,
        resamples every series and schedules a repaint, in that order.
        """
        self._invalidate_layout()
        self.plotSettingsChanged.emit(self.plot_settings)
        self.replot()
        self.update()

    def set_view(
        self,
        x_range: tuple[float, float] | None = None,
        y_range: tuple[float, float] | None = None,
    ) -> None:
        """Show the given data ranges and make them the home view."""
        if x_range is not None:
            self.plot_settings.x_axis.set_value_range(*x_range)
        if y_range is not None:
            self.plot_settings.y_axis.set_value_range(*y_range)
        self._home = self.plot_settings.snapshot()
        self.commit_settings()

    def set_axis_type(self, axis_name: str, axis_type: AxisType | str) -> None:
        """Switch the ``"x"`` or ``"y"`` axis between linear and log10."""
        axis = self._axis(axis_name)
        axis_type = AxisType.parse(axis_type)
        if axis.type is axis_type:
            return
        axis.type = axis_type
        if axis_type is AxisType.LOG10:
            axis.set_view(0, 3)
        else:
            axis.set_view(-10, 10)
        self._home = self.plot_settings.snapshot()
        self.commit_settings()

    def reset_view(self) -> None:
        """Restore the home view."""
        home = self._home.snapshot()
        self.plot_settings.x_axis = home.x_axis
        self.plot_settings.y_axis = home.y_axis
        self._nav.reset()
        self.commit_settings()

    def value_at(self, pos: QtCore.QPoint | QtCore.QPointF) -> tuple[Decimal, Decimal] | None:
        """Data coordinates under a widget position inside the graph area."""
        graph = self.areas().graph
        if graph.is_empty() or not graph.contains(pos.x(), pos.y()):
            return None
        settings = self.plot_settings
        x_val = unproject_value(settings.x_axis, pos.x(), graph.left, graph.width)
        y_val = unproject_value(settings.y_axis, pos.y(), graph.bottom, -graph.height)
        if x_val is None or y_val is None:
            LOGGER.debug("No data value under %s", pos)
            return None
        return x_val, y_val

    def copy_to_clipboard(self) -> None:
        """Copy the rendered panel to the clipboard."""
        pixmap = self.grab()
        clipboard = QtWidgets.QApplication.clipboard()
        if clipboard is None or pixmap.isNull():
            LOGGER.warning("Clipboard unavailable; graph not copied")
            return
        clipboard.setPixmap(pixmap)

    def _axis(self, axis_name: str) -> AxisSettings:
        if axis_name == "x":
            return self.plot_settings.x_axis
        if axis_name == "y":
            return self.plot_settings.y_axis
        raise ValueError(f"axis_name must be 'x' or 'y', got {axis_name!r}")

    def _submit(self, key: Hashable, calls: tuple[PlotCall, ...]) -> None:
        graph = self.areas().graph
        if graph.width > 1:
            self.plot_settings.num_samples = graph.width
        request = PlotRequest(key=key, calls=calls, settings=self.plot_settings.snapshot())
        self._plotter.start_plot(request)

    def _on_plotted(self, result: PlotResult) -> None:
        if result.key not in self._calls:
            return
        if not result.graphs:
            self._graphs.pop(result.key, None)
        else:
            self._graphs[result.key] = result.graphs
        self.update()

    def _invalidate_layout(self) -> None:
        self._layout_invalidated = True
        self.update()

    def resizeEvent(self, event: QtGui.QResizeEvent) -> None:  # noqa: N802
        super().resizeEvent(event)
        self.replot()

    def keyReleaseEvent(self, event: QtGui.QKeyEvent) -> None:  # noqa: N802
        super().keyReleaseEvent(event)
        self._invalidate_layout()

    def mousePressEvent(self, event: QtGui.QMouseEvent) -> None:  # noqa: N802
        button = _BUTTONS.get(event.button(), MouseButton.NONE)
        pos = event.position().toPoint()
        self._nav.press(button, (pos.x(), pos.y()), self.areas())
        event.accept()

    def mouseMoveEvent(self, event: QtGui.QMouseEvent) -> None:  # noqa: N802
        pos = event.position().toPoint()
        if self._nav.move((pos.x(), pos.y()), self.plot_settings, self.areas()):
            self.commit_settings()
        elif self._nav.selection_rect() is not None:
            self.update()
        value = self.value_at(pos)
        if value is not None:
            self.cursorValueChanged.emit(value)

    def mouseReleaseEvent(self, event: QtGui.QMouseEvent) -> None:  # noqa: N802
        button = _BUTTONS.get(event.button(), MouseButton.NONE)
        if self._nav.release(button, self.plot_settings, self.areas()):
            self.commit_settings()
        self.update()

    def mouseDoubleClickEvent(self, event: QtGui.QMouseEvent) -> None:  # noqa: N802
        if event.button() == QtCore.Qt.LeftButton:
            self.reset_view()
            event.accept()
            return
        super().mouseDoubleClickEvent(event)

    def wheelEvent(self, event: QtGui.QWheelEvent) -> None:  # noqa: N802
        delta = event.angleDelta().y()
        if delta == 0:
            return
        pos = event.position().toPoint()
        modifiers = event.modifiers()
        settings = self.plot_settings
        if modifiers & QtCore.Qt.ShiftModifier:
            changed = scroll(settings.x_axis, delta)
        elif modifiers & QtCore.Qt.ControlModifier:
            changed = scroll(settings.y_axis, delta)
        else:
            changed = self._nav.wheel((pos.x(), pos.y()), delta, settings, self.areas())
        if changed:
            self.commit_settings()
        event.accept()

    def paintEvent(self, event: QtGui.QPaintEvent) -> None:  # noqa: N802
        painter = QtGui.QPainter(self)
        try:
            self._render(painter)
            selection = self._nav.selection_rect()
            if selection is not None:
                color = QtGui.QColor(self.palette().color(QtGui.QPalette.Highlight))
                color.setAlpha(_SELECTION_ALPHA)
                painter.fillRect(_to_qrect(selection), color)
        finally:
            painter.end()

    def _colors(self) -> tuple[QtGui.QColor, QtGui.QColor]:
        if self._white_back:
            return QtGui.QColor("white"), QtGui.QColor("black")
        pal = self.palette()
        return pal.color(QtGui.QPalette.Base), pal.color(QtGui.QPalette.Text)

    def _update_scale_extents(
        self, fm: QtGui.QFontMetrics, x_notches: list[Notch], y_notches: list[Notch]
    ) -> None:
        # Re-measure only at rest so labels do not make the graph jump mid-drag.
        if not self._layout_invalidated or self._nav.buttons != MouseButton.NONE:
            return
        if QtWidgets.QApplication.keyboardModifiers() != QtCore.Qt.NoModifier:
            return
        x_widths = [fm.horizontalAdvance(n.text) for n in x_notches if n.text]
        y_widths = [fm.horizontalAdvance(n.text) for n in y_notches if n.text]
        if x_widths:
            self._x_scale_height = max(x_widths) + _LABEL_GAP
        if y_widths:
            self._y_scale_width = max(y_widths) + _LABEL_GAP
        self._layout_invalidated = False

    def _render(self, painter: QtGui.QPainter) -> None:
        settings = self.plot_settings
        x_axis, y_axis = settings.x_axis, settings.y_axis
        fm = painter.fontMetrics()

        previous = self.areas().graph
        x_notches = generate_notches(x_axis, previous.width)
        y_notches = generate_notches(y_axis, previous.height)
        self._update_scale_extents(fm, x_notches, y_notches)
        graph = self.areas().graph

        back_color, text_color = self._colors()
        painter.setRenderHint(QtGui.QPainter.Antialiasing, True)
        painter.setRenderHint(QtGui.QPainter.TextAntialiasing, True)
        painter.fillRect(self.rect(), back_color)
        if graph.is_empty():
            return

        thick_pen = QtGui.QPen(text_color, 1)
        faint = QtGui.QColor(text_color)
        faint.setAlpha(_GRID_ALPHA)
        thin_pen = QtGui.QPen(faint, 1)
        dotted_pen = QtGui.QPen(faint, 1, QtCore.Qt.DashLine)

        def notch_pen(notch: Notch) -> QtGui.QPen:
            if notch.value == 0:
                return thick_pen
            return dotted_pen if notch.sub_line else thin_pen

        for notch in x_notches:
            px = project(x_axis, notch.value, graph.left, graph.width)
            if px is None:
                continue
            painter.setPen(notch_pen(notch))
            painter.drawLine(QtCore.QPointF(px, graph.top), QtCore.QPointF(px, graph.bottom))
            if notch.text:
                painter.save()
                painter.setPen(text_color)
                painter.translate(px, graph.bottom)
                painter.rotate(-90)
                text_width = fm.horizontalAdvance(notch.text)
                painter.drawText(
                    QtCore.QPointF(-text_width - _LABEL_GAP, (fm.ascent() - fm.descent()) / 2),
                    notch.text,
                )
                painter.restore()

        for notch in y_notches:
            py = project(y_axis, notch.value, graph.bottom, -graph.height)
            if py is None:
                continue
            painter.setPen(notch_pen(notch))
            painter.drawLine(QtCore.QPointF(graph.left, py), QtCore.QPointF(graph.right, py))
            if notch.text:
                painter.setPen(text_color)
                text_width = fm.horizontalAdvance(notch.text)
                painter.drawText(
                    QtCore.QPointF(
                        graph.left - text_width - _LABEL_GAP,
                        py + (fm.ascent() - fm.descent()) / 2,
                    ),
                    notch.text,
                )

        painter.setPen(thick_pen)
        painter.setBrush(QtCore.Qt.NoBrush)
        painter.drawRect(_to_qrect(graph))

        painter.save()
        painter.setClipRect(_to_qrect(graph))
        color_index = 0
        for graphs in self._graphs.values():
            for item in graphs:
                pen = QtGui.QPen(
                    self._palette[color_index % len(self._palette)], _SERIES_LINE_WIDTH
                )
                pen.setCapStyle(QtCore.Qt.RoundCap)
                painter.setPen(pen)
                for polyline in item.polylines:
                    points = [
                        QtCore.QPointF(px, py)
                        for px, py in project_polyline(x_axis, y_axis, polyline, graph)
                    ]
                    _flush_line(painter, points)
                color_index += 1
        painter.restore()
