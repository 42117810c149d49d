"""One-call function plotting in a window built around GraphPanel."""

from __future__ import annotations

from collections.abc import Hashable, Sequence
from math import isfinite

try:
    from PySide6 import QtCore, QtWidgets
except ImportError as exc:
    raise ImportError("PySide6 is required to use graphqt.") from exc

from .axis import AxisType
from .graphpanel import GraphPanel, PlotFunc
from .sampling import PlotCall


def _check_limits(name: str, limits: tuple[float, float] | None) -> None:
    if limits is None:
        return
    if len(limits) != 2 or not all(isfinite(float(v)) for v in limits):
        raise ValueError(f"{name} must be a pair of finite numbers.")
    if float(limits[0]) == float(limits[1]):
        raise ValueError(f"{name} bounds must differ.")


class GraphWindow(QtWidgets.QMainWindow):
    """Main window showing a GraphPanel and the data value under the cursor."""

    def __init__(
        self,
        *,
        title: str = "graphqt",
        xlog: bool = False,
        ylog: bool = False,
        xlim: tuple[float, float] | None = None,
        ylim: tuple[float, float] | None = None,
        white_back: bool = False,
    ) -> None:
        super().__init__()
        _check_limits("xlim", xlim)
        _check_limits("ylim", ylim)
        self.setWindowTitle(title)
        self._panel = GraphPanel(
            x_type=AxisType.LOG10 if xlog else AxisType.LINEAR,
            y_type=AxisType.LOG10 if ylog else AxisType.LINEAR,
            x_range=xlim,
            y_range=ylim,
            white_back=white_back,
        )
        self.setCentralWidget(self._panel)
        self._panel.cursorValueChanged.connect(self._show_cursor_value)
        self._next_key = 0
        self.resize(800, 560)

    @property
    def panel(self) -> GraphPanel:
        return self._panel

    def plot(
        self,
        *funcs: PlotFunc,
        label: str | Sequence[str] | None = None,
        key: Hashable | None = None,
    ) -> Hashable:
        """Add functions of x as one series and return its key.

        Args:
            *funcs: Callables mapping a numpy array of x values to y values.
            label: Label(s) for the functions; defaults to their ``__name__``.
            key: Series key; plotting again with the same key replaces it.
        """
        if not funcs:
            raise TypeError("plot requires at least one function.")
        if label is None or isinstance(label, str):
            labels = [label] * len(funcs)
        else:
            labels = list(label)
            if len(labels) != len(funcs):
                raise ValueError("label sequence length must match number of functions.")
        calls = [
            PlotCall(label=lbl or getattr(func, "__name__", repr(func)), func=func)
            for func, lbl in zip(funcs, labels, strict=False)
        ]
        if key is None:
            key = self._next_key
            self._next_key += 1
        self._panel.start_plot(key, calls)
        return key

    def clear(self) -> None:
        self._panel.clear()

    def set_xlog(self, enabled: bool = True) -> None:
        self._panel.set_axis_type("x", AxisType.LOG10 if enabled else AxisType.LINEAR)

    def set_ylog(self, enabled: bool = True) -> None:
        self._panel.set_axis_type("y", AxisType.LOG10 if enabled else AxisType.LINEAR)

    def set_xlim(self, xlim: tuple[float, float]) -> None:
        _check_limits("xlim", xlim)
        self._panel.set_view(x_range=xlim)

    def set_ylim(self, ylim: tuple[float, float]) -> None:
        _check_limits("ylim", ylim)
        self._panel.set_view(y_range=ylim)

    def set_white_back(self, enabled: bool) -> None:
        self._panel.white_back_mode = enabled

    def _show_cursor_value(self, value: object) -> None:
        x_val, y_val = value  # type: ignore[misc]
        self.statusBar().showMessage(f"x = {float(x_val):.6g}   y = {float(y_val):.6g}")


def graphqt(
    *funcs: PlotFunc,
    title: str = "graphqt",
    xlog: bool = False,
    ylog: bool = False,
    xlim: tuple[float, float] | None = None,
    ylim: tuple[float, float] | None = None,
    label: str | Sequence[str] | None = None,
    white_back: bool = False,
) -> GraphWindow:
    """Plot functions of x in a PySide6 window with pannable, zoomable axes.

    Args:
        *funcs: Callables mapping a numpy array of x values to y values.
        title: Window title.
        xlog: Use a log10 x-axis.
        ylog: Use a log10 y-axis.
        xlim: Optional initial x-axis data range.
        ylim: Optional initial y-axis data range.
        label: Label(s) for the functions.
        white_back: Draw on a white background with a fixed palette.
    """
    app = QtWidgets.QApplication.instance()
    created_app = False
    if app is None:
        app = QtWidgets.QApplication([])
        created_app = True

    window = GraphWindow(
        title=title,
        xlog=xlog,
        ylog=ylog,
        xlim=xlim,
        ylim=ylim,
        white_back=white_back,
    )
    if funcs:
        window.plot(*funcs, label=label)
    window.show()
    QtCore.QTimer.singleShot(0, window.panel.replot)

    if created_app:
        app.exec()
    return window
