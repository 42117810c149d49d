"""Interactive PySide6 function plotting with SI-labelled linear and log axes."""

from importlib import import_module

from .axis import AxisSettings, AxisType, PlotSettings
from .notches import Notch, generate_notches, si_prefix
from .projection import PixelRect, project, unproject
from .sampling import PlotCall

# Qt widgets load on first use so the axis math imports without a display stack.
_QT_EXPORTS = {
    "GraphPanel": ".graphpanel",
    "GraphWindow": ".graphqt",
    "graphqt": ".graphqt",
}

__all__ = [
    "AxisSettings",
    "AxisType",
    "GraphPanel",
    "GraphWindow",
    "Notch",
    "PixelRect",
    "PlotCall",
    "PlotSettings",
    "generate_notches",
    "graphqt",
    "project",
    "si_prefix",
    "unproject",
]


def __getattr__(name: str):
    module = _QT_EXPORTS.get(name)
    if module is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    return getattr(import_module(module, __name__), name)
