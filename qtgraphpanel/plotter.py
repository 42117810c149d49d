"""Background sampling of plot requests on a Qt thread pool."""

from __future__ import annotations

import logging
from collections.abc import Hashable

try:
    from PySide6 import QtCore
except ImportError as exc:
    raise ImportError("PySide6 is required to use the graph panel plotter.") from exc

from .sampling import PlotRequest, PlotResult, run_request

LOGGER = logging.getLogger(__name__)


class _PlotSignals(QtCore.QObject):
    finished = QtCore.Signal(object)


class _PlotRunnable(QtCore.QRunnable):
    """Samples one request off the UI thread."""

    def __init__(self, request: PlotRequest, generation: int, signals: _PlotSignals) -> None:
        super().__init__()
        self._request = request
        self._generation = generation
        self._signals = signals

    def run(self) -> None:
        result = run_request(self._request, self._generation)
        self._signals.finished.emit(result)


class Plotter(QtCore.QObject):
    """Runs plot requests asynchronously, newest request per key wins.

    ``plotted`` is emitted on the thread owning the plotter with a
    :class:`PlotResult`. Results of a request superseded by a newer one for the
    same key are dropped.
    """

    plotted = QtCore.Signal(object)

    def __init__(self, parent: QtCore.QObject | None = None, *, max_threads: int = 2) -> None:
        super().__init__(parent)
        self._pool = QtCore.QThreadPool(self)
        self._pool.setMaxThreadCount(max(1, max_threads))
        self._generations: dict[Hashable, int] = {}
        self._signals = _PlotSignals(self)
        self._signals.finished.connect(self._on_finished)

    def start_plot(self, request: PlotRequest) -> int:
        """Queue ``request``; returns the generation number assigned to it."""
        generation = self._generations.get(request.key, 0) + 1
        self._generations[request.key] = generation
        self._pool.start(_PlotRunnable(request, generation, self._signals))
        return generation

    def cancel(self, key: Hashable) -> None:
        """Drop any in-flight result for ``key``."""
        if key in self._generations:
            self._generations[key] += 1

    def wait_for_done(self, msecs: int = -1) -> bool:
        return self._pool.waitForDone(msecs)

    def _on_finished(self, result: PlotResult) -> None:
        if self._generations.get(result.key) != result.generation:
            LOGGER.debug("Dropping stale plot result for %r", result.key)
            return
        self.plotted.emit(result)
