from __future__ import annotations

import unittest

import numpy as np
from PySide6 import QtCore

from qtgraphpanel.axis import PlotSettings
from qtgraphpanel.plotter import Plotter
from qtgraphpanel.sampling import PlotCall, PlotRequest, PlotResult


def _request(key: str, *calls: PlotCall) -> PlotRequest:
    return PlotRequest(key=key, calls=calls, settings=PlotSettings(num_samples=16))


class PlotterTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls.app = QtCore.QCoreApplication.instance() or QtCore.QCoreApplication([])

    def setUp(self) -> None:
        self.plotter = Plotter()
        self.results: list[PlotResult] = []
        self.plotter.plotted.connect(self.results.append)

    def tearDown(self) -> None:
        self.plotter.wait_for_done()
        self.plotter.deleteLater()

    def _drain(self) -> None:
        self.assertTrue(self.plotter.wait_for_done(5000))
        QtCore.QCoreApplication.sendPostedEvents()
        QtCore.QCoreApplication.processEvents()

    def test_newer_request_replaces_in_flight_one(self) -> None:
        self.assertEqual(self.plotter.start_plot(_request("a", PlotCall("sin", np.sin))), 1)
        self.assertEqual(self.plotter.start_plot(_request("a", PlotCall("cos", np.cos))), 2)
        self._drain()
        self.assertEqual(len(self.results), 1)
        result = self.results[0]
        self.assertEqual((result.key, result.generation), ("a", 2))
        self.assertEqual([g.call.label for g in result.graphs], ["cos"])

    def test_stale_result_arriving_late_is_dropped(self) -> None:
        self.plotter.start_plot(_request("a", PlotCall("sin", np.sin)))
        self.plotter.start_plot(_request("a", PlotCall("cos", np.cos)))
        self._drain()
        self.plotter._on_finished(PlotResult(key="a", generation=1, graphs=()))
        self.assertEqual([r.generation for r in self.results], [2])

    def test_cancel_drops_pending_result(self) -> None:
        self.plotter.start_plot(_request("a", PlotCall("sin", np.sin)))
        self.plotter.cancel("a")
        self._drain()
        self.assertEqual(self.results, [])

    def test_keys_are_independent(self) -> None:
        self.plotter.start_plot(_request("a", PlotCall("sin", np.sin)))
        self.plotter.start_plot(_request("b", PlotCall("cos", np.cos)))
        self.plotter.cancel("missing")
        self._drain()
        self.assertEqual(sorted(r.key for r in self.results), ["a", "b"])


if __name__ == "__main__":
    unittest.main()
