from __future__ import annotations

import unittest

import numpy as np

from qtgraphpanel.axis import AxisSettings, AxisType, PlotSettings
from qtgraphpanel.sampling import PlotCall, PlotRequest, run_request, sample_call, sample_x


def _settings(num_samples: int, **options: object) -> PlotSettings:
    options["num_samples"] = num_samples
    return PlotSettings.from_options(options)


class SampleXTests(unittest.TestCase):
    def test_linear_axis(self) -> None:
        x = sample_x(AxisSettings(pos_bottom=0, pos_range=10), 11)
        np.testing.assert_allclose(x, np.arange(11.0))

    def test_log_axis_is_uniform_in_exponent(self) -> None:
        x = sample_x(AxisSettings(type=AxisType.LOG10, pos_bottom=0, pos_range=2), 3)
        np.testing.assert_allclose(x, [1.0, 10.0, 100.0])

    def test_too_few_samples_warns(self) -> None:
        with self.assertWarns(RuntimeWarning):
            x = sample_x(AxisSettings(), 1)
        self.assertEqual(x.size, 2)


class SampleCallTests(unittest.TestCase):
    def test_pole_splits_the_curve(self) -> None:
        graph = sample_call(PlotCall("1/x", lambda x: 1.0 / x), _settings(5, x_range=(-1, 1)))
        self.assertEqual(len(graph.polylines), 2)
        np.testing.assert_allclose(graph.polylines[0], [[-1.0, -1.0], [-0.5, -2.0]])
        np.testing.assert_allclose(graph.polylines[1], [[0.5, 2.0], [1.0, 1.0]])

    def test_nan_gap(self) -> None:
        def func(x: np.ndarray) -> np.ndarray:
            y = x.copy()
            y[3:5] = np.nan
            return y

        graph = sample_call(PlotCall("gap", func), _settings(10, x_range=(0, 9)))
        self.assertEqual([len(p) for p in graph.polylines], [3, 5])

    def test_log_y_drops_non_positive(self) -> None:
        settings = _settings(5, x_range=(-2, 2), y_type="log10")
        graph = sample_call(PlotCall("x", lambda x: x), settings)
        self.assertEqual(len(graph.polylines), 1)
        np.testing.assert_allclose(graph.polylines[0], [[1.0, 1.0], [2.0, 2.0]])

    def test_scalar_result_is_broadcast(self) -> None:
        graph = sample_call(PlotCall("three", lambda x: 3.0), _settings(7))
        self.assertEqual(len(graph.polylines), 1)
        self.assertEqual(graph.polylines[0].shape, (7, 2))
        self.assertTrue(np.all(graph.polylines[0][:, 1] == 3.0))

    def test_failing_function_gives_empty_graph(self) -> None:
        def broken(x: np.ndarray) -> np.ndarray:
            raise RuntimeError("boom")

        call = PlotCall("broken", broken)
        with self.assertLogs("qtgraphpanel.sampling", level="ERROR"):
            graph = sample_call(call, _settings(5))
        self.assertIs(graph.call, call)
        self.assertEqual(graph.polylines, [])


class RunRequestTests(unittest.TestCase):
    def test_result_keeps_key_and_order(self) -> None:
        calls = (PlotCall("sin", np.sin), PlotCall("cos", np.cos))
        request = PlotRequest(key="trig", calls=calls, settings=_settings(11))
        result = run_request(request, generation=7)
        self.assertEqual(result.key, "trig")
        self.assertEqual(result.generation, 7)
        self.assertEqual([g.call.label for g in result.graphs], ["sin", "cos"])
        self.assertTrue(all(len(g.polylines) == 1 for g in result.graphs))


if __name__ == "__main__":
    unittest.main()
