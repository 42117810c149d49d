"""Curve sampling: turns plot requests into polylines in data space."""

from __future__ import annotations

import logging
import warnings
from collections.abc import Callable, Hashable
from dataclasses import dataclass, field

import numpy as np
from numpy import isfinite, ndarray

from .axis import AxisSettings, AxisType, PlotSettings

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlotCall:
    label: str
    func: Callable[[ndarray], ndarray]


@dataclass(frozen=True)
class PlotRequest:
    key: Hashable
    calls: tuple[PlotCall, ...]
    settings: PlotSettings


@dataclass
class Graph:
    call: PlotCall
    polylines: list[ndarray] = field(default_factory=list)


@dataclass(frozen=True)
class PlotResult:
    key: Hashable
    generation: int
    graphs: tuple[Graph, ...]


def sample_x(axis: AxisSettings, num_samples: int) -> ndarray:
    """Evenly spaced sample positions across the visible range of ``axis``.

    Log axes are sampled uniformly in the exponent.
    """
    if num_samples < 2:
        warnings.warn(
            f"num_samples={num_samples} is too small; sampling 2 points instead.",
            RuntimeWarning,
            stacklevel=2,
        )
        num_samples = 2
    pos = np.linspace(float(axis.pos_bottom), float(axis.pos_top), int(num_samples))
    if axis.type is AxisType.LOG10:
        return np.power(10.0, pos)
    return pos


def _split_polylines(x: ndarray, y: ndarray, valid: ndarray) -> list[ndarray]:
    polylines: list[ndarray] = []
    if not valid.any():
        return polylines
    edges = np.flatnonzero(np.diff(valid.astype(np.int8)))
    bounds = np.concatenate(([0], edges + 1, [valid.size]))
    for start, stop in zip(bounds[:-1], bounds[1:], strict=False):
        if valid[start]:
            polylines.append(np.column_stack((x[start:stop], y[start:stop])))
    return polylines


def sample_call(call: PlotCall, settings: PlotSettings) -> Graph:
    """Evaluate one function over the X view and split it at invalid points."""
    x = sample_x(settings.x_axis, settings.num_samples)
    try:
        with np.errstate(all="ignore"):
            y = np.broadcast_to(np.asarray(call.func(x), dtype=float), x.shape)
    except Exception:
        LOGGER.exception("Evaluating %r failed", call.label)
        return Graph(call)

    valid = isfinite(x) & isfinite(y)
    if settings.x_axis.type is AxisType.LOG10:
        valid &= x > 0
    if settings.y_axis.type is AxisType.LOG10:
        valid &= y > 0
    return Graph(call, _split_polylines(x, y, valid))


def run_request(request: PlotRequest, generation: int = 0) -> PlotResult:
    graphs = tuple(sample_call(call, request.settings) for call in request.calls)
    return PlotResult(key=request.key, generation=generation, graphs=graphs)
