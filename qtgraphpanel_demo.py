"""Run qtgraphpanel demos from a single script."""

import argparse
from collections.abc import Callable, Sequence
from dataclasses import dataclass

import numpy as np

from qtgraphpanel import graphqt


@dataclass(frozen=True)
class DemoEntry:
    name: str
    summary: str
    runner: Callable[[argparse.Namespace], None]


def _damped(x: np.ndarray) -> np.ndarray:
    return np.exp(-0.2 * np.abs(x)) * np.sin(3.0 * x)


def run_linear_demo(args: argparse.Namespace) -> None:
    """Launch a linear-axis demo window."""
    graphqt(
        np.sin,
        np.cos,
        _damped,
        lambda x: 1.0 / x,
        title=args.title,
        xlim=(-10.0, 10.0),
        ylim=(-2.0, 2.0),
        label=["sin(x)", "cos(x)", "damped", "1/x"],
        white_back=args.white,
    )


def run_log_demo(args: argparse.Namespace) -> None:
    """Launch a log-log demo window (a first-order low-pass magnitude)."""
    corner = args.corner

    def lowpass(f: np.ndarray) -> np.ndarray:
        return 1.0 / np.sqrt(1.0 + (f / corner) ** 2)

    graphqt(
        lowpass,
        lambda f: f / corner,
        title=args.title,
        xlog=True,
        ylog=True,
        xlim=(1.0, 1e9),
        ylim=(1e-6, 10.0),
        label=["|H(f)|", "f/fc"],
        white_back=args.white,
    )


DEMO_ENTRIES: list[DemoEntry] = [
    DemoEntry(
        name="linear",
        summary="Trigonometric functions on linear axes with SI tick labels.",
        runner=run_linear_demo,
    ),
    DemoEntry(
        name="log",
        summary="Low-pass filter magnitude on log10 axes.",
        runner=run_log_demo,
    ),
]
DEMO_INDEX = {entry.name: entry for entry in DEMO_ENTRIES}


def _print_demo_list() -> None:
    print("Available demos:")
    for entry in DEMO_ENTRIES:
        print(f"  - {entry.name}: {entry.summary}")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="qtgraphpanel demo runner.")
    parser.add_argument(
        "--list",
        action="store_true",
        help="List available demos.",
    )
    parser.add_argument(
        "--demo",
        default="linear",
        choices=sorted(DEMO_INDEX),
        help="Select which demo to run.",
    )
    parser.add_argument(
        "--corner",
        type=float,
        default=1e3,
        help="Corner frequency for the log demo.",
    )
    parser.add_argument(
        "--white",
        action="store_true",
        help="Draw on a white background.",
    )
    parser.add_argument("--title", default="graphqt demo", help="Window title.")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for running demos from the CLI."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.list:
        _print_demo_list()
        return 0
    DEMO_INDEX[args.demo].runner(args)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
