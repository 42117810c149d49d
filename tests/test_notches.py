from __future__ import annotations

import itertools
import unittest
from decimal import Decimal

from qtgraphpanel.axis import AxisSettings, AxisType
from qtgraphpanel.notches import (
    MAX_LINEAR_NOTCHES,
    generate_notches,
    linear_step,
    max_linear_notches,
    si_prefix,
)
from qtgraphpanel.rmath import pow10


class SIPrefixTests(unittest.TestCase):
    def test_kilo_with_fraction_digit(self) -> None:
        self.assertEqual(si_prefix(1500, 3, 1), "1.5k")

    def test_milli_with_two_fraction_digits(self) -> None:
        self.assertEqual(si_prefix(Decimal("0.0025"), -3, 2), "2.50m")

    def test_zero_has_no_prefix(self) -> None:
        self.assertEqual(si_prefix(0, 5, 0), "0")
        self.assertEqual(si_prefix(0, -7, 2), "0.00")

    def test_no_fraction_digits_keeps_at_most_one(self) -> None:
        self.assertEqual(si_prefix(2500, 3, 0), "2.5k")
        self.assertEqual(si_prefix(2000, 3, 0), "2k")
        self.assertEqual(si_prefix(-1500, 3, 0), "-1.5k")
        self.assertEqual(si_prefix(Decimal("0.000002"), -6, 0), "2µ")

    def test_unit_group_has_no_prefix(self) -> None:
        self.assertEqual(si_prefix(Decimal("12.5"), 1, 1), "12.5")

    def test_huge_values_use_outermost_prefix(self) -> None:
        self.assertEqual(si_prefix(1e30, 30, 0), "1000R")

    def test_negative_zero_is_normalised(self) -> None:
        self.assertEqual(si_prefix(Decimal("-0.0001"), 0, 1), "0.0")


class LinearNotchTests(unittest.TestCase):
    def test_step_refinement(self) -> None:
        self.assertEqual(linear_step(Decimal(1)), Decimal("0.1"))
        self.assertEqual(linear_step(Decimal(20)), Decimal(2))
        self.assertEqual(linear_step(Decimal(3000)), Decimal(200))

    def test_unit_range(self) -> None:
        notches = generate_notches(AxisSettings(pos_bottom=0, pos_range=1))
        self.assertEqual(
            [n.value for n in notches],
            [Decimal(s) for s in ("0", "0.2", "0.4", "0.6", "0.8", "1")],
        )
        self.assertEqual(
            [n.text for n in notches], ["0.0", "0.2", "0.4", "0.6", "0.8", "1.0"]
        )
        self.assertFalse(any(n.sub_line for n in notches))

    def test_default_view(self) -> None:
        notches = generate_notches(AxisSettings())
        self.assertEqual([n.value for n in notches], [-10, -5, 0, 5, 10])
        self.assertEqual([n.text for n in notches], ["-10", "-5", "0", "5", "10"])

    def test_labels_share_the_prefix_of_the_largest_bound(self) -> None:
        notches = generate_notches(AxisSettings(pos_bottom=0, pos_range=3000))
        self.assertEqual(
            [n.text for n in notches],
            ["0.0", "0.5k", "1.0k", "1.5k", "2.0k", "2.5k", "3.0k"],
        )

    def test_pixel_extent_caps_density(self) -> None:
        self.assertEqual(max_linear_notches(None), MAX_LINEAR_NOTCHES)
        self.assertEqual(max_linear_notches(4000), MAX_LINEAR_NOTCHES)
        self.assertEqual(max_linear_notches(-150), 5)
        self.assertEqual(max_linear_notches(0), 5)

        axis = AxisSettings(pos_bottom=0, pos_range=1)
        self.assertEqual(len(generate_notches(axis, pixel_extent=400)), 6)
        notches = generate_notches(axis, pixel_extent=150)
        self.assertEqual([n.value for n in notches], [0, Decimal("0.5"), 1])
        self.assertEqual([n.text for n in notches], ["0.0", "0.5", "1.0"])

    def test_count_and_order_across_ranges(self) -> None:
        cases = [
            ("0", "0.001"),
            ("-0.2", "0.37"),
            ("3", "1.99"),
            ("-7", "2.5"),
            ("12", "9"),
            ("-1000", "123.4"),
            ("-3.3", "7e10"),
            ("1e-14", "3e-15"),
            ("-5e20", "1e21"),
            ("1e15", "1e-24"),
            ("-1e24", "1.5e-25"),
            ("-1e24", "6e-26"),
        ]
        for (bottom, value_range), extent in itertools.product(cases, (400, 150, 40)):
            with self.subTest(bottom=bottom, value_range=value_range, extent=extent):
                axis = AxisSettings(pos_bottom=Decimal(bottom), pos_range=Decimal(value_range))
                notches = generate_notches(axis, pixel_extent=extent)
                self.assertGreaterEqual(len(notches), 2)
                self.assertLessEqual(len(notches), max_linear_notches(extent))
                values = [n.value for n in notches]
                self.assertEqual(values, sorted(set(values)))
                self.assertGreaterEqual(values[0], axis.pos_bottom)
                self.assertLessEqual(values[-1], axis.pos_top)
                self.assertTrue(all(n.text for n in notches))


class Log10NotchTests(unittest.TestCase):
    def test_single_decade(self) -> None:
        notches = generate_notches(AxisSettings(type=AxisType.LOG10, pos_bottom=0, pos_range=1))
        self.assertEqual([n.value for n in notches], list(range(1, 11)))
        labelled = [n for n in notches if n.text is not None]
        self.assertEqual([n.text for n in labelled], ["1", "10"])
        self.assertTrue(all(n.sub_line for n in notches if n.text is None))
        self.assertFalse(any(n.sub_line for n in labelled))

    def test_decade_labels_use_prefixes(self) -> None:
        notches = generate_notches(AxisSettings(type=AxisType.LOG10, pos_bottom=-3, pos_range=6))
        labels = [n.text for n in notches if n.text is not None]
        self.assertEqual(labels, ["1m", "10m", "100m", "1", "10", "100", "1k"])

    def test_partial_decade(self) -> None:
        axis = AxisSettings(
            type=AxisType.LOG10, pos_bottom=Decimal("0.5"), pos_range=Decimal("0.6")
        )
        notches = generate_notches(axis)
        self.assertEqual([n.value for n in notches], [4, 5, 6, 7, 8, 9, 10])
        self.assertEqual([n.text for n in notches if n.text], ["10"])

    def test_exponents_are_clamped(self) -> None:
        axis = AxisSettings(type=AxisType.LOG10, pos_bottom=-40, pos_range=100)
        notches = generate_notches(axis)
        self.assertEqual(len(notches), 49 * 9)
        self.assertEqual(notches[0].value, pow10(-24))
        self.assertEqual(notches[0].text, "1y")
        self.assertEqual(notches[-1].value, 9 * pow10(24))


if __name__ == "__main__":
    unittest.main()
