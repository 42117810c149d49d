from __future__ import annotations

import unittest
from decimal import Decimal

from qtgraphpanel.rmath import ceiling, flog10, floor, log10, pow10, to_decimal


class RMathTests(unittest.TestCase):
    def test_log10_of_powers_of_ten_is_exact(self) -> None:
        self.assertEqual(log10(Decimal(1000)), 3)
        self.assertEqual(log10(Decimal("0.001")), -3)
        self.assertEqual(log10(Decimal(1)), 0)

    def test_log10_rejects_non_positive(self) -> None:
        with self.assertRaises(ValueError):
            log10(Decimal(0))
        with self.assertRaises(ValueError):
            log10(Decimal(-2))

    def test_flog10_is_characteristic_exponent(self) -> None:
        self.assertEqual(flog10(Decimal(1500)), 3)
        self.assertEqual(flog10(Decimal("0.0025")), -3)
        self.assertEqual(flog10(Decimal("-999")), 2)
        self.assertEqual(flog10(Decimal("1E-24")), -24)

    def test_flog10_of_zero_is_no_scaling(self) -> None:
        self.assertEqual(flog10(Decimal(0)), 0)

    def test_pow10_is_exact_across_exponent_range(self) -> None:
        self.assertEqual(pow10(24), Decimal(10) ** 24)
        self.assertEqual(pow10(-24), Decimal("1e-24"))
        self.assertEqual(pow10(0), 1)

    def test_ceiling_and_floor(self) -> None:
        self.assertEqual(ceiling(Decimal("-1.5")), -1)
        self.assertEqual(floor(Decimal("-1.5")), -2)
        self.assertEqual(ceiling(Decimal("2")), 2)
        self.assertEqual(floor(Decimal("0.30000000000000000001")), 0)

    def test_to_decimal_uses_shortest_float_repr(self) -> None:
        self.assertEqual(to_decimal(0.1), Decimal("0.1"))
        self.assertEqual(to_decimal(3), Decimal(3))
        self.assertEqual(to_decimal("2.5"), Decimal("2.5"))

    def test_to_decimal_rejects_non_finite(self) -> None:
        with self.assertRaises(ValueError):
            to_decimal(float("nan"))
        with self.assertRaises(ValueError):
            to_decimal(float("inf"))


if __name__ == "__main__":
    unittest.main()
