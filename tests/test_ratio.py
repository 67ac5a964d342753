import math
import pickle
import unittest
from fractions import Fraction

import numpy as np

from rational import (
    DivideByZeroError,
    Ratio,
    RatioOverflowError,
    Rational,
    Rational32,
    make_ratio,
)

SAMPLES = [
    Ratio(n, d)
    for n in range(-6, 7)
    for d in (1, 2, 3, 5, -4)
]


class ConstructionTests(unittest.TestCase):
    def test_simplification_and_properties(self):
        value = Ratio(10, 20)
        self.assertEqual(value.numerator, 1)
        self.assertEqual(value.denominator, 2)
        self.assertIsInstance(value.numerator, np.integer)
        self.assertEqual(value.numerator.dtype, Ratio.dtype)

    def test_sign_lives_on_numerator(self):
        self.assertEqual((Ratio(3, -6).numerator, Ratio(3, -6).denominator), (-1, 2))
        self.assertEqual((Ratio(-3, -6).numerator, Ratio(-3, -6).denominator), (1, 2))

    def test_canonical_zero(self):
        for value in (Ratio(0), Ratio(0, 7), Ratio(0, -5), Ratio.zero(), Ratio()):
            self.assertEqual((value.numerator, value.denominator), (0, 1))

    def test_zero_denominator_rejected(self):
        with self.assertRaises(DivideByZeroError):
            Ratio(1, 0)
        with self.assertRaises(ZeroDivisionError):
            Ratio.from_parts(0, 0)

    def test_reduction_invariant(self):
        for n in range(-12, 13):
            for d in range(-12, 13):
                if d == 0:
                    continue
                value = Ratio(n, d)
                self.assertGreater(value.denominator, 0)
                self.assertEqual(math.gcd(int(value.numerator), int(value.denominator)), 1)
                self.assertEqual(value.as_fraction(), Fraction(n, d))
                again = value.reduced()
                self.assertEqual(
                    (again.numerator, again.denominator),
                    (value.numerator, value.denominator),
                )

    def test_reduce_in_place_keeps_value(self):
        value = Ratio(6, 8)
        value.reduce()
        self.assertEqual((value.numerator, value.denominator), (3, 4))

    def test_from_integer_and_fraction(self):
        self.assertEqual(Ratio.from_integer(7), Ratio(7, 1))
        self.assertEqual(Ratio(Fraction(6, 4)), Ratio(3, 2))
        self.assertEqual(Ratio.from_fraction(Fraction(-10, 4)), Ratio(-5, 2))

    def test_rejects_non_integral_components(self):
        with self.assertRaises(TypeError):
            Ratio(1.5)
        with self.assertRaises(TypeError):
            Ratio(1, 2.0)

    def test_components_must_fit_kind(self):
        with self.assertRaises(RatioOverflowError):
            Ratio(2 ** 70)
        with self.assertRaises(RatioOverflowError):
            Ratio[np.int8](200)
        with self.assertRaises(OverflowError):
            Ratio[np.int8](1, 128)

    def test_constants(self):
        self.assertEqual(Ratio.one(), Ratio(1))
        self.assertEqual(Ratio.pi(), Ratio(6283, 2000))
        self.assertAlmostEqual(float(Ratio.pi()), 3.1415)
        with self.assertRaises(RatioOverflowError):
            Ratio[np.int8].pi()

    def test_make_ratio(self):
        value = make_ratio(3, 6, kind=np.int16)
        self.assertIs(type(value), Ratio[np.int16])
        self.assertEqual(value, Ratio(1, 2))
        self.assertEqual(make_ratio(5), Ratio(5, 1))


class KindTests(unittest.TestCase):
    def test_specialisations_are_cached(self):
        self.assertIs(Ratio[np.int32], Ratio[np.int32])
        self.assertIs(Ratio[np.int32], Rational32)
        self.assertIs(Ratio[np.intp], Ratio)
        self.assertIs(Rational, Ratio)

    def test_only_signed_integer_kinds(self):
        for kind in (np.uint8, np.float64, np.complex128, "nonsense"):
            with self.assertRaises(TypeError):
                Ratio[kind]

    def test_repr_names_kind(self):
        self.assertEqual(repr(Ratio(1, 2)), "Ratio(1, 2)")
        self.assertEqual(repr(Ratio[np.int32](-1, 2)), "Ratio[int32](-1, 2)")

    def test_mixed_kinds_promote(self):
        result = Ratio[np.int32](1, 2) + Ratio[np.int16](1, 3)
        self.assertIs(type(result), Ratio[np.int32])
        self.assertEqual(result, Ratio(5, 6))

        result = Ratio[np.int8](1, 2) * Ratio[np.int64](1, 2)
        self.assertEqual(result.dtype, np.dtype(np.int64))

    def test_pickle_round_trip(self):
        value = Ratio[np.int32](3, 4)
        restored = pickle.loads(pickle.dumps(value))
        self.assertIs(type(restored), Ratio[np.int32])
        self.assertEqual(restored, value)


class ArithmeticTests(unittest.TestCase):
    def test_arithmetic_operations(self):
        a = Ratio(1, 3)
        b = Ratio(1, 6)
        self.assertEqual(a + b, Ratio(1, 2))
        self.assertEqual(a - b, Ratio(1, 6))
        self.assertEqual(a * b, Ratio(1, 18))
        self.assertEqual(a / b, Ratio(2))

    def test_results_are_reduced(self):
        total = Ratio(1, 6) + Ratio(1, 3)
        self.assertEqual((total.numerator, total.denominator), (1, 2))

    def test_truncating_modulo(self):
        self.assertEqual(Ratio(7, 2) % Ratio(1), Ratio(1, 2))
        self.assertEqual(Ratio(-7, 2) % Ratio(1), Ratio(-1, 2))
        self.assertEqual(Ratio(7, 2) % Ratio(-1), Ratio(1, 2))
        self.assertEqual(Ratio(5, 3) % Ratio(1, 2), Ratio(1, 6))
        self.assertEqual(7 % Ratio(2), Ratio(1))

    def test_division_by_zero(self):
        with self.assertRaises(DivideByZeroError):
            Ratio(1, 2) / Ratio(0)
        with self.assertRaises(DivideByZeroError):
            Ratio(1, 2) / 0
        with self.assertRaises(DivideByZeroError):
            Ratio(1, 2) % Ratio.zero()
        with self.assertRaises(DivideByZeroError):
            1 / Ratio(0, 3)

    def test_identities(self):
        for a in SAMPLES:
            self.assertEqual(a + Ratio.zero(), a)
            self.assertEqual(a * Ratio.one(), a)
            self.assertEqual(a - a, Ratio.zero())
            if not a.is_zero():
                self.assertEqual(a / a, Ratio.one())

    def test_matches_fraction_arithmetic(self):
        for a in SAMPLES[::3]:
            for b in SAMPLES[1::4]:
                fa, fb = a.as_fraction(), b.as_fraction()
                self.assertEqual((a + b).as_fraction(), fa + fb)
                self.assertEqual((a - b).as_fraction(), fa - fb)
                self.assertEqual((a * b).as_fraction(), fa * fb)
                if not b.is_zero():
                    self.assertEqual((a / b).as_fraction(), fa / fb)

    def test_integer_examples(self):
        value = Ratio(10, 3) + 1
        self.assertEqual(value, Ratio(13, 3))
        self.assertEqual(str(value), "13/3")

        x = Ratio(7)
        y = Ratio(7, 3)
        z = (x / y) + 1
        self.assertEqual((z.numerator, z.denominator), (4, 1))
        self.assertEqual(str(z), "4/1")
        self.assertTrue(z.is_integer())

    def test_compound_assignment_rebinds(self):
        original = Ratio(1, 2)
        value = original
        value += Ratio(1, 3)
        self.assertEqual(value, Ratio(5, 6))
        self.assertEqual(original, Ratio(1, 2))
        value -= 1
        value *= 6
        value /= Ratio(-1, 2)
        self.assertEqual(value, Ratio(2))
        value %= Ratio(3, 2)
        self.assertEqual(value, Ratio(1, 2))

    def test_negation_and_abs(self):
        value = -Ratio(3, 4)
        self.assertEqual((value.numerator, value.denominator), (-3, 4))
        self.assertEqual(abs(value), Ratio(3, 4))
        self.assertEqual(value.abs(), Ratio(3, 4))
        self.assertIs(+value, value)
        self.assertEqual(Ratio(1, 3).abs_sub(Ratio(1, 2)), Ratio(1, 6))
        self.assertEqual(Ratio(1, 2).abs_sub(Ratio(1, 3)), Ratio(1, 6))

    def test_power_with_integer_exponent(self):
        value = Ratio(2, 3)
        self.assertEqual(value ** 2, Ratio(4, 9))
        self.assertEqual(value ** -1, Ratio(3, 2))
        self.assertEqual(value ** 0, Ratio.one())
        self.assertEqual(Ratio(-2, 3) ** -3, Ratio(-27, 8))
        self.assertEqual(value ** Ratio(3), Ratio(8, 27))
        with self.assertRaises(ValueError):
            _ = value ** Ratio(1, 2)
        with self.assertRaises(DivideByZeroError):
            _ = Ratio(0) ** -1

    def test_reciprocal(self):
        self.assertEqual(Ratio(-2, 3).reciprocal(), Ratio(-3, 2))
        self.assertEqual(Ratio(-2, 3).reciprocal().denominator, 2)
        with self.assertRaises(DivideByZeroError):
            Ratio.zero().reciprocal()

    def test_foreign_operands(self):
        self.assertEqual(Fraction(1, 2) + Ratio(1, 3), Ratio(5, 6))
        self.assertEqual(Ratio(1, 3) - Fraction(1, 3), Ratio(0))
        self.assertEqual(np.int32(2) * Ratio(1, 4), Ratio(1, 2))

        result = Ratio(1, 2) + 0.25
        self.assertIsInstance(result, float)
        self.assertAlmostEqual(result, 0.75)
        self.assertAlmostEqual(1.0 - Ratio(1, 4), 0.75)

        with self.assertRaises(TypeError):
            Ratio(1, 2) + "1/2"


class ComparisonTests(unittest.TestCase):
    def test_ordering(self):
        self.assertLess(Ratio(1, 2), Ratio(2, 3))
        self.assertGreater(Ratio(-1, 3), Ratio(-1, 2))
        self.assertLessEqual(Ratio(2, 4), Ratio(1, 2))
        self.assertGreaterEqual(Ratio(1, 2), Ratio(2, 4))
        self.assertNotEqual(Ratio(1, 2), Ratio(1, 3))
        self.assertLess(Ratio(1, 2), 1)
        self.assertGreater(2, Ratio(3, 2))

    def test_trichotomy(self):
        for a in SAMPLES[::2]:
            for b in SAMPLES[::3]:
                outcomes = [a < b, a == b, a > b]
                self.assertEqual(outcomes.count(True), 1, (a, b))
                self.assertEqual(a <= b, not a > b)
                self.assertEqual(a >= b, not a < b)
                self.assertEqual(a != b, not a == b)

    def test_exact_float_comparison(self):
        self.assertEqual(Ratio(1, 2), 0.5)
        self.assertNotEqual(Ratio(1, 3), 1 / 3)
        self.assertLess(Ratio(1, 3), 0.34)
        self.assertFalse(Ratio(1, 2) < float("nan"))

    def test_unrelated_types_are_unequal(self):
        self.assertFalse(Ratio(1, 2) == "1/2")
        self.assertTrue(Ratio(1, 2) != None)  # noqa: E711
        with self.assertRaises(TypeError):
            _ = Ratio(1, 2) < "1/2"

    def test_integers_outside_kind_compare_exactly(self):
        self.assertFalse(Ratio(1, 2) == 2 ** 70)
        self.assertTrue(Ratio(1, 2) != 2 ** 70)
        self.assertLess(Ratio(1, 2), 2 ** 70)
        self.assertGreater(Ratio(1, 2), -(2 ** 70))
        self.assertTrue(Ratio[np.int8](1, 2) < 1000)
        self.assertFalse(Ratio[np.int8](1, 2) == 1000)
        self.assertGreaterEqual(Ratio[np.int8](1, 2), Fraction(1, 1000))
        self.assertNotIn(2 ** 70, [Ratio(1, 2)])
        self.assertIn(Ratio(1, 2), [2 ** 70, Ratio(2, 4)])

    def test_hash_matches_equal_numbers(self):
        self.assertEqual(hash(Ratio(2)), hash(2))
        self.assertEqual(hash(Ratio(1, 2)), hash(Fraction(1, 2)))
        self.assertEqual(len({Ratio(1, 2), Ratio(2, 4), Ratio[np.int16](1, 2)}), 1)


class PredicateTests(unittest.TestCase):
    def test_predicates(self):
        self.assertTrue(Ratio(4, 2).is_integer())
        self.assertFalse(Ratio(1, 2).is_integer())
        self.assertTrue(Ratio(0, 9).is_zero())
        self.assertTrue(Ratio(1, 9).is_positive())
        self.assertTrue(Ratio(-1, 9).is_negative())
        self.assertFalse(Ratio(0).is_positive())
        self.assertFalse(Ratio(0).is_negative())
        self.assertFalse(bool(Ratio(0)))
        self.assertTrue(bool(Ratio(1, 9)))

    def test_signum(self):
        self.assertEqual(Ratio(-3, 7).signum(), -1)
        self.assertEqual(Ratio(0).signum(), 0)
        self.assertEqual(Ratio(3, 7).signum(), 1)
        self.assertEqual(Ratio[np.int16](3, 7).signum().dtype, np.dtype(np.int16))


if __name__ == "__main__":  # pragma: no cover - direct execution helper
    unittest.main()
