import unittest

import numpy as np

from isomix.errors import InvalidPriorError, PriorLengthError, ZeroAlphaError
from isomix.prior import resolve_prior


class PriorTests(unittest.TestCase):
    def test_scalar_one_expands(self):
        alpha = resolve_prior(1, 4)
        np.testing.assert_array_equal(alpha, [1.0, 1.0, 1.0, 1.0])

    def test_float_one_expands(self):
        np.testing.assert_array_equal(resolve_prior(1.0, 3), np.ones(3))

    def test_valid_vector_unchanged(self):
        prior = [0.5, 2.0, 0.01]
        np.testing.assert_array_equal(resolve_prior(prior, 3), prior)

    def test_one_element_one_expands(self):
        np.testing.assert_array_equal(resolve_prior([1], 3), np.ones(3))
        np.testing.assert_array_equal(resolve_prior(np.array([1.0]), 2), np.ones(2))

    def test_boolean_is_not_the_flat_prior(self):
        with self.assertRaises(InvalidPriorError):
            resolve_prior(True, 3)

    def test_vector_of_ones(self):
        np.testing.assert_array_equal(resolve_prior(np.ones(5), 5), np.ones(5))

    def test_non_numeric(self):
        with self.assertRaises(InvalidPriorError):
            resolve_prior("uninformative", 3)
        with self.assertRaises(InvalidPriorError):
            resolve_prior(["a", "b", "c"], 3)
        with self.assertRaises(InvalidPriorError):
            resolve_prior(None, 3)

    def test_length_mismatch(self):
        with self.assertRaises(PriorLengthError):
            resolve_prior([1, 2], 3)
        with self.assertRaises(PriorLengthError):
            resolve_prior(2, 3)
        with self.assertRaises(PriorLengthError):
            resolve_prior([2], 3)

    def test_zero_entry(self):
        with self.assertRaises(ZeroAlphaError) as ctx:
            resolve_prior([1, 0, 1], 3)
        self.assertIn("0.01", str(ctx.exception))

    def test_negative_entry(self):
        with self.assertRaises(InvalidPriorError):
            resolve_prior([1, -1, 1], 3)


if __name__ == "__main__":
    unittest.main()
