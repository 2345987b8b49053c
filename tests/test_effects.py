"""Tests for the mixture-effect data assembly."""

import unittest

import numpy as np

from isomix.data.types import Factor, Mixture
from isomix.errors import DataShapeError
from isomix.models.effects import (
    FixedPlusRandom,
    NoEffects,
    OneFactor,
    TwoFactors,
    assemble_continuous_data,
    assemble_effect_data,
    classify_effects,
)

N_SOURCES = 3


def _mixture(factors=(), fac_nested=(False, False), cont_effects=()):
    data = np.arange(12, dtype=float).reshape(6, 2)
    return Mixture(data, factors=list(factors), fac_nested=fac_nested, cont_effects=list(cont_effects))


def _region(re):
    return Factor(levels=2, values=[1, 1, 1, 2, 2, 2], re=re, name="Region")


def _pack(re, lookup=None):
    return Factor(levels=3, values=[1, 1, 2, 2, 3, 3], re=re, name="Pack", lookup=lookup)


class ClassifyEffectsTests(unittest.TestCase):
    def test_variants(self):
        self.assertEqual(classify_effects(_mixture()), NoEffects())
        self.assertEqual(classify_effects(_mixture([_region(True)])), OneFactor(random=True))
        self.assertEqual(
            classify_effects(_mixture([_region(True), _pack(True)])),
            TwoFactors(random1=True, random2=True),
        )
        self.assertEqual(
            classify_effects(_mixture([_region(False), _pack(True)])),
            FixedPlusRandom(n_re=1, fac2_random=True),
        )
        self.assertEqual(
            classify_effects(_mixture([_region(False), _pack(False)])),
            FixedPlusRandom(n_re=0, fac2_random=False),
        )

    def test_fere_flag(self):
        self.assertFalse(_mixture([_region(True), _pack(True)]).fere)
        self.assertTrue(_mixture([_region(False), _pack(True)]).fere)
        self.assertFalse(_mixture([_region(False)]).fere)


class AssembleEffectDataTests(unittest.TestCase):
    def _assemble(self, mix):
        return assemble_effect_data(classify_effects(mix), mix, N_SOURCES)

    def test_no_effects(self):
        data, params = self._assemble(_mixture())
        self.assertEqual(data, {})
        self.assertEqual(params, [])

    def test_one_fixed_factor(self):
        data, params = self._assemble(_mixture([_region(False)]))
        self.assertEqual(set(data), {"factor1_levels", "Factor.1", "cross.fac1", "tmp.p.fac1"})
        self.assertEqual(params, ["p.fac1", "ilr.fac1"])
        self.assertEqual(data["factor1_levels"], 2)
        np.testing.assert_array_equal(data["Factor.1"], [1, 1, 1, 2, 2, 2])
        self.assertEqual(data["cross.fac1"].shape, (2, N_SOURCES, N_SOURCES - 1))
        self.assertEqual(data["tmp.p.fac1"].shape, (2, N_SOURCES))
        self.assertTrue(np.all(np.isnan(data["cross.fac1"])))

    def test_one_random_factor(self):
        _, params = self._assemble(_mixture([_region(True)]))
        self.assertEqual(params, ["p.fac1", "ilr.fac1", "fac1.sig"])

    def test_two_random_factors(self):
        data, params = self._assemble(_mixture([_region(True), _pack(True)]))
        self.assertEqual(
            set(data),
            {
                "factor1_levels", "Factor.1", "cross.fac1", "tmp.p.fac1",
                "factor2_levels", "Factor.2", "cross.fac2", "tmp.p.fac2",
            },
        )
        self.assertEqual(
            params, ["p.fac1", "ilr.fac1", "fac1.sig", "p.fac2", "ilr.fac2", "fac2.sig"]
        )
        self.assertEqual(data["cross.fac2"].shape, (3, N_SOURCES, N_SOURCES - 1))

    def test_two_random_factors_nested(self):
        # Pack (factor 2) nested within Region (factor 1)
        mix = _mixture(
            [_region(True), _pack(True, lookup=[1, 1, 2])], fac_nested=(False, True)
        )
        data, _ = self._assemble(mix)
        self.assertIn("factor1_lookup", data)
        self.assertNotIn("factor2_lookup", data)
        np.testing.assert_array_equal(data["factor1_lookup"], [1, 1, 2])

    def test_fixed_plus_random(self):
        data, params = self._assemble(_mixture([_region(False), _pack(True)]))
        self.assertEqual(
            set(data),
            {"factor1_levels", "Factor.1", "factor2_levels", "Factor.2", "cross.fac1", "tmp.p.fac1"},
        )
        self.assertEqual(params, ["p.fac1", "fac2.sig", "ilr.global", "ilr.fac1", "ilr.fac2"])
        self.assertNotIn("p.fac2", params)

    def test_random_factor_listed_first_is_moved_second(self):
        mix = _mixture([_pack(True), _region(False)])
        self.assertEqual([f.name for f in mix.factors], ["Region", "Pack"])
        self.assertEqual(classify_effects(mix), FixedPlusRandom(n_re=1, fac2_random=True))
        data, params = self._assemble(mix)
        np.testing.assert_array_equal(data["Factor.1"], [1, 1, 1, 2, 2, 2])
        self.assertEqual(data["factor2_levels"], 3)
        self.assertEqual(params, ["p.fac1", "fac2.sig", "ilr.global", "ilr.fac1", "ilr.fac2"])

    def test_nesting_flags_follow_reordered_factors(self):
        mix = _mixture([_pack(True, lookup=[1, 1, 2]), _region(False)], fac_nested=(True, False))
        self.assertEqual(mix.fac_nested, (False, True))
        np.testing.assert_array_equal(mix.factors[1].lookup, [1, 1, 2])

    def test_two_fixed(self):
        data, params = self._assemble(_mixture([_region(False), _pack(False)]))
        self.assertEqual(set(data), {"factor1_levels", "Factor.1", "factor2_levels", "Factor.2"})
        self.assertEqual(params, ["ilr.global", "ilr.fac1", "ilr.fac2"])

    def test_factor_values_are_copied(self):
        region = _region(False)
        data, _ = self._assemble(_mixture([region]))
        data["Factor.1"][0] = 2
        self.assertEqual(region.values[0], 1)


class ContinuousEffectTests(unittest.TestCase):
    def test_covariates_are_bound_by_index(self):
        ce1 = np.linspace(0, 1, 6)
        ce2 = np.linspace(5, 10, 6)
        data, params = assemble_continuous_data(_mixture(cont_effects=[ce1, ce2]))
        self.assertEqual(list(data), ["Cont.1", "Cont.2"])
        np.testing.assert_array_equal(data["Cont.2"], ce2)
        self.assertEqual(params, ["ilr.global", "ilr.cont1", "p.ind", "ilr.cont2"])

    def test_no_covariates(self):
        self.assertEqual(assemble_continuous_data(_mixture()), ({}, []))

    def test_covariate_length_checked(self):
        with self.assertRaises(DataShapeError):
            _mixture(cont_effects=[np.ones(4)])


if __name__ == "__main__":
    unittest.main()
