import unittest

import numpy as np

from isomix.data.types import Source
from isomix.errors import DataShapeError
from isomix.models.sources import assemble_source_data


def _means(**kwargs):
    values = dict(
        n_sources=2,
        data_type="means",
        MU_array=np.zeros((2, 2)),
        SIG2_array=np.ones((2, 2)),
        n_array=np.array([5, 5]),
    )
    values.update(kwargs)
    return Source(**values)


class AssembleSourceDataTests(unittest.TestCase):
    def test_means(self):
        data = assemble_source_data(_means())
        self.assertEqual(list(data), ["MU_array", "SIG2_array", "n_array"])

    def test_raw(self):
        source = Source(
            n_sources=2, data_type="raw", SOURCE_array=np.zeros((2, 2, 3)), n_rep=[3, 2]
        )
        data = assemble_source_data(source)
        self.assertEqual(list(data), ["SOURCE_array", "n_rep"])
        np.testing.assert_array_equal(data["n_rep"], [3, 2])

    def test_by_factor_and_concentration(self):
        source = _means(
            MU_array=np.zeros((2, 2, 3)),
            SIG2_array=np.ones((2, 2, 3)),
            n_array=np.full((2, 3), 4),
            by_factor="Region",
            S_factor_levels=3,
            conc_dep=True,
            conc=[[0.2, 0.4], [0.3, 0.1]],
        )
        data = assemble_source_data(source)
        self.assertEqual(
            list(data), ["MU_array", "SIG2_array", "n_array", "source_factor_levels", "conc"]
        )
        self.assertEqual(data["source_factor_levels"], 3)


class SourceValidationTests(unittest.TestCase):
    def test_valid(self):
        _means().validate(n_iso=2)

    def test_unknown_data_type(self):
        with self.assertRaises(DataShapeError):
            _means(data_type="medians").validate()

    def test_missing_arrays(self):
        with self.assertRaises(DataShapeError):
            _means(SIG2_array=None).validate()

    def test_tracer_mismatch(self):
        with self.assertRaises(DataShapeError):
            _means().validate(n_iso=3)

    def test_factor_needs_levels(self):
        with self.assertRaises(DataShapeError):
            _means(by_factor="Region").validate()

    def test_conc_dep_needs_matrix(self):
        with self.assertRaises(DataShapeError):
            _means(conc_dep=True).validate()


if __name__ == "__main__":
    unittest.main()
