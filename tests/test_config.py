import os
import tempfile
import unittest

from isomix.config import RUN_PRESETS, RunConfig, load_run_config, resolve_run_config
from isomix.errors import ConfigError


class RunConfigTests(unittest.TestCase):
    def test_presets_resolve_to_literal_values(self):
        expected = {
            "test": (1000, 500, 1, 3, True),
            "very short": (10000, 5000, 5, 3, True),
            "short": (50000, 25000, 25, 3, True),
            "normal": (100000, 50000, 50, 3, True),
            "long": (300000, 200000, 100, 3, True),
            "very long": (1000000, 500000, 500, 3, True),
            "extreme": (3000000, 1500000, 500, 3, True),
        }
        self.assertEqual(set(RUN_PRESETS), set(expected))
        for name, values in expected.items():
            self.assertEqual(resolve_run_config(name).as_tuple(), values)

    def test_mapping_with_r_style_keys(self):
        run = resolve_run_config(
            {"chainLength": 2000, "burn": 1000, "thin": 2, "chains": 4, "calcDIC": False}
        )
        self.assertEqual(run, RunConfig(2000, 1000, 2, 4, False))
        self.assertEqual(run.n_samples, 1000)

    def test_mapping_with_snake_case_keys(self):
        run = resolve_run_config({"chain_length": 50, "burn": 10, "thin": 1, "chains": 1})
        self.assertTrue(run.calc_dic)

    def test_run_config_passes_through(self):
        run = RunConfig(100, 10, 1, 2, True)
        self.assertIs(resolve_run_config(run), run)

    def test_unknown_preset(self):
        with self.assertRaises(ConfigError):
            resolve_run_config("medium")

    def test_wrong_type(self):
        with self.assertRaises(ConfigError):
            resolve_run_config(42)

    def test_missing_field(self):
        with self.assertRaises(ConfigError):
            resolve_run_config({"chainLength": 100, "burn": 10})

    def test_unknown_field(self):
        with self.assertRaises(ConfigError):
            resolve_run_config({"chainLength": 100, "burn": 10, "thin": 1, "chains": 1, "seed": 3})

    def test_invariants(self):
        with self.assertRaises(ConfigError):
            resolve_run_config({"chainLength": 100, "burn": 100, "thin": 1, "chains": 1})
        with self.assertRaises(ConfigError):
            resolve_run_config({"chainLength": 100, "burn": 10, "thin": 0, "chains": 1})
        with self.assertRaises(ConfigError):
            resolve_run_config({"chainLength": 100, "burn": 10, "thin": 1, "chains": 0})
        with self.assertRaises(ConfigError):
            resolve_run_config({"chainLength": 100.5, "burn": 10, "thin": 1, "chains": 1})

    def test_config_error_is_value_error(self):
        with self.assertRaises(ValueError):
            resolve_run_config("not a preset")


class LoadRunConfigTests(unittest.TestCase):
    def _write(self, text):
        handle = tempfile.NamedTemporaryFile("w", suffix=".yaml", delete=False)
        handle.write(text)
        handle.close()
        self.addCleanup(os.unlink, handle.name)
        return handle.name

    def test_load_preset_name(self):
        path = self._write("short\n")
        self.assertEqual(load_run_config(path).as_tuple(), (50000, 25000, 25, 3, True))

    def test_load_mapping_under_run_key(self):
        path = self._write("run:\n  chainLength: 300\n  burn: 100\n  thin: 2\n  chains: 2\n  calcDIC: false\n")
        self.assertEqual(load_run_config(path), RunConfig(300, 100, 2, 2, False))

    def test_load_empty_file(self):
        path = self._write("")
        with self.assertRaises(ConfigError):
            load_run_config(path)


if __name__ == "__main__":
    unittest.main()
