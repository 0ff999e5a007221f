import json
import sys
import tempfile
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "core"))

from npuview_core.config import AppConfig, load_config, save_config
from npuview_core.units import UnitFormatter


class ConfigTests(unittest.TestCase):
    def test_load_default_when_missing(self):
        with tempfile.TemporaryDirectory() as tmp:
            cfg = load_config(Path(tmp) / "missing.json")
            self.assertIsInstance(cfg, AppConfig)
            self.assertEqual(cfg.refresh.poll_ms, 1000)
            self.assertEqual(cfg.units.temperature, "celsius")
            self.assertEqual(cfg.graphs.history_points, 60)

    def test_save_and_reload(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            cfg = load_config(path)
            cfg.refresh.poll_ms = 1500
            cfg.units.base = "binary"
            save_config(cfg, path)
            reloaded = load_config(path)
            self.assertEqual(reloaded.refresh.poll_ms, 1500)
            self.assertEqual(UnitFormatter.from_config(reloaded).base, "binary")

    def test_migrate_v1_shape(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            path.write_text(json.dumps({"stream": {"poll_ms": 450}}), encoding="utf-8")
            cfg = load_config(path)
            self.assertEqual(cfg.refresh.poll_ms, 450)
            self.assertEqual(cfg.config_version, 2)

    def test_normalizes_out_of_range_values(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            raw = {
                "config_version": 2,
                "refresh": {"poll_ms": 10},
                "units": {"temperature": "rankine", "base": "octal"},
                "graphs": {"history_points": 100000},
            }
            path.write_text(json.dumps(raw), encoding="utf-8")
            cfg = load_config(path)
            self.assertEqual(cfg.refresh.poll_ms, 250)
            self.assertEqual(cfg.units.temperature, "celsius")
            self.assertEqual(cfg.units.base, "decimal")
            self.assertEqual(cfg.graphs.history_points, 600)

    def test_corrupt_file_falls_back(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            path.write_text("{not json", encoding="utf-8")
            self.assertEqual(load_config(path), AppConfig())


if __name__ == "__main__":
    unittest.main()
