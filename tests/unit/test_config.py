import json
import sys
import tempfile
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "core"))

from rankcard_core.config import AppConfig, load_config, save_config


class ConfigTests(unittest.TestCase):
    def test_load_default_when_missing(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "missing.json"
            cfg = load_config(path)
            self.assertIsInstance(cfg, AppConfig)
            self.assertEqual(cfg.fonts.family, "Manrope")
            self.assertEqual((cfg.canvas.width, cfg.canvas.height), (1000, 380))
            self.assertEqual(cfg.logging.level, "INFO")

    def test_save_and_reload(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            cfg = load_config(path)
            cfg.fonts.fonts_dir = "/opt/fonts"
            cfg.network.timeout_s = 5
            save_config(cfg, path)
            reloaded = load_config(path)
            self.assertEqual(reloaded.fonts.fonts_dir, "/opt/fonts")
            self.assertEqual(reloaded.network.timeout_s, 5.0)

    def test_invalid_values_are_normalized(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            path.write_text(
                json.dumps(
                    {
                        "config_version": 2,
                        "network": {"timeout_s": 9999, "user_agent": ""},
                        "canvas": {"width": -5, "height": "tall"},
                        "logging": {"level": "chatty", "keep_log_files": 0},
                    }
                ),
                encoding="utf-8",
            )
            cfg = load_config(path)
            self.assertEqual(cfg.network.timeout_s, 120.0)
            self.assertTrue(cfg.network.user_agent)
            self.assertEqual((cfg.canvas.width, cfg.canvas.height), (1000, 380))
            self.assertEqual(cfg.logging.level, "INFO")
            self.assertEqual(cfg.logging.keep_log_files, 2)

    def test_migrate_v1_shape(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            path.write_text(json.dumps({"fonts_dir": "/legacy/fonts"}), encoding="utf-8")
            cfg = load_config(path)
            self.assertEqual(cfg.fonts.fonts_dir, "/legacy/fonts")
            self.assertEqual(cfg.config_version, 2)

    def test_corrupt_file_falls_back(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            path.write_text("{not json", encoding="utf-8")
            self.assertIsInstance(load_config(path), AppConfig)


if __name__ == "__main__":
    unittest.main()
