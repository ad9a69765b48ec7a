"""Tests for config override behavior with defaults."""

import sys
import tempfile
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from PaperQuery.config import load_config, load_config_with_defaults


class TestConfigOverride(unittest.TestCase):
    def test_packaged_defaults_load(self) -> None:
        cfg = load_config()
        self.assertEqual(cfg.runtime.level, "WARNING")
        self.assertEqual(cfg.openalex.base_url, "https://api.openalex.org")
        self.assertEqual(cfg.openalex.resolve_workers, 4)
        self.assertFalse(cfg.zotero.prefer_local)
        self.assertTrue(cfg.cache.enabled)

    def test_override_merges_with_defaults(self) -> None:
        override_yaml = """
log:
  level: DEBUG

openalex:
  mailto: me@example.org

cache:
  enabled: false
"""
        with tempfile.TemporaryDirectory() as tmp:
            override_path = Path(tmp) / "override.yml"
            override_path.write_text(override_yaml, encoding="utf-8")
            cfg = load_config_with_defaults(override_path)

        self.assertEqual(cfg.runtime.level, "DEBUG")
        self.assertFalse(cfg.runtime.to_file)
        self.assertEqual(cfg.openalex.mailto, "me@example.org")
        self.assertEqual(cfg.openalex.timeout, 30.0)
        self.assertFalse(cfg.cache.enabled)
        self.assertEqual(cfg.cache.ttl_seconds, 86400)

    def test_override_root_must_be_mapping(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            override_path = Path(tmp) / "override.yml"
            override_path.write_text("- a\n- b\n", encoding="utf-8")
            with self.assertRaisesRegex(ValueError, "mapping"):
                load_config_with_defaults(override_path)

    def test_empty_override_keeps_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            override_path = Path(tmp) / "override.yml"
            override_path.write_text("", encoding="utf-8")
            cfg = load_config_with_defaults(override_path)
        self.assertEqual(cfg.zotero.base_url, "https://api.zotero.org")


if __name__ == "__main__":
    unittest.main()
