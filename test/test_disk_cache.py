"""Tests for the on-disk response cache."""

import json
import os
import sys
import tempfile
import time
import unittest
from pathlib import Path
from unittest.mock import patch

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from PaperQuery.storage.cache import TEMP_FILE_MAX_AGE, DiskCache, cache_key


class TestCacheKey(unittest.TestCase):
    def test_key_depends_on_query_order_and_body(self) -> None:
        base = cache_key("https://api.openalex.org/works", [("a", "1"), ("b", "2")])
        self.assertNotEqual(base, cache_key("https://api.openalex.org/works", [("b", "2"), ("a", "1")]))
        self.assertNotEqual(base, cache_key("https://api.openalex.org/works", [("a", "1"), ("b", "2")], "{}"))
        self.assertEqual(base, cache_key("https://api.openalex.org/works", [("a", "1"), ("b", "2")]))


class TestDiskCache(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.directory = Path(self._tmp.name) / "cache"

    def test_creates_directory_and_round_trips_text(self) -> None:
        cache = DiskCache(self.directory, ttl=60)

        self.assertIsNone(cache.get("u", [("q", "1")]))
        cache.set("u", [("q", "1")], None, '{"ok": true}')

        self.assertTrue(self.directory.is_dir())
        self.assertEqual(cache.get("u", [("q", "1")]), '{"ok": true}')
        self.assertEqual(list(self.directory.glob("*.tmp")), [])

    def test_expired_entry_reads_as_miss(self) -> None:
        cache = DiskCache(self.directory, ttl=60)
        cache.set("u", [], None, "body")

        with patch("PaperQuery.storage.cache.time.time", return_value=time.time() + 120):
            self.assertIsNone(cache.get("u", []))

    def test_prune_removes_stale_temp_and_corrupt_files(self) -> None:
        self.directory.mkdir(parents=True)
        leftover = self.directory / "leftover.tmp"
        leftover.write_text("x", encoding="utf-8")
        abandoned = time.time() - TEMP_FILE_MAX_AGE - 60
        os.utime(leftover, (abandoned, abandoned))
        (self.directory / "broken.json").write_text("{not json", encoding="utf-8")
        (self.directory / "old.json").write_text(json.dumps({"ts": 0, "body": "b"}), encoding="utf-8")
        (self.directory / "notes.txt").write_text("keep", encoding="utf-8")
        fresh = self.directory / "fresh.json"
        fresh.write_text(json.dumps({"ts": int(time.time()), "body": "b"}), encoding="utf-8")

        DiskCache(self.directory, ttl=60)

        self.assertEqual(sorted(p.name for p in self.directory.iterdir()), ["fresh.json", "notes.txt"])

    def test_prune_keeps_temp_file_of_in_flight_writer(self) -> None:
        self.directory.mkdir(parents=True)
        (self.directory / "writing.tmp").write_text("x", encoding="utf-8")

        removed = DiskCache(self.directory, ttl=60).prune()

        self.assertEqual(removed, 0)
        self.assertTrue((self.directory / "writing.tmp").exists())

    def test_write_failure_is_not_raised(self) -> None:
        cache = DiskCache(self.directory, ttl=60)

        with patch("PaperQuery.storage.cache.os.replace", side_effect=OSError("disk full")):
            cache.set("u", [], None, "body")

        self.assertIsNone(cache.get("u", []))
        self.assertEqual(list(self.directory.iterdir()), [])


if __name__ == "__main__":
    unittest.main()
