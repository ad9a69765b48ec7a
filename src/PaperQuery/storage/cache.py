"""Disk-backed response cache keyed by request parameters.

Each entry is one ``<sha256>.json`` file holding ``{"ts": ..., "body": ...}``
where ``body`` is the raw response text. Entries older than the TTL read as
misses and are removed by :meth:`DiskCache.prune`.
"""

from __future__ import annotations

import hashlib
import json
import os
import tempfile
import time
from pathlib import Path
from typing import Sequence

from PaperQuery.utils.log import log

DEFAULT_CACHE_DIR = Path("~/.cache/paper-query/requests").expanduser()
DEFAULT_TTL_SECONDS = 24 * 60 * 60
TEMP_FILE_MAX_AGE = 10 * 60


def cache_key(url: str, query: Sequence[tuple[str, str]], body: str | None = None) -> str:
    """Return the hex digest identifying one request.

    Args:
        url: Absolute request URL without query string.
        query: Ordered query pairs as sent on the wire.
        body: Optional request body (POST requests).

    Returns:
        SHA-256 hex digest.
    """
    payload = json.dumps([url, [list(pair) for pair in query], body], ensure_ascii=False)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


class DiskCache:
    """Read-through cache of HTTP response bodies stored as JSON files."""

    def __init__(self, directory: Path = DEFAULT_CACHE_DIR, ttl: float = DEFAULT_TTL_SECONDS) -> None:
        """Create the cache directory and drop stale files.

        Args:
            directory: Directory for cache files; created if missing.
            ttl: Entry lifetime in seconds.
        """
        self.directory = Path(directory)
        self.ttl = float(ttl)
        self.directory.mkdir(parents=True, exist_ok=True)
        self.prune()

    def get(self, url: str, query: Sequence[tuple[str, str]], body: str | None = None) -> str | None:
        """Return the cached response text, or None on miss or expiry."""
        path = self._path(cache_key(url, query, body))
        entry = _read_entry(path)
        if entry is None:
            return None
        if time.time() - entry[0] > self.ttl:
            return None
        log.debug("Cache hit url=%s", url)
        return entry[1]

    def set(self, url: str, query: Sequence[tuple[str, str]], body: str | None, response: str) -> None:
        """Store response text atomically.

        A failed write is logged and otherwise ignored; the request that
        produced ``response`` has already succeeded.
        """
        path = self._path(cache_key(url, query, body))
        data = json.dumps({"ts": int(time.time()), "body": response}, ensure_ascii=False)
        tmp_name: str | None = None
        try:
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", dir=self.directory, suffix=".tmp", delete=False
            ) as handle:
                tmp_name = handle.name
                handle.write(data)
            os.replace(tmp_name, path)
        except OSError as error:
            log.debug("Cache write failed path=%s error=%s", path, error)
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)

    def prune(self) -> int:
        """Remove abandoned temp files, unreadable files and expired entries.

        A temp file only counts as abandoned once it is older than
        ``TEMP_FILE_MAX_AGE``; a younger one may belong to a concurrent
        writer that has not reached its ``os.replace`` yet.

        Returns:
            Number of files removed.
        """
        removed = 0
        now = time.time()
        try:
            paths = list(self.directory.iterdir())
        except OSError:
            return 0
        for path in paths:
            if path.suffix == ".tmp":
                try:
                    stale = now - path.stat().st_mtime > TEMP_FILE_MAX_AGE
                except OSError:
                    continue
            elif path.suffix == ".json":
                entry = _read_entry(path)
                stale = entry is None or now - entry[0] > self.ttl
            else:
                continue
            if stale:
                try:
                    path.unlink()
                    removed += 1
                except OSError:
                    continue
        if removed:
            log.debug("Cache pruned %d files from %s", removed, self.directory)
        return removed

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"


def _read_entry(path: Path) -> tuple[float, str] | None:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return None
    if not isinstance(data, dict):
        return None
    ts, body = data.get("ts"), data.get("body")
    if isinstance(ts, bool) or not isinstance(ts, (int, float)) or not isinstance(body, str):
        return None
    return float(ts), body
