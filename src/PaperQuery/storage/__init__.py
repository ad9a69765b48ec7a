"""Local persistence for PaperQuery."""

from __future__ import annotations

from PaperQuery.storage.cache import DiskCache

__all__ = ["DiskCache"]
