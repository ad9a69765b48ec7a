"""Exceptions raised by the Zotero client."""

from __future__ import annotations


class ZoteroError(Exception):
    """Base exception for Zotero request failures."""


class ZoteroHttpError(ZoteroError):
    """Transport failure: connection error, timeout or exhausted retries."""


class ZoteroApiError(ZoteroError):
    """Non-success HTTP status, or a lookup that found nothing (404)."""

    def __init__(self, status: int, message: str) -> None:
        self.status = status
        self.message = message
        super().__init__(f"API error {status}: {message}")


class ZoteroJsonError(ZoteroError):
    """Response body could not be decoded."""
