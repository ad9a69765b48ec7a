"""Exceptions raised by the OpenAlex client."""

from __future__ import annotations


class OpenAlexError(Exception):
    """Base exception for OpenAlex request failures."""


class OpenAlexHttpError(OpenAlexError):
    """Transport failure: connection error, timeout or exhausted retries."""


class OpenAlexApiError(OpenAlexError):
    """Non-success HTTP status returned by the API."""

    def __init__(self, status: int, message: str) -> None:
        self.status = status
        self.message = message
        super().__init__(f"API error {status}: {message}")


class OpenAlexJsonError(OpenAlexError):
    """Response body could not be decoded into the expected shape."""
