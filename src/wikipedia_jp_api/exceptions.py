"""Client-specific exceptions."""

from __future__ import annotations


class WikipediaApiError(Exception):
    """Base exception for all Wikipedia API client failures."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str | None = None,
        attempts: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url
        self.attempts = attempts
        self.cause = cause

    def __str__(self) -> str:
        return str(self.args[0])


class WikipediaValidationError(WikipediaApiError):
    """Raised when options, parameters or payloads are invalid."""


class WikipediaTransportError(WikipediaApiError):
    """Raised for a failed attempt that produced no usable response."""


class WikipediaTimeoutError(WikipediaTransportError):
    """Raised when an attempt exceeds its deadline."""


class WikipediaStatusError(WikipediaApiError):
    """Raised for a non-success HTTP status."""
