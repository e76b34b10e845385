"""Endpoint validation and query-string helpers."""

from __future__ import annotations

from typing import Any, Mapping
from urllib.parse import urlparse

from .exceptions import WikipediaValidationError

DEFAULT_PARAMS: Mapping[str, str] = {
    "format": "json",
    "formatversion": "2",
    "origin": "*",
}


def validate_endpoint_url(url: str, *, allow_http: bool = False) -> None:
    """Reject endpoints that are not absolute http(s) URLs."""
    if "\x00" in url:
        raise WikipediaValidationError("Invalid endpoint URL")
    parsed = urlparse(url)
    if not parsed.scheme or not parsed.netloc:
        raise WikipediaValidationError("endpoint must include scheme and host")
    if parsed.scheme not in {"http", "https"}:
        raise WikipediaValidationError(f"Unsupported endpoint scheme: {parsed.scheme}")
    if parsed.scheme == "http" and not allow_http:
        allowed = {"localhost", "127.0.0.1", "::1"}
        host = (parsed.hostname or "").lower()
        if host not in allowed:
            raise WikipediaValidationError("Non-HTTPS endpoint is not allowed without allow_http=True")


def stringify_param(value: Any) -> str:
    """Render one parameter value the way MediaWiki expects it on the wire."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return "|".join(stringify_param(v) for v in value)
    return str(value)


def merge_params(params: Mapping[str, Any] | None) -> dict[str, str]:
    """Overlay caller params on the defaults and stringify every value.

    Caller keys win on collision. ``None`` values are dropped so optional
    arguments can be passed through unconditionally.
    """
    merged: dict[str, Any] = dict(DEFAULT_PARAMS)
    if params:
        for key, value in params.items():
            if not isinstance(key, str):
                raise WikipediaValidationError(f"parameter names must be strings, got {key!r}")
            merged[key] = value
    return {key: stringify_param(value) for key, value in merged.items() if value is not None}
