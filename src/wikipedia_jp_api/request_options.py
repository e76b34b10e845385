"""Per-call overrides for the Wikipedia clients."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class WikipediaApiOptions:
    max_retries: int | None = None
    # milliseconds
    timeout: int | None = None
    user_agent: str | None = None


@dataclass(frozen=True)
class ResolvedOptions:
    max_retries: int
    timeout: int
    user_agent: str

    @property
    def timeout_seconds(self) -> float:
        return self.timeout / 1000.0
