"""Exception hierarchy for the ingestion pipeline.

Every error carries a ``details`` dict (URL, attempt, stage, …) so that a
single log line is enough to diagnose a failed run after the fact.
"""

from __future__ import annotations

from typing import Any


class IngestionError(Exception):
    """Base class for all ingestion failures."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class FetchError(IngestionError):
    """Browser navigation or rendering failed on every allowed attempt."""

    def __init__(self, url: str, attempts: int, cause: BaseException | None = None) -> None:
        details: dict[str, Any] = {"url": url, "attempts": attempts}
        if cause is not None:
            details["cause"] = repr(cause)
        super().__init__(f"Failed to fetch {url} after {attempts} attempt(s)", details)
        self.url = url
        self.attempts = attempts
        self.cause = cause


class ParseError(IngestionError):
    """A fetched HTML fragment could not be turned into text."""


class EmbedError(IngestionError):
    """The embedding call failed or returned an unusable vector."""


class SinkError(IngestionError):
    """Upserting a batch into the vector store failed.

    ``urls`` lists, in buffer order, every page that had a record in the
    dropped batch.
    """

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        urls: list[str] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.urls = urls or []


class FatalError(IngestionError):
    """Failure outside the per-URL boundary; the run cannot continue."""
