"""Run-scoped ingestion models: chunks and the per-URL report."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, Field


class Chunk(BaseModel):
    """A positional slice of one page's normalized text."""

    url: str
    index: int = Field(ge=0)
    content: str


class UrlStage(str, Enum):
    """Where a URL is in the pipeline (terminal: ``SUNK`` / ``FAILED``)."""

    PENDING = "pending"
    FETCHING = "fetching"
    NORMALIZING = "normalizing"
    CHUNKING_EMBEDDING = "chunking_embedding"
    SUNK = "sunk"
    FAILED = "failed"


@dataclass
class UrlOutcome:
    """Result of processing one URL.

    ``stage`` is the last stage reached; for a failed URL ``failed_stage``
    names the stage that raised and ``error`` holds the message.  A URL
    whose records were lost in a later failed batch upsert keeps
    ``failed_stage = SUNK``.
    """

    url: str
    stage: UrlStage = UrlStage.PENDING
    chunks: int = 0
    failed_stage: UrlStage | None = None
    error: str = ""


@dataclass
class IngestionReport:
    """Summary of a whole ingestion run."""

    outcomes: list[UrlOutcome] = field(default_factory=list)
    records_upserted: int = 0

    @property
    def failed_urls(self) -> list[str]:
        """URLs to replay — the run's dead-letter list, in input order."""
        return [o.url for o in self.outcomes if o.stage is UrlStage.FAILED]

    @property
    def succeeded_urls(self) -> list[str]:
        return [o.url for o in self.outcomes if o.stage is UrlStage.SUNK]
