"""Domain models shared by ingestion and retrieval.

:class:`VectorRecord` and :func:`make_record_id` are the compatibility
contract between the two sides: ingestion writes records in this shape
and the retriever reads ``url`` / ``content`` back out of the metadata.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, Field

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")
_CHUNK_SUFFIX = re.compile(r"_chunk_(\d+)$")


def make_record_id(url: str, chunk_index: int) -> str:
    """Deterministic record id for chunk *chunk_index* of *url*.

    Re-ingesting the same chunk therefore overwrites the stored vector.
    """
    return f"{_NON_ALNUM.sub('_', url)}_chunk_{chunk_index}"


def chunk_index_from_id(record_id: str) -> int | None:
    """Recover the chunk index encoded by :func:`make_record_id`."""
    match = _CHUNK_SUFFIX.search(record_id)
    return int(match.group(1)) if match else None


class RecordMetadata(BaseModel):
    """Metadata stored next to every vector."""

    url: str
    content: str
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())


class VectorRecord(BaseModel):
    """The unit upserted into the vector index."""

    id: str
    values: list[float]
    metadata: RecordMetadata

    @classmethod
    def for_chunk(cls, url: str, chunk_index: int, content: str, values: list[float]) -> VectorRecord:
        return cls(
            id=make_record_id(url, chunk_index),
            values=values,
            metadata=RecordMetadata(url=url, content=content),
        )


class MetadataFilter(BaseModel):
    """Declarative metadata filter for vector-store queries.

    Attributes
    ----------
    field:
        The metadata key to filter on (e.g. ``"url"``).
    operator:
        Comparison operator — one of ``eq``, ``ne``, ``gt``, ``gte``,
        ``lt``, ``lte``, ``in``, ``nin``.
    value:
        The value (or list of values for ``in`` / ``nin``) to compare against.
    """

    field: str
    operator: str = "eq"
    value: Any = None

    @classmethod
    def equals(cls, field: str, value: Any) -> MetadataFilter:
        return cls(field=field, operator="eq", value=value)

    @classmethod
    def one_of(cls, field: str, values: list[Any]) -> MetadataFilter:
        return cls(field=field, operator="in", value=values)


class Citation(BaseModel):
    """Provenance record linking a retrieved chunk back to its page.

    Attributes
    ----------
    citation_id:
        Unique identifier for this citation instance.
    document_id:
        The vector-store id of the chunk (``None`` when unknown).
    source:
        URL of the page the chunk was scraped from.
    chunk_index:
        Ordinal position of the chunk within the page.
    score:
        Similarity score returned by the vector store.
    metadata:
        The stored record metadata.
    retrieved_at:
        UTC timestamp of when the retrieval happened.
    """

    citation_id: str = Field(default_factory=lambda: uuid4().hex[:12])
    document_id: str | None = None
    source: str = "unknown"
    chunk_index: int | None = None
    score: float | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    retrieved_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def short_ref(self) -> str:
        """Return a compact ``[source§chunk]`` reference string."""
        chunk = self.chunk_index if self.chunk_index is not None else "?"
        return f"[{self.source}§{chunk}]"


class RetrievalResult(BaseModel):
    """A single retrieved passage together with its citation."""

    content: str
    citation: Citation

    def __str__(self) -> str:  # noqa: D105
        return f"{self.citation.short_ref()} {self.content[:120]}…"
