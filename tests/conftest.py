"""Shared pytest configuration and fixtures."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import pytest

from site_rag.retrieval.base import VectorStoreBase
from site_rag.retrieval.models import MetadataFilter, VectorRecord


class RecordingVectorStore(VectorStoreBase):
    """In-memory store that records every upsert call.

    ``fail_on`` holds 1-based upsert call numbers that should raise.
    """

    def __init__(self, fail_on: set[int] | None = None) -> None:
        super().__init__("test-index")
        self.calls: list[list[VectorRecord]] = []
        self.fail_on = fail_on or set()
        self._attempts = 0

    @property
    def upserted_ids(self) -> list[str]:
        return [r.id for batch in self.calls for r in batch]

    def upsert(self, records: Sequence[VectorRecord]) -> None:
        self._attempts += 1
        if self._attempts in self.fail_on:
            raise ConnectionError("index unavailable")
        self.calls.append(list(records))

    def similarity_search(
        self,
        query_embedding: list[float],
        *,
        k: int = 5,
        filters: list[MetadataFilter] | None = None,
    ) -> list[dict[str, Any]]:
        return []

    def similarity_search_by_text(
        self,
        query: str,
        *,
        k: int = 5,
        filters: list[MetadataFilter] | None = None,
    ) -> list[dict[str, Any]]:
        return []

    def health_check(self) -> bool:
        return True


@pytest.fixture()
def recording_store() -> RecordingVectorStore:
    return RecordingVectorStore()


@pytest.fixture()
def failing_store():
    """Factory for stores whose given upsert calls (1-based) raise."""

    def _make(*fail_on: int) -> RecordingVectorStore:
        return RecordingVectorStore(fail_on=set(fail_on))

    return _make
