"""Semantic retriever — metadata-aware search with citation tracking.

Usage::

    from site_rag.retrieval.retriever import SemanticRetriever

    retriever = SemanticRetriever(score_threshold=0.7)
    for r in retriever.search("Which departments does the college have?", k=5):
        print(r.citation.short_ref(), r.content[:80])
"""

from __future__ import annotations

import logging
from typing import Any

from site_rag.retrieval.base import VectorStoreBase
from site_rag.retrieval.models import (
    Citation,
    MetadataFilter,
    RetrievalResult,
    chunk_index_from_id,
)

logger = logging.getLogger(__name__)


class SemanticRetriever:
    """High-level retriever that wraps any :class:`VectorStoreBase`.

    Parameters
    ----------
    store:
        A concrete vector-store backend.  When *None*, a default
        :class:`~site_rag.retrieval.pinecone_store.PineconeVectorStore`
        is created from the global settings.
    default_k:
        Default number of results returned by :meth:`search`.
    score_threshold:
        Results scoring at or below this value are discarded.
    """

    def __init__(
        self,
        store: VectorStoreBase | None = None,
        *,
        default_k: int = 5,
        score_threshold: float = 0.0,
    ) -> None:
        if store is None:
            from site_rag.retrieval.pinecone_store import PineconeVectorStore

            store = PineconeVectorStore()
        self._store = store
        self.default_k = default_k
        self.score_threshold = score_threshold

    def search(
        self,
        query: str,
        *,
        k: int | None = None,
        filters: list[MetadataFilter] | None = None,
    ) -> list[RetrievalResult]:
        """Run a semantic search and return results with citations."""
        k = k or self.default_k
        raw_hits = self._store.similarity_search_by_text(query, k=k, filters=filters)
        results = self._to_results(raw_hits)
        logger.info("Retrieved %d/%d hits above %.2f", len(results), len(raw_hits), self.score_threshold)
        return results

    # -- internals ------------------------------------------------------------

    def _to_results(self, raw_hits: list[dict[str, Any]]) -> list[RetrievalResult]:
        results: list[RetrievalResult] = []
        for hit in raw_hits:
            score = hit.get("score")
            if score is not None and score <= self.score_threshold:
                continue

            meta = hit.get("metadata", {})
            doc_id = hit.get("id")
            citation = Citation(
                document_id=doc_id,
                source=meta.get("url", "unknown"),
                chunk_index=chunk_index_from_id(doc_id) if doc_id else None,
                score=score,
                metadata=meta,
            )
            results.append(RetrievalResult(content=hit.get("content", ""), citation=citation))
        return results
