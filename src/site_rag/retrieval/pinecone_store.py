"""Pinecone implementation of the vector-store abstraction."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from pinecone import Pinecone

from site_rag.config import settings
from site_rag.retrieval.base import VectorStoreBase
from site_rag.retrieval.models import MetadataFilter, VectorRecord

if TYPE_CHECKING:
    from site_rag.ingestion.embedder import EmbedderGateway

logger = logging.getLogger(__name__)

_OP_MAP = {
    "eq": "$eq",
    "ne": "$ne",
    "gt": "$gt",
    "gte": "$gte",
    "lt": "$lt",
    "lte": "$lte",
    "in": "$in",
    "nin": "$nin",
}


def _build_pinecone_filter(filters: list[MetadataFilter]) -> dict[str, Any] | None:
    """Convert a list of :class:`MetadataFilter` to Pinecone filter syntax."""
    if not filters:
        return None

    clauses: list[dict[str, Any]] = []
    for f in filters:
        op = _OP_MAP.get(f.operator)
        if op is None:
            raise ValueError(f"Unsupported filter operator: {f.operator!r}")
        clauses.append({f.field: {op: f.value}})

    if len(clauses) == 1:
        return clauses[0]
    return {"$and": clauses}


def _field(obj: Any, name: str, default: Any = None) -> Any:
    # Pinecone responses are objects, but dicts show up in older clients and in fakes.
    if isinstance(obj, dict):
        return obj.get(name, default)
    return getattr(obj, name, default)


class PineconeVectorStore(VectorStoreBase):
    """Pinecone-backed vector store.

    Parameters
    ----------
    index_name:
        Name of the Pinecone index.  Its dimension must match the
        embedding model.
    api_key:
        Pinecone API key.
    index:
        Pre-built index handle; when given, no client is created.
    embedder:
        Gateway used by :meth:`similarity_search_by_text`; created lazily.
    """

    def __init__(
        self,
        index_name: str = settings.pinecone_index,
        *,
        api_key: str = settings.pinecone_api_key,
        index: Any | None = None,
        embedder: EmbedderGateway | None = None,
    ) -> None:
        super().__init__(index_name)
        if index is None:
            index = Pinecone(api_key=api_key).Index(index_name)
        self._index = index
        self._embedder = embedder

    # -- VectorStoreBase overrides --------------------------------------------

    def upsert(self, records: Sequence[VectorRecord]) -> None:
        if not records:
            return
        vectors = [record.model_dump() for record in records]
        self._index.upsert(vectors=vectors)
        logger.debug("Upserted %d vectors into %s", len(vectors), self.index_name)

    def similarity_search(
        self,
        query_embedding: list[float],
        *,
        k: int = 5,
        filters: list[MetadataFilter] | None = None,
    ) -> list[dict[str, Any]]:
        kwargs: dict[str, Any] = {
            "vector": query_embedding,
            "top_k": k,
            "include_metadata": True,
        }
        pinecone_filter = _build_pinecone_filter(filters) if filters else None
        if pinecone_filter is not None:
            kwargs["filter"] = pinecone_filter

        response = self._index.query(**kwargs)

        hits: list[dict[str, Any]] = []
        for match in _field(response, "matches", []) or []:
            meta = dict(_field(match, "metadata") or {})
            hits.append(
                {
                    "id": _field(match, "id"),
                    "content": meta.get("content", ""),
                    "score": _field(match, "score"),
                    "metadata": meta,
                }
            )
        return hits

    def similarity_search_by_text(
        self,
        query: str,
        *,
        k: int = 5,
        filters: list[MetadataFilter] | None = None,
    ) -> list[dict[str, Any]]:
        if self._embedder is None:
            from site_rag.ingestion.embedder import EmbedderGateway

            self._embedder = EmbedderGateway()
        embedding = self._embedder.embed_query(query)
        return self.similarity_search(embedding, k=k, filters=filters)

    def health_check(self) -> bool:
        try:
            self._index.describe_index_stats()
            return True
        except Exception:
            logger.warning("Pinecone health-check failed", exc_info=True)
            return False
