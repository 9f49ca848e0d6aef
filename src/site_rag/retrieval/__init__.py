"""
Retrieval — vector storage, semantic search, and citations.

Public surface
--------------
- :class:`SemanticRetriever` — search with citations.
- :class:`VectorStoreBase` — abstract backend.
- :class:`PineconeVectorStore` — default Pinecone backend.
- :class:`VectorRecord`, :class:`Citation`, :class:`RetrievalResult`,
  :class:`MetadataFilter` — data models.
"""

from site_rag.retrieval.base import VectorStoreBase
from site_rag.retrieval.models import (
    Citation,
    MetadataFilter,
    RetrievalResult,
    VectorRecord,
    make_record_id,
)
from site_rag.retrieval.retriever import SemanticRetriever

__all__ = [
    "Citation",
    "MetadataFilter",
    "PineconeVectorStore",
    "RetrievalResult",
    "SemanticRetriever",
    "VectorRecord",
    "VectorStoreBase",
    "make_record_id",
]


def __getattr__(name: str):  # noqa: ANN001
    """Lazy-import PineconeVectorStore to avoid pulling in the client at import time."""
    if name == "PineconeVectorStore":
        from site_rag.retrieval.pinecone_store import PineconeVectorStore

        return PineconeVectorStore
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
