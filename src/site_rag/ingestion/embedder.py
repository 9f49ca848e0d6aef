"""Embedding gateway — one model call per chunk."""

from __future__ import annotations

import logging
import math
from numbers import Real
from typing import TYPE_CHECKING, Any

from langchain_google_genai import GoogleGenerativeAIEmbeddings

from site_rag.config import settings
from site_rag.ingestion.errors import EmbedError

if TYPE_CHECKING:
    from langchain_core.embeddings import Embeddings

logger = logging.getLogger(__name__)


def get_embedding_function() -> GoogleGenerativeAIEmbeddings:
    """Return the configured Gemini embedding model."""
    return GoogleGenerativeAIEmbeddings(
        model=settings.embedding_model,
        google_api_key=settings.google_api_key,
    )


class EmbedderGateway:
    """Validate and return embedding vectors from a LangChain ``Embeddings``.

    Parameters
    ----------
    embeddings:
        Any LangChain embeddings implementation.  Defaults to Gemini.
    dimension:
        Expected vector length (the index dimensionality); ``0`` skips
        the check.
    """

    def __init__(
        self,
        embeddings: Embeddings | None = None,
        *,
        dimension: int = settings.embedding_dimension,
    ) -> None:
        self._embeddings = embeddings if embeddings is not None else get_embedding_function()
        self.dimension = dimension

    def embed(self, text: str) -> list[float]:
        """Embed one chunk of page content for storage."""
        try:
            result = self._embeddings.embed_documents([text])
        except Exception as exc:
            raise EmbedError("Embedding request failed", {"cause": repr(exc)}) from exc
        if not result:
            raise EmbedError("Embedding response contained no vectors", {"chars": len(text)})
        vector = self._validate(result[0])
        logger.debug("Embedded %d chars (dim=%d)", len(text), len(vector))
        return vector

    def embed_query(self, text: str) -> list[float]:
        """Embed a user question for similarity search."""
        try:
            values = self._embeddings.embed_query(text)
        except Exception as exc:
            raise EmbedError("Query embedding request failed", {"cause": repr(exc)}) from exc
        return self._validate(values)

    def _validate(self, values: Any) -> list[float]:
        if not values:
            raise EmbedError("Embedding values missing")
        vector: list[float] = []
        for v in values:
            if isinstance(v, bool) or not isinstance(v, Real) or not math.isfinite(v):
                raise EmbedError("Embedding contains a non-numeric value", {"value": repr(v)})
            vector.append(float(v))
        if self.dimension and len(vector) != self.dimension:
            raise EmbedError(
                "Embedding dimension does not match the index",
                {"expected": self.dimension, "got": len(vector)},
            )
        return vector
