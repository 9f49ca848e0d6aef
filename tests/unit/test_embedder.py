"""Unit tests for the embedding gateway."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from site_rag.ingestion.embedder import EmbedderGateway
from site_rag.ingestion.errors import EmbedError


def _gateway(documents=None, query=None, *, side_effect=None, dimension: int = 3) -> tuple[EmbedderGateway, MagicMock]:
    embeddings = MagicMock()
    embeddings.embed_documents.return_value = documents
    embeddings.embed_query.return_value = query
    if side_effect is not None:
        embeddings.embed_documents.side_effect = side_effect
        embeddings.embed_query.side_effect = side_effect
    return EmbedderGateway(embeddings, dimension=dimension), embeddings


def test_embed_makes_one_call_per_chunk() -> None:
    gateway, embeddings = _gateway(documents=[[0.1, 0.2, 0.3]])
    assert gateway.embed("chunk text") == [0.1, 0.2, 0.3]
    embeddings.embed_documents.assert_called_once_with(["chunk text"])


def test_embed_casts_ints_to_float() -> None:
    gateway, _ = _gateway(documents=[[1, 2, 3]])
    vector = gateway.embed("x")
    assert vector == [1.0, 2.0, 3.0]
    assert all(isinstance(v, float) for v in vector)


def test_api_failure_wrapped() -> None:
    gateway, _ = _gateway(side_effect=RuntimeError("429 quota exceeded"))
    with pytest.raises(EmbedError, match="Embedding request failed") as excinfo:
        gateway.embed("x")
    assert isinstance(excinfo.value.__cause__, RuntimeError)


@pytest.mark.parametrize(
    "documents,message",
    [
        ([], "no vectors"),
        ([[]], "values missing"),
        ([None], "values missing"),
        ([[0.1, "nan?", 0.3]], "non-numeric"),
        ([[0.1, float("nan"), 0.3]], "non-numeric"),
        ([[0.1, 0.2]], "dimension"),
    ],
)
def test_malformed_response_rejected(documents, message: str) -> None:
    gateway, _ = _gateway(documents=documents)
    with pytest.raises(EmbedError, match=message):
        gateway.embed("x")


def test_dimension_check_disabled_with_zero() -> None:
    gateway, _ = _gateway(documents=[[0.5] * 5], dimension=0)
    assert len(gateway.embed("x")) == 5


def test_embed_query_validates_too() -> None:
    gateway, embeddings = _gateway(query=[0.0, 1.0, 0.0])
    assert gateway.embed_query("question?") == [0.0, 1.0, 0.0]
    embeddings.embed_query.assert_called_once_with("question?")

    bad, _ = _gateway(query=[])
    with pytest.raises(EmbedError):
        bad.embed_query("question?")
