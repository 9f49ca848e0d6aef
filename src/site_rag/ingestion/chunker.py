"""Fixed-size character chunking."""

from __future__ import annotations

from site_rag.ingestion.models import Chunk

DEFAULT_CHUNK_SIZE = 1000


def split_text(text: str, size: int = DEFAULT_CHUNK_SIZE) -> list[str]:
    """Split *text* into consecutive, non-overlapping windows.

    Every window except possibly the last is exactly *size* characters
    long, so ``"".join(split_text(t, n)) == t``.  Empty text yields ``[]``.
    """
    if size <= 0:
        raise ValueError(f"chunk size must be positive, got {size}")
    return [text[start : start + size] for start in range(0, len(text), size)]


def chunk_document(url: str, text: str, size: int = DEFAULT_CHUNK_SIZE) -> list[Chunk]:
    """Split one page's text into :class:`Chunk` objects indexed by position.

    Parameters
    ----------
    url:
        Source page; carried on every chunk.
    text:
        Normalized document text.
    size:
        Maximum number of characters per chunk.
    """
    return [
        Chunk(url=url, index=i, content=window)
        for i, window in enumerate(split_text(text, size))
    ]
