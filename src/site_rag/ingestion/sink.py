"""Buffered, batch-bounded writer into the vector store."""

from __future__ import annotations

import logging

from site_rag.config import settings
from site_rag.ingestion.errors import SinkError
from site_rag.retrieval.base import VectorStoreBase
from site_rag.retrieval.models import VectorRecord

logger = logging.getLogger(__name__)


class VectorSink:
    """Accumulate :class:`VectorRecord` objects and upsert them in batches.

    The caller flushes when :meth:`add` reports a full buffer and once
    more at the end of the run.  No upsert ever carries more than
    *batch_size* records as long as that protocol is followed.

    Parameters
    ----------
    store:
        Destination vector store.
    batch_size:
        Maximum records per upsert call.
    """

    def __init__(self, store: VectorStoreBase, batch_size: int = settings.upsert_batch_size) -> None:
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")
        self._store = store
        self.batch_size = batch_size
        self._pending: list[VectorRecord] = []
        self.flushed = 0

    @property
    def pending(self) -> int:
        """Number of buffered records not yet upserted."""
        return len(self._pending)

    @property
    def is_full(self) -> bool:
        return len(self._pending) >= self.batch_size

    def add(self, record: VectorRecord) -> bool:
        """Buffer *record*; return ``True`` once the buffer needs flushing."""
        if self.is_full:
            raise SinkError(
                "Buffer is full; flush before adding more records",
                {"batch_size": self.batch_size},
            )
        self._pending.append(record)
        return self.is_full

    def flush(self) -> int:
        """Upsert every buffered record in one call and clear the buffer.

        Returns the number of records sent (``0`` without calling the
        store when the buffer is empty).  The buffer is cleared even if
        the upsert fails, so a failed batch is never re-sent; the raised
        :class:`SinkError` names every URL that lost records.
        """
        if not self._pending:
            return 0
        batch, self._pending = self._pending, []
        logger.info("Upserting batch of %d vectors...", len(batch))
        try:
            self._store.upsert(batch)
        except Exception as exc:
            urls = list(dict.fromkeys(r.metadata.url for r in batch))
            raise SinkError(
                "Vector upsert failed",
                {"records": len(batch), "first_id": batch[0].id, "cause": repr(exc)},
                urls=urls,
            ) from exc
        self.flushed += len(batch)
        logger.info("Batch upsert complete (%d total)", self.flushed)
        return len(batch)
