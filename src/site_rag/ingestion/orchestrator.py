"""Ingestion orchestrator — fetch → normalize → chunk → embed → upsert.

URLs are processed one at a time, in order.  A failure while handling a
URL is logged and recorded in the :class:`IngestionReport`, then the run
moves on to the next URL; vectors already upserted are never touched.
Only the trailing flush after the loop can fail the whole run.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from site_rag.config import settings
from site_rag.ingestion.chunker import chunk_document
from site_rag.ingestion.embedder import EmbedderGateway
from site_rag.ingestion.errors import FatalError, IngestionError, SinkError
from site_rag.ingestion.fetcher import PageFetcher
from site_rag.ingestion.models import IngestionReport, UrlOutcome, UrlStage
from site_rag.ingestion.normalizer import normalize
from site_rag.ingestion.sink import VectorSink
from site_rag.retrieval.models import VectorRecord

logger = logging.getLogger(__name__)


class IngestionOrchestrator:
    """Drive the ingestion pipeline over a list of URLs.

    Parameters
    ----------
    fetcher:
        Page fetcher (owns the retry policy).
    embedder:
        Embedding gateway, called once per chunk.
    sink:
        Vector sink; its buffer is flushed whenever it fills up.
    chunk_size:
        Maximum characters per chunk.
    normalizer:
        HTML → text function; defaults to :func:`normalize`.
    """

    def __init__(
        self,
        fetcher: PageFetcher,
        embedder: EmbedderGateway,
        sink: VectorSink,
        *,
        chunk_size: int = settings.chunk_size,
        normalizer: Callable[[str], str] = normalize,
    ) -> None:
        self.fetcher = fetcher
        self.embedder = embedder
        self.sink = sink
        self.chunk_size = chunk_size
        self._normalize = normalizer

    def run(self, urls: Iterable[str]) -> IngestionReport:
        """Ingest every URL and flush the final partial batch.

        Raises
        ------
        FatalError
            If the final flush fails.
        """
        report = IngestionReport()
        for url in urls:
            logger.info("Processing %s", url)
            self._process_url(url, report)

        try:
            remaining = self.sink.flush()
        except IngestionError as exc:
            raise FatalError(
                "Final batch upsert failed",
                {"cause": str(exc), "urls": getattr(exc, "urls", [])},
            ) from exc
        if remaining:
            logger.info("Final batch upsert complete (%d vectors)", remaining)

        report.records_upserted = self.sink.flushed
        if report.failed_urls:
            logger.warning(
                "%d URL(s) failed and can be replayed: %s",
                len(report.failed_urls),
                ", ".join(report.failed_urls),
            )
        logger.info(
            "Ingestion complete: %d/%d URLs, %d vectors upserted",
            len(report.succeeded_urls),
            len(report.outcomes),
            report.records_upserted,
        )
        return report

    def _process_url(self, url: str, report: IngestionReport) -> UrlOutcome:
        outcome = UrlOutcome(url=url)
        report.outcomes.append(outcome)
        try:
            outcome.stage = UrlStage.FETCHING
            raw_html = self.fetcher.fetch(url)

            outcome.stage = UrlStage.NORMALIZING
            text = self._normalize(raw_html)

            outcome.stage = UrlStage.CHUNKING_EMBEDDING
            for chunk in chunk_document(url, text, self.chunk_size):
                values = self.embedder.embed(chunk.content)
                record = VectorRecord.for_chunk(url, chunk.index, chunk.content, values)
                if self.sink.add(record):
                    self.sink.flush()
                outcome.chunks += 1
        except IngestionError as exc:
            self._mark_failed(outcome, exc)
            logger.error("Error processing %s during %s: %s", url, outcome.failed_stage.value, exc)
            if isinstance(exc, SinkError):
                self._fail_dropped_urls(report, exc, url)
            return outcome
        except Exception as exc:
            self._mark_failed(outcome, exc)
            logger.exception("Unexpected error processing %s during %s", url, outcome.failed_stage.value)
            return outcome

        outcome.stage = UrlStage.SUNK
        if not outcome.chunks:
            logger.warning("No content extracted from %s", url)
        else:
            logger.info("✓ %s (%d chunks)", url, outcome.chunks)
        return outcome

    @staticmethod
    def _mark_failed(outcome: UrlOutcome, exc: Exception) -> None:
        outcome.failed_stage = outcome.stage
        outcome.stage = UrlStage.FAILED
        outcome.error = str(exc)

    @classmethod
    def _fail_dropped_urls(cls, report: IngestionReport, exc: SinkError, current_url: str) -> None:
        """Fail earlier URLs whose buffered records went down with *exc*'s batch."""
        for outcome in report.outcomes:
            if outcome.url == current_url or outcome.url not in exc.urls:
                continue
            if outcome.stage is UrlStage.FAILED:
                continue
            cls._mark_failed(outcome, exc)
            outcome.error = f"Records dropped by a failed batch upsert during {current_url}: {exc}"
            logger.error("Records from %s lost in failed batch upsert: %s", outcome.url, exc)
