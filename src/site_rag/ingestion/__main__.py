"""Command-line entry point: ``python -m site_rag.ingestion``.

Exits with status 0 when the run completes (even if some URLs failed)
and 1 on a fatal error.
"""

from __future__ import annotations

import argparse
import logging
import sys

from site_rag.config import settings
from site_rag.ingestion.orchestrator import IngestionOrchestrator

logger = logging.getLogger(__name__)


def build_orchestrator() -> IngestionOrchestrator:
    """Wire the production pipeline from :data:`settings`.

    Values are read here, at call time, so overrides applied to
    :data:`settings` after import take effect.
    """
    from site_rag.ingestion.embedder import EmbedderGateway
    from site_rag.ingestion.fetcher import PageFetcher, RetryPolicy
    from site_rag.ingestion.sink import VectorSink
    from site_rag.retrieval.pinecone_store import PineconeVectorStore

    embedder = EmbedderGateway(dimension=settings.embedding_dimension)
    store = PineconeVectorStore(
        settings.pinecone_index,
        api_key=settings.pinecone_api_key,
        embedder=embedder,
    )
    return IngestionOrchestrator(
        fetcher=PageFetcher(RetryPolicy.from_settings(), timeout_ms=settings.fetch_timeout_ms),
        embedder=embedder,
        sink=VectorSink(store, batch_size=settings.upsert_batch_size),
        chunk_size=settings.chunk_size,
    )


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="site-rag-ingest",
        description="Scrape the configured pages, embed them and upsert the vectors.",
    )
    parser.parse_args(argv)

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        build_orchestrator().run(settings.ingest_urls)
    except Exception:
        logger.exception("Fatal error during ingestion")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
