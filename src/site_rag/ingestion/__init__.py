"""
Ingestion — scrape, clean, chunk, embed and upsert a fixed set of pages.

    fetch (headless browser) → normalize → chunk → embed → batch upsert

Run it with ``python -m site_rag.ingestion``.
"""
