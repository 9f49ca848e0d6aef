"""
Serving — FastAPI application for the chat assistant.

Run locally with ``uvicorn site_rag.serving.app:app``.
"""
