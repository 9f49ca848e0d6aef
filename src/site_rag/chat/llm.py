"""LLM initialisation — single place to swap chat providers."""

from __future__ import annotations

import logging

from langchain_google_genai import ChatGoogleGenerativeAI

from site_rag.config import settings

logger = logging.getLogger(__name__)


def get_llm(temperature: float = 0.0) -> ChatGoogleGenerativeAI:
    """Return the configured Gemini chat model."""
    logger.debug("Using chat model %s", settings.chat_model)
    return ChatGoogleGenerativeAI(
        model=settings.chat_model,
        temperature=temperature,
        google_api_key=settings.google_api_key,
    )
