"""Chat service — general answer first, retrieval only when it hedges.

Flow for one request:

1. Ask the model the question without context.
2. If the answer contains a hedge phrase (it wants site-specific data),
   retrieve the closest chunks from the vector index.
3. If any chunk clears the score threshold, stream a second answer
   grounded in those chunks; otherwise return the first answer.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from typing import Any

from site_rag.chat.models import ChatAnswer, ChatMessage
from site_rag.chat.prompts import build_context_prompt, build_general_prompt
from site_rag.config import settings
from site_rag.retrieval.retriever import SemanticRetriever

logger = logging.getLogger(__name__)

HEDGE_PHRASES = ("specific", "exact", "please check")


def needs_context(answer: str, phrases: Sequence[str] = HEDGE_PHRASES) -> bool:
    """Return ``True`` when *answer* hedges and site data should be fetched."""
    lowered = answer.lower()
    return any(p in lowered for p in phrases)


def _content_text(content: Any) -> str:
    # Gemini may return a list of parts instead of a plain string.
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "".join(
            part if isinstance(part, str) else str(part.get("text", ""))
            for part in content
            if isinstance(part, (str, dict))
        )
    return str(content or "")


class ChatService:
    """Answer a conversation, augmenting with retrieved pages on demand.

    Parameters
    ----------
    llm:
        LangChain chat model supporting ``invoke`` and ``stream``.
        Defaults to :func:`site_rag.chat.llm.get_llm`.
    retriever:
        Retriever over the ingested pages.  Defaults to one built from
        settings with the configured score threshold.
    top_k:
        Number of chunks requested from the index.
    """

    def __init__(
        self,
        llm: Any | None = None,
        retriever: SemanticRetriever | None = None,
        *,
        top_k: int = settings.retrieval_top_k,
    ) -> None:
        if llm is None:
            from site_rag.chat.llm import get_llm

            llm = get_llm()
        if retriever is None:
            retriever = SemanticRetriever(score_threshold=settings.retrieval_score_threshold)
        self._llm = llm
        self._retriever = retriever
        self.top_k = top_k

    def answer(self, messages: Sequence[ChatMessage]) -> ChatAnswer:
        """Answer the last message of *messages*.

        Raises
        ------
        ValueError
            If *messages* is empty.
        """
        if not messages:
            raise ValueError("No messages provided")

        question = messages[-1].content
        general = _content_text(self._llm.invoke(build_general_prompt(question)).content)

        if not needs_context(general):
            return ChatAnswer(text=general)

        logger.info("General answer hedged; retrieving context")
        results = self._retriever.search(question, k=self.top_k)
        if not results:
            logger.info("No chunk above the score threshold; returning general answer")
            return ChatAnswer(text=general)

        prompt = build_context_prompt(question, results, history=list(messages[:-1]))
        return ChatAnswer(
            stream=self._stream(prompt),
            sources=[r.citation for r in results],
        )

    def _stream(self, prompt: list[Any]) -> Iterator[str]:
        for chunk in self._llm.stream(prompt):
            text = _content_text(chunk.content)
            if text:
                yield text
