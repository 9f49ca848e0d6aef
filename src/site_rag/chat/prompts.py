"""Prompt templates for the chat assistant.

Two prompts: a general-knowledge first pass, and a context-augmented
second pass built from retrieved page chunks.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from langchain_core.messages import HumanMessage, SystemMessage

if TYPE_CHECKING:
    from langchain_core.messages import BaseMessage

    from site_rag.chat.models import ChatMessage
    from site_rag.retrieval.models import RetrievalResult

ASSISTANT_NAME = "BIT Sathy (Bannari Amman Institute of Technology)"

# ── 1. General-knowledge pass ─────────────────────────────────────────

GENERAL_SYSTEM = f"""\
You are a helpful assistant for {ASSISTANT_NAME}.
Answer the question with your general knowledge. If you need specific
data about the institution, say so and it will be provided.
"""


def build_general_prompt(question: str) -> list[BaseMessage]:
    """Build the first-pass prompt answered without retrieved context."""
    return [
        SystemMessage(content=GENERAL_SYSTEM),
        HumanMessage(content=f'Question: "{question}"'),
    ]


# ── 2. Context-augmented pass ─────────────────────────────────────────

CONTEXT_SYSTEM = f"""\
You are a helpful assistant for {ASSISTANT_NAME}.
Use the provided sources to answer the question.

Instructions:
1. Answer using the provided sources and your general knowledge
2. If information is missing or unclear, say so
3. Cite sources when relevant
4. Be professional and helpful
"""


def build_context_prompt(
    question: str,
    results: list[RetrievalResult],
    history: list[ChatMessage] | None = None,
) -> list[BaseMessage]:
    """Build the second-pass prompt.

    Parameters
    ----------
    question:
        The latest user message.
    results:
        Retrieved chunks, already filtered by score.
    history:
        Earlier conversation turns, oldest first.
    """
    parts = [f"Sources:\n{format_sources(results)}\n"]
    if history:
        previous = "\n".join(f"{m.role}: {m.content}" for m in history)
        parts.append(f"Previous messages:\n{previous}\n")
    parts.append(f"Current question: {question}\n")
    parts.append("Answer:")
    return [
        SystemMessage(content=CONTEXT_SYSTEM),
        HumanMessage(content="\n".join(parts)),
    ]


def format_sources(results: list[RetrievalResult]) -> str:
    """Numbered listing with relevance percentage and page URL."""
    parts: list[str] = []
    for i, r in enumerate(results, 1):
        score = r.citation.score or 0.0
        parts.append(
            f"Source {i} ({score * 100:.1f}% relevant):\n"
            f"From: {r.citation.source}\n"
            f"Content: {r.content}"
        )
    return "\n\n".join(parts)
