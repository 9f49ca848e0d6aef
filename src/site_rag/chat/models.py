"""Request/answer models for the chat service."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Literal

from pydantic import BaseModel

from site_rag.retrieval.models import Citation


class ChatMessage(BaseModel):
    """One turn of the conversation as sent by the client."""

    role: Literal["user", "assistant", "system"] = "user"
    content: str


@dataclass
class ChatAnswer:
    """Either a complete ``text`` or a ``stream`` of text pieces.

    ``sources`` lists the citations that fed a context-augmented answer
    and is empty for a general-knowledge answer.
    """

    text: str | None = None
    stream: Iterator[str] | None = None
    sources: list[Citation] = field(default_factory=list)

    @property
    def is_streaming(self) -> bool:
        return self.stream is not None

    def iter_text(self) -> Iterator[str]:
        if self.stream is not None:
            yield from self.stream
        elif self.text:
            yield self.text
