"""
Chat — answers questions about the ingested site.

- :class:`~site_rag.chat.service.ChatService` — hedge-triggered
  retrieval-augmented answering.
- :mod:`site_rag.chat.prompts` — the two prompt templates.
- :func:`~site_rag.chat.llm.get_llm` — chat model factory.
"""
