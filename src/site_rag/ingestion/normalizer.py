"""HTML → clean, embedding-ready text."""

from __future__ import annotations

import re

from bs4 import BeautifulSoup
from markdownify import markdownify

from site_rag.ingestion.errors import ParseError

_WHITESPACE = re.compile(r"\s+")

# Never visible, even if the browser-side cleanup missed them.
_INVISIBLE_TAGS = ["script", "style", "noscript", "template"]


def clean_text(text: str) -> str:
    """Collapse every whitespace run to a single space and trim the ends."""
    return _WHITESPACE.sub(" ", text).strip()


def normalize(raw_html: str) -> str:
    """Convert an HTML fragment to whitespace-collapsed, markdown-safe text.

    Parameters
    ----------
    raw_html:
        Inner HTML of a page's main content region.

    Returns
    -------
    str
        The visible text, e.g. ``"<p>Hello   world</p>"`` → ``"Hello world"``.

    Raises
    ------
    ParseError
        If *raw_html* is not a string or cannot be parsed.
    """
    if not isinstance(raw_html, str):
        raise ParseError(
            "HTML fragment must be a string",
            {"type": type(raw_html).__name__},
        )
    try:
        soup = BeautifulSoup(raw_html, "html.parser")
        for tag in soup(_INVISIBLE_TAGS):
            tag.decompose()
        text = clean_text(soup.get_text())
        return markdownify(text).strip()
    except Exception as exc:
        raise ParseError("Could not parse HTML fragment", {"cause": repr(exc)}) from exc
