"""Headless-browser page fetcher with retry/backoff.

Each attempt runs in its own Chromium session opened through
:func:`browser_session`, which closes the browser on every exit path.
The retry behaviour is a :class:`RetryPolicy` injected at construction so
tests can run without real delays.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager, contextmanager
from dataclasses import dataclass, field
from typing import Any

from site_rag.config import settings
from site_rag.ingestion.errors import FetchError

logger = logging.getLogger(__name__)

# Non-content elements removed in the page before the main region is read.
UNWANTED_SELECTOR = "script, style, nav, footer, header, iframe"

_EXTRACT_MAIN_JS = """
(selector) => {
    document.querySelectorAll(selector).forEach((el) => el.remove());
    const main = document.querySelector('main') || document.body;
    return main ? main.innerHTML : '';
}
"""

CHROMIUM_ARGS = ["--no-sandbox", "--disable-setuid-sandbox"]


def linear_backoff(base_seconds: float) -> Callable[[int], float]:
    """Return a backoff function yielding ``base_seconds * attempt``."""

    def _backoff(attempt: int) -> float:
        return base_seconds * attempt

    return _backoff


@dataclass(frozen=True)
class RetryPolicy:
    """How many times to try a fetch and how long to wait in between.

    Attributes
    ----------
    max_attempts:
        Total number of attempts (the first try included).
    backoff:
        Maps the 1-based number of the attempt that just failed to the
        delay in seconds before the next one.
    sleep:
        Blocking sleep function; swapped out in tests.
    """

    max_attempts: int = 3
    backoff: Callable[[int], float] = field(default_factory=lambda: linear_backoff(2.0))
    sleep: Callable[[float], None] = time.sleep

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")

    @classmethod
    def from_settings(cls) -> RetryPolicy:
        return cls(
            max_attempts=settings.fetch_max_attempts,
            backoff=linear_backoff(settings.fetch_backoff_seconds),
        )

    @classmethod
    def no_delay(cls, max_attempts: int = 3) -> RetryPolicy:
        """Policy that retries immediately — handy for tests and scripts."""
        return cls(max_attempts=max_attempts, backoff=lambda _attempt: 0.0, sleep=lambda _s: None)


@contextmanager
def browser_session(headless: bool = True) -> Iterator[Any]:
    """Launch a fresh Chromium instance and yield a new page.

    The browser is closed when the ``with`` block exits, whether it
    returns normally or raises.
    """
    from playwright.sync_api import sync_playwright

    with sync_playwright() as pw:
        browser = pw.chromium.launch(headless=headless, args=CHROMIUM_ARGS)
        try:
            yield browser.new_page()
        finally:
            browser.close()


SessionFactory = Callable[[], AbstractContextManager[Any]]


class PageFetcher:
    """Load a URL in a headless browser and return its main-content HTML.

    Parameters
    ----------
    retry_policy:
        Attempt budget and backoff; defaults to the configured policy.
    session_factory:
        Zero-argument callable returning a context manager that yields a
        Playwright-like page (``goto`` / ``evaluate``).
    timeout_ms:
        Navigation timeout per attempt.
    """

    def __init__(
        self,
        retry_policy: RetryPolicy | None = None,
        *,
        session_factory: SessionFactory = browser_session,
        timeout_ms: int = settings.fetch_timeout_ms,
    ) -> None:
        self.retry_policy = retry_policy or RetryPolicy.from_settings()
        self._session_factory = session_factory
        self.timeout_ms = timeout_ms

    def fetch(self, url: str) -> str:
        """Return the inner HTML of ``<main>`` (or ``<body>``) for *url*.

        Raises
        ------
        FetchError
            When every attempt in the retry budget failed.
        """
        policy = self.retry_policy
        last_exc: Exception | None = None

        for attempt in range(1, policy.max_attempts + 1):
            try:
                return self._fetch_once(url)
            except Exception as exc:
                last_exc = exc
                logger.warning(
                    "Attempt %d/%d failed for %s: %s", attempt, policy.max_attempts, url, exc
                )
                if attempt < policy.max_attempts:
                    policy.sleep(policy.backoff(attempt))

        raise FetchError(url, policy.max_attempts, last_exc) from last_exc

    def _fetch_once(self, url: str) -> str:
        with self._session_factory() as page:
            page.goto(url, wait_until="networkidle", timeout=self.timeout_ms)
            content = page.evaluate(_EXTRACT_MAIN_JS, UNWANTED_SELECTOR)
        if not isinstance(content, str):
            raise TypeError(f"Expected HTML string from page, got {type(content).__name__}")
        return content
