"""
Crawl context: one depth- and domain-bounded traversal with its own
visited set and pending-work counter. Several contexts can share one
thread pool.
"""

import logging
import threading
from concurrent.futures import Executor
from typing import Callable

import requests

from src.scrapers.web_scraper import is_allowed_domain

logger = logging.getLogger(__name__)

# (html, url, depth) -> None; runs on a pool worker
PageHandler = Callable[[str, str, int], None]


class CrawlContext:
    """
    Schedules page visits on a shared executor.

    visit() is non-blocking and may be called from any thread, including
    pool workers handling another page. A visit counts as pending from the
    moment it is scheduled until its handler has returned, so any visit the
    handler schedules is registered before the parent stops being pending.
    wait() therefore only returns once the whole subtree has been processed.
    """

    def __init__(
        self,
        name: str,
        fetch_page: Callable[[str], str],
        executor: Executor,
        *,
        max_depth: int = 0,
        allowed_domains: list[str] | None = None,
    ) -> None:
        self.name = name
        self.fetch_page = fetch_page
        self.executor = executor
        self.max_depth = max_depth  # 0 means unbounded
        self.allowed_domains = list(allowed_domains or [])
        self.handler: PageHandler | None = None

        self._visited: set[str] = set()
        self._pending = 0
        self._failed = 0
        self._cond = threading.Condition()

    def on_page(self, handler: PageHandler) -> None:
        self.handler = handler

    def visit(self, url: str, depth: int = 1) -> bool:
        """Schedule url at depth. Returns False if it was filtered or already visited."""
        if not url:
            return False
        if self.max_depth > 0 and depth > self.max_depth:
            logger.debug("[CRAWL:%s] Max depth reached, skipping %s", self.name, url)
            return False
        if not is_allowed_domain(url, self.allowed_domains):
            logger.debug("[CRAWL:%s] Domain not allowed, skipping %s", self.name, url)
            return False

        with self._cond:
            if url in self._visited:
                return False
            self._visited.add(url)
            self._pending += 1

        try:
            self.executor.submit(self._run, url, depth)
        except Exception:
            self._done()
            raise
        return True

    def wait(self, timeout: float | None = None) -> bool:
        """Block until no visit is pending. Returns False on timeout."""
        with self._cond:
            return self._cond.wait_for(lambda: self._pending == 0, timeout=timeout)

    @property
    def visited_count(self) -> int:
        with self._cond:
            return len(self._visited)

    @property
    def failed_count(self) -> int:
        with self._cond:
            return self._failed

    # --- Internals ---
    def _run(self, url: str, depth: int) -> None:
        try:
            logger.info("[CRAWL:%s] Visiting %s", self.name, url)
            try:
                html = self.fetch_page(url)
            except requests.RequestException as e:
                logger.error(f"[CRAWL:{self.name}] Failed to fetch {url}: {e}")
                self._mark_failed()
                return
            if self.handler is not None:
                self.handler(html, url, depth)
        except Exception as e:
            logger.error(f"[CRAWL:{self.name}] Handler failed for {url}: {e}")
            self._mark_failed()
        finally:
            self._done()

    def _mark_failed(self) -> None:
        with self._cond:
            self._failed += 1

    def _done(self) -> None:
        with self._cond:
            self._pending -= 1
            if self._pending == 0:
                self._cond.notify_all()
