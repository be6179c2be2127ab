"""Aggregation sink and top-N ranking of crawled articles."""

import logging
import threading

from src.models import Article

logger = logging.getLogger(__name__)


class SinkClosedError(RuntimeError):
    """Raised when an article is published after the sink was closed."""


class ArticleSink:
    """
    文章汇聚点 (Single rendezvous point for article records).

    Many crawl workers publish concurrently; one consumer calls drain(),
    which blocks until close() has been called and then returns everything
    that was published.
    """

    def __init__(self) -> None:
        self._items: list[Article] = []
        self._closed = False
        self._cond = threading.Condition()

    def publish(self, article: Article) -> None:
        with self._cond:
            if self._closed:
                raise SinkClosedError(f"sink closed, dropping {article.url}")
            self._items.append(article)

    def close(self) -> None:
        with self._cond:
            self._closed = True
            self._cond.notify_all()

    @property
    def closed(self) -> bool:
        with self._cond:
            return self._closed

    def drain(self, timeout: float | None = None) -> list[Article]:
        with self._cond:
            if not self._cond.wait_for(lambda: self._closed, timeout=timeout):
                raise TimeoutError("article sink was not closed in time")
            return list(self._items)


def rank_articles(articles: list[Article], top_n: int = 10) -> list[Article]:
    """Sort by likes (descending) and keep the first top_n. Tie order is not defined."""
    ranked = sorted(articles, key=lambda a: a.likes, reverse=True)
    if top_n > 0:
        ranked = ranked[:top_n]
    logger.info("[RANK] selected top %s/%s articles", len(ranked), len(articles))
    return ranked
