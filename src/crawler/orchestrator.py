"""
Crawl orchestrator.
Drives the listing crawl and the article crawl on one thread pool, collects
article records and ranks them once both crawls have drained.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from functools import partial
from typing import Callable

from config import (
    ALLOWED_DOMAINS,
    BASE_URL,
    COMMENTS_API_URL,
    CRAWL_WINDOW_DAYS,
    LISTING_MAX_DEPTH,
    PARALLELISM,
    REQUEST_TIMEOUT_SECONDS,
    TOP_N,
)
from src.crawler.context import CrawlContext
from src.models import Article, CrawlAction, CrawlWindow, EmitArticle, VisitArticle, VisitListing
from src.ranking import ArticleSink, rank_articles
from src.scrapers.article_scraper import scrape_article
from src.scrapers.comments_client import CommentsClient
from src.scrapers.listing_scraper import parse_listing_page
from src.scrapers.web_scraper import build_session, fetch_page

logger = logging.getLogger(__name__)


@dataclass
class CrawlResult:
    """Outcome of one crawl run."""
    ranked: list[Article] = field(default_factory=list)
    total_articles: int = 0     # records published to the sink
    listing_pages: int = 0      # listing URLs scheduled (root included)
    article_pages: int = 0      # article URLs scheduled
    failed_pages: int = 0
    duration_seconds: float = 0.0


class CrawlOrchestrator:
    """
    Owns the two crawl contexts.

    The listing context starts from the root URL and follows categories and
    pagination up to max_depth. Article URLs found on listing pages go to the
    article context, which never seeds itself. Completion: listing drained,
    then article drained, then the sink is closed.
    """

    def __init__(
        self,
        fetch_page: Callable[[str], str],
        count_likes: Callable[[str], int],
        *,
        window: CrawlWindow,
        base_url: str = BASE_URL,
        max_depth: int = LISTING_MAX_DEPTH,
        allowed_domains: list[str] | None = None,
        parallelism: int = PARALLELISM,
        top_n: int = TOP_N,
    ) -> None:
        self.fetch_page = fetch_page
        self.count_likes = count_likes
        self.window = window
        self.base_url = base_url.rstrip("/")
        self.max_depth = max_depth
        self.allowed_domains = ALLOWED_DOMAINS if allowed_domains is None else allowed_domains
        self.parallelism = max(1, parallelism)
        self.top_n = top_n

    def run(self, root_url: str | None = None) -> CrawlResult:
        root_url = root_url or f"{self.base_url}/"
        started = time.perf_counter()
        sink = ArticleSink()

        with ThreadPoolExecutor(max_workers=self.parallelism,
                                thread_name_prefix="crawl") as executor:
            listing = CrawlContext(
                "listing",
                self.fetch_page,
                executor,
                max_depth=self.max_depth,
                allowed_domains=self.allowed_domains,
            )
            articles = CrawlContext(
                "article",
                self.fetch_page,
                executor,
                max_depth=self.max_depth,
                allowed_domains=self.allowed_domains,
            )
            listing.on_page(partial(self._handle_listing_page, listing, articles, sink))
            articles.on_page(partial(self._handle_article_page, sink))

            logger.info(
                "[CRAWL] Start root=%s window=%s..%s parallelism=%s max_depth=%s",
                root_url,
                self.window.from_unix,
                self.window.to_unix,
                self.parallelism,
                self.max_depth,
            )
            listing.visit(root_url, depth=1)

            # Article visits are scheduled by listing handlers, so the
            # listing crawl has to drain first.
            listing.wait()
            articles.wait()
            sink.close()

        collected = sink.drain()
        result = CrawlResult(
            ranked=rank_articles(collected, self.top_n),
            total_articles=len(collected),
            listing_pages=listing.visited_count,
            article_pages=articles.visited_count,
            failed_pages=listing.failed_count + articles.failed_count,
            duration_seconds=round(time.perf_counter() - started, 3),
        )
        logger.info(
            "[CRAWL] Done listing_pages=%s article_pages=%s articles=%s failed=%s duration=%.2fs",
            result.listing_pages,
            result.article_pages,
            result.total_articles,
            result.failed_pages,
            result.duration_seconds,
        )
        return result

    # --- Handlers (run on pool workers) ---
    def _handle_listing_page(self, listing: CrawlContext, articles: CrawlContext,
                             sink: ArticleSink, html: str, url: str, depth: int) -> None:
        actions = parse_listing_page(html, url, self.window, self.base_url)
        for action in actions:
            self._dispatch(action, depth, listing, articles, sink)

    def _handle_article_page(self, sink: ArticleSink, html: str, url: str, depth: int) -> None:
        action = scrape_article(html, url, self.count_likes)
        sink.publish(action.article)

    @staticmethod
    def _dispatch(action: CrawlAction, depth: int, listing: CrawlContext,
                  articles: CrawlContext, sink: ArticleSink) -> None:
        if isinstance(action, VisitListing):
            listing.visit(action.url, depth + 1)
        elif isinstance(action, VisitArticle):
            articles.visit(action.url, depth=1)
        elif isinstance(action, EmitArticle):
            sink.publish(action.article)
        else:
            raise TypeError(f"Unsupported crawl action: {type(action)}")


def crawl_most_liked(
    *,
    top_n: int = TOP_N,
    window_days: int = CRAWL_WINDOW_DAYS,
    max_depth: int = LISTING_MAX_DEPTH,
    parallelism: int = PARALLELISM,
) -> CrawlResult:
    """Crawl the live site and return the most-liked articles of the trailing window."""
    window = CrawlWindow.trailing(days=window_days)
    # Pool sized for page fetches plus the comment lookups they trigger
    session = build_session(pool_size=max(10, parallelism * 2))
    try:
        client = CommentsClient(session, api_url=COMMENTS_API_URL, timeout=REQUEST_TIMEOUT_SECONDS)
        orchestrator = CrawlOrchestrator(
            partial(fetch_page, session, timeout=REQUEST_TIMEOUT_SECONDS),
            client.count_likes,
            window=window,
            max_depth=max_depth,
            parallelism=parallelism,
            top_n=top_n,
        )
        return orchestrator.run()
    finally:
        session.close()
