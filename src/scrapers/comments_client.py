"""
评论接口客户端 (Comments API Client)
Resolves an article's engagement score from the comment box config embedded
in the page.
"""

import json
import logging

import requests

from config import COMMENTS_API_URL, REQUEST_TIMEOUT_SECONDS
from src.models import CommentBatch, EngagementQuery

logger = logging.getLogger(__name__)


def decode_engagement_query(raw: str) -> EngagementQuery:
    """Decode the data-component-input blob. Raises ValueError if it is not usable JSON."""
    if not raw or not raw.strip():
        raise ValueError("empty comment box config")
    payload = json.loads(raw)
    return EngagementQuery.from_payload(payload)


def fetch_comment_batch(session: requests.Session, query: EngagementQuery,
                        api_url: str = COMMENTS_API_URL,
                        timeout: float = REQUEST_TIMEOUT_SECONDS) -> CommentBatch:
    """Single GET against the comments API (no pagination beyond the requested limit)."""
    resp = session.get(api_url, params=query.to_params(), timeout=timeout)
    resp.raise_for_status()
    return CommentBatch.from_payload(resp.json())


class CommentsClient:
    """Counts likes for articles. Every failure degrades to 0 likes."""

    def __init__(self, session: requests.Session, api_url: str = COMMENTS_API_URL,
                 timeout: float = REQUEST_TIMEOUT_SECONDS) -> None:
        self.session = session
        self.api_url = api_url
        self.timeout = float(timeout)

    def count_likes(self, comment_box_config: str) -> int:
        try:
            query = decode_engagement_query(comment_box_config)
        except ValueError as e:
            logger.warning(f"[COMMENTS] Bad comment box config: {e}")
            return 0

        try:
            batch = fetch_comment_batch(self.session, query, self.api_url, self.timeout)
        except Exception as e:
            logger.warning(f"[COMMENTS] Failed to fetch comments for {query.article_id}: {e}")
            return 0

        likes = batch.total_likes()
        logger.debug(
            "[COMMENTS] objectid=%s items=%s likes=%s",
            query.article_id,
            len(batch.items),
            likes,
        )
        return likes
