"""Article page scraper: title, publish time and comment box config."""

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

from bs4 import BeautifulSoup

from src.models import Article, EmitArticle

logger = logging.getLogger(__name__)

TITLE_SELECTOR = ".top-detail .container .sidebar-1 .title-detail"
DATE_SELECTOR = ".top-detail .container .sidebar-1 .header-content span.date"
COMMENT_BOX_SELECTOR = "#box_comment_vne"
COMMENT_BOX_ATTR = "data-component-input"

# e.g. "Thứ sáu, 15/3/2024, 09:30 (GMT+7)"
_DATE_RE = re.compile(r"(\d{1,2}/\d{1,2}/\d{4}),\s(\d{2}:\d{2})")
_DATE_FORMATS = ("%d/%m/%Y %H:%M",)


def parse_date(text: str) -> Optional[datetime]:
    """
    解析文章发布时间 (Parse the article date line).
    Accepts "D/M/YYYY, HH:MM" with 1- or 2-digit day and month anywhere in
    the text. Returns None when nothing matches.
    """
    if not text:
        return None
    match = _DATE_RE.search(text)
    if not match:
        return None
    raw = f"{match.group(1)} {match.group(2)}"
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(raw, fmt).replace(tzinfo=timezone.utc)
        except ValueError:
            continue
    return None


@dataclass
class ArticlePage:
    """Fields read from an article page before the comment lookup."""
    url: str
    title: str
    published_time: Optional[datetime]
    comment_box_config: str  # raw JSON from the comment box, may be empty


def parse_article_page(html: str, url: str) -> ArticlePage:
    soup = BeautifulSoup(html, "html.parser")

    title_el = soup.select_one(TITLE_SELECTOR)
    title = " ".join(title_el.get_text(" ", strip=True).split()) if title_el else ""

    date_el = soup.select_one(DATE_SELECTOR)
    date_text = date_el.get_text(strip=True) if date_el else ""
    published_time = parse_date(date_text)
    if published_time is None:
        logger.debug("[ARTICLE] No parseable date on %s: %r", url, date_text)

    box_el = soup.select_one(COMMENT_BOX_SELECTOR)
    config_blob = (box_el.get(COMMENT_BOX_ATTR) or "") if box_el else ""

    return ArticlePage(
        url=url,
        title=title,
        published_time=published_time,
        comment_box_config=config_blob,
    )


def scrape_article(html: str, url: str, count_likes: Callable[[str], int]) -> EmitArticle:
    """
    Build the article record for one visited page.

    Args:
        count_likes: maps the raw comment box config to a like count; it must
            not raise (failures are reported as 0).
    """
    page = parse_article_page(html, url)
    likes = count_likes(page.comment_box_config)
    article = Article(
        url=page.url,
        title=page.title,
        published_time=page.published_time,
        likes=max(0, likes),
    )
    return EmitArticle(article)
