"""Category navigation and listing page scraper."""

import logging

from bs4 import BeautifulSoup

from config import BASE_URL
from src.models import Category, CrawlAction, CrawlWindow, VisitArticle, VisitListing
from src.scrapers.web_scraper import _make_absolute

logger = logging.getLogger(__name__)

# CSS selectors for the site's markup
NAV_ITEM_SELECTOR = "#wrap-main-nav > nav > ul > li"
PAGINATION_SELECTOR = "#pagination .button-page a[href]"
ARTICLE_LINK_SELECTOR = ".item-news .title-news a[href]"

LISTING_URL_TEMPLATE = (
    "{base_url}/category/day?cateid={id}&fromdate={from_unix}&todate={to_unix}&allcate={id}"
)


def extract_categories(soup: BeautifulSoup) -> list[Category]:
    """Read nav entries that point at a same-site category (skips "/" and external links)."""
    categories: list[Category] = []
    for item in soup.select(NAV_ITEM_SELECTOR):
        cate_id = (item.get("data-id") or "").strip()
        link_el = item.select_one("a")
        link = (link_el.get("href") or "") if link_el else ""
        if not cate_id or not link.startswith("/") or link == "/":
            continue
        categories.append(Category(id=cate_id, link=link))
    return categories


def build_listing_url(category: Category, window: CrawlWindow, base_url: str = BASE_URL) -> str:
    return LISTING_URL_TEMPLATE.format(
        base_url=base_url.rstrip("/"),
        id=category.id,
        from_unix=window.from_unix,
        to_unix=window.to_unix,
    )


def resolve_categories(soup: BeautifulSoup, window: CrawlWindow,
                       base_url: str = BASE_URL) -> list[VisitListing]:
    """Turn the navigation menu into one date-bounded listing visit per category."""
    return [
        VisitListing(build_listing_url(category, window, base_url))
        for category in extract_categories(soup)
    ]


def find_pagination_links(soup: BeautifulSoup, page_url: str) -> list[VisitListing]:
    actions: list[VisitListing] = []
    for anchor in soup.select(PAGINATION_SELECTOR):
        href = (anchor.get("href") or "").strip()
        if href:
            actions.append(VisitListing(_make_absolute(href, page_url)))
    return actions


def find_article_links(soup: BeautifulSoup, page_url: str) -> list[VisitArticle]:
    actions: list[VisitArticle] = []
    for anchor in soup.select(ARTICLE_LINK_SELECTOR):
        href = (anchor.get("href") or "").strip()
        if href:
            actions.append(VisitArticle(_make_absolute(href, page_url)))
    return actions


def parse_listing_page(html: str, page_url: str, window: CrawlWindow,
                       base_url: str = BASE_URL) -> list[CrawlAction]:
    """
    解析列表页 (Parse one page of the listing crawl: root page or category listing).

    Every listing page is checked for navigation, pagination and article
    links; the root page usually yields categories and a few direct articles,
    category pages yield pagination and articles.

    Returns:
        list of VisitListing / VisitArticle actions, in document order per kind.
    """
    soup = BeautifulSoup(html, "html.parser")
    actions: list[CrawlAction] = []
    actions.extend(resolve_categories(soup, window, base_url))
    actions.extend(find_pagination_links(soup, page_url))
    actions.extend(find_article_links(soup, page_url))
    logger.debug("[LISTING] %s -> %s actions", page_url, len(actions))
    return actions
