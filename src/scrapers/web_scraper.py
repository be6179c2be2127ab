"""
静态网页获取器 (Static Page Fetcher)
HTTP helpers shared by the listing and article scrapers; parsing is left
to the page scrapers.
"""

import logging
from urllib.parse import urljoin, urlparse

import requests
from requests.adapters import HTTPAdapter
from urllib3.util import Retry

from config import HEADERS, REQUEST_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)


def build_session(pool_size: int = 10) -> requests.Session:
    """
    创建带连接池的 HTTP 会话 (Build a pooled HTTP session).
    Failed fetches are one-shot: the adapter never retries.
    """
    session = requests.Session()
    session.headers.update(HEADERS)
    retries = Retry(total=0, raise_on_status=False)
    adapter = HTTPAdapter(
        pool_connections=pool_size,
        pool_maxsize=pool_size,
        max_retries=retries,
    )
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


def fetch_page(session: requests.Session, url: str, timeout: float = REQUEST_TIMEOUT_SECONDS) -> str:
    """GET a page and return its body. Raises requests.RequestException on failure or non-2xx."""
    resp = session.get(url, timeout=timeout)
    resp.raise_for_status()
    return resp.text


def _make_absolute(url: str, base_url: str) -> str:
    """确保 URL 是绝对路径 (Ensure URL is absolute)."""
    if url.startswith("http"):
        return url
    return urljoin(base_url, url)


def is_allowed_domain(url: str, allowed_domains: list[str]) -> bool:
    """True when the URL host is one of the allowed domains (an empty list allows all)."""
    if not allowed_domains:
        return True
    host = (urlparse(url).hostname or "").lower()
    return host in allowed_domains
