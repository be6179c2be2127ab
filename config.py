"""Central configuration for the most-liked news crawler."""

import os

from dotenv import load_dotenv

load_dotenv()


# --- Target Site ---
BASE_URL = os.getenv("CRAWL_BASE_URL", "https://vnexpress.net").rstrip("/")
COMMENTS_API_URL = os.getenv("COMMENTS_API_URL", "https://usi-saas.vnexpress.net/index/get")

_allowed_domains = os.getenv("CRAWL_ALLOWED_DOMAINS", "vnexpress.net")
ALLOWED_DOMAINS = [d.strip().lower() for d in _allowed_domains.split(",") if d.strip()]

# --- Crawl Config ---
_window_days = os.getenv("CRAWL_WINDOW_DAYS")
CRAWL_WINDOW_DAYS = int(_window_days) if _window_days else 7

_max_depth = os.getenv("LISTING_MAX_DEPTH")
LISTING_MAX_DEPTH = int(_max_depth) if _max_depth else 3

_top_n = os.getenv("TOP_N")
TOP_N = int(_top_n) if _top_n else 10

# One worker per CPU, shared by the listing and article crawls
_parallelism = os.getenv("CRAWL_PARALLELISM")
PARALLELISM = int(_parallelism) if _parallelism else (os.cpu_count() or 1)

_timeout = os.getenv("REQUEST_TIMEOUT_SECONDS")
REQUEST_TIMEOUT_SECONDS = float(_timeout) if _timeout else 15.0

# User-Agent to avoid being blocked
HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept-Language": "vi,en;q=0.9",
}


def validate_config(
    *,
    top_n: int = TOP_N,
    window_days: int = CRAWL_WINDOW_DAYS,
    max_depth: int = LISTING_MAX_DEPTH,
    parallelism: int = PARALLELISM,
) -> tuple[bool, list[str]]:
    """Check crawl settings before starting. Returns (ok, errors)."""
    errors: list[str] = []
    if not BASE_URL:
        errors.append("CRAWL_BASE_URL is empty")
    if not COMMENTS_API_URL:
        errors.append("COMMENTS_API_URL is empty")
    if not ALLOWED_DOMAINS:
        errors.append("CRAWL_ALLOWED_DOMAINS is empty")
    if top_n <= 0:
        errors.append(f"top_n must be positive (got {top_n})")
    if window_days <= 0:
        errors.append(f"window_days must be positive (got {window_days})")
    if max_depth <= 0:
        errors.append(f"max_depth must be positive (got {max_depth})")
    if parallelism <= 0:
        errors.append(f"parallelism must be positive (got {parallelism})")
    if REQUEST_TIMEOUT_SECONDS <= 0:
        errors.append("REQUEST_TIMEOUT_SECONDS must be positive")
    return not errors, errors
