"""Data models shared by the crawl pipeline."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

ZERO_TIME_RFC3339 = "0001-01-01T00:00:00Z"


@dataclass
class Category:
    """Navigation entry; only lives long enough to build a listing URL."""
    id: str      # data-id of the nav item
    link: str    # relative link, e.g. "/thoi-su"


@dataclass(frozen=True)
class CrawlWindow:
    """Trailing date window used for every category listing URL."""
    from_date: datetime
    to_date: datetime

    @classmethod
    def trailing(cls, days: int = 7, now: datetime | None = None) -> "CrawlWindow":
        to_date = now or datetime.now(tz=timezone.utc)
        return cls(from_date=to_date - timedelta(days=days), to_date=to_date)

    @property
    def from_unix(self) -> int:
        return int(self.from_date.timestamp())

    @property
    def to_unix(self) -> int:
        return int(self.to_date.timestamp())


@dataclass(frozen=True)
class Article:
    """
    Ranked article record.
    Created once per visited article page and never mutated afterwards.
    """
    url: str
    title: str
    published_time: datetime | None = None  # None when the date could not be parsed
    likes: int = 0                          # summed top-level comment likes

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "title": self.title,
            "time": _format_rfc3339(self.published_time),
            "likes": self.likes,
        }


def _format_rfc3339(value: datetime | None) -> str:
    if value is None:
        return ZERO_TIME_RFC3339
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    if value.utcoffset() == timedelta(0):
        return value.strftime("%Y-%m-%dT%H:%M:%SZ")
    return value.isoformat(timespec="seconds")


@dataclass
class EngagementQuery:
    """Parameters of the comments API call, taken from the article's comment box."""
    article_id: str = ""
    article_type: str = ""
    site_id: str = ""
    category_id: str = ""
    sign: str = ""
    limit: int = 0
    tab_active: str = ""

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "EngagementQuery":
        if not isinstance(payload, dict):
            raise ValueError(f"comment box config must be an object, got {type(payload).__name__}")
        try:
            limit = int(payload.get("limit") or 0)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"invalid limit: {payload.get('limit')!r}") from exc
        return cls(
            article_id=str(payload.get("article_id", "") or ""),
            article_type=str(payload.get("article_type", "") or ""),
            site_id=str(payload.get("site_id", "") or ""),
            category_id=str(payload.get("category_id", "") or ""),
            sign=str(payload.get("sign", "") or ""),
            limit=limit,
            tab_active=str(payload.get("tab_active", "") or ""),
        )

    def to_params(self) -> dict[str, str | int]:
        # "catetoryid" is the spelling the API expects
        return {
            "objectid": self.article_id,
            "objecttype": self.article_type,
            "siteid": self.site_id,
            "catetoryid": self.category_id,
            "sign": self.sign,
            "limit": self.limit,
            "tab_active": self.tab_active,
        }


def _as_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return 0


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


@dataclass
class CommentItem:
    """Single top-level comment. Absent fields are valid and take defaults."""
    comment_id: str = ""
    parent_id: str = ""
    article_id: int = 0
    content: str = ""
    full_name: str = ""
    creation_time: int = 0
    time: str = ""
    userlike: int = 0
    userid: int | None = None
    type: int = 0
    like_ismember: bool = False
    is_pin: int = 0
    reply_total: int = 0
    replies: list[dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "CommentItem":
        replys = payload.get("replys") or {}
        if not isinstance(replys, dict):
            replys = {}
        userid = payload.get("userid")
        return cls(
            comment_id=str(payload.get("comment_id", "") or ""),
            parent_id=str(payload.get("parent_id", "") or ""),
            article_id=_as_int(payload.get("article_id")),
            content=str(payload.get("content", "") or ""),
            full_name=str(payload.get("full_name", "") or ""),
            creation_time=_as_int(payload.get("creation_time")),
            time=str(payload.get("time", "") or ""),
            userlike=max(0, _as_int(payload.get("userlike"))),
            userid=_as_int(userid) if userid is not None else None,
            type=_as_int(payload.get("type")),
            like_ismember=bool(payload.get("like_ismember", False)),
            is_pin=_as_int(payload.get("is_pin")),
            reply_total=_as_int(replys.get("total")),
            replies=[r for r in _as_list(replys.get("items")) if isinstance(r, dict)],
        )


@dataclass
class CommentBatch:
    """Decoded comments API response (one requested page only)."""
    error: int = 0
    error_description: str = ""
    total: int = 0
    total_item: int = 0
    items: list[CommentItem] = field(default_factory=list)
    items_pin: list[dict[str, Any]] = field(default_factory=list)
    offset: int = 0

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "CommentBatch":
        if not isinstance(payload, dict):
            raise ValueError(f"comments response must be an object, got {type(payload).__name__}")
        data = payload.get("data") or {}
        if not isinstance(data, dict):
            # The API answers {"data": []} for articles without comments
            data = {}
        return cls(
            error=_as_int(payload.get("error")),
            error_description=str(payload.get("errorDescription", "") or ""),
            total=_as_int(data.get("total")),
            total_item=_as_int(data.get("totalitem")),
            items=[
                CommentItem.from_payload(item)
                for item in _as_list(data.get("items"))
                if isinstance(item, dict)
            ],
            items_pin=[p for p in _as_list(data.get("items_pin")) if isinstance(p, dict)],
            offset=_as_int(data.get("offset")),
        )

    def total_likes(self) -> int:
        """Sum of likes over top-level items. Replies and pinned items are not counted."""
        return sum(item.userlike for item in self.items)


# --- Pipeline actions returned by the page parsers ---
@dataclass(frozen=True)
class VisitListing:
    url: str


@dataclass(frozen=True)
class VisitArticle:
    url: str


@dataclass(frozen=True)
class EmitArticle:
    article: Article


CrawlAction = VisitListing | VisitArticle | EmitArticle
