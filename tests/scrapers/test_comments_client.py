import json
from unittest.mock import MagicMock

import pytest
import requests

from src.models import EngagementQuery
from src.scrapers.comments_client import CommentsClient, decode_engagement_query, fetch_comment_batch

CONFIG = json.dumps({
    "article_id": "4723456",
    "article_type": "1",
    "site_id": "1000000",
    "category_id": "1001005",
    "sign": "f9a2c1",
    "limit": 25,
    "tab_active": "most_like",
})


def _payload(likes, pinned=(), replies=()):
    items = []
    for i, n in enumerate(likes):
        items.append({
            "comment_id": str(i),
            "parent_id": str(i),
            "article_id": 4723456,
            "content": "ok",
            "full_name": "Bạn đọc",
            "userlike": n,
            "userid": None,
            "rating": {},
            "replys": {"total": len(replies), "items": [{"comment_id": "r", "userlike": r} for r in replies]},
        })
    return {
        "error": 0,
        "errorDescription": "",
        "iscomment": 1,
        "data": {
            "total": len(items),
            "totalitem": len(items),
            "items": items,
            "items_pin": [{"comment_id": "p", "userlike": p} for p in pinned],
            "offset": 0,
        },
        "_csrf": "x",
    }


def _session(payload=None, status_error=None, json_error=None):
    session = MagicMock()
    resp = session.get.return_value
    if status_error is not None:
        resp.raise_for_status.side_effect = status_error
    if json_error is not None:
        resp.json.side_effect = json_error
    else:
        resp.json.return_value = payload
    return session


def test_decode_engagement_query():
    query = decode_engagement_query(CONFIG)
    assert query == EngagementQuery(
        article_id="4723456",
        article_type="1",
        site_id="1000000",
        category_id="1001005",
        sign="f9a2c1",
        limit=25,
        tab_active="most_like",
    )


@pytest.mark.parametrize("raw", ["", "   ", "{not json", "[1, 2]", '{"limit": "many"}'])
def test_decode_engagement_query_rejects_bad_config(raw):
    with pytest.raises(ValueError):
        decode_engagement_query(raw)


def test_fetch_comment_batch_sends_api_params():
    session = _session(_payload([1, 2]))
    batch = fetch_comment_batch(session, decode_engagement_query(CONFIG), api_url="https://api.test/get", timeout=5)

    assert len(batch.items) == 2
    session.get.assert_called_once_with(
        "https://api.test/get",
        params={
            "objectid": "4723456",
            "objecttype": "1",
            "siteid": "1000000",
            "catetoryid": "1001005",
            "sign": "f9a2c1",
            "limit": 25,
            "tab_active": "most_like",
        },
        timeout=5,
    )


def test_count_likes_sums_top_level_items_only():
    # Replies and pinned items are not part of the score (known scope limit).
    session = _session(_payload([3, 0, 7], pinned=[100], replies=[50]))
    client = CommentsClient(session, api_url="https://api.test/get")
    assert client.count_likes(CONFIG) == 10


def test_count_likes_http_500_degrades_to_zero():
    session = _session(status_error=requests.HTTPError("500 Server Error"))
    client = CommentsClient(session, api_url="https://api.test/get")
    assert client.count_likes(CONFIG) == 0


def test_count_likes_invalid_json_degrades_to_zero():
    session = _session(json_error=ValueError("Expecting value"))
    client = CommentsClient(session, api_url="https://api.test/get")
    assert client.count_likes(CONFIG) == 0


def test_count_likes_network_error_degrades_to_zero():
    session = MagicMock()
    session.get.side_effect = requests.ConnectionError("connection reset")
    client = CommentsClient(session, api_url="https://api.test/get")
    assert client.count_likes(CONFIG) == 0


def test_count_likes_bad_config_skips_api_call():
    session = _session(_payload([5]))
    client = CommentsClient(session, api_url="https://api.test/get")
    assert client.count_likes("not json") == 0
    assert client.count_likes("") == 0
    session.get.assert_not_called()


def test_count_likes_article_without_comments():
    session = _session({"error": 0, "data": []})
    client = CommentsClient(session, api_url="https://api.test/get")
    assert client.count_likes(CONFIG) == 0


@pytest.mark.parametrize(
    "payload",
    [
        {"error": 0, "data": {"items": 5}},
        {"error": 0, "data": {"items": [], "items_pin": 3}},
        {"error": 0, "data": {"items": "abc"}},
        {"error": 0, "data": {"items": [{"userlike": 2, "replys": {"total": 1, "items": 7}}]}},
        {"error": 0, "data": {"items": [{"userlike": 2, "replys": [1, 2]}]}},
    ],
)
def test_count_likes_tolerates_unexpected_shapes(payload):
    session = _session(payload)
    client = CommentsClient(session, api_url="https://api.test/get")
    items = payload["data"]["items"]
    expected = 2 if isinstance(items, list) and items else 0
    assert client.count_likes(CONFIG) == expected


def test_count_likes_out_of_range_numbers_count_as_zero():
    # json.loads turns 1e400 into float("inf")
    payload = json.loads('{"data": {"total": 1e400, "items": [{"userlike": 1e400}, {"userlike": 4}]}}')
    session = _session(payload)
    client = CommentsClient(session, api_url="https://api.test/get")
    assert client.count_likes(CONFIG) == 4


def test_count_likes_unexpected_decode_error_degrades_to_zero(monkeypatch):
    import src.scrapers.comments_client as comments_client

    def broken(payload):
        raise KeyError("data")

    monkeypatch.setattr(comments_client.CommentBatch, "from_payload", staticmethod(broken))
    client = CommentsClient(_session(_payload([1])), api_url="https://api.test/get")
    assert client.count_likes(CONFIG) == 0
