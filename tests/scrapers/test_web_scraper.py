import unittest
from unittest.mock import MagicMock

import requests

from src.scrapers.web_scraper import (
    _make_absolute,
    build_session,
    fetch_page,
    is_allowed_domain,
)


class TestWebScraper(unittest.TestCase):

    # --- Tests for Helper Functions ---

    def test_make_absolute_returns_absolute_url_as_is(self):
        url = "https://vnexpress.net/bai-viet-1.html"
        self.assertEqual(_make_absolute(url, "https://vnexpress.net/thoi-su"), url)

    def test_make_absolute_joins_relative_url(self):
        """Relative pagination links resolve against the listing page."""
        self.assertEqual(
            _make_absolute("/category/day?cateid=1&page=2", "https://vnexpress.net/category/day?cateid=1"),
            "https://vnexpress.net/category/day?cateid=1&page=2",
        )

    def test_is_allowed_domain(self):
        allowed = ["vnexpress.net"]
        self.assertTrue(is_allowed_domain("https://vnexpress.net/a.html", allowed))
        self.assertTrue(is_allowed_domain("https://VNEXPRESS.NET/a.html", allowed))
        self.assertFalse(is_allowed_domain("https://e.vnexpress.net/a.html", allowed))
        self.assertFalse(is_allowed_domain("https://example.com/a.html", allowed))
        self.assertTrue(is_allowed_domain("https://example.com/a.html", []))

    # --- Tests for Fetching ---

    def test_fetch_page_returns_body(self):
        session = MagicMock()
        session.get.return_value.text = "<html></html>"

        self.assertEqual(fetch_page(session, "https://vnexpress.net/", timeout=3), "<html></html>")
        session.get.assert_called_once_with("https://vnexpress.net/", timeout=3)

    def test_fetch_page_raises_on_http_error(self):
        session = MagicMock()
        session.get.return_value.raise_for_status.side_effect = requests.HTTPError("500 Server Error")

        with self.assertRaises(requests.RequestException):
            fetch_page(session, "https://vnexpress.net/")

    def test_build_session_never_retries(self):
        session = build_session(pool_size=4)
        try:
            adapter = session.get_adapter("https://vnexpress.net/")
            self.assertEqual(adapter.max_retries.total, 0)
            self.assertIn("User-Agent", session.headers)
        finally:
            session.close()


if __name__ == "__main__":
    unittest.main()
