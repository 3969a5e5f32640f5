"""Tests for redirect re-targeting."""

import httpx
import pytest

from core.exceptions import TransformError
from core.redirects import REDIRECT_STATUSES, rewrite_location, rewrite_redirect_headers
from core.urls import encode_component

BASE = httpx.URL("https://a.com/dir/page")


def test_redirect_statuses():
    assert REDIRECT_STATUSES == {301, 302, 303, 307, 308}


class TestRewriteLocation:
    def test_root_relative(self):
        assert rewrite_location("/login", httpx.URL("https://a.com/x")) == "/https%3A%2F%2Fa.com%2Flogin"

    def test_document_relative(self):
        assert rewrite_location("next", BASE) == "/" + encode_component("https://a.com/dir/next")

    def test_absolute(self):
        assert rewrite_location("https://b.com/home?x=1", BASE) == "/" + encode_component(
            "https://b.com/home?x=1"
        )

    def test_protocol_relative(self):
        assert rewrite_location("//c.com/p", BASE) == "/" + encode_component("https://c.com/p")

    def test_query_only(self):
        assert rewrite_location("?page=2", BASE) == "/" + encode_component("https://a.com/dir/page?page=2")

    def test_unresolvable(self):
        with pytest.raises(TransformError):
            rewrite_location("https://a.com:notaport/x", BASE)


class TestRewriteRedirectHeaders:
    def test_replaces_location_only(self):
        headers = [("location", "/login"), ("X-Trace", "1"), ("Set-Cookie", "a=1")]

        rewritten = rewrite_redirect_headers(headers, httpx.URL("https://a.com/x"))

        assert ("Location", "/https%3A%2F%2Fa.com%2Flogin") in rewritten
        assert ("X-Trace", "1") in rewritten
        assert ("Set-Cookie", "a=1") in rewritten
        assert [name for name, _ in rewritten if name.lower() == "location"] == ["Location"]

    def test_without_location(self):
        headers = [("X-Trace", "1")]
        assert rewrite_redirect_headers(headers, BASE) == headers
