"""Tests for Set-Cookie rewriting."""

import pytest

from core.cookies import CookieRewriter


@pytest.fixture
def rewriter():
    return CookieRewriter("gateway.example")


class TestCookieRewriter:
    def test_replaces_domain_and_keeps_path(self, rewriter):
        cookie = "sid=abc; Domain=.origin.com; Path=/app; HttpOnly"
        assert rewriter.rewrite(cookie) == "sid=abc; Domain=gateway.example; Path=/app; HttpOnly"

    def test_appends_domain_and_path(self, rewriter):
        assert rewriter.rewrite("sid=abc") == "sid=abc; Domain=gateway.example; Path=/"

    def test_attribute_keys_case_insensitive(self, rewriter):
        cookie = "sid=abc; domain=origin.com; PATH=/a"
        assert rewriter.rewrite(cookie) == "sid=abc; domain=gateway.example; PATH=/a"

    def test_other_attributes_preserved(self, rewriter):
        cookie = "sid=abc; Expires=Wed, 21 Oct 2015 07:28:00 GMT; Max-Age=3600; Secure; SameSite=Lax"
        assert rewriter.rewrite(cookie) == (
            "sid=abc; Expires=Wed, 21 Oct 2015 07:28:00 GMT; Max-Age=3600; Secure; SameSite=Lax"
            "; Domain=gateway.example; Path=/"
        )

    def test_domain_inside_cookie_value_is_not_an_attribute(self, rewriter):
        cookie = "next=https://a.com/?domain=x; Path=/"
        assert rewriter.rewrite(cookie) == "next=https://a.com/?domain=x; Path=/; Domain=gateway.example"

    def test_path_inside_cookie_value_is_not_an_attribute(self, rewriter):
        cookie = "state=path=/secret"
        assert rewriter.rewrite(cookie) == "state=path=/secret; Domain=gateway.example; Path=/"

    def test_empty_domain_kept_present(self):
        rewriter = CookieRewriter()
        assert rewriter.rewrite("sid=abc; Domain=origin.com") == "sid=abc; Domain=; Path=/"
        assert rewriter.rewrite("sid=abc") == "sid=abc; Domain=; Path=/"

    def test_rewrite_headers_one_to_one(self, rewriter):
        headers = [
            ("Content-Type", "text/plain"),
            ("Set-Cookie", "a=1"),
            ("set-cookie", "a=1"),
            ("Set-Cookie", "b=2; Path=/b"),
        ]

        rewritten = rewriter.rewrite_headers(headers)

        assert rewritten == [
            ("Content-Type", "text/plain"),
            ("Set-Cookie", "a=1; Domain=gateway.example; Path=/"),
            ("set-cookie", "a=1; Domain=gateway.example; Path=/"),
            ("Set-Cookie", "b=2; Path=/b; Domain=gateway.example"),
        ]

    def test_every_cookie_has_domain_and_path(self, rewriter):
        headers = [("Set-Cookie", "a=1; Secure"), ("Set-Cookie", "b=2; HttpOnly")]

        rewritten = rewriter.rewrite_headers(headers)

        assert len(rewritten) == 2
        for _, value in rewritten:
            assert "Domain=gateway.example" in value
            assert "Path=/" in value
