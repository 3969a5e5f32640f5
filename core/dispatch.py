"""Route origin responses to the redirect, HTML or passthrough path."""

from collections.abc import AsyncIterator

import httpx

from core.body_rewriter import HtmlRewriter
from core.cookies import CookieRewriter
from core.exceptions import TransformError, UpstreamError, UpstreamTimeoutError
from core.headers import HeaderBuilder, replace, without
from core.redirects import REDIRECT_STATUSES, rewrite_redirect_headers
from core.request_types import DispatchKind, RewrittenResponse
from core.urls import origin_of

HTML_CONTENT_TYPE = "text/html"


class ResponseDispatcher:
    """Turn an origin response into the response sent to the client."""

    def __init__(
        self,
        cookie_rewriter: CookieRewriter,
        html_rewriter: HtmlRewriter,
        header_builder: HeaderBuilder,
    ) -> None:
        self._cookies = cookie_rewriter
        self._html = html_rewriter
        self._headers = header_builder

    async def dispatch(self, response: httpx.Response, target: httpx.URL) -> RewrittenResponse:
        """Rewrite a streamed origin response.

        Redirect and HTML responses are closed before returning; passthrough
        responses are closed once their body stream ends.
        """
        headers = self._headers.copy_origin_headers(response.headers)
        headers = self._cookies.rewrite_headers(headers)

        if response.status_code in REDIRECT_STATUSES:
            await response.aclose()
            kind = DispatchKind.REDIRECT
            headers = rewrite_redirect_headers(headers, response.url)
            headers = without(headers, "content-encoding")
            headers = replace(headers, "Content-Length", "0")
            body: bytes | AsyncIterator[bytes] = b""
        elif HTML_CONTENT_TYPE in response.headers.get("content-type", ""):
            kind = DispatchKind.HTML
            body = await self._rewrite_html(response, target)
            headers = without(headers, "content-encoding")
            headers = replace(headers, "Content-Length", str(len(body)))
        else:
            kind = DispatchKind.PASSTHROUGH
            body = self._stream(response)

        return RewrittenResponse(
            status_code=response.status_code,
            reason=response.reason_phrase,
            kind=kind,
            headers=self._headers.finalize(headers),
            body=body,
        )

    async def _rewrite_html(self, response: httpx.Response, target: httpx.URL) -> bytes:
        try:
            await response.aread()
        except httpx.TimeoutException as e:
            raise UpstreamTimeoutError(f"Timed out reading origin body: {e}", target=str(target)) from e
        except httpx.RequestError as e:
            raise UpstreamError(f"Failed reading origin body: {e}", target=str(target)) from e
        finally:
            await response.aclose()

        encoding = response.encoding or "utf-8"
        text = self._html.rewrite(response.text, origin_of(target))
        try:
            return text.encode(encoding)
        except (UnicodeEncodeError, LookupError) as e:
            raise TransformError(f"Cannot encode rewritten HTML as {encoding}: {e}") from e

    async def _stream(self, response: httpx.Response) -> AsyncIterator[bytes]:
        """Yield raw origin bytes, closing the origin response when done or cancelled."""
        try:
            async for chunk in response.aiter_raw():
                yield chunk
        finally:
            await response.aclose()
