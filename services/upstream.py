"""Origin fetcher built on a shared httpx client."""

from http.cookiejar import CookieJar, DefaultCookiePolicy

import httpx

from core.config import UpstreamSettings
from core.exceptions import UpstreamConnectionError, UpstreamTimeoutError
from core.request_types import OutgoingRequest


class _RejectAllCookies(DefaultCookiePolicy):
    """Keep the shared client from carrying cookies between requests."""

    def set_ok(self, cookie, request):
        return False

    def return_ok(self, cookie, request):
        return False


def build_client(
    settings: UpstreamSettings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create the pooled client used for all origin requests."""
    limits = httpx.Limits(
        max_connections=settings.max_connections,
        max_keepalive_connections=settings.max_keepalive_connections,
    )
    return httpx.AsyncClient(
        timeout=settings.timeout,
        limits=limits,
        follow_redirects=False,
        cookies=CookieJar(policy=_RejectAllCookies()),
        transport=transport,
    )


class UpstreamClient:
    """Send exactly one request per call to the origin, streaming the response."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def send(self, outgoing: OutgoingRequest) -> httpx.Response:
        """Send the request and return the unread, streamed response.

        The caller owns the returned response and must close it.
        """
        request = self._client.build_request(
            outgoing.method,
            outgoing.url,
            headers=outgoing.headers,
            content=outgoing.body,
        )
        try:
            return await self._client.send(request, stream=True, follow_redirects=False)
        except httpx.TimeoutException as e:
            raise UpstreamTimeoutError(
                f"Upstream timeout: {e}" if str(e) else "Upstream timeout",
                target=str(outgoing.url),
            ) from e
        except httpx.RequestError as e:
            raise UpstreamConnectionError(
                f"Upstream connection error: {e}",
                target=str(outgoing.url),
            ) from e
