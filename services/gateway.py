"""Gateway pipeline orchestration."""

from core.body_rewriter import HtmlRewriter
from core.config import Config
from core.cookies import CookieRewriter
from core.dispatch import ResponseDispatcher
from core.headers import HeaderBuilder
from core.protocols import RequestLogger
from core.request_types import IncomingRequest, RewrittenResponse
from core.sanitize import RequestSanitizer
from core.urls import extract_target_url
from services.upstream import UpstreamClient


class GatewayService:
    """Run one request through extraction, sanitizing, fetch and rewriting."""

    def __init__(
        self,
        config: Config,
        logger: RequestLogger,
        upstream: UpstreamClient,
        sanitizer: RequestSanitizer | None = None,
        dispatcher: ResponseDispatcher | None = None,
    ) -> None:
        self._logger = logger
        self._upstream = upstream
        self._sanitizer = sanitizer or RequestSanitizer(
            config.rule_set(),
            internal_prefix=config.gateway.internal_header_prefix,
        )
        self._dispatcher = dispatcher or ResponseDispatcher(
            CookieRewriter(config.gateway.cookie_domain),
            HtmlRewriter(config.gateway.keep_protocol_relative_path),
            HeaderBuilder(),
        )

    async def handle(self, incoming: IncomingRequest) -> RewrittenResponse:
        """Proxy a request and return the rewritten response.

        Raises:
            GatewayError: Any stage failed; nothing partial is returned.
        """
        target = extract_target_url(incoming.raw_path, incoming.query, incoming.scheme)
        outgoing = self._sanitizer.prepare(incoming, target)
        response = await self._upstream.send(outgoing)

        try:
            rewritten = await self._dispatcher.dispatch(response, target)
        except BaseException:
            await response.aclose()
            raise

        self._logger.log_exchange(
            outgoing.method,
            str(target),
            rewritten.status_code,
            rewritten.kind.value,
            headers=dict(outgoing.headers),
        )
        return rewritten
