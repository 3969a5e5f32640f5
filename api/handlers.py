"""FastAPI route handlers."""

import asyncio
import json
from collections.abc import AsyncIterator, Awaitable
from pathlib import Path

from fastapi import Request, Response
from fastapi.responses import StreamingResponse

from core.exceptions import DecodeError, GatewayError
from core.protocols import RequestLogger
from core.request_types import IncomingRequest, RewrittenResponse
from core.sanitize import BODYLESS_METHODS
from core.urls import INVALID_ENCODING_MESSAGE

LANDING_PAGE = Path(__file__).resolve().parent.parent / "ui" / "landing.html"
JSON_MEDIA_TYPE = "application/json; charset=utf-8"
HTML_MEDIA_TYPE = "text/html; charset=utf-8"


def error_response(status: int, message: str) -> Response:
    """Build the JSON error body returned for every failed request."""
    return Response(
        content=json.dumps({"error": message}),
        status_code=status,
        media_type=JSON_MEDIA_TYPE,
    )


async def handle_root(_request: Request) -> Response:
    """Serve the landing page."""
    return Response(content=LANDING_PAGE.read_bytes(), media_type=HTML_MEDIA_TYPE)


async def handle_proxy(request: Request, logger: RequestLogger) -> Response:
    """Proxy any method/path to the target URL embedded in the path."""
    body_done = asyncio.Event()
    try:
        incoming = _incoming_request(request, body_done)
        gateway = request.app.state.gateway_service
        rewritten = await run_until_disconnect(request, gateway.handle(incoming), body_done)
    except GatewayError as e:
        logger.log_error(e.status_code, str(e), getattr(e, "target", None))
        return error_response(e.status_code, str(e))
    except Exception as e:
        logger.log_error(500, f"{type(e).__name__}: {e}")
        return error_response(500, str(e))

    if rewritten is None:
        # Client went away; nobody will read this
        return Response(status_code=499)
    return to_starlette_response(rewritten)


async def run_until_disconnect(
    request: Request,
    pipeline: Awaitable[RewrittenResponse],
    body_done: asyncio.Event,
) -> RewrittenResponse | None:
    """Await the pipeline, cancelling it if the client disconnects first.

    Returns None when the client disconnected before a response was ready.
    """
    task = asyncio.ensure_future(pipeline)
    watcher = asyncio.ensure_future(_wait_for_disconnect(request, body_done))
    try:
        await asyncio.wait({task, watcher}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        watcher.cancel()
        if not task.done():
            task.cancel()
            await asyncio.wait({task})

    if task.cancelled():
        return None
    return task.result()


async def _wait_for_disconnect(request: Request, body_done: asyncio.Event) -> None:
    # Body messages belong to the pipeline; only listen once they are consumed
    await body_done.wait()
    while True:
        message = await request.receive()
        if message["type"] == "http.disconnect":
            return


def _incoming_request(request: Request, body_done: asyncio.Event) -> IncomingRequest:
    method = request.method.upper()
    body = None
    if method in BODYLESS_METHODS:
        body_done.set()
    else:
        body = _track_body(request.stream(), body_done)

    return IncomingRequest(
        method=method,
        raw_path=_raw_path(request),
        query=request.url.query,
        scheme=request.url.scheme,
        headers=list(request.headers.items()),
        body=body,
    )


async def _track_body(stream: AsyncIterator[bytes], body_done: asyncio.Event) -> AsyncIterator[bytes]:
    try:
        async for chunk in stream:
            if chunk:
                yield chunk
    finally:
        body_done.set()


def _raw_path(request: Request) -> str:
    """Return the request path with percent escapes intact."""
    raw = request.scope.get("raw_path")
    if not raw:
        return request.url.path
    raw = raw.split(b"?", 1)[0]
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecodeError(INVALID_ENCODING_MESSAGE) from e


def to_starlette_response(rewritten: RewrittenResponse) -> Response:
    """Convert a pipeline response, keeping duplicate headers such as Set-Cookie."""
    if isinstance(rewritten.body, bytes):
        response = Response(content=rewritten.body, status_code=rewritten.status_code)
    else:
        response = StreamingResponse(rewritten.body, status_code=rewritten.status_code)
    response.raw_headers = [
        (name.lower().encode("latin-1"), _encode_header_value(value))
        for name, value in rewritten.headers
    ]
    return response


def _encode_header_value(value: str) -> bytes:
    try:
        return value.encode("latin-1")
    except UnicodeEncodeError:
        return value.encode("utf-8")
