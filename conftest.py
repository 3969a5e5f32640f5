# Make `core`, `services`, `api` and `ui` importable from test modules that
# live next to the code they test.
import os
import sys

import httpx
import pytest

SERVICE_ROOT = os.path.dirname(__file__)
if SERVICE_ROOT not in sys.path:
    sys.path.insert(0, SERVICE_ROOT)

from core.config import Config  # noqa: E402


class RecordingLogger:
    """RequestLogger that keeps everything in memory."""

    def __init__(self):
        self.exchanges = []
        self.errors = []

    def log_exchange(self, method, target, status, kind, *, headers=None):
        self.exchanges.append(
            {"method": method, "target": target, "status": status, "kind": kind, "headers": headers}
        )

    def log_error(self, status, message, target=None):
        self.errors.append({"status": status, "message": message, "target": target})


def _stream_body(*chunks: bytes):
    # httpx reads plain bytes content eagerly; an async iterator stays unread
    async def _iter():
        for chunk in chunks:
            yield chunk

    return _iter()


@pytest.fixture
def stream_body():
    return _stream_body


@pytest.fixture
def recording_logger():
    return RecordingLogger()


@pytest.fixture
def config():
    return Config()


@pytest.fixture
def make_origin_response():
    """Build an httpx response as the origin would return it."""

    def _create(
        status_code=200,
        headers=None,
        content=b"",
        url="https://a.com/x",
        streamed=False,
    ):
        request = httpx.Request("GET", url)
        body = _stream_body(content) if streamed else content
        return httpx.Response(status_code, headers=headers or [], content=body, request=request)

    return _create
