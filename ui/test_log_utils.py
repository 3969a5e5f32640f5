"""Tests for log file helpers and the dashboard logger."""

import json
from unittest.mock import patch

import pytest

from core.config import Config
from ui import log_utils
from ui.dashboard import Dashboard
from ui.log_utils import write_cli_log, write_exchange_log


class TestWriteExchangeLog:
    def test_written_under_hostname(self, tmp_path):
        path = write_exchange_log(
            "GET",
            "https://a.com/x?q=1",
            200,
            "html",
            {"Accept": "text/html"},
            log_root=tmp_path,
        )

        assert path.parent == tmp_path / "requests" / "a.com"
        payload = json.loads(path.read_text())
        assert payload["method"] == "GET"
        assert payload["target"] == "https://a.com/x?q=1"
        assert payload["status"] == 200
        assert payload["kind"] == "html"
        assert payload["headers"] == {"Accept": "text/html"}

    def test_sensitive_headers_masked(self, tmp_path):
        path = write_exchange_log(
            "POST",
            "https://a.com/",
            200,
            "passthrough",
            {
                "Cookie": "sid=abcdefghijklmnop",
                "Authorization": "short",
                "X-Api-Key": "key-1234567890",
                "User-Agent": "Mozilla/5.0",
            },
            log_root=tmp_path,
        )

        headers = json.loads(path.read_text())["headers"]
        assert headers["Cookie"] == "sid=ab...mnop"
        assert headers["Authorization"] == "***"
        assert headers["X-Api-Key"] == "key-12...7890"
        assert headers["User-Agent"] == "Mozilla/5.0"

    def test_unique_files(self, tmp_path):
        first = write_exchange_log("GET", "https://a.com/", 200, "html", log_root=tmp_path)
        second = write_exchange_log("GET", "https://a.com/", 200, "html", log_root=tmp_path)

        assert first != second


class TestWriteCliLog:
    def test_appends_lines(self, tmp_path, monkeypatch):
        log_file = tmp_path / "logs" / "gateway.log"
        monkeypatch.setattr(log_utils, "CLI_LOG_FILE", log_file)

        write_cli_log("STARTUP", "Gateway started", port=8080)
        write_cli_log("ERROR", "boom", status=500, target=None)

        lines = log_file.read_text().splitlines()
        assert len(lines) == 2
        assert lines[0].endswith("STARTUP: Gateway started port=8080")
        assert lines[1].endswith("ERROR: boom status=500")


@pytest.fixture
def dashboard():
    with (
        patch("ui.dashboard.write_exchange_log") as exchange_log,
        patch("ui.dashboard.write_cli_log") as cli_log,
    ):
        board = Dashboard(Config())
        board.exchange_log = exchange_log
        board.cli_log = cli_log
        yield board


class TestDashboard:
    def test_log_exchange(self, dashboard):
        dashboard.log_exchange("GET", "https://a.com/x", 200, "html", headers={"Accept": "*/*"})
        dashboard.log_exchange("GET", "https://b.com/y.png", 200, "passthrough")

        assert dashboard._counts == {"redirect": 0, "html": 1, "passthrough": 1}
        assert [ex.host for ex in dashboard._exchanges] == ["b.com", "a.com"]
        assert dashboard._hosts == {"a.com": 1, "b.com": 1}
        dashboard.exchange_log.assert_any_call("GET", "https://a.com/x", 200, "html", {"Accept": "*/*"})
        dashboard.cli_log.assert_any_call("PASSTHROUGH", "GET https://b.com/y.png", status=200)

    def test_recent_exchanges_bounded(self, dashboard):
        for i in range(20):
            dashboard.log_exchange("GET", f"https://a.com/{i}", 200, "redirect")

        assert len(dashboard._exchanges) == 12
        assert dashboard._exchanges[0].path == "/19"

    def test_log_error(self, dashboard):
        dashboard.log_error(400, "Invalid URL encoding.")
        dashboard.log_error(500, "x" * 100, target="https://a.com/")

        assert dashboard._error_count == 2
        assert dashboard._errors[0] == "500: " + "x" * 60 + "..."
        assert dashboard._errors[1] == "400: Invalid URL encoding."
        dashboard.cli_log.assert_called_with("ERROR", "x" * 100, status=500, target="https://a.com/")

    def test_layout_renders_without_live_display(self, dashboard):
        dashboard.log_exchange("GET", "https://a.com/x", 302, "redirect")
        dashboard.log_error(500, "Upstream connection error: refused")

        layout = dashboard._build_layout()

        assert layout["header"] is not None
        assert layout["footer"] is not None
