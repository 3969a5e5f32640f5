"""Log files written alongside the dashboard.

``logs/gateway.log`` gets one line per event. Each proxied exchange is also
stored as a JSON record under ``logs/requests/<hostname>/``.
"""

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import Any
from urllib.parse import urlsplit
from uuid import uuid4

LOG_ROOT = Path.cwd() / "logs"
CLI_LOG_FILE = LOG_ROOT / "gateway.log"

SENSITIVE_HEADERS = {"authorization", "proxy-authorization", "cookie", "set-cookie"}
SENSITIVE_FRAGMENTS = ("key", "token", "secret")


def write_exchange_log(
    method: str,
    target: str,
    status: int,
    kind: str,
    headers: dict[str, str] | None = None,
    *,
    log_root: Path = LOG_ROOT,
) -> Path:
    """Store one exchange record and return its path."""
    record = {
        "timestamp": datetime.now(UTC).isoformat(),
        "method": method,
        "target": target,
        "status": status,
        "kind": kind,
        "headers": redact_headers(headers or {}),
    }
    folder = log_root / "requests"
    hostname = urlsplit(target).hostname
    if hostname:
        folder = folder / hostname
    return _write_record(folder, record)


def write_cli_log(level: str, message: str, **extra: Any) -> None:
    """Append a line to the gateway log file."""
    fields = [f"{key}={value}" for key, value in extra.items() if value is not None]
    stamp = datetime.now(UTC).strftime("%Y-%m-%d %H:%M:%S")
    line = " ".join([f"[{stamp}] {level}: {message}", *fields])

    CLI_LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
    with CLI_LOG_FILE.open("a") as f:
        f.write(line + "\n")


def redact_headers(headers: dict[str, str]) -> dict[str, str]:
    """Mask credentials so request logs can be shared."""
    return {
        name: _mask(value) if _is_sensitive(name) else value
        for name, value in headers.items()
    }


def _is_sensitive(name: str) -> bool:
    name = name.lower()
    return name in SENSITIVE_HEADERS or any(fragment in name for fragment in SENSITIVE_FRAGMENTS)


def _mask(value: str) -> str:
    if len(value) <= 10:
        return "***"
    return f"{value[:6]}...{value[-4:]}"


def _write_record(folder: Path, record: dict[str, Any]) -> Path:
    folder.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now(UTC).strftime("%Y%m%dT%H%M%S.%fZ")
    path = folder / f"{stamp}_{uuid4().hex}.json"
    path.write_text(json.dumps(record, indent=2, default=str))
    return path
