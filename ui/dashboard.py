"""Real-time CLI dashboard for gateway monitoring."""

from collections import Counter
from datetime import datetime
from threading import Lock
from urllib.parse import urlsplit

from rich.console import Console
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.config import Config
from ui.log_utils import write_cli_log, write_exchange_log

console = Console()

KIND_STYLES = {
    "redirect": "yellow",
    "html": "green",
    "passthrough": "blue",
}

MAX_EXCHANGES = 12
MAX_ERRORS = 3
TOP_HOSTS = 8


def status_style(status: int) -> str:
    if status >= 500:
        return "red bold"
    if status >= 400:
        return "red"
    if status >= 300:
        return "yellow"
    return "green"


class ExchangeInfo:
    """One proxied exchange as shown in the recent table."""

    def __init__(self, method: str, target: str, status: int, kind: str, timestamp: datetime):
        parts = urlsplit(target)
        self.method = method
        self.host = parts.hostname or "?"
        self.path = parts.path or "/"
        self.status = status
        self.kind = kind
        self.timestamp = timestamp


class Dashboard:
    """Live view of proxied exchanges; implements RequestLogger."""

    def __init__(self, config: Config):
        self.config = config
        self._lock = Lock()
        self._started = datetime.now()
        self._exchanges: list[ExchangeInfo] = []
        self._counts = dict.fromkeys(KIND_STYLES, 0)
        self._hosts: Counter[str] = Counter()
        self._error_count = 0
        self._errors: list[str] = []
        self._live: Live | None = None

    def start(self) -> "Dashboard":
        self._started = datetime.now()
        self._live = Live(
            self._build_layout(),
            console=console,
            refresh_per_second=4,
            screen=False,
        )
        self._live.start()
        return self

    def stop(self) -> None:
        if self._live:
            self._live.stop()
            self._live = None

    def log_exchange(
        self,
        method: str,
        target: str,
        status: int,
        kind: str,
        *,
        headers: dict[str, str] | None = None,
    ) -> None:
        """Record an exchange on screen and in the log files."""
        info = ExchangeInfo(method, target, status, kind, datetime.now())
        with self._lock:
            self._counts[kind] = self._counts.get(kind, 0) + 1
            self._hosts[info.host] += 1
            self._exchanges = [info, *self._exchanges][:MAX_EXCHANGES]
            self._update()

            write_exchange_log(method, target, status, kind, headers)
            write_cli_log(kind.upper(), f"{method} {target}", status=status)

    def log_error(self, status: int, message: str, target: str | None = None) -> None:
        """Record a failed request."""
        summary = message[:60] + "..." if len(message) > 60 else message
        with self._lock:
            self._error_count += 1
            self._errors = [f"{status}: {summary}", *self._errors][:MAX_ERRORS]
            self._update()
            write_cli_log("ERROR", message[:200], status=status, target=target)

    def _update(self) -> None:
        if self._live:
            self._live.update(self._build_layout())

    def _build_layout(self) -> Layout:
        layout = Layout()
        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="body"),
            Layout(name="footer", size=MAX_ERRORS + 2),
        )
        layout["body"].split_row(
            Layout(self._build_exchanges_panel(), name="exchanges", ratio=3),
            Layout(self._build_hosts_panel(), name="hosts", ratio=1),
        )
        layout["header"].update(self._build_header())
        layout["footer"].update(self._build_footer())
        return layout

    def _build_header(self) -> Panel:
        uptime = str(datetime.now() - self._started).split(".")[0]
        stats = Text()
        stats.append("Path Gateway", style="bold cyan")
        for kind, style in KIND_STYLES.items():
            stats.append(f"  {kind} ", style="dim")
            stats.append(str(self._counts.get(kind, 0)), style=style)
        stats.append("  errors ", style="dim")
        stats.append(str(self._error_count), style="red")
        stats.append(f"  up {uptime}  :{self.config.proxy.port}", style="dim")
        return Panel(stats, style="cyan")

    def _build_exchanges_panel(self) -> Panel:
        if not self._exchanges:
            body = Text("Waiting for requests...", style="dim")
            return Panel(body, title="[blue]Recent exchanges[/blue]", border_style="blue")

        table = Table(expand=True, box=None, header_style="bold")
        table.add_column("Time", style="dim", width=8)
        table.add_column("Method", width=7)
        table.add_column("Status", width=6)
        table.add_column("Kind", width=11)
        table.add_column("Host", ratio=1, overflow="ellipsis")
        table.add_column("Path", ratio=2, overflow="ellipsis", no_wrap=True)

        for ex in self._exchanges:
            table.add_row(
                ex.timestamp.strftime("%H:%M:%S"),
                ex.method,
                Text(str(ex.status), style=status_style(ex.status)),
                Text(ex.kind, style=KIND_STYLES.get(ex.kind, "")),
                ex.host,
                ex.path,
            )
        return Panel(table, title="[blue]Recent exchanges[/blue]", border_style="blue")

    def _build_hosts_panel(self) -> Panel:
        table = Table(expand=True, box=None, show_header=False)
        table.add_column("Host", overflow="ellipsis", no_wrap=True)
        table.add_column("Hits", justify="right", style="cyan")
        for host, hits in self._hosts.most_common(TOP_HOSTS):
            table.add_row(host, str(hits))
        return Panel(table, title="[magenta]Top hosts[/magenta]", border_style="magenta")

    def _build_footer(self) -> Panel:
        if self._errors:
            lines = Text()
            for err in self._errors:
                lines.append("! ", style="red bold")
                lines.append(err + "\n", style="red")
            return Panel(lines, title="[red]Last errors[/red]", border_style="red")

        hint = Text(
            f"Open http://{self.config.proxy.host}:{self.config.proxy.port}/<encoded-url> to proxy",
            style="dim",
        )
        return Panel(hint, title="[dim]Status[/dim]", border_style="dim")
