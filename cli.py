"""CLI entry point for path-gateway."""

import sys
from datetime import datetime

from rich.console import Console
from rich.table import Table

from app import create_app
from core.config import CONFIG_FILE, load_config
from core.exceptions import ConfigurationError
from core.header_rules import Delete, Keep
from ui.dashboard import Dashboard
from ui.log_utils import write_cli_log

console = Console()


def main():
    """Main CLI entry point."""
    config = load_config()

    # Handle CLI arguments
    if len(sys.argv) > 1:
        arg = sys.argv[1]

        if arg == "--config":
            console.print(f"[bold]Config:[/bold] {CONFIG_FILE}")
            return

        if arg == "--rules":
            _print_rules(config)
            return

        if arg in ("--help", "-h"):
            _print_help()
            return

    try:
        config.rule_set()
    except ConfigurationError as e:
        console.print(f"[red][ERROR][/red] {e}")
        console.print(f"[dim]Edit {CONFIG_FILE} and fix header_rules[/dim]")
        sys.exit(1)

    dashboard = Dashboard(config)

    import uvicorn

    app = create_app(config, dashboard)

    # Run with dashboard
    uvicorn_config = uvicorn.Config(
        app,
        host=config.proxy.host,
        port=config.proxy.port,
        log_level="warning",
        timeout_keep_alive=config.proxy.keep_alive_timeout,
    )
    server = uvicorn.Server(uvicorn_config)

    dashboard.start()
    start_time = datetime.now()
    write_cli_log("STARTUP", "Gateway started", port=config.proxy.port)
    try:
        server.run()
    finally:
        duration = datetime.now() - start_time
        write_cli_log("SHUTDOWN", "Gateway stopped", duration=str(duration))
        dashboard.stop()


def _print_rules(config):
    """Print the active header rule table."""
    try:
        rule_set = config.rule_set()
    except ConfigurationError as e:
        console.print(f"[red][ERROR][/red] {e}")
        sys.exit(1)

    table = Table(title="Header rules", header_style="bold")
    table.add_column("Hostname", style="cyan")
    table.add_column("Header")
    table.add_column("Action")
    for hostname, directives in rule_set.rules.items():
        for name, directive in directives.items():
            if isinstance(directive, Keep):
                action = "[dim]keep[/dim]"
            elif isinstance(directive, Delete):
                action = "[red]delete[/red]"
            else:
                action = f"set to [green]{directive.value}[/green]"
            table.add_row(hostname, name, action)
    console.print(table)


def _print_help():
    """Print help message."""
    help_text = """
[bold cyan]Path Gateway[/bold cyan]

Forwards /<percent-encoded-url> to the embedded URL and rewrites the response
(cookies, redirects, HTML links) so browsing stays on the gateway.

[bold]Usage:[/bold]
    path-gateway              Start with live dashboard
    path-gateway --config     Show config location
    path-gateway --rules      Show the active header rules
    path-gateway --help       Show this help
"""
    console.print(help_text)


if __name__ == "__main__":
    main()
