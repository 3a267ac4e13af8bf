"""CLI entry point for cors-relay."""

import sys
from datetime import datetime

from rich.console import Console

from app import create_app
from core.config import CONFIG_FILE, load_config
from core.exceptions import ConfigurationError
from ui.dashboard import Dashboard
from ui.log_utils import clear_logs, shutdown_log_executor, write_cli_log

console = Console()


def main():
    """Main CLI entry point."""
    config = load_config()

    # Handle CLI arguments
    args = sys.argv[1:]
    if args:
        arg = args[0]

        if arg == "--config":
            console.print(f"[bold]Config:[/bold] {CONFIG_FILE}")
            return

        if arg in ("--help", "-h"):
            _print_help()
            return

        if arg == "--port":
            try:
                config.server.port = _parse_port(args[1:])
            except ConfigurationError as e:
                console.print(f"[red][ERROR][/red] {e}")
                sys.exit(1)

    # Clear previous logs and start dashboard
    clear_logs()
    dashboard = Dashboard(config)

    import uvicorn

    app = create_app(config, dashboard)

    uvicorn_config = uvicorn.Config(
        app,
        host=config.server.host,
        port=config.server.port,
        log_level="warning",
        timeout_keep_alive=config.server.keep_alive_timeout,
    )
    server = uvicorn.Server(uvicorn_config)

    dashboard.start()
    start_time = datetime.now()
    write_cli_log("STARTUP", "Relay started", port=config.server.port)
    try:
        server.run()
    finally:
        duration = datetime.now() - start_time
        write_cli_log("SHUTDOWN", "Relay stopped", duration=str(duration))
        shutdown_log_executor()
        dashboard.stop()


def _parse_port(values: list[str]) -> int:
    """Parse the value following --port."""
    if not values:
        raise ConfigurationError("--port requires a value")
    try:
        port = int(values[0])
    except ValueError:
        raise ConfigurationError(f"Invalid port: {values[0]}") from None
    if not 0 < port < 65536:
        raise ConfigurationError(f"Port out of range: {port}")
    return port


def _print_help():
    """Print help message."""
    help_text = """
[bold cyan]CORS Relay[/bold cyan]

Forwards any request to the URL in its path and adds permissive CORS headers.

[bold]Usage:[/bold]
    cors-relay                 Start with live dashboard
    cors-relay --port 9000     Start on a different port
    cors-relay --config        Show config location
    cors-relay --help          Show this help

[bold]Requests:[/bold]
    GET http://localhost:8080/https://api.github.com/repos/AsmSafone/SafoneAPI
"""
    console.print(help_text)


if __name__ == "__main__":
    main()
