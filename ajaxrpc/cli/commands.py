"""CLI commands for ajaxrpc."""

import json
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from ajaxrpc import __logo__, __version__
from ajaxrpc.cli.shared.logging_utils import configure_console_logging, ensure_rotating_log_file
from ajaxrpc.cli.shared.network_utils import is_port_in_use, parse_param, post_envelope

app = typer.Typer(
    name="ajaxrpc",
    help=f"{__logo__} ajaxrpc - JSON-RPC over HTTP for Python services",
    no_args_is_help=True,
)

console = Console()


def _load(config_path: Path | None):
    from ajaxrpc.config.loader import load_config

    try:
        return load_config(config_path)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)


# ============================================================================
# Server
# ============================================================================


@app.command()
def serve(
    host: str = typer.Option(None, "--host", "-h", help="Bind host (overrides config)"),
    port: int = typer.Option(None, "--port", "-p", help="Bind port (overrides config)"),
    config_path: Path = typer.Option(None, "--config", "-c", help="Path to config.json"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Serve the demo Service over HTTP (POST envelopes to the RPC path)."""
    import uvicorn

    from ajaxrpc.api.server import create_app

    config = _load(config_path)
    if host:
        config.server.host = host
    if port:
        config.server.port = port
    if verbose:
        config.logging.level = "DEBUG"

    if is_port_in_use(config.server.host, config.server.port):
        console.print(
            f"[red]Port {config.server.port} is already in use.[/red] "
            f"Use [cyan]--port[/cyan] to pick another one (current: {config.server.host}:{config.server.port})."
        )
        raise typer.Exit(1)

    configure_console_logging(config.logging.level)
    if config.logging.file_enabled:
        log_path = ensure_rotating_log_file("server", config.logging)
        console.print(f"[dim]Logs: {log_path}[/dim]")

    console.print(f"{__logo__} Starting ajaxrpc on {config.rpc_url}")
    uvicorn.run(
        create_app(config=config),
        host=config.server.host,
        port=config.server.port,
        log_level="debug" if verbose else "info",
    )


# ============================================================================
# Client
# ============================================================================


@app.command()
def call(
    method: str = typer.Argument(..., help="Target as Service.Method"),
    params: list[str] = typer.Argument(None, help="Positional parameters (JSON literals)"),
    url: str = typer.Option(None, "--url", "-u", help="RPC endpoint URL (default from config)"),
    request_id: str = typer.Option("0", "--id", help="Request id (JSON literal)"),
    config_path: Path = typer.Option(None, "--config", "-c", help="Path to config.json"),
):
    """Send one request to a running server and print the response."""
    target = url or _load(config_path).rpc_url
    envelope = {
        "id": parse_param(request_id),
        "method": method,
        "params": [parse_param(p) for p in params or []],
    }
    try:
        response = post_envelope(target, envelope)
    except RuntimeError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    console.print_json(json.dumps(response))
    if "error" in response:
        raise typer.Exit(2)


@app.command()
def methods():
    """List the methods the demo server exposes."""
    from ajaxrpc.api.demo import build_demo_server

    server = build_demo_server()
    table = Table(title="Registered methods")
    table.add_column("Method", style="cyan")
    table.add_column("Parameters")
    table.add_column("Result")
    for service_name in server.registry.names():
        service = server.registry.lookup(service_name)
        for name, descriptor in sorted(service.methods.items()):
            shapes = ", ".join(shape.name for shape in descriptor.argument_shapes)
            table.add_row(f"{service_name}.{name}", shapes or "-", str(getattr(descriptor.result_type, "__name__", descriptor.result_type)))
    console.print(table)


@app.command()
def version():
    """Show version."""
    console.print(f"{__logo__} ajaxrpc v{__version__}")


if __name__ == "__main__":
    app()
