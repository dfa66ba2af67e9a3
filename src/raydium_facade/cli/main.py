"""CLI for inspecting the Raydium facade caches."""

import json
import logging
from datetime import UTC, datetime
from enum import StrEnum
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.traceback import install

from raydium_facade.core.config import FacadeConfig, load_config
from raydium_facade.data import get_cluster_endpoints, get_supported_clusters
from raydium_facade.facade import RaydiumFacade
from raydium_facade.solana.cluster import Cluster

# Install rich traceback handler
install(show_locals=False)

app = typer.Typer(
    name="raydium-facade",
    help="Inspect Raydium chain time, epoch, token lists and feature availability",
    add_completion=False,
)

console = Console()


class OutputFormat(StrEnum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"


def _configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
        force=True,
    )


def _build_facade(ctx: typer.Context, **overrides: Any) -> RaydiumFacade:
    """
    Build a facade from the global CLI options.

    Parameters
    ----------
    ctx : typer.Context
        Context holding the options parsed by the app callback
    **overrides : Any
        Config fields specific to the command

    Returns
    -------
    RaydiumFacade
        Loaded facade

    """
    options = ctx.obj
    config = load_config(options["config"]) if options["config"] else FacadeConfig()
    return RaydiumFacade.load(
        config,
        cluster=options["cluster"],
        rpc_url=options["rpc_url"],
        skip_token_load=True,
        **overrides,
    )


def _emit(data: Any, format: OutputFormat, table: Table) -> None:
    if format == OutputFormat.JSON:
        console.print(json.dumps(data, indent=2, default=str), soft_wrap=True, markup=False, highlight=False)
    else:
        console.print(table)


def _format_ms(timestamp_ms: int) -> str:
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=UTC).isoformat(timespec="seconds")


@app.callback()
def main(
    ctx: typer.Context,
    cluster: Cluster | None = typer.Option(None, "--cluster", help="Solana cluster"),
    rpc_url: str | None = typer.Option(None, "--rpc-url", help="Solana JSON-RPC endpoint"),
    config: Path | None = typer.Option(None, "--config", help="YAML config file", exists=True, dir_okay=False),
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug output"),
) -> None:
    """Raydium facade inspection commands."""
    _configure_logging(debug)
    ctx.obj = {"cluster": cluster, "rpc_url": rpc_url, "config": config, "debug": debug}


@app.command()
def chain_time(
    ctx: typer.Context,
    format: OutputFormat = typer.Option(OutputFormat.TABLE, "--format", "-f", help="Output format"),
) -> None:
    """Show the chain time offset and chain time."""
    with _build_facade(ctx) as facade:
        offset_ms = facade.get_chain_time_offset()
        chain_time_ms = facade.get_current_chain_time()

    table = Table(title="Chain Time", show_header=True, header_style="bold magenta")
    table.add_column("Offset (ms)", style="cyan", justify="right")
    table.add_column("Chain Time", style="green")
    table.add_row(str(offset_ms), _format_ms(chain_time_ms))
    _emit({"offset_ms": offset_ms, "chain_time_ms": chain_time_ms}, format, table)


@app.command()
def epoch(
    ctx: typer.Context,
    format: OutputFormat = typer.Option(OutputFormat.TABLE, "--format", "-f", help="Output format"),
) -> None:
    """Show the current epoch."""
    try:
        with _build_facade(ctx) as facade:
            info = facade.get_epoch_info()
    except Exception as e:
        console.print(f"[bold red]Failed to fetch epoch info:[/bold red] {e}")
        if ctx.obj["debug"]:
            raise
        raise typer.Exit(1)

    table = Table(title="Epoch", show_header=True, header_style="bold magenta")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green", justify="right")
    for name, value in info.model_dump().items():
        table.add_row(name, "-" if value is None else str(value))
    _emit(info.model_dump(), format, table)


@app.command()
def tokens(
    ctx: typer.Context,
    external: bool = typer.Option(False, "--external", help="Show the external token list"),
    force: bool = typer.Option(False, "--force", help="Refetch even if cached"),
    limit: int = typer.Option(20, "--limit", "-n", help="Maximum rows to show"),
    format: OutputFormat = typer.Option(OutputFormat.TABLE, "--format", "-f", help="Output format"),
) -> None:
    """List tokens from the Raydium v3 or the external token list."""
    with _build_facade(ctx) as facade:
        if external:
            token_list = facade.get_external_token_list(force_refresh=force)
            title = "External Tokens"
        else:
            token_list = facade.get_token_list_v3(force_refresh=force).mint_list
            title = "Raydium Tokens"

    if not token_list:
        console.print("[yellow]No tokens available[/yellow]")
        return

    table = Table(title=f"{title} ({len(token_list)})", show_header=True, header_style="bold magenta")
    table.add_column("Symbol", style="cyan")
    table.add_column("Mint", style="white")
    table.add_column("Decimals", style="yellow", justify="right")
    table.add_column("Mint Authority", style="dim")
    for token in token_list[:limit]:
        table.add_row(token.symbol, token.address, str(token.decimals), token.mint_authority or "-")
    _emit([t.model_dump(mode="json") for t in token_list[:limit]], format, table)


@app.command()
def availability(
    ctx: typer.Context,
    format: OutputFormat = typer.Option(OutputFormat.TABLE, "--format", "-f", help="Output format"),
) -> None:
    """Show which Raydium features are currently enabled."""
    with _build_facade(ctx, skip_availability_check=False) as facade:
        flags = facade.get_availability().to_wire()

    if not flags:
        console.print("[yellow]Availability unknown[/yellow]")
        return

    table = Table(title="Feature Availability", show_header=True, header_style="bold magenta")
    table.add_column("Feature", style="cyan")
    table.add_column("Enabled", style="green")
    for name, enabled in flags.items():
        table.add_row(name, "✓" if enabled else "[red]✗[/red]")
    _emit(flags, format, table)


@app.command()
def list_clusters() -> None:
    """List the clusters in the endpoint catalog."""
    table = Table(title="Supported Clusters", show_header=True, header_style="bold magenta")
    table.add_column("Cluster", style="cyan")
    table.add_column("API Host", style="green")
    table.add_column("RPC", style="blue")

    for cluster in get_supported_clusters():
        endpoints = get_cluster_endpoints(cluster)
        table.add_row(cluster, endpoints["base_host"], endpoints["rpc"])

    console.print(table)


if __name__ == "__main__":
    app()
