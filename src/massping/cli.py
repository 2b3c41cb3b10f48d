"""CLI entry point for massping."""

import logging
import sys

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from . import __version__
from .core.config import get_config
from .core.exceptions import MassPingError
from .core.utils import get_interfaces
from .sweep.runner import SweepResult, run_sweep
from .targets import expand_target, expand_targets, local_networks

console = Console()


def print_error(message: str) -> None:
    """Print error message in red."""
    console.print(f"[red]Error:[/red] {message}")


def print_success(message: str) -> None:
    """Print success message in green."""
    console.print(f"[green]✓[/green] {message}")


def print_warning(message: str) -> None:
    """Print warning message in yellow."""
    console.print(f"[yellow]Warning:[/yellow] {message}")


def setup_logging(verbose: bool) -> None:
    """Route library logs through rich, DEBUG when verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=verbose)],
        force=True,
    )
    # Scapy is chatty at import time
    logging.getLogger("scapy").setLevel(logging.ERROR)


@click.group()
@click.version_option(version=__version__, prog_name="massping")
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """massping - concurrent ICMP echo sweeps."""
    ctx.ensure_object(dict)
    config = get_config()
    config.verbose = verbose or config.verbose
    setup_logging(config.verbose)
    ctx.obj["config"] = config


def _run(targets: list[str], timeout_ms: float | None, **kwargs) -> SweepResult:
    timeout = timeout_ms / 1000 if timeout_ms is not None else None

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task(f"Pinging {len(targets)} targets...", total=None)
        try:
            result = run_sweep(targets, timeout=timeout, **kwargs)
        except MassPingError as e:
            print_error(str(e))
            sys.exit(1)
        progress.update(task, completed=True)

    return result


@main.command()
@click.argument("targets", nargs=-1, required=True)
@click.option("--timeout", "-t", type=float, default=None, help="Reply timeout per probe in ms (default: 50)")
@click.option("--deadline", type=float, default=None, help="Upper bound on the whole sweep in seconds")
@click.option("--max-in-flight", type=int, default=None, help="Maximum concurrent probes")
@click.option("--output", "-o", type=click.Path(), help="Output file")
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["json", "csv"]),
    default="json",
    help="Output file format (default: json)",
)
def sweep(
    targets: tuple[str, ...],
    timeout: float | None,
    deadline: float | None,
    max_in_flight: int | None,
    output: str | None,
    fmt: str,
) -> None:
    """Ping TARGETS (addresses, CIDR networks, 10.0.0.1-20 ranges or 10.0.0 prefixes)."""
    try:
        addresses = expand_targets(targets)
    except MassPingError as e:
        print_error(str(e))
        sys.exit(1)

    console.print(f"[bold]Sweeping {len(addresses)} addresses...[/bold]")

    result = _run(addresses, timeout, max_in_flight=max_in_flight, sweep_deadline=deadline)

    if not result.hosts:
        console.print("[yellow]No hosts responded.[/yellow]")
    else:
        table = Table(title=f"Responding Hosts ({len(result.hosts)})")
        table.add_column("#", style="dim", justify="right")
        table.add_column("IP Address", style="cyan")
        for row in result.host_rows():
            table.add_row(str(row["position"]), row["ip"])
        console.print(table)

    stats = result.stats
    console.print(
        Panel(
            f"[green]Up: {stats.responded}[/green] | "
            f"[yellow]Timed out: {stats.timed_out}[/yellow] | "
            f"[red]Invalid: {stats.invalid}[/red] | "
            f"[red]Send failed: {stats.send_failed + stats.transport_errors}[/red] | "
            f"Duration: {result.duration:.2f}s",
            title="Sweep Summary",
        )
    )

    if output:
        from .output import export_csv, export_json

        path = export_csv(result, output) if fmt == "csv" else export_json(result, output)
        print_success(f"Results saved to {path}")


@main.command()
@click.option("--subnet", default="192.168.0", show_default=True, help="The prefix of the subnet to scan")
@click.option("--timeout", "-t", type=float, default=None, help="Reply timeout per probe in ms (default: 50)")
def subnet(subnet: str, timeout: float | None) -> None:
    """Ping .1 through .254 of a /24 prefix and list the hosts found."""
    try:
        addresses = expand_target(subnet)
    except MassPingError as e:
        print_error(str(e))
        sys.exit(1)

    console.print(f"Searching for hosts in {subnet}.0...")
    result = _run(addresses, timeout)

    console.print(f"Found {len(result.hosts)} hosts:")
    for host in result.hosts:
        console.print(f"\t- {host}")


@main.command()
def interfaces() -> None:
    """List local interfaces and the IPv4 networks they can sweep."""
    table = Table(title="Network Interfaces")
    table.add_column("Name", style="cyan")
    table.add_column("IPv4", style="green")
    table.add_column("Netmask")
    table.add_column("Status", style="yellow")

    for name, info in get_interfaces().items():
        status = "up" if info.get("is_up") else "down"
        table.add_row(name, str(info.get("ipv4") or "-"), str(info.get("netmask") or "-"), status)

    console.print(table)

    networks = local_networks()
    if networks:
        console.print(f"[bold]Sweepable networks:[/bold] {', '.join(networks)}")
    else:
        print_warning("No IPv4 networks found on active interfaces.")


if __name__ == "__main__":
    main()
