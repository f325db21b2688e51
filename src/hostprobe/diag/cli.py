"""
Diagnostics CLI commands.
"""

import json

import click
from rich.console import Console
from rich.table import Table

from hostprobe.diag.core import Prober, TracerouteEngine, TracerouteHop
from hostprobe.errors import HostProbeError
from hostprobe.logging_config import LogSink
from hostprobe.tabular import to_rows


@click.group()
def diag():
    """Network diagnostics utilities."""
    pass


@diag.command()
@click.argument("host")
@click.option("-t", "--timeout", type=float, help="Timeout in seconds")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def probe(host: str, timeout: float | None, as_json: bool):
    """Send a single echo probe to a host.

    Examples:
        hostprobe diag probe 8.8.8.8
        hostprobe diag probe example.com -t 1
    """
    console = Console()

    try:
        with console.status(f"[cyan]Probing {host}...[/cyan]"):
            result = Prober().probe(host, timeout)
    except HostProbeError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    LogSink().record(result)

    if as_json:
        click.echo(json.dumps(to_rows(result), indent=2))
        return

    if result.success:
        console.print(f"[green]{host} is reachable[/green] ({result.latency_ms:.2f} ms)")
    else:
        console.print(f"[red]{host} is not reachable[/red] ({result.error.value})")
        raise SystemExit(1)


@diag.command("ping")
@click.argument("host")
@click.option("-c", "--count", default=4, help="Number of pings to send")
@click.option("-t", "--timeout", type=float, help="Timeout per ping in seconds")
def ping_cmd(host: str, count: int, timeout: float | None):
    """Ping a host and show statistics.

    Examples:
        hostprobe diag ping 8.8.8.8
        hostprobe diag ping example.com -c 10
    """
    console = Console()

    try:
        with console.status(f"[cyan]Pinging {host}...[/cyan]"):
            result = Prober().ping(host, count, timeout)
    except HostProbeError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    LogSink().record(result)

    table = Table(title=f"Ping: {host}", show_header=False, box=None)
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Host", host)
    table.add_row("Packets Sent", str(result.packets_sent))
    table.add_row("Packets Received", str(result.packets_received))

    loss_color = "green" if result.packet_loss == 0 else "yellow" if result.packet_loss < 50 else "red"
    table.add_row("Packet Loss", f"[{loss_color}]{result.packet_loss:.1f}%[/{loss_color}]")

    if result.avg_ms is not None:
        table.add_row("", "")
        table.add_row("Min RTT", f"{result.min_ms:.2f} ms")
        table.add_row("Avg RTT", f"{result.avg_ms:.2f} ms")
        table.add_row("Max RTT", f"{result.max_ms:.2f} ms")

    console.print(table)


def _hop_row(hop: TracerouteHop) -> list[str]:
    if hop.is_error:
        return [str(hop.ttl), "*", "[red]Error occurred during traceroute[/red]"]
    if hop.address is None:
        return [str(hop.ttl), "*", "[dim]Request timed out[/dim]"]
    rtt = f"{hop.rtt_ms:.1f}ms" if hop.rtt_ms is not None else "-"
    if hop.reached_destination:
        rtt += " [green](destination)[/green]"
    return [str(hop.ttl), hop.address, rtt]


@diag.command()
@click.argument("host")
@click.option("-m", "--max-hops", type=int, help="Maximum number of hops")
@click.option("-t", "--timeout", type=float, help="Timeout per hop in seconds")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def trace(host: str, max_hops: int | None, timeout: float | None, as_json: bool):
    """Perform a traceroute to a host.

    Examples:
        hostprobe diag trace 8.8.8.8
        hostprobe diag trace example.com -m 20
    """
    console = Console()

    try:
        with console.status(f"[cyan]Tracing route to {host}...[/cyan]") as status:
            hops = TracerouteEngine().trace(
                host,
                max_hops,
                timeout,
                on_hop=lambda hop: status.update(f"[cyan]Tracing route to {host}... hop {hop.ttl}[/cyan]"),
            )
    except HostProbeError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    LogSink().record(hops)

    if as_json:
        click.echo(json.dumps(to_rows(hops), indent=2))
        return

    table = Table(title=f"Traceroute: {host}", box=None)
    table.add_column("Hop", style="cyan", width=4)
    table.add_column("IP", style="white", width=40)
    table.add_column("RTT", style="white")

    for hop in hops:
        table.add_row(*_hop_row(hop))

    console.print(table)
