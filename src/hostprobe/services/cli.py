"""
Service lookup CLI commands.
"""

import json

import click
from rich.console import Console

from hostprobe.errors import HostProbeError
from hostprobe.logging_config import LogSink
from hostprobe.services.publicip import PublicIPResolver, check_connectivity
from hostprobe.tabular import to_rows


@click.group()
def services():
    """Public IP and connectivity checks."""
    pass


@services.command("public-ip")
@click.option("-e", "--endpoint", "endpoints", multiple=True,
              help="Endpoint to ask, in order (repeatable)")
@click.option("-t", "--timeout", type=float, help="Timeout per endpoint in seconds")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def public_ip(endpoints: tuple[str, ...], timeout: float | None, as_json: bool):
    """Discover this host's public IP address.

    Examples:
        hostprobe services public-ip
        hostprobe services public-ip -e https://api.ipify.org -e https://icanhazip.com
    """
    console = Console()

    try:
        resolver = PublicIPResolver(endpoints=endpoints or None, timeout=timeout)
    except HostProbeError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    with console.status("[cyan]Looking up public IP...[/cyan]"):
        outcome = resolver.resolve()

    LogSink().record(outcome)

    if as_json:
        click.echo(json.dumps(to_rows(outcome), indent=2))
        return

    if outcome.resolved:
        console.print(f"[cyan]Public IP:[/cyan] [green]{outcome.address}[/green]")
        console.print(f"[dim]via {outcome.endpoint}[/dim]")
    else:
        console.print("[red]Unable to retrieve public IP.[/red]")
        raise SystemExit(1)


@services.command()
@click.option("-u", "--url", help="URL to check")
@click.option("-t", "--timeout", type=float, help="Timeout in seconds")
def connectivity(url: str | None, timeout: float | None):
    """Check internet connectivity.

    Examples:
        hostprobe services connectivity
        hostprobe services connectivity -u https://example.com
    """
    console = Console()

    try:
        with console.status("[cyan]Checking connectivity...[/cyan]"):
            online = check_connectivity(url, timeout)
    except HostProbeError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    LogSink().write("info" if online else "warning", f"connectivity online={online}")

    if online:
        console.print("[green]Internet connection is available[/green]")
    else:
        console.print("[red]No internet connection[/red]")
        raise SystemExit(1)
