"""
DNS CLI commands.
"""

import json

import click
from rich.console import Console

from hostprobe.dns.core import DnsPythonBackend, ForwardAnswer, Resolver
from hostprobe.errors import HostProbeError
from hostprobe.tabular import to_rows


@click.group()
def dns():
    """DNS utilities."""
    pass


@dns.command()
@click.argument("target")
@click.option("-s", "--server", help="DNS server to query")
@click.option("-t", "--timeout", type=float, help="Lookup timeout in seconds")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def resolve(target: str, server: str | None, timeout: float | None, as_json: bool):
    """Resolve a host name, or reverse-resolve an IP address.

    Examples:
        hostprobe dns resolve example.com
        hostprobe dns resolve 8.8.8.8
        hostprobe dns resolve example.com -s 1.1.1.1
    """
    console = Console()

    try:
        backend = None
        if server:
            backend = DnsPythonBackend(nameservers=[server], timeout=timeout or 5.0)
        resolver = Resolver(backend=backend, timeout=timeout)
        with console.status(f"[cyan]Resolving {target}...[/cyan]"):
            answer = resolver.resolve(target)
    except HostProbeError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    if as_json:
        click.echo(json.dumps(to_rows(answer), indent=2))
        return

    if isinstance(answer, ForwardAnswer):
        console.print(f"[cyan]IP addresses for {target}:[/cyan]")
        for address in answer.addresses:
            console.print(f"  {address}")
    else:
        console.print(f"[cyan]Host name for {target}:[/cyan] {answer.hostname}")
