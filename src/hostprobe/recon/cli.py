"""
Reconnaissance CLI commands.
"""

import json

import click
from rich.console import Console
from rich.table import Table

from hostprobe.config import get_config
from hostprobe.errors import HostProbeError
from hostprobe.logging_config import LogSink
from hostprobe.recon.scanner import PortScanner, PortScanRequest
from hostprobe.tabular import to_rows


@click.group()
def recon():
    """Port scanning."""
    pass


@recon.command()
@click.argument("host")
@click.option("-s", "--start", "start_port", default=1, help="First port of the range")
@click.option("-e", "--end", "end_port", default=1024, help="Last port of the range")
@click.option("-t", "--timeout", type=float, help="Connect timeout per port in seconds")
@click.option("-c", "--concurrency", type=int, help="Maximum connects in flight")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def scan(
    host: str,
    start_port: int,
    end_port: int,
    timeout: float | None,
    concurrency: int | None,
    as_json: bool,
):
    """Scan a TCP port range on a host.

    Examples:
        hostprobe recon scan 192.168.1.1
        hostprobe recon scan example.com -s 1 -e 65535 -c 512
    """
    console = Console()

    try:
        config = get_config()
        request = PortScanRequest(
            host=host,
            start_port=start_port,
            end_port=end_port,
            timeout=timeout if timeout is not None else config.scan_timeout,
            max_concurrency=concurrency if concurrency is not None else config.scan_concurrency,
        )
        with console.status(f"[cyan]Scanning {request.port_count} ports on {host}...[/cyan]"):
            result = PortScanner().scan(request)
    except HostProbeError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    LogSink().record(result)

    if as_json:
        click.echo(json.dumps(to_rows(result), indent=2))
        return

    console.print(f"\n[cyan]Port Scan Results for {host}[/cyan]")
    console.print(
        f"[green]Open:[/green] {len(result.open_ports)}  "
        f"[dim]Scanned:[/dim] {result.attempted}\n"
    )

    if not result.open_ports:
        console.print("[yellow]No open ports found[/yellow]")
        return

    table = Table(box=None)
    table.add_column("Port", style="cyan", width=8)
    table.add_column("Status", style="white", width=10)
    table.add_column("Service", style="dim", width=30)

    for port in sorted(result.open_ports):
        service = result.service_name(port) or "-"
        table.add_row(str(port), "[green]OPEN[/green]", service)

    console.print(table)
