"""
Inventory CLI commands.
"""

import json

import click
from rich.console import Console
from rich.table import Table

from hostprobe.inventory.adapters import get_interface_statistics, list_adapters
from hostprobe.tabular import to_rows


@click.group()
def inventory():
    """Local network adapters."""
    pass


@inventory.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def adapters(as_json: bool):
    """List local network adapters.

    Examples:
        hostprobe inventory adapters
    """
    console = Console()
    found = list_adapters()

    if as_json:
        click.echo(json.dumps(to_rows(found), indent=2))
        return

    table = Table(title="Network Adapters", box=None)
    table.add_column("Name", style="cyan")
    table.add_column("Status", style="white")
    table.add_column("MAC", style="dim")
    table.add_column("Addresses", style="white")

    for adapter in sorted(found, key=lambda a: a.name):
        status = "[green]UP[/green]" if adapter.is_up else "[red]DOWN[/red]"
        table.add_row(adapter.name, status, adapter.mac or "-", "\n".join(adapter.addresses) or "-")

    console.print(table)


@inventory.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def stats(as_json: bool):
    """Show traffic counters for non-loopback interfaces.

    Examples:
        hostprobe inventory stats
    """
    console = Console()
    counters = get_interface_statistics()

    if as_json:
        click.echo(json.dumps(to_rows(list(counters.values())), indent=2))
        return

    table = Table(title="Interface Statistics", box=None)
    table.add_column("Name", style="cyan")
    table.add_column("Bytes In", justify="right")
    table.add_column("Bytes Out", justify="right")
    table.add_column("Packets In", justify="right")
    table.add_column("Packets Out", justify="right")
    table.add_column("Errors", justify="right", style="red")
    table.add_column("Drops", justify="right", style="yellow")

    for name in sorted(counters):
        s = counters[name]
        table.add_row(
            name,
            f"{s.bytes_recv:,}",
            f"{s.bytes_sent:,}",
            f"{s.packets_recv:,}",
            f"{s.packets_sent:,}",
            str(s.errors_in + s.errors_out),
            str(s.drops_in + s.drops_out),
        )

    console.print(table)
