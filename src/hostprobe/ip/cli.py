"""
Subnet CLI commands.
"""

import json

import click
from rich.console import Console
from rich.table import Table

from hostprobe.errors import HostProbeError
from hostprobe.ip.core import calculate_subnet, compute_bounds, mask_from_prefix
from hostprobe.tabular import to_rows


@click.group()
def ip():
    """Subnet calculations."""
    pass


@ip.command()
@click.argument("address")
@click.argument("mask")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def bounds(address: str, mask: str, as_json: bool):
    """Compute network and broadcast addresses for ADDRESS/MASK.

    MASK is a netmask (255.255.255.0, ffff:ffff::) or a prefix length (24).

    Examples:
        hostprobe ip bounds 192.168.1.130 255.255.255.0
        hostprobe ip bounds 2001:db8::1 64
    """
    console = Console()

    try:
        if mask.isdigit():
            version = 6 if ":" in address else 4
            mask = mask_from_prefix(int(mask), version)
        result = compute_bounds(address, mask)
    except HostProbeError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    if as_json:
        click.echo(json.dumps(to_rows(result), indent=2))
        return

    table = Table(title=f"Subnet Bounds: {address} / {mask}", show_header=False, box=None)
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="white")
    table.add_row("Network", result.network_address)
    table.add_row("Broadcast", result.broadcast_address)
    console.print(table)


@ip.command()
@click.argument("cidr")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def subnet(cidr: str, as_json: bool):
    """Show subnet details for a CIDR block.

    Examples:
        hostprobe ip subnet 10.0.0.0/22
        hostprobe ip subnet 2001:db8::/48
    """
    console = Console()

    try:
        info = calculate_subnet(cidr)
    except HostProbeError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    if as_json:
        click.echo(json.dumps(to_rows(info), indent=2))
        return

    table = Table(title=f"Subnet: {cidr}", show_header=False, box=None)
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Network", f"{info.network}/{info.prefix_length}")
    table.add_row("Broadcast", info.broadcast)
    table.add_row("Netmask", info.netmask)
    table.add_row("Hostmask", info.hostmask)
    table.add_row("Addresses", f"{info.num_addresses:,}")
    table.add_row("Usable Hosts", f"{info.num_hosts:,}")
    if info.first_host:
        table.add_row("First Host", info.first_host)
        table.add_row("Last Host", info.last_host)
    table.add_row("IP Version", f"IPv{info.version}")

    console.print(table)
