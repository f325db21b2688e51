"""
hostprobe command line entry point.
"""

import click

from hostprobe import __version__
from hostprobe.diag.cli import diag
from hostprobe.dns.cli import dns
from hostprobe.inventory.cli import inventory
from hostprobe.ip.cli import ip
from hostprobe.logging_config import configure_logging
from hostprobe.recon.cli import recon
from hostprobe.services.cli import services


@click.group()
@click.version_option(__version__, prog_name="hostprobe")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--log-file", type=click.Path(dir_okay=False), help="Also log to this file")
def main(debug: bool, log_file: str | None):
    """Host-side network diagnostics."""
    configure_logging(debug=debug, log_file=log_file)


main.add_command(diag)
main.add_command(dns)
main.add_command(ip)
main.add_command(recon)
main.add_command(services)
main.add_command(inventory)


if __name__ == "__main__":
    main()
