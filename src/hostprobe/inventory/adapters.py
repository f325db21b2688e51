"""
Local network adapter inventory.
"""

import socket
from dataclasses import dataclass, field

import psutil


@dataclass(frozen=True)
class AdapterInfo:
    """A local network interface."""
    name: str
    is_up: bool
    mac: str | None = None
    addresses: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class InterfaceStats:
    """Traffic counters for one interface."""
    name: str
    bytes_sent: int
    bytes_recv: int
    packets_sent: int
    packets_recv: int
    errors_in: int
    errors_out: int
    drops_in: int
    drops_out: int


def _is_loopback(name: str, addresses: list) -> bool:
    for addr in addresses:
        if addr.family == socket.AF_INET and addr.address.startswith("127."):
            return True
        if addr.family == socket.AF_INET6 and addr.address == "::1":
            return True
    lowered = name.lower()
    return lowered in ("lo", "lo0") or lowered.startswith("loopback")


def list_adapters() -> list[AdapterInfo]:
    """List local interfaces with their status, MAC and IP addresses."""
    stats = psutil.net_if_stats()
    adapters = []
    for name, addrs in psutil.net_if_addrs().items():
        mac = None
        ips = []
        for addr in addrs:
            if addr.family == psutil.AF_LINK:
                mac = addr.address or None
            elif addr.family in (socket.AF_INET, socket.AF_INET6):
                ips.append(addr.address)
        is_up = stats[name].isup if name in stats else False
        adapters.append(AdapterInfo(name=name, is_up=is_up, mac=mac, addresses=tuple(ips)))
    return adapters


def get_mac_addresses() -> list[str]:
    """MAC addresses of all interfaces that report one."""
    return [a.mac for a in list_adapters() if a.mac]


def get_local_ip_addresses() -> list[str]:
    """Every unicast address bound to a local interface."""
    return [ip for a in list_adapters() for ip in a.addresses]


def get_interface_statistics() -> dict[str, InterfaceStats]:
    """Traffic counters for every non-loopback interface."""
    counters = psutil.net_io_counters(pernic=True)
    addrs = psutil.net_if_addrs()
    result = {}
    for name, io in counters.items():
        if _is_loopback(name, addrs.get(name, [])):
            continue
        result[name] = InterfaceStats(
            name=name,
            bytes_sent=io.bytes_sent,
            bytes_recv=io.bytes_recv,
            packets_sent=io.packets_sent,
            packets_recv=io.packets_recv,
            errors_in=io.errin,
            errors_out=io.errout,
            drops_in=io.dropin,
            drops_out=io.dropout,
        )
    return result
