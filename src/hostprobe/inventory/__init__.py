"""
Local adapter inventory.
"""

from hostprobe.inventory.adapters import (
    AdapterInfo,
    InterfaceStats,
    list_adapters,
    get_mac_addresses,
    get_local_ip_addresses,
    get_interface_statistics,
)

__all__ = [
    "AdapterInfo",
    "InterfaceStats",
    "list_adapters",
    "get_mac_addresses",
    "get_local_ip_addresses",
    "get_interface_statistics",
]
