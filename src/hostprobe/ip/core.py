"""
Core subnet functionality.
"""

from dataclasses import dataclass

from netaddr import IPAddress, IPNetwork, AddrFormatError

from hostprobe.errors import InvalidArgument


@dataclass(frozen=True)
class SubnetBounds:
    """Network and broadcast address of a subnet."""
    network_address: str
    broadcast_address: str


@dataclass(frozen=True)
class SubnetInfo:
    """Information about a subnet."""
    network: str
    broadcast: str
    netmask: str
    hostmask: str
    prefix_length: int
    num_addresses: int
    num_hosts: int
    first_host: str | None
    last_host: str | None
    version: int


def _parse(value: str, what: str) -> IPAddress:
    try:
        return IPAddress(str(value).strip())
    except (AddrFormatError, ValueError, TypeError) as e:
        raise InvalidArgument(f"Invalid {what} {value!r}: {e}")


def _from_bytes(data: bytes, version: int) -> str:
    return str(IPAddress(int.from_bytes(data, "big"), version))


def compute_bounds(address: str, mask: str) -> SubnetBounds:
    """Compute network and broadcast addresses byte by byte.

    Both arguments must be of the same family (4 bytes for IPv4, 16 for
    IPv6), otherwise InvalidArgument is raised.
    """
    addr = _parse(address, "address")
    net_mask = _parse(mask, "mask")

    addr_bytes = addr.packed
    mask_bytes = net_mask.packed
    if len(addr_bytes) != len(mask_bytes):
        raise InvalidArgument(
            f"Address {address} and mask {mask} length do not match "
            f"({len(addr_bytes)} vs {len(mask_bytes)} bytes)"
        )

    network = bytes(a & m for a, m in zip(addr_bytes, mask_bytes))
    broadcast = bytes(a | (~m & 0xFF) for a, m in zip(addr_bytes, mask_bytes))

    return SubnetBounds(
        network_address=_from_bytes(network, addr.version),
        broadcast_address=_from_bytes(broadcast, addr.version),
    )


def mask_from_prefix(prefix_length: int, version: int = 4) -> str:
    """Build a netmask string for a prefix length."""
    if version not in (4, 6):
        raise InvalidArgument(f"Unknown IP version {version}")
    width = 32 if version == 4 else 128
    if not 0 <= prefix_length <= width:
        raise InvalidArgument(f"Prefix /{prefix_length} out of range for IPv{version}")
    bits = ((1 << prefix_length) - 1) << (width - prefix_length)
    return str(IPAddress(bits, version))


def calculate_subnet(cidr: str) -> SubnetInfo:
    """Calculate subnet information from CIDR notation."""
    try:
        net = IPNetwork(cidr.strip())
    except (AddrFormatError, ValueError, TypeError) as e:
        raise InvalidArgument(f"Invalid CIDR {cidr!r}: {e}")

    # /31 and /32 (v4), /127 and /128 (v6) have no network/broadcast split
    host_limit = 31 if net.version == 4 else 127
    if net.prefixlen >= host_limit:
        first_host = None
        last_host = None
        num_hosts = 2 if net.prefixlen == host_limit else 0
    else:
        first_host = str(net.network + 1)
        last_host = str(net.broadcast - 1)
        num_hosts = net.size - 2

    # netaddr reports no broadcast for /31 and /32
    broadcast = net.broadcast if net.broadcast is not None else IPAddress(net.last, net.version)

    return SubnetInfo(
        network=str(net.network),
        broadcast=str(broadcast),
        netmask=str(net.netmask),
        hostmask=str(net.hostmask),
        prefix_length=net.prefixlen,
        num_addresses=net.size,
        num_hosts=num_hosts,
        first_host=first_host,
        last_host=last_host,
        version=net.version,
    )
