"""
Flatten result values into rectangular rows.

Storage and report collaborators consume list[dict] with the same keys
in every row; nothing here imposes a schema beyond that.
"""

from dataclasses import asdict
from enum import Enum
from functools import singledispatch
from typing import Any

from hostprobe.diag.core import PingSummary, ProbeResult, TracerouteHop
from hostprobe.dns.core import ForwardAnswer, ReverseAnswer
from hostprobe.inventory.adapters import AdapterInfo, InterfaceStats
from hostprobe.ip.core import SubnetBounds, SubnetInfo
from hostprobe.recon.scanner import PortScanResult
from hostprobe.services.publicip import PublicIPOutcome


def _plain(row: dict[str, Any]) -> dict[str, Any]:
    return {k: v.value if isinstance(v, Enum) else v for k, v in row.items()}


@singledispatch
def to_rows(result: Any) -> list[dict[str, Any]]:
    """Convert a result value (or list of them) to rows."""
    raise TypeError(f"Cannot tabulate {type(result).__name__}")


@to_rows.register(list)
def _(result: list) -> list[dict[str, Any]]:
    return [row for item in result for row in to_rows(item)]


@to_rows.register(ProbeResult)
@to_rows.register(PingSummary)
@to_rows.register(TracerouteHop)
@to_rows.register(SubnetBounds)
@to_rows.register(SubnetInfo)
@to_rows.register(InterfaceStats)
def _(result) -> list[dict[str, Any]]:
    return [_plain(asdict(result))]


@to_rows.register(AdapterInfo)
def _(result: AdapterInfo) -> list[dict[str, Any]]:
    row = asdict(result)
    row["addresses"] = ",".join(result.addresses)
    return [row]


@to_rows.register(PortScanResult)
def _(result: PortScanResult) -> list[dict[str, Any]]:
    return [
        {"host": result.host, "port": port, "state": "open"}
        for port in sorted(result.open_ports)
    ]


@to_rows.register(ForwardAnswer)
def _(result: ForwardAnswer) -> list[dict[str, Any]]:
    return [
        {"query": result.query, "type": "forward", "answer": address}
        for address in result.addresses
    ]


@to_rows.register(ReverseAnswer)
def _(result: ReverseAnswer) -> list[dict[str, Any]]:
    return [{"query": result.query, "type": "reverse", "answer": result.hostname}]


@to_rows.register(PublicIPOutcome)
def _(result: PublicIPOutcome) -> list[dict[str, Any]]:
    return [{"address": result.address, "endpoint": result.endpoint, "resolved": result.resolved}]
