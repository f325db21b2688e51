"""
Diagnostics Module

Provides echo probes, ping statistics and TTL-stepped traceroute.
"""

from hostprobe.diag.core import (
    Prober,
    TracerouteEngine,
    ProbeResult,
    PingSummary,
    TracerouteHop,
    probe,
    ping,
    traceroute,
)
from hostprobe.diag.echo import (
    EchoBackend,
    EchoReply,
    EchoStatus,
    PingCommandBackend,
)

__all__ = [
    "Prober",
    "TracerouteEngine",
    "ProbeResult",
    "PingSummary",
    "TracerouteHop",
    "probe",
    "ping",
    "traceroute",
    "EchoBackend",
    "EchoReply",
    "EchoStatus",
    "PingCommandBackend",
]
