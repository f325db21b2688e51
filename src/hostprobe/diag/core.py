"""
Core diagnostics functionality.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Callable

from hostprobe.config import get_config
from hostprobe.diag.echo import EchoBackend, EchoStatus, PingCommandBackend, check_host
from hostprobe.errors import (
    ErrorKind,
    HostProbeError,
    InvalidArgument,
    ProbeRefused,
    ResolutionFailed,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProbeResult:
    """Result of a single echo probe."""
    target: str
    success: bool
    latency_ms: float | None = None
    error: ErrorKind | None = None


@dataclass(frozen=True)
class PingSummary:
    """Statistics over several sequential probes."""
    host: str
    packets_sent: int
    packets_received: int
    packet_loss: float
    min_ms: float | None = None
    avg_ms: float | None = None
    max_ms: float | None = None


@dataclass(frozen=True)
class TracerouteHop:
    """A single hop in a traceroute."""
    ttl: int
    address: str | None = None
    reached_destination: bool = False
    rtt_ms: float | None = None
    is_error: bool = False

    @property
    def is_timeout(self) -> bool:
        return self.address is None and not self.is_error


def _check_timeout(timeout: float) -> None:
    if timeout <= 0:
        raise InvalidArgument(f"Timeout must be positive, got {timeout}")


class Prober:
    """Single-host reachability probe."""

    def __init__(self, backend: EchoBackend | None = None):
        self.backend = backend or PingCommandBackend()

    async def probe_async(self, host: str, timeout: float | None = None) -> ProbeResult:
        """Send one echo probe. Network failures never raise."""
        check_host(host)
        timeout = timeout if timeout is not None else get_config().probe_timeout
        _check_timeout(timeout)

        start = time.monotonic()
        error: ErrorKind
        try:
            reply = await asyncio.wait_for(
                self.backend.echo(host, timeout),
                timeout=timeout + 1.0,
            )
        except asyncio.TimeoutError:
            error = ErrorKind.TIMEOUT
        except ResolutionFailed:
            error = ErrorKind.RESOLUTION
        except ProbeRefused:
            error = ErrorKind.REFUSED
        except OSError:
            error = ErrorKind.TRANSPORT
        else:
            if reply.status is EchoStatus.REPLY:
                latency = reply.rtt_ms
                if latency is None:
                    latency = (time.monotonic() - start) * 1000
                return ProbeResult(target=host, success=True, latency_ms=latency)
            error = ErrorKind.TIMEOUT

        logger.debug(f"Probe to {host} failed: {error.value}")
        return ProbeResult(target=host, success=False, error=error)

    def probe(self, host: str, timeout: float | None = None) -> ProbeResult:
        """Synchronous probe."""
        return asyncio.run(self.probe_async(host, timeout))

    async def ping_async(
        self,
        host: str,
        count: int = 4,
        timeout: float | None = None,
    ) -> PingSummary:
        """Probe a host count times, one after another, and summarize."""
        if count < 1:
            raise InvalidArgument(f"Count must be at least 1, got {count}")

        results = [await self.probe_async(host, timeout) for _ in range(count)]
        rtts = [r.latency_ms for r in results if r.success and r.latency_ms is not None]
        received = sum(1 for r in results if r.success)

        return PingSummary(
            host=host,
            packets_sent=count,
            packets_received=received,
            packet_loss=(count - received) * 100.0 / count,
            min_ms=min(rtts) if rtts else None,
            avg_ms=sum(rtts) / len(rtts) if rtts else None,
            max_ms=max(rtts) if rtts else None,
        )

    def ping(self, host: str, count: int = 4, timeout: float | None = None) -> PingSummary:
        """Synchronous ping."""
        return asyncio.run(self.ping_async(host, count, timeout))


class TracerouteEngine:
    """
    TTL-stepped chain of echo probes.

    Each call performs a fresh probe chain; hops are returned ordered by
    increasing TTL starting at 1.
    """

    def __init__(self, backend: EchoBackend | None = None):
        self.backend = backend or PingCommandBackend()

    async def trace_async(
        self,
        host: str,
        max_hops: int | None = None,
        hop_timeout: float | None = None,
        on_hop: Callable[[TracerouteHop], None] | None = None,
    ) -> list[TracerouteHop]:
        """
        Execute traceroute.

        Args:
            host: Destination host name or address
            max_hops: Highest TTL to try
            hop_timeout: Seconds to wait for each hop
            on_hop: Optional callback for real-time hop updates

        Returns:
            List of TracerouteHop, ending at the destination, at max_hops,
            or at a single error hop if the platform refused to probe
        """
        config = get_config()
        max_hops = max_hops if max_hops is not None else config.max_hops
        hop_timeout = hop_timeout if hop_timeout is not None else config.hop_timeout
        if max_hops < 1:
            raise InvalidArgument(f"max_hops must be at least 1, got {max_hops}")
        _check_timeout(hop_timeout)
        check_host(host)

        hops: list[TracerouteHop] = []

        for ttl in range(1, max_hops + 1):
            try:
                reply = await asyncio.wait_for(
                    self.backend.echo(host, hop_timeout, ttl=ttl),
                    timeout=hop_timeout + 1.0,
                )
            except asyncio.TimeoutError:
                hop = TracerouteHop(ttl=ttl)
            except (HostProbeError, OSError) as e:
                logger.info(f"Traceroute to {host} stopped at ttl {ttl}: {e}")
                hop = TracerouteHop(ttl=ttl, is_error=True)
                hops.append(hop)
                if on_hop:
                    on_hop(hop)
                break
            else:
                hop = TracerouteHop(
                    ttl=ttl,
                    address=reply.address,
                    reached_destination=reply.status is EchoStatus.REPLY,
                    rtt_ms=reply.rtt_ms,
                )

            hops.append(hop)
            if on_hop:
                on_hop(hop)

            if hop.reached_destination:
                break

        return hops

    def trace(
        self,
        host: str,
        max_hops: int | None = None,
        hop_timeout: float | None = None,
        on_hop: Callable[[TracerouteHop], None] | None = None,
    ) -> list[TracerouteHop]:
        """Synchronous traceroute."""
        return asyncio.run(self.trace_async(host, max_hops, hop_timeout, on_hop))


def probe(host: str, timeout: float | None = None) -> ProbeResult:
    """Probe a host once."""
    return Prober().probe(host, timeout)


def ping(host: str, count: int = 4, timeout: float | None = None) -> PingSummary:
    """Ping a host and return statistics."""
    return Prober().ping(host, count, timeout)


def traceroute(
    host: str,
    max_hops: int | None = None,
    hop_timeout: float | None = None,
    on_hop: Callable[[TracerouteHop], None] | None = None,
) -> list[TracerouteHop]:
    """Perform a traceroute to a host."""
    return TracerouteEngine().trace(host, max_hops, hop_timeout, on_hop)
