"""
Echo probe primitives.

The platform ping binary is the ICMP primitive: one child process per
probe, optionally TTL-limited, killed if it outlives its deadline.
"""

import asyncio
import contextlib
import logging
import platform
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from hostprobe.errors import InvalidArgument, ProbeRefused, ResolutionFailed


logger = logging.getLogger(__name__)


class EchoStatus(str, Enum):
    """Outcome of a single echo probe."""
    REPLY = "reply"                # destination answered
    TTL_EXCEEDED = "ttl_exceeded"  # an intermediate router answered
    NO_REPLY = "no_reply"


@dataclass(frozen=True)
class EchoReply:
    """A parsed echo response."""
    status: EchoStatus
    address: str | None = None
    rtt_ms: float | None = None


NO_REPLY = EchoReply(EchoStatus.NO_REPLY)


class EchoBackend(ABC):
    """Abstract base class for echo probe implementations."""

    @abstractmethod
    async def echo(self, host: str, timeout: float, ttl: int | None = None) -> EchoReply:
        """
        Send one echo probe and wait up to timeout seconds.

        Args:
            host: Target host name or address
            timeout: Seconds to wait for a reply
            ttl: Optional time-to-live for the probe

        Returns:
            EchoReply describing who answered, if anyone

        Raises:
            ProbeRefused: the platform would not send the probe
            ResolutionFailed: the target name could not be resolved
        """


# Address: run of hex digits, dots and colons ending in a hex digit
_ADDR = r"([0-9A-Fa-f:.]*[0-9A-Fa-f])"

TTL_EXCEEDED_RE = re.compile(
    r"from\s+" + _ADDR + r"\b.*?(?:time to live exceeded|ttl expired)",
    re.IGNORECASE,
)
REPLY_RE = re.compile(
    r"(?:bytes from|reply from)\s+" + _ADDR + r"\b.*?time\s*[=<]\s*(\d+(?:\.\d+)?)\s*ms",
    re.IGNORECASE,
)
UNKNOWN_HOST_RE = re.compile(
    r"unknown host|cannot resolve|name or service not known|could not find host"
    r"|temporary failure in name resolution|no address associated",
    re.IGNORECASE,
)
NOT_PERMITTED_RE = re.compile(r"operation not permitted|permission denied", re.IGNORECASE)


def output_to_reply(output: str) -> EchoReply:
    """Parse ping output into an EchoReply."""
    for line in output.splitlines():
        match = TTL_EXCEEDED_RE.search(line)
        if match:
            return EchoReply(EchoStatus.TTL_EXCEEDED, address=match.group(1))
        match = REPLY_RE.search(line)
        if match:
            return EchoReply(
                EchoStatus.REPLY,
                address=match.group(1),
                rtt_ms=float(match.group(2)),
            )
    return NO_REPLY


def check_host(host: str) -> None:
    """Reject hosts that ping would read as an option."""
    if not host or not host.strip():
        raise InvalidArgument("Host must not be empty")
    if host.startswith("-"):
        raise InvalidArgument(f"Invalid host {host!r}")


def build_ping_command(
    host: str,
    timeout: float,
    ttl: int | None = None,
    system: str | None = None,
) -> list[str]:
    """Build a single-probe ping command for the platform."""
    check_host(host)
    system = (system or platform.system()).lower()

    if system == "linux":
        cmd = ["ping", "-n", "-c", "1", "-W", str(max(1, round(timeout)))]
        if ttl is not None:
            cmd += ["-t", str(ttl)]
    elif system == "darwin":
        cmd = ["ping", "-n", "-c", "1", "-W", str(max(1, int(timeout * 1000)))]
        if ttl is not None:
            cmd += ["-m", str(ttl)]
    elif system == "windows":
        cmd = ["ping", "-n", "1", "-w", str(max(1, int(timeout * 1000)))]
        if ttl is not None:
            cmd += ["-i", str(ttl)]
    else:
        raise ProbeRefused(f"Unsupported platform: {system}")

    cmd.append(host)
    return cmd


class PingCommandBackend(EchoBackend):
    """Echo probes through the system ping command."""

    # Extra time the child gets beyond the probe timeout to exit
    GRACE = 1.0

    def __init__(self, system: str | None = None):
        self.system = system

    async def echo(self, host: str, timeout: float, ttl: int | None = None) -> EchoReply:
        cmd = build_ping_command(host, timeout, ttl, self.system)

        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
        except FileNotFoundError as e:
            raise ProbeRefused("ping command not found") from e
        except PermissionError as e:
            raise ProbeRefused(f"Not permitted to run ping: {e}") from e

        try:
            stdout, _ = await asyncio.wait_for(
                proc.communicate(), timeout=timeout + self.GRACE
            )
        except asyncio.TimeoutError:
            logger.debug(f"ping {host} (ttl={ttl}) outlived its deadline")
            return NO_REPLY
        finally:
            if proc.returncode is None:
                with contextlib.suppress(ProcessLookupError):
                    proc.kill()
                await proc.wait()

        output = stdout.decode("utf-8", errors="ignore")
        reply = output_to_reply(output)
        if reply.status is not EchoStatus.NO_REPLY:
            return reply

        if UNKNOWN_HOST_RE.search(output):
            raise ResolutionFailed(host, output.strip().splitlines()[-1])
        if NOT_PERMITTED_RE.search(output):
            raise ProbeRefused(output.strip())
        return NO_REPLY
