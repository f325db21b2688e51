"""
Error taxonomy for hostprobe.

Only malformed input (InvalidArgument) and resolver failures
(ResolutionFailed) reach callers. Probe, traceroute, scan and public-IP
operations turn network failures into values tagged with an ErrorKind.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Why a network operation did not succeed."""
    TIMEOUT = "timeout"
    TRANSPORT = "transport"
    RESOLUTION = "resolution"
    REFUSED = "refused"


class HostProbeError(Exception):
    """Base class for hostprobe errors."""


class InvalidArgument(HostProbeError, ValueError):
    """Malformed input, rejected before any I/O."""


class ResolutionFailed(HostProbeError):
    """A DNS lookup failed."""

    def __init__(self, query: str, cause: BaseException | str | None = None):
        self.query = query
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"Resolution failed for {query}{detail}")


class ProbeRefused(HostProbeError):
    """The platform refused to send a probe."""
