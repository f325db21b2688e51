"""
Core DNS functionality.

Dispatches a single lookup: IP literals get a reverse (PTR) lookup,
anything else a forward (A/AAAA) lookup.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

import dns.exception
import dns.resolver
import dns.reversename
from netaddr import INET_PTON, valid_ipv4, valid_ipv6

from hostprobe.config import get_config
from hostprobe.errors import InvalidArgument, ResolutionFailed


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ForwardAnswer:
    """Addresses a host name resolved to."""
    query: str
    addresses: tuple[str, ...]


@dataclass(frozen=True)
class ReverseAnswer:
    """Host name an address resolved to."""
    query: str
    hostname: str


DnsAnswer = ForwardAnswer | ReverseAnswer


def is_ip_literal(value: str) -> bool:
    """Check whether a string is an IPv4 or IPv6 address literal."""
    return valid_ipv4(value, flags=INET_PTON) or valid_ipv6(value)


class DnsBackend(ABC):
    """Blocking resolution primitives used by Resolver."""

    @abstractmethod
    def forward(self, name: str) -> list[str]:
        """Resolve a name to addresses. Raise on failure."""

    @abstractmethod
    def reverse(self, address: str) -> str:
        """Resolve an address to a host name. Raise on failure."""


class DnsPythonBackend(DnsBackend):
    """dnspython-backed resolution."""

    RECORD_TYPES = ("A", "AAAA")

    def __init__(self, nameservers: list[str] | None = None, timeout: float = 5.0):
        self.timeout = timeout
        # Explicit nameservers make the system resolv.conf irrelevant
        self.resolver = dns.resolver.Resolver(configure=not nameservers)
        if nameservers:
            self.resolver.nameservers = list(nameservers)
        self.resolver.timeout = timeout
        self.resolver.lifetime = timeout

    def forward(self, name: str) -> list[str]:
        addresses: list[str] = []
        last_error: Exception | None = None
        # Each record type gets its share so the whole lookup fits in timeout
        lifetime = self.timeout / len(self.RECORD_TYPES)
        for record_type in self.RECORD_TYPES:
            try:
                answers = self.resolver.resolve(name, record_type, lifetime=lifetime)
            except dns.resolver.NXDOMAIN:
                # No point asking for AAAA when the name does not exist
                raise
            except (dns.resolver.NoAnswer, dns.resolver.NoNameservers, dns.exception.Timeout) as e:
                last_error = e
                continue
            addresses.extend(str(rdata) for rdata in answers)
        if not addresses and last_error is not None:
            raise last_error
        return addresses

    def reverse(self, address: str) -> str:
        rev_name = dns.reversename.from_address(address)
        answers = self.resolver.resolve(rev_name, "PTR", lifetime=self.timeout)
        return str(answers[0]).rstrip(".")


class Resolver:
    """Forward/reverse DNS dispatcher."""

    # Added to the outer bound so backend lifetimes expire first
    LOOKUP_GRACE = 1.0

    def __init__(self, backend: DnsBackend | None = None, timeout: float | None = None):
        config = get_config()
        self.timeout = timeout if timeout is not None else config.dns_timeout
        if self.timeout <= 0:
            raise InvalidArgument(f"Timeout must be positive, got {self.timeout}")
        self.backend = backend or DnsPythonBackend(
            nameservers=list(config.dns_nameservers) or None,
            timeout=self.timeout,
        )

    async def resolve_async(self, host_or_address: str) -> DnsAnswer:
        """Resolve a host name or reverse-resolve an IP literal.

        Raises ResolutionFailed on any lookup failure, including the
        timeout applied around the blocking backend.
        """
        query = (host_or_address or "").strip()
        if not query:
            raise InvalidArgument("Empty host name or address")

        reverse = is_ip_literal(query)
        call = self.backend.reverse if reverse else self.backend.forward

        # Run in executor since the backend is blocking
        loop = asyncio.get_running_loop()
        try:
            result = await asyncio.wait_for(
                loop.run_in_executor(None, call, query),
                timeout=self.timeout + self.LOOKUP_GRACE,
            )
        except asyncio.TimeoutError as e:
            logger.debug(f"DNS lookup for {query} timed out after {self.timeout}s")
            raise ResolutionFailed(query, "timed out") from e
        except Exception as e:
            logger.debug(f"DNS lookup for {query} failed: {e!r}")
            raise ResolutionFailed(query, e) from e

        if reverse:
            if not result:
                raise ResolutionFailed(query, "empty PTR answer")
            return ReverseAnswer(query=query, hostname=result)

        addresses = tuple(dict.fromkeys(result))
        if not addresses:
            raise ResolutionFailed(query, "no addresses")
        return ForwardAnswer(query=query, addresses=addresses)

    def resolve(self, host_or_address: str) -> DnsAnswer:
        """Synchronous resolve."""
        return asyncio.run(self.resolve_async(host_or_address))


def resolve(
    host_or_address: str,
    nameserver: str | None = None,
    timeout: float | None = None,
) -> DnsAnswer:
    """Resolve a host name or address."""
    backend = None
    if nameserver:
        backend = DnsPythonBackend(
            nameservers=[nameserver],
            timeout=timeout or get_config().dns_timeout,
        )
    return Resolver(backend=backend, timeout=timeout).resolve(host_or_address)
