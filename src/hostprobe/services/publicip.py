"""
Public IP discovery.

Asks a list of "what is my IP" endpoints in order and returns the first
answer. Every call performs fresh queries.
"""

import asyncio
import logging
from dataclasses import dataclass

import httpx

from hostprobe.config import get_config
from hostprobe.errors import InvalidArgument


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PublicIPOutcome:
    """Either a resolved address or unresolved, never partial."""
    address: str | None = None
    endpoint: str | None = None

    @property
    def resolved(self) -> bool:
        return self.address is not None


UNRESOLVED = PublicIPOutcome()


class PublicIPResolver:
    """Ordered-fallback public IP lookup."""

    def __init__(
        self,
        endpoints: list[str] | tuple[str, ...] | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        config = get_config()
        self.endpoints = tuple(endpoints) if endpoints is not None else config.public_ip_endpoints
        self.timeout = timeout if timeout is not None else config.http_timeout
        if self.timeout <= 0:
            raise InvalidArgument(f"Timeout must be positive, got {self.timeout}")
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            transport=self.transport,
            follow_redirects=True,
        )

    async def resolve_async(self) -> PublicIPOutcome:
        """Return the first endpoint's trimmed answer, or UNRESOLVED."""
        async with self._client() as client:
            for url in self.endpoints:
                try:
                    resp = await client.get(url)
                    resp.raise_for_status()
                except (httpx.HTTPError, httpx.InvalidURL) as e:
                    logger.debug(f"Public IP endpoint {url} failed: {e!r}")
                    continue

                address = resp.text.strip()
                if not address:
                    logger.debug(f"Public IP endpoint {url} returned an empty body")
                    continue
                return PublicIPOutcome(address=address, endpoint=url)

        logger.info("No public IP endpoint answered")
        return UNRESOLVED

    def resolve(self) -> PublicIPOutcome:
        """Synchronous resolve."""
        return asyncio.run(self.resolve_async())


async def check_connectivity_async(
    url: str | None = None,
    timeout: float | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> bool:
    """Check internet connectivity with a GET to a well-known URL."""
    config = get_config()
    url = url or config.connectivity_url
    timeout = timeout if timeout is not None else config.http_timeout

    async with httpx.AsyncClient(
        timeout=httpx.Timeout(timeout),
        transport=transport,
        follow_redirects=True,
    ) as client:
        try:
            resp = await client.get(url)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.debug(f"Connectivity check against {url} failed: {e!r}")
            return False
    return resp.is_success


def check_connectivity(url: str | None = None, timeout: float | None = None) -> bool:
    """Synchronous connectivity check."""
    return asyncio.run(check_connectivity_async(url, timeout))


def resolve_public_ip(
    endpoints: list[str] | tuple[str, ...] | None = None,
    timeout: float | None = None,
) -> PublicIPOutcome:
    """Discover this host's public IP address."""
    return PublicIPResolver(endpoints, timeout).resolve()
