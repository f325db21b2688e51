"""
Network scanning functionality.

Bounded-concurrency TCP connect scanning over a port range. A fixed pool
of workers pulls ports from one shared iterator, so no more than
max_concurrency connects are ever in flight.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Iterator

from hostprobe.config import get_config
from hostprobe.errors import InvalidArgument


logger = logging.getLogger(__name__)

Connector = Callable[[str, int, float], Awaitable[bool]]

MIN_PORT = 1
MAX_PORT = 65535


# Well-known service ports for identification
SERVICE_PORTS = {
    21: ("ftp", "File Transfer Protocol"),
    22: ("ssh", "Secure Shell"),
    23: ("telnet", "Telnet"),
    25: ("smtp", "Simple Mail Transfer"),
    53: ("dns", "Domain Name System"),
    80: ("http", "HTTP"),
    110: ("pop3", "Post Office Protocol v3"),
    143: ("imap", "Internet Message Access"),
    389: ("ldap", "Lightweight Directory Access"),
    443: ("https", "HTTPS"),
    445: ("smb", "Server Message Block"),
    465: ("smtps", "SMTP over SSL"),
    587: ("submission", "Email Submission"),
    993: ("imaps", "IMAP over SSL"),
    995: ("pop3s", "POP3 over SSL"),
    1433: ("mssql", "Microsoft SQL Server"),
    3306: ("mysql", "MySQL Database"),
    3389: ("rdp", "Remote Desktop"),
    5432: ("postgresql", "PostgreSQL Database"),
    5900: ("vnc", "Virtual Network Computing"),
    6379: ("redis", "Redis"),
    8080: ("http-proxy", "HTTP Proxy"),
    8443: ("https-alt", "HTTPS Alternate"),
    27017: ("mongodb", "MongoDB"),
}


@dataclass(frozen=True)
class PortScanRequest:
    """A TCP connect scan over an inclusive port range."""
    host: str
    start_port: int = 1
    end_port: int = 1024
    timeout: float = 0.2
    max_concurrency: int = 256

    def __post_init__(self):
        if not self.host or not self.host.strip():
            raise InvalidArgument("Host must not be empty")
        try:
            self.host.encode("idna")
        except UnicodeError as e:
            raise InvalidArgument(f"Invalid host name {self.host!r}: {e}") from e
        if not MIN_PORT <= self.start_port <= MAX_PORT or not MIN_PORT <= self.end_port <= MAX_PORT:
            raise InvalidArgument(
                f"Ports must be within {MIN_PORT}-{MAX_PORT}, "
                f"got {self.start_port}-{self.end_port}"
            )
        if self.start_port > self.end_port:
            raise InvalidArgument(
                f"Start port {self.start_port} is after end port {self.end_port}"
            )
        if self.max_concurrency < 1:
            raise InvalidArgument(f"max_concurrency must be at least 1, got {self.max_concurrency}")
        if self.timeout <= 0:
            raise InvalidArgument(f"Timeout must be positive, got {self.timeout}")

    @property
    def port_count(self) -> int:
        return self.end_port - self.start_port + 1

    def ports(self) -> Iterator[int]:
        return iter(range(self.start_port, self.end_port + 1))


@dataclass(frozen=True)
class PortScanResult:
    """Open ports found by a scan."""
    host: str
    start_port: int
    end_port: int
    open_ports: frozenset[int]
    attempted: int

    @property
    def complete(self) -> bool:
        """True when every port in the range was attempted exactly once."""
        return self.attempted == self.end_port - self.start_port + 1

    def service_name(self, port: int) -> str | None:
        entry = SERVICE_PORTS.get(port)
        return entry[0] if entry else None


async def tcp_connect(host: str, port: int, timeout: float) -> bool:
    """Attempt one TCP connect. True only if it completes within timeout."""
    writer = None
    try:
        _, writer = await asyncio.wait_for(
            asyncio.open_connection(host, port),
            timeout=timeout,
        )
        return True
    except (asyncio.TimeoutError, OSError):
        return False
    finally:
        if writer is not None:
            writer.close()
            try:
                await writer.wait_closed()
            except OSError:
                pass


class PortScanner:
    """TCP connect port scanner."""

    def __init__(self, connector: Connector | None = None):
        self.connector = connector or tcp_connect

    async def _attempt(self, host: str, port: int, timeout: float) -> bool:
        try:
            return await self.connector(host, port, timeout)
        except (asyncio.TimeoutError, OSError) as e:
            logger.debug(f"{host}:{port} connect error: {e!r}")
            return False
        except Exception as e:
            logger.warning(f"{host}:{port} unexpected connect error: {e!r}")
            return False

    async def _worker(
        self,
        request: PortScanRequest,
        ports: Iterator[int],
    ) -> tuple[set[int], int]:
        found: set[int] = set()
        attempted = 0
        # Single-threaded event loop: next() on the shared iterator is atomic
        for port in ports:
            if await self._attempt(request.host, port, request.timeout):
                found.add(port)
            attempted += 1
        return found, attempted

    async def scan_async(self, request: PortScanRequest) -> PortScanResult:
        """Scan every port in the request's range.

        Returns only after every attempt has settled.
        """
        ports = request.ports()
        workers = min(request.max_concurrency, request.port_count)

        logger.debug(
            f"Scanning {request.host} ports {request.start_port}-{request.end_port} "
            f"with {workers} workers"
        )

        outcomes = await asyncio.gather(
            *(self._worker(request, ports) for _ in range(workers))
        )

        open_ports: set[int] = set()
        attempted = 0
        for found, count in outcomes:
            open_ports |= found
            attempted += count

        logger.info(
            f"Scan of {request.host} finished: {len(open_ports)} open of {attempted} attempted"
        )

        return PortScanResult(
            host=request.host,
            start_port=request.start_port,
            end_port=request.end_port,
            open_ports=frozenset(open_ports),
            attempted=attempted,
        )

    def scan(self, request: PortScanRequest) -> PortScanResult:
        """Synchronous scan."""
        return asyncio.run(self.scan_async(request))


def scan_ports(
    host: str,
    start_port: int = 1,
    end_port: int = 1024,
    timeout: float | None = None,
    max_concurrency: int | None = None,
) -> PortScanResult:
    """Scan a port range on a host."""
    config = get_config()
    request = PortScanRequest(
        host=host,
        start_port=start_port,
        end_port=end_port,
        timeout=timeout if timeout is not None else config.scan_timeout,
        max_concurrency=max_concurrency if max_concurrency is not None else config.scan_concurrency,
    )
    return PortScanner().scan(request)
