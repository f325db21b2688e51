"""
Shared fixtures and fakes.
"""

import asyncio
import logging

import pytest

from hostprobe.diag.echo import EchoBackend, EchoReply, EchoStatus, NO_REPLY


class ScriptedEchoBackend(EchoBackend):
    """Echo backend answering from a script keyed by TTL.

    Script values are EchoReply instances or exceptions to raise. TTLs not
    in the script get NO_REPLY. Probes without a TTL use the key None.
    """

    def __init__(self, script=None, delay: float = 0.0):
        self.script = script or {}
        self.delay = delay
        self.calls: list[tuple[str, float, int | None]] = []

    async def echo(self, host, timeout, ttl=None):
        self.calls.append((host, timeout, ttl))
        if self.delay:
            await asyncio.sleep(self.delay)
        outcome = self.script.get(ttl, NO_REPLY)
        if isinstance(outcome, BaseException):
            raise outcome
        if isinstance(outcome, list):
            return outcome.pop(0)
        return outcome


def router(address: str) -> EchoReply:
    return EchoReply(EchoStatus.TTL_EXCEEDED, address=address, rtt_ms=1.0)


def destination(address: str, rtt_ms: float = 10.0) -> EchoReply:
    return EchoReply(EchoStatus.REPLY, address=address, rtt_ms=rtt_ms)


class FakeConnector:
    """TCP connector with a fixed set of open ports.

    Tracks how many attempts are in flight at once and which ports were
    attempted.
    """

    def __init__(self, open_ports, delay: float = 0.001, errors=None):
        self.open_ports = set(open_ports)
        self.delay = delay
        self.errors = errors or {}
        self.attempts: list[int] = []
        self.settled = 0
        self.in_flight = 0
        self.max_in_flight = 0

    async def __call__(self, host, port, timeout):
        self.attempts.append(port)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            # Uneven delays so completions interleave
            await asyncio.sleep(self.delay * (1 + port % 3))
            if port in self.errors:
                raise self.errors[port]
            return port in self.open_ports
        finally:
            self.in_flight -= 1
            self.settled += 1


@pytest.fixture
def echo_backend():
    return ScriptedEchoBackend()


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo setup_logging() side effects between tests."""
    yield
    logger = logging.getLogger("hostprobe")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
