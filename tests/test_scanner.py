"""
Tests for the bounded-concurrency port scanner.
"""

import asyncio
import socket

import pytest

from conftest import FakeConnector
from hostprobe.errors import InvalidArgument
from hostprobe.recon.scanner import PortScanner, PortScanRequest, tcp_connect


def request(start=1, end=300, concurrency=8, timeout=0.5):
    return PortScanRequest(
        host="192.0.2.10",
        start_port=start,
        end_port=end,
        timeout=timeout,
        max_concurrency=concurrency,
    )


class TestScanCorrectness:
    """Scans give the same answer at every concurrency level."""

    @pytest.mark.parametrize("concurrency", [1, 8, 256])
    def test_known_open_ports(self, concurrency):
        connector = FakeConnector(open_ports={22, 80})
        result = PortScanner(connector).scan(request(concurrency=concurrency))

        assert result.open_ports == frozenset({22, 80})
        assert result.complete

    @pytest.mark.parametrize("concurrency", [1, 8, 256])
    def test_repeat_scans_agree(self, concurrency):
        first = PortScanner(FakeConnector({22, 80})).scan(request(concurrency=concurrency))
        second = PortScanner(FakeConnector({22, 80})).scan(request(concurrency=concurrency))
        assert first.open_ports == second.open_ports == {22, 80}

    def test_single_port_range(self):
        result = PortScanner(FakeConnector({443})).scan(request(start=443, end=443))
        assert result.open_ports == {443}
        assert result.attempted == 1


class TestScanCompleteness:
    """Every port is attempted exactly once and settles before return."""

    def test_every_port_attempted_once(self):
        connector = FakeConnector(open_ports=set())
        result = PortScanner(connector).scan(request(start=1000, end=1499, concurrency=32))

        assert result.attempted == 500
        assert sorted(connector.attempts) == list(range(1000, 1500))
        assert connector.settled == 500
        assert connector.in_flight == 0

    @pytest.mark.parametrize("concurrency", [1, 5, 64])
    def test_concurrency_bound_enforced(self, concurrency):
        connector = FakeConnector(open_ports=set())
        PortScanner(connector).scan(request(end=200, concurrency=concurrency))

        assert 1 <= connector.max_in_flight <= concurrency

    def test_concurrency_larger_than_range(self):
        connector = FakeConnector(open_ports={3})
        result = PortScanner(connector).scan(request(start=1, end=4, concurrency=1000))
        assert connector.max_in_flight <= 4
        assert result.attempted == 4

    def test_connect_errors_count_as_closed(self):
        connector = FakeConnector(
            open_ports={22, 80},
            errors={80: ConnectionResetError(), 81: OSError("unreachable"), 82: asyncio.TimeoutError()},
        )
        result = PortScanner(connector).scan(request(end=100))

        assert result.open_ports == {22}
        assert result.complete

    def test_unexpected_errors_count_as_closed(self):
        connector = FakeConnector(open_ports={5, 8}, errors={2: ValueError("boom"), 8: UnicodeError("idna")})
        result = PortScanner(connector).scan(request(end=10, concurrency=3))

        assert result.open_ports == {5}
        assert result.complete
        assert connector.settled == 10


class TestPortScanRequest:
    """Validation happens before any I/O."""

    @pytest.mark.parametrize("kwargs", [
        {"start_port": 100, "end_port": 10},
        {"start_port": 0, "end_port": 10},
        {"start_port": 1, "end_port": 70000},
        {"max_concurrency": 0},
        {"timeout": 0},
        {"host": ""},
        {"host": "a" * 64 + ".example"},
        {"host": "bad..example"},
    ])
    def test_invalid(self, kwargs):
        params = {"host": "192.0.2.10", "start_port": 1, "end_port": 10}
        params.update(kwargs)
        with pytest.raises(InvalidArgument):
            PortScanRequest(**params)

    def test_port_count(self):
        assert request(start=20, end=25).port_count == 6


class TestTcpConnect:
    """Tests for the real loopback connector."""

    def test_open_and_closed_ports(self):
        async def run():
            server = await asyncio.start_server(lambda r, w: w.close(), "127.0.0.1", 0)
            open_port = server.sockets[0].getsockname()[1]

            # Grab a free port and release it so nothing listens there
            with socket.socket() as s:
                s.bind(("127.0.0.1", 0))
                closed_port = s.getsockname()[1]

            try:
                return (
                    await tcp_connect("127.0.0.1", open_port, 1.0),
                    await tcp_connect("127.0.0.1", closed_port, 1.0),
                )
            finally:
                server.close()
                await server.wait_closed()

        is_open, is_closed = asyncio.run(run())
        assert is_open is True
        assert is_closed is False

    def test_scan_against_loopback_server(self):
        async def run():
            server = await asyncio.start_server(lambda r, w: w.close(), "127.0.0.1", 0)
            port = server.sockets[0].getsockname()[1]
            try:
                req = PortScanRequest("127.0.0.1", port, port, timeout=1.0, max_concurrency=4)
                return port, await PortScanner().scan_async(req)
            finally:
                server.close()
                await server.wait_closed()

        port, result = asyncio.run(run())
        assert result.open_ports == {port}
