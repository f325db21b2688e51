"""
Tests for the TTL-stepped traceroute engine.
"""

import pytest

from conftest import ScriptedEchoBackend, destination, router
from hostprobe.diag.core import TracerouteEngine
from hostprobe.errors import InvalidArgument, ProbeRefused, ResolutionFailed


class TestTraceroute:
    """Tests for TracerouteEngine.trace."""

    def test_stops_at_destination(self):
        backend = ScriptedEchoBackend({
            1: router("192.168.1.1"),
            2: router("10.0.0.1"),
            3: destination("8.8.8.8"),
        })
        hops = TracerouteEngine(backend).trace("8.8.8.8", max_hops=30, hop_timeout=1.0)

        assert [h.ttl for h in hops] == [1, 2, 3]
        assert [h.address for h in hops] == ["192.168.1.1", "10.0.0.1", "8.8.8.8"]
        assert [h.reached_destination for h in hops] == [False, False, True]
        # Nothing is probed past the destination
        assert [ttl for _, _, ttl in backend.calls] == [1, 2, 3]

    def test_bounded_by_max_hops(self):
        backend = ScriptedEchoBackend({ttl: router(f"10.0.{ttl}.1") for ttl in range(1, 10)})
        hops = TracerouteEngine(backend).trace("192.0.2.1", max_hops=5, hop_timeout=1.0)

        assert len(hops) == 5
        assert [h.ttl for h in hops] == [1, 2, 3, 4, 5]
        assert not any(h.reached_destination for h in hops)

    def test_silent_hops_continue(self):
        backend = ScriptedEchoBackend({1: router("192.168.1.1"), 3: destination("8.8.8.8")})
        hops = TracerouteEngine(backend).trace("8.8.8.8", max_hops=10, hop_timeout=1.0)

        assert len(hops) == 3
        assert hops[1].address is None
        assert hops[1].is_timeout
        assert hops[2].reached_destination

    def test_hung_hop_is_timeout(self):
        backend = ScriptedEchoBackend({}, delay=5.0)
        hops = TracerouteEngine(backend).trace("192.0.2.1", max_hops=1, hop_timeout=0.05)
        assert len(hops) == 1
        assert hops[0].is_timeout

    @pytest.mark.parametrize("error", [
        ProbeRefused("not permitted"),
        ResolutionFailed("nosuch.invalid"),
        OSError("send failed"),
    ])
    def test_hard_error_appends_marker_and_stops(self, error):
        backend = ScriptedEchoBackend({1: router("192.168.1.1"), 2: error})
        hops = TracerouteEngine(backend).trace("8.8.8.8", max_hops=30, hop_timeout=1.0)

        assert len(hops) == 2
        assert hops[-1].ttl == 2
        assert hops[-1].is_error
        assert not hops[-1].is_timeout
        assert len(backend.calls) == 2

    def test_on_hop_callback(self):
        backend = ScriptedEchoBackend({1: router("192.168.1.1"), 2: destination("8.8.8.8")})
        seen = []
        hops = TracerouteEngine(backend).trace("8.8.8.8", hop_timeout=1.0, on_hop=seen.append)
        assert seen == hops

    def test_each_call_is_fresh(self):
        backend = ScriptedEchoBackend({1: destination("192.168.1.1")})
        engine = TracerouteEngine(backend)
        first = engine.trace("192.168.1.1", hop_timeout=1.0)
        second = engine.trace("192.168.1.1", hop_timeout=1.0)

        assert first == second
        assert len(backend.calls) == 2

    def test_sequence_invariants(self):
        """TTLs strictly increase from 1 and never exceed max_hops."""
        backend = ScriptedEchoBackend({4: router("10.0.0.4"), 7: destination("198.51.100.7")})
        hops = TracerouteEngine(backend).trace("198.51.100.7", max_hops=12, hop_timeout=1.0)

        assert [h.ttl for h in hops] == list(range(1, len(hops) + 1))
        assert len(hops) <= 12
        assert hops[-1].reached_destination
        assert sum(h.reached_destination for h in hops) == 1

    def test_invalid_arguments(self):
        engine = TracerouteEngine(ScriptedEchoBackend())
        with pytest.raises(InvalidArgument):
            engine.trace("8.8.8.8", max_hops=0, hop_timeout=1.0)
        with pytest.raises(InvalidArgument):
            engine.trace("8.8.8.8", max_hops=5, hop_timeout=-1)
        with pytest.raises(InvalidArgument):
            engine.trace("-fn", max_hops=5, hop_timeout=1.0)
