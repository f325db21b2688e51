"""
Tests for subnet calculations.
"""

import pytest
from netaddr import IPAddress

from hostprobe.errors import InvalidArgument
from hostprobe.ip.core import calculate_subnet, compute_bounds, mask_from_prefix


class TestComputeBounds:
    """Tests for byte-wise network/broadcast computation."""

    def test_ipv4_class_c(self):
        """192.168.1.130/255.255.255.0 spans .0 to .255."""
        bounds = compute_bounds("192.168.1.130", "255.255.255.0")
        assert bounds.network_address == "192.168.1.0"
        assert bounds.broadcast_address == "192.168.1.255"

    def test_ipv4_non_octet_mask(self):
        """Masks that split an octet are handled per byte."""
        bounds = compute_bounds("10.20.37.200", "255.255.240.0")
        assert bounds.network_address == "10.20.32.0"
        assert bounds.broadcast_address == "10.20.47.255"

    def test_ipv6(self):
        """IPv6 addresses use all 16 bytes."""
        bounds = compute_bounds("2001:db8::1234", "ffff:ffff:ffff:ffff::")
        assert bounds.network_address == "2001:db8::"
        assert bounds.broadcast_address == "2001:db8::ffff:ffff:ffff:ffff"

    @pytest.mark.parametrize("address,mask", [
        ("192.168.1.130", "255.255.255.0"),
        ("172.16.5.4", "255.240.0.0"),
        ("8.8.4.4", "255.255.255.255"),
        ("203.0.113.77", "0.0.0.0"),
        ("2001:db8:abcd::1", "ffff:ffff:ffff::"),
    ])
    def test_masking_is_idempotent(self, address, mask):
        """Masking the broadcast gives the network; host bits of broadcast are all set."""
        bounds = compute_bounds(address, mask)
        all_ones = (1 << (8 * len(IPAddress(address).packed))) - 1
        net = int(IPAddress(bounds.network_address))
        bcast = int(IPAddress(bounds.broadcast_address))
        m = int(IPAddress(mask))

        assert net & m == net
        assert bcast & m == net
        assert bcast | (~m & all_ones) == bcast
        assert compute_bounds(bounds.network_address, mask) == bounds

    def test_mismatched_lengths(self):
        """IPv4 address with IPv6 mask is rejected."""
        with pytest.raises(InvalidArgument):
            compute_bounds("192.168.1.1", "ffff:ffff::")

    def test_invalid_address(self):
        """Unparseable input is rejected before computing."""
        with pytest.raises(InvalidArgument):
            compute_bounds("not-an-ip", "255.255.255.0")

    def test_invalid_argument_is_value_error(self):
        """Callers catching ValueError still see the failure."""
        with pytest.raises(ValueError):
            compute_bounds("10.0.0.1", "::")


class TestMaskFromPrefix:
    """Tests for prefix length conversion."""

    def test_ipv4(self):
        assert mask_from_prefix(24) == "255.255.255.0"
        assert mask_from_prefix(0) == "0.0.0.0"
        assert mask_from_prefix(32) == "255.255.255.255"

    def test_ipv6(self):
        assert mask_from_prefix(64, 6) == "ffff:ffff:ffff:ffff::"

    def test_out_of_range(self):
        with pytest.raises(InvalidArgument):
            mask_from_prefix(33)
        with pytest.raises(InvalidArgument):
            mask_from_prefix(24, 5)


class TestCalculateSubnet:
    """Tests for CIDR subnet details."""

    def test_slash_22(self):
        info = calculate_subnet("10.0.0.0/22")
        assert info.network == "10.0.0.0"
        assert info.broadcast == "10.0.3.255"
        assert info.netmask == "255.255.252.0"
        assert info.num_addresses == 1024
        assert info.num_hosts == 1022
        assert info.first_host == "10.0.0.1"
        assert info.last_host == "10.0.3.254"

    def test_point_to_point(self):
        """/31 has two usable addresses and no host range."""
        info = calculate_subnet("10.0.0.4/31")
        assert info.num_hosts == 2
        assert info.first_host is None
        assert info.broadcast == "10.0.0.5"

    def test_single_host(self):
        info = calculate_subnet("10.0.0.5/32")
        assert info.num_hosts == 0
        assert info.broadcast == "10.0.0.5"

    def test_invalid_cidr(self):
        with pytest.raises(InvalidArgument):
            calculate_subnet("10.0.0.0/40")
