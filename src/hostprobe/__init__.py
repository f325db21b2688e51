"""
hostprobe - Host-side Network Diagnostics

A toolkit for probing reachability, topology and open services of remote
hosts from a single machine: echo probes, traceroute, TCP port scanning,
DNS dispatch, subnet bounds and public IP discovery.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

__version__ = "0.1.0"
__author__ = "DNS Science.io"
__copyright__ = "Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company"
