"""
Reconnaissance Module

Provides bounded-concurrency TCP connect port scanning.
"""

from hostprobe.recon.scanner import (
    PortScanner,
    PortScanRequest,
    PortScanResult,
    tcp_connect,
    scan_ports,
)

__all__ = [
    "PortScanner",
    "PortScanRequest",
    "PortScanResult",
    "tcp_connect",
    "scan_ports",
]
