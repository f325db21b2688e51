"""
DNS Module

Dispatches forward (name to addresses) and reverse (address to name)
lookups.
"""

from hostprobe.dns.core import (
    DnsAnswer,
    ForwardAnswer,
    ReverseAnswer,
    DnsBackend,
    DnsPythonBackend,
    Resolver,
    is_ip_literal,
    resolve,
)

__all__ = [
    "DnsAnswer",
    "ForwardAnswer",
    "ReverseAnswer",
    "DnsBackend",
    "DnsPythonBackend",
    "Resolver",
    "is_ip_literal",
    "resolve",
]
