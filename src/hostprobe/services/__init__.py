"""
External service lookups.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

from hostprobe.services.publicip import (
    PublicIPResolver,
    PublicIPOutcome,
    UNRESOLVED,
    resolve_public_ip,
    check_connectivity,
)

__all__ = [
    "PublicIPResolver",
    "PublicIPOutcome",
    "UNRESOLVED",
    "resolve_public_ip",
    "check_connectivity",
]
