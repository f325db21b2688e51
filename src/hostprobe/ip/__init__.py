"""
Subnet Tools Module

Provides byte-wise subnet boundary calculation and CIDR subnet details.
"""

from hostprobe.ip.core import (
    SubnetBounds,
    SubnetInfo,
    compute_bounds,
    mask_from_prefix,
    calculate_subnet,
)

__all__ = [
    "SubnetBounds",
    "SubnetInfo",
    "compute_bounds",
    "mask_from_prefix",
    "calculate_subnet",
]
