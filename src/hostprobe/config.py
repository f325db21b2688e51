"""
Configuration management for hostprobe.

Loads diagnostic defaults from environment variables or a .env file.
"""

import os
from pathlib import Path
from dataclasses import dataclass

from hostprobe.errors import InvalidArgument

# Try to load from .env file if python-dotenv is available
try:
    from dotenv import load_dotenv
    # Check common locations for .env
    env_locations = [
        Path.home() / ".hostprobe" / ".env",
        Path.home() / ".config" / "hostprobe" / ".env",
        Path.cwd() / ".env",
    ]
    for env_path in env_locations:
        if env_path.exists():
            load_dotenv(env_path)
            break
except ImportError:
    pass


DEFAULT_PUBLIC_IP_ENDPOINTS = (
    "https://api.ipify.org",
    "https://checkip.amazonaws.com",
    "https://ifconfig.me/ip",
    "https://icanhazip.com",
)


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise InvalidArgument(f"{name} must be a number, got {raw!r}")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise InvalidArgument(f"{name} must be an integer, got {raw!r}")


def _env_list(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = os.getenv(name)
    if not raw:
        return default
    return tuple(item.strip() for item in raw.split(",") if item.strip())


@dataclass(frozen=True)
class DiagConfig:
    """Immutable diagnostic defaults."""

    # Echo probes
    probe_timeout: float = 2.0

    # Traceroute
    max_hops: int = 30
    hop_timeout: float = 3.0

    # Port scanning
    scan_timeout: float = 0.2
    scan_concurrency: int = 256

    # DNS
    dns_timeout: float = 5.0
    dns_nameservers: tuple[str, ...] = ()

    # Public IP / connectivity
    http_timeout: float = 5.0
    public_ip_endpoints: tuple[str, ...] = DEFAULT_PUBLIC_IP_ENDPOINTS
    connectivity_url: str = "https://www.google.com"

    @classmethod
    def from_env(cls) -> "DiagConfig":
        """Load configuration from environment variables."""
        return cls(
            probe_timeout=_env_float("HOSTPROBE_PROBE_TIMEOUT", cls.probe_timeout),
            max_hops=_env_int("HOSTPROBE_MAX_HOPS", cls.max_hops),
            hop_timeout=_env_float("HOSTPROBE_HOP_TIMEOUT", cls.hop_timeout),
            scan_timeout=_env_float("HOSTPROBE_SCAN_TIMEOUT", cls.scan_timeout),
            scan_concurrency=_env_int("HOSTPROBE_SCAN_CONCURRENCY", cls.scan_concurrency),
            dns_timeout=_env_float("HOSTPROBE_DNS_TIMEOUT", cls.dns_timeout),
            dns_nameservers=_env_list("HOSTPROBE_DNS_NAMESERVERS", ()),
            http_timeout=_env_float("HOSTPROBE_HTTP_TIMEOUT", cls.http_timeout),
            public_ip_endpoints=_env_list(
                "HOSTPROBE_PUBLIC_IP_ENDPOINTS", DEFAULT_PUBLIC_IP_ENDPOINTS
            ),
            connectivity_url=os.getenv("HOSTPROBE_CONNECTIVITY_URL", cls.connectivity_url),
        )


# Lazily built, never mutated after creation
_config: DiagConfig | None = None


def get_config() -> DiagConfig:
    """Get the default configuration instance."""
    global _config
    if _config is None:
        _config = DiagConfig.from_env()
    return _config
