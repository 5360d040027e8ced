# Author: PB and Claude
# Date: 2026-10-19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ---
# src/orion_ipfs/config.py

"""
Orion Configuration Management

Reads a single toml file (default ~/.config/orion/orion.toml, or the path in
ORION_CONFIG):

  [api]        -- daemon API multiaddr and request timeout
  [gateways]   -- public gateways queried after a publish
  [readiness]  -- how long to wait for the daemon at startup

Every key is optional; missing keys fall back to the defaults below.
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from orion_ipfs.ipfs_api import DEFAULT_API_MULTIADDR, DEFAULT_REQUEST_TIMEOUT, parse_multiaddr


DEFAULT_CONFIG = Path.home() / ".config" / "orion" / "orion.toml"

DEFAULT_GATEWAYS = [
    "https://ipfs.io/ipfs",
    "https://dweb.link/ipfs",
    "https://gateway.pinata.cloud/ipfs",
    "https://cloudflare-ipfs.com/ipfs",
]

DEFAULT_READY_TIMEOUT = 30


class ConfigError(ValueError):
    """Raised when the config file contents are invalid."""
    pass


@dataclass
class OrionConfig:
    """Complete Orion configuration."""
    api_multiaddr: str = DEFAULT_API_MULTIADDR
    api_timeout: float = DEFAULT_REQUEST_TIMEOUT
    gateways: list[str] = field(default_factory=lambda: list(DEFAULT_GATEWAYS))
    skip_gateway_query: bool = False
    ready_timeout: int = DEFAULT_READY_TIMEOUT

    def to_dict(self) -> dict:
        return {
            "api": {"multiaddr": self.api_multiaddr, "timeout": self.api_timeout},
            "gateways": {"urls": self.gateways, "skip_query": self.skip_gateway_query},
            "readiness": {"timeout": self.ready_timeout},
        }

    @classmethod
    def from_dict(cls, data: dict) -> "OrionConfig":
        api = data.get("api", {})
        gateways = data.get("gateways", {})
        readiness = data.get("readiness", {})

        urls = gateways.get("urls", DEFAULT_GATEWAYS)
        if not isinstance(urls, list) or not all(isinstance(u, str) for u in urls):
            raise ConfigError("[gateways].urls must be a list of strings")

        return cls(
            api_multiaddr=api.get("multiaddr", DEFAULT_API_MULTIADDR),
            api_timeout=api.get("timeout", DEFAULT_REQUEST_TIMEOUT),
            # Trailing slashes would produce "//" in gateway request URLs
            gateways=[u.rstrip("/") for u in urls],
            skip_gateway_query=bool(gateways.get("skip_query", False)),
            ready_timeout=readiness.get("timeout", DEFAULT_READY_TIMEOUT),
        )

    def validate(self) -> tuple[list[str], list[str]]:
        """
        Validate configuration, return (errors, warnings).
        Empty errors list means config is valid for operations.
        """
        errors = []
        warnings = []

        try:
            parse_multiaddr(self.api_multiaddr)
        except ValueError as e:
            errors.append(f"api multiaddr: {e}")

        if not isinstance(self.api_timeout, (int, float)) or self.api_timeout <= 0:
            errors.append(f"api timeout must be positive, got {self.api_timeout!r}")

        if not isinstance(self.ready_timeout, int) or self.ready_timeout <= 0:
            errors.append(f"readiness timeout must be a positive integer, got {self.ready_timeout!r}")

        for url in self.gateways:
            if not url.startswith(("http://", "https://")):
                errors.append(f"gateway '{url}' is not an http(s) URL")

        if not self.gateways and not self.skip_gateway_query:
            warnings.append("no gateways configured; published content will not be propagated")

        return errors, warnings


def default_config_path() -> Path:
    """Config path from ORION_CONFIG, else the per-user default."""
    env_path = os.environ.get("ORION_CONFIG")
    return Path(env_path) if env_path else DEFAULT_CONFIG


def load_config(config_path: Path = None) -> OrionConfig:
    """Load config from orion.toml. Returns OrionConfig.

    Args:
        config_path: Path to orion.toml. Default: ORION_CONFIG or
            ~/.config/orion/orion.toml

    Returns:
        OrionConfig object (defaults if the default file does not exist)

    Raises:
        FileNotFoundError: If an explicitly given config file doesn't exist
        ConfigError: If the config file is invalid
    """
    config_file = Path(config_path) if config_path else default_config_path()

    if not config_file.exists():
        if config_path is not None:
            raise FileNotFoundError(f"Config file not found: {config_file}")
        return OrionConfig()

    try:
        with open(config_file, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid toml in {config_file}: {e}")

    return OrionConfig.from_dict(data)

