# Author: PB and Claude
# Date: 2026-10-19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ---
# src/orion_ipfs/client.py

"""
Daemon connection handle and Orion error types.

One ClientHandle is created at startup and passed to every operation.
Its client is set at most once; operations call require() first so a
missing daemon connection fails before any network call is made.

A supervisor process that already owns a connection can hand it over with
share_client(), or export its API address as IPFS_MULTIADDR_API for child
processes.
"""

import logging
import os
from typing import Optional

from orion_ipfs.config import OrionConfig
from orion_ipfs.ipfs_api import IPFSClient

logger = logging.getLogger(__name__)

API_ADDR_ENV = "IPFS_MULTIADDR_API"

_shared_client: Optional[IPFSClient] = None


class OrionError(Exception):
    """Base exception for Orion operations."""
    pass


class DaemonUnavailable(OrionError):
    """Raised when there is no connection to the IPFS daemon."""

    def __init__(self, message: str = "IPFS daemon not available"):
        super().__init__(message)


class DaemonTimeout(OrionError):
    """Raised when the daemon did not answer within the readiness budget."""

    def __init__(self, attempts: int):
        super().__init__(f"IPFS daemon not ready after {attempts} attempts")
        self.attempts = attempts


def share_client(client: Optional[IPFSClient]) -> None:
    """Expose a supervisor-owned client to handles created in this process."""
    global _shared_client
    _shared_client = client


def shared_client() -> Optional[IPFSClient]:
    return _shared_client


class ClientHandle:
    """Holds the active connection to the IPFS daemon."""

    def __init__(self, client: IPFSClient = None):
        self.client = client

    @property
    def connected(self) -> bool:
        return self.client is not None

    def set(self, client: IPFSClient) -> None:
        """Store the active connection."""
        self.client = client

    def ensure(self, config: OrionConfig = None) -> IPFSClient:
        """
        Return the current client, acquiring one if none is set.

        Lookup order: the stored client, a client shared by a supervisor,
        the API address exported in IPFS_MULTIADDR_API, then the configured
        api multiaddr.

        Raises:
            ValueError: If the chosen API address is not a valid multiaddr
        """
        if self.client is not None:
            return self.client

        parent = shared_client()
        if parent is not None:
            logger.debug("Using client shared by supervisor")
            self.set(parent)
            return self.client

        config = config or OrionConfig()
        addr = os.environ.get(API_ADDR_ENV) or config.api_multiaddr
        logger.debug(f"Connecting to IPFS API at {addr}")
        self.set(IPFSClient.from_multiaddr(addr, timeout=config.api_timeout))
        return self.client

    def require(self) -> IPFSClient:
        """
        Return the client or fail before any network call.

        Raises:
            DaemonUnavailable: If no client has been set
        """
        if self.client is None:
            raise DaemonUnavailable()
        return self.client

    def close(self) -> None:
        """Close the connection unless it belongs to a supervisor."""
        if self.client is not None and self.client is not shared_client():
            self.client.close()
        self.client = None
