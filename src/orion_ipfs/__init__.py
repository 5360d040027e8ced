# Author: PB and Claude
# Date: 2026-10-19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ---
# src/orion_ipfs/__init__.py

"""
Orion IPFS Client Library

A Python library for publishing files through a local IPFS daemon:
upload paths, wrap them in one directory, keep that directory pinned,
and seed the result to public gateways.

Basic usage:
    from orion_ipfs import ClientHandle, load_config, publish, wait_until_ready

    config = load_config()
    handle = ClientHandle()
    handle.ensure(config)
    wait_until_ready(config.ready_timeout, handle=handle)
    wrapper = publish(["/path/to/file", "/path/to/dir"], handle, config)
    print(wrapper.hash)

For more control:
    from orion_ipfs.ipfs_api import IPFSClient, IPFSAPIError
    from orion_ipfs.types import Pin, StorageListItem, Wrapper
    from orion_ipfs.operations import get_object_list, get_storage_list
"""

__version__ = "0.1.0"

# Config
from orion_ipfs.config import (
    ConfigError,
    OrionConfig,
    load_config,
)

# Connection
from orion_ipfs.client import (
    ClientHandle,
    DaemonTimeout,
    DaemonUnavailable,
    OrionError,
    share_client,
)
from orion_ipfs.ipfs_api import IPFSAPIError, IPFSClient

# Types
from orion_ipfs.types import (
    ByteSize,
    Link,
    ObjectDag,
    ObjectStat,
    Pin,
    StorageListItem,
    Wrapper,
)

# Core
from orion_ipfs.dag import DIRECTORY_MARKER, is_dag_directory, wrap_links
from orion_ipfs.gateways import GatewayPropagator
from orion_ipfs.readiness import wait_until_ready
from orion_ipfs.operations import (
    get_object_list,
    get_storage_list,
    publish,
)

# CLI
from orion_ipfs.cli import cli

__all__ = [
    "__version__",
    # Config
    "ConfigError",
    "OrionConfig",
    "load_config",
    # Connection
    "ClientHandle",
    "DaemonTimeout",
    "DaemonUnavailable",
    "OrionError",
    "share_client",
    "IPFSAPIError",
    "IPFSClient",
    # Types
    "ByteSize",
    "Link",
    "ObjectDag",
    "ObjectStat",
    "Pin",
    "StorageListItem",
    "Wrapper",
    # Core
    "DIRECTORY_MARKER",
    "is_dag_directory",
    "wrap_links",
    "GatewayPropagator",
    "wait_until_ready",
    "get_object_list",
    "get_storage_list",
    "publish",
    # CLI
    "cli",
]
