# Author: PB and Claude
# Date: 2026-10-19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ---
# src/orion_ipfs/operations.py

"""
Orion Operations

High-level operations against the IPFS daemon. Every function takes the
ClientHandle explicitly and raises DaemonUnavailable before touching the
network when the handle has no client. Errors from the daemon
(IPFSAPIError, requests exceptions) are passed through unchanged.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, wait
from pathlib import Path
from typing import Callable, Optional, Sequence, Union

from orion_ipfs.client import ClientHandle
from orion_ipfs.config import OrionConfig
from orion_ipfs.dag import is_dag_directory, wrap_links
from orion_ipfs.gateways import default_propagator
from orion_ipfs.ipfs_api import IPFSAPIError
from orion_ipfs.types import (
    DHT_PROVIDER,
    Link,
    ObjectDag,
    ObjectStat,
    PeerIdentity,
    Pin,
    ProviderInfo,
    RepoInfo,
    StorageListItem,
    SwarmPeer,
    Wrapper,
)

logger = logging.getLogger(__name__)

MAX_WORKERS = 8


def _fan_out(func: Callable, items: Sequence) -> list:
    """
    Run func over items concurrently and return results in input order.

    Waits for every call to settle, then raises the first failure (in input
    order). Calls that already succeeded are not undone.
    """
    if not items:
        return []
    with ThreadPoolExecutor(max_workers=min(MAX_WORKERS, len(items))) as executor:
        futures = [executor.submit(func, item) for item in items]
        wait(futures)
    for future in futures:
        exc = future.exception()
        if exc is not None:
            raise exc
    return [future.result() for future in futures]


def _as_path_list(paths: Union[str, Path, Sequence[Union[str, Path]]]) -> list[Path]:
    if isinstance(paths, (str, Path)):
        return [Path(paths)]
    return [Path(p) for p in paths]


def publish(
    paths: Union[str, Path, Sequence[Union[str, Path]]],
    handle: ClientHandle,
    config: OrionConfig = None,
    query_gateways: Optional[Callable[[str], object]] = None,
) -> Wrapper:
    """
    Upload one or more paths and publish them under a single directory.

    Steps:
    1. Upload each path recursively; the last entry of each upload is its root
    2. Wrap all roots into one directory object
    3. Pin the wrapper and unpin the roots, concurrently
    4. Ask the gateways for every uploaded hash and the wrapper (unless
       config.skip_gateway_query), without waiting for them

    Args:
        paths: A single path or a sequence of paths
        handle: ClientHandle with the daemon connection
        config: OrionConfig (gateways and skip_gateway_query)
        query_gateways: Callable taking a hash. Default: the process-wide
            GatewayPropagator built from config

    Returns:
        The Wrapper that is now pinned

    Raises:
        DaemonUnavailable: If the handle has no client
        IPFSAPIError: If an upload, the wrap, or any pin/unpin fails. A pin
            phase failure is not rolled back: the wrapper and some roots may
            both remain pinned.
    """
    client = handle.require()
    config = config or OrionConfig()
    path_list = _as_path_list(paths)

    def upload(path: Path) -> list:
        entries = client.add_from_fs(path, recursive=True)
        if not entries:
            raise IPFSAPIError(f"No entries returned for {path}")
        return entries

    logger.info(f"Uploading {len(path_list)} path(s)")
    upload_results = _fan_out(upload, path_list)

    # Directories come back with their children first, the root last
    root_links = [Link.from_ipfs_entry(entries[-1]) for entries in upload_results]

    wrapper = wrap_links(client, root_links)
    logger.info(f"Wrapped {len(root_links)} root(s) into {wrapper.hash}")

    # The roots stay reachable through the wrapper, so their own pins can go
    transitions = [(client.pin_add, wrapper.hash)]
    transitions += [(client.pin_rm, link.hash) for link in root_links]
    _fan_out(lambda t: t[0](t[1], recursive=True), transitions)
    logger.info(f"Pinned {wrapper.hash}, unpinned {len(root_links)} root(s)")

    if not config.skip_gateway_query:
        if query_gateways is None:
            query_gateways = default_propagator(config)
        for entries in upload_results:
            for entry in entries:
                query_gateways(entry["Hash"])
        query_gateways(wrapper.hash)

    return wrapper


def get_object_stat(cid: str, handle: ClientHandle) -> ObjectStat:
    """Size breakdown of an object, with human-readable sizes."""
    client = handle.require()
    return ObjectStat.from_ipfs(client.object_stat(cid))


def get_object_dag(cid: str, handle: ClientHandle, block_size: Optional[int] = None) -> ObjectDag:
    """Payload and child links of an object. block_size comes from object/stat."""
    client = handle.require()
    return ObjectDag.from_ipfs(cid, client.object_get(cid), block_size=block_size)


def get_storage_list(pins: Sequence[Pin], handle: ClientHandle) -> list[StorageListItem]:
    """
    Enrich pins with stat and DAG data for display.

    Indirect pins are dropped first; they are covered by an ancestor's
    recursive pin and would multiply the number of API calls. The
    remaining pins are fetched concurrently, stat then DAG for each.

    Args:
        pins: Pins as returned by get_object_list()
        handle: ClientHandle with the daemon connection

    Returns:
        One StorageListItem per non-indirect pin, in input order

    Raises:
        DaemonUnavailable: If the handle has no client
        IPFSAPIError: If any single pin's stat or DAG fetch fails
    """
    handle.require()
    pins = [pin for pin in pins if not pin.indirect]

    def enrich(pin: Pin) -> StorageListItem:
        stat = get_object_stat(pin.hash, handle)
        dag = get_object_dag(pin.hash, handle, block_size=stat.block_size.bytes)
        return StorageListItem(pin=pin, stat=stat, dag=dag, is_directory=is_dag_directory(dag))

    return _fan_out(enrich, pins)


def pin_object(cid: str, handle: ClientHandle) -> dict:
    """Pin an object so the garbage collector keeps it."""
    client = handle.require()
    return client.pin_add(cid)


def unpin_object(cid: str, handle: ClientHandle) -> dict:
    """Unpin an object. Combined with gc this removes it from the repo."""
    client = handle.require()
    return client.pin_rm(cid, recursive=True)


def import_object_by_hash(cid: str, handle: ClientHandle) -> dict:
    """Import an object from the network by pinning it recursively."""
    client = handle.require()
    return client.pin_add(cid, recursive=True)


def get_object_list(handle: ClientHandle) -> list[Pin]:
    """All pins in the repo, including indirect ones."""
    client = handle.require()
    return [Pin.from_ipfs(p) for p in client.pin_ls()]


def is_object_pinned(cid: str, handle: ClientHandle) -> bool:
    return any(pin.hash == cid for pin in get_object_list(handle))


def get_repo_info(handle: ClientHandle) -> RepoInfo:
    client = handle.require()
    return RepoInfo.from_ipfs(client.repo_stat())


def get_peers_info(handle: ClientHandle) -> list[SwarmPeer]:
    client = handle.require()
    return [SwarmPeer.from_ipfs(p) for p in client.swarm_peers()]


def get_peer(handle: ClientHandle) -> PeerIdentity:
    """Identity of the local node (id, public key, addresses)."""
    client = handle.require()
    return PeerIdentity.from_ipfs(client.id())


def get_peers_with_object(cid: str, handle: ClientHandle) -> list[ProviderInfo]:
    """Peers the DHT knows to be providing cid."""
    client = handle.require()
    providers = []
    seen = set()
    for event in client.dht_findprovs(cid):
        if event.get("Type") != DHT_PROVIDER:
            continue
        for response in event.get("Responses") or []:
            provider = ProviderInfo.from_ipfs(response)
            if provider.id not in seen:
                seen.add(provider.id)
                providers.append(provider)
    return providers


def run_garbage_collector(handle: ClientHandle) -> list[str]:
    """
    Remove unpinned objects from the repo.

    Returns:
        Hashes of the removed objects

    Raises:
        IPFSAPIError: If the daemon reports an error during collection
    """
    client = handle.require()
    removed = []
    for entry in client.repo_gc():
        if entry.get("Error"):
            raise IPFSAPIError(f"Garbage collection failed: {entry['Error']}", response=entry)
        key = entry.get("Key")
        if isinstance(key, dict):
            removed.append(key.get("/", ""))
        elif key:
            removed.append(key)
    logger.info(f"Garbage collector removed {len(removed)} object(s)")
    return removed


def resolve_name(name: str, handle: ClientHandle) -> str:
    """Resolve an IPNS name to an /ipfs/ path."""
    client = handle.require()
    return client.name_resolve(name)


def connect_to(addr: str, handle: ClientHandle) -> list[str]:
    """
    Connect to a peer by multiaddr.

    Example: connect_to("/ip4/192.168.0.22/tcp/4001/p2p/Qm...", handle)

    Raises:
        ValueError: If addr is not a multiaddr
    """
    client = handle.require()
    parts = addr.split("/")
    if not addr.startswith("/") or len(parts) < 3 or not all(parts[1:]):
        raise ValueError(f"Invalid multiaddr: {addr!r}")
    return client.swarm_connect(addr)


def save_file_to_path(cid: str, dest: Path, handle: ClientHandle) -> Path:
    """Download an object's content into the directory dest."""
    client = handle.require()
    dest = Path(dest)
    client.get(cid, dest)
    return dest
