"""
HTTP client for the IPFS (kubo) RPC API.

This module provides direct HTTP access to a local IPFS daemon,
eliminating the need for the ipfs binary.

API Reference: https://docs.ipfs.tech/reference/kubo/rpc/

Debug logging:
    Enable with: ORION_DEBUG=1 or by setting log level to DEBUG
    Example: ORION_DEBUG=1 orion publish /path/to/file
"""

import base64
import json
import logging
import os
import tarfile
import threading
import weakref
from pathlib import Path
from urllib.parse import urlencode

import requests
from requests_toolbelt import MultipartEncoder

DEFAULT_API_MULTIADDR = "/ip4/127.0.0.1/tcp/5001"
DEFAULT_REQUEST_TIMEOUT = 60

# Configure logger for this module
logger = logging.getLogger(__name__)

# Enable debug logging via environment variable
if os.environ.get("ORION_DEBUG"):
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )
    logger.setLevel(logging.DEBUG)


class IPFSAPIError(Exception):
    """Raised when the IPFS API returns an error."""

    def __init__(self, message: str, status_code: int = None, response: dict = None):
        super().__init__(message)
        self.status_code = status_code
        self.response = response


def parse_multiaddr(addr: str) -> tuple[str, int]:
    """
    Extract (host, port) from an API multiaddr.

    Accepts /ip4, /ip6, /dns, /dns4 and /dns6 hosts followed by /tcp/<port>,
    e.g. "/ip4/127.0.0.1/tcp/5001".

    Raises:
        ValueError: If the address is not a usable TCP multiaddr
    """
    parts = [p for p in addr.strip().split("/") if p]
    if len(parts) < 4 or addr.strip()[:1] != "/":
        raise ValueError(f"Invalid API multiaddr: {addr!r}")

    proto, host, transport, port = parts[:4]
    if proto not in ("ip4", "ip6", "dns", "dns4", "dns6"):
        raise ValueError(f"Unsupported host protocol '{proto}' in {addr!r}")
    if transport != "tcp":
        raise ValueError(f"Expected tcp transport in {addr!r}, got '{transport}'")
    try:
        port_num = int(port)
    except ValueError:
        raise ValueError(f"Invalid port '{port}' in {addr!r}")

    if proto == "ip6":
        host = f"[{host}]"
    return host, port_num


def _parse_ndjson(text: str) -> list:
    """Parse a newline-delimited JSON body into a list of objects."""
    results = []
    for line in text.strip().split("\n"):
        if line:
            try:
                results.append(json.loads(line))
            except json.JSONDecodeError as e:
                raise IPFSAPIError(f"Invalid JSON response: {e}", status_code=500)
    return results


class IPFSClient:
    """HTTP client for the IPFS (kubo) RPC API."""

    def __init__(self, host: str = "127.0.0.1", port: int = 5001, timeout: float = DEFAULT_REQUEST_TIMEOUT):
        """
        Initialize IPFS client.

        Args:
            host: Hostname or IP of IPFS node
            port: IPFS API port (default 5001)
            timeout: Per-request timeout in seconds
        """
        self.base_url = f"http://{host}:{port}/api/v0"
        self.timeout = timeout
        self._local = threading.local()
        self._sessions: weakref.WeakSet = weakref.WeakSet()
        self._sessions_lock = threading.Lock()

    @classmethod
    def from_multiaddr(cls, addr: str = DEFAULT_API_MULTIADDR, timeout: float = DEFAULT_REQUEST_TIMEOUT) -> "IPFSClient":
        """Create a client from an API multiaddr like /ip4/127.0.0.1/tcp/5001."""
        host, port = parse_multiaddr(addr)
        return cls(host=host, port=port, timeout=timeout)

    @property
    def session(self) -> requests.Session:
        """The calling thread's session. Operations fan out over a thread pool."""
        session = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            self._local.session = session
            with self._sessions_lock:
                self._sessions.add(session)
        return session

    def close(self) -> None:
        with self._sessions_lock:
            sessions = list(self._sessions)
            self._sessions.clear()
        for session in sessions:
            session.close()
        self._local = threading.local()

    def _request(self, endpoint: str, params: dict = None, **kwargs) -> requests.Response:
        """Make HTTP request to IPFS API. Every RPC call is a POST."""
        url = f"{self.base_url}{endpoint}"
        if params:
            url = f"{url}?{urlencode(params)}"
        kwargs.setdefault("timeout", self.timeout)

        logger.debug(f"Request: POST {url}")

        response = self.session.request("POST", url, **kwargs)

        logger.debug(f"Response status: {response.status_code}")
        if not kwargs.get("stream"):
            # Truncate body for logging (first 2000 chars)
            body_preview = response.text[:2000] if response.text else "(empty)"
            logger.debug(f"Response body: {body_preview}")

        if response.status_code >= 400:
            try:
                error_data = response.json()
                msg = error_data.get("Message", response.text)
            except Exception:
                error_data = None
                msg = response.text
            raise IPFSAPIError(msg, response.status_code, error_data)

        return response

    def _json(self, endpoint: str, params: dict = None, **kwargs) -> dict:
        response = self._request(endpoint, params, **kwargs)
        try:
            return response.json()
        except ValueError as e:
            raise IPFSAPIError(f"Invalid JSON response from {endpoint}: {e}", status_code=500)

    def id(self) -> dict:
        """
        Get IPFS peer information.

        Returns dict with: ID, PublicKey, Addresses, AgentVersion, etc.
        """
        return self._json("/id")

    def add_from_fs(self, path: Path, recursive: bool = True, pin: bool = True) -> list:
        """
        Add a file or directory from the local filesystem.

        Args:
            path: Path to file or directory
            recursive: If True and path is a directory, add its whole tree
            pin: Whether the daemon pins the added root

        Returns:
            List of dicts with 'Name', 'Hash' and 'Size' for each added item,
            subtree root last.
        """
        path = Path(path)
        logger.debug(f"add_from_fs() called: path={path}, recursive={recursive}")

        if path.is_dir() and not recursive:
            raise ValueError(f"Path {path} is a directory; use recursive=True")
        if not path.is_file() and not path.is_dir():
            raise ValueError(f"Path {path} is not a file or directory")

        params = {
            "recursive": "true" if path.is_dir() else "false",
            "wrap-with-directory": "false",
            "pin": "true" if pin else "false",
            "stream-channels": "false",
        }

        # Directory parts must precede their children in the multipart body
        base_path = path.parent
        parts = []
        if path.is_dir():
            parts.append((path, path.relative_to(base_path)))
            for sub in sorted(path.rglob("*")):
                if sub.is_dir() or sub.is_file():
                    parts.append((sub, sub.relative_to(base_path)))
        else:
            parts.append((path, Path(path.name)))

        file_handles = []
        fields = []
        try:
            for local_path, rel_path in parts:
                if local_path.is_dir():
                    fields.append(("file", (rel_path.as_posix(), b"", "application/x-directory")))
                else:
                    fh = open(local_path, "rb")
                    file_handles.append(fh)
                    fields.append(("file", (rel_path.as_posix(), fh, "application/octet-stream")))

            # Stream the body rather than buffering the whole tree in memory
            encoder = MultipartEncoder(fields=fields)
            logger.debug(f"add_from_fs: {len(fields)} parts, content_length = {encoder.len}")

            response = self._request(
                "/add",
                params,
                data=encoder,
                headers={"Content-Type": encoder.content_type},
            )
        finally:
            for fh in file_handles:
                fh.close()

        results = _parse_ndjson(response.text)
        logger.debug(f"add_from_fs: total entries = {len(results)}")
        return results

    def object_put(self, data: bytes, links: list[dict]) -> dict:
        """
        Construct an object from a payload and ordered named links.

        Args:
            data: Raw payload bytes
            links: List of {"Name", "Hash", "Size"} dicts

        Returns:
            Dict with 'Hash' and 'Size' of the new object.
        """
        node = {
            "Data": base64.b64encode(data).decode("ascii"),
            "Links": links,
        }
        params = {"inputenc": "json", "datafieldenc": "base64", "pin": "false"}
        files = {"file": ("node.json", json.dumps(node).encode(), "application/json")}
        result = self._json("/object/put", params, files=files)

        if "Size" not in result:
            # object/put reports only the hash; cumulative size comes from stat
            stat = self.object_stat(result["Hash"])
            result["Size"] = stat.get("CumulativeSize", 0)
        return result

    def object_stat(self, cid: str) -> dict:
        """
        Get size breakdown of an object.

        Returns dict with: Hash, NumLinks, BlockSize, LinksSize, DataSize, CumulativeSize
        """
        return self._json("/object/stat", {"arg": cid})

    def object_get(self, cid: str) -> dict:
        """
        Get the DAG node of an object.

        Returns dict with 'Data' (bytes) and 'Links' (list of {Name, Hash, Size}).
        """
        result = self._json("/object/get", {"arg": cid, "data-encoding": "base64"})
        raw = result.get("Data") or ""
        try:
            result["Data"] = base64.b64decode(raw)
        except (ValueError, TypeError) as e:
            raise IPFSAPIError(f"Invalid object data for {cid}: {e}", status_code=500)
        result["Links"] = result.get("Links") or []
        return result

    def pin_add(self, cid: str, recursive: bool = True) -> dict:
        """Pin an object so the garbage collector keeps it."""
        return self._json("/pin/add", {"arg": cid, "recursive": str(recursive).lower()})

    def pin_rm(self, cid: str, recursive: bool = True) -> dict:
        """Remove a pin."""
        return self._json("/pin/rm", {"arg": cid, "recursive": str(recursive).lower()})

    def pin_ls(self) -> list:
        """
        List all pins.

        Returns list of {"Hash", "Type"} dicts. The API answers with a
        {"Keys": {hash: {"Type": ...}}} mapping.
        """
        result = self._json("/pin/ls")
        keys = result.get("Keys") or {}
        return [{"Hash": cid, "Type": info.get("Type", "")} for cid, info in keys.items()]

    def repo_stat(self) -> dict:
        """
        Get repository statistics.

        Returns dict with: RepoSize, StorageMax, NumObjects, RepoPath, Version
        """
        return self._json("/repo/stat")

    def repo_gc(self) -> list:
        """
        Run the garbage collector.

        Returns list of {"Key": {"/": cid}} entries (or {"Error": msg}).
        """
        response = self._request("/repo/gc", {"stream-errors": "true"})
        return _parse_ndjson(response.text)

    def swarm_peers(self) -> list:
        """List connected peers as {"Addr", "Peer", "Latency"} dicts."""
        result = self._json("/swarm/peers", {"latency": "true"})
        return result.get("Peers") or []

    def swarm_connect(self, addr: str) -> list:
        """Open a connection to a peer by multiaddr."""
        result = self._json("/swarm/connect", {"arg": addr})
        return result.get("Strings") or []

    def dht_findprovs(self, cid: str) -> list:
        """
        Find peers providing a CID.

        Returns the NDJSON query events; providers are events of Type 4.
        """
        response = self._request("/dht/findprovs", {"arg": cid})
        return _parse_ndjson(response.text)

    def name_resolve(self, name: str) -> str:
        """Resolve an IPNS name to its /ipfs/ path."""
        result = self._json("/name/resolve", {"arg": name})
        return result.get("Path", "")

    def get(self, cid: str, output: Path) -> None:
        """
        Download file or directory by CID.

        Extracts into the output directory.
        """
        output = Path(output)
        output.mkdir(parents=True, exist_ok=True)
        response = self._request("/get", {"arg": cid}, stream=True)

        # Response is a tar stream
        try:
            with tarfile.open(fileobj=response.raw, mode="r|*") as tar:
                tar.extractall(path=output, filter="data")
        finally:
            response.close()
