# Author: PB and Claude
# Date: 2026-10-19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ---
# src/orion_ipfs/types.py

"""
Orion Type Definitions

Dataclasses for library return types with serialization support.
Each type built from a daemon response has a from_ipfs() constructor.
"""

from dataclasses import dataclass, field
from typing import Optional
import json


# Metric units, as the desktop UI has always displayed them
_UNITS = ["B", "kB", "MB", "GB", "TB", "PB", "EB", "ZB", "YB"]


@dataclass(frozen=True)
class ByteSize:
    """A byte count with a human-readable value/unit pair."""
    bytes: int
    value: float
    unit: str

    @classmethod
    def from_bytes(cls, num_bytes: int) -> "ByteSize":
        num_bytes = int(num_bytes or 0)
        if abs(num_bytes) < 1000:
            return cls(bytes=num_bytes, value=num_bytes, unit="B")

        exponent = 0
        scaled = float(num_bytes)
        while abs(scaled) >= 1000 and exponent < len(_UNITS) - 1:
            scaled /= 1000
            exponent += 1
        return cls(bytes=num_bytes, value=round(scaled, 1), unit=_UNITS[exponent])

    def __str__(self) -> str:
        return f"{self.value} {self.unit}"

    def to_dict(self) -> dict:
        return {"bytes": self.bytes, "value": self.value, "unit": self.unit}


@dataclass(frozen=True)
class Link:
    """A previously uploaded object, referenced as an entry of a directory."""
    hash: str                       # Content hash of the object
    path: str                       # Original relative path, used as the entry name
    size: int                       # Size in bytes

    def to_dict(self) -> dict:
        return {"hash": self.hash, "path": self.path, "size": self.size}

    @classmethod
    def from_dict(cls, data: dict) -> "Link":
        return cls(hash=data["hash"], path=data["path"], size=data.get("size", 0))

    @classmethod
    def from_ipfs_entry(cls, entry: dict) -> "Link":
        """Create from IPFS add response entry."""
        # IPFS returns: {"Name": "path", "Hash": "Qm...", "Size": "123"}
        return cls(
            path=entry.get("Name", ""),
            hash=entry["Hash"],
            size=int(entry.get("Size", 0) or 0),
        )

    def to_ipfs_link(self) -> dict:
        """The {Name, Hash, Size} form object/put expects."""
        return {"Name": self.path, "Hash": self.hash, "Size": self.size}


@dataclass
class Wrapper:
    """A synthetic directory object grouping published roots."""
    hash: str
    size: int
    path: str = ""                  # Always empty: the wrapper is a root, not a child

    def to_dict(self) -> dict:
        return {"hash": self.hash, "path": self.path, "size": self.size}

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)


PIN_RECURSIVE = "recursive"
PIN_DIRECT = "direct"
PIN_INDIRECT = "indirect"


@dataclass
class Pin:
    """A hash marked to survive garbage collection."""
    hash: str
    type: str                       # "recursive", "direct" or "indirect"

    @property
    def recursive(self) -> bool:
        return self.type == PIN_RECURSIVE

    @property
    def indirect(self) -> bool:
        return self.type == PIN_INDIRECT

    def to_dict(self) -> dict:
        return {"hash": self.hash, "type": self.type}

    @classmethod
    def from_ipfs(cls, data: dict) -> "Pin":
        return cls(hash=data["Hash"], type=data.get("Type", "").lower())


@dataclass
class ObjectStat:
    """Size breakdown of a stored object."""
    hash: str
    num_links: int
    block_size: ByteSize
    links_size: ByteSize
    data_size: ByteSize
    cumulative_size: ByteSize

    def to_dict(self) -> dict:
        return {
            "hash": self.hash,
            "num_links": self.num_links,
            "block_size": self.block_size.to_dict(),
            "links_size": self.links_size.to_dict(),
            "data_size": self.data_size.to_dict(),
            "cumulative_size": self.cumulative_size.to_dict(),
        }

    @classmethod
    def from_ipfs(cls, data: dict) -> "ObjectStat":
        return cls(
            hash=data.get("Hash", ""),
            num_links=data.get("NumLinks", 0),
            block_size=ByteSize.from_bytes(data.get("BlockSize", 0)),
            links_size=ByteSize.from_bytes(data.get("LinksSize", 0)),
            data_size=ByteSize.from_bytes(data.get("DataSize", 0)),
            cumulative_size=ByteSize.from_bytes(data.get("CumulativeSize", 0)),
        )


@dataclass
class DagLink:
    """A named child reference inside an object DAG."""
    name: str
    hash: str
    size: ByteSize

    def to_dict(self) -> dict:
        return {"name": self.name, "hash": self.hash, "size": self.size.to_dict()}

    @classmethod
    def from_ipfs(cls, data: dict) -> "DagLink":
        return cls(
            name=data.get("Name", ""),
            hash=data.get("Hash", ""),
            size=ByteSize.from_bytes(data.get("Size", 0)),
        )


@dataclass
class ObjectDag:
    """The structural graph of a stored object: payload plus child links."""
    hash: str
    data: bytes
    links: list[DagLink] = field(default_factory=list)
    size: ByteSize = field(default_factory=lambda: ByteSize.from_bytes(0))

    def to_dict(self) -> dict:
        return {
            "hash": self.hash,
            "data_length": len(self.data),
            "links": [link.to_dict() for link in self.links],
            "size": self.size.to_dict(),
        }

    @classmethod
    def from_ipfs(cls, cid: str, data: dict, block_size: Optional[int] = None) -> "ObjectDag":
        """
        Create from an object/get response whose Data is already decoded.

        size is the encoded node plus its referenced children. object/get
        does not report the encoded node size, so pass the BlockSize from
        object/stat when it is at hand; without it the payload length is
        used and the protobuf framing is not counted.
        """
        payload = data.get("Data") or b""
        links = [DagLink.from_ipfs(link) for link in data.get("Links", [])]
        node_size = len(payload) if block_size is None else block_size
        total = node_size + sum(link.size.bytes for link in links)
        return cls(
            hash=cid,
            data=payload,
            links=links,
            size=ByteSize.from_bytes(total),
        )


@dataclass
class StorageListItem:
    """A pin enriched with its stat and DAG, ready for display."""
    pin: Pin
    stat: ObjectStat
    dag: ObjectDag
    is_directory: bool

    @property
    def hash(self) -> str:
        return self.pin.hash

    def to_dict(self) -> dict:
        return {
            "hash": self.pin.hash,
            "type": self.pin.type,
            "is_directory": self.is_directory,
            "stat": self.stat.to_dict(),
            "dag": self.dag.to_dict(),
        }


@dataclass
class RepoInfo:
    """Repository statistics."""
    repo_size: ByteSize
    storage_max: ByteSize
    num_objects: int
    repo_path: str
    version: str

    def to_dict(self) -> dict:
        return {
            "repo_size": self.repo_size.to_dict(),
            "storage_max": self.storage_max.to_dict(),
            "num_objects": self.num_objects,
            "repo_path": self.repo_path,
            "version": self.version,
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_ipfs(cls, data: dict) -> "RepoInfo":
        return cls(
            repo_size=ByteSize.from_bytes(data.get("RepoSize", 0)),
            storage_max=ByteSize.from_bytes(data.get("StorageMax", 0)),
            num_objects=data.get("NumObjects", 0),
            repo_path=data.get("RepoPath", ""),
            version=data.get("Version", ""),
        )


@dataclass
class PeerIdentity:
    """Identity of the local IPFS node."""
    id: str
    public_key: str = ""
    addresses: list[str] = field(default_factory=list)
    agent_version: str = ""
    protocol_version: str = ""

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "public_key": self.public_key,
            "addresses": self.addresses,
            "agent_version": self.agent_version,
            "protocol_version": self.protocol_version,
        }

    @classmethod
    def from_ipfs(cls, data: dict) -> "PeerIdentity":
        return cls(
            id=data.get("ID", ""),
            public_key=data.get("PublicKey", ""),
            addresses=data.get("Addresses") or [],
            agent_version=data.get("AgentVersion", ""),
            protocol_version=data.get("ProtocolVersion", ""),
        )


@dataclass
class SwarmPeer:
    """A peer connected to the local node."""
    peer: str
    addr: str
    latency: Optional[str] = None

    def to_dict(self) -> dict:
        return {"peer": self.peer, "addr": self.addr, "latency": self.latency}

    @classmethod
    def from_ipfs(cls, data: dict) -> "SwarmPeer":
        return cls(
            peer=data.get("Peer", ""),
            addr=data.get("Addr", ""),
            latency=data.get("Latency") or None,
        )


# dht/findprovs event type carrying provider records
DHT_PROVIDER = 4


@dataclass
class ProviderInfo:
    """A peer providing a given object."""
    id: str
    addrs: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"id": self.id, "addrs": self.addrs}

    @classmethod
    def from_ipfs(cls, data: dict) -> "ProviderInfo":
        return cls(id=data.get("ID", ""), addrs=data.get("Addrs") or [])
