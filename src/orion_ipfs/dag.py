# Author: PB and Claude
# Date: 2026-10-19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ---
# src/orion_ipfs/dag.py

"""
Directory objects.

wrap_links() builds a unixfs directory node around previously uploaded
objects; is_dag_directory() recognises one. Both sides must use the same
DIRECTORY_MARKER payload or directory detection breaks.
"""

import logging
from typing import Sequence

from orion_ipfs.ipfs_api import IPFSClient
from orion_ipfs.types import Link, ObjectDag, Wrapper

logger = logging.getLogger(__name__)

# Protobuf-encoded unixfs Data message with Type = Directory
DIRECTORY_MARKER = b"\x08\x01"


def wrap_links(client: IPFSClient, links: Sequence[Link]) -> Wrapper:
    """
    Create one directory object whose entries are the given links.

    Each entry is named by the link's original relative path, in order.

    Raises:
        IPFSAPIError: If the object cannot be constructed (nothing is retried)
    """
    result = client.object_put(DIRECTORY_MARKER, [link.to_ipfs_link() for link in links])
    wrapper = Wrapper(hash=result["Hash"], size=int(result.get("Size", 0)))
    logger.debug(f"Wrapped {len(links)} link(s) into {wrapper.hash}")
    return wrapper


def is_dag_directory(dag: ObjectDag) -> bool:
    """True if the DAG payload is exactly the directory marker."""
    return dag.data == DIRECTORY_MARKER
