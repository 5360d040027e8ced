# Author: PB and Claude
# Date: 2026-10-19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ---
# src/orion_ipfs/readiness.py

"""
Wait for the IPFS daemon to accept API calls.

The daemon starts (and takes its repo lock) asynchronously from the client,
so startup code polls the identity endpoint once per interval until it
answers or the attempt budget runs out.
"""

import logging
import time

import requests

from orion_ipfs.client import ClientHandle, DaemonTimeout
from orion_ipfs.config import DEFAULT_READY_TIMEOUT
from orion_ipfs.ipfs_api import IPFSAPIError, IPFSClient
from orion_ipfs.types import PeerIdentity

logger = logging.getLogger(__name__)

POLL_INTERVAL = 1.0


def wait_until_ready(
    timeout: int = DEFAULT_READY_TIMEOUT,
    client: IPFSClient = None,
    handle: ClientHandle = None,
    interval: float = POLL_INTERVAL,
    sleep=time.sleep,
) -> PeerIdentity:
    """
    Block until the daemon answers an identity call.

    Makes at most `timeout` attempts, one every `interval` seconds. Stops
    probing as soon as one succeeds.

    Args:
        timeout: Number of attempts (one per interval)
        client: Client to probe. Default: the handle's client, re-read on
            every attempt so a handle set during startup is picked up
        handle: ClientHandle used when no explicit client is given
        interval: Seconds to wait before each attempt
        sleep: Sleep function (injectable for tests)

    Returns:
        PeerIdentity of the daemon

    Raises:
        DaemonTimeout: If no attempt succeeded
    """
    timeout = timeout or DEFAULT_READY_TIMEOUT

    for attempt in range(1, timeout + 1):
        sleep(interval)

        probe = client if client is not None else (handle.client if handle else None)
        if probe is None:
            logger.debug(f"Readiness attempt {attempt}/{timeout}: no client yet")
            continue

        try:
            identity = probe.id()
        except (IPFSAPIError, requests.RequestException) as e:
            logger.debug(f"Readiness attempt {attempt}/{timeout} failed: {e}")
            continue

        logger.info(f"IPFS daemon ready after {attempt} attempt(s)")
        return PeerIdentity.from_ipfs(identity)

    raise DaemonTimeout(timeout)
