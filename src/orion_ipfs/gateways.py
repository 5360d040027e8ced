# Author: PB and Claude
# Date: 2026-10-19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ---
# src/orion_ipfs/gateways.py

"""
Gateway propagation.

After a publish, every configured public gateway is asked for the new
hashes so they fetch and cache the content. Requests run on a background
pool; failures are logged and never reach the caller.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor

import requests

from orion_ipfs import __version__
from orion_ipfs.config import OrionConfig

logger = logging.getLogger(__name__)

USER_AGENT = f"Orion/{__version__}"
GATEWAY_TIMEOUT = 60


class GatewayPropagator:
    """Fire-and-forget GET {gateway}/{hash} against every configured gateway."""

    def __init__(
        self,
        gateways: list[str],
        user_agent: str = USER_AGENT,
        session: requests.Session = None,
        max_workers: int = 8,
        timeout: float = GATEWAY_TIMEOUT,
    ):
        self.gateways = [g.rstrip("/") for g in gateways]
        self.user_agent = user_agent
        self.session = session or requests.Session()
        self.timeout = timeout
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="gateway")

    @classmethod
    def from_config(cls, config: OrionConfig, **kwargs) -> "GatewayPropagator":
        return cls(config.gateways, **kwargs)

    def _query(self, gateway: str, cid: str) -> bool:
        """Request one hash from one gateway. Returns False on any failure."""
        url = f"{gateway}/{cid}"
        try:
            # Only the fetch matters; the body is never read
            response = self.session.get(
                url,
                headers={"User-Agent": self.user_agent},
                timeout=self.timeout,
                stream=True,
            )
            with response:
                response.raise_for_status()
        except requests.RequestException as e:
            logger.warning(f"Could not query {gateway}. Error: {e}")
            return False
        logger.debug(f"Queried {url}")
        return True

    def propagate(self, cid: str) -> list[Future]:
        """
        Queue one request per gateway and return immediately.

        The returned futures resolve to True/False; they never raise.
        """
        return [self._executor.submit(self._query, gateway, cid) for gateway in self.gateways]

    __call__ = propagate

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)


_defaults: dict[tuple[str, ...], GatewayPropagator] = {}
_defaults_lock = threading.Lock()


def default_propagator(config: OrionConfig) -> GatewayPropagator:
    """Process-wide propagator for the gateway list in config, created on first use."""
    key = tuple(g.rstrip("/") for g in config.gateways)
    with _defaults_lock:
        if key not in _defaults:
            _defaults[key] = GatewayPropagator(list(key))
        return _defaults[key]
