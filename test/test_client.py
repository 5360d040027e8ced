# Author: PB and Claude
# Date: 2026-10-19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ---
# test/test_client.py

"""Tests for the daemon connection handle."""

from unittest.mock import MagicMock

import pytest

from orion_ipfs.client import (
    API_ADDR_ENV,
    ClientHandle,
    DaemonTimeout,
    DaemonUnavailable,
    OrionError,
    share_client,
    shared_client,
)
from orion_ipfs.config import OrionConfig
from orion_ipfs.ipfs_api import IPFSClient


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    monkeypatch.delenv(API_ADDR_ENV, raising=False)
    share_client(None)
    yield
    share_client(None)


class TestRequire:
    def test_empty_handle_raises(self):
        with pytest.raises(DaemonUnavailable):
            ClientHandle().require()

    def test_returns_client(self):
        client = MagicMock()
        assert ClientHandle(client).require() is client

    def test_errors_share_base(self):
        assert issubclass(DaemonUnavailable, OrionError)
        assert issubclass(DaemonTimeout, OrionError)
        assert DaemonTimeout(5).attempts == 5


class TestEnsure:
    def test_keeps_existing_client(self):
        client = MagicMock()
        handle = ClientHandle(client)
        assert handle.ensure(OrionConfig(api_multiaddr="/ip4/10.0.0.9/tcp/9999")) is client

    def test_uses_config_multiaddr(self):
        handle = ClientHandle()
        client = handle.ensure(OrionConfig(api_multiaddr="/ip4/10.0.0.9/tcp/5009", api_timeout=7))
        assert isinstance(client, IPFSClient)
        assert client.base_url == "http://10.0.0.9:5009/api/v0"
        assert client.timeout == 7
        assert handle.connected

    def test_default_config(self):
        client = ClientHandle().ensure()
        assert client.base_url == "http://127.0.0.1:5001/api/v0"

    def test_env_address_wins_over_config(self, monkeypatch):
        monkeypatch.setenv(API_ADDR_ENV, "/ip4/192.168.1.4/tcp/5001")
        client = ClientHandle().ensure(OrionConfig(api_multiaddr="/ip4/10.0.0.9/tcp/5009"))
        assert client.base_url == "http://192.168.1.4:5001/api/v0"

    def test_shared_client_wins(self, monkeypatch):
        monkeypatch.setenv(API_ADDR_ENV, "/ip4/192.168.1.4/tcp/5001")
        parent = MagicMock()
        share_client(parent)
        assert ClientHandle().ensure() is parent

    def test_not_recreated(self):
        handle = ClientHandle()
        first = handle.ensure()
        assert handle.ensure() is first

    def test_bad_address_raises(self):
        with pytest.raises(ValueError):
            ClientHandle().ensure(OrionConfig(api_multiaddr="localhost"))


class TestClose:
    def test_closes_own_client(self):
        client = MagicMock()
        handle = ClientHandle(client)
        handle.close()
        client.close.assert_called_once()
        assert not handle.connected

    def test_leaves_shared_client_open(self):
        parent = MagicMock()
        share_client(parent)
        handle = ClientHandle()
        handle.ensure()
        handle.close()
        parent.close.assert_not_called()
        assert shared_client() is parent
