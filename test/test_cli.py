# Author: PB and Claude
# Date: 2026-10-19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ---
# test/test_cli.py

"""Tests for the orion command line."""

from unittest.mock import patch

import pytest
import requests
from click.testing import CliRunner

from orion_ipfs.cli import cli
from orion_ipfs.client import DaemonTimeout
from orion_ipfs.ipfs_api import IPFSAPIError
from orion_ipfs.types import PeerIdentity, Wrapper


@pytest.fixture
def runner(monkeypatch, tmp_path):
    monkeypatch.setenv("ORION_CONFIG", str(tmp_path / "missing.toml"))
    monkeypatch.delenv("IPFS_MULTIADDR_API", raising=False)
    return CliRunner()


class TestPublish:
    @patch("orion_ipfs.cli.operations.publish")
    def test_publish(self, mock_publish, runner, tmp_path):
        src = tmp_path / "a.txt"
        src.write_text("a")
        mock_publish.return_value = Wrapper(hash="QmWrap", size=42)

        result = runner.invoke(cli, ["publish", str(src), "--no-gateways"])

        assert result.exit_code == 0
        assert "wrapper: QmWrap" in result.output
        paths, handle, cfg = mock_publish.call_args[0]
        assert paths == [src]
        assert cfg.skip_gateway_query is True
        assert handle.connected

    def test_publish_missing_path(self, runner):
        result = runner.invoke(cli, ["publish", "/nonexistent/orion/file"])
        assert result.exit_code == 2


class TestErrors:
    @patch("orion_ipfs.cli.operations.get_peer")
    def test_api_error(self, mock_get_peer, runner):
        mock_get_peer.side_effect = IPFSAPIError("repo locked", 500)
        result = runner.invoke(cli, ["id"])
        assert result.exit_code == 1
        assert "Error: IPFS API error: repo locked" in result.output

    @patch("orion_ipfs.cli.operations.get_peer")
    def test_connection_error(self, mock_get_peer, runner):
        mock_get_peer.side_effect = requests.ConnectionError("HTTPConnectionPool(host='127.0.0.1', port=5001)")
        result = runner.invoke(cli, ["id"])
        assert result.exit_code == 1
        assert "Could not connect to the IPFS daemon" in result.output
        assert "Host: 127.0.0.1" in result.output

    def test_bad_api_override(self, runner):
        result = runner.invoke(cli, ["id", "--api", "localhost:5001"])
        assert result.exit_code == 2
        assert "Invalid API multiaddr" in result.output


class TestWait:
    @patch("orion_ipfs.cli.wait_until_ready")
    def test_ready(self, mock_wait, runner):
        mock_wait.return_value = PeerIdentity(id="12D3KooWPeer")
        result = runner.invoke(cli, ["wait", "--timeout", "3"])
        assert result.exit_code == 0
        assert "ready: 12D3KooWPeer" in result.output
        assert mock_wait.call_args[0][0] == 3

    @patch("orion_ipfs.cli.wait_until_ready")
    def test_timeout(self, mock_wait, runner):
        mock_wait.side_effect = DaemonTimeout(3)
        result = runner.invoke(cli, ["wait", "--timeout", "3"])
        assert result.exit_code == 1
        assert "not ready after 3 attempts" in result.output


class TestConfigCommand:
    def test_defaults_valid(self, runner):
        result = runner.invoke(cli, ["config"])
        assert result.exit_code == 0
        assert "using defaults" in result.output
        assert "✓ Config is valid" in result.output

    def test_invalid_config(self, runner, tmp_path):
        path = tmp_path / "orion.toml"
        path.write_text('[api]\nmultiaddr = "localhost"\n')
        result = runner.invoke(cli, ["config", "--config-file", str(path), "--validate-only"])
        assert result.exit_code == 1
        assert "api multiaddr" in result.output
