# Author: PB and Claude
# Date: 2026-10-19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ---
# test/test_config.py

"""Tests for Orion config module (toml-based)."""

import tempfile
from pathlib import Path

import pytest

from orion_ipfs.config import (
    DEFAULT_GATEWAYS,
    DEFAULT_READY_TIMEOUT,
    ConfigError,
    OrionConfig,
    default_config_path,
    load_config,
)
from orion_ipfs.ipfs_api import DEFAULT_API_MULTIADDR


SAMPLE_TOML = """\
[api]
multiaddr = "/ip4/10.0.0.2/tcp/5002"
timeout = 15

[gateways]
urls = ["https://ipfs.io/ipfs/", "https://dweb.link/ipfs"]
skip_query = true

[readiness]
timeout = 45
"""


@pytest.fixture
def config_file():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "orion.toml"
        path.write_text(SAMPLE_TOML)
        yield path


class TestOrionConfig:
    def test_defaults(self):
        cfg = OrionConfig()
        assert cfg.api_multiaddr == DEFAULT_API_MULTIADDR
        assert cfg.gateways == DEFAULT_GATEWAYS
        assert cfg.skip_gateway_query is False
        assert cfg.ready_timeout == DEFAULT_READY_TIMEOUT

    def test_default_gateways_not_shared(self):
        cfg = OrionConfig()
        cfg.gateways.append("https://example.org/ipfs")
        assert "https://example.org/ipfs" not in OrionConfig().gateways

    def test_from_dict_partial(self):
        cfg = OrionConfig.from_dict({"readiness": {"timeout": 5}})
        assert cfg.ready_timeout == 5
        assert cfg.api_multiaddr == DEFAULT_API_MULTIADDR

    def test_from_dict_bad_urls(self):
        with pytest.raises(ConfigError, match="urls"):
            OrionConfig.from_dict({"gateways": {"urls": "https://ipfs.io/ipfs"}})

    def test_to_dict(self):
        cfg = OrionConfig(gateways=["https://ipfs.io/ipfs"])
        d = cfg.to_dict()
        assert d["gateways"] == {"urls": ["https://ipfs.io/ipfs"], "skip_query": False}
        assert d["api"]["multiaddr"] == DEFAULT_API_MULTIADDR


class TestValidate:
    def test_defaults_valid(self):
        errors, warnings = OrionConfig().validate()
        assert errors == []
        assert warnings == []

    def test_bad_multiaddr(self):
        errors, _ = OrionConfig(api_multiaddr="localhost:5001").validate()
        assert any("multiaddr" in e for e in errors)

    def test_non_positive_timeouts(self):
        errors, _ = OrionConfig(api_timeout=0, ready_timeout=-1).validate()
        assert len(errors) == 2

    def test_bad_gateway_url(self):
        errors, _ = OrionConfig(gateways=["ftp://example.org"]).validate()
        assert errors == ["gateway 'ftp://example.org' is not an http(s) URL"]

    def test_no_gateways_warns(self):
        _, warnings = OrionConfig(gateways=[]).validate()
        assert len(warnings) == 1

    def test_no_gateways_skip_query_no_warning(self):
        _, warnings = OrionConfig(gateways=[], skip_gateway_query=True).validate()
        assert warnings == []


class TestLoadConfig:
    def test_load(self, config_file):
        cfg = load_config(config_file)
        assert cfg.api_multiaddr == "/ip4/10.0.0.2/tcp/5002"
        assert cfg.api_timeout == 15
        # Trailing slash stripped
        assert cfg.gateways == ["https://ipfs.io/ipfs", "https://dweb.link/ipfs"]
        assert cfg.skip_gateway_query is True
        assert cfg.ready_timeout == 45

    def test_explicit_missing_raises(self):
        with pytest.raises(FileNotFoundError):
            load_config(Path("/nonexistent/orion.toml"))

    def test_default_missing_gives_defaults(self, monkeypatch):
        monkeypatch.setenv("ORION_CONFIG", "/nonexistent/orion.toml")
        cfg = load_config()
        assert cfg == OrionConfig()

    def test_env_path(self, config_file, monkeypatch):
        monkeypatch.setenv("ORION_CONFIG", str(config_file))
        assert default_config_path() == config_file
        assert load_config().ready_timeout == 45

    def test_invalid_toml(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "orion.toml"
            path.write_text("[api\nmultiaddr = ")
            with pytest.raises(ConfigError, match="Invalid toml"):
                load_config(path)
