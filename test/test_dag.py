# Author: PB and Claude
# Date: 2026-10-19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ---
# test/test_dag.py

"""Tests for directory wrapping and detection."""

from unittest.mock import MagicMock

import pytest

from orion_ipfs.dag import DIRECTORY_MARKER, is_dag_directory, wrap_links
from orion_ipfs.ipfs_api import IPFSAPIError
from orion_ipfs.types import Link, ObjectDag


LINK_SETS = [
    [Link(hash="Qa", path="a/file.txt", size=15)],
    [Link(hash="Qd", path="dirA", size=9000), Link(hash="Qb", path="b.txt", size=3)],
    [Link(hash=f"Q{i}", path=f"f{i}", size=i) for i in range(20)],
]


class TestWrapLinks:
    @pytest.mark.parametrize("links", LINK_SETS)
    def test_size_and_empty_path(self, links):
        client = MagicMock()
        client.object_put.return_value = {"Hash": "QmWrap", "Size": 4242}

        wrapper = wrap_links(client, links)

        assert wrapper.hash == "QmWrap"
        assert wrapper.size == 4242
        assert wrapper.path == ""

    def test_links_named_by_path_in_order(self):
        client = MagicMock()
        client.object_put.return_value = {"Hash": "QmWrap", "Size": 10}

        wrap_links(client, LINK_SETS[1])

        data, links = client.object_put.call_args[0]
        assert data == DIRECTORY_MARKER
        assert links == [
            {"Name": "dirA", "Hash": "Qd", "Size": 9000},
            {"Name": "b.txt", "Hash": "Qb", "Size": 3},
        ]

    def test_api_error_propagates(self):
        client = MagicMock()
        client.object_put.side_effect = IPFSAPIError("merkledag: not found", 500)
        with pytest.raises(IPFSAPIError, match="not found"):
            wrap_links(client, LINK_SETS[0])


class TestIsDagDirectory:
    def test_marker_is_two_bytes(self):
        assert DIRECTORY_MARKER == b"\x08\x01"

    def test_directory(self):
        assert is_dag_directory(ObjectDag(hash="Qd", data=b"\x08\x01")) is True

    @pytest.mark.parametrize("data", [
        b"",
        b"\x08",
        b"\x08\x02",
        b"\x08\x01\x00",
        b"\x08\x02\x12\x05hello\x18\x05",
        b"\x01\x08",
    ])
    def test_not_directory(self, data):
        assert is_dag_directory(ObjectDag(hash="Qf", data=data)) is False
