"""Unit tests for node id parsing."""
import pytest

from src.csi.node_identity import parse_node_id


class TestParseNodeId:
    def test_host_only(self):
        identity = parse_node_id("host1")
        assert identity.host_name == "host1"
        assert identity.wwpns == []
        assert identity.wwnns == []
        assert identity.iqns == []

    def test_empty_node_id(self):
        identity = parse_node_id("")
        assert identity.host_name == ""
        assert identity.iqns == []

    def test_iscsi_initiator(self):
        identity = parse_node_id("host1,iqn:iqn.1993-08.org.debian:01:abc")
        assert identity.host_name == "host1"
        assert identity.iqns == ["iqn.1993-08.org.debian:01:abc"]

    def test_fibre_channel_initiators(self):
        identity = parse_node_id(
            "host1,wwpn:500143802426baf8,wwpn:500143802426baf9,wwnn:200143802426baf8"
        )
        assert identity.wwpns == ["500143802426baf8", "500143802426baf9"]
        assert identity.wwnns == ["200143802426baf8"]
        assert identity.iqns == []

    def test_continuation_joins_last_entry(self):
        """Untagged segments belong to the entry opened before them."""
        identity = parse_node_id(
            "host1,iqn:iqn.1993-08.org.debian:01:abc,more,wwn:500143802426baf8"
        )
        assert identity.host_name == "host1"
        assert identity.iqns == ["iqn.1993-08.org.debian:01:abc,more"]
        assert identity.wwpns == []
        assert identity.wwnns == ["500143802426baf8"]

    def test_continuation_after_switching_tags(self):
        identity = parse_node_id("host1,iqn:a,wwpn:b,c,d,iqn:e")
        assert identity.iqns == ["a", "e"]
        assert identity.wwpns == ["b,c,d"]

    def test_continuation_before_any_tag_is_dropped(self):
        identity = parse_node_id("host1,stray,iqn:iqn.2000-01.com.example:x")
        assert identity.host_name == "host1"
        assert identity.iqns == ["iqn.2000-01.com.example:x"]
        assert identity.wwpns == []

    @pytest.mark.parametrize("segment,attr", [
        ("wwpn:aa", "wwpns"),
        ("wwnn:aa", "wwnns"),
        ("wwn:aa", "wwnns"),
        ("iqn:aa", "iqns"),
    ])
    def test_tag_prefixes(self, segment, attr):
        identity = parse_node_id(f"host1,{segment}")
        assert getattr(identity, attr) == ["aa"]

    def test_value_keeps_inner_colons(self):
        identity = parse_node_id("host1,iqn:iqn:with:colons")
        assert identity.iqns == ["iqn:with:colons"]
