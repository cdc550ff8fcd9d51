"""Tests for result filtering and ordering."""

import pytest
from conftest import make_record

from procnet_ports.config import CFG
from procnet_ports.report.filters import select, select_records


def keys(records):
    return [(r.port, r.protocol) for r in records]


@pytest.fixture
def mixed():
    return [
        make_record(80, "tcp", owners=[(300, "nginx")]),
        make_record(22, "tcp", owners=[(100, "SSHD")]),
        make_record(443, "tcp", owners=[(300, "nginx"), (301, "nginx")]),
        make_record(22, "udp"),
    ]


class TestSort:
    def test_port_ascending_protocol_tiebreak(self, mixed):
        assert keys(select_records(mixed, sort_key="port")) == [
            (22, "tcp"), (22, "udp"), (80, "tcp"), (443, "tcp")]

    def test_reverse_flips_tiebreak_too(self, mixed):
        assert keys(select_records(mixed, sort_key="port", reverse=True)) == [
            (443, "tcp"), (80, "tcp"), (22, "udp"), (22, "tcp")]

    def test_pid_ownerless_first(self, mixed):
        out = select_records(mixed, sort_key="pid")

        assert [r.primary_pid for r in out] == [0, 100, 300, 300]
        assert keys(out)[0] == (22, "udp")

    def test_pid_reverse(self, mixed):
        out = select_records(mixed, sort_key="pid", reverse=True)

        assert [r.primary_pid for r in out] == [300, 300, 100, 0]

    def test_proto_then_port(self):
        records = [
            make_record(53, "udp6"), make_record(80, "tcp6"),
            make_record(22, "tcp"), make_record(5353, "udp"), make_record(8080, "tcp"),
        ]

        assert keys(select_records(records, sort_key="proto")) == [
            (22, "tcp"), (8080, "tcp"), (80, "tcp6"), (5353, "udp"), (53, "udp6")]

    def test_unknown_key(self, mixed):
        with pytest.raises(ValueError):
            select_records(mixed, sort_key="inode")


class TestFilter:
    def test_port_filter(self, mixed):
        assert keys(select_records(mixed, port=22)) == [(22, "tcp"), (22, "udp")]

    def test_port_zero_means_unset(self, mixed):
        assert len(select_records(mixed, port=0)) == 4

    def test_name_is_case_insensitive(self, mixed):
        assert keys(select_records(mixed, name="sshd")) == [(22, "tcp")]

    def test_name_substring_any_owner(self, mixed):
        assert keys(select_records(mixed, name="GIN")) == [(80, "tcp"), (443, "tcp")]

    def test_ownerless_never_match_name(self, mixed):
        assert select_records(mixed, name="udp") == []

    def test_filters_combine(self, mixed):
        assert keys(select_records(mixed, port=443, name="nginx")) == [(443, "tcp")]
        assert select_records(mixed, port=22, name="nginx") == []

    def test_input_untouched(self, mixed):
        before = list(mixed)

        select_records(mixed, port=80, sort_key="proto", reverse=True)

        assert mixed == before

    def test_select_uses_cfg(self, mixed):
        cfg = CFG(port=22, sort_key="port", reverse=True)

        assert keys(select(mixed, cfg)) == [(22, "udp"), (22, "tcp")]
