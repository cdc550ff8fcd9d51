"""Tests for the table and JSON presenters."""

import json

from conftest import make_record

from procnet_ports.config import CFG
from procnet_ports.render import render, render_json, render_table
from procnet_ports.render.table import HEADER, NO_OWNER


class TestJson:
    def test_empty_is_array(self):
        assert json.loads(render_json([])) == []
        assert render_json([]).strip() == "[]"

    def test_shape(self):
        rec = make_record(22, socket_id=5, owners=[(100, "sshd")])

        [obj] = json.loads(render_json([rec]))

        assert obj == {
            "protocol": "tcp",
            "local_address": "0.0.0.0",
            "port": 22,
            "state": "0A",
            "state_name": "LISTEN",
            "remote_address": "-",
            "remote_port": 0,
            "socket_id": 5,
            "owners": [{"pid": 100, "name": "sshd"}],
        }

    def test_no_owner_is_empty_list(self):
        [obj] = json.loads(render_json([make_record(53)]))

        assert obj["owners"] == []

    def test_escaping(self):
        rec = make_record(80, owners=[(1, 'a"b\tc\\d\x01\n')])

        out = render_json([rec])

        assert '"name": "a\\"b\\tc\\\\d\\u0001\\n"' in out
        assert json.loads(out)[0]["owners"][0]["name"] == 'a"b\tc\\d\x01\n'


class TestTable:
    def test_header_and_empty_marker(self):
        out = render_table([]).splitlines()

        assert out[0] == HEADER
        assert out[1] == "no matching sockets"

    def test_no_owner_marker(self):
        out = render_table([make_record(53, "udp")])

        assert NO_OWNER in out

    def test_names_printed_literally(self):
        out = render_table([make_record(80, owners=[(1, 'say "hi"\tnow')])])

        assert 'say "hi"\tnow' in out
        assert "\\t" not in out

    def test_one_line_per_owner(self):
        rec = make_record(443, socket_id=12, owners=[(300, "nginx"), (301, "nginx")])

        lines = render_table([rec]).splitlines()[1:]

        assert len(lines) == 2
        assert "443" in lines[0] and "300" in lines[0]
        assert "443" not in lines[1] and "301" in lines[1]

    def test_render_dispatch(self):
        rec = make_record(22)

        assert render([rec], CFG(fmt="json")).lstrip().startswith("[")
        assert render([rec], CFG()).startswith("PROTO")
