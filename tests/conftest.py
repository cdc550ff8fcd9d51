"""Shared test fixtures."""

import os
from pathlib import Path

import pytest

from procnet_ports.models import Owner, SocketRecord

TABLE_HEADER = (
    "  sl  local_address rem_address   st tx_queue rx_queue tr tm->when "
    "retrnsmt   uid  timeout inode\n"
)


def table_line(slot, local, remote="00000000:0000", state="0A", inode=0):
    """One /proc/net/tcp style data line."""
    return (
        f"   {slot}: {local} {remote} {state} 00000000:00000000 00:00000000 "
        f"00000000     0        0 {inode} 1 0000000000000000 100 0 0 10 0\n"
    )


class FakeProc:
    """Minimal procfs tree under a temporary directory."""

    def __init__(self, root: Path):
        self.root = root
        (root / "net").mkdir(parents=True, exist_ok=True)

    def table(self, proto: str, lines: list[str]) -> Path:
        path = self.root / "net" / proto
        path.write_text(TABLE_HEADER + "".join(lines))
        return path

    def process(
        self,
        pid: int,
        comm: str | None = None,
        cmdline: bytes | None = None,
        fds: dict[int, str] | None = None,
    ) -> Path:
        pdir = self.root / str(pid)
        (pdir / "fd").mkdir(parents=True, exist_ok=True)
        if comm is not None:
            (pdir / "comm").write_text(comm)
        if cmdline is not None:
            (pdir / "cmdline").write_bytes(cmdline)
        for fd, target in (fds or {}).items():
            os.symlink(target, pdir / "fd" / str(fd))
        return pdir


@pytest.fixture
def fake_proc(tmp_path):
    """Factory for a fake /proc rooted in tmp_path."""
    return FakeProc(tmp_path / "proc")


def make_record(port, protocol="tcp", owners=(), socket_id=0, address="0.0.0.0", state="0A"):
    return SocketRecord(
        protocol=protocol,
        local_address=address,
        port=port,
        socket_id=socket_id,
        state=state,
        owners=[Owner(pid=pid, name=name) for pid, name in owners],
    )
