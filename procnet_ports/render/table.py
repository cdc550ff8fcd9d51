from __future__ import annotations
from typing import Sequence

from ..models import SocketRecord

ROW = "%-5s  %-39s  %5s  %-12s  %10s  %7s  %s"
HEADER = ROW % ("PROTO", "LOCAL ADDRESS", "PORT", "STATE", "INODE", "PID", "PROCESS")
NO_OWNER = "(no owner found)"
EMPTY = "no matching sockets"

def render_table(records: Sequence[SocketRecord]) -> str:
    """Fixed-column listing, one line per owner.

    Continuation lines for extra owners leave the socket columns blank.
    Names are printed as-is.
    """
    lines = [HEADER]
    if not records:
        lines.append(EMPTY)
    for r in records:
        sock = (r.protocol, r.local_address, r.port, r.state_name, r.socket_id or "-")
        if not r.owners:
            lines.append(ROW % (*sock, "-", NO_OWNER))
            continue
        for i, o in enumerate(r.owners):
            lines.append(ROW % (*(sock if i == 0 else ("",) * len(sock)), o.pid, o.name))
    return "\n".join(lines)
