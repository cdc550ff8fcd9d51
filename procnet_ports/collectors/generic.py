from __future__ import annotations
import logging
from socket import AF_INET, AF_INET6, SOCK_DGRAM, SOCK_STREAM
from typing import Dict, List, Tuple

import psutil

from ..config import CFG, LISTEN_STATE, TCP_STATE
from ..models import Owner, SocketRecord
from ..utils.net import NO_ADDR

log = logging.getLogger(__name__)

PROTO_MAP = {
    (AF_INET, SOCK_STREAM): 'tcp',
    (AF_INET6, SOCK_STREAM): 'tcp6',
    (AF_INET, SOCK_DGRAM): 'udp',
    (AF_INET6, SOCK_DGRAM): 'udp6',
}

# psutil status string -> /proc state code; unconnected UDP shows as CLOSE there
STATE_CODE = {name: code for code, name in TCP_STATE.items()}
STATE_CODE[psutil.CONN_NONE] = "07"

def proc_name(pid: int) -> str:
    try:
        return psutil.Process(pid).name() or "?"
    except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
        return "?"

def collect(cfg: CFG) -> List[SocketRecord]:
    """Portable collection through psutil for hosts without /proc/net.

    psutil reports one entry per (pid, fd); entries for the same endpoint
    pair and state are folded into one record with several owners. No
    inode is available here, so socket_id stays 0.
    """
    try:
        conns = psutil.net_connections(kind='inet')
    except psutil.AccessDenied as e:
        log.warning("psutil: not allowed to list connections (%s)", e)
        return []

    groups: Dict[Tuple, SocketRecord] = {}
    names: Dict[int, str] = {}
    for c in conns:
        proto = PROTO_MAP.get((c.family, c.type))
        if not proto:
            continue
        state = STATE_CODE.get(c.status, "")
        if not cfg.show_all and state != LISTEN_STATE:
            continue
        lip, lport = c.laddr if c.laddr else (NO_ADDR, 0)
        rip, rport = c.raddr if c.raddr else (NO_ADDR, 0)
        key = (proto, lip, lport, rip, rport, state)
        rec = groups.get(key)
        if rec is None:
            rec = groups[key] = SocketRecord(
                protocol=proto, local_address=lip, port=lport, state=state,
                remote_address=rip, remote_port=rport)
        if c.pid:
            if c.pid not in names:
                names[c.pid] = proc_name(c.pid)
            rec.owners.append(Owner(pid=c.pid, name=names[c.pid]))
    return list(groups.values())
