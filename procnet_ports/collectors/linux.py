from __future__ import annotations
import logging
import os
import re
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional

from ..config import CFG, LISTEN_STATE, PROC_ROOT, SOCKET_TABLES
from ..models import Owner, SocketRecord
from ..report.join import attach_owners
from ..utils.net import NO_ADDR, split_endpoint

log = logging.getLogger(__name__)

PID_RE = re.compile(r"[0-9]+")
SOCKET_LINK_RE = re.compile(r"socket:\[(?P<inode>[0-9]+)\]")
NAME_MAX = 255

def _safe_int(s: str, default: int = 0) -> int:
    try:
        return int(s)
    except Exception:
        return default

# ---------------------------------------------------------------- socket tables

def _parse_line(line: str, proto: str, only_listening: bool) -> Optional[SocketRecord]:
    # 0=sl 1=local 2=remote 3=st 4=tx:rx 5=tr:when 6=retrnsmt 7=uid 8=timeout 9=inode
    parts = line.split()
    if len(parts) < 4:
        log.debug("%s: skipped short line %r", proto, line)
        return None
    state = parts[3]
    if only_listening and state != LISTEN_STATE:
        return None
    wide = proto.endswith("6")
    try:
        local = split_endpoint(parts[1], wide)
    except ValueError:
        local = None
    if local is None:
        log.debug("%s: skipped bad local address %r", proto, parts[1])
        return None
    try:
        remote = split_endpoint(parts[2], wide) or (NO_ADDR, 0)
    except ValueError:
        remote = (NO_ADDR, 0)
    inode = _safe_int(parts[9]) if len(parts) > 9 else 0
    return SocketRecord(
        protocol=proto,
        local_address=local[0],
        port=local[1],
        socket_id=inode,
        state=state,
        remote_address=remote[0],
        remote_port=remote[1],
    )

def parse_socket_table(path: str, proto: str, only_listening: bool) -> List[SocketRecord]:
    """Parse one /proc/net/{tcp,tcp6,udp,udp6} table.

    An unreadable or missing table (protocol disabled, no procfs) yields an
    empty list. Short or undecodable lines are skipped.
    """
    records: List[SocketRecord] = []
    try:
        with open(path, "r", encoding="ascii", errors="replace") as f:
            next(f, None)  # header
            for line in f:
                rec = _parse_line(line, proto, only_listening)
                if rec is not None:
                    records.append(rec)
    except OSError as e:
        log.debug("cannot read %s: %s", path, e)
    return records

# ---------------------------------------------------------------- processes

def list_pids(proc_root: str = PROC_ROOT) -> List[int]:
    try:
        with os.scandir(proc_root) as it:
            return [int(e.name) for e in it if PID_RE.fullmatch(e.name)]
    except OSError as e:
        log.debug("cannot list %s: %s", proc_root, e)
        return []

def socket_inodes(pid: int, proc_root: str = PROC_ROOT) -> List[int]:
    """Socket inodes referenced by the fds of one process, in fd order.

    A process that exited or whose fd table we may not read contributes
    nothing.
    """
    fd_dir = os.path.join(proc_root, str(pid), "fd")
    try:
        with os.scandir(fd_dir) as it:
            fds = sorted((e.name for e in it), key=_safe_int)
    except OSError as e:
        log.debug("skip pid %d: %s", pid, e)
        return []
    inodes: List[int] = []
    for fd in fds:
        try:
            target = os.readlink(os.path.join(fd_dir, fd))
        except OSError:
            # fd closed (or process gone) since the listing
            continue
        m = SOCKET_LINK_RE.fullmatch(target)
        if not m:
            continue
        inode = int(m.group("inode"))
        if inode:
            inodes.append(inode)
    return inodes

def _read_bytes(path: str) -> Optional[bytes]:
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError:
        return None

def resolve_proc_name(pid: int, proc_root: str = PROC_ROOT) -> str:
    """comm, else cmdline with NULs as spaces, else '?'."""
    base = os.path.join(proc_root, str(pid))
    raw = _read_bytes(os.path.join(base, "comm"))
    if raw:
        name = raw.decode("utf-8", errors="replace")
        if name.endswith("\n"):
            name = name[:-1]
        if name:
            return name[:NAME_MAX]
    raw = _read_bytes(os.path.join(base, "cmdline"))
    if raw:
        name = raw.rstrip(b"\0").replace(b"\0", b" ").decode("utf-8", errors="replace")
        if name:
            return name[:NAME_MAX]
    return "?"

def scan_processes(proc_root: str = PROC_ROOT) -> Dict[int, List[Owner]]:
    """Build the inode -> owners index from every /proc/<pid>/fd.

    Owners are listed in discovery order; a process holding two fds to the
    same socket is listed twice.
    """
    index: Dict[int, List[Owner]] = {}
    pids = list_pids(proc_root)
    for pid in pids:
        inodes = socket_inodes(pid, proc_root)
        if not inodes:
            continue
        name = resolve_proc_name(pid, proc_root)
        for inode in inodes:
            index.setdefault(inode, []).append(Owner(pid=pid, name=name))
    log.debug("scanned %d processes, %d socket inodes owned", len(pids), len(index))
    return index

# ---------------------------------------------------------------- snapshot

def available(proc_root: str = PROC_ROOT) -> bool:
    return any(os.path.exists(os.path.join(proc_root, rel)) for _, rel in SOCKET_TABLES)

def collect(cfg: CFG) -> List[SocketRecord]:
    only_listening = not cfg.show_all
    with ThreadPoolExecutor(max_workers=len(SOCKET_TABLES) + 1) as pool:
        scan = pool.submit(scan_processes, cfg.proc_root)
        parses = [
            pool.submit(parse_socket_table, os.path.join(cfg.proc_root, rel), proto, only_listening)
            for proto, rel in SOCKET_TABLES
        ]
        records: List[SocketRecord] = []
        for fut in parses:
            records.extend(fut.result())
        index = scan.result()
    log.debug("parsed %d sockets", len(records))
    return attach_owners(records, index)
