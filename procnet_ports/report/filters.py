from __future__ import annotations
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ..config import CFG, SORT_KEYS
from ..models import SocketRecord

SORTERS: Dict[str, Callable[[SocketRecord], Tuple]] = {
    "port": lambda r: (r.port, r.protocol),
    "pid": lambda r: (r.primary_pid, r.protocol),
    "proto": lambda r: (r.protocol, r.port),
}

def name_matches(rec: SocketRecord, needle: str) -> bool:
    needle = needle.casefold()
    return any(needle in (o.name or "").casefold() for o in rec.owners)

def select_records(
    records: Sequence[SocketRecord],
    port: Optional[int] = None,
    name: Optional[str] = None,
    sort_key: str = "port",
    reverse: bool = False,
) -> List[SocketRecord]:
    """Filter and order records for display; the input is left untouched.

    ``reverse`` flips the whole key tuple, tie-breaks included.
    """
    if sort_key not in SORTERS:
        raise ValueError(f"unknown sort key '{sort_key}' (choose from {', '.join(SORT_KEYS)})")
    out = list(records)
    if port:
        out = [r for r in out if r.port == port]
    if name:
        out = [r for r in out if name_matches(r, name)]
    out.sort(key=SORTERS[sort_key], reverse=reverse)
    return out

def select(records: Sequence[SocketRecord], cfg: CFG) -> List[SocketRecord]:
    return select_records(records, port=cfg.port, name=cfg.name, sort_key=cfg.sort_key, reverse=cfg.reverse)
