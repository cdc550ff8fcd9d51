from __future__ import annotations
from typing import List, Mapping, Sequence

from ..models import Owner, SocketRecord

def attach_owners(records: List[SocketRecord], index: Mapping[int, Sequence[Owner]]) -> List[SocketRecord]:
    """Append the owners found for each record's inode, in index order.

    Records without an inode (0) are never joined, whatever the index holds.
    """
    for rec in records:
        if not rec.socket_id:
            continue
        for owner in index.get(rec.socket_id, ()):
            rec.owners.append(owner)
    return records
