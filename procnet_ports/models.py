from __future__ import annotations
from dataclasses import dataclass, field
from typing import List

from .config import TCP_STATE

@dataclass
class Owner:
    pid: int
    name: str = "?"

@dataclass
class SocketRecord:
    protocol: str               # 'tcp', 'tcp6', 'udp', 'udp6'
    local_address: str
    port: int
    socket_id: int = 0          # kernel inode, 0 = unknown
    state: str = ""             # raw hex code from the table, e.g. '0A'
    remote_address: str = "-"
    remote_port: int = 0
    owners: List[Owner] = field(default_factory=list)

    @property
    def state_name(self) -> str:
        return TCP_STATE.get(self.state.upper(), self.state or "-")

    @property
    def primary_pid(self) -> int:
        # smallest owning pid, 0 when nobody was found
        if not self.owners:
            return 0
        return min(o.pid for o in self.owners)

    def to_dict(self) -> dict:
        return {
            "protocol": self.protocol,
            "local_address": self.local_address,
            "port": self.port,
            "state": self.state,
            "state_name": self.state_name,
            "remote_address": self.remote_address,
            "remote_port": self.remote_port,
            "socket_id": self.socket_id,
            "owners": [{"pid": o.pid, "name": o.name} for o in self.owners],
        }
