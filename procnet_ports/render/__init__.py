from __future__ import annotations
from typing import Sequence

from ..config import CFG
from ..models import SocketRecord
from .jsonout import render_json
from .table import render_table

def render(records: Sequence[SocketRecord], cfg: CFG) -> str:
    if cfg.fmt == "json":
        return render_json(records)
    return render_table(records)

__all__ = ["render", "render_json", "render_table"]
