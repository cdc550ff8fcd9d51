from __future__ import annotations
import json
from typing import Sequence

from ..models import SocketRecord

def render_json(records: Sequence[SocketRecord]) -> str:
    # ASCII-only output: C0 controls become \u00XX, quotes/backslash/\b\f\n\r\t use short escapes
    return json.dumps([r.to_dict() for r in records], indent=2, ensure_ascii=True)
