from __future__ import annotations
import logging
import platform
from typing import List

from ..config import CFG
from ..models import SocketRecord
from . import generic, linux

log = logging.getLogger(__name__)

def pick_backend(cfg: CFG) -> str:
    if cfg.backend != "auto":
        return cfg.backend
    if linux.available(cfg.proc_root):
        return "procfs"
    log.info("no socket tables under %s (%s), falling back to psutil", cfg.proc_root, platform.system())
    return "psutil"

def collect(cfg: CFG) -> List[SocketRecord]:
    """Take one snapshot of sockets with their owners attached."""
    backend = pick_backend(cfg)
    log.debug("collecting with %s backend", backend)
    if backend == "procfs":
        return linux.collect(cfg)
    return generic.collect(cfg)
