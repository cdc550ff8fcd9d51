from __future__ import annotations
import json
import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

from .utils.path import to_abs_path

try:
    import yaml  # type: ignore
except Exception:
    yaml = None

log = logging.getLogger(__name__)

PROC_ROOT = "/proc"

# protocol tag -> table path below the proc root, in presentation order
SOCKET_TABLES = (
    ("tcp", "net/tcp"),
    ("tcp6", "net/tcp6"),
    ("udp", "net/udp"),
    ("udp6", "net/udp6"),
)

LISTEN_STATE = "0A"

# include/net/tcp_states.h
TCP_STATE = {
    "01": "ESTABLISHED", "02": "SYN_SENT", "03": "SYN_RECV", "04": "FIN_WAIT1",
    "05": "FIN_WAIT2", "06": "TIME_WAIT", "07": "CLOSE", "08": "CLOSE_WAIT",
    "09": "LAST_ACK", "0A": "LISTEN", "0B": "CLOSING", "0C": "NEW_SYN_RECV",
}

SORT_KEYS = ("port", "pid", "proto")
FORMATS = ("table", "json")
BACKENDS = ("auto", "procfs", "psutil")


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class CFG:
    show_all: bool = False
    port: Optional[int] = None
    name: Optional[str] = None
    sort_key: str = "port"
    reverse: bool = False
    fmt: str = "table"
    proc_root: str = PROC_ROOT
    backend: str = "auto"

    def __post_init__(self):
        if self.sort_key not in SORT_KEYS:
            raise ConfigError(f"invalid sort key '{self.sort_key}' (choose from {', '.join(SORT_KEYS)})")
        if self.fmt not in FORMATS:
            raise ConfigError(f"invalid format '{self.fmt}' (choose from {', '.join(FORMATS)})")
        if self.backend not in BACKENDS:
            raise ConfigError(f"invalid backend '{self.backend}' (choose from {', '.join(BACKENDS)})")
        if self.port is not None and (isinstance(self.port, bool) or not isinstance(self.port, int) or not 0 <= self.port <= 65535):
            raise ConfigError(f"invalid port '{self.port}'")


# defaults-file key -> CFG field
FILE_KEYS = {
    "all": "show_all",
    "port": "port",
    "name": "name",
    "sort": "sort_key",
    "reverse": "reverse",
    "format": "fmt",
    "proc_root": "proc_root",
    "backend": "backend",
}


def load_defaults(path: Optional[str]) -> Dict[str, Any]:
    """Read a YAML or JSON mapping of option defaults.

    A missing file only logs a warning; a file that cannot be parsed, or
    that holds something other than a mapping of known keys, raises
    ConfigError.
    """
    if not path:
        return {}
    p = to_abs_path(path)
    if not p:
        return {}
    if not p.exists():
        log.warning("config not found: %s", p)
        return {}
    try:
        txt = p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"{p}: cannot read config: {e}") from e
    try:
        if p.suffix in (".yaml", ".yml"):
            if yaml is None:
                raise ConfigError(f"{p}: PyYAML is required to read YAML config files")
            data = yaml.safe_load(txt)
        else:
            data = json.loads(txt)
    except ConfigError:
        raise
    except Exception as e:
        raise ConfigError(f"{p}: cannot parse config: {e}") from e
    data = data or {}
    if not isinstance(data, dict):
        raise ConfigError(f"{p}: config must be a mapping, got {type(data).__name__}")
    unknown = sorted(set(data) - set(FILE_KEYS))
    if unknown:
        raise ConfigError(f"{p}: unknown config keys: {', '.join(unknown)}")
    log.debug("loaded defaults from %s: %s", p, data)
    return {FILE_KEYS[k]: v for k, v in data.items()}


def init_cfg_from_args(args, defaults: Optional[Dict[str, Any]] = None) -> CFG:
    """Merge parsed arguments over file defaults over built-in defaults."""
    values: Dict[str, Any] = {f.name: f.default for f in fields(CFG)}
    values.update(defaults or {})
    cli = {
        "show_all": getattr(args, "all", None),
        "port": getattr(args, "port", None),
        "name": getattr(args, "name", None),
        "sort_key": getattr(args, "sort", None),
        "reverse": getattr(args, "reverse", None),
        "fmt": getattr(args, "format", None),
        "proc_root": getattr(args, "proc_root", None),
        "backend": getattr(args, "backend", None),
    }
    values.update({k: v for k, v in cli.items() if v is not None})
    values["show_all"] = bool(values["show_all"])
    values["reverse"] = bool(values["reverse"])
    if values["name"] is not None and not isinstance(values["name"], str):
        raise ConfigError(f"invalid name filter '{values['name']}'")
    if not isinstance(values["proc_root"], str) or not values["proc_root"]:
        raise ConfigError(f"invalid proc root '{values['proc_root']}'")
    if values["proc_root"] != PROC_ROOT:
        values["proc_root"] = str(Path(values["proc_root"]).expanduser().resolve())
    return CFG(**values)
