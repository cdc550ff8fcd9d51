from __future__ import annotations
import argparse, logging, sys
from typing import List, Optional

from .config import BACKENDS, FORMATS, SORT_KEYS, ConfigError, init_cfg_from_args, load_defaults
from .collectors import collect
from .report import select
from .render import render

log = logging.getLogger(__name__)

def _port(value: str) -> int:
    try:
        port = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid port: {value!r}")
    if not 0 <= port <= 65535:
        raise argparse.ArgumentTypeError(f"port out of range: {port}")
    return port

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog='procnet-ports',
        description='List listening sockets and the processes that own them')
    ap.add_argument('-a', '--all', action='store_true', default=None, help='show sockets in every state, not only LISTEN')
    ap.add_argument('-p', '--port', type=_port, default=None, help='only sockets bound to this local port')
    ap.add_argument('-n', '--name', type=str, default=None, help='only sockets owned by a process whose name contains this (case-insensitive)')
    ap.add_argument('-s', '--sort', choices=SORT_KEYS, default=None, help='sort key (default: port)')
    ap.add_argument('-r', '--reverse', action='store_true', default=None, help='reverse the sort order')
    ap.add_argument('-f', '--format', choices=FORMATS, default=None, help='output format (default: table)')
    ap.add_argument('-j', '--json', dest='format', action='store_const', const='json', help='shorthand for --format json')
    ap.add_argument('--proc-root', type=str, default=None, help='procfs mount to read (default: /proc)')
    ap.add_argument('--backend', choices=BACKENDS, default=None, help='procfs parser or psutil (default: auto)')
    ap.add_argument('--config', type=str, default=None, help='YAML/JSON file with option defaults')
    ap.add_argument('-v', '--verbose', action='store_true', help='log skipped entries and backend details to stderr')
    return ap

def main(argv: Optional[List[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='[%(levelname)s] %(name)s: %(message)s',
        stream=sys.stderr)
    try:
        cfg = init_cfg_from_args(args, load_defaults(args.config))
    except ConfigError as e:
        ap.error(str(e))
    log.debug("config: %s", cfg)

    records = collect(cfg)
    print(render(select(records, cfg), cfg))
    return 0

if __name__ == '__main__':
    sys.exit(main())
