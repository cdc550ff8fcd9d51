from __future__ import annotations
import socket, struct, ipaddress
from typing import Optional, Tuple

NO_ADDR = "-"

def ipv4_from_dword(dw: int) -> str:
    # /proc stores the address in host (little-endian) order: byte0 is the lowest
    return socket.inet_ntoa(struct.pack('<I', dw & 0xFFFFFFFF))

def ipv6_from_bytes(b: bytes) -> str:
    try:
        return socket.inet_ntop(socket.AF_INET6, b)
    except (AttributeError, OSError):
        return str(ipaddress.IPv6Address(b))

def decode_addr(hex_str: Optional[str], wide: bool) -> str:
    """Turn the hex address column of /proc/net/<proto> into text.

    Narrow addresses are one 32-bit value; wide addresses are 32 hex digits,
    two per byte, left-padded with zeros when shorter. Raises ValueError on
    non-hex input.
    """
    if not hex_str:
        return NO_ADDR
    if not wide:
        return ipv4_from_dword(int(hex_str, 16))
    return ipv6_from_bytes(bytes.fromhex(hex_str.rjust(32, '0')[:32]))

def decode_port(hex_str: str) -> int:
    return int(hex_str, 16) if hex_str else 0

def split_endpoint(token: str, wide: bool) -> Optional[Tuple[str, int]]:
    """'0100007F:0016' -> ('127.0.0.1', 22); None without a ':' separator."""
    if ':' not in token:
        return None
    addr, port = token.split(':', 1)
    return decode_addr(addr, wide), decode_port(port)
