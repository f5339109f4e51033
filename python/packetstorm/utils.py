"""Address helpers shared by the decoder and the report."""

from __future__ import annotations

import ipaddress

DEFAULT_PCAP = "packet-storm.pcap"


def format_ip(value: int) -> str:
    """Convert a 32-bit IPv4 key into dotted-quad form."""
    return str(ipaddress.IPv4Address(value))


def parse_ip(value: str) -> int:
    """Inverse of :func:`format_ip`."""
    return int(ipaddress.IPv4Address(value))


__all__ = ["DEFAULT_PCAP", "format_ip", "parse_ip"]
