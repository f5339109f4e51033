"""Ethernet/IPv4 header decoding for a single captured record."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Optional, Union

import dpkt

from .capture_reader import CaptureError, RawRecord
from .utils import format_ip

logger = logging.getLogger(__name__)

IPV4_VERSION = 4


class MalformedPacketError(CaptureError):
    """Raised when a frame cannot hold the headers it claims to carry."""


class NonIPFrameError(MalformedPacketError):
    """Raised for a non-IPv4 frame when the non-IP policy is ``error``."""


class PayloadUnderflowError(MalformedPacketError):
    """Raised when total length is below header length and the policy is ``error``."""


class SkipPolicy(str, enum.Enum):
    """What to do with a record that cannot contribute to the totals."""

    SKIP = "skip"
    ERROR = "error"


class Transport(enum.Enum):
    TCP = "TCP"
    UDP = "UDP"
    OTHER = "Other"

    @classmethod
    def from_protocol(cls, protocol: int) -> "Transport":
        if protocol == dpkt.ip.IP_PROTO_TCP:
            return cls.TCP
        if protocol == dpkt.ip.IP_PROTO_UDP:
            return cls.UDP
        return cls.OTHER


@dataclass(frozen=True)
class DecodedPacket:
    transport: Transport
    source: int
    destination: int
    payload_len: int

    def __str__(self) -> str:
        return (
            f"{self.transport.value} {format_ip(self.source)} -> "
            f"{format_ip(self.destination)} ({self.payload_len} bytes)"
        )


class PacketDecoder:
    """Extracts transport, addresses and payload length from one RawRecord.

    Only the fixed-offset fields needed for the statistics are read. Checksums,
    options and everything past the IPv4 header are trusted as-is. Records that
    cannot contribute (non-IPv4 frames, a total length shorter than the header)
    are either skipped, ``decode`` returning ``None``, or raised, according to
    the configured :class:`SkipPolicy`.
    """

    def __init__(
        self,
        *,
        non_ip: Union[SkipPolicy, str] = SkipPolicy.SKIP,
        underflow: Union[SkipPolicy, str] = SkipPolicy.SKIP,
    ) -> None:
        self.non_ip = SkipPolicy(non_ip)
        self.underflow = SkipPolicy(underflow)

    def decode(self, raw: Union[RawRecord, bytes]) -> Optional[DecodedPacket]:
        frame = raw.data if isinstance(raw, RawRecord) else bytes(raw)

        try:
            ethernet = dpkt.ethernet.Ethernet(frame)
        except dpkt.UnpackError as exc:
            raise MalformedPacketError(
                f"undecodable Ethernet frame of {len(frame)} bytes"
            ) from exc

        ip = ethernet.data
        if not isinstance(ip, dpkt.ip.IP):
            if ethernet.type == dpkt.ethernet.ETH_TYPE_IP:
                # dpkt leaves the payload as bytes when the IPv4 header is short or IHL < 5
                raise MalformedPacketError(
                    f"IPv4 frame carries an undecodable header ({len(ip)} bytes)"
                )
            if self.non_ip is SkipPolicy.ERROR:
                raise NonIPFrameError(f"expected an IPv4 frame, found EtherType 0x{ethernet.type:04X}")
            logger.debug("Skipping non-IP frame with EtherType 0x%04X", ethernet.type)
            return None
        if ip.v != IPV4_VERSION:
            raise MalformedPacketError(f"IPv4 EtherType carries IP version {ip.v}")

        payload_len = ip.len - ip.hl * 4
        if payload_len < 0:
            if self.underflow is SkipPolicy.ERROR:
                raise PayloadUnderflowError(
                    f"total length {ip.len} is shorter than header length {ip.hl * 4}"
                )
            logger.debug("Skipping packet with total length %d < header length %d", ip.len, ip.hl * 4)
            return None

        return DecodedPacket(
            transport=Transport.from_protocol(ip.p),
            source=int.from_bytes(ip.src, "big"),
            destination=int.from_bytes(ip.dst, "big"),
            payload_len=payload_len,
        )


__all__ = [
    "MalformedPacketError",
    "NonIPFrameError",
    "PayloadUnderflowError",
    "SkipPolicy",
    "Transport",
    "DecodedPacket",
    "PacketDecoder",
]
