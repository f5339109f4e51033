"""Classic libpcap framing: global header validation and per-record iteration."""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import BinaryIO, Iterator, Optional

import dpkt

logger = logging.getLogger(__name__)

MICROS_PER_SECOND = 1_000_000
NANOS_PER_SECOND = 1_000_000_000

# magic read big-endian -> (file header, record header, nanosecond timestamps)
HEADER_LAYOUTS = {
    dpkt.pcap.TCPDUMP_MAGIC: (dpkt.pcap.FileHdr, dpkt.pcap.PktHdr, False),
    dpkt.pcap.TCPDUMP_MAGIC_NANO: (dpkt.pcap.FileHdr, dpkt.pcap.PktHdr, True),
    dpkt.pcap.PMUDPCT_MAGIC: (dpkt.pcap.LEFileHdr, dpkt.pcap.LEPktHdr, False),
    dpkt.pcap.PMUDPCT_MAGIC_NANO: (dpkt.pcap.LEFileHdr, dpkt.pcap.LEPktHdr, True),
}


class CaptureError(ValueError):
    """Base class for every failure raised while parsing a capture."""


class FormatError(CaptureError):
    """Raised when the global capture header fails validation."""


class TruncatedStreamError(CaptureError):
    """Raised when a record declares more bytes than the stream holds."""


@dataclass(frozen=True)
class RawRecord:
    """One captured frame together with the lengths its record header declared."""

    timestamp: float
    captured_len: int
    original_len: int
    data: bytes

    @property
    def snapped(self) -> bool:
        return self.captured_len < self.original_len


class CaptureReader:
    """Validates the capture header and yields RawRecord values lazily.

    The reader walks the stream exactly once. Iterating again after the
    records are exhausted yields nothing.
    """

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        self._index = 0

        hdr_len = dpkt.pcap.FileHdr.__hdr_len__
        buf = stream.read(hdr_len)
        if len(buf) < hdr_len:
            raise FormatError(f"capture header is {len(buf)} bytes, expected {hdr_len}")

        magic = dpkt.pcap.FileHdr(buf).magic
        if magic not in HEADER_LAYOUTS:
            raise FormatError(f"unrecognised capture magic 0x{magic:08X}")
        header_cls, self._record_cls, self.nanosecond = HEADER_LAYOUTS[magic]

        header = header_cls(buf)
        if header.v_major != dpkt.pcap.PCAP_VERSION_MAJOR:
            raise FormatError(
                f"unsupported capture version {header.v_major}.{header.v_minor}"
            )
        if header.linktype != dpkt.pcap.DLT_EN10MB:
            raise FormatError(
                f"unsupported link type {header.linktype}, expected Ethernet ({dpkt.pcap.DLT_EN10MB})"
            )

        self.byte_order: str = getattr(header_cls, "__byte_order__", ">")
        self.snaplen: int = header.snaplen
        self.linktype: int = header.linktype
        self._divisor = NANOS_PER_SECOND if self.nanosecond else MICROS_PER_SECOND
        logger.debug(
            "Capture header: version=%d.%d snaplen=%d byte_order=%s nanosecond=%s",
            header.v_major,
            header.v_minor,
            header.snaplen,
            self.byte_order,
            self.nanosecond,
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> "CaptureReader":
        return cls(io.BytesIO(data))

    # ------------------------------------------------------------------
    @property
    def records_read(self) -> int:
        return self._index

    def __iter__(self) -> Iterator[RawRecord]:
        while True:
            record = self.next_record()
            if record is None:
                break
            yield record

    def next_record(self) -> Optional[RawRecord]:
        hdr_len = self._record_cls.__hdr_len__
        buf = self._stream.read(hdr_len)
        if not buf:
            return None
        if len(buf) < hdr_len:
            raise TruncatedStreamError(
                f"record {self._index}: header is {len(buf)} bytes, expected {hdr_len}"
            )

        header = self._record_cls(buf)
        data = self._stream.read(header.caplen)
        if len(data) < header.caplen:
            raise TruncatedStreamError(
                f"record {self._index}: declared {header.caplen} bytes, only {len(data)} available"
            )

        record = RawRecord(
            timestamp=header.tv_sec + header.tv_usec / self._divisor,
            captured_len=header.caplen,
            original_len=header.len,
            data=data,
        )
        if record.snapped:
            logger.debug(
                "Record %d snapped: captured %d of %d bytes",
                self._index,
                record.captured_len,
                record.original_len,
            )
        self._index += 1
        return record


__all__ = [
    "CaptureError",
    "FormatError",
    "TruncatedStreamError",
    "RawRecord",
    "CaptureReader",
]
