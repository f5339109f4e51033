"""Single-pass PCAP statistics: payload bytes, UDP/TCP counts and popular destinations."""

from .analyzer import analyze_bytes, analyze_path, analyze_stream
from .capture_reader import (
    CaptureError,
    CaptureReader,
    FormatError,
    RawRecord,
    TruncatedStreamError,
)
from .packet_decoder import (
    DecodedPacket,
    MalformedPacketError,
    NonIPFrameError,
    PacketDecoder,
    PayloadUnderflowError,
    SkipPolicy,
    Transport,
)
from .report import Report, destination_table, render
from .stats import Stats, StatsAccumulator

__all__ = [
    "CaptureError",
    "FormatError",
    "TruncatedStreamError",
    "MalformedPacketError",
    "NonIPFrameError",
    "PayloadUnderflowError",
    "CaptureReader",
    "RawRecord",
    "PacketDecoder",
    "DecodedPacket",
    "SkipPolicy",
    "Transport",
    "Stats",
    "StatsAccumulator",
    "Report",
    "render",
    "destination_table",
    "analyze_stream",
    "analyze_bytes",
    "analyze_path",
]
