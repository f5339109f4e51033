"""One-pass pipeline from capture bytes to a finished :class:`Stats`."""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import BinaryIO, Union

from .capture_reader import CaptureReader
from .packet_decoder import PacketDecoder, SkipPolicy
from .stats import Stats, StatsAccumulator

logger = logging.getLogger(__name__)


def analyze_stream(
    stream: BinaryIO,
    *,
    non_ip: Union[SkipPolicy, str] = SkipPolicy.SKIP,
    underflow: Union[SkipPolicy, str] = SkipPolicy.SKIP,
) -> Stats:
    reader = CaptureReader(stream)
    decoder = PacketDecoder(non_ip=non_ip, underflow=underflow)
    stats = StatsAccumulator().accumulate(decoder.decode(record) for record in reader)
    logger.debug(
        "Read %d records: packets=%d, skipped=%d",
        reader.records_read,
        stats.packet_count,
        stats.skipped_count,
    )
    return stats


def analyze_bytes(data: bytes, **policies: Union[SkipPolicy, str]) -> Stats:
    return analyze_stream(io.BytesIO(data), **policies)


def analyze_path(path: Union[str, Path], **policies: Union[SkipPolicy, str]) -> Stats:
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"PCAP file does not exist: {path}")

    logger.info("Processing %s", path)
    with path.open("rb") as handle:
        stats = analyze_stream(handle, **policies)
    logger.info(
        "Finished %s: packets=%d, skipped=%d",
        path.name,
        stats.packet_count,
        stats.skipped_count,
    )
    return stats


__all__ = ["analyze_stream", "analyze_bytes", "analyze_path"]
