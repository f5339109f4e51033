"""Running aggregation of decoded packets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional

from .packet_decoder import DecodedPacket, Transport


@dataclass
class Stats:
    """Totals for one capture.

    ``dest_freq`` keeps destinations in the order they were first seen, which
    is the tie-break order used by the report.
    """

    total_bytes: int = 0
    udp_count: int = 0
    tcp_count: int = 0
    packet_count: int = 0
    skipped_count: int = 0
    dest_freq: Dict[int, int] = field(default_factory=dict)

    def merge(self, other: "Stats") -> "Stats":
        """Combine two snapshots, ``other`` being the later part of the stream."""
        dest_freq = dict(self.dest_freq)
        for address, count in other.dest_freq.items():
            dest_freq[address] = dest_freq.get(address, 0) + count
        return Stats(
            total_bytes=self.total_bytes + other.total_bytes,
            udp_count=self.udp_count + other.udp_count,
            tcp_count=self.tcp_count + other.tcp_count,
            packet_count=self.packet_count + other.packet_count,
            skipped_count=self.skipped_count + other.skipped_count,
            dest_freq=dest_freq,
        )


class StatsAccumulator:
    """Incremental aggregator owning a single :class:`Stats`."""

    __slots__ = ("_stats",)

    def __init__(self, stats: Optional[Stats] = None) -> None:
        self._stats = stats if stats is not None else Stats()

    @property
    def stats(self) -> Stats:
        return self._stats

    def absorb(self, packet: DecodedPacket) -> None:
        stats = self._stats
        stats.packet_count += 1
        stats.total_bytes += packet.payload_len
        if packet.transport is Transport.UDP:
            stats.udp_count += 1
        elif packet.transport is Transport.TCP:
            stats.tcp_count += 1
        stats.dest_freq[packet.destination] = stats.dest_freq.get(packet.destination, 0) + 1

    def skip(self) -> None:
        self._stats.skipped_count += 1

    def accumulate(self, packets: Iterable[Optional[DecodedPacket]]) -> Stats:
        for packet in packets:
            if packet is None:
                self.skip()
            else:
                self.absorb(packet)
        return self._stats


__all__ = ["Stats", "StatsAccumulator"]
