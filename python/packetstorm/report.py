"""Rendering of the final report from a finished :class:`Stats`."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from .stats import Stats
from .utils import format_ip


@dataclass(frozen=True)
class Report:
    total_bytes: int
    udp_count: int
    tcp_count: int
    average: int
    winners: Tuple[int, ...]
    max_freq: int

    def destination_sentence(self) -> str:
        if not self.winners:
            return "No destinations recorded"

        first = format_ip(self.winners[0])
        unit = "packet" if self.max_freq == 1 else "packets"
        if len(self.winners) == 1:
            return f"Most popular destination was {first} with {self.max_freq} {unit}"

        others = len(self.winners) - 1
        other_word = "other" if others == 1 else "others"
        return (
            f"Most popular destinations were {first} and {others} {other_word} "
            f"with {self.max_freq} {unit} each"
        )

    def lines(self) -> List[str]:
        return [
            f"Total IP-level data: {self.total_bytes} bytes",
            f"{self.udp_count} UDP, {self.tcp_count} TCP",
            f"Average of {self.average} bytes/packet",
            self.destination_sentence(),
        ]

    def __str__(self) -> str:
        return "\n".join(self.lines())


def render(stats: Stats) -> Report:
    """Build the report; the average is truncated and an empty capture averages 0."""
    average = stats.total_bytes // stats.packet_count if stats.packet_count else 0

    max_freq = max(stats.dest_freq.values(), default=0)
    winners = tuple(address for address, count in stats.dest_freq.items() if count == max_freq)

    return Report(
        total_bytes=stats.total_bytes,
        udp_count=stats.udp_count,
        tcp_count=stats.tcp_count,
        average=average,
        winners=winners,
        max_freq=max_freq,
    )


def destination_table(stats: Stats, tiers: int = 3) -> str:
    """List destinations in the ``tiers`` highest distinct frequencies.

    Within a frequency, destinations appear in first-occurrence order. The
    last line tells how many destinations were left out.
    """
    ranked = sorted(stats.dest_freq.items(), key=lambda item: -item[1])

    lines: List[str] = []
    seen_counts = 0
    previous = None
    for address, count in ranked:
        if count != previous:
            seen_counts += 1
            previous = count
        if seen_counts > tiers:
            break
        lines.append(f"{format_ip(address):<15} - {count}")

    lines.append(f"...and {len(ranked) - len(lines)} more entries")
    return "Destination IPs by frequency:\n" + "\n".join(lines)


__all__ = ["Report", "render", "destination_table"]
