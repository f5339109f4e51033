"""Command-line entry point printing capture statistics."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .analyzer import analyze_path
from .capture_reader import CaptureError
from .packet_decoder import SkipPolicy
from .report import destination_table, render
from .utils import DEFAULT_PCAP

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Summarise transport payload bytes and destinations in a PCAP capture.",
    )
    parser.add_argument(
        "pcap_path",
        type=Path,
        nargs="?",
        default=Path(DEFAULT_PCAP),
        help=f"Path to a PCAP file (default: {DEFAULT_PCAP}).",
    )
    parser.add_argument(
        "--top-tiers",
        type=int,
        default=0,
        metavar="N",
        help="Also list destinations in the N most frequent count tiers.",
    )
    parser.add_argument(
        "--non-ip",
        choices=[policy.value for policy in SkipPolicy],
        default=SkipPolicy.SKIP.value,
        help="Skip non-IPv4 frames or fail on them (default: skip).",
    )
    parser.add_argument(
        "--underflow",
        choices=[policy.value for policy in SkipPolicy],
        default=SkipPolicy.SKIP.value,
        help="Skip packets whose total length is below their header length, or fail (default: skip).",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="WARNING",
        help="Log level for diagnostic output.",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level))

    if args.top_tiers < 0:
        parser.error("--top-tiers must not be negative.")

    try:
        stats = analyze_path(args.pcap_path, non_ip=args.non_ip, underflow=args.underflow)
    except FileNotFoundError as exc:
        logger.error(str(exc))
        return 1
    except OSError as exc:
        logger.error("Failed to read %s: %s", args.pcap_path, exc)
        return 1
    except CaptureError as exc:
        logger.error("Failed processing %s: %s", args.pcap_path, exc)
        return 1

    print(render(stats))
    if args.top_tiers:
        print(destination_table(stats, args.top_tiers))
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
