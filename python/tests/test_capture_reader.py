from __future__ import annotations

import io

import dpkt
import pytest

from packetstorm.capture_reader import CaptureReader, FormatError, TruncatedStreamError

from capture_factory import arp_frame, big_endian_capture, ipv4_frame, write_capture


def test_reader_yields_every_record_from_written_capture():
    frames = [ipv4_frame("10.0.0.1", payload_len=5), arp_frame(), ipv4_frame("10.0.0.2")]
    reader = CaptureReader.from_bytes(write_capture(frames))

    records = list(reader)

    assert [record.data for record in records] == frames
    assert [record.captured_len for record in records] == [len(frame) for frame in frames]
    assert records[0].timestamp == pytest.approx(1.0)
    assert records[2].timestamp == pytest.approx(3.0)
    assert reader.records_read == 3
    assert reader.linktype == dpkt.pcap.DLT_EN10MB
    assert reader.snaplen == 65_535


def test_reader_accepts_big_endian_capture():
    frame = ipv4_frame("10.0.0.1")
    reader = CaptureReader.from_bytes(big_endian_capture([frame, frame]))

    records = list(reader)

    assert reader.byte_order == ">"
    assert not reader.nanosecond
    assert len(records) == 2
    assert records[1].timestamp == pytest.approx(1.0005)


def test_reader_scales_nanosecond_timestamps():
    frame = ipv4_frame("10.0.0.1")
    data = big_endian_capture([frame], magic=dpkt.pcap.TCPDUMP_MAGIC_NANO)

    reader = CaptureReader.from_bytes(data)
    (record,) = list(reader)

    assert reader.nanosecond
    assert record.timestamp == pytest.approx(500e-9)


def test_reader_accepts_little_endian_nanosecond_magic():
    header = dpkt.pcap.LEFileHdr(magic=dpkt.pcap.TCPDUMP_MAGIC_NANO)

    reader = CaptureReader(io.BytesIO(bytes(header)))

    assert reader.byte_order == "<"
    assert reader.nanosecond
    assert list(reader) == []


def test_short_global_header_is_a_format_error():
    with pytest.raises(FormatError, match="capture header is 10 bytes"):
        CaptureReader.from_bytes(b"\xd4\xc3\xb2\xa1" + b"\x00" * 6)


def test_empty_stream_is_a_format_error():
    with pytest.raises(FormatError):
        CaptureReader.from_bytes(b"")


def test_unknown_magic_is_a_format_error():
    data = bytes(dpkt.pcap.FileHdr(magic=0x0A0D0D0A))

    with pytest.raises(FormatError, match="0x0A0D0D0A"):
        CaptureReader.from_bytes(data)


def test_unsupported_version_is_a_format_error():
    data = bytes(dpkt.pcap.FileHdr(v_major=1, v_minor=0))

    with pytest.raises(FormatError, match="version 1.0"):
        CaptureReader.from_bytes(data)


def test_non_ethernet_link_type_is_a_format_error():
    data = bytes(dpkt.pcap.FileHdr(linktype=dpkt.pcap.DLT_NULL))

    with pytest.raises(FormatError, match="link type 0"):
        CaptureReader.from_bytes(data)


def test_partial_record_header_is_truncation():
    data = big_endian_capture([ipv4_frame("10.0.0.1")]) + b"\x00" * 7
    reader = CaptureReader.from_bytes(data)

    assert reader.next_record() is not None
    with pytest.raises(TruncatedStreamError, match="record 1: header is 7 bytes"):
        reader.next_record()


def test_short_record_body_is_truncation():
    frame = ipv4_frame("10.0.0.1")
    data = big_endian_capture([frame])[:-4]

    with pytest.raises(TruncatedStreamError, match=f"declared {len(frame)} bytes, only {len(frame) - 4}"):
        list(CaptureReader.from_bytes(data))


def test_records_are_single_pass():
    reader = CaptureReader.from_bytes(write_capture([ipv4_frame("10.0.0.1")] * 3))

    assert len(list(reader)) == 3
    assert list(reader) == []


def test_snapped_record_keeps_captured_bytes_only():
    frame = ipv4_frame("10.0.0.1", payload_len=40)[:30]
    data = bytes(dpkt.pcap.FileHdr()) + bytes(
        dpkt.pcap.PktHdr(caplen=len(frame), len=len(frame) + 40)
    ) + frame

    (record,) = list(CaptureReader.from_bytes(data))

    assert record.snapped
    assert record.data == frame
    assert record.original_len == 70
