"""Test frame iteration and the per-version parser configurations"""

import logging
from dataclasses import replace

from id3_extract.core.exceptions import FrameDecodeFault
from id3_extract.id3.parser import (
    FrameParser,
    StopReason,
    V22_CONFIG,
    V23_CONFIG,
    V24_CONFIG,
    is_valid_frame_id,
    iter_frames,
)


class TestFrameParser:
    """Test FrameParser.parse on v2.3 frame regions"""

    def test_stops_at_padding(self, build):
        """Test one TALB frame followed by two zero bytes"""
        frames = build.frame("TALB", build.text("Greatest Hits")) + b"\x00\x00"
        result = FrameParser(V23_CONFIG).parse(frames)

        assert result.tags == {"album": "Greatest Hits"}
        assert result.stop_reason is StopReason.PADDING
        assert result.fault is None

    def test_stops_at_end_of_buffer(self, build):
        frames = build.frame("TIT2", build.text("Song")) + build.frame("TPE1", build.text("Band"))
        result = FrameParser(V23_CONFIG).parse(frames)

        assert result.tags == {"title": "Song", "artist": "Band"}
        assert result.stop_reason is StopReason.END_OF_BUFFER

    def test_empty_region(self):
        result = FrameParser(V23_CONFIG).parse(b"")
        assert result.tags == {}
        assert result.stop_reason is StopReason.END_OF_BUFFER

    def test_unknown_frames_are_skipped(self, build):
        frames = (
            build.frame("TXXX", b"\x00desc\x00value")
            + build.frame("TIT2", build.text("Song"))
        )
        assert FrameParser(V23_CONFIG).parse(frames).tags == {"title": "Song"}

    def test_duplicate_frames_last_wins(self, build):
        frames = (
            build.frame("TIT2", build.text("First"))
            + build.frame("TIT2", build.text("Second"))
        )
        assert FrameParser(V23_CONFIG).parse(frames).tags == {"title": "Second"}

    def test_id_without_upper_case_or_digits_ends_iteration(self, build):
        frames = build.frame("TALB", build.text("Album")) + build.frame("tit~", build.text("Song"))
        result = FrameParser(V23_CONFIG).parse(frames)
        assert result.tags == {"album": "Album"}
        assert result.stop_reason is StopReason.PADDING

    def test_size_overrun_keeps_previous_fields(self, build, caplog):
        overrun = b"TIT2" + build.synchsafe(500) + b"\x00\x00" + build.text("Song")
        frames = build.frame("TALB", build.text("Album")) + overrun

        with caplog.at_level(logging.ERROR):
            result = FrameParser(V23_CONFIG).parse(frames)

        assert result.tags == {"album": "Album"}
        assert result.stop_reason is StopReason.FAULT
        assert isinstance(result.fault, FrameDecodeFault)
        assert result.fault.details["frame_id"] == "TIT2"
        fault_records = [r for r in caplog.records if hasattr(r, "frame_fault_id")]
        assert len(fault_records) == 1
        assert fault_records[0].frame_fault_id == "TIT2"

    def test_truncated_header_is_a_fault(self, build):
        frames = build.frame("TALB", build.text("Album")) + b"TPE1\x00"
        result = FrameParser(V23_CONFIG).parse(frames)

        assert result.tags == {"album": "Album"}
        assert result.stop_reason is StopReason.FAULT

    def test_decoder_fault_stops_parsing(self, build):
        frames = (
            build.frame("TALB", build.text("Album"))
            + build.frame("APIC", b"\x00image/////\x00\x03\x00data")
            + build.frame("TIT2", build.text("Song"))
        )
        result = FrameParser(V23_CONFIG).parse(frames)

        assert result.tags == {"album": "Album"}
        assert result.stop_reason is StopReason.FAULT
        assert isinstance(result.fault, FrameDecodeFault)

    def test_mixed_character_id_is_skipped(self, build):
        """Test an id with some upper-case letters between two mapped frames"""
        frames = (
            build.frame("TALB", build.text("Album"))
            + build.frame("TXX ", b"\x00something")
            + build.frame("TIT2", build.text("Song"))
        )
        result = FrameParser(V23_CONFIG).parse(frames)

        assert result.tags == {"album": "Album", "title": "Song"}
        assert result.stop_reason is StopReason.END_OF_BUFFER

    def test_any_decoder_exception_stops_parsing(self, build, caplog):
        def broken(payload):
            return payload[100:101].decode("ascii")[0]

        config = replace(
            V23_CONFIG,
            decoder_map={**V23_CONFIG.decoder_map, "TPE1": ("artist", broken)},
        )
        frames = (
            build.frame("TALB", build.text("Album"))
            + build.frame("TPE1", build.text("Band"))
            + build.frame("TIT2", build.text("Song"))
        )

        with caplog.at_level(logging.ERROR):
            result = FrameParser(config).parse(frames)

        assert result.tags == {"album": "Album"}
        assert result.stop_reason is StopReason.FAULT
        assert isinstance(result.fault, FrameDecodeFault)
        assert result.fault.details["frame_id"] == "TPE1"
        assert "IndexError" in result.fault.message
        assert [r.frame_fault_id for r in caplog.records if hasattr(r, "frame_fault_id")] == ["TPE1"]

    def test_memoryview_region(self, build):
        frames = build.frame("TIT2", build.text("Song")) + b"\x00\x00"
        result = FrameParser(V23_CONFIG).parse(memoryview(frames))

        assert result.tags == {"title": "Song"}
        assert result.stop_reason is StopReason.PADDING

    def test_picture_size_uses_eight_bit_bytes(self, build, jpeg_payload):
        """Test an APIC frame larger than 127 bytes followed by a text frame"""
        payload = jpeg_payload + b"\x02" * 200
        frames = build.frame("APIC", payload) + build.frame("TIT2", build.text("Song"))
        result = FrameParser(V23_CONFIG).parse(frames)

        assert result.tags["artwork"].startswith("data:image/jpeg;base64,")
        assert result.tags["title"] == "Song"
        assert result.stop_reason is StopReason.END_OF_BUFFER

    def test_v22_frames(self, build):
        frames = b"".join([
            build.frame22("TAL", build.text("Album")),
            build.frame22("TP1", build.text("Artist")),
            build.frame22("TT2", build.text("Title")),
            build.frame22("TYE", build.text("1999")),
            build.frame22("TLE", build.text("1000")),
            build.frame22("PIC", b"\x00JPG\x03\x00\xff\xd8"),
        ])
        result = FrameParser(V22_CONFIG).parse(frames + b"\x00" * 6)

        assert result.tags["album"] == "Album"
        assert result.tags["artist"] == "Artist"
        assert result.tags["title"] == "Title"
        assert result.tags["year"] == "1999"
        assert result.tags["duration"] == "1000"
        assert result.tags["artwork"].startswith("data:image/jpeg;base64,")
        assert result.stop_reason is StopReason.PADDING


class TestIterFrames:
    """Test the frame record generator"""

    def test_descriptors(self, build):
        frames = build.frame("TALB", b"\x00abc", flags=b"\x40\x00") + build.frame("TIT2", b"\x00x")
        records = list(iter_frames(frames, V23_CONFIG))

        assert [d.frame_id for d, _ in records] == ["TALB", "TIT2"]
        first, payload = records[0]
        assert first.size == 4
        assert first.flags == b"\x40\x00"
        assert first.offset == 0
        assert first.data_offset == 10
        assert first.end == 14
        assert payload == b"\x00abc"
        assert records[1][0].offset == 14

    def test_v22_has_no_flags(self, build):
        descriptor, payload = next(iter_frames(build.frame22("TT2", b"\x00x"), V22_CONFIG))
        assert descriptor.flags == b""
        assert descriptor.data_offset == 6
        assert payload == b"\x00x"


class TestConfigs:
    """Test the version configurations"""

    def test_field_widths(self):
        assert (V22_CONFIG.id_length, V22_CONFIG.size_length, V22_CONFIG.flags_length) == (3, 3, 0)
        assert (V23_CONFIG.id_length, V23_CONFIG.size_length, V23_CONFIG.flags_length) == (4, 4, 2)
        assert V24_CONFIG.header_length == 10
        assert V22_CONFIG.header_length == 6

    def test_v23_and_v24_share_the_decoder_map(self):
        assert V23_CONFIG.decoder_map is V24_CONFIG.decoder_map

    def test_field_names(self):
        assert {name for name, _ in V22_CONFIG.decoder_map.values()} == {
            "album", "artist", "title", "year", "duration", "artwork"
        }
        assert V23_CONFIG.decoder_map["TALB"][0] == "album"
        assert V22_CONFIG.decoder_map["PIC"][0] == "artwork"

    def test_with_artwork_sink(self, recording_sink, jpeg_payload):
        assert V23_CONFIG.with_artwork_sink(None) is V23_CONFIG

        config = V23_CONFIG.with_artwork_sink(recording_sink)
        _, decoder = config.decoder_map["APIC"]
        decoder(jpeg_payload)

        assert recording_sink.writes == [(jpeg_payload[6:], "jpg")]
        # Shared constants stay unbound
        assert V23_CONFIG.decoder_map["APIC"][1] is not decoder

    def test_valid_frame_ids(self):
        assert is_valid_frame_id("TALB")
        assert is_valid_frame_id("TP1")
        assert not is_valid_frame_id("\x00\x00\x00\x00")
        assert is_valid_frame_id("TAL\x00")
        assert is_valid_frame_id("TXX ")
        assert is_valid_frame_id("tit2")
        assert not is_valid_frame_id("talb")
        assert not is_valid_frame_id("")
