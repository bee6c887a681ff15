"""Test configuration and fixtures"""

import tempfile
from pathlib import Path
from types import SimpleNamespace

import pytest

from id3_extract.core.exceptions import ArtworkWriteFault


def synchsafe(value: int, width: int = 4) -> bytes:
    """Encode value with 7 bits per byte, most significant byte first."""
    out = bytearray(width)
    for index in range(width - 1, -1, -1):
        out[index] = value & 0x7F
        value >>= 7
    return bytes(out)


def frame(frame_id: str, payload: bytes, flags: bytes = b"\x00\x00") -> bytes:
    """Build a v2.3/v2.4 frame record; picture frame sizes use 8 bits per byte."""
    if frame_id.endswith("PIC"):
        size = len(payload).to_bytes(4, "big")
    else:
        size = synchsafe(len(payload))
    return frame_id.encode("latin-1") + size + flags + payload


def frame22(frame_id: str, payload: bytes) -> bytes:
    """Build a v2.2 frame record."""
    if frame_id.endswith("PIC"):
        size = len(payload).to_bytes(3, "big")
    else:
        size = synchsafe(len(payload), width=3)
    return frame_id.encode("latin-1") + size + payload


def tag(
    version: int,
    frames: bytes,
    padding: int = 16,
    flags: int = 0,
    extended: bytes = b""
) -> bytes:
    """
    Build a whole tag: header, optional extended header, frames, padding.

    The body size in the header covers extended header, frames and padding.
    """
    body = extended + frames + b"\x00" * padding
    header = b"ID3" + bytes([version, 0, flags]) + synchsafe(len(body))
    return header + body


def text(value: str) -> bytes:
    """Text payload using the UTF-8 marker (0x00 then UTF-8 bytes)."""
    return b"\x00" + value.encode("utf-8")


class RecordingSink:
    """Artwork sink that keeps every write in memory."""

    def __init__(self) -> None:
        self.writes: list[tuple[bytes, str]] = []

    def write(self, data: bytes, extension: str) -> None:
        self.writes.append((data, extension))


class FailingSink:
    """Artwork sink that always fails."""

    def write(self, data: bytes, extension: str) -> None:
        raise ArtworkWriteFault("Disk full", details={"file_path": "/dev/full"})


@pytest.fixture
def temp_dir():
    """Create temporary directory for tests"""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def build():
    """Byte builders for frames and tags"""
    return SimpleNamespace(
        synchsafe=synchsafe,
        frame=frame,
        frame22=frame22,
        tag=tag,
        text=text,
    )


@pytest.fixture
def recording_sink():
    """Artwork sink recording its writes"""
    return RecordingSink()


@pytest.fixture
def failing_sink():
    """Artwork sink raising ArtworkWriteFault"""
    return FailingSink()


@pytest.fixture
def jpeg_payload():
    """APIC payload with a MIME string of 'image/' followed by 'JPG'"""
    return b"\x00image/JPG\x00\x03\x00" + b"\xff\xd8\xff\xe0" + b"\x01" * 12


@pytest.fixture
def sample_tag_v23(build):
    """v2.3 tag with all supported text fields"""
    frames = b"".join([
        build.frame("TALB", build.text("Test Album")),
        build.frame("TPE1", build.text("Test Artist")),
        build.frame("TIT2", build.text("Test Song")),
        build.frame("TYER", build.text("2023")),
        build.frame("TLEN", build.text("210000")),
    ])
    return build.tag(3, frames)
