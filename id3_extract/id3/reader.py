"""
ID3v2 tag reader.

Reads the 10-byte tag header, cuts out the frame region, skips the
extended header when the header flags announce one, and hands the
frames to a FrameParser configured for the tag's major version.

Header layout:
    0-2  "ID3"
    3    major version (2, 3 or 4)
    4    revision
    5    flags (0x40: extended header present, v2.3/v2.4)
    6-9  tag body size, synchsafe

Usage:
    from id3_extract.id3 import read_tag

    tags = read_tag(data)          # {"album": ..., "artist": ...} or None
"""

from dataclasses import dataclass

from id3_extract.core.exceptions import TagDecodeError, UnsupportedVersion
from id3_extract.core.logger import get_logger
from id3_extract.id3.decoders import ArtworkSink
from id3_extract.id3.parser import (
    FrameParser,
    FrameParserConfig,
    V22_CONFIG,
    V23_CONFIG,
    V24_CONFIG,
)
from id3_extract.id3.size import decode_size


logger = get_logger(__name__)


TAG_MARKER = b"ID3"
HEADER_LENGTH = 10
EXTENDED_HEADER_FLAG = 0x40

# Bytes between the start of the extended header and the end of its
# fixed part, on top of the size announced in it
EXTENDED_HEADER_OVERHEAD = 6

VERSION_CONFIGS = {
    2: V22_CONFIG,
    3: V23_CONFIG,
    4: V24_CONFIG,
}


@dataclass(frozen=True)
class TagHeader:
    """
    The 10-byte ID3v2 tag header.

    Attributes:
        major_version: ID3v2 sub-version (2, 3 or 4 when supported).
        revision: Revision byte, not interpreted.
        flags: Header flag byte.
        body_size: Decoded size of the tag body.
        raw: The raw header bytes.
    """
    major_version: int
    revision: int
    flags: int
    body_size: int
    raw: bytes

    @property
    def has_extended_header(self) -> bool:
        """True when the extended header flag is set."""
        return bool(self.flags & EXTENDED_HEADER_FLAG)


def has_tag_marker(data: bytes) -> bool:
    """Return True when data starts with the "ID3" marker."""
    return data[:len(TAG_MARKER)] == TAG_MARKER


def read_header(data: bytes) -> TagHeader:
    """
    Read the tag header from the start of data.

    Args:
        data: Buffer starting with an ID3v2 tag header.

    Returns:
        The parsed TagHeader.

    Raises:
        TagDecodeError: If data is shorter than a tag header.
    """
    if len(data) < HEADER_LENGTH:
        raise TagDecodeError(
            f"Tag header needs {HEADER_LENGTH} bytes, got {len(data)}",
            details={"header": data.hex()}
        )
    header = bytes(data[:HEADER_LENGTH])
    return TagHeader(
        major_version=header[3],
        revision=header[4],
        flags=header[5],
        body_size=decode_size(header[6:10]),
        raw=header,
    )


def select_config(header: TagHeader) -> FrameParserConfig:
    """
    Pick the frame parser configuration for the header's major version.

    Raises:
        UnsupportedVersion: If the major version is not 2, 3 or 4.
    """
    config = VERSION_CONFIGS.get(header.major_version)
    if config is None:
        raise UnsupportedVersion(
            f"Header: {header.raw.hex()}, version: {header.major_version}",
            header=header.raw,
            version=header.major_version,
        )
    return config


def extract_frames(data: bytes, header: TagHeader) -> bytes:
    """
    Cut the frame region out of the tag.

    The body size from the header is used as the end index of the
    region counted from the start of data, and for v2.3/v2.4 an
    extended header is skipped when the header flags announce one.

    Args:
        data: The whole tag buffer.
        header: The tag header read from data.

    Returns:
        The frame region.
    """
    frames = data[HEADER_LENGTH:header.body_size]
    if header.major_version in (3, 4) and header.has_extended_header:
        extended_size = decode_size(data[HEADER_LENGTH:HEADER_LENGTH + 4])
        logger.debug(f"Extended header, size {extended_size}")
        start = HEADER_LENGTH + EXTENDED_HEADER_OVERHEAD + extended_size
        frames = data[start:header.body_size]
    return frames


def read_tag(data: bytes, artwork_sink: ArtworkSink | None = None) -> dict[str, str] | None:
    """
    Decode the ID3v2 tag at the start of data.

    Args:
        data: Buffer (bytes-like) with at least the tag header and body.
        artwork_sink: Optional destination for artwork found in picture frames.

    Returns:
        Mapping of field name (album, artist, title, year, duration,
        artwork) to decoded value, or None when data holds no tag, the
        header is malformed or the version is not supported.
    """
    data = bytes(data)
    if not has_tag_marker(data):
        logger.debug("No ID3 marker, skipping")
        return None

    try:
        header = read_header(data)
        config = select_config(header)
        frames = extract_frames(data, header)
    except UnsupportedVersion as e:
        logger.error(f"Unknown version: {e.message}")
        return None
    except TagDecodeError as e:
        logger.error(f"Malformed tag header: {e.message}")
        return None

    logger.debug(f"ID3{config.name}, body size {header.body_size}")
    parser = FrameParser(config.with_artwork_sink(artwork_sink))
    return parser.parse(frames).tags
