"""
ID3v2 tag decoding.

This package decodes the ID3v2 tag block at the start of an MP3 file:
    - size: Synchsafe / big-endian size field codec
    - decoders: Text and picture frame payload decoders
    - parser: Frame iteration shared by v2.2, v2.3 and v2.4
    - reader: Header reading and version dispatch

Usage:
    from id3_extract.id3 import read_tag

    tags = read_tag(data, artwork_sink=None)
"""

from id3_extract.id3.decoders import ArtworkSink, decode_image, decode_text
from id3_extract.id3.parser import (
    FrameDescriptor,
    FrameParser,
    FrameParserConfig,
    ParseResult,
    StopReason,
    V22_CONFIG,
    V23_CONFIG,
    V24_CONFIG,
    iter_frames,
)
from id3_extract.id3.reader import TagHeader, has_tag_marker, read_header, read_tag, select_config
from id3_extract.id3.size import decode_size, is_picture_frame

__all__ = [
    # Size codec
    "decode_size",
    "is_picture_frame",
    # Decoders
    "ArtworkSink",
    "decode_text",
    "decode_image",
    # Parser
    "FrameDescriptor",
    "FrameParser",
    "FrameParserConfig",
    "ParseResult",
    "StopReason",
    "V22_CONFIG",
    "V23_CONFIG",
    "V24_CONFIG",
    "iter_frames",
    # Reader
    "TagHeader",
    "has_tag_marker",
    "read_header",
    "read_tag",
    "select_config",
]
