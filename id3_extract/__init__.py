"""
id3-extract: Read album, artist, title, year, duration and artwork from
the ID3v2 tag of MP3 files.

Architecture:
    A tag is decoded in one pass over the bytes of its header and body:

    reader (id3/reader.py): Read the 10-byte header
        - Check the "ID3" marker
        - Decode the synchsafe body size
        - Skip the extended header (v2.3/v2.4)
        - Pick the frame layout for v2.2, v2.3 or v2.4

    parser (id3/parser.py): Walk the frames
        - Read id, size, flags and payload of every frame
        - Stop quietly at padding, stop with a logged fault on bad frames
        - Decode known frames into result fields

    decoders (id3/decoders.py): Decode payloads
        - Text frames to strings
        - Picture frames to base64 data URIs, optionally saving the artwork

Modules:
    core/       - Configuration, logging, exceptions, file access, progress
    id3/        - ID3v2 tag decoding
    cli.py      - Command-line interface

Usage:
    Command Line:
        id3x --file song.mp3
        id3x -f song.mp3 --art-out ~/covers/cover
        id3x -f a.mp3 -f b.mp3

    Python API:
        from pathlib import Path
        from id3_extract import read_tag
        from id3_extract.core.file_manager import FileArtworkSink, read_tag_region

        data = read_tag_region(Path("song.mp3"))
        tags = read_tag(data, artwork_sink=FileArtworkSink(Path("cover")))

Configuration:
    An optional id3x.yaml in the current directory:

        output:
          art_out: null
          indent: 2

        logging:
          level: INFO
          directory: null

Dependencies:
    - rich-click: CLI framework with colored help
    - rich: Progress bar
    - tqdm: Progress-safe console logging
    - pyyaml: Configuration file parsing
"""

__version__ = "0.1.0"
__author__ = "id3-extract"
__license__ = "MIT"

# Convenience imports for common usage
from id3_extract.core import (
    ArtworkWriteFault,
    Config,
    ConfigError,
    FrameDecodeFault,
    Id3ExtractError,
    TagDecodeError,
    TagReadError,
    UnsupportedSizeLength,
    UnsupportedVersion,
    get_logger,
    load_config,
    setup_logging,
)
from id3_extract.id3 import ArtworkSink, decode_image, decode_size, decode_text, read_tag

__all__ = [
    # Version
    "__version__",
    # Core
    "Config",
    "load_config",
    "setup_logging",
    "get_logger",
    # Exceptions
    "Id3ExtractError",
    "ConfigError",
    "TagReadError",
    "TagDecodeError",
    "UnsupportedSizeLength",
    "UnsupportedVersion",
    "FrameDecodeFault",
    "ArtworkWriteFault",
    # Decoding
    "ArtworkSink",
    "decode_size",
    "decode_text",
    "decode_image",
    "read_tag",
]
