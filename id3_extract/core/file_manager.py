"""
File access for id3-extract.

This module holds the two pieces of disk I/O around the tag decoder:

    - read_tag_region(): read just the tag header and body of an MP3 file
    - FileArtworkSink: store artwork bytes found in picture frames

Artwork naming:
    One file:      <art_out>.<ext>            e.g. cover.jpg
    Several files: <art_out>-<source stem>.<ext>
                                              e.g. cover-01 Intro.jpg

Usage:
    from id3_extract.core.file_manager import FileArtworkSink, read_tag_region

    data = read_tag_region(Path("song.mp3"))
    sink = FileArtworkSink(Path("~/covers/cover").expanduser())
    tags = read_tag(data, artwork_sink=sink)
"""

import re
from pathlib import Path

from id3_extract.core.exceptions import ArtworkWriteFault, TagReadError
from id3_extract.core.logger import get_logger
from id3_extract.id3.reader import HEADER_LENGTH, has_tag_marker
from id3_extract.id3.size import decode_size


logger = get_logger(__name__)


# Characters Windows, macOS or Linux refuse in a file name
_UNSAFE_NAME_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')


def safe_name_part(text: str, fallback: str) -> str:
    """
    Make text usable as one part of an artwork file name.

    Used for the source stem appended to the prefix and for the
    extension taken from the picture frame, which comes straight from
    tag bytes and may hold control characters or path separators.

    Args:
        text: Source stem or image extension.
        fallback: Returned when nothing usable is left.

    Returns:
        text with unsafe characters replaced by "_" and surrounding
        spaces and dots removed.
    """
    return _UNSAFE_NAME_CHARS.sub("_", text).strip(" .") or fallback


def read_tag_region(path: Path) -> bytes:
    """
    Read the ID3v2 tag region at the start of a file.

    Only the 10-byte header and the tag body it announces are read, so
    large audio files are not loaded into memory.

    Args:
        path: Path to the audio file.

    Returns:
        Header plus tag body when the file starts with "ID3"; otherwise
        the (up to 10) bytes read, which the caller can check with
        has_tag_marker().

    Raises:
        TagReadError: If the file cannot be opened or read.
    """
    try:
        with open(path, "rb") as f:
            header = f.read(HEADER_LENGTH)
            if len(header) < HEADER_LENGTH or not has_tag_marker(header):
                return header
            body_size = decode_size(header[6:10])
            body = f.read(body_size)
    except OSError as e:
        raise TagReadError(
            f"Failed to read {path}: {e.strerror or e}",
            details={"file_path": str(path), "original_error": str(e)}
        ) from e

    if len(body) < body_size:
        logger.warning(
            f"{path.name}: tag announces {body_size} bytes, file holds {len(body)}"
        )
    return header + body


class FileArtworkSink:
    """
    Writes artwork bytes next to a path prefix.

    Attributes:
        prefix: Output path without extension.
    """

    def __init__(self, prefix: Path) -> None:
        self.prefix = prefix

    @classmethod
    def for_source(cls, prefix: Path, source: Path, many: bool) -> "FileArtworkSink":
        """
        Create a sink for the artwork of one source file.

        Args:
            prefix: Configured artwork path prefix.
            source: Audio file the artwork comes from.
            many: Whether several files are processed in this run; the
                  source stem is then appended to the prefix.
        """
        if many:
            prefix = prefix.with_name(f"{prefix.name}-{safe_name_part(source.stem, 'track')}")
        return cls(prefix)

    def path_for(self, extension: str) -> Path:
        """Return the output path for an extension."""
        return self.prefix.with_name(f"{self.prefix.name}.{safe_name_part(extension, 'bin')}")

    def write(self, data: bytes, extension: str) -> None:
        """
        Write artwork to <prefix>.<extension>.

        Raises:
            ArtworkWriteFault: If the file cannot be written.
        """
        path = self.path_for(extension)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            raise ArtworkWriteFault(
                f"Failed to write artwork to {path}: {e.strerror or e}",
                details={"file_path": str(path), "original_error": str(e)}
            ) from e
        logger.info(f"Artwork saved: {path}")
