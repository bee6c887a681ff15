"""
Frame parsing for ID3v2 tag bodies.

All three supported tag versions store frames the same way: a frame id,
a size field, optional flags, then the payload. They differ only in the
field widths and in the frame ids used for each field:

    Version   id   size   flags
    v2.2       3     3      0
    v2.3       4     4      2
    v2.4       4     4      2

One FrameParser walks the frame region using a FrameParserConfig that
holds those widths and maps the known frame ids to a result field name
and a payload decoder. The three configurations are module constants.

Usage:
    from id3_extract.id3.parser import FrameParser, V23_CONFIG

    result = FrameParser(V23_CONFIG).parse(frames)
    result.tags          # {"album": "...", "title": "..."}
    result.stop_reason   # StopReason.PADDING
"""

import functools
import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Iterator, Mapping

from id3_extract.core.exceptions import (
    FrameDecodeFault,
    TagDecodeError,
    UnsupportedSizeLength,
)
from id3_extract.core.logger import get_logger, log_frame_fault
from id3_extract.id3.decoders import ArtworkSink, decode_image, decode_text
from id3_extract.id3.size import decode_size, is_picture_frame


logger = get_logger(__name__)


Decoder = Callable[[bytes], str]

_FRAME_ID_PATTERN = re.compile(r"[0-9A-Z]+")


# Decoder for each result field
FIELD_DECODERS: dict[str, Decoder] = {
    "album": decode_text,
    "artist": decode_text,
    "title": decode_text,
    "year": decode_text,
    "duration": decode_text,
    "artwork": decode_image,
}

V22_FRAME_FIELDS = {
    "TAL": "album",
    "TP1": "artist",
    "TT2": "title",
    "TYE": "year",
    "TLE": "duration",
    "PIC": "artwork",
}

V23_FRAME_FIELDS = {
    "TALB": "album",
    "TPE1": "artist",
    "TIT2": "title",
    "TYER": "year",
    "TLEN": "duration",
    "APIC": "artwork",
}


def build_decoder_map(
    frame_fields: Mapping[str, str],
    artwork_sink: ArtworkSink | None = None
) -> dict[str, tuple[str, Decoder]]:
    """
    Map frame ids to (field name, decoder) pairs.

    Args:
        frame_fields: Frame id to result field name.
        artwork_sink: Optional sink bound into the image decoder.

    Returns:
        Decoder map suitable for FrameParserConfig.
    """
    decoder_map: dict[str, tuple[str, Decoder]] = {}
    for frame_id, field_name in frame_fields.items():
        decoder = FIELD_DECODERS[field_name]
        if decoder is decode_image and artwork_sink is not None:
            decoder = functools.partial(decode_image, artwork_sink=artwork_sink)
        decoder_map[frame_id] = (field_name, decoder)
    return decoder_map


@dataclass(frozen=True)
class FrameParserConfig:
    """
    Field widths and frame id mapping for one tag version.

    Attributes:
        name: Version label used in log messages ("v2.3").
        id_length: Width of the frame id in bytes.
        size_length: Width of the frame size field in bytes.
        flags_length: Width of the frame flags field in bytes.
        frame_fields: Frame id to result field name.
        decoder_map: Frame id to (field name, decoder).
    """
    name: str
    id_length: int
    size_length: int
    flags_length: int
    frame_fields: Mapping[str, str]
    decoder_map: Mapping[str, tuple[str, Decoder]] = field(repr=False)

    @property
    def header_length(self) -> int:
        """Total width of a frame header."""
        return self.id_length + self.size_length + self.flags_length

    def with_artwork_sink(self, artwork_sink: ArtworkSink | None) -> "FrameParserConfig":
        """Return a copy whose image decoder writes to artwork_sink."""
        if artwork_sink is None:
            return self
        return replace(self, decoder_map=build_decoder_map(self.frame_fields, artwork_sink))


V22_CONFIG = FrameParserConfig(
    name="v2.2",
    id_length=3,
    size_length=3,
    flags_length=0,
    frame_fields=V22_FRAME_FIELDS,
    decoder_map=build_decoder_map(V22_FRAME_FIELDS),
)

_V23_DECODER_MAP = build_decoder_map(V23_FRAME_FIELDS)

V23_CONFIG = FrameParserConfig(
    name="v2.3",
    id_length=4,
    size_length=4,
    flags_length=2,
    frame_fields=V23_FRAME_FIELDS,
    decoder_map=_V23_DECODER_MAP,
)

V24_CONFIG = FrameParserConfig(
    name="v2.4",
    id_length=4,
    size_length=4,
    flags_length=2,
    frame_fields=V23_FRAME_FIELDS,
    decoder_map=_V23_DECODER_MAP,
)


@dataclass(frozen=True)
class FrameDescriptor:
    """
    Header of one frame record.

    Attributes:
        frame_id: Frame id text ("TALB").
        size: Payload size in bytes.
        flags: Raw flag bytes (empty for v2.2). Not interpreted.
        offset: Index of the frame header inside the frame region.
        data_offset: Index of the payload inside the frame region.
    """
    frame_id: str
    size: int
    flags: bytes
    offset: int
    data_offset: int

    @property
    def end(self) -> int:
        """Index right after the payload."""
        return self.data_offset + self.size


class StopReason(Enum):
    """Why frame iteration ended."""
    END_OF_BUFFER = "end_of_buffer"
    PADDING = "padding"
    FAULT = "fault"


@dataclass
class ParseResult:
    """
    Outcome of parsing a frame region.

    Every stop reason carries the tags decoded so far; the reason only
    matters for logging.

    Attributes:
        tags: Field name to decoded value.
        stop_reason: Why iteration ended.
        fault: The fault that stopped iteration, if any.
    """
    tags: dict[str, str] = field(default_factory=dict)
    stop_reason: StopReason = StopReason.END_OF_BUFFER
    fault: TagDecodeError | None = None


def is_valid_frame_id(frame_id: str) -> bool:
    """Return True when frame_id holds at least one digit or upper-case letter."""
    return _FRAME_ID_PATTERN.search(frame_id) is not None


def iter_frames(
    frames: bytes,
    config: FrameParserConfig
) -> Iterator[tuple[FrameDescriptor, bytes]]:
    """
    Yield (descriptor, payload) for every frame record in the region.

    Iteration ends quietly at the end of the buffer or at the first
    frame id without any [0-9A-Z] character (padding).

    Args:
        frames: The frame region of a tag.
        config: Field widths for the tag version.

    Raises:
        FrameDecodeFault: If a frame header is truncated or a frame size
                          points past the end of the region.
    """
    length = len(frames)
    i = 0
    while i < length:
        offset = i
        frame_id = bytes(frames[i:i + config.id_length]).decode("latin-1")
        i += config.id_length
        if not is_valid_frame_id(frame_id):
            return
        logger.debug(f"ID {frame_id}")

        try:
            size = decode_size(frames[i:i + config.size_length], is_picture_frame(frame_id))
        except UnsupportedSizeLength as e:
            raise FrameDecodeFault(
                f"Truncated frame header: {e.message}",
                details={"frame_id": frame_id, "index": i}
            ) from e
        i += config.size_length
        logger.debug(f"Size {size}")

        flags = frames[i:i + config.flags_length]
        i += config.flags_length
        if flags:
            logger.debug(f"Flags {flags.hex()}")

        if i + size > length:
            raise FrameDecodeFault(
                f"Frame size {size} exceeds remaining {length - i} bytes",
                details={"frame_id": frame_id, "index": i, "size": size}
            )

        descriptor = FrameDescriptor(
            frame_id=frame_id,
            size=size,
            flags=flags,
            offset=offset,
            data_offset=i,
        )
        yield descriptor, frames[i:i + size]
        i += size


class FrameParser:
    """
    Walks a frame region and decodes the frames its config knows about.

    Unknown frame ids are skipped. A frame id that appears twice keeps
    the value of the last occurrence. Faults stop parsing but never
    discard fields that were already decoded.

    Attributes:
        config: Field widths and decoder map for one tag version.
    """

    def __init__(self, config: FrameParserConfig) -> None:
        self.config = config

    def parse(self, frames: bytes) -> ParseResult:
        """
        Parse the frame region.

        Args:
            frames: The frame region of a tag (header and extended header
                    already removed).

        Returns:
            ParseResult with the decoded tags and the stop reason.
        """
        result = ParseResult()
        frames = bytes(frames)
        logger.debug(f"Size of all frames {len(frames)} ({self.config.name})")

        frame_id = ""
        cursor = 0
        try:
            for descriptor, data in iter_frames(frames, self.config):
                frame_id = descriptor.frame_id
                cursor = descriptor.data_offset
                mapped = self.config.decoder_map.get(frame_id)
                if mapped is not None:
                    field_name, decoder = mapped
                    result.tags[field_name] = decoder(data)
                cursor = descriptor.end
        except TagDecodeError as e:
            return self._stop_on_fault(result, e, frame_id, cursor)
        except Exception as e:
            fault = FrameDecodeFault(
                f"Decoder failed: {type(e).__name__}: {e}",
                details={"frame_id": frame_id, "original_error": repr(e)}
            )
            return self._stop_on_fault(result, fault, frame_id, cursor)

        if cursor < len(frames):
            result.stop_reason = StopReason.PADDING
            logger.debug(f"Padding after index {cursor}, {len(frames) - cursor} bytes")
        return result

    def _stop_on_fault(
        self,
        result: ParseResult,
        fault: TagDecodeError,
        frame_id: str,
        cursor: int
    ) -> ParseResult:
        """Log the fault and mark the partial result as stopped by it."""
        frame_id = fault.details.get("frame_id", frame_id)
        cursor = fault.details.get("index", cursor)
        log_frame_fault(logger, frame_id, cursor, fault.message)
        result.stop_reason = StopReason.FAULT
        result.fault = fault
        return result
