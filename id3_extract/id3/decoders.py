"""
Frame payload decoders.

Two decoders turn raw frame payloads into values for the tag result:

    decode_text:  text frames (TALB, TIT2, TAL, TT2, ...)
    decode_image: picture frames (APIC, PIC), returned as a data URI

The text decoder only distinguishes the cases files in the wild have
been read with so far (see decode_text); it is not the full ID3v2
encoding table, and changing it would change the output for existing
files.
"""

import base64
import re
from typing import Protocol

from id3_extract.core.exceptions import ArtworkWriteFault, FrameDecodeFault
from id3_extract.core.logger import get_logger


logger = get_logger(__name__)


MIME_PREFIX = "image/"

# Picture types mapped to a MIME type; anything else is served as PNG
IMAGE_MIME_TYPES = {
    "JPG": "image/jpeg",
    "PNG": "image/png",
}
DEFAULT_IMAGE_MIME_TYPE = "image/png"

# Offset of the bytes handed to the artwork sink. Fixed for both the
# MIME-string and the 3-character picture type layouts.
ARTWORK_OFFSET = 6

_IMAGE_TYPE_PATTERN = re.compile(r"[A-Za-z0-9]+")


class ArtworkSink(Protocol):
    """Destination for raw artwork bytes found in picture frames."""

    def write(self, data: bytes, extension: str) -> None:
        """
        Store artwork bytes.

        Args:
            data: Raw bytes taken from the picture frame.
            extension: Lower-case file extension derived from the image type.

        Raises:
            ArtworkWriteFault: If the artwork cannot be stored.
        """
        ...


def decode_text(payload: bytes) -> str:
    """
    Decode a text frame payload.

    Args:
        payload: Frame payload, starting with the encoding marker byte.

    Returns:
        The decoded string. Decoding is permissive and never raises.

    Behavior:
        - 0x00 0x00 ...: remaining bytes as UTF-16 little-endian
        - 0x00 ...:      remaining bytes as UTF-8
        - otherwise:     the whole payload as Latin-1
    """
    if payload[:1] == b"\x00":
        if payload[1:2] == b"\x00":
            text = payload[2:]
            # A dangling odd byte cannot form a code unit
            text = text[:len(text) - len(text) % 2]
            return text.decode("utf-16-le", errors="replace")
        return payload[1:].decode("utf-8", errors="replace")
    return payload.decode("latin-1")


def decode_image(payload: bytes, artwork_sink: ArtworkSink | None = None) -> str:
    """
    Decode a picture frame payload into a base64 data URI.

    Args:
        payload: Frame payload: encoding byte, then either a MIME string
                 ("image/jpeg") or a 3-character image type ("JPG"),
                 followed by the picture type, description and image data.
        artwork_sink: Optional destination for the raw artwork bytes.
                      Sink failures are logged and do not stop decoding.

    Returns:
        "data:<mime>;base64,<data>" string.

    Raises:
        FrameDecodeFault: If a MIME string carries no image type.
    """
    offset = 1
    mime = payload[1:7].decode("latin-1")
    if mime == MIME_PREFIX:
        match = _IMAGE_TYPE_PATTERN.search(payload[7:11].decode("latin-1"))
        if match is None:
            raise FrameDecodeFault(
                "Picture frame MIME string has no image type",
                details={"mime": payload[1:11].hex()}
            )
        image_type = match.group(0)
        offset += len(MIME_PREFIX)
    else:
        image_type = payload[1:4].decode("latin-1")
    offset += len(image_type) + 2

    if artwork_sink is not None:
        _write_artwork(artwork_sink, payload[ARTWORK_OFFSET:], image_type.lower())

    mime_type = IMAGE_MIME_TYPES.get(image_type, DEFAULT_IMAGE_MIME_TYPE)
    encoded = base64.b64encode(payload[offset:]).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def _write_artwork(artwork_sink: ArtworkSink, data: bytes, extension: str) -> None:
    """Hand artwork to the sink, logging instead of raising on failure."""
    try:
        artwork_sink.write(data, extension)
    except ArtworkWriteFault as e:
        logger.warning(f"Could not write artwork: {e.message}")
        if e.details:
            logger.debug(f"Details: {e.details}")
    except Exception as e:
        logger.warning(f"Could not write artwork: {e}")
    else:
        logger.debug(f"Artwork written ({len(data)} bytes, .{extension})")
