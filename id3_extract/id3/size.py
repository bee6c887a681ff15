"""
Size field codec for ID3v2 tags.

ID3v2 stores sizes as 2-4 byte big-endian integers. Tag sizes and most
frame sizes use 7 bits per byte ("synchsafe") so that no size byte can
look like an MPEG frame sync; picture frame sizes are read with all
8 bits per byte.

Usage:
    decode_size(b"\\x00\\x00\\x02\\x01")                      # 257
    decode_size(b"\\x00\\x01\\x00", eight_bit_bytes=True)     # 256
"""

from id3_extract.core.exceptions import UnsupportedSizeLength


SIZE_LENGTHS = (2, 3, 4)

PICTURE_FRAME_SUFFIX = "PIC"


def decode_size(data: bytes, eight_bit_bytes: bool = False) -> int:
    """
    Decode a big-endian size field.

    Args:
        data: The 2, 3 or 4 size bytes, most significant first.
        eight_bit_bytes: Use all 8 bits of every byte. When False, only
                         the low 7 bits count (synchsafe integer).

    Returns:
        The decoded size.

    Raises:
        UnsupportedSizeLength: If data is not 2, 3 or 4 bytes long.
    """
    length = len(data)
    if length not in SIZE_LENGTHS:
        raise UnsupportedSizeLength(
            f"Unsupported size length: {length} bytes",
            details={"length": length, "raw": bytes(data).hex()}
        )

    bits = 8 if eight_bit_bytes else 7
    mask = (1 << bits) - 1

    size = 0
    for byte in data:
        size = (size << bits) | (byte & mask)
    return size


def is_picture_frame(frame_id: str) -> bool:
    """Return True for PIC (v2.2) and APIC-style frame ids."""
    return frame_id.endswith(PICTURE_FRAME_SUFFIX)
