"""
Exception classes for id3-extract.

This module defines all custom exceptions used throughout the application.
Each exception carries a human-readable message plus a details dictionary
so callers can log diagnostic context without parsing the message.

Exception Hierarchy:
    Id3ExtractError (base)
        ConfigError - Configuration file issues
        TagReadError - Tag region could not be read from disk
        TagDecodeError - ID3v2 decoding faults
            UnsupportedSizeLength - Size field of an unsupported width
            UnsupportedVersion - Unknown ID3v2 major version
            FrameDecodeFault - Fault while reading a single frame record
        ArtworkWriteFault - Extracted artwork could not be stored
"""


class Id3ExtractError(Exception):
    """
    Base exception for all id3-extract errors.

    All custom exceptions in this project inherit from this class,
    allowing callers to catch all id3-extract errors with a single
    except clause if desired.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context (e.g., frame id, offsets).

    Example:
        try:
            tags = read_tag(data)
        except Id3ExtractError as e:
            logger.error(f"Operation failed: {e.message}")
            if e.details:
                logger.debug(f"Details: {e.details}")
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        """
        Initialize the base exception.

        Args:
            message: Human-readable error description that will be shown to the user.
            details: Optional dictionary containing additional context about the error.
                     Common keys include:
                     - 'file_path': File involved in the error
                     - 'frame_id': ID of the frame being decoded
                     - 'original_error': The underlying exception if wrapping another error
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return the error message for display."""
        return self.message


class ConfigError(Id3ExtractError):
    """
    Raised when there's an issue with the configuration file.

    This is a CRITICAL error that should stop program execution.

    Common causes:
        - An explicitly given config file does not exist
        - The file has invalid YAML syntax
        - Invalid field values (e.g., unknown log level, negative indent)

    Example:
        raise ConfigError(
            "'logging.level' must be one of DEBUG, INFO, WARNING, ERROR",
            details={'field': 'logging.level', 'value': 'LOUD'}
        )
    """
    pass


class TagReadError(Id3ExtractError):
    """
    Raised when the tag region of an audio file cannot be read.

    This is a NON-CRITICAL error when several files are processed:
    the remaining files are still handled.

    Common causes:
        - File not found
        - Permission denied
        - Path is a directory
    """
    pass


class TagDecodeError(Id3ExtractError):
    """
    Base class for faults raised while decoding ID3v2 bytes.

    Decoding is deterministic, so none of these faults is ever retried.
    """
    pass


class UnsupportedSizeLength(TagDecodeError):
    """
    Raised when a size field is not 2, 3 or 4 bytes wide.

    Usually means the buffer ended in the middle of a frame header.

    Example:
        raise UnsupportedSizeLength(
            "Unsupported size length: 1 bytes",
            details={'length': 1}
        )
    """
    pass


class UnsupportedVersion(TagDecodeError):
    """
    Raised when the tag header carries an unknown major version.

    Attributes:
        header: The raw header bytes (up to 10).
        version: The major version number found in the header.
    """

    def __init__(
        self,
        message: str,
        header: bytes,
        version: int,
        details: dict | None = None
    ) -> None:
        """
        Initialize the version error with the offending header.

        Args:
            message: Human-readable error description.
            header: Raw tag header bytes, reported as hex for diagnosis.
            version: Major version byte read from the header.
            details: Optional dictionary with additional context.
        """
        super().__init__(message, details)
        self.header = header
        self.version = version


class FrameDecodeFault(TagDecodeError):
    """
    Raised for any fault while reading one frame record.

    This is a recoverable fault: frame iteration stops and the fields
    decoded so far are still returned.

    Common causes:
        - Frame size points past the end of the tag body
        - Picture frame whose MIME string has no image type
        - A payload decoder raised
    """
    pass


class ArtworkWriteFault(Id3ExtractError):
    """
    Raised by an artwork sink when extracted artwork cannot be stored.

    The image decoder logs this fault and carries on; it never reaches
    the tag result.
    """
    pass
