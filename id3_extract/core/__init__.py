"""
Core module for id3-extract.

This module provides the foundational components used throughout the application:
    - exceptions: Custom exception classes for error handling
    - config: Configuration loading and validation
    - logger: Logging system with console and file outputs

File access (file_manager) and the progress bar (progress) are imported
from their modules directly.

Usage:
    from id3_extract.core import (
        Config, load_config,
        setup_logging, get_logger,
        Id3ExtractError, ConfigError
    )
"""

from id3_extract.core.config import (
    Config,
    LoggingConfig,
    OutputConfig,
    default_config,
    load_config,
)
from id3_extract.core.exceptions import (
    ArtworkWriteFault,
    ConfigError,
    FrameDecodeFault,
    Id3ExtractError,
    TagDecodeError,
    TagReadError,
    UnsupportedSizeLength,
    UnsupportedVersion,
)
from id3_extract.core.logger import (
    get_logger,
    log_frame_fault,
    setup_logging,
    shutdown_logging,
)

__all__ = [
    # Config
    "Config",
    "OutputConfig",
    "LoggingConfig",
    "default_config",
    "load_config",
    # Exceptions
    "Id3ExtractError",
    "ConfigError",
    "TagReadError",
    "TagDecodeError",
    "UnsupportedSizeLength",
    "UnsupportedVersion",
    "FrameDecodeFault",
    "ArtworkWriteFault",
    # Logger
    "setup_logging",
    "get_logger",
    "log_frame_fault",
    "shutdown_logging",
]
