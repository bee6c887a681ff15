"""
Logging for id3-extract.

Everything goes through the root logger, configured once by
setup_logging():

    console                      level from config or --verbose, colored,
                                 written with tqdm.write()
    log_full_<ts>.log            every record, DEBUG and up
    log_errors_<ts>.log          ERROR and CRITICAL only
    frame_faults_<ts>.log        one entry per frame that stopped parsing

The three files only exist when a log directory is configured.

Usage:
    from id3_extract.core.logger import setup_logging, get_logger

    setup_logging(log_dir)
    logger = get_logger(__name__)
    log_frame_fault(logger, "TALB", 42, "Frame size 900 exceeds remaining 12 bytes")
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import TextIO

from tqdm import tqdm


LOG_FULL_FILENAME = "log_full"
LOG_ERRORS_FILENAME = "log_errors"
FRAME_FAULTS_FILENAME = "frame_faults"

FILE_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_RESET = "\033[0m"


class ColoredConsoleFormatter(logging.Formatter):
    """Formats console records as '<LEVEL>: message' with an ANSI-colored level."""

    LEVEL_COLORS = {
        logging.DEBUG: "\033[34m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[1m\033[31m",
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno, "\033[37m")
        return f"{color}{record.levelname}{_RESET}: {record.getMessage()}"


class TqdmLoggingHandler(logging.Handler):
    """
    Console handler that prints through tqdm.write().

    tqdm.write() moves any active progress bar out of the way before
    printing, so log lines and the scan bar do not overwrite each other.

    Attributes:
        stream: Target stream, or None for whatever sys.stderr is when
                the record is emitted.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        super().__init__()
        self.stream = stream

    def emit(self, record: logging.LogRecord) -> None:
        try:
            tqdm.write(self.format(record), file=self.stream or sys.stderr)
        except Exception:
            self.handleError(record)


class FrameFaultHandler(logging.Handler):
    """
    Writes frame faults to a plain report file.

    Only records with a 'frame_fault_id' extra are written (see
    log_frame_fault()); everything else is ignored. Each entry reads:

        TALB @ 42
        Frame size 900 exceeds remaining 12 bytes

    Attributes:
        report_path: Report file, truncated by open().
        report_file: Open handle, None before open() and after close().
    """

    def __init__(self, report_path: Path) -> None:
        super().__init__()
        self.report_path = report_path
        self.report_file: TextIO | None = None

    def open(self) -> None:
        self.report_file = open(self.report_path, "w", encoding="utf-8")

    def emit(self, record: logging.LogRecord) -> None:
        if self.report_file is None or not hasattr(record, "frame_fault_id"):
            return
        try:
            self.report_file.write(
                f"{record.frame_fault_id} @ {getattr(record, 'frame_fault_offset', -1)}\n"
                f"{getattr(record, 'frame_fault_error', '')}\n\n"
            )
            self.report_file.flush()
        except Exception:
            self.handleError(record)

    def close(self) -> None:
        """Close the report file; calling it twice is harmless."""
        if self.report_file is not None:
            try:
                self.report_file.close()
            except OSError:
                pass
            self.report_file = None
        super().close()


class ErrorOnlyFilter(logging.Filter):
    """Lets ERROR and CRITICAL records through, drops the rest."""

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= logging.ERROR


def _file_handler(path: Path) -> logging.FileHandler:
    handler = logging.FileHandler(path, mode="w", encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT))
    return handler


def setup_logging(log_dir: Path | None = None, level: str = "INFO") -> None:
    """
    Configure the root logger. Call once, after the config is loaded.

    Args:
        log_dir: Directory for the log files (created when missing), or
                 None to log to the console only.
        level: Console level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               Files always receive DEBUG and up.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    console_handler = TqdmLoggingHandler()
    console_handler.setLevel(level.upper())
    console_handler.setFormatter(ColoredConsoleFormatter())
    root_logger.addHandler(console_handler)

    if log_dir is None:
        return

    log_dir.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")

    root_logger.addHandler(_file_handler(log_dir / f"{LOG_FULL_FILENAME}_{stamp}.log"))

    error_handler = _file_handler(log_dir / f"{LOG_ERRORS_FILENAME}_{stamp}.log")
    error_handler.addFilter(ErrorOnlyFilter())
    root_logger.addHandler(error_handler)

    fault_handler = FrameFaultHandler(log_dir / f"{FRAME_FAULTS_FILENAME}_{stamp}.log")
    fault_handler.open()
    root_logger.addHandler(fault_handler)


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a module; pass __name__."""
    return logging.getLogger(name)


def log_frame_fault(
    logger: logging.Logger,
    frame_id: str,
    offset: int,
    error: str
) -> None:
    """
    Log a frame whose decoding stopped tag parsing.

    The record is an ERROR and carries the extras FrameFaultHandler
    picks up for the frame fault report.

    Args:
        logger: Logger of the calling module.
        frame_id: Frame being read when the fault happened ("" if none).
        offset: Cursor index inside the frame region.
        error: Fault description.
    """
    logger.error(
        f"Frame {frame_id or '<none>'} at index {offset}: {error}",
        extra={
            "frame_fault_id": frame_id,
            "frame_fault_offset": offset,
            "frame_fault_error": error,
        }
    )


def shutdown_logging() -> None:
    """Flush, close and detach every root handler. Use in a finally block."""
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        try:
            handler.flush()
            handler.close()
        except OSError:
            pass
        root_logger.removeHandler(handler)
