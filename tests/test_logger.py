"""Test logging setup and the frame fault report"""

import logging

from id3_extract.core.logger import (
    ErrorOnlyFilter,
    get_logger,
    log_frame_fault,
    setup_logging,
    shutdown_logging,
)


class TestLogging:
    """Test logger configuration"""

    def test_console_only(self):
        try:
            setup_logging(None, "WARNING")
            root = logging.getLogger()
            assert len(root.handlers) == 1
            assert root.handlers[0].level == logging.WARNING
        finally:
            shutdown_logging()
        assert logging.getLogger().handlers == []

    def test_log_files(self, temp_dir):
        log_dir = temp_dir / "logs"
        try:
            setup_logging(log_dir)
            logger = get_logger("id3_extract.test")
            logger.debug("debug line")
            log_frame_fault(logger, "TIT2", 42, "Frame size 900 exceeds remaining 8 bytes")
        finally:
            shutdown_logging()

        full = next(log_dir.glob("log_full_*.log")).read_text(encoding="utf-8")
        errors = next(log_dir.glob("log_errors_*.log")).read_text(encoding="utf-8")
        faults = next(log_dir.glob("frame_faults_*.log")).read_text(encoding="utf-8")

        assert "debug line" in full
        assert "debug line" not in errors
        assert "Frame TIT2 at index 42" in errors
        assert faults == "TIT2 @ 42\nFrame size 900 exceeds remaining 8 bytes\n\n"

    def test_error_only_filter(self):
        error_filter = ErrorOnlyFilter()
        record = logging.LogRecord("x", logging.WARNING, __file__, 1, "msg", None, None)
        assert not error_filter.filter(record)
        record.levelno = logging.ERROR
        assert error_filter.filter(record)
