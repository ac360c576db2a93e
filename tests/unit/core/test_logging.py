"""Unit tests for log_with_source."""

from unittest.mock import MagicMock

from agentic_notes.core.logging import log_with_source


class TestLogWithSource:
    def test_known_source_is_kept(self):
        logger = MagicMock()

        log_with_source(logger, "viewmodel", "ERROR", "Note write failed", code="X")

        logger.error.assert_called_once_with("Note write failed", source="viewmodel", code="X")

    def test_unknown_source_is_recorded_as_unknown(self):
        logger = MagicMock()

        log_with_source(logger, "somewhere", "info", "Hello")

        logger.info.assert_called_once_with("Hello", source="unknown")
