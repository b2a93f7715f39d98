"""Unit tests for CLI session logging."""

import re

import pytest
from loguru import logger

from quill.contexts.approval.logger import _log_debug
from quill.utils.logger import log_provenance, setup_logger


@pytest.fixture
def session(tmp_path):
    log_file = setup_logger(
        "review", tmp_path / "review_session", extra_provenance={"Document type": "resume"}
    )
    yield log_file
    logger.remove()


@pytest.mark.unit
class TestSetupLogger:
    """Tests for setup_logger."""

    def test_log_file_created_in_session_dir(self, session, tmp_path):
        """Test the log file is named after the session and its directory is created."""
        assert session == tmp_path / "review_session" / "review.log"
        assert session.exists()

    def test_provenance_header(self, session):
        """Test the header records the session, package and extra provenance."""
        logger.complete()
        content = session.read_text(encoding="utf-8")

        assert "Session:" in content
        assert "quill:" in content
        assert "Scoring config:" in content
        assert re.search(r"Document type:\s+resume", content)

    def test_debug_reaches_file_with_prefix(self, session):
        """Test context debug messages land in the file with their prefix."""
        _log_debug("debug detail")
        logger.complete()

        assert "[approval] debug detail" in session.read_text(encoding="utf-8")

    def test_package_silent_until_enabled(self, tmp_path):
        """Test package messages are dropped until setup_logger enables them."""
        log_file = tmp_path / "silent.log"
        logger.remove()
        logger.disable("quill")
        logger.add(log_file, format="{message}")
        try:
            _log_debug("before setup")
        finally:
            logger.remove()
            logger.enable("quill")

        assert log_file.read_text(encoding="utf-8") == ""

    def test_log_provenance_aligns_keys(self, tmp_path):
        """Test provenance keys are padded to the longest key."""
        log_file = tmp_path / "plain.log"
        logger.remove()
        logger.enable("quill")
        logger.add(log_file, format="{message}")
        try:
            log_provenance({"A": 1, "Longer": 2})
        finally:
            logger.remove()

        lines = log_file.read_text(encoding="utf-8").splitlines()
        assert lines[1:3] == ["A:      1", "Longer: 2"]
