"""Tests for logging configuration."""

import logging

from debt_tracker.logging_config import (
    REDACTED,
    SecretRedactingFilter,
    get_logger,
    setup_logging,
)


class TestGetLogger:
    def test_namespaced(self):
        assert get_logger("graph.builder").name == "debt_tracker.graph.builder"
        assert get_logger("debt_tracker.cache").name == "debt_tracker.cache"

    def test_root(self):
        assert get_logger().name == "debt_tracker"


class TestSetupLogging:
    def test_levels(self):
        assert setup_logging(verbose=True).level == logging.DEBUG
        assert setup_logging(quiet=True).level == logging.ERROR
        assert setup_logging().level == logging.WARNING

    def test_http_loggers_held_at_warning(self):
        setup_logging(verbose=True)
        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("httpcore").level == logging.WARNING

    def test_http_loggers_follow_quiet(self):
        setup_logging(quiet=True)
        assert logging.getLogger("httpx").level == logging.ERROR


def _record(msg, *args):
    return logging.LogRecord("debt_tracker.sources", logging.INFO, __file__, 1, msg, args, None)


class TestSecretRedactingFilter:
    def test_github_token_masked(self):
        record = _record("Authorization: token %s", "ghp_abcdefghijklmnop1234")
        assert SecretRedactingFilter().filter(record)
        assert "ghp_" not in record.getMessage()
        assert REDACTED in record.getMessage()

    def test_bearer_key_masked(self):
        record = _record("POST with Bearer sk-gateway-key-123456")
        SecretRedactingFilter().filter(record)
        assert record.getMessage() == f"POST with Bearer {REDACTED}"

    def test_plain_message_untouched(self):
        record = _record("Fetched %d commits for %s", 5, "octo/widgets")
        SecretRedactingFilter().filter(record)
        assert record.args == (5, "octo/widgets")
        assert record.getMessage() == "Fetched 5 commits for octo/widgets"
