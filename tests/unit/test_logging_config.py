"""Unit tests for logging configuration and filters."""

import json
import logging

import pytest

from oauth2_utils.observability.logging_config import (
    REDACTED,
    SecretRedactionFilter,
    StructuredJsonFormatter,
    configure_component_loggers,
    setup_logging,
)


def make_record(msg, args=()):
    return logging.LogRecord(
        name="oauth2_utils.cli",
        level=logging.DEBUG,
        pathname="",
        lineno=0,
        msg=msg,
        args=args,
        exc_info=None,
    )


@pytest.fixture
def restore_root_logger():
    """Put the root logger back after setup_logging() replaced its handlers."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield root_logger
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


@pytest.mark.unit
class TestSecretRedactionFilter:
    """Tests for the SecretRedactionFilter."""

    @pytest.mark.parametrize(
        "name", ["client_secret", "password", "access_token", "refresh_token", "code"]
    )
    def test_redacts_secret_parameters(self, name):
        record = make_record(f"Checking {name}=hunter2")

        assert SecretRedactionFilter().filter(record) is True
        assert record.getMessage() == f"Checking {name}={REDACTED}"

    def test_redacts_formatted_arguments(self):
        record = make_record("Checking %s=%s", ("password", "hunter2"))

        SecretRedactionFilter().filter(record)

        assert "hunter2" not in record.getMessage()
        assert record.args is None

    def test_redacts_secret_containing_spaces(self):
        record = make_record("Checking password=hunter2 correct-horse battery")

        SecretRedactionFilter().filter(record)

        assert record.getMessage() == f"Checking password={REDACTED}"
        assert "correct-horse" not in record.getMessage()

    def test_redaction_stops_at_line_break(self):
        record = make_record("Checking client_secret=s3cret value\nnext line")

        SecretRedactionFilter().filter(record)

        assert record.getMessage() == f"Checking client_secret={REDACTED}\nnext line"

    def test_leaves_other_parameters_alone(self):
        record = make_record("Checking client_id=my_client_23 scope=openid")

        assert SecretRedactionFilter().filter(record) is True
        assert record.getMessage() == "Checking client_id=my_client_23 scope=openid"

    def test_does_not_match_longer_names(self):
        record = make_record("code_challenge=abc auth_code=def")

        SecretRedactionFilter().filter(record)

        assert record.getMessage() == "code_challenge=abc auth_code=def"


@pytest.mark.unit
class TestStructuredJsonFormatter:
    def test_adds_standard_fields(self):
        formatter = StructuredJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s")
        record = make_record("Parsed %d scopes", (3,))

        entry = json.loads(formatter.format(record))

        assert entry["level"] == "DEBUG"
        assert entry["logger"] == "oauth2_utils.cli"
        assert entry["message"] == "Parsed 3 scopes"
        assert "timestamp" in entry


@pytest.mark.unit
class TestSetupLogging:
    def test_text_format(self, restore_root_logger):
        setup_logging(log_format="text", log_level="INFO")

        assert restore_root_logger.level == logging.INFO
        assert len(restore_root_logger.handlers) == 1
        handler = restore_root_logger.handlers[0]
        assert not isinstance(handler.formatter, StructuredJsonFormatter)
        assert any(isinstance(f, SecretRedactionFilter) for f in handler.filters)

    def test_json_format(self, restore_root_logger):
        setup_logging(log_format="json", log_level="debug")

        assert restore_root_logger.level == logging.DEBUG
        handler = restore_root_logger.handlers[0]
        assert isinstance(handler.formatter, StructuredJsonFormatter)

    def test_component_loggers(self):
        configure_component_loggers("ERROR")
        try:
            assert logging.getLogger("oauth2_utils.scope").level == logging.ERROR
            assert logging.getLogger("oauth2_utils.registry").level == logging.ERROR
        finally:
            configure_component_loggers("NOTSET")
