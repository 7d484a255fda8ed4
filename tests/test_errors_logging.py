"""Tests for error handling and logging modules."""

import json
import logging
from unittest.mock import Mock

import pytest

from vocal_phrases.errors import (
    ConfigurationError,
    ErrorCategory,
    ErrorContext,
    ExternalServiceError,
    ResourceError,
    TokenizationError,
    ValidationError,
    VocalPhrasesError,
    format_error_for_display,
    wrap_tokenizer_error,
)
from vocal_phrases.logging import (
    LogConfig,
    LogContext,
    LogLevel,
    PhraseLogger,
    StructuredFormatter,
    configure_logging,
    get_logger,
    log_operation_complete,
    log_operation_failed,
    log_operation_start,
    set_verbosity,
)


def make_record(msg="Test message", level=logging.INFO):
    return logging.LogRecord(
        name="test",
        level=level,
        pathname="",
        lineno=0,
        msg=msg,
        args=(),
        exc_info=None,
    )


class TestErrorCategory:
    """Tests for ErrorCategory enum."""

    def test_categories(self):
        """Test error category values."""
        assert ErrorCategory.VALIDATION.value == "validation"
        assert ErrorCategory.CONFIGURATION.value == "configuration"
        assert ErrorCategory.RESOURCE.value == "resource"
        assert ErrorCategory.EXTERNAL.value == "external"
        assert ErrorCategory.INTERNAL.value == "internal"


class TestVocalPhrasesError:
    """Tests for VocalPhrasesError base class."""

    def test_basic_error(self):
        error = VocalPhrasesError("Test error")

        assert str(error) == "Test error"
        assert error.message == "Test error"
        assert error.context == {}
        assert error.recoverable is False

    def test_error_with_context(self):
        error = VocalPhrasesError("Test error", context={"key": "value"})

        assert "context: {'key': 'value'}" in str(error)
        assert error.context == {"key": "value"}


class TestSpecificErrors:
    """Tests for specific error types."""

    def test_validation_error(self):
        error = ValidationError("Invalid input")
        assert error.category == ErrorCategory.VALIDATION
        assert error.recoverable is False

    def test_configuration_error(self):
        error = ConfigurationError("Bad config")
        assert error.category == ErrorCategory.CONFIGURATION
        assert error.recoverable is False

    def test_resource_error(self):
        error = ResourceError("Dictionary not found")
        assert error.category == ErrorCategory.RESOURCE

    def test_external_service_error(self):
        error = ExternalServiceError("Tokenizer crashed")
        assert error.category == ErrorCategory.EXTERNAL
        assert error.recoverable is True

    def test_tokenization_error(self):
        error = TokenizationError("Parse failed", line_text="歌詞")

        assert isinstance(error, ExternalServiceError)
        assert error.recoverable is True
        assert error.line_text == "歌詞"


class TestWrapTokenizerError:
    """Tests for wrap_tokenizer_error."""

    def test_wrap_generic(self):
        wrapped = wrap_tokenizer_error(RuntimeError("dictionary missing"), "mecab", "歌詞")

        assert isinstance(wrapped, TokenizationError)
        assert "dictionary missing" in wrapped.message
        assert wrapped.context["tokenizer"] == "mecab"
        assert wrapped.context["error_type"] == "RuntimeError"
        assert wrapped.line_text == "歌詞"

    def test_already_wrapped(self):
        original = TokenizationError("Parse failed")
        assert wrap_tokenizer_error(original, "mecab") is original


class TestErrorContext:
    """Tests for ErrorContext context manager."""

    def test_success(self):
        with ErrorContext("test_op") as ctx:
            pass
        assert ctx.error is None

    def test_error_is_reraised(self):
        with pytest.raises(ValueError):
            with ErrorContext("test_op") as ctx:
                raise ValueError("boom")
        assert isinstance(ctx.error, ValueError)

    def test_rollback_called(self):
        rollback = Mock()
        with pytest.raises(ValueError):
            with ErrorContext("test_op", rollback=rollback):
                raise ValueError("boom")
        rollback.assert_called_once()

    def test_failing_rollback_keeps_original_error(self):
        rollback = Mock(side_effect=OSError("disk"))
        with pytest.raises(ValueError):
            with ErrorContext("test_op", rollback=rollback):
                raise ValueError("boom")


class TestFormatErrorForDisplay:
    """Tests for format_error_for_display function."""

    def test_format_package_error(self):
        error = ValidationError("Invalid input", context={"field": "name"})
        formatted = format_error_for_display(error)

        assert "[validation]" in formatted
        assert "Invalid input" in formatted
        assert "field=name" in formatted

    def test_format_generic_error(self):
        formatted = format_error_for_display(ValueError("Test error"))

        assert "[error]" in formatted
        assert "ValueError" in formatted


# Logging Tests


class TestLogLevel:
    """Tests for LogLevel enum."""

    def test_levels(self):
        assert LogLevel.QUIET == 0
        assert LogLevel.NORMAL == 1
        assert LogLevel.VERBOSE == 2
        assert LogLevel.DEBUG == 3

    def test_from_name(self):
        assert LogLevel.from_name("verbose") == LogLevel.VERBOSE
        assert LogLevel.from_name("DEBUG") == LogLevel.DEBUG


class TestLogConfig:
    """Tests for LogConfig."""

    def test_defaults(self):
        config = LogConfig()

        assert config.level == LogLevel.NORMAL
        assert config.log_file is None
        assert config.json_format is False
        assert config.include_timestamp is True


class TestStructuredFormatter:
    """Tests for StructuredFormatter."""

    def test_text_format(self):
        formatter = StructuredFormatter(include_timestamp=False, include_context=False)
        formatted = formatter.format(make_record())

        assert "INFO" in formatted
        assert "Test message" in formatted

    def test_json_format(self):
        formatter = StructuredFormatter(json_format=True, include_timestamp=False)
        parsed = json.loads(formatter.format(make_record("歌詞")))

        assert parsed["level"] == "info"
        assert parsed["message"] == "歌詞"

    def test_context_in_text(self):
        formatter = StructuredFormatter(include_timestamp=False, include_context=True)
        record = make_record()
        record.phrase_id = "p-1"

        assert "phrase_id=p-1" in formatter.format(record)

    def test_unserializable_context_in_json(self):
        formatter = StructuredFormatter(json_format=True, include_timestamp=False)
        record = make_record()
        record.payload = object()

        parsed = json.loads(formatter.format(record))
        assert "payload" in parsed["context"]


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_configure_verbose(self):
        configure_logging(LogConfig(level=LogLevel.VERBOSE, color=False))

        root = logging.getLogger("vocal_phrases")
        assert root.level == logging.INFO
        assert len(root.handlers) == 1

    def test_reconfigure_replaces_handlers(self):
        configure_logging(LogConfig(color=False))
        configure_logging(LogConfig(color=False))

        assert len(logging.getLogger("vocal_phrases").handlers) == 1


class TestGetLogger:
    """Tests for get_logger function."""

    def test_get_logger(self):
        logger = get_logger("vocal_phrases.test.module")

        assert isinstance(logger, PhraseLogger)
        assert logger.name == "vocal_phrases.test.module"

    def test_with_context(self):
        records = []
        handler = logging.Handler()
        handler.emit = records.append
        root = logging.getLogger("vocal_phrases")
        root.addHandler(handler)
        try:
            logger = get_logger("vocal_phrases.test.bound").with_context(tokenizer="mecab")
            logger.warning("Tokenizer slow", extra={"line_index": 3})
        finally:
            root.removeHandler(handler)

        assert logger._context == {"tokenizer": "mecab"}
        assert len(records) == 1
        assert records[0].tokenizer == "mecab"
        assert records[0].line_index == 3


class TestSetVerbosity:
    """Tests for set_verbosity function."""

    def test_set_verbosity(self):
        set_verbosity(LogLevel.DEBUG)
        assert logging.getLogger("vocal_phrases").level == logging.DEBUG
        set_verbosity(LogLevel.NORMAL)


class TestLogContext:
    """Tests for LogContext context manager."""

    def test_log_context(self):
        with LogContext(test_key="test_value"):
            record = logging.getLogRecordFactory()("test", logging.INFO, "", 0, "msg", (), None)
            assert record.test_key == "test_value"

        record = logging.getLogRecordFactory()("test", logging.INFO, "", 0, "msg", (), None)
        assert not hasattr(record, "test_key")


class TestLogOperationHelpers:
    """Tests for log operation helper functions."""

    def test_log_operation_start(self):
        logger = Mock()
        log_operation_start(logger, "assemble", tokenizer="mecab")

        logger.info.assert_called_once()
        call_args = logger.info.call_args
        assert "Starting" in call_args[0][0]
        assert call_args[1]["extra"]["tokenizer"] == "mecab"

    def test_log_operation_complete(self):
        logger = Mock()
        log_operation_complete(logger, "assemble", duration=5.5)

        call_args = logger.info.call_args
        assert "Completed" in call_args[0][0]
        assert call_args[1]["extra"]["duration_seconds"] == 5.5

    def test_log_operation_failed(self):
        logger = Mock()
        log_operation_failed(logger, "assemble", ValueError("Test error"))

        call_args = logger.error.call_args
        assert "Failed" in call_args[0][0]
        assert call_args[1]["extra"]["error_type"] == "ValueError"
