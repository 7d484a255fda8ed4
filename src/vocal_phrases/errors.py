"""Error handling for vocal-phrases.

Provides:
- Custom exception hierarchy
- Tokenizer error wrapping
- Operation error context with optional rollback

Structural misuse of the editing operators (bad offsets, non-adjacent
merges, occupied marker slots) is not signalled through exceptions: those
operators return the input document or None instead.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable

from vocal_phrases.logging import get_logger

logger = get_logger(__name__)


class ErrorCategory(str, Enum):
    """Categories of errors for handling decisions."""

    VALIDATION = "validation"  # Bad input - don't retry
    CONFIGURATION = "configuration"  # Bad config - don't retry
    RESOURCE = "resource"  # Missing file/dictionary - don't retry
    EXTERNAL = "external"  # Collaborator failure - recover locally
    INTERNAL = "internal"  # Bug in code - don't retry


class VocalPhrasesError(Exception):
    """Base exception for vocal-phrases errors.

    Attributes:
        message: Human-readable error message
        category: Error category for handling
        context: Additional context information
        recoverable: Whether the error is recoverable
    """

    category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        context: dict | None = None,
        recoverable: bool = False,
    ):
        super().__init__(message)
        self.message = message
        self.context = context or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        if self.context:
            return f"{self.message} (context: {self.context})"
        return self.message


class ValidationError(VocalPhrasesError):
    """Input validation error.

    Examples: malformed document data, unreadable lyrics file.
    """

    category = ErrorCategory.VALIDATION

    def __init__(self, message: str, context: dict | None = None):
        super().__init__(message, context, recoverable=False)


class ConfigurationError(VocalPhrasesError):
    """Configuration error.

    Examples: missing config file, invalid settings.
    """

    category = ErrorCategory.CONFIGURATION

    def __init__(self, message: str, context: dict | None = None):
        super().__init__(message, context, recoverable=False)


class ResourceError(VocalPhrasesError):
    """Resource not found or unavailable."""

    category = ErrorCategory.RESOURCE

    def __init__(self, message: str, context: dict | None = None):
        super().__init__(message, context, recoverable=False)


class ExternalServiceError(VocalPhrasesError):
    """Error raised by an external collaborator."""

    category = ErrorCategory.EXTERNAL

    def __init__(
        self,
        message: str,
        context: dict | None = None,
        recoverable: bool = True,
    ):
        super().__init__(message, context, recoverable=recoverable)


class TokenizationError(ExternalServiceError):
    """The morphological tokenizer could not analyse a line.

    Always recovered inside the document assembler by falling back to
    whitespace segmentation.
    """

    def __init__(
        self,
        message: str,
        context: dict | None = None,
        line_text: str | None = None,
    ):
        super().__init__(message, context, recoverable=True)
        self.line_text = line_text


class ErrorContext:
    """Context manager for error handling with optional rollback.

    Logs the failure with the operation name and context, runs the
    rollback if one was given, and re-raises the original error.
    """

    def __init__(
        self,
        operation: str,
        rollback: Callable[[], None] | None = None,
        context: dict | None = None,
    ):
        """Initialize error context.

        Args:
            operation: Name of the operation being performed
            rollback: Optional rollback function to call on error
            context: Additional context to include in errors
        """
        self.operation = operation
        self.rollback = rollback
        self.context = context or {}
        self.error: Exception | None = None

    def __enter__(self) -> "ErrorContext":
        logger.debug(f"Starting operation: {self.operation}")
        return self

    def __exit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: Any) -> bool:
        if exc_val is None:
            logger.debug(f"Completed operation: {self.operation}")
            return False

        self.error = exc_val
        logger.error(
            f"Error in {self.operation}: {exc_val}",
            extra={
                "operation": self.operation,
                "error_type": type(exc_val).__name__,
                **self.context,
            },
        )

        if self.rollback:
            try:
                logger.info(f"Rolling back {self.operation}")
                self.rollback()
            except Exception as rollback_error:
                logger.error(
                    f"Rollback failed for {self.operation}: {rollback_error}",
                )

        return False


def wrap_tokenizer_error(
    error: Exception,
    tokenizer: str,
    line_text: str | None = None,
) -> TokenizationError:
    """Wrap an arbitrary tokenizer failure in a TokenizationError.

    Args:
        error: Original error
        tokenizer: Name of the tokenizer backend
        line_text: Line being analysed when the error happened

    Returns:
        TokenizationError carrying the original error message
    """
    if isinstance(error, TokenizationError):
        return error

    context: dict[str, Any] = {"tokenizer": tokenizer, "error_type": type(error).__name__}
    if line_text is not None:
        context["line"] = line_text

    return TokenizationError(
        f"Tokenizer {tokenizer} failed: {error}",
        context=context,
        line_text=line_text,
    )


def format_error_for_display(error: Exception) -> str:
    """Format an error message for user display.

    Args:
        error: Error to format

    Returns:
        Human-readable error message
    """
    if isinstance(error, VocalPhrasesError):
        category = error.category.value
        base_message = error.message

        if error.context:
            context_str = ", ".join(f"{k}={v}" for k, v in error.context.items())
            return f"[{category}] {base_message} ({context_str})"

        return f"[{category}] {base_message}"

    return f"[error] {type(error).__name__}: {error}"
