"""Structured error tracking with automatic classification.

This module provides error records for the email extraction pipeline with:
- Automatic error classification by stage and type
- Retry decision support for callers of the LLM path
- Integration with structured logging

Usage:
    from order_mail.error_tracking import ParseError, ErrorStage

    try:
        parser.parse(email)
    except Exception as e:
        error = ParseError.from_exception(e, ErrorStage.VENDOR_PARSE,
                                          context={'vendor': 'rev'})
        error.log()
"""

import traceback
from enum import Enum
from typing import Any

from order_mail.logging_config import get_logger

logger = get_logger(__name__)


class ErrorStage(Enum):
    """Where in the pipeline the error occurred."""

    VENDOR_PARSE = "vendor_parse"  # Exception inside a vendor/carrier parser
    LLM_PARSE = "llm_parse"  # Agent extraction failures


class ErrorType(Enum):
    """Error type classification for retry and debugging."""

    API_ERROR = "api_error"  # Model API errors
    TIMEOUT = "timeout"  # Timeout errors (retryable)
    RATE_LIMIT = "rate_limit"  # API rate limiting (retryable)
    AUTH_ERROR = "auth_error"  # Bad or missing API key
    NETWORK = "network"  # Network connectivity issues (retryable)
    NO_TEXT_RESPONSE = "no_text_response"  # Model returned no text block
    INVALID_JSON = "invalid_json"  # Model text is not JSON
    SCHEMA_VALIDATION = "schema_validation"  # JSON does not match the schema
    PARSE_ERROR = "parse_error"  # Regex/parsing failures
    UNKNOWN = "unknown"


class ParseError:
    """Structured pipeline error.

    Attributes:
        stage: Error stage (where in the pipeline the error occurred)
        error_type: Error type (for retry and debugging decisions)
        message: Human-readable error message
        exception: Original exception (if any)
        context: Additional context (vendor, sender_domain, etc.)
        is_retryable: Whether the operation is worth retrying
        stack_trace: Full stack trace string
    """

    def __init__(
        self,
        stage: ErrorStage,
        error_type: ErrorType,
        message: str,
        exception: Exception | None = None,
        context: dict[str, Any] | None = None,
        is_retryable: bool = False,
    ):
        self.stage = stage
        self.error_type = error_type
        self.message = message
        self.exception = exception
        self.context = context or {}
        self.is_retryable = is_retryable
        self.stack_trace = None

        if exception:
            self.stack_trace = "".join(
                traceback.format_exception(
                    type(exception), exception, exception.__traceback__
                )
            )

    def log(self) -> None:
        """Write the error to the structured log."""
        logger.error(
            f"[{self.stage.value}:{self.error_type.value}] {self.message}",
            extra={
                "vendor": self.context.get("vendor"),
                "sender_domain": self.context.get("sender_domain"),
                "parse_method": self.context.get("parse_method"),
            },
            exc_info=self.exception,
        )

    @classmethod
    def from_exception(
        cls,
        exception: Exception,
        stage: ErrorStage,
        context: dict[str, Any] | None = None,
    ) -> "ParseError":
        """Auto-classify error from exception.

        Examines exception type and message to determine error type
        and retry strategy.
        """
        error_type = ErrorType.UNKNOWN
        is_retryable = False

        error_str = str(exception).lower()
        exception_name = type(exception).__name__

        # Timeout errors (retryable)
        if "timeout" in error_str or "timed out" in error_str or exception_name in [
            "TimeoutError",
            "APITimeoutError",
        ]:
            error_type = ErrorType.TIMEOUT
            is_retryable = True

        # Rate limiting (retryable with backoff)
        elif "rate limit" in error_str or "429" in error_str or exception_name == "RateLimitError":
            error_type = ErrorType.RATE_LIMIT
            is_retryable = True

        # Authentication errors (requires user intervention)
        elif (
            "auth" in error_str
            or "401" in error_str
            or "api key" in error_str
            or exception_name == "AuthenticationError"
        ):
            error_type = ErrorType.AUTH_ERROR

        # Network errors (retryable)
        elif (
            "connection" in error_str
            or "network" in error_str
            or exception_name in ["ConnectionError", "APIConnectionError"]
        ):
            error_type = ErrorType.NETWORK
            is_retryable = True

        # Parsing errors from regex/data handling
        elif exception_name in ["ValueError", "KeyError", "IndexError", "TypeError", "AttributeError"]:
            error_type = ErrorType.PARSE_ERROR

        elif exception_name.endswith("APIError") or exception_name.endswith("StatusError"):
            error_type = ErrorType.API_ERROR
            # 5xx responses are transient
            status_code = getattr(exception, "status_code", None)
            is_retryable = isinstance(status_code, int) and status_code >= 500

        return cls(
            stage=stage,
            error_type=error_type,
            message=str(exception),
            exception=exception,
            context=context,
            is_retryable=is_retryable,
        )
