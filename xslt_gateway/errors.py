"""
Errors and Error Reporting
==========================

Exception hierarchy for the gateway, the tagged failure description used to
build problem messages, and the report helpers used at the outermost
request boundary.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional
import logging
import traceback

logger = logging.getLogger(__name__)


class GatewayError(Exception):
    """Base class for gateway errors."""


class ConfigurationError(GatewayError):
    """Raised when the gateway is set up incorrectly. Never a Problem."""


class TransformerNotFoundError(ConfigurationError):
    """Raised when no style sheet exists for a transformer name."""

    def __init__(self, name: str, path):
        self.name = name
        self.path = path
        super().__init__(
            f"Transformer definitions for '{name}' not found. Please create '{path}'."
        )


class StyleSheetLoadError(ConfigurationError):
    """Raised when a style sheet exists but cannot be compiled."""


class FetchError(GatewayError):
    """
    Raised by fetch clients when the transport fails.

    The underlying transport exception is available as ``__cause__``.
    """


# ============================================================================
# FAILURE DESCRIPTIONS
# ============================================================================

class FailureKind(Enum):
    """What went wrong while talking to, or reading from, upstream."""

    UPSTREAM_STATUS = "upstream_status"  # non-200 response
    TRANSPORT = "transport"              # DNS, socket, TLS, timeout
    DOCUMENT = "document"                # body not usable by the style sheet


@dataclass(frozen=True)
class Failure:
    """
    A failure with its structured payload.

    Attributes:
        kind: Failure kind
        status_code: Upstream status (UPSTREAM_STATUS only)
        reason: Upstream reason phrase (UPSTREAM_STATUS only)
        error_class: Name of the underlying error class (TRANSPORT, DOCUMENT)
        detail: Underlying error message (TRANSPORT, DOCUMENT)
    """
    kind: FailureKind
    status_code: Optional[int] = None
    reason: str = ""
    error_class: str = ""
    detail: str = ""

    @classmethod
    def upstream_status(cls, status_code: int, reason: str) -> 'Failure':
        return cls(FailureKind.UPSTREAM_STATUS, status_code=status_code, reason=reason or "")

    @classmethod
    def transport(cls, error: BaseException) -> 'Failure':
        cause = error.__cause__ if isinstance(error, FetchError) and error.__cause__ else error
        return cls(FailureKind.TRANSPORT, error_class=type(cause).__name__, detail=str(cause))

    @classmethod
    def document(cls, error_class: str, detail: str) -> 'Failure':
        return cls(FailureKind.DOCUMENT, error_class=error_class, detail=detail)


def describe_failure(failure: Failure) -> str:
    """
    Build the caller-facing message for a failure.

    Args:
        failure: Failure to describe

    Returns:
        "Upstream Response: <status> <reason>" for upstream status failures,
        "<ErrorClass>: <detail>. Consult the log for details." otherwise
    """
    if failure.kind is FailureKind.UPSTREAM_STATUS:
        return f"Upstream Response: {failure.status_code} {failure.reason}".rstrip()
    if failure.kind in (FailureKind.TRANSPORT, FailureKind.DOCUMENT):
        return f"{failure.error_class}: {failure.detail}. Consult the log for details."
    raise ValueError(f"Unknown failure kind: {failure.kind}")


# ============================================================================
# BOUNDARY REPORTING
# ============================================================================

REPORT_HEADER = "=========================== EXCEPTION REPORT ============================"
REPORT_STACK = "--- STACKTRACE ----------------------------------------------------------"
REPORT_FOOTER = "======================== END OF EXCEPTION REPORT ========================"


def user_info(error: BaseException) -> str:
    """Redacted summary of an unexpected error, suitable for a 500 body."""
    return f"{type(error).__name__}: {error}. Consult the log for details."


def format_exception_report(error: BaseException) -> str:
    """Render a full exception report including the stack trace."""
    stack = "".join(traceback.format_exception(type(error), error, error.__traceback__))
    lines = [
        REPORT_HEADER,
        f"EXCEPTION: {type(error).__module__}.{type(error).__qualname__}: {error}",
        REPORT_STACK,
        stack.rstrip(),
        REPORT_FOOTER,
    ]
    return "\n".join(lines)


def report_exception(error: BaseException, sink: logging.Logger = None) -> str:
    """
    Write a full exception report to a diagnostic sink.

    Args:
        error: The unexpected error
        sink: Logger to write to (defaults to this module's logger)

    Returns:
        The caller-facing summary from user_info()
    """
    (sink or logger).error(format_exception_report(error))
    return user_info(error)
