"""Classification and bookkeeping of errors raised while resolving records."""

import sys
import time
import traceback
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

import requests

from .exceptions import (
    CacheIOError,
    DocumentNavigationError,
    DocumentParseError,
    FetchError,
    InvalidSymbolError,
    ValidationError,
)
from .logging_config import get_logger


class ErrorType(Enum):
    """Types of errors that can occur."""
    NETWORK_TIMEOUT = "network_timeout"
    CONNECTION_ERROR = "connection_error"
    HTTP_STATUS = "http_status"
    API_RATE_LIMIT = "api_rate_limit"
    REDIRECT_LOOP = "redirect_loop"
    INVALID_ACCESSION = "invalid_accession"
    CACHE_IO_ERROR = "cache_io_error"
    PARSE_ERROR = "parse_error"
    MISSING_FIELD = "missing_field"
    INVALID_SYMBOL = "invalid_symbol"
    UNKNOWN = "unknown"


class ErrorSeverity(Enum):
    """Severity levels for errors."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


# Failures that another attempt may fix
RETRYABLE_TYPES = {
    ErrorType.NETWORK_TIMEOUT,
    ErrorType.CONNECTION_ERROR,
    ErrorType.HTTP_STATUS,
    ErrorType.API_RATE_LIMIT,
}

SUGGESTIONS = {
    ErrorType.NETWORK_TIMEOUT: "Network timeout detected. The request will be retried.",
    ErrorType.CONNECTION_ERROR: "Could not reach UniProt. Check connectivity or the configured base URL.",
    ErrorType.API_RATE_LIMIT: "UniProt rate limit reached. Slow down or retry later.",
    ErrorType.REDIRECT_LOOP: "The server redirected to the same URL. Check the configured base URL.",
    ErrorType.INVALID_ACCESSION: "Please check the accession format (e.g. P12345 or A0A023GPI8).",
    ErrorType.CACHE_IO_ERROR: "Check that the cache directory exists and is readable and writable.",
    ErrorType.PARSE_ERROR: "The record is not valid XML. Delete the cached file and fetch again.",
    ErrorType.INVALID_SYMBOL: "The sequence contains symbols outside the chosen alphabet.",
}


@dataclass
class ErrorContext:
    """Context information for an error."""
    error_type: ErrorType
    severity: ErrorSeverity
    message: str
    timestamp: float
    operation: str
    item_id: Optional[str] = None
    status_code: Optional[int] = None
    retry_count: int = 0
    max_retries: int = 5
    traceback: Optional[str] = None
    suggestion: Optional[str] = None

    @property
    def retryable(self) -> bool:
        return self.error_type in RETRYABLE_TYPES


class ErrorHandler:
    """Classifies errors, logs them at a fitting level and keeps a history."""

    def __init__(self, max_retries: int = 5, history_size: int = 1000):
        """
        Initialize error handler.

        Args:
            max_retries: Attempt count at which failures become critical
            history_size: Number of recent errors kept for summaries
        """
        self.max_retries = max_retries
        self.history_size = history_size
        self.error_history: List[ErrorContext] = []
        self.logger = get_logger('error')

    def handle_error(self,
                     error: Exception,
                     operation: str,
                     item_id: Optional[str] = None,
                     retry_count: int = 0,
                     status_code: Optional[int] = None,
                     error_type: Optional[ErrorType] = None) -> ErrorContext:
        """
        Record an error and log it.

        Args:
            error: The exception that occurred
            operation: The operation being performed
            item_id: Accession being processed
            retry_count: Attempts made so far
            status_code: HTTP status, for status failures
            error_type: Override automatic classification

        Returns:
            ErrorContext with error details and suggestion
        """
        if error_type is None:
            error_type = self.classify_error(error, status_code)
        severity = self._determine_severity(error_type, retry_count)

        context = ErrorContext(
            error_type=error_type,
            severity=severity,
            message=str(error),
            timestamp=time.time(),
            operation=operation,
            item_id=item_id,
            status_code=status_code,
            retry_count=retry_count,
            max_retries=self.max_retries,
            traceback=(
                traceback.format_exc()
                if severity == ErrorSeverity.CRITICAL and sys.exc_info()[0] is not None
                else None
            ),
            suggestion=SUGGESTIONS.get(error_type)
        )

        self._log_error(context)

        self.error_history.append(context)
        if len(self.error_history) > self.history_size:
            del self.error_history[:-self.history_size]

        return context

    def classify_error(self, error: Exception, status_code: Optional[int] = None) -> ErrorType:
        """Map an exception (and optional HTTP status) to an ErrorType."""
        if status_code == 429:
            return ErrorType.API_RATE_LIMIT
        if status_code is not None:
            return ErrorType.HTTP_STATUS

        if isinstance(error, FetchError):
            return ErrorType.REDIRECT_LOOP if error.cyclic else ErrorType.HTTP_STATUS
        if isinstance(error, requests.exceptions.Timeout):
            return ErrorType.NETWORK_TIMEOUT
        if isinstance(error, requests.exceptions.ConnectionError):
            return ErrorType.CONNECTION_ERROR
        if isinstance(error, ValidationError):
            return ErrorType.INVALID_ACCESSION
        if isinstance(error, CacheIOError):
            return ErrorType.CACHE_IO_ERROR
        if isinstance(error, DocumentParseError):
            return ErrorType.PARSE_ERROR
        if isinstance(error, DocumentNavigationError):
            return ErrorType.MISSING_FIELD
        if isinstance(error, InvalidSymbolError):
            return ErrorType.INVALID_SYMBOL

        return ErrorType.UNKNOWN

    def _determine_severity(self, error_type: ErrorType, retry_count: int) -> ErrorSeverity:
        """Determine error severity based on type and retry count."""
        if retry_count >= self.max_retries:
            return ErrorSeverity.CRITICAL

        if error_type == ErrorType.MISSING_FIELD:
            return ErrorSeverity.INFO

        if error_type in RETRYABLE_TYPES:
            return ErrorSeverity.WARNING if retry_count < 2 else ErrorSeverity.ERROR

        return ErrorSeverity.ERROR

    def _log_error(self, context: ErrorContext):
        """Log error with appropriate level and details."""
        log_message = f"{context.operation} - {context.error_type.value}: {context.message}"

        if context.item_id:
            log_message += f" (item: {context.item_id})"

        if context.retry_count > 0:
            log_message += f" (attempt {context.retry_count}/{context.max_retries})"

        if context.severity == ErrorSeverity.INFO:
            self.logger.info(log_message)
        elif context.severity == ErrorSeverity.WARNING:
            self.logger.warning(log_message)
        elif context.severity == ErrorSeverity.ERROR:
            self.logger.error(log_message)
        else:
            self.logger.critical(log_message)
            if context.traceback:
                self.logger.debug(f"Traceback:\n{context.traceback}")

        if context.suggestion and context.severity != ErrorSeverity.INFO:
            self.logger.info(f"Suggestion: {context.suggestion}")

    def clear(self) -> None:
        self.error_history.clear()

    def get_error_summary(self) -> Dict[str, Any]:
        """Get summary of errors for reporting."""
        by_type: Dict[str, int] = {}
        by_severity: Dict[str, int] = {}
        for error in self.error_history:
            by_type[error.error_type.value] = by_type.get(error.error_type.value, 0) + 1
            by_severity[error.severity.value] = by_severity.get(error.severity.value, 0) + 1

        recent_errors = []
        for error in self.error_history[-5:]:
            recent_errors.append({
                'type': error.error_type.value,
                'severity': error.severity.value,
                'message': error.message,
                'operation': error.operation,
                'item_id': error.item_id,
                'timestamp': datetime.fromtimestamp(error.timestamp).isoformat(),
                'suggestion': error.suggestion
            })

        return {
            'total_errors': len(self.error_history),
            'by_type': by_type,
            'by_severity': by_severity,
            'recent_errors': recent_errors
        }


# Global error handler instance
_error_handler = None


def get_error_handler() -> ErrorHandler:
    """Get global error handler instance."""
    global _error_handler
    if _error_handler is None:
        _error_handler = ErrorHandler()
    return _error_handler


def setup_error_handler(**kwargs) -> ErrorHandler:
    """Setup error handler with custom configuration."""
    global _error_handler
    _error_handler = ErrorHandler(**kwargs)
    return _error_handler
