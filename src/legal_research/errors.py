"""Error taxonomy for source adapters.

Transport and backend errors are raised inside adapters and converted to a
failed ``SourceResult`` at the adapter boundary. Extraction misses are not
errors at all: they produce empty results.
"""
from __future__ import annotations

from enum import Enum

import httpx
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from pydantic import ValidationError


class ErrorType(str, Enum):
    """Why a source produced no usable answer."""

    TRANSPORT = "transport"  # network, DNS, connection reset
    TIMEOUT = "timeout"
    BACKEND = "backend"  # non-success status, malformed payload
    CONFIGURATION = "configuration"  # missing required credentials
    UNKNOWN = "unknown"


class LegalSourceError(Exception):
    """Base class for errors raised by source adapters."""

    error_type: ErrorType = ErrorType.UNKNOWN

    def __init__(self, reason: str, *, source: str | None = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.source = source


class TransportError(LegalSourceError):
    error_type = ErrorType.TRANSPORT


class BackendError(LegalSourceError):
    error_type = ErrorType.BACKEND


class ConfigurationError(LegalSourceError):
    error_type = ErrorType.CONFIGURATION


MISSING_CREDENTIALS = "missing credentials"


def classify_exception(exc: BaseException) -> tuple[ErrorType, str]:
    """Map an exception raised while querying a backend to (type, reason).

    The reason is short and human readable; it ends up in ``Failed(reason)``.
    """
    if isinstance(exc, LegalSourceError):
        return exc.error_type, exc.reason
    if isinstance(exc, (httpx.TimeoutException, TimeoutError, PlaywrightTimeoutError)):
        return ErrorType.TIMEOUT, "timeout"
    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        if status == 429:
            return ErrorType.BACKEND, "rate limited (HTTP 429)"
        if status in (401, 403):
            return ErrorType.BACKEND, f"not authorized (HTTP {status})"
        return ErrorType.BACKEND, f"HTTP {status}"
    if isinstance(exc, httpx.TransportError):
        return ErrorType.TRANSPORT, f"transport error: {exc.__class__.__name__}"
    if isinstance(exc, PlaywrightError):
        # Playwright appends a multi-line call log to the message.
        lines = (exc.message or "").strip().splitlines()
        return ErrorType.TRANSPORT, f"browser error: {lines[0] if lines else exc.__class__.__name__}"
    if isinstance(exc, (ValidationError, ValueError, KeyError, TypeError)):
        # json.JSONDecodeError is a ValueError
        return ErrorType.BACKEND, f"malformed payload: {exc.__class__.__name__}"
    return ErrorType.UNKNOWN, str(exc) or exc.__class__.__name__
