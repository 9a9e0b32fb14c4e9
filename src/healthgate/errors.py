# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers."""

from __future__ import annotations

import socket
import ssl as ssl_module
from enum import Enum

import httpx


class ErrorCategory(str, Enum):
    TIMEOUT = "TIMEOUT"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    DNS_ERROR = "DNS_ERROR"
    SSL_ERROR = "SSL_ERROR"
    INVALID_TARGET = "INVALID_TARGET"
    PREDICATE_ERROR = "PREDICATE_ERROR"
    VALIDATION = "VALIDATION"
    CANCELLED = "CANCELLED"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    NONE = "NONE"


class HealthGateError(Exception):
    """Base class for errors raised by HealthGate."""


class ValidationError(HealthGateError):
    """Raised for a bad target or run configuration, before any attempt is made."""

    def __init__(self, message: str, *, field: str | None = None, category: ErrorCategory = ErrorCategory.VALIDATION):
        super().__init__(message)
        self.field = field
        self.category = category


def _looks_like_dns_failure(exc: BaseException) -> bool:
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        if isinstance(current, (socket.gaierror, socket.herror)):
            return True
        current = current.__cause__ or current.__context__
    message = str(exc).lower()
    return "name or service not known" in message or "nodename nor servname" in message or "getaddrinfo failed" in message


def _looks_like_ssl_failure(exc: BaseException) -> bool:
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        if isinstance(current, (ssl_module.SSLError, ssl_module.CertificateError)):
            return True
        current = current.__cause__ or current.__context__
    return "certificate verify failed" in str(exc).lower()


def categorize_exception(exc: BaseException) -> ErrorCategory:
    """
    Map Python/httpx exceptions to ErrorCategory.
    """
    if isinstance(exc, httpx.TimeoutException):
        return ErrorCategory.TIMEOUT

    if isinstance(exc, (httpx.InvalidURL, httpx.UnsupportedProtocol)):
        return ErrorCategory.INVALID_TARGET

    if isinstance(exc, httpx.ConnectError):
        if _looks_like_ssl_failure(exc):
            return ErrorCategory.SSL_ERROR
        if _looks_like_dns_failure(exc):
            return ErrorCategory.DNS_ERROR
        return ErrorCategory.CONNECTION_ERROR

    if isinstance(exc, (httpx.RemoteProtocolError, httpx.NetworkError, httpx.ProxyError)):
        return ErrorCategory.CONNECTION_ERROR

    if isinstance(exc, (ssl_module.SSLError, ssl_module.CertificateError)):
        return ErrorCategory.SSL_ERROR

    if isinstance(exc, (socket.gaierror, socket.herror)):
        return ErrorCategory.DNS_ERROR

    if isinstance(exc, (TimeoutError, socket.timeout)):
        return ErrorCategory.TIMEOUT

    if isinstance(exc, ConnectionError):
        return ErrorCategory.CONNECTION_ERROR

    return ErrorCategory.UNKNOWN_ERROR


def error_category_to_reason(category: ErrorCategory | str | None) -> str:
    """User-facing reason string."""
    mapping = {
        ErrorCategory.TIMEOUT: "Probe timed out",
        ErrorCategory.CONNECTION_ERROR: "Connection failed",
        ErrorCategory.DNS_ERROR: "DNS resolution failure",
        ErrorCategory.SSL_ERROR: "TLS/certificate issue",
        ErrorCategory.INVALID_TARGET: "Invalid target address",
        ErrorCategory.PREDICATE_ERROR: "Success predicate raised an error",
        ErrorCategory.VALIDATION: "Invalid gate configuration",
        ErrorCategory.CANCELLED: "Cancelled",
        ErrorCategory.UNKNOWN_ERROR: "Unexpected error during probe",
        ErrorCategory.NONE: "",
    }
    if category is None:
        return ""
    try:
        return mapping[ErrorCategory(category)]
    except ValueError:
        return "Probe failed"


__all__ = [
    "ErrorCategory",
    "HealthGateError",
    "ValidationError",
    "categorize_exception",
    "error_category_to_reason",
]
