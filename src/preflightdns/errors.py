# SPDX-FileCopyrightText: 2025 preflight-dns contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers."""

from __future__ import annotations

import socket
import ssl
from collections.abc import Iterator
from enum import Enum
from typing import TYPE_CHECKING, Optional

import httpx

if TYPE_CHECKING:
    from .models.probe import RunStage, Verdict


class ErrorCategory(str, Enum):
    TIMEOUT = "TIMEOUT"
    SSL_ERROR = "SSL_ERROR"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    DNS_ERROR = "DNS_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class PreflightError(Exception):
    """Base class for every failure a preflight run can surface."""

    def __init__(self, message: str, *, stage: RunStage | None = None):
        super().__init__(message)
        self.stage = stage


class ValidationError(PreflightError):
    """The job is missing a required field; raised before any network I/O."""


class JobDecodeError(PreflightError):
    """A job document or payload could not be decoded into a Job."""


class ResolutionError(PreflightError):
    """The replacement target could not be turned into a connectable address."""


class TransportError(PreflightError):
    """Request construction or network failure on either probe."""

    def __init__(
        self,
        message: str,
        *,
        stage: RunStage | None = None,
        category: ErrorCategory = ErrorCategory.UNKNOWN_ERROR,
    ):
        super().__init__(message, stage=stage)
        self.category = category


class ConnectionTargetError(TransportError):
    """The connection target of the pinned probe has no usable host:port form."""

    def __init__(self, address: str, problem: str):
        super().__init__(f"address {address}: {problem}", category=ErrorCategory.CONNECTION_ERROR)
        self.address = address


class MismatchError(PreflightError):
    """Both probes completed but the comparison policy rejected the pair."""

    def __init__(self, verdict: Verdict, *, stage: RunStage | None = None):
        super().__init__(verdict.reason, stage=stage)
        self.verdict = verdict


def _exception_chain(exc: BaseException) -> Iterator[BaseException]:
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__


def categorize_exception(exc: Exception) -> ErrorCategory:
    """
    Map Python/httpx exceptions to ErrorCategory.

    httpx wraps the socket/ssl error twice (httpcore, then httpx), so the
    whole cause chain is inspected.
    """
    if isinstance(exc, TransportError):
        return exc.category

    if isinstance(exc, httpx.TimeoutException):
        return ErrorCategory.TIMEOUT

    for link in _exception_chain(exc):
        if isinstance(link, (ssl.SSLError, ssl.CertificateError)):
            return ErrorCategory.SSL_ERROR
        if isinstance(link, (socket.gaierror, socket.herror)):
            return ErrorCategory.DNS_ERROR

    if isinstance(exc, (httpx.ConnectError, httpx.RemoteProtocolError, httpx.NetworkError, httpx.ProxyError)):
        return ErrorCategory.CONNECTION_ERROR

    if isinstance(exc, (ConnectionError, ConnectionRefusedError, ConnectionResetError)):
        return ErrorCategory.CONNECTION_ERROR

    return ErrorCategory.UNKNOWN_ERROR


def error_category_to_reason(category: Optional[ErrorCategory]) -> str:
    """Short user-facing explanation of a transport failure category."""
    mapping = {
        ErrorCategory.TIMEOUT: "Network timeout during probe",
        ErrorCategory.SSL_ERROR: "TLS/certificate issue",
        ErrorCategory.CONNECTION_ERROR: "Network connectivity issue",
        ErrorCategory.DNS_ERROR: "DNS resolution failure",
        ErrorCategory.UNKNOWN_ERROR: "Network error during probe",
        None: "",
    }
    return mapping.get(category, "")


__all__ = [
    "ConnectionTargetError",
    "ErrorCategory",
    "JobDecodeError",
    "MismatchError",
    "PreflightError",
    "ResolutionError",
    "TransportError",
    "ValidationError",
    "categorize_exception",
    "error_category_to_reason",
]
