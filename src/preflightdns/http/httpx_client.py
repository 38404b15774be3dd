# SPDX-FileCopyrightText: 2025 preflight-dns contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx-backed HttpClient implementation."""

from __future__ import annotations

from collections.abc import Callable

import httpx

from ..config import PreflightSettings, load_settings
from ..errors import ErrorCategory, TransportError, categorize_exception
from .client import HttpClient
from .models import HttpResponse, ProbeRequest
from .deadline import DeadlineTransport
from .pinning import PinnedTransport

TransportFactory = Callable[[ProbeRequest], httpx.BaseTransport]


class HttpxClient(HttpClient):
    """
    Synchronous httpx client wrapper.

    Every request gets its own httpx.Client so a pooled connection opened by
    one probe can never be reused by the other. The transport carries one
    deadline for the whole exchange, so the request timeout bounds the total
    time spent and not just each socket operation.
    """

    def __init__(
        self,
        settings: PreflightSettings | None = None,
        transport_factory: TransportFactory | None = None,
    ):
        self.settings = settings or load_settings()
        self._transport_factory = transport_factory or self._default_transport

    def _default_transport(self, request: ProbeRequest) -> httpx.BaseTransport:
        timeout = self._timeout_for(request)
        if request.connect_to:
            return PinnedTransport(request.connect_to, timeout=timeout, verify=self.settings.verify_ssl)
        return DeadlineTransport(timeout=timeout, verify=self.settings.verify_ssl)

    def _timeout_for(self, request: ProbeRequest) -> float:
        return request.timeout if request.timeout is not None else self.settings.timeout

    def request(self, request: ProbeRequest) -> HttpResponse:
        headers = dict(request.headers or {})
        headers.setdefault("User-Agent", self.settings.user_agent)
        timeout = self._timeout_for(request)

        try:
            with httpx.Client(
                transport=self._transport_factory(request),
                follow_redirects=self.settings.allow_redirects,
                timeout=timeout,
                # Proxy variables would route around the pinned address.
                trust_env=request.connect_to is None,
            ) as client:
                with client.stream(
                    request.method,
                    request.url,
                    headers=headers,
                    content=request.body or None,
                ) as resp:
                    return HttpResponse(
                        status_code=resp.status_code,
                        reason_phrase=resp.reason_phrase,
                        url=str(resp.url),
                        http_version=resp.http_version,
                    )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise TransportError(str(exc) or type(exc).__name__, category=categorize_exception(exc)) from exc
        except (ValueError, TypeError) as exc:
            # Header values or body that cannot be encoded for the wire.
            raise TransportError(f"invalid request: {exc}", category=ErrorCategory.UNKNOWN_ERROR) from exc

    def close(self) -> None:
        """Nothing pooled between requests."""
