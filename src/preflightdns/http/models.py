# SPDX-FileCopyrightText: 2025 preflight-dns contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP request/response data models used by the probes."""

from __future__ import annotations

from dataclasses import dataclass, field

Headers = dict[str, str]


@dataclass
class ProbeRequest:
    """
    Normalized request representation consumed by HttpClient implementations.

    ``connect_to`` pins the TCP connection to the given address while the URL,
    and therefore the Host header and TLS server name, stay untouched.
    """

    url: str
    method: str = "GET"
    headers: Headers = field(default_factory=dict)
    body: bytes = b""
    timeout: float | None = None
    connect_to: str | None = None


@dataclass
class HttpResponse:
    """Status line of a completed exchange; the body is never retained."""

    status_code: int
    reason_phrase: str = ""
    url: str | None = None
    http_version: str = ""
