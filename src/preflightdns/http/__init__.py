# SPDX-FileCopyrightText: 2025 preflight-dns contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP client exports."""

from .client import HttpClient, create_default_http_client
from .deadline import DeadlineBackend, DeadlineStream, DeadlineTransport
from .httpx_client import HttpxClient
from .models import Headers, HttpResponse, ProbeRequest
from .pinning import (
    PinnedBackend,
    PinnedTransport,
    join_host_port,
    rewrite_connection_target,
    split_host_port,
)

__all__ = [
    "DeadlineBackend",
    "DeadlineStream",
    "DeadlineTransport",
    "Headers",
    "HttpClient",
    "HttpResponse",
    "HttpxClient",
    "PinnedBackend",
    "PinnedTransport",
    "ProbeRequest",
    "create_default_http_client",
    "join_host_port",
    "rewrite_connection_target",
    "split_host_port",
]
