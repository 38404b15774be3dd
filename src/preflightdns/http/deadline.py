# SPDX-FileCopyrightText: 2025 preflight-dns contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Whole-request deadline for both probes.

httpx timeouts apply to each connect, read and write separately, so a peer
that trickles the status line can keep a probe alive far past its timeout.
The backend here fixes one deadline when the transport is built and caps
every socket operation of the exchange at the time that is left.
"""

from __future__ import annotations

import ssl
import time
from collections.abc import Iterable
from typing import Any

import httpcore
import httpx


def _cap(deadline: float | None, timeout: float | None, exc_class: type[Exception], action: str) -> float | None:
    if deadline is None:
        return timeout
    remaining = deadline - time.monotonic()
    if remaining <= 0:
        raise exc_class(f"{action}: request deadline exceeded")
    return remaining if timeout is None else min(timeout, remaining)


class DeadlineStream(httpcore.NetworkStream):
    """NetworkStream wrapper whose reads and writes never outlive the deadline."""

    def __init__(self, stream: httpcore.NetworkStream, deadline: float):
        self._stream = stream
        self.deadline = deadline

    def read(self, max_bytes: int, timeout: float | None = None) -> bytes:
        return self._stream.read(max_bytes, timeout=_cap(self.deadline, timeout, httpcore.ReadTimeout, "read"))

    def write(self, buffer: bytes, timeout: float | None = None) -> None:
        self._stream.write(buffer, timeout=_cap(self.deadline, timeout, httpcore.WriteTimeout, "write"))

    def close(self) -> None:
        self._stream.close()

    def start_tls(
        self,
        ssl_context: ssl.SSLContext,
        server_hostname: str | None = None,
        timeout: float | None = None,
    ) -> httpcore.NetworkStream:
        stream = self._stream.start_tls(
            ssl_context,
            server_hostname=server_hostname,
            timeout=_cap(self.deadline, timeout, httpcore.ConnectTimeout, "tls handshake"),
        )
        return DeadlineStream(stream, self.deadline)

    def get_extra_info(self, info: str) -> Any:
        return self._stream.get_extra_info(info)


class DeadlineBackend(httpcore.SyncBackend):
    """
    httpcore network backend with a hard deadline of creation time + timeout.

    Covers the connect step, the TLS handshake and every read and write on
    the resulting stream. ``timeout=None`` (or 0) leaves httpx's
    per-operation timeouts as the only limit.
    """

    def __init__(self, *, timeout: float | None = None):
        self.deadline = time.monotonic() + timeout if timeout else None

    def connect_tcp(
        self,
        host: str,
        port: int,
        timeout: float | None = None,
        local_address: str | None = None,
        socket_options: Iterable[Any] | None = None,
    ) -> httpcore.NetworkStream:
        timeout = _cap(self.deadline, timeout, httpcore.ConnectTimeout, f"dial {host}:{port}")
        stream = super().connect_tcp(
            host,
            port,
            timeout=timeout,
            local_address=local_address,
            socket_options=socket_options,
        )
        return self.wrap(stream)

    def wrap(self, stream: httpcore.NetworkStream) -> httpcore.NetworkStream:
        if self.deadline is None:
            return stream
        return DeadlineStream(stream, self.deadline)


class DeadlineTransport(httpx.HTTPTransport):
    """HTTPTransport whose connection pool dials through a DeadlineBackend."""

    def __init__(
        self,
        *,
        timeout: float | None = None,
        backend: DeadlineBackend | None = None,
        **kwargs: Any,
    ):
        super().__init__(**kwargs)
        self.backend = backend or DeadlineBackend(timeout=timeout)
        # HTTPTransport exposes no network_backend argument; the pool reads it per connection.
        self._pool._network_backend = self.backend


__all__ = ["DeadlineBackend", "DeadlineStream", "DeadlineTransport"]
