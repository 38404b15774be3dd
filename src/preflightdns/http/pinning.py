# SPDX-FileCopyrightText: 2025 preflight-dns contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Connection pinning for the candidate probe.

httpx builds the request exactly as it would for the endpoint URL (Host
header, TLS server name); only the TCP connect step is redirected. The port
always comes from the connection target httpcore is about to dial.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

import httpcore

from ..errors import ConnectionTargetError
from .deadline import DeadlineBackend, DeadlineTransport

logger = logging.getLogger(__name__)


def join_host_port(host: str, port: int | str | None) -> str:
    """Combine host and port into a connection target, bracketing IPv6 hosts."""
    if ":" in host:
        host = f"[{host}]"
    if port is None or port == "":
        return host
    return f"{host}:{port}"


def split_host_port(address: str) -> tuple[str, int]:
    """
    Split ``host:port`` or ``[host]:port``.

    A missing or non-numeric port is an error; there is no default.
    """
    if address.startswith("["):
        end = address.find("]")
        if end < 0:
            raise ConnectionTargetError(address, "missing ']' in address")
        host = address[1:end]
        rest = address[end + 1 :]
        if not rest:
            raise ConnectionTargetError(address, "missing port in address")
        if not rest.startswith(":"):
            raise ConnectionTargetError(address, "unexpected characters after ']'")
        port = rest[1:]
    else:
        host, sep, port = address.rpartition(":")
        if not sep:
            raise ConnectionTargetError(address, "missing port in address")
        if ":" in host:
            raise ConnectionTargetError(address, "too many colons in address")

    if not port.isdigit() or not 0 < int(port) < 65536:
        raise ConnectionTargetError(address, f"invalid port {port!r}")
    return host, int(port)


def rewrite_connection_target(address: str, pinned: str) -> tuple[str, int]:
    """Swap the host of a connection target for ``pinned``, keeping its port."""
    _, port = split_host_port(address)
    return pinned, port


class PinnedBackend(DeadlineBackend):
    """
    DeadlineBackend that dials ``address`` instead of the origin host.

    ``timeout`` sets the hard deadline (creation time + timeout) for the
    whole exchange, on top of the per-operation timeouts httpx passes in.
    """

    def __init__(self, address: str, *, timeout: float | None = None):
        super().__init__(timeout=timeout)
        self.address = address

    def connect_tcp(
        self,
        host: str,
        port: int,
        timeout: float | None = None,
        local_address: str | None = None,
        socket_options: Iterable[Any] | None = None,
    ) -> httpcore.NetworkStream:
        original = join_host_port(host, port)
        pinned_host, pinned_port = rewrite_connection_target(original, self.address)
        logger.debug("Dialing %s for %s", join_host_port(pinned_host, pinned_port), original)
        return super().connect_tcp(
            pinned_host,
            pinned_port,
            timeout=timeout,
            local_address=local_address,
            socket_options=socket_options,
        )


class PinnedTransport(DeadlineTransport):
    """DeadlineTransport whose connection pool dials through a PinnedBackend."""

    def __init__(self, address: str, *, timeout: float | None = None, **kwargs: Any):
        super().__init__(backend=PinnedBackend(address, timeout=timeout), **kwargs)


__all__ = [
    "PinnedBackend",
    "PinnedTransport",
    "join_host_port",
    "rewrite_connection_target",
    "split_host_port",
]
