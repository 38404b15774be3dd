# SPDX-FileCopyrightText: 2025 preflight-dns contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Replacement-target resolution.

Turns the user-supplied replacement target into the address the candidate
probe connects to. Lookups are delegated to the host resolver through
``socket.getaddrinfo``; only IP-literal detection happens here.
"""

from __future__ import annotations

import ipaddress
import logging
import socket
from collections.abc import Callable, Sequence
from typing import Any

from .errors import ResolutionError, ValidationError

logger = logging.getLogger(__name__)

LOCALHOST = "localhost"
LOCALHOST_ADDRESS = "127.0.0.1"

Lookup = Callable[..., Sequence[tuple[Any, ...]]]


def is_ip_literal(value: str) -> bool:
    """True for a plain IPv4 or IPv6 address; zone-scoped forms like ``fe80::1%eth0`` are looked up instead."""
    if "%" in value:
        return False
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return False
    return True


def _default_lookup(host: str) -> Sequence[tuple[Any, ...]]:
    return socket.getaddrinfo(host, None, type=socket.SOCK_STREAM)


class AddressResolver:
    """Resolve a replacement target to an address usable as a connection override."""

    def __init__(self, lookup: Lookup | None = None):
        self._lookup = lookup or _default_lookup

    def resolve(self, target: str) -> str:
        if not target:
            raise ValidationError("no new ip provided")
        if target == LOCALHOST:
            return LOCALHOST_ADDRESS
        if is_ip_literal(target):
            return target

        logger.debug("Looking up %s", target)
        try:
            records = self._lookup(target)
        except (OSError, UnicodeError) as exc:
            # getaddrinfo raises UnicodeError for names IDNA cannot encode.
            raise ResolutionError(f"lookup {target}: {exc}") from exc

        for record in records:
            family, sockaddr = record[0], record[4]
            if family == socket.AF_INET:
                address = str(sockaddr[0])
                logger.debug("Resolved %s to %s", target, address)
                return address
        raise ResolutionError(f"no IPv4 address found for {target}")


def resolve_address(target: str, *, lookup: Lookup | None = None) -> str:
    """Convenience wrapper around AddressResolver.resolve."""
    return AddressResolver(lookup).resolve(target)


__all__ = ["AddressResolver", "LOCALHOST_ADDRESS", "is_ip_literal", "resolve_address"]
