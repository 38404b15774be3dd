# SPDX-FileCopyrightText: 2025 preflight-dns contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Duration parsing for job files, CLI flags and JSON payloads."""

from __future__ import annotations

import re
from typing import Any

NANOSECONDS_PER_SECOND = 1_000_000_000

_UNIT_SECONDS: dict[str, float] = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "μs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_COMPONENT_RE = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")
_PLAIN_NUMBER_RE = re.compile(r"^\d+(?:\.\d*)?$|^\.\d+$")


def parse_duration(value: Any) -> float:
    """
    Parse a duration into seconds.

    Accepts numbers (seconds) and Go-style duration strings such as
    ``"5s"``, ``"1m30s"`` or ``"250ms"``. A bare numeric string is read as
    seconds. Raises ValueError on anything else, including negative values.
    """
    if isinstance(value, bool):
        raise ValueError(f"invalid duration {value!r}")
    if isinstance(value, (int, float)):
        if value < 0:
            raise ValueError(f"invalid duration {value!r}")
        return float(value)
    if not isinstance(value, str):
        raise ValueError(f"invalid duration {value!r}")

    raw = value.strip()
    if not raw:
        raise ValueError("invalid duration ''")
    if _PLAIN_NUMBER_RE.match(raw):
        return float(raw)

    total = 0.0
    pos = 0
    for match in _COMPONENT_RE.finditer(raw):
        if match.start() != pos:
            raise ValueError(f"invalid duration {value!r}")
        total += float(match.group(1)) * _UNIT_SECONDS[match.group(2)]
        pos = match.end()
    if pos != len(raw):
        raise ValueError(f"invalid duration {value!r}")
    return total


def format_duration(seconds: float) -> str:
    """Render seconds the way the CLI flag accepts them back (``5s``, ``1.5s``)."""
    if float(seconds).is_integer():
        return f"{int(seconds)}s"
    return f"{seconds:g}s"


__all__ = ["NANOSECONDS_PER_SECOND", "format_duration", "parse_duration"]
