# SPDX-FileCopyrightText: 2025 preflight-dns contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Job description consumed by the preflight engine."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from ..config import DEFAULT_TIMEOUT
from ..errors import JobDecodeError, ValidationError
from ..utils.duration import NANOSECONDS_PER_SECOND, format_duration, parse_duration

Headers = dict[str, str]

_STRING_FIELDS = ("endpoint", "new", "method", "body")
_LOWER_IS_BETTER_KEYS = ("lowerIsBetter", "lower_is_better")


@dataclass(frozen=True)
class Job:
    """
    One cutover check: an endpoint, the replacement target it should move to,
    and the request both probes send.

    ``new`` is the replacement target as supplied (hostname or IP literal);
    the resolved address is kept outside the job so the job never changes
    during a run. ``timeout`` is in seconds; ``None`` or ``0`` means "use the
    default". In job documents an integer timeout counts nanoseconds.
    """

    endpoint: str = ""
    new: str = ""
    method: str = ""
    body: str = ""
    headers: Headers = field(default_factory=dict)
    timeout: float | None = None
    lower_is_better: bool = False
    equiv: bool = False

    def __post_init__(self) -> None:
        # Own copy so concurrent runs never share header state.
        object.__setattr__(self, "headers", dict(self.headers or {}))

    @property
    def body_bytes(self) -> bytes:
        return self.body.encode("utf-8") if self.body else b""

    def with_defaults(self, default_timeout: float = DEFAULT_TIMEOUT) -> Job:
        """Return a validated copy with method and timeout defaults applied."""
        if not self.endpoint:
            raise ValidationError("no endpoint provided")
        if not self.new:
            raise ValidationError("no new ip provided")
        if self.timeout is not None and self.timeout < 0:
            raise ValidationError(f"invalid timeout {self.timeout!r}")
        return replace(
            self,
            method=(self.method or "GET").upper(),
            timeout=self.timeout if self.timeout else default_timeout,
        )

    @classmethod
    def from_mapping(cls, data: Any) -> Job:
        """
        Decode the collaborator-facing job shape (CLI, job file or JSON body).

        Missing fields are left empty for ``with_defaults`` to reject; values of
        the wrong type raise JobDecodeError.
        """
        if not isinstance(data, Mapping):
            raise JobDecodeError(f"job must be an object, got {type(data).__name__}")

        values: dict[str, Any] = {}
        for name in _STRING_FIELDS:
            raw = data.get(name)
            if raw is None:
                continue
            if not isinstance(raw, str):
                raise JobDecodeError(f"{name}: expected string, got {type(raw).__name__}")
            values[name] = raw

        values["headers"] = _decode_headers(data.get("headers"))

        if data.get("timeout") is not None:
            values["timeout"] = _decode_timeout(data["timeout"])

        for key in _LOWER_IS_BETTER_KEYS:
            if key in data and data[key] is not None:
                values["lower_is_better"] = _decode_bool(key, data[key])
                break
        if data.get("equiv") is not None:
            values["equiv"] = _decode_bool("equiv", data["equiv"])

        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        return {
            "endpoint": self.endpoint,
            "new": self.new,
            "method": self.method,
            "body": self.body,
            "headers": dict(self.headers),
            "timeout": format_duration(self.timeout) if self.timeout is not None else None,
            "lowerIsBetter": self.lower_is_better,
            "equiv": self.equiv,
        }


def _decode_headers(raw: Any) -> Headers:
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise JobDecodeError(f"headers: expected object, got {type(raw).__name__}")
    headers: Headers = {}
    for key, value in raw.items():
        if not isinstance(key, str) or not key:
            raise JobDecodeError(f"headers: invalid header name {key!r}")
        if value is None:
            value = ""
        if isinstance(value, (Mapping, list, tuple, set)):
            raise JobDecodeError(f"headers: value for {key!r} must be a string")
        headers[key] = str(value)
    return headers


def _decode_timeout(raw: Any) -> float:
    # Integers count nanoseconds; strings are durations such as "5s".
    if isinstance(raw, int) and not isinstance(raw, bool):
        if raw < 0:
            raise JobDecodeError(f"timeout: invalid duration {raw!r}")
        return raw / NANOSECONDS_PER_SECOND
    if isinstance(raw, float):
        raise JobDecodeError(f"timeout: expected integer nanoseconds or a duration string, got {raw!r}")
    try:
        return parse_duration(raw)
    except ValueError as exc:
        raise JobDecodeError(f"timeout: {exc}") from exc


def _decode_bool(name: str, raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    raise JobDecodeError(f"{name}: expected boolean, got {type(raw).__name__}")


__all__ = ["Headers", "Job"]
