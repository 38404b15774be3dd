# SPDX-FileCopyrightText: 2025 preflight-dns contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for preflight-dns."""

import os
from dataclasses import dataclass

from .version import __version__

DEFAULT_USER_AGENT = f"preflight-dns/{__version__}"
DEFAULT_TIMEOUT = 5.0
DEFAULT_SERVER_ADDR = ":8080"


def _float_env(name: str, default: float) -> float:
    try:
        value = os.getenv(name)
        return float(value) if value is not None else default
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class PreflightSettings:
    """Probe and server defaults."""

    timeout: float = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT
    allow_redirects: bool = True
    verify_ssl: bool = True
    server_addr: str = DEFAULT_SERVER_ADDR

    @classmethod
    def from_env(cls) -> "PreflightSettings":
        """Create settings from environment variables (evaluated at call time)."""
        timeout = _float_env("PREFLIGHT_DNS_TIMEOUT", cls.timeout)
        if timeout <= 0:
            timeout = cls.timeout
        return cls(
            timeout=timeout,
            user_agent=os.getenv("PREFLIGHT_DNS_USER_AGENT", cls.user_agent),
            allow_redirects=_bool_env("PREFLIGHT_DNS_REDIRECTS", cls.allow_redirects),
            verify_ssl=_bool_env("PREFLIGHT_DNS_VERIFY_SSL", cls.verify_ssl),
            server_addr=os.getenv("PREFLIGHT_DNS_SERVER_ADDR", cls.server_addr),
        )


def load_settings() -> PreflightSettings:
    """Load settings from environment with sensible defaults."""
    return PreflightSettings.from_env()
