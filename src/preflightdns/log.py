# SPDX-FileCopyrightText: 2025 preflight-dns contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Logging helpers for preflight-dns."""

from __future__ import annotations

import logging
import os

DEFAULT_LOG_LEVEL = (os.getenv("PREFLIGHT_DNS_LOG_LEVEL") or os.getenv("LOG_LEVEL") or "INFO").upper()


def setup_logging(level: str | None = None) -> None:
    """Configure standard logging for CLI/server use."""
    effective_level = (level or DEFAULT_LOG_LEVEL).upper()
    logging.basicConfig(
        level=getattr(logging, effective_level, logging.INFO),
        format="%(levelname)s %(name)s: %(message)s",
    )


__all__ = ["setup_logging"]
