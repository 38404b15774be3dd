# SPDX-FileCopyrightText: 2025 preflight-dns contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Utility exports."""

from .duration import format_duration, parse_duration

__all__ = [
    "format_duration",
    "parse_duration",
]
