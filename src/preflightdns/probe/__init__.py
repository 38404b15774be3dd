# SPDX-FileCopyrightText: 2025 preflight-dns contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Dual probe execution and outcome comparison."""

from .compare import compare, mismatch_reason
from .executor import DualProbeExecutor, build_request

__all__ = ["DualProbeExecutor", "build_request", "compare", "mismatch_reason"]
