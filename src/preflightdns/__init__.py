# SPDX-FileCopyrightText: 2025 preflight-dns contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
preflight-dns package entrypoint.

Validates a DNS cutover before it happens: the same request is sent once
through the endpoint's current resolution and once pinned to the
replacement address, and the two status codes are compared. HTTP behavior
is abstracted behind an injectable client interface, and domain objects are
modeled with typed dataclasses.
"""

from .config import PreflightSettings, load_settings
from .equiv import equivalent_command
from .errors import (
    ConnectionTargetError,
    ErrorCategory,
    JobDecodeError,
    MismatchError,
    PreflightError,
    ResolutionError,
    TransportError,
    ValidationError,
)
from .http import HttpClient, HttpResponse, HttpxClient, ProbeRequest, create_default_http_client
from .loader import load_job_file, parse_header_list
from .log import setup_logging
from .models import Job, ProbeOutcome, RunStage, Verdict
from .probe import DualProbeExecutor, compare
from .resolver import AddressResolver, resolve_address
from .runtime import Preflight, run
from .version import __version__

__all__ = [
    "AddressResolver",
    "ConnectionTargetError",
    "DualProbeExecutor",
    "ErrorCategory",
    "HttpClient",
    "HttpResponse",
    "HttpxClient",
    "Job",
    "JobDecodeError",
    "MismatchError",
    "Preflight",
    "PreflightError",
    "PreflightSettings",
    "ProbeOutcome",
    "ProbeRequest",
    "ResolutionError",
    "RunStage",
    "TransportError",
    "ValidationError",
    "Verdict",
    "compare",
    "create_default_http_client",
    "equivalent_command",
    "load_job_file",
    "load_settings",
    "parse_header_list",
    "resolve_address",
    "run",
    "setup_logging",
    "__version__",
]
