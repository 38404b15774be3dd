# SPDX-FileCopyrightText: 2025 preflight-dns contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Dataclass exports for preflight-dns."""

from ..http.models import HttpResponse, ProbeRequest
from .job import Headers, Job
from .probe import CANDIDATE, CURRENT, ProbeOutcome, RunStage, Verdict

__all__ = [
    "CANDIDATE",
    "CURRENT",
    "Headers",
    "HttpResponse",
    "Job",
    "ProbeOutcome",
    "ProbeRequest",
    "RunStage",
    "Verdict",
]
