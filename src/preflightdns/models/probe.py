# SPDX-FileCopyrightText: 2025 preflight-dns contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Probe outcome and verdict models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class RunStage(str, Enum):
    """Stages of one preflight run, in execution order."""

    INIT = "init"
    RESOLVE_CHECK = "resolve_check"
    PROBE_CURRENT = "probe_current"
    PROBE_CANDIDATE = "probe_candidate"
    COMPARE = "compare"
    DONE = "done"


CURRENT = "current"
CANDIDATE = "candidate"


@dataclass(frozen=True)
class ProbeOutcome:
    """Result of one HTTP exchange; only the status code takes part in comparison."""

    status_code: int
    target: str = CURRENT
    reason_phrase: str = ""
    connect_to: str | None = None


@dataclass(frozen=True)
class Verdict:
    """
    Outcome of a run. For an ``equiv`` job no probe is sent: both statuses
    stay 0 and ``command`` holds the equivalent shell command.
    """

    passed: bool
    current_status: int
    candidate_status: int
    lower_is_better: bool = False
    reason: str = ""
    command: str = ""

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "passed": self.passed,
            "current_status": self.current_status,
            "candidate_status": self.candidate_status,
            "lower_is_better": self.lower_is_better,
            "reason": self.reason,
        }
        if self.command:
            data["command"] = self.command
        return data


__all__ = ["CANDIDATE", "CURRENT", "ProbeOutcome", "RunStage", "Verdict"]
