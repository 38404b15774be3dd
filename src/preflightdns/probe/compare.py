# SPDX-FileCopyrightText: 2025 preflight-dns contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Pass/fail policy applied to the current and candidate outcomes."""

from __future__ import annotations

from ..models.probe import ProbeOutcome, Verdict


def mismatch_reason(current_status: int, candidate_status: int) -> str:
    return f"failed - expected: {current_status}, got: {candidate_status}"


def compare(current: ProbeOutcome, candidate: ProbeOutcome, lower_is_better: bool = False) -> Verdict:
    """
    Decide whether the candidate outcome is acceptable.

    With ``lower_is_better`` a strictly lower candidate status passes. Equal
    statuses pass regardless of the flag; both checks are always evaluated.
    """
    passed = False
    if lower_is_better and candidate.status_code < current.status_code:
        passed = True
    if current.status_code == candidate.status_code:
        passed = True

    return Verdict(
        passed=passed,
        current_status=current.status_code,
        candidate_status=candidate.status_code,
        lower_is_better=lower_is_better,
        reason="" if passed else mismatch_reason(current.status_code, candidate.status_code),
    )


__all__ = ["compare", "mismatch_reason"]
