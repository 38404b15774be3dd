# SPDX-FileCopyrightText: 2025 preflight-dns contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Current and candidate probes for one job."""

from __future__ import annotations

import logging

from ..errors import TransportError
from ..http.client import HttpClient
from ..http.models import ProbeRequest
from ..models.job import Job
from ..models.probe import CANDIDATE, CURRENT, ProbeOutcome
from ..resolver import AddressResolver

_default_logger = logging.getLogger(__name__)


def build_request(job: Job, connect_to: str | None = None) -> ProbeRequest:
    """Request shared by both probes; only ``connect_to`` differs between them."""
    return ProbeRequest(
        url=job.endpoint,
        method=job.method or "GET",
        headers=dict(job.headers),
        body=job.body_bytes,
        timeout=job.timeout,
        connect_to=connect_to,
    )


class DualProbeExecutor:
    """
    Issue the current probe (normal resolution) and the candidate probe
    (connection forced to the resolved replacement address).

    Errors from the HTTP client propagate unchanged; nothing is retried.
    """

    def __init__(
        self,
        http_client: HttpClient,
        resolver: AddressResolver | None = None,
        logger: logging.Logger | logging.LoggerAdapter | None = None,
    ):
        self.http_client = http_client
        self.resolver = resolver or AddressResolver()
        self.logger = logger or _default_logger

    def probe_current(self, job: Job) -> ProbeOutcome:
        self.logger.debug("Probing %s %s via normal resolution", job.method, job.endpoint)
        return self._send(build_request(job), CURRENT)

    def probe_candidate(self, job: Job, resolved: str | None = None) -> ProbeOutcome:
        if resolved is None:
            resolved = self.resolver.resolve(job.new)
            self.logger.debug("Replacement target %s resolved to %s", job.new, resolved)
        self.logger.debug("Probing %s %s via %s", job.method, job.endpoint, resolved)
        return self._send(build_request(job, connect_to=resolved), CANDIDATE)

    def _send(self, request: ProbeRequest, target: str) -> ProbeOutcome:
        try:
            response = self.http_client.request(request)
        except TransportError as exc:
            self.logger.error("Error making %s request: %s", target, exc)
            raise
        outcome = ProbeOutcome(
            status_code=response.status_code,
            target=target,
            reason_phrase=response.reason_phrase,
            connect_to=request.connect_to,
        )
        self.logger.debug("Got %s state: %s %s", target, outcome.status_code, outcome.reason_phrase)
        return outcome


__all__ = ["DualProbeExecutor", "build_request"]
