# SPDX-FileCopyrightText: 2025 preflight-dns contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""High-level preflight facade: validate, probe twice, compare."""

from __future__ import annotations

import logging
from contextlib import suppress

from .config import PreflightSettings, load_settings
from .equiv import equivalent_command
from .errors import MismatchError, PreflightError, ValidationError
from .http.client import HttpClient, create_default_http_client
from .models import Job, RunStage, Verdict
from .probe.compare import compare
from .probe.executor import DualProbeExecutor
from .resolver import AddressResolver


class Preflight:
    """
    Runs cutover checks.

    A Preflight keeps no per-run state: the validated job, the resolved
    replacement address and both outcomes live only inside ``run``, so one
    instance may serve sequential runs and each server request builds its own.
    """

    def __init__(
        self,
        http_client: HttpClient | None = None,
        *,
        resolver: AddressResolver | None = None,
        settings: PreflightSettings | None = None,
        logger: logging.Logger | None = None,
    ):
        self.settings = settings or load_settings()
        self.http_client = http_client or create_default_http_client(self.settings)
        self.resolver = resolver or AddressResolver()
        self.logger = logger or logging.getLogger(__name__)

    def run(self, job: Job) -> Verdict:
        """
        Execute one run and return the passing verdict.

        An ``equiv`` job stops after validation and returns a verdict carrying
        the equivalent shell command; nothing is resolved or sent.

        Raises ValidationError, ResolutionError, TransportError or
        MismatchError; each carries the stage it failed in.
        """
        log = logging.LoggerAdapter(self.logger, {"preflight": "dns", "endpoint": job.endpoint})
        stage = RunStage.INIT
        try:
            job = job.with_defaults(self.settings.timeout)
            log.debug("Initialized: %s %s -> %s (timeout %ss)", job.method, job.endpoint, job.new, job.timeout)
            if job.equiv:
                command = equivalent_command(
                    job,
                    follow_redirects=self.settings.allow_redirects,
                    default_timeout=self.settings.timeout,
                )
                log.info("Preflight %s: equivalent command only, no probes sent", job.endpoint)
                return Verdict(passed=True, current_status=0, candidate_status=0, lower_is_better=job.lower_is_better, command=command)

            stage = RunStage.RESOLVE_CHECK
            if not job.new:
                raise ValidationError("no new ip provided")
            executor = DualProbeExecutor(self.http_client, self.resolver, log)

            stage = RunStage.PROBE_CURRENT
            current = executor.probe_current(job)

            stage = RunStage.PROBE_CANDIDATE
            resolved = self.resolver.resolve(job.new)
            candidate = executor.probe_candidate(job, resolved)

            stage = RunStage.COMPARE
            verdict = compare(current, candidate, job.lower_is_better)
            if not verdict.passed:
                raise MismatchError(verdict)
        except PreflightError as exc:
            if exc.stage is None:
                exc.stage = stage
            log.error("Preflight %s failed during %s: %s", job.endpoint, stage.value, exc)
            raise

        log.info("Preflight %s passed (current %s, candidate %s via %s)", job.endpoint, verdict.current_status, verdict.candidate_status, resolved)
        return verdict

    def close(self) -> None:
        with suppress(Exception):
            if hasattr(self.http_client, "close"):
                self.http_client.close()

    def __enter__(self) -> Preflight:
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        self.close()


def run(job: Job, **kwargs) -> Verdict:
    """One-shot run with a fresh Preflight; see Preflight.__init__ for kwargs."""
    with Preflight(**kwargs) as preflight:
        return preflight.run(job)


__all__ = ["Preflight", "run"]
