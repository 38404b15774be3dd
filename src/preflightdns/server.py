# SPDX-FileCopyrightText: 2025 preflight-dns contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Server mode.

``GET /healthz`` answers 200 with no body. ``POST /`` takes one job as JSON,
runs it and answers 200 on pass, 400 when the body cannot be decoded and
500 with the error text on any run failure.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from flask import Blueprint, Flask, Response, request

from .config import PreflightSettings, load_settings
from .equiv import equivalent_command
from .errors import JobDecodeError, PreflightError
from .models import Job
from .runtime import Preflight

logger = logging.getLogger(__name__)

PreflightFactory = Callable[[], Preflight]


def _empty(status: int) -> Response:
    return Response(b"", status=status)


def create_blueprint(settings: PreflightSettings, preflight_factory: PreflightFactory) -> Blueprint:
    bp = Blueprint("preflight", __name__)

    @bp.get("/healthz")
    def healthz() -> Response:
        return _empty(200)

    @bp.post("/")
    def submit() -> Response:
        payload = request.get_json(force=True, silent=True)
        try:
            if payload is None:
                raise JobDecodeError("request body is not valid JSON")
            job = Job.from_mapping(payload)
        except JobDecodeError as exc:
            logger.error("Error decoding request: %s", exc)
            return _empty(400)

        try:
            if job.equiv:
                command = equivalent_command(
                    job,
                    follow_redirects=settings.allow_redirects,
                    default_timeout=settings.timeout,
                )
                return Response(command, status=200, mimetype="text/plain")
            # A fresh Preflight per request; runs never share state.
            with preflight_factory() as preflight:
                preflight.run(job)
        except PreflightError as exc:
            logger.error("Error running preflight: %s", exc)
            return Response(str(exc), status=500, mimetype="text/plain")
        return _empty(200)

    return bp


def create_app(
    settings: PreflightSettings | None = None,
    preflight_factory: PreflightFactory | None = None,
) -> Flask:
    settings = settings or load_settings()
    if preflight_factory is None:

        def preflight_factory() -> Preflight:
            return Preflight(settings=settings)

    app = Flask(__name__)
    app.register_blueprint(create_blueprint(settings, preflight_factory))
    return app


def parse_listen_addr(addr: str) -> tuple[str, int]:
    """Split a ``host:port`` listen address; an empty host listens on all interfaces."""
    host, sep, port = addr.rpartition(":")
    if not sep or not port.isdigit():
        raise ValueError(f"invalid listen address {addr!r}")
    host = host.strip("[]") or "0.0.0.0"
    return host, int(port)


def serve(addr: str | None = None, settings: PreflightSettings | None = None) -> None:
    settings = settings or load_settings()
    host, port = parse_listen_addr(addr or settings.server_addr)
    logger.info("Listening on %s:%s", host, port)
    create_app(settings).run(host=host, port=port, threaded=True)


__all__ = ["create_app", "create_blueprint", "parse_listen_addr", "serve"]
