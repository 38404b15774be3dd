# SPDX-FileCopyrightText: 2025 preflight-dns contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""preflight-dns CLI."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from ..config import PreflightSettings, load_settings
from ..equiv import equivalent_command
from ..errors import PreflightError, TransportError, error_category_to_reason
from ..http import create_default_http_client
from ..loader import load_job_file, parse_header_list
from ..log import DEFAULT_LOG_LEVEL, setup_logging
from ..models import Job
from ..runtime import Preflight
from ..server import serve
from ..utils.duration import format_duration, parse_duration

logger = logging.getLogger("preflightdns")


def _duration_arg(value: str) -> float:
    try:
        return parse_duration(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def build_parser(settings: PreflightSettings | None = None) -> argparse.ArgumentParser:
    settings = settings or PreflightSettings()
    parser = argparse.ArgumentParser(
        prog="preflight-dns",
        description="Check that an endpoint answers the same when pinned to a new address before cutting DNS over",
    )
    parser.add_argument("--endpoint", default="", help="endpoint to check")
    parser.add_argument("--new", default="", help="new hostname/ip to use")
    parser.add_argument("--method", default="GET", help="method to use")
    parser.add_argument("--body", default="", help="body to send")
    parser.add_argument("--headers", default="", help="headers to send. comma separated list of key=value")
    parser.add_argument(
        "--timeout",
        type=_duration_arg,
        default=settings.timeout,
        help=f"timeout for requests (default {format_duration(settings.timeout)})",
    )
    parser.add_argument(
        "--lib",
        action="store_true",
        help="lower is better. default is exact status code match.",
    )
    parser.add_argument("--config", help="job file (YAML or JSON) to use instead of flags")
    parser.add_argument("--equiv", action="store_true", help="print sh equivalent command")
    parser.add_argument("--server", action="store_true", help="run in server mode")
    parser.add_argument("--server-addr", default=settings.server_addr, help="server address to listen on")
    parser.add_argument("--log-level", default=DEFAULT_LOG_LEVEL, help="log level")
    parser.add_argument(
        "--ignore-ssl-errors",
        action="store_true",
        help="Skip TLS verification (useful for lab/self-signed targets)",
    )
    parser.add_argument("--json", action="store_true", help="Output the verdict as JSON")
    return parser


def job_from_args(args: argparse.Namespace) -> Job:
    if args.config:
        return load_job_file(args.config)
    return Job(
        endpoint=args.endpoint,
        new=args.new,
        method=args.method,
        body=args.body,
        headers=parse_header_list(args.headers),
        timeout=args.timeout,
        lower_is_better=args.lib,
        equiv=args.equiv,
    )


def main(argv: list[str] | None = None) -> int:
    settings: PreflightSettings = load_settings()
    parser = build_parser(settings)
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    if args.ignore_ssl_errors:
        settings.verify_ssl = False

    if args.server:
        serve(args.server_addr, settings)
        return 0

    try:
        job = job_from_args(args)
        if job.equiv or args.equiv:
            print(equivalent_command(job, follow_redirects=settings.allow_redirects, default_timeout=settings.timeout))
            return 0
        with Preflight(http_client=create_default_http_client(settings), settings=settings) as preflight:
            verdict = preflight.run(job)
    except PreflightError as exc:
        logger.error("error running preflight: %s", exc)
        if args.json:
            payload = {"passed": False, "error": str(exc), "stage": exc.stage.value if exc.stage else None}
            if isinstance(exc, TransportError):
                payload["category"] = exc.category.value
                payload["hint"] = error_category_to_reason(exc.category)
            json.dump(payload, sys.stdout, indent=2, sort_keys=True)
            sys.stdout.write("\n")
        return 1

    if args.json:
        json.dump(verdict.to_dict(), sys.stdout, indent=2, sort_keys=True)
        sys.stdout.write("\n")
    else:
        print("passed")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
