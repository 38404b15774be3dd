# SPDX-FileCopyrightText: 2025 preflight-dns contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Equivalent shell command.

Renders a job as an ``sh -c`` one-liner that performs the same check with
``dig`` and two ``curl`` calls, for running where the tool is not installed.
The replacement target is resolved by the script itself, so the job is used
exactly as supplied.
"""

from __future__ import annotations

import shlex
from urllib.parse import urlsplit

from .config import DEFAULT_TIMEOUT
from .errors import ValidationError
from .models.job import Job

_DEFAULT_PORTS = {"http": 80, "https": 443}

_RESOLVE_SNIPPET = (
    'case "$INPUT" in '
    "localhost) NEW_IP=127.0.0.1 ;; "
    '*:*) NEW_IP="[$INPUT]" ;; '
    '*[!0-9.]*) NEW_IP=$(dig +short A "$INPUT" | grep -E "^[0-9]+(\\.[0-9]+){3}$" | head -n1) ;; '
    "*) NEW_IP=$INPUT ;; "
    "esac"
)


def _resolve_key(endpoint: str) -> str:
    parts = urlsplit(endpoint)
    scheme = parts.scheme.lower()
    host = parts.hostname
    if not host:
        raise ValidationError(f"endpoint {endpoint!r} has no host")
    try:
        port = parts.port
    except ValueError as exc:
        raise ValidationError(f"endpoint {endpoint!r}: {exc}") from exc
    if port is None:
        if scheme not in _DEFAULT_PORTS:
            raise ValidationError(f"endpoint {endpoint!r}: unsupported scheme {parts.scheme!r}")
        port = _DEFAULT_PORTS[scheme]
    if ":" in host:
        host = f"[{host}]"
    return f"{host}:{port}"


def _curl_args(job: Job, follow_redirects: bool) -> str:
    args = ["curl", "-s", "-o", "/dev/null", "-m", f"{job.timeout:g}", "-w", "%{http_code}", "-X", job.method]
    if follow_redirects:
        args.append("-L")
    for name, value in job.headers.items():
        args.extend(["-H", f"{name}: {value}"])
    if job.body:
        args.extend(["--data-binary", job.body])
    return " ".join(shlex.quote(arg) for arg in args)


def equivalent_command(job: Job, *, follow_redirects: bool = True, default_timeout: float = DEFAULT_TIMEOUT) -> str:
    """Return the ``sh -c '...'`` command equivalent to running ``job``."""
    job = job.with_defaults(default_timeout)
    resolve_key = _resolve_key(job.endpoint)
    curl = _curl_args(job, follow_redirects)

    if job.lower_is_better:
        check = '[ "$NEW" -lt "$ORIG" ] || [ "$NEW" -eq "$ORIG" ]'
    else:
        check = '[ "$NEW" -eq "$ORIG" ]'

    statements = [
        f"ENDPOINT={shlex.quote(job.endpoint)}",
        f"INPUT={shlex.quote(job.new)}",
        _RESOLVE_SNIPPET,
        'if [ -z "$NEW_IP" ]; then echo "no IPv4 address found for $INPUT" >&2; exit 1; fi',
        f'ORIG=$({curl} "$ENDPOINT")',
        f'NEW=$({curl} --resolve "{resolve_key}:$NEW_IP" "$ENDPOINT")',
        f'if {check}; then echo "passed"; else echo "failed - expected: $ORIG, got: $NEW"; exit 1; fi',
    ]
    return f"sh -c {shlex.quote('; '.join(statements))}"


__all__ = ["equivalent_command"]
