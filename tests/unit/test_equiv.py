# SPDX-FileCopyrightText: 2025 preflight-dns contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

import shlex

import pytest

from preflightdns.equiv import equivalent_command
from preflightdns.errors import ValidationError
from preflightdns.models import Job


def _script(command: str) -> str:
    parts = shlex.split(command)
    assert parts[:2] == ["sh", "-c"]
    assert len(parts) == 3
    return parts[2]


def test_equivalent_command_pins_candidate_curl():
    script = _script(equivalent_command(Job(endpoint="https://app.example.com/health", new="new-lb.example.com")))
    assert "ENDPOINT=https://app.example.com/health" in script
    assert "INPUT=new-lb.example.com" in script
    assert "dig +short A" in script
    assert '--resolve "app.example.com:443:$NEW_IP"' in script
    assert "-m 5" in script
    assert "-X GET" in script
    assert '[ "$NEW" -eq "$ORIG" ]' in script
    assert "-lt" not in script


def test_equivalent_command_keeps_explicit_port_and_request_shape():
    job = Job(
        endpoint="http://app.example.com:8080/api",
        new="10.0.0.1",
        method="post",
        body="{'a': 1}",
        headers={"X-Probe": "it's here"},
        timeout=1.5,
        lower_is_better=True,
    )
    script = _script(equivalent_command(job, follow_redirects=False))
    assert '--resolve "app.example.com:8080:$NEW_IP"' in script
    assert "-X POST" in script
    assert "-m 1.5" in script
    assert "-L" not in script.split()
    assert '[ "$NEW" -lt "$ORIG" ] || [ "$NEW" -eq "$ORIG" ]' in script
    # Both curl invocations carry the same headers and body.
    assert script.count(shlex.quote("X-Probe: it's here")) == 2
    assert script.count(shlex.quote("{'a': 1}")) == 2


def test_equivalent_command_brackets_ipv6_endpoint_host():
    script = _script(equivalent_command(Job(endpoint="http://[2001:db8::1]/", new="10.0.0.1")))
    assert '--resolve "[2001:db8::1]:80:$NEW_IP"' in script


def test_equivalent_command_validates_job():
    with pytest.raises(ValidationError):
        equivalent_command(Job(endpoint="http://x"))


def test_equivalent_command_rejects_unknown_scheme_without_port():
    with pytest.raises(ValidationError, match="unsupported scheme"):
        equivalent_command(Job(endpoint="ftp://files.example.com/", new="10.0.0.1"))
