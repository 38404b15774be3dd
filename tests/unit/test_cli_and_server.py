# SPDX-FileCopyrightText: 2025 preflight-dns contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

import json

import pytest

from preflightdns.cli import main as cli_main
from preflightdns.cli.main import build_parser, job_from_args
from preflightdns.config import PreflightSettings
from preflightdns.errors import ErrorCategory, MismatchError, TransportError
from preflightdns.http.models import HttpResponse
from preflightdns.models import Verdict
from preflightdns.resolver import AddressResolver
from preflightdns.runtime import Preflight
from preflightdns.server import create_app, parse_listen_addr


class FixedStatusClient:
    def __init__(self, current=200, candidate=200):
        self.current = current
        self.candidate = candidate
        self.calls = 0

    def request(self, request):
        self.calls += 1
        return HttpResponse(status_code=self.candidate if request.connect_to else self.current)

    def close(self):
        return None


def test_build_parser_defaults():
    args = build_parser(PreflightSettings(timeout=5.0)).parse_args([])
    assert args.method == "GET"
    assert args.timeout == 5.0
    assert args.server_addr == ":8080"
    assert args.lib is False


def test_job_from_args_parses_flags():
    args = build_parser().parse_args(
        [
            "--endpoint",
            "https://app.example.com/health",
            "--new",
            "new-lb.example.com",
            "--method",
            "POST",
            "--body",
            "{}",
            "--headers",
            "X-Probe=1,Authorization=Bearer t",
            "--timeout",
            "250ms",
            "--lib",
        ]
    )
    job = job_from_args(args)
    assert job.endpoint == "https://app.example.com/health"
    assert job.headers == {"X-Probe": "1", "Authorization": "Bearer t"}
    assert job.timeout == 0.25
    assert job.lower_is_better is True


def test_invalid_timeout_flag_is_rejected(capsys):
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--timeout", "soon"])
    assert "invalid duration" in capsys.readouterr().err


def test_job_from_args_prefers_config_file(tmp_path):
    path = tmp_path / "job.yaml"
    path.write_text("endpoint: http://from-file\nnew: 10.0.0.1\n")
    args = build_parser().parse_args(["--config", str(path), "--endpoint", "http://from-flag"])
    assert job_from_args(args).endpoint == "http://from-file"


def _patch_client(monkeypatch, client):
    monkeypatch.setattr(cli_main, "create_default_http_client", lambda settings=None: client)
    monkeypatch.setattr(cli_main, "load_settings", lambda: PreflightSettings())


def test_cli_main_passes(monkeypatch, capsys):
    client = FixedStatusClient(200, 200)
    _patch_client(monkeypatch, client)
    exit_code = cli_main.main(["--endpoint", "http://app.example.com", "--new", "127.0.0.1"])
    assert exit_code == 0
    assert client.calls == 2
    assert "passed" in capsys.readouterr().out


def test_cli_main_reports_mismatch(monkeypatch, capsys):
    _patch_client(monkeypatch, FixedStatusClient(200, 502))
    exit_code = cli_main.main(["--endpoint", "http://app.example.com", "--new", "127.0.0.1", "--json"])
    assert exit_code == 1
    payload = json.loads(capsys.readouterr().out)
    assert payload["passed"] is False
    assert payload["error"] == "failed - expected: 200, got: 502"
    assert payload["stage"] == "compare"


class TimeoutClient(FixedStatusClient):
    def request(self, request):
        self.calls += 1
        raise TransportError("timed out", category=ErrorCategory.TIMEOUT)


def test_cli_main_json_transport_error_carries_category(monkeypatch, capsys):
    _patch_client(monkeypatch, TimeoutClient())
    exit_code = cli_main.main(["--endpoint", "http://app.example.com", "--new", "127.0.0.1", "--json"])
    assert exit_code == 1
    payload = json.loads(capsys.readouterr().out)
    assert payload["stage"] == "probe_current"
    assert payload["category"] == "TIMEOUT"
    assert payload["hint"] == "Network timeout during probe"


def test_cli_main_json_verdict(monkeypatch, capsys):
    _patch_client(monkeypatch, FixedStatusClient(503, 200))
    exit_code = cli_main.main(["--endpoint", "http://app.example.com", "--new", "localhost", "--lib", "--json"])
    assert exit_code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["passed"] is True
    assert payload["current_status"] == 503
    assert payload["candidate_status"] == 200


def test_cli_main_missing_endpoint_fails_without_requests(monkeypatch):
    client = FixedStatusClient()
    _patch_client(monkeypatch, client)
    assert cli_main.main(["--new", "127.0.0.1"]) == 1
    assert client.calls == 0


def test_cli_main_equiv_prints_command(monkeypatch, capsys):
    client = FixedStatusClient()
    _patch_client(monkeypatch, client)
    exit_code = cli_main.main(["--endpoint", "http://app.example.com", "--new", "10.0.0.1", "--equiv"])
    assert exit_code == 0
    assert capsys.readouterr().out.startswith("sh -c ")
    assert client.calls == 0


def test_cli_main_server_mode(monkeypatch):
    captured = {}
    monkeypatch.setattr(cli_main, "load_settings", lambda: PreflightSettings())
    monkeypatch.setattr(cli_main, "serve", lambda addr, settings: captured.update(addr=addr, settings=settings))
    assert cli_main.main(["--server", "--server-addr", "127.0.0.1:9999", "--ignore-ssl-errors"]) == 0
    assert captured["addr"] == "127.0.0.1:9999"
    assert captured["settings"].verify_ssl is False


class FakePreflight:
    def __init__(self, error=None):
        self.error = error
        self.jobs = []

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):  # noqa: ARG002
        return None

    def run(self, job):
        self.jobs.append(job)
        if self.error is not None:
            raise self.error
        return Verdict(passed=True, current_status=200, candidate_status=200)


def _client_for(preflight_factory):
    app = create_app(PreflightSettings(), preflight_factory=preflight_factory)
    return app.test_client()


def test_healthz_returns_empty_ok():
    resp = _client_for(FakePreflight).get("/healthz")
    assert resp.status_code == 200
    assert resp.data == b""


def test_submit_passing_job():
    fake = FakePreflight()
    resp = _client_for(lambda: fake).post("/", json={"endpoint": "http://x", "new": "10.0.0.1", "timeout": "2s"})
    assert resp.status_code == 200
    assert resp.data == b""
    assert fake.jobs[0].timeout == 2.0


def test_submit_builds_fresh_preflight_per_request():
    built = []

    def factory():
        built.append(FakePreflight())
        return built[-1]

    client = _client_for(factory)
    client.post("/", json={"endpoint": "http://x", "new": "10.0.0.1"})
    client.post("/", json={"endpoint": "http://y", "new": "10.0.0.2"})
    assert len(built) == 2
    assert [p.jobs[0].endpoint for p in built] == ["http://x", "http://y"]


@pytest.mark.parametrize("body", [b"not json", b"[1, 2]", b'{"endpoint": 5}', b"null"])
def test_submit_undecodable_body_is_bad_request(body):
    resp = _client_for(FakePreflight).post("/", data=body, content_type="application/json")
    assert resp.status_code == 400


def test_submit_run_failure_returns_error_text():
    verdict = Verdict(passed=False, current_status=200, candidate_status=404, reason="failed - expected: 200, got: 404")
    resp = _client_for(lambda: FakePreflight(error=MismatchError(verdict))).post(
        "/", json={"endpoint": "http://x", "new": "10.0.0.1"}
    )
    assert resp.status_code == 500
    assert resp.get_data(as_text=True) == "failed - expected: 200, got: 404"


def test_submit_validation_failure_with_real_preflight():
    client = FixedStatusClient()

    def factory():
        return Preflight(http_client=client, resolver=AddressResolver(), settings=PreflightSettings())

    resp = _client_for(factory).post("/", json={"new": "10.0.0.1"})
    assert resp.status_code == 500
    assert resp.get_data(as_text=True) == "no endpoint provided"
    assert client.calls == 0


def test_submit_equiv_job_returns_command():
    fake = FakePreflight()
    resp = _client_for(lambda: fake).post("/", json={"endpoint": "http://x", "new": "10.0.0.1", "equiv": True})
    assert resp.status_code == 200
    assert resp.get_data(as_text=True).startswith("sh -c ")
    assert fake.jobs == []


def test_parse_listen_addr():
    assert parse_listen_addr(":8080") == ("0.0.0.0", 8080)
    assert parse_listen_addr("127.0.0.1:9000") == ("127.0.0.1", 9000)
    assert parse_listen_addr("[::1]:9000") == ("::1", 9000)
    with pytest.raises(ValueError):
        parse_listen_addr("8080")
