# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import json
import signal

from healthgate.cli import main as cli_main
from healthgate.cli.main import build_config, build_parser
from healthgate.config import GateSettings
from healthgate.gate.cancellation import CancellationToken, install_signal_handlers
from healthgate.http.adapters import SequenceHttpClient
from healthgate.http.models import HttpResponse
from healthgate.models import GateConfig, RunOutcome
from healthgate.runtime import HealthGate, probe

OK = HttpResponse(ok=True, status_code=200, text='{"status":"UP"}')
UNAVAILABLE = HttpResponse(ok=True, status_code=503)


def test_build_parser_defaults():
    args = build_parser().parse_args([])
    assert args.target == "http://localhost:3000/health"
    assert args.max_attempts is None
    assert args.header == []

    args = build_parser().parse_args(["http://svc/health", "--max-attempts", "5", "--delay", "0.5", "--header", "X-A: 1"])
    assert args.max_attempts == 5
    assert args.delay == 0.5
    assert args.header == ["X-A: 1"]


def test_build_config_merges_flags_over_settings():
    args = build_parser().parse_args(
        ["http://svc/health", "--max-attempts", "4", "--accept-status", "200,204", "--expect-body", "UP", "--header", "X-A: 1"]
    )
    token = CancellationToken()

    cfg = build_config(args, GateSettings(inter_attempt_delay=0.25), token)

    assert cfg.max_attempts == 4
    assert cfg.inter_attempt_delay == 0.25
    assert cfg.cancellation is token
    assert dict(cfg.headers) == {"X-A": "1"}
    assert cfg.success_predicate(HttpResponse(ok=True, status_code=204, text="UP")) is True
    assert cfg.success_predicate(HttpResponse(ok=True, status_code=200, text="DOWN")) is False


def test_health_gate_facade_runs_and_closes_client():
    client = SequenceHttpClient([UNAVAILABLE, OK])

    with HealthGate(http_client=client) as gate:
        result = gate.probe("http://svc/health", GateConfig(max_attempts=3, inter_attempt_delay=0))

    assert result.final_outcome == RunOutcome.SUCCESS
    assert result.attempt_count == 2
    assert client.closed is True


def test_probe_function_leaves_injected_client_open():
    client = SequenceHttpClient([OK])
    result = probe("http://svc/health", http_client=client)
    assert result.ok is True
    assert client.closed is False


def test_independent_gates_do_not_share_state():
    healthy = HealthGate(http_client=SequenceHttpClient([OK]))
    broken = HealthGate(http_client=SequenceHttpClient([UNAVAILABLE]))
    config = GateConfig(max_attempts=2, inter_attempt_delay=0)

    assert broken.probe("http://a/health", config).final_outcome == RunOutcome.EXHAUSTED_RETRIES
    assert healthy.probe("http://b/health", config).final_outcome == RunOutcome.SUCCESS


def _patch_client(monkeypatch, client):
    monkeypatch.setattr(cli_main, "create_default_http_client", lambda settings=None: client)


def test_cli_success_exit_code_and_progress(monkeypatch, capsys):
    client = SequenceHttpClient([UNAVAILABLE, OK])
    _patch_client(monkeypatch, client)

    code = cli_main.main(["http://svc/health", "--max-attempts", "3", "--delay", "0"])

    err = capsys.readouterr().err
    assert code == 0
    assert "Waiting for http://svc/health ..." in err
    assert "not ready (1/3): HTTP 503" in err
    assert "ready (2/3): HTTP 200" in err
    assert "Healthy!" in err
    assert client.closed is True


def test_cli_exhausted_json_output(monkeypatch, capsys):
    _patch_client(monkeypatch, SequenceHttpClient([UNAVAILABLE]))

    code = cli_main.main(["http://svc/health", "--max-attempts", "2", "--delay", "0", "--json", "--quiet"])

    captured = capsys.readouterr()
    payload = json.loads(captured.out)
    assert code == 1
    assert payload["final_outcome"] == "EXHAUSTED_RETRIES"
    assert payload["attempt_count"] == 2
    assert [a["sequence_number"] for a in payload["attempts"]] == [1, 2]
    assert payload["exit_code"] == 1
    assert captured.err == ""


def test_cli_rejects_zero_attempts_without_probing(monkeypatch, capsys):
    client = SequenceHttpClient([OK])
    _patch_client(monkeypatch, client)

    code = cli_main.main(["http://svc/health", "--max-attempts", "0"])

    assert code == 2
    assert client.calls == 0
    assert "max_attempts must be positive" in capsys.readouterr().err


def test_cli_rejects_bad_status_spec_and_header(monkeypatch, capsys):
    _patch_client(monkeypatch, SequenceHttpClient([OK]))

    assert cli_main.main(["http://svc/health", "--accept-status", "oops"]) == 2
    assert cli_main.main(["http://svc/health", "--header", "no-colon"]) == 2
    assert "healthgate:" in capsys.readouterr().err


def test_cli_invalid_target_exit_code(monkeypatch, capsys):
    client = SequenceHttpClient([OK])
    _patch_client(monkeypatch, client)

    code = cli_main.main(["not a url", "--quiet", "--json"])

    payload = json.loads(capsys.readouterr().out)
    assert code == 2
    assert payload["error_category"] == "INVALID_TARGET"
    assert client.calls == 0


def test_cli_writes_attempt_log(monkeypatch, tmp_path):
    _patch_client(monkeypatch, SequenceHttpClient([UNAVAILABLE, OK]))
    log_path = tmp_path / "attempts.log"

    code = cli_main.main(["http://svc/health", "--delay", "0", "--quiet", "--attempt-log", str(log_path)])

    lines = log_path.read_text(encoding="utf-8").splitlines()
    assert code == 0
    assert len(lines) == 2
    assert "attempt=1/30 status=503 outcome=TRANSIENT_FAILURE" in lines[0]
    assert "attempt=2/30 status=200 outcome=SUCCESS" in lines[1]


def test_cli_rejects_non_finite_delay(monkeypatch, capsys):
    client = SequenceHttpClient([OK])
    _patch_client(monkeypatch, client)

    code = cli_main.main(["http://svc/health", "--max-attempts", "2", "--delay", "inf"])

    assert code == 2
    assert client.calls == 0
    assert "finite" in capsys.readouterr().err


def test_cli_reports_unopenable_attempt_log(monkeypatch, capsys, tmp_path):
    client = SequenceHttpClient([OK])
    _patch_client(monkeypatch, client)

    code = cli_main.main(["http://svc/health", "--attempt-log", str(tmp_path)])

    assert code == 2
    assert client.calls == 0
    assert "cannot open attempt log" in capsys.readouterr().err


def test_signal_handlers_cancel_token_and_restore():
    token = CancellationToken()
    before = signal.getsignal(signal.SIGTERM)

    restore = install_signal_handlers(token, signals=(signal.SIGTERM,))
    try:
        handler = signal.getsignal(signal.SIGTERM)
        handler(signal.SIGTERM, None)
    finally:
        restore()

    assert token.cancelled is True
    assert token.reason == "Received SIGTERM"
    assert signal.getsignal(signal.SIGTERM) is before
