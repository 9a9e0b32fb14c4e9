# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HealthGate CLI."""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from ..config import DEFAULT_TARGET, GateSettings, HttpSettings, load_gate_settings, load_http_settings
from ..errors import ValidationError
from ..gate import AttemptLog, CancellationToken, StreamReporter, fanout, install_signal_handlers
from ..http import create_default_http_client
from ..log import setup_logging
from ..models import GateConfig, RunOutcome, RunResult
from ..models.report import EXIT_VALIDATION
from ..predicates import SuccessPredicate, body_contains, parse_status_spec, status_in
from ..runtime import HealthGate


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="healthgate",
        description="Wait until an HTTP readiness endpoint reports healthy, within a bounded retry budget",
    )
    parser.add_argument("target", nargs="?", default=DEFAULT_TARGET, help=f"URL to probe (default: {DEFAULT_TARGET})")
    parser.add_argument("--max-attempts", type=int, default=None, help="Attempt budget (default: 30)")
    parser.add_argument("--delay", type=float, default=None, help="Seconds to wait after a failed attempt (default: 2)")
    parser.add_argument("--timeout", type=float, default=None, help="Per-attempt timeout in seconds (default: 10)")
    parser.add_argument("--deadline", type=float, default=None, help="Overall time budget in seconds")
    parser.add_argument(
        "--accept-status",
        default=None,
        help='Status codes counted as healthy, e.g. "200-299,304" (default: 200-299)',
    )
    parser.add_argument("--expect-body", default=None, help="Text that must appear in the response body")
    parser.add_argument("--method", default="GET", help="HTTP method (default: GET)")
    parser.add_argument(
        "--header",
        action="append",
        default=[],
        metavar="NAME:VALUE",
        help="Extra request header (repeatable)",
    )
    parser.add_argument("--attempt-log", default=None, metavar="PATH", help="Append one line per attempt to PATH")
    parser.add_argument("--json", action="store_true", help="Print the run result as JSON on stdout")
    parser.add_argument("--quiet", action="store_true", help="Suppress per-attempt progress lines")
    parser.add_argument(
        "--ignore-ssl-errors",
        action="store_true",
        help="Skip TLS verification (useful for lab/self-signed targets)",
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default: HEALTHGATE_LOG_LEVEL or WARNING)")
    return parser


def _parse_headers(raw_headers: list[str]) -> dict[str, str]:
    headers: dict[str, str] = {}
    for raw in raw_headers:
        name, sep, value = raw.partition(":")
        if not sep or not name.strip():
            raise ValidationError(f"invalid header {raw!r}; expected NAME:VALUE", field="headers")
        headers[name.strip()] = value.strip()
    return headers


def _build_predicate(args: argparse.Namespace, settings: GateSettings) -> SuccessPredicate:
    predicate = status_in(parse_status_spec(args.accept_status or settings.accept_status))
    if args.expect_body:
        predicate = body_contains(args.expect_body, base=predicate)
    return predicate


def build_config(
    args: argparse.Namespace,
    settings: GateSettings,
    cancellation: CancellationToken | None = None,
) -> GateConfig:
    """Merge CLI flags over env-backed settings. Raises ValidationError on bad input."""
    config = GateConfig.from_settings(
        settings,
        max_attempts=args.max_attempts,
        inter_attempt_delay=args.delay,
        per_attempt_timeout=args.timeout,
        deadline=args.deadline,
        success_predicate=_build_predicate(args, settings),
        cancellation=cancellation,
        method=args.method,
        headers=_parse_headers(args.header),
    )
    config.validate()
    return config


def _print_json(data: dict[str, Any] | Any) -> None:
    payload = data.to_dict() if hasattr(data, "to_dict") else data
    json.dump(payload, sys.stdout, indent=2, sort_keys=True)
    sys.stdout.write("\n")


def _print_summary(result: RunResult) -> None:
    if result.final_outcome == RunOutcome.SUCCESS:
        print("Healthy!", file=sys.stderr)
    elif result.final_outcome == RunOutcome.EXHAUSTED_RETRIES:
        print(f"Service not healthy. {result.reason}", file=sys.stderr)
    elif result.final_outcome == RunOutcome.CANCELLED:
        print(f"Cancelled: {result.reason}", file=sys.stderr)
    else:
        print(f"Error: {result.reason}", file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    http_settings: HttpSettings = load_http_settings()
    if args.ignore_ssl_errors:
        http_settings.verify_ssl = False

    token = CancellationToken()
    try:
        config = build_config(args, load_gate_settings(), token)
    except ValidationError as exc:
        print(f"healthgate: {exc}", file=sys.stderr)
        return EXIT_VALIDATION

    attempt_log = None
    if args.attempt_log:
        try:
            attempt_log = AttemptLog(args.attempt_log).open()
        except OSError as exc:
            print(f"healthgate: cannot open attempt log {args.attempt_log}: {exc}", file=sys.stderr)
            return EXIT_VALIDATION
    reporter = fanout(None if args.quiet else StreamReporter(), attempt_log)

    if not args.quiet:
        print(f"Waiting for {args.target} ...", file=sys.stderr)

    restore_signals = install_signal_handlers(token)
    try:
        with HealthGate(http_client=create_default_http_client(http_settings)) as gate:
            result = gate.probe(args.target, config, reporter=reporter)
    finally:
        restore_signals()
        if attempt_log is not None:
            attempt_log.close()

    if args.json:
        _print_json(result)
    if not args.quiet:
        _print_summary(result)

    return result.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
