#!/usr/bin/env python3
"""
airtable-diag: check Airtable credentials and connectivity.

  airtable-diag probe       one read-only request, classified report
  airtable-diag check-env   show which settings were loaded
"""

import argparse
import logging
import sys
from typing import Any, Optional, Sequence

import config
import diagnostics
import report
from diagnostics import ProbeEndpoint


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--env-file", help="Path to a .env file (default: search from the current directory)")
    parser.add_argument("--log-level", help="Logging level (default: AIRTABLE_DIAG_LOG_LEVEL or WARNING)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="airtable-diag", description="Airtable connectivity diagnostics")
    sub = parser.add_subparsers(dest="cmd")

    probe = sub.add_parser("probe", help="Probe the Airtable API once and report the outcome")
    _add_common(probe)
    probe.add_argument("--target", help="Table name to look for (default: AIRTABLE_TARGET_TABLE or 'Content Pipeline')")
    probe.add_argument(
        "--endpoint",
        choices=[e.value for e in ProbeEndpoint],
        help="Endpoint to probe: base metadata (tables) or first page of the target table (records)",
    )
    probe.add_argument("--page-size", type=int, help="Records to fetch with --endpoint records (1-5)")
    probe.add_argument("--view", help="View to read with --endpoint records (e.g. 'Grid view')")
    probe.add_argument("--timeout", type=float, help="Request timeout in seconds")
    probe.add_argument("--require-target", action="store_true", help="Fail if the target table is not found")

    check_env = sub.add_parser("check-env", help="Show which Airtable settings are loaded (secrets masked)")
    _add_common(check_env)
    return parser


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def probe_command(args, settings: config.Settings, session: Optional[Any] = None) -> int:
    credentials = settings.credentials()
    target = settings.AIRTABLE_TARGET_TABLE
    endpoint = settings.probe_endpoint

    print("=== Airtable Connectivity Diagnostic ===")
    for line in report.credential_summary(credentials):
        print(line)
    print(f"\nProbing {endpoint.value} endpoint...")

    result = diagnostics.run(
        credentials,
        target,
        session=session,
        endpoint=endpoint,
        page_size=settings.page_size,
        timeout_s=settings.timeout_s,
        api_url=settings.AIRTABLE_API_URL,
        name_field=settings.AIRTABLE_NAME_FIELD,
        view=settings.AIRTABLE_VIEW,
    )

    # records probe reads the target table itself
    lookup = None
    if endpoint is ProbeEndpoint.TABLES and result.ok:
        lookup = diagnostics.find_named_resource(result, target)

    for line in report.render_result(result, target, lookup):
        print(line)

    code = report.exit_code(result, lookup, require_target=args.require_target)
    print("DIAG_STATUS=" + ("PASS" if code == report.EXIT_OK else "FAIL"))
    return code


def check_env_command(args, settings: config.Settings) -> int:
    for line in report.render_env(settings):
        print(line)
    credentials = settings.credentials()
    if credentials.access_token.strip() and credentials.resource_id.strip():
        print("\nAll required vars present? True")
        return report.EXIT_OK
    print("\nAll required vars present? False")
    return report.EXIT_MISSING_CONFIG


def main(argv: Optional[Sequence[str]] = None, session: Optional[Any] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.cmd is None:
        parser.print_help()
        return report.EXIT_MISSING_CONFIG

    overrides = {}
    if args.log_level:
        overrides["log_level"] = args.log_level
    if args.cmd == "probe":
        if args.target:
            overrides["target_table"] = args.target
        if args.endpoint:
            overrides["probe_endpoint"] = args.endpoint
        if args.page_size is not None:
            overrides["page_size"] = args.page_size
        if args.timeout is not None:
            overrides["timeout_s"] = args.timeout
        if args.view:
            overrides["view"] = args.view

    settings = config.load_settings(args.env_file, **overrides)
    try:
        settings.validate()
    except RuntimeError as e:
        print(f"ERROR: {e}")
        return report.EXIT_MISSING_CONFIG

    _setup_logging(settings.LOG_LEVEL)

    if args.cmd == "probe":
        return probe_command(args, settings, session=session)
    return check_env_command(args, settings)


if __name__ == "__main__":
    sys.exit(main())
