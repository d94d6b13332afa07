"""
Text rendering of diagnostic results and the exit-code policy for the CLI.
Nothing here touches the network or the environment.
"""

from __future__ import annotations

from typing import List, Optional

from diagnostics import (
    Credentials,
    ErrorClassification,
    LookupResult,
    ProbeEndpoint,
    ProbeFailure,
    ProbeResult,
    ProbeSuccess,
)
from hints import hints_for
from utils import mask_secret

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_MISSING_CONFIG = 2

_MISSING = (ErrorClassification.MISSING_TOKEN, ErrorClassification.MISSING_RESOURCE_ID)

_TITLES = {
    ErrorClassification.MISSING_TOKEN: "No personal access token found",
    ErrorClassification.MISSING_RESOURCE_ID: "No base ID found",
    ErrorClassification.UNAUTHORIZED: "Authentication failed",
    ErrorClassification.FORBIDDEN: "Access forbidden",
    ErrorClassification.NOT_FOUND: "Base or table not found",
    ErrorClassification.NETWORK_UNREACHABLE: "No response received from Airtable",
    ErrorClassification.UNKNOWN: "Unexpected response from Airtable",
}


def credential_summary(credentials: Credentials) -> List[str]:
    """Describe the credentials without revealing them."""
    token = (credentials.access_token or "").strip()
    base_id = (credentials.resource_id or "").strip()
    return [
        "Token Diagnostic:",
        f"- Token provided: {bool(token)}",
        f"- Token length: {len(token)}",
        f"- Token starts with pat_: {token.startswith('pat_')}",
        f"- Base ID provided: {bool(base_id)}",
    ]


def render_result(result: ProbeResult, target_name: str, lookup: Optional[LookupResult] = None) -> List[str]:
    if isinstance(result, ProbeSuccess):
        return _render_success(result, target_name, lookup)
    return _render_failure(result)


def _render_success(result: ProbeSuccess, target_name: str, lookup: Optional[LookupResult]) -> List[str]:
    kind = "Tables in base" if result.endpoint is ProbeEndpoint.TABLES else "Records retrieved"
    lines = ["✅ Airtable API connection successful", f"{kind}: {len(result.items)}"]
    for index, item in enumerate(result.items, start=1):
        lines.append(f"  {index}. {item.name} ({item.id})")
    if result.sample_fields:
        lines.append(f"Field names (first record): {', '.join(result.sample_fields)}")

    if lookup is not None:
        if lookup.found:
            lines.append(f'✅ "{target_name}" found (ID: {lookup.item_id})')
        else:
            lines.append(f'❓ "{target_name}" not found')
            lines.append("  - Verify the exact name (matching is case-sensitive)")
            lines.append("  - Confirm it exists in this base")
    return lines


def _render_failure(result: ProbeFailure) -> List[str]:
    lines = [f"❌ {_TITLES[result.classification]} ({result.classification.value})"]
    if result.http_status is not None:
        lines.append(f"Status code: {result.http_status}")
    if result.error_type:
        lines.append(f"Error type: {result.error_type}")
    if result.raw_message:
        lines.append(f"Error message: {result.raw_message}")
    lines.append("Troubleshooting:")
    for index, hint in enumerate(hints_for(result.classification), start=1):
        lines.append(f"  {index}. {hint}")
    return lines


def render_env(settings) -> List[str]:
    """check-env output: which variables are loaded, secrets masked."""
    return [
        f"AIRTABLE_PERSONAL_ACCESS_TOKEN loaded?: {bool(settings.AIRTABLE_TOKEN)} {mask_secret(settings.AIRTABLE_TOKEN)}".rstrip(),
        f"AIRTABLE_BASE_ID loaded?: {bool(settings.AIRTABLE_BASE_ID)} {settings.AIRTABLE_BASE_ID or ''}".rstrip(),
        f"AIRTABLE_TARGET_TABLE: {settings.AIRTABLE_TARGET_TABLE}",
        f"AIRTABLE_PROBE_ENDPOINT: {settings.AIRTABLE_PROBE_ENDPOINT}",
        f"AIRTABLE_PAGE_SIZE: {settings.AIRTABLE_PAGE_SIZE}",
        f"AIRTABLE_TIMEOUT_S: {settings.AIRTABLE_TIMEOUT_S}",
        f"AIRTABLE_VIEW: {settings.AIRTABLE_VIEW or ''}".rstrip(),
    ]


def exit_code(result: ProbeResult, lookup: Optional[LookupResult] = None, require_target: bool = False) -> int:
    if isinstance(result, ProbeFailure):
        return EXIT_MISSING_CONFIG if result.classification in _MISSING else EXIT_FAILURE
    if require_target and lookup is not None and not lookup.found:
        return EXIT_FAILURE
    return EXIT_OK
