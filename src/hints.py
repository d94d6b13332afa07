"""Fixed troubleshooting hints for each failure classification."""

from typing import Dict, List

from diagnostics import ErrorClassification

REMEDIATION_HINTS: Dict[ErrorClassification, List[str]] = {
    ErrorClassification.MISSING_TOKEN: [
        "Generate a personal access token in Airtable (Developer hub > Personal access tokens)",
        "Copy the ENTIRE token",
        "Set AIRTABLE_PERSONAL_ACCESS_TOKEN in your .env file",
        "Ensure there are no extra spaces or quotes",
    ],
    ErrorClassification.MISSING_RESOURCE_ID: [
        "Open your Airtable base in the browser",
        "Copy the base ID from the URL (it starts with 'app')",
        "Set AIRTABLE_BASE_ID in your .env file",
    ],
    ErrorClassification.UNAUTHORIZED: [
        "Token may be invalid or expired",
        "Token may be missing the data.records:read / schema.bases:read scopes",
        "Regenerate the personal access token and update .env",
    ],
    ErrorClassification.FORBIDDEN: [
        "The base may not be shared with this token",
        "Add the base to the token's access list in Airtable",
        "Ensure the correct Airtable account is used",
    ],
    ErrorClassification.NOT_FOUND: [
        "Verify the base ID is correct",
        "Confirm the table exists in this base and the name matches exactly",
        "The base may have been deleted or moved",
    ],
    ErrorClassification.NETWORK_UNREACHABLE: [
        "Check your internet connection and DNS",
        "Check proxy / firewall settings for api.airtable.com",
        "Increase AIRTABLE_TIMEOUT_S if the network is slow",
    ],
    ErrorClassification.UNKNOWN: [
        "Check the status code and message above",
        "Check https://status.airtable.com for outages",
        "Re-run with --log-level DEBUG for request details",
    ],
}


def hints_for(classification: ErrorClassification) -> List[str]:
    return list(REMEDIATION_HINTS[ErrorClassification(classification)])
