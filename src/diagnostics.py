"""
Airtable connectivity diagnostic.

run() validates credentials, sends one read-only GET to an Airtable
listing endpoint and classifies the outcome into a ProbeResult.
Expected failures come back as ProbeFailure values, never as exceptions.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

import requests

from airtable_client import DEFAULT_API_URL, AirtableAPIError, AirtableClient, MalformedResponseError
from utils import safe_str

logger = logging.getLogger(__name__)

DEFAULT_TARGET = "Content Pipeline"
DEFAULT_PAGE_SIZE = 5
MAX_PAGE_SIZE = 5
DEFAULT_TIMEOUT_S = 10.0
DEFAULT_NAME_FIELD = "Name"
MAX_SAMPLE_FIELDS = 10


class ErrorClassification(str, Enum):
    MISSING_TOKEN = "MissingToken"
    MISSING_RESOURCE_ID = "MissingResourceId"
    UNAUTHORIZED = "Unauthorized"
    FORBIDDEN = "Forbidden"
    NOT_FOUND = "NotFound"
    NETWORK_UNREACHABLE = "NetworkUnreachable"
    UNKNOWN = "Unknown"


class ProbeEndpoint(str, Enum):
    # GET /v0/meta/bases/{baseId}/tables
    TABLES = "tables"
    # GET /v0/{baseId}/{table}?maxRecords=N
    RECORDS = "records"


_STATUS_CLASSIFICATION = {
    401: ErrorClassification.UNAUTHORIZED,
    403: ErrorClassification.FORBIDDEN,
    404: ErrorClassification.NOT_FOUND,
}


@dataclass(frozen=True)
class Credentials:
    access_token: str
    resource_id: str


@dataclass(frozen=True)
class Item:
    name: str
    id: str


@dataclass(frozen=True)
class ProbeSuccess:
    items: Tuple[Item, ...]
    endpoint: ProbeEndpoint = ProbeEndpoint.TABLES
    # field names of the first record (records probe only)
    sample_fields: Tuple[str, ...] = ()

    ok = True


@dataclass(frozen=True)
class ProbeFailure:
    classification: ErrorClassification
    http_status: Optional[int] = None
    raw_message: Optional[str] = None
    error_type: Optional[str] = None

    ok = False


ProbeResult = Union[ProbeSuccess, ProbeFailure]


@dataclass(frozen=True)
class LookupResult:
    found: bool
    item_id: Optional[str] = None


def clamp_page_size(page_size: int) -> int:
    return max(1, min(int(page_size), MAX_PAGE_SIZE))


def _table_item(raw: Dict[str, Any]) -> Item:
    return Item(name=safe_str(raw.get("name") or ""), id=safe_str(raw.get("id") or ""))


def _record_item(raw: Dict[str, Any], name_field: str) -> Item:
    fields = raw.get("fields") or {}
    name = fields.get(name_field, "") if isinstance(fields, dict) else ""
    return Item(name=safe_str(name), id=safe_str(raw.get("id") or ""))


def _sample_fields(raw: Dict[str, Any]) -> Tuple[str, ...]:
    """Field names only; values are never kept."""
    fields = raw.get("fields")
    if not isinstance(fields, dict):
        return ()
    return tuple(safe_str(name) for name in list(fields)[:MAX_SAMPLE_FIELDS])


def run(
    credentials: Credentials,
    target_resource_name: str = DEFAULT_TARGET,
    *,
    session: Optional[Any] = None,
    endpoint: ProbeEndpoint = ProbeEndpoint.TABLES,
    page_size: int = DEFAULT_PAGE_SIZE,
    timeout_s: float = DEFAULT_TIMEOUT_S,
    api_url: str = DEFAULT_API_URL,
    name_field: str = DEFAULT_NAME_FIELD,
    view: Optional[str] = None,
) -> ProbeResult:
    """
    Probe Airtable once and classify the outcome.

    `session` is anything with a requests-compatible ``get``; when omitted a
    fresh requests.Session is used and closed afterwards. For the RECORDS
    endpoint `target_resource_name` is the table that gets read, optionally
    through `view`.
    """
    token = (credentials.access_token or "").strip()
    base_id = (credentials.resource_id or "").strip()
    if not token:
        return ProbeFailure(ErrorClassification.MISSING_TOKEN)
    if not base_id:
        return ProbeFailure(ErrorClassification.MISSING_RESOURCE_ID)

    # HTTP header values must be latin-1; a pasted token with smart quotes is not
    try:
        token.encode("latin-1")
    except UnicodeEncodeError:
        return ProbeFailure(
            ErrorClassification.UNAUTHORIZED,
            raw_message="Token contains non-Latin-1 characters (stray quotes?)",
        )

    endpoint = ProbeEndpoint(endpoint)
    sample_fields: Tuple[str, ...] = ()
    try:
        with AirtableClient(token, base_id, timeout_s=timeout_s, api_url=api_url, session=session) as client:
            if endpoint is ProbeEndpoint.TABLES:
                items = tuple(_table_item(t) for t in client.list_tables())
            else:
                raw_items = client.list_records(
                    target_resource_name, max_records=clamp_page_size(page_size), view=view
                )
                items = tuple(_record_item(r, name_field) for r in raw_items)
                if raw_items:
                    sample_fields = _sample_fields(raw_items[0])
    except AirtableAPIError as e:
        classification = _STATUS_CLASSIFICATION.get(e.status_code, ErrorClassification.UNKNOWN)
        return ProbeFailure(classification, e.status_code, e.message, e.error_type)
    except (requests.ConnectionError, requests.Timeout) as e:
        logger.warning("Airtable unreachable: %s", e)
        return ProbeFailure(ErrorClassification.NETWORK_UNREACHABLE, raw_message=safe_str(e) or None)
    except requests.RequestException as e:
        logger.warning("Airtable request failed: %s", e)
        return ProbeFailure(ErrorClassification.UNKNOWN, raw_message=safe_str(e) or None)
    except MalformedResponseError as e:
        return ProbeFailure(ErrorClassification.UNKNOWN, e.status_code, safe_str(e) or None)
    except (UnicodeError, ValueError, OverflowError) as e:
        # raised below requests, e.g. while encoding headers or setting the socket timeout
        logger.warning("Airtable request could not be sent: %s", e)
        return ProbeFailure(ErrorClassification.UNKNOWN, raw_message=safe_str(e) or None)

    logger.info("Airtable probe ok: %d item(s) from %s endpoint", len(items), endpoint.value)
    return ProbeSuccess(items=items, endpoint=endpoint, sample_fields=sample_fields)


def find_named_resource(result: ProbeResult, target_name: str) -> LookupResult:
    """Exact, case-sensitive name match after trimming surrounding whitespace."""
    if not isinstance(result, ProbeSuccess):
        return LookupResult(found=False)
    wanted = (target_name or "").strip()
    if not wanted:
        return LookupResult(found=False)
    for item in result.items:
        if item.name.strip() == wanted:
            return LookupResult(found=True, item_id=item.id)
    return LookupResult(found=False)
