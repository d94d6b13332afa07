from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests

from utils import extract_error, parse_json_body

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.airtable.com"


class AirtableAPIError(RuntimeError):
    def __init__(self, status_code: int, message: Optional[str] = None, error_type: Optional[str] = None):
        self.status_code = status_code
        self.message = message
        self.error_type = error_type
        super().__init__(f"Airtable API error {status_code}: {message or error_type or 'no details'}")


class MalformedResponseError(ValueError):
    """A 2xx response whose body is not the expected JSON listing."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        super().__init__(message)


class AirtableClient:
    """
    Read-only Airtable REST client used by the diagnostics.
    - list_tables (Meta API)
    - list_records (first page of a table)

    Only GET requests are issued. A session can be injected; it is then
    left open for the caller to close.
    """

    def __init__(
        self,
        token: str,
        base_id: str,
        timeout_s: float = 10.0,
        api_url: str = DEFAULT_API_URL,
        session: Optional[Any] = None,
    ):
        self.base_id = base_id
        self.api_url = api_url.rstrip("/")
        self.base_url = f"{self.api_url}/v0/{quote(base_id, safe='')}"
        self.timeout_s = timeout_s
        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()
        self.headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }

    def _table_url(self, table: str) -> str:
        # Table names can include spaces; quote safely
        return f"{self.base_url}/{quote(table, safe='')}"

    def _meta_tables_url(self) -> str:
        return f"{self.api_url}/v0/meta/bases/{quote(self.base_id, safe='')}/tables"

    def _get(self, url: str, params: Optional[Dict[str, Any]] = None) -> requests.Response:
        logger.debug("GET %s params=%s", url, params)
        resp = self.session.get(url, headers=self.headers, params=params, timeout=self.timeout_s)
        logger.debug("GET %s -> %s", url, resp.status_code)
        self._raise_airtable(resp)
        return resp

    def list_tables(self) -> List[Dict[str, Any]]:
        """
        List the tables of the base via the Meta API.
        The endpoint is not paginated; every table is returned.
        """
        resp = self._get(self._meta_tables_url())
        return self._json_list(resp, "tables")

    def list_records(self, table: str, *, max_records: int = 5, view: Optional[str] = None) -> List[Dict[str, Any]]:
        params: Dict[str, Any] = {"maxRecords": max_records}
        if view:
            params["view"] = view
        resp = self._get(self._table_url(table), params=params)
        return self._json_list(resp, "records")

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> "AirtableClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @staticmethod
    def _json_list(resp: requests.Response, key: str) -> List[Dict[str, Any]]:
        body = parse_json_body(resp.text)
        if not isinstance(body, dict):
            raise MalformedResponseError(resp.status_code, "Response body is not a JSON object")
        items = body.get(key)
        if not isinstance(items, list):
            raise MalformedResponseError(resp.status_code, f"Response body has no '{key}' list")
        if not all(isinstance(item, dict) for item in items):
            raise MalformedResponseError(resp.status_code, f"Response '{key}' list contains non-object entries")
        return items

    @staticmethod
    def _raise_airtable(resp: requests.Response) -> None:
        if 200 <= resp.status_code < 300:
            return
        # Airtable returns helpful JSON error payloads
        message, error_type = extract_error(parse_json_body(resp.text), fallback=resp.text)
        logger.warning("Airtable returned %s: %s", resp.status_code, message)
        raise AirtableAPIError(resp.status_code, message, error_type)
