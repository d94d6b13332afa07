import math
import os
from typing import Optional, Union

from dotenv import find_dotenv, load_dotenv

from airtable_client import DEFAULT_API_URL
from diagnostics import (
    DEFAULT_NAME_FIELD,
    DEFAULT_PAGE_SIZE,
    DEFAULT_TARGET,
    DEFAULT_TIMEOUT_S,
    MAX_PAGE_SIZE,
    Credentials,
    ProbeEndpoint,
)

TOKEN_ENV_VARS = ("AIRTABLE_PERSONAL_ACCESS_TOKEN", "AIRTABLE_TOKEN")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _first_env(*names: str) -> Optional[str]:
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return None


class Settings:
    def __init__(
        self,
        airtable_token: Optional[str] = None,
        airtable_base_id: Optional[str] = None,
        target_table: Optional[str] = None,
        probe_endpoint: Optional[str] = None,
        page_size: Optional[Union[int, str]] = None,
        timeout_s: Optional[Union[float, str]] = None,
        api_url: Optional[str] = None,
        name_field: Optional[str] = None,
        view: Optional[str] = None,
        log_level: Optional[str] = None,
    ):
        # Credentials (the PAT name is what Airtable's docs use; AIRTABLE_TOKEN is accepted too)
        self.AIRTABLE_TOKEN = airtable_token or _first_env(*TOKEN_ENV_VARS)
        self.AIRTABLE_BASE_ID = airtable_base_id or os.getenv("AIRTABLE_BASE_ID")

        # Probe options (safe defaults)
        self.AIRTABLE_TARGET_TABLE = target_table or os.getenv("AIRTABLE_TARGET_TABLE") or DEFAULT_TARGET
        self.AIRTABLE_PROBE_ENDPOINT = probe_endpoint or os.getenv("AIRTABLE_PROBE_ENDPOINT") or ProbeEndpoint.TABLES.value
        self.AIRTABLE_PAGE_SIZE = page_size if page_size is not None else os.getenv("AIRTABLE_PAGE_SIZE") or str(DEFAULT_PAGE_SIZE)
        self.AIRTABLE_TIMEOUT_S = timeout_s if timeout_s is not None else os.getenv("AIRTABLE_TIMEOUT_S") or str(DEFAULT_TIMEOUT_S)
        self.AIRTABLE_API_URL = api_url or os.getenv("AIRTABLE_API_URL") or DEFAULT_API_URL
        self.AIRTABLE_NAME_FIELD = name_field or os.getenv("AIRTABLE_NAME_FIELD") or DEFAULT_NAME_FIELD
        # Optional view for the records probe, e.g. "Grid view"
        self.AIRTABLE_VIEW = view or os.getenv("AIRTABLE_VIEW") or None

        self.LOG_LEVEL = (log_level or os.getenv("AIRTABLE_DIAG_LOG_LEVEL") or "WARNING").upper()

    @property
    def page_size(self) -> int:
        return int(self.AIRTABLE_PAGE_SIZE)

    @property
    def timeout_s(self) -> float:
        return float(self.AIRTABLE_TIMEOUT_S)

    @property
    def probe_endpoint(self) -> ProbeEndpoint:
        return ProbeEndpoint(str(self.AIRTABLE_PROBE_ENDPOINT).strip().lower())

    def credentials(self) -> Credentials:
        return Credentials(
            access_token=self.AIRTABLE_TOKEN or "",
            resource_id=self.AIRTABLE_BASE_ID or "",
        )

    def validate(self) -> None:
        """
        Check the probe options. Missing credentials are not an error here;
        the diagnostic reports them itself.
        """
        problems = []
        try:
            if not 1 <= self.page_size <= MAX_PAGE_SIZE:
                problems.append(f"AIRTABLE_PAGE_SIZE must be between 1 and {MAX_PAGE_SIZE}")
        except (TypeError, ValueError):
            problems.append(f"AIRTABLE_PAGE_SIZE is not an integer: {self.AIRTABLE_PAGE_SIZE!r}")
        try:
            if not math.isfinite(self.timeout_s):
                problems.append("AIRTABLE_TIMEOUT_S must be a finite number")
            elif self.timeout_s <= 0:
                problems.append("AIRTABLE_TIMEOUT_S must be positive")
        except (TypeError, ValueError):
            problems.append(f"AIRTABLE_TIMEOUT_S is not a number: {self.AIRTABLE_TIMEOUT_S!r}")
        try:
            self.probe_endpoint
        except ValueError:
            choices = ", ".join(e.value for e in ProbeEndpoint)
            problems.append(f"AIRTABLE_PROBE_ENDPOINT must be one of: {choices}")
        if self.LOG_LEVEL not in LOG_LEVELS:
            problems.append(f"AIRTABLE_DIAG_LOG_LEVEL must be one of: {', '.join(LOG_LEVELS)}")
        if problems:
            raise RuntimeError(f"Invalid configuration: {'; '.join(problems)}")


def load_settings(env_file: Optional[str] = None, **overrides) -> Settings:
    """Load .env (safe no-op if missing) and build Settings from the environment."""
    if env_file:
        load_dotenv(env_file, override=True)
    else:
        load_dotenv(find_dotenv(usecwd=True))
    return Settings(**overrides)
