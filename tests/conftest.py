import json

import pytest

AIRTABLE_ENV_VARS = (
    "AIRTABLE_PERSONAL_ACCESS_TOKEN",
    "AIRTABLE_TOKEN",
    "AIRTABLE_BASE_ID",
    "AIRTABLE_TARGET_TABLE",
    "AIRTABLE_PROBE_ENDPOINT",
    "AIRTABLE_PAGE_SIZE",
    "AIRTABLE_TIMEOUT_S",
    "AIRTABLE_API_URL",
    "AIRTABLE_NAME_FIELD",
    "AIRTABLE_VIEW",
    "AIRTABLE_DIAG_LOG_LEVEL",
)


class FakeResponse:
    def __init__(self, status_code=200, body=None, text=None):
        self.status_code = status_code
        if text is None:
            text = json.dumps(body) if body is not None else ""
        self.text = text


class FakeSession:
    """Counts calls; returns queued responses or raises queued exceptions."""

    def __init__(self, *outcomes):
        self._outcomes = list(outcomes)
        self.calls = []
        self.closed = False

    def get(self, url, headers=None, params=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "params": params, "timeout": timeout})
        outcome = self._outcomes[min(len(self.calls) - 1, len(self._outcomes) - 1)]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def close(self):
        self.closed = True


def tables_body(*pairs):
    return {"tables": [{"id": table_id, "name": name, "primaryFieldId": "fld1"} for name, table_id in pairs]}


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Remove Airtable vars for the test and undo anything load_dotenv sets."""
    for name in AIRTABLE_ENV_VARS:
        monkeypatch.setenv(name, "placeholder")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    return monkeypatch


@pytest.fixture
def env_file(tmp_path):
    def _write(**values):
        path = tmp_path / ".env"
        path.write_text("".join(f"{k}={v}\n" for k, v in values.items()), encoding="utf-8")
        return str(path)

    return _write
