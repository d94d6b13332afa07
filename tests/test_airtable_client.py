import pytest

from airtable_client import AirtableAPIError, AirtableClient, MalformedResponseError
from conftest import FakeResponse, FakeSession, tables_body


def test_urls_quote_base_and_table_names():
    client = AirtableClient("tok", "app/odd", session=FakeSession())
    assert client._table_url("My Table/2") == "https://api.airtable.com/v0/app%2Fodd/My%20Table%2F2"
    assert client._meta_tables_url() == "https://api.airtable.com/v0/meta/bases/app%2Fodd/tables"


def test_custom_api_url_trailing_slash():
    session = FakeSession(FakeResponse(200, tables_body(("A", "tbl1"))))
    client = AirtableClient("tok", "app1", api_url="http://localhost:8080/", session=session)
    assert client.list_tables() == [{"id": "tbl1", "name": "A", "primaryFieldId": "fld1"}]
    assert session.calls[0]["url"] == "http://localhost:8080/v0/meta/bases/app1/tables"


def test_list_records_sends_max_records_and_bearer_header():
    session = FakeSession(FakeResponse(200, {"records": [{"id": "rec1", "fields": {}}]}))
    client = AirtableClient("pat_123", "app1", timeout_s=7, session=session)
    assert client.list_records("Jobs", max_records=2) == [{"id": "rec1", "fields": {}}]
    call = session.calls[0]
    assert call["params"] == {"maxRecords": 2}
    assert call["headers"] == {"Authorization": "Bearer pat_123", "Content-Type": "application/json"}
    assert call["timeout"] == 7


def test_error_response_raises_with_airtable_details():
    body = {"error": {"type": "AUTHENTICATION_REQUIRED", "message": "Authentication required"}}
    client = AirtableClient("tok", "app1", session=FakeSession(FakeResponse(401, body)))
    with pytest.raises(AirtableAPIError) as excinfo:
        client.list_tables()
    err = excinfo.value
    assert err.status_code == 401
    assert err.message == "Authentication required"
    assert err.error_type == "AUTHENTICATION_REQUIRED"
    assert "401" in str(err)


def test_error_response_with_non_json_body_uses_text():
    client = AirtableClient("tok", "app1", session=FakeSession(FakeResponse(502, text="Bad Gateway")))
    with pytest.raises(AirtableAPIError) as excinfo:
        client.list_tables()
    assert excinfo.value.message == "Bad Gateway"
    assert excinfo.value.error_type is None


def test_redirect_status_is_not_treated_as_success():
    client = AirtableClient("tok", "app1", session=FakeSession(FakeResponse(302, text="")))
    with pytest.raises(AirtableAPIError) as excinfo:
        client.list_tables()
    assert excinfo.value.status_code == 302


def test_malformed_body_raises():
    client = AirtableClient("tok", "app1", session=FakeSession(FakeResponse(200, {"records": None})))
    with pytest.raises(MalformedResponseError) as excinfo:
        client.list_records("Jobs")
    assert excinfo.value.status_code == 200


def test_owned_session_is_closed(monkeypatch):
    closed = []
    monkeypatch.setattr("requests.Session.close", lambda self: closed.append(True))
    with AirtableClient("tok", "app1"):
        pass
    assert closed == [True]


def test_injected_session_left_open():
    session = FakeSession()
    with AirtableClient("tok", "app1", session=session):
        pass
    assert session.closed is False


def test_list_records_sends_view_when_given():
    session = FakeSession(FakeResponse(200, {"records": []}))
    client = AirtableClient("tok", "app1", session=session)
    client.list_records("Jobs", max_records=3, view="Grid view")
    assert session.calls[0]["params"] == {"maxRecords": 3, "view": "Grid view"}


def test_non_object_list_entries_raise():
    client = AirtableClient("tok", "app1", session=FakeSession(FakeResponse(200, {"tables": [{"id": "t"}, "x"]})))
    with pytest.raises(MalformedResponseError, match="non-object entries"):
        client.list_tables()
