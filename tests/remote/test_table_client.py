from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import requests

from attendance_tracker.core.exceptions import RemoteApiError, ValidationError
from attendance_tracker.remote.client import AirtableConfig, TableClient
from attendance_tracker.remote.formula import field_equals


def _response(status=200, payload=None, reason="OK"):
    resp = MagicMock()
    resp.status_code = status
    resp.ok = 200 <= status < 300
    resp.reason = reason
    resp.json.return_value = payload if payload is not None else {}
    return resp


@pytest.fixture
def http():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def client(http):
    return TableClient(AirtableConfig(api_key="key123", base_id="appBASE", api_url="https://api.example.com/v0/"), http)


def test_table_url_encodes_table_name(client):
    assert client.table_url("Attendance Log") == "https://api.example.com/v0/appBASE/Attendance%20Log"


def test_list_all_sends_bearer_token_and_follows_offset(client, http):
    http.request.side_effect = [
        _response(payload={"records": [{"id": "rec1", "fields": {"Name": "Alice"}}], "offset": "itr1"}),
        _response(payload={"records": [{"id": "rec2", "fields": {"Name": "Bob"}}]}),
    ]

    records = client.list_all("Participants")

    assert [r.record_id for r in records] == ["rec1", "rec2"]
    assert records[0].fields == {"Name": "Alice"}
    first, second = http.request.call_args_list
    assert first.args == ("GET", "https://api.example.com/v0/appBASE/Participants")
    assert first.kwargs["headers"]["Authorization"] == "Bearer key123"
    assert first.kwargs["headers"]["Content-Type"] == "application/json"
    assert first.kwargs["params"] == {}
    assert second.kwargs["params"] == {"offset": "itr1"}


def test_list_filtered_passes_formula(client, http):
    http.request.return_value = _response(payload={"records": []})
    formula = field_equals("Date", "2025-12-26")

    assert client.list_filtered("Attendance", formula) == []

    assert http.request.call_args.kwargs["params"] == {"filterByFormula": "{Date} = '2025-12-26'"}


def test_non_success_status_raises_remote_api_error(client, http):
    http.request.return_value = _response(status=403, reason="Forbidden")

    with pytest.raises(RemoteApiError) as exc_info:
        client.list_all("Participants")

    assert exc_info.value.status_code == 403
    assert "403" in str(exc_info.value)


def test_transport_failure_has_no_status_code(client, http):
    http.request.side_effect = requests.ConnectionError("unreachable")

    with pytest.raises(RemoteApiError) as exc_info:
        client.list_all("Participants")

    assert exc_info.value.status_code is None


def test_create_batch_posts_records_envelope(client, http):
    http.request.return_value = _response(payload={"records": [{"id": "recNew", "fields": {"Status": "Present"}}]})

    created = client.create_batch("Attendance", [{"fields": {"Status": "Present"}}])

    assert [r.record_id for r in created] == ["recNew"]
    call = http.request.call_args
    assert call.args[0] == "POST"
    assert call.kwargs["json"] == {"records": [{"fields": {"Status": "Present"}}]}


def test_update_batch_patches_and_requires_ids(client, http):
    http.request.return_value = _response(payload={"records": []})

    client.update_batch("Attendance", [{"id": "rec1", "fields": {"Status": "Absent"}}])
    assert http.request.call_args.args[0] == "PATCH"

    http.request.reset_mock()
    with pytest.raises(ValidationError):
        client.update_batch("Attendance", [{"fields": {"Status": "Absent"}}])
    http.request.assert_not_called()


def test_batches_over_ten_are_rejected_before_sending(client, http):
    with pytest.raises(ValidationError):
        client.create_batch("Attendance", [{"fields": {}}] * 11)

    http.request.assert_not_called()


def test_empty_batch_is_a_no_op(client, http):
    assert client.create_batch("Attendance", []) == []
    http.request.assert_not_called()


def test_delete_one_targets_record_url(client, http):
    http.request.return_value = _response(payload={"deleted": True, "id": "rec9"})

    assert client.delete_one("Attendance", "rec9") == "rec9"
    assert http.request.call_args.args == ("DELETE", "https://api.example.com/v0/appBASE/Attendance/rec9")


def test_formula_escapes_quotes():
    assert field_equals("Name", "O'Brien") == "{Name} = 'O\\'Brien'"
