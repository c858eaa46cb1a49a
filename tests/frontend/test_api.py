"""
Tests for frontend/utils/api.py - Backend client.

requests is patched, so nothing goes over the network.
"""
from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest
import requests
from bson import ObjectId

from utils.api import APIClient


def _response(status_code=200, text=""):
    resp = MagicMock()
    resp.status_code = status_code
    resp.text = text
    return resp


@pytest.fixture
def patched_st(mock_session_state):
    st_mock = MagicMock()
    st_mock.session_state = mock_session_state
    with patch("utils.api.st", st_mock):
        yield st_mock


@pytest.fixture
def api(patched_st):
    return APIClient("http://backend:8000")


class TestRequest:

    def test_decodes_extended_json(self, api):
        body = (
            '{"documents": [{"id": "65a000000000000000000001", "fields": {'
            '"createdAt": {"$date": "2024-01-15T10:30:00Z"}, '
            '"ref": {"$oid": "65a000000000000000000002"}}}]}'
        )
        with patch("utils.api.requests.request", return_value=_response(200, body)):
            result = api.list_documents("conn-1")

        assert result["status"] == 200
        fields = result["data"]["documents"][0]["fields"]
        assert fields["createdAt"] == datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
        assert fields["ref"] == ObjectId("65a000000000000000000002")

    def test_non_json_body_kept_raw(self, api):
        with patch("utils.api.requests.request", return_value=_response(502, "Bad Gateway")):
            result = api.health()
        assert result == {"status": 502, "data": {"raw": "Bad Gateway"}}

    def test_empty_body(self, api):
        with patch("utils.api.requests.request", return_value=_response(204, "")):
            assert api.health() == {"status": 204, "data": None}

    def test_connection_error(self, api):
        with patch("utils.api.requests.request", side_effect=requests.exceptions.ConnectionError()):
            assert api.health() == {"status": 0, "error": "Cannot connect to backend"}

    def test_timeout(self, api):
        with patch("utils.api.requests.request", side_effect=requests.exceptions.Timeout("timed out")):
            result = api.health()
        assert result["status"] == 0
        assert result["error"] == "timed out"

    def test_token_sent_when_signed_in(self, api, patched_st):
        patched_st.session_state["token"] = "jwt-abc"
        with patch("utils.api.requests.request", return_value=_response(200, "{}")) as request:
            api.batch_delete("conn-1", ["a", "b"])

        args, kwargs = request.call_args
        assert args == ("POST", "http://backend:8000/connections/conn-1/batch/delete")
        assert kwargs["params"] == {"token": "jwt-abc"}
        assert kwargs["headers"]["Authorization"] == "Bearer jwt-abc"
        assert kwargs["json"] == {"document_ids": ["a", "b"]}

    def test_no_token_when_signed_out(self, api):
        with patch("utils.api.requests.request", return_value=_response(200, "{}")) as request:
            api.list_documents("conn-1")
        kwargs = request.call_args.kwargs
        assert kwargs["params"] == {}
        assert "Authorization" not in kwargs["headers"]


class TestEndpoints:

    def test_connect_body(self, api):
        with patch("utils.api.requests.request", return_value=_response(200, "{}")) as request:
            api.connect({"uri": "mongodb://db"}, "orders")
        args, kwargs = request.call_args
        assert args == ("POST", "http://backend:8000/connections")
        assert kwargs["json"] == {"credentials": {"uri": "mongodb://db"}, "collection": "orders"}

    def test_run_query_body(self, api):
        with patch("utils.api.requests.request", return_value=_response(200, "{}")) as request:
            api.run_query("conn-1", [{"field": "a", "operator": "==", "value": "1"}], limit=5)
        kwargs = request.call_args.kwargs
        assert kwargs["json"] == {
            "filters": [{"field": "a", "operator": "==", "value": "1"}],
            "order_by": None,
            "limit": 5,
        }

    def test_batch_update_body(self, api):
        with patch("utils.api.requests.request", return_value=_response(200, "{}")) as request:
            api.batch_update("conn-1", ["a"], [{"field": "x", "value": "1", "type": "number"}], ["old"])
        args, kwargs = request.call_args
        assert args[1].endswith("/connections/conn-1/batch/update")
        assert kwargs["json"]["delete_fields"] == ["old"]

    def test_disconnect_uses_delete(self, api):
        with patch("utils.api.requests.request", return_value=_response(200, "{}")) as request:
            api.disconnect("conn-1")
        assert request.call_args.args == ("DELETE", "http://backend:8000/connections/conn-1")
