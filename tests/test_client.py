"""Tests for the MeetupClient JSON-RPC client."""

from unittest.mock import MagicMock, patch

import pytest
import requests
from fastapi.testclient import TestClient

from meetup_client.client import MCPClientError, MeetupClient
from meetup_server.server import app


@pytest.fixture()
def routed_post():
    """Routes requests.post through the in-process FastAPI app."""
    test_client = TestClient(app)

    def _post(url, json=None, headers=None, timeout=None):
        assert url == "http://meetup.test/mcp"
        return test_client.post("/mcp", json=json, headers=headers)

    with patch("meetup_client.client.requests.post", side_effect=_post) as mock_post:
        yield mock_post


class TestMeetupClient:
    def test_initialize(self, routed_post) -> None:
        info = MeetupClient("http://meetup.test/").initialize()
        assert info["serverInfo"]["name"] == "social-logistics-mcp"

    def test_list_tools(self, routed_post) -> None:
        tools = MeetupClient("http://meetup.test").list_tools()
        assert len(tools) == 5

    def test_call_tool_decodes_result(self, routed_post) -> None:
        result = MeetupClient("http://meetup.test").call_tool(
            "initiate_dutch_pay",
            {"total_amount": 10000, "participants": ["A", "B", "C"], "payer": "A"},
        )
        assert result.success is True
        assert result.data["per_person"] == 3334

    def test_call_unknown_tool(self, routed_post) -> None:
        result = MeetupClient("http://meetup.test").call_tool("not_a_real_tool")
        assert result.success is False
        assert result.data is None

    def test_protocol_error_raises(self, routed_post) -> None:
        client = MeetupClient("http://meetup.test")
        with pytest.raises(MCPClientError) as exc_info:
            client.call_tool("")
        assert exc_info.value.error.code == -32602

    def test_request_ids_are_unique(self, routed_post) -> None:
        client = MeetupClient("http://meetup.test")
        client.list_tools()
        client.list_tools()
        ids = [c.kwargs["json"]["id"] for c in routed_post.call_args_list]
        assert len(set(ids)) == 2

    def test_network_error_becomes_error_envelope(self) -> None:
        with patch(
            "meetup_client.client.requests.post",
            side_effect=requests.ConnectionError("connection refused"),
        ):
            response = MeetupClient("http://meetup.test").send("tools/list")
        assert response.result is None
        assert response.error.code == -32000
        assert "connection refused" in response.error.message

    def test_health(self) -> None:
        fake = MagicMock()
        fake.json.return_value = {"status": "ok", "timestamp": "2026-01-01T00:00:00.000Z"}
        with patch("meetup_client.client.requests.get", return_value=fake) as mock_get:
            body = MeetupClient("http://meetup.test").health()
        mock_get.assert_called_once_with("http://meetup.test/health", timeout=30)
        assert body["status"] == "ok"
