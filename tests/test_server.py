"""HTTP-level tests for the FastAPI transport."""

import json
from datetime import datetime
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from meetup_server.config import ConfigError
from meetup_server.server import app, main


@pytest.fixture()
def client() -> TestClient:
    return TestClient(app)


def _rpc(client: TestClient, method: str, params=None, request_id=1):
    body = {"jsonrpc": "2.0", "id": request_id, "method": method}
    if params is not None:
        body["params"] = params
    response = client.post("/mcp", json=body)
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/json")
    return response.json()


class TestMCPEndpoint:
    def test_initialize(self, client: TestClient) -> None:
        reply = _rpc(client, "initialize", request_id="init")
        assert reply["jsonrpc"] == "2.0"
        assert reply["id"] == "init"
        assert reply["result"]["protocolVersion"] == "2024-11-05"
        assert "error" not in reply

    def test_tools_list(self, client: TestClient) -> None:
        tools = _rpc(client, "tools/list")["result"]["tools"]
        assert [t["name"] for t in tools][0] == "find_optimal_times"
        assert all("inputSchema" in t for t in tools)

    def test_missing_tool_name(self, client: TestClient) -> None:
        reply = _rpc(client, "tools/call", params={})
        assert reply["error"] == {"code": -32602, "message": "Tool name is required"}
        assert "result" not in reply

    def test_unknown_tool(self, client: TestClient) -> None:
        reply = _rpc(client, "tools/call", params={"name": "not_a_real_tool", "arguments": {}})
        payload = json.loads(reply["result"]["content"][0]["text"])
        assert payload["success"] is False

    def test_unknown_method(self, client: TestClient) -> None:
        reply = _rpc(client, "prompts/list")
        assert reply["error"]["code"] == -32601
        assert "prompts/list" in reply["error"]["message"]

    def test_find_optimal_times(self, client: TestClient) -> None:
        reply = _rpc(
            client,
            "tools/call",
            params={
                "name": "find_optimal_times",
                "arguments": {"participants": ["A", "B", "C"], "date_range": "이번 주말"},
            },
        )
        payload = json.loads(reply["result"]["content"][0]["text"])
        first, second = payload["data"]["recommended_slots"]
        assert first["available_count"] == 3
        assert second["available_count"] == 2
        assert [c["user"] for c in second["conflicts"]] == ["C"]

    @pytest.mark.parametrize("request_id", ["req-7", 7, 1.5, 1.0])
    def test_id_round_trip(self, client: TestClient, request_id) -> None:
        assert _rpc(client, "tools/list", request_id=request_id)["id"] == request_id

    @pytest.mark.parametrize("method", ["initialize", "tools/list"])
    def test_null_params_accepted(self, client: TestClient, method) -> None:
        response = client.post(
            "/mcp", json={"jsonrpc": "2.0", "id": 11, "method": method, "params": None}
        )
        assert response.status_code == 200
        assert "result" in response.json()

    def test_tools_call_with_null_params_needs_name(self, client: TestClient) -> None:
        response = client.post(
            "/mcp", json={"jsonrpc": "2.0", "id": 12, "method": "tools/call", "params": None}
        )
        assert response.status_code == 200
        assert response.json()["error"]["code"] == -32602

    @pytest.mark.parametrize("method, rendered", [(None, "null"), (5, "5")])
    def test_non_string_method_is_method_not_found(
        self, client: TestClient, method, rendered
    ) -> None:
        response = client.post("/mcp", json={"jsonrpc": "2.0", "id": 13, "method": method})
        assert response.status_code == 200
        reply = response.json()
        assert reply["id"] == 13
        assert reply["error"] == {"code": -32601, "message": f"Method not found: {rendered}"}

    def test_huge_amount_is_not_a_server_error(self, client: TestClient) -> None:
        total = int("7" * 400)
        reply = _rpc(
            client,
            "tools/call",
            params={"name": "initiate_dutch_pay", "arguments": {"total_amount": total}},
        )
        payload = json.loads(reply["result"]["content"][0]["text"])
        assert payload["success"] is True
        assert payload["data"]["per_person"] == total

    def test_nan_amount_is_failure_result(self, client: TestClient) -> None:
        body = (
            '{"jsonrpc": "2.0", "id": 14, "method": "tools/call", '
            '"params": {"name": "initiate_dutch_pay", "arguments": {"total_amount": NaN}}}'
        )
        response = client.post("/mcp", content=body, headers={"Content-Type": "application/json"})
        assert response.status_code == 200
        payload = json.loads(response.json()["result"]["content"][0]["text"])
        assert payload["success"] is False

    def test_invalid_json_is_parse_error(self, client: TestClient) -> None:
        response = client.post(
            "/mcp", content="{not json", headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == -32700

    def test_bad_envelope_is_invalid_request(self, client: TestClient) -> None:
        response = client.post(
            "/mcp", json={"jsonrpc": "2.0", "id": 9, "method": "tools/call", "params": [1]}
        )
        assert response.status_code == 400
        reply = response.json()
        assert reply["id"] == 9
        assert reply["error"]["code"] == -32600

    def test_cors_any_origin(self, client: TestClient) -> None:
        response = client.post(
            "/mcp",
            json={"jsonrpc": "2.0", "id": 1, "method": "initialize"},
            headers={"Origin": "https://chat.example.com"},
        )
        assert response.headers["access-control-allow-origin"] == "*"


class TestAuxiliaryEndpoints:
    def test_health(self, client: TestClient) -> None:
        body = client.get("/health").json()
        assert body["status"] == "ok"
        parsed = datetime.fromisoformat(body["timestamp"].replace("Z", "+00:00"))
        assert parsed.tzinfo is not None

    def test_root(self, client: TestClient) -> None:
        body = client.get("/").json()
        assert body["name"] == "Social Logistics MCP Server"
        assert body["version"] == "1.0.0"
        assert body["endpoints"] == {"mcp": "POST /mcp", "health": "GET /health"}
        assert body["tools"] == [
            "find_optimal_times",
            "recommend_venues",
            "create_meetup_poll",
            "finalize_meetup",
            "initiate_dutch_pay",
        ]


class TestMain:
    def test_invalid_settings_exit_with_status_one(self) -> None:
        with patch(
            "meetup_server.server.load_settings", side_effect=ConfigError("PORT inválido")
        ):
            with pytest.raises(SystemExit) as exc_info:
                main()
        assert exc_info.value.code == 1

    def test_runs_uvicorn_with_settings(self, monkeypatch) -> None:
        monkeypatch.setenv("PORT", "4321")
        monkeypatch.setenv("LOG_LEVEL", "info")
        with patch("uvicorn.run") as mock_run:
            main()
        assert mock_run.call_args.kwargs["port"] == 4321
        assert mock_run.call_args.args == (app,)
