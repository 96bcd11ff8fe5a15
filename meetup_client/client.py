"""
Cliente MCP — chamadas JSON-RPC ao servidor de encontros
=========================================================
Envia envelopes MCP via HTTP para um servidor Social Logistics em execução
e decodifica o payload de texto de ``tools/call`` de volta para
``ToolResult``.

Falhas de rede não lançam exceção em ``send``: viram um ``MCPResponse``
com erro -32000, para que o chamador trate tudo pelo mesmo envelope.
"""

from __future__ import annotations

import json
import uuid
from typing import Any

import requests

from shared.mcp_types import (
    NETWORK_ERROR,
    MCPError,
    MCPRequest,
    MCPResponse,
    ToolResult,
    error_response,
)

DEFAULT_BASE_URL = "http://localhost:3000"


class MCPClientError(RuntimeError):
    """O servidor respondeu com um objeto ``error`` JSON-RPC."""

    def __init__(self, error: MCPError) -> None:
        super().__init__(f"[{error.code}] {error.message}")
        self.error = error


class MeetupClient:
    """Cliente síncrono para o endpoint /mcp do servidor de encontros."""

    def __init__(self, base_url: str = DEFAULT_BASE_URL, timeout: float = 30) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def send(self, method: str, params: dict[str, Any] | None = None) -> MCPResponse:
        """
        Envia um único envelope e retorna a resposta parseada.

        Args:
            method: Método MCP ('initialize', 'tools/list', 'tools/call').
            params: Parâmetros do método.

        Returns:
            O ``MCPResponse`` do servidor, ou um com erro -32000 em falhas de rede.
        """
        mcp_request = MCPRequest(id=str(uuid.uuid4()), method=method, params=params or {})

        try:
            http_response = requests.post(
                f"{self.base_url}/mcp",
                json=mcp_request.model_dump(),
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
            http_response.raise_for_status()
            return MCPResponse(**http_response.json())

        except requests.RequestException as exc:
            return error_response(
                mcp_request.id,
                NETWORK_ERROR,
                f"Erro de rede ao contactar {self.base_url}: {exc}",
            )

    def _result(self, method: str, params: dict[str, Any] | None = None) -> Any:
        response = self.send(method, params)
        if response.error is not None:
            raise MCPClientError(response.error)
        return response.result

    def initialize(self) -> dict[str, Any]:
        return self._result("initialize")

    def list_tools(self) -> list[dict[str, Any]]:
        return self._result("tools/list")["tools"]

    def call_tool(self, name: str, arguments: dict[str, Any] | None = None) -> ToolResult:
        """Invoca uma ferramenta e decodifica ``content[0].text`` em ``ToolResult``."""
        result = self._result("tools/call", {"name": name, "arguments": arguments or {}})
        return ToolResult(**json.loads(result["content"][0]["text"]))

    def health(self) -> dict[str, Any]:
        http_response = requests.get(f"{self.base_url}/health", timeout=self.timeout)
        http_response.raise_for_status()
        return http_response.json()
