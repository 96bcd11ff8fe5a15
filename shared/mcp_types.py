"""
Definições de Tipos MCP JSON-RPC
=================================
Tipos de mensagem padronizados para a camada de comunicação do Model Context
Protocol (MCP) entre clientes (agentes, hosts de chat) e o servidor de
coordenação de encontros.

Nota de arquitetura — Envelope duplo:
    O resultado de uma ferramenta (``ToolResult``) é serializado como texto
    JSON e embutido em ``result.content[0].text``. O envelope JSON-RPC
    continua estruturado; apenas o payload da ferramenta viaja como texto.
"""

from __future__ import annotations

import json
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# ---------------------------------------------------------------------------
# Códigos de erro JSON-RPC 2.0
# ---------------------------------------------------------------------------
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
NETWORK_ERROR = -32000

PROTOCOL_VERSION = "2024-11-05"

RequestId = Optional[Union[int, float, str]]


class MCPRequest(BaseModel):
    """
    Envelope de requisição JSON-RPC 2.0 enviado por um cliente MCP para
    listar ou invocar ferramentas do servidor.
    """

    jsonrpc: str = Field(default="2.0", description="Versão do protocolo JSON-RPC")
    id: RequestId = Field(
        default=None,
        description="Token de correlação, devolvido sem alteração na resposta",
    )
    method: str = Field(
        default="",
        description="Método MCP a invocar (ex.: 'initialize', 'tools/list', 'tools/call')",
    )
    params: dict[str, Any] = Field(
        default_factory=dict,
        description="Parâmetros específicos do método",
    )

    @field_validator("method", mode="before")
    @classmethod
    def _method_as_text(cls, value: Any) -> Any:
        # Métodos não textuais seguem adiante e caem em -32601
        if not isinstance(value, str):
            return json.dumps(value, ensure_ascii=False)
        return value

    @field_validator("params", mode="before")
    @classmethod
    def _null_params_as_empty(cls, value: Any) -> Any:
        return {} if value is None else value


class MCPError(BaseModel):
    """Objeto de erro JSON-RPC (código inteiro + mensagem)."""

    code: int
    message: str
    data: Optional[Any] = None


class MCPResponse(BaseModel):
    """
    Envelope de resposta JSON-RPC 2.0 retornado pelo servidor.
    Exatamente um entre `result` ou `error` estará presente.
    """

    jsonrpc: str = Field(default="2.0", description="Versão do protocolo JSON-RPC")
    id: RequestId = Field(default=None, description="Deve corresponder ao id da requisição")
    result: Optional[Any] = Field(
        default=None,
        description="Payload do resultado bem-sucedido",
    )
    error: Optional[MCPError] = Field(
        default=None,
        description="Objeto de erro com código, mensagem e dados opcionais",
    )

    def to_wire(self) -> dict[str, Any]:
        """Serializa o envelope mantendo `id` mesmo quando nulo e omitindo o lado ausente."""
        payload: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            payload["error"] = self.error.model_dump(exclude_none=True)
        else:
            payload["result"] = self.result
        return payload


def error_response(request_id: RequestId, code: int, message: str) -> MCPResponse:
    return MCPResponse(id=request_id, error=MCPError(code=code, message=message))


class ToolDescriptor(BaseModel):
    """Descrição de uma ferramenta publicada em ``tools/list``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    description: str
    input_schema: dict[str, Any] = Field(..., alias="inputSchema")

    @model_validator(mode="after")
    def _required_fields_are_declared(self) -> "ToolDescriptor":
        properties = self.input_schema.get("properties", {})
        missing = [f for f in self.input_schema.get("required", []) if f not in properties]
        if missing:
            raise ValueError(
                f"Ferramenta '{self.name}': campos obrigatórios sem propriedade: {missing}"
            )
        return self


class ToolResult(BaseModel):
    """
    Resultado de uma ferramenta. ``success=False`` nunca carrega ``data``;
    ``message`` explica a falha.
    """

    success: bool
    data: Optional[Any] = None
    message: str

    @model_validator(mode="after")
    def _failure_has_no_data(self) -> "ToolResult":
        if not self.success and self.data is not None:
            raise ValueError("Resultado com falha não pode carregar 'data'")
        return self

    def to_text(self) -> str:
        """Renderiza o resultado como texto JSON indentado (payload de ``content``)."""
        payload: dict[str, Any] = {"success": self.success}
        if self.data is not None:
            payload["data"] = self.data
        payload["message"] = self.message
        return json.dumps(payload, ensure_ascii=False, indent=2)
