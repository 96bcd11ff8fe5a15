"""
Dispatcher MCP — roteamento de envelopes JSON-RPC
===================================================
Recebe um ``MCPRequest`` já parseado e decide entre negociação de
capacidades, listagem do catálogo, invocação de ferramenta ou erro de método
desconhecido. Não guarda estado entre chamadas.

Assimetria intencional do protocolo:
    ``tools/call`` sem nome de ferramenta é erro de protocolo (-32602);
    um nome desconhecido é despachado normalmente e devolve um envelope de
    sucesso com ``success=false`` no payload da ferramenta.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from pydantic import BaseModel, ValidationError

from meetup_server import handlers
from meetup_server.catalog import TOOLS, ToolName, list_tools
from shared.mcp_types import (
    INVALID_PARAMS,
    METHOD_NOT_FOUND,
    PROTOCOL_VERSION,
    MCPRequest,
    MCPResponse,
    ToolResult,
    error_response,
)

logger = logging.getLogger(__name__)

SERVER_NAME = "social-logistics-mcp"
SERVER_VERSION = "1.0.0"

# Registro de ferramentas: nome → (modelo de argumentos, handler)
TOOL_HANDLERS: dict[ToolName, tuple[type[BaseModel], Callable[[Any], ToolResult]]] = {
    ToolName.FIND_OPTIMAL_TIMES: (handlers.FindOptimalTimesArgs, handlers.find_optimal_times),
    ToolName.RECOMMEND_VENUES: (handlers.RecommendVenuesArgs, handlers.recommend_venues),
    ToolName.CREATE_MEETUP_POLL: (handlers.CreateMeetupPollArgs, handlers.create_meetup_poll),
    ToolName.FINALIZE_MEETUP: (handlers.FinalizeMeetupArgs, handlers.finalize_meetup),
    ToolName.INITIATE_DUTCH_PAY: (handlers.InitiateDutchPayArgs, handlers.initiate_dutch_pay),
}

_missing = set(ToolName) - set(TOOL_HANDLERS)
if _missing or {t.name for t in TOOLS} != {n.value for n in ToolName}:
    raise RuntimeError(f"Catálogo e registro de handlers divergem: {sorted(_missing)}")


def _format_validation_error(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        field = ".".join(str(loc) for loc in err["loc"]) or "arguments"
        parts.append(f"{field}: {err['msg']}")
    return "; ".join(parts)


def execute_tool(name: Any, arguments: Any) -> ToolResult:
    """
    Resolve ``name`` no catálogo e executa o handler correspondente.

    Nunca lança exceção para nome desconhecido ou argumentos inválidos;
    ambos viram ``ToolResult(success=False)``.
    """
    try:
        tool = ToolName(name)
    except ValueError:
        logger.warning("[MCP] Unknown tool: %s", name)
        return ToolResult(success=False, message=f"알 수 없는 도구: {name}")

    args_model, handler = TOOL_HANDLERS[tool]
    try:
        args = args_model.model_validate(arguments)
    except ValidationError as exc:
        detail = _format_validation_error(exc)
        logger.warning("[MCP] Invalid arguments for %s: %s", tool.value, detail)
        return ToolResult(success=False, message=f"잘못된 인수: {detail}")

    return handler(args)


def _initialize_result() -> dict[str, Any]:
    return {
        "protocolVersion": PROTOCOL_VERSION,
        "capabilities": {"tools": {}},
        "serverInfo": {"name": SERVER_NAME, "version": SERVER_VERSION},
    }


def dispatch(request: MCPRequest) -> MCPResponse:
    """Ponto único de roteamento: um envelope de entrada, um envelope de resposta."""
    logger.info("[MCP] Method: %s", request.method)

    if request.method == "initialize":
        return MCPResponse(id=request.id, result=_initialize_result())

    if request.method == "tools/list":
        return MCPResponse(id=request.id, result={"tools": list_tools()})

    if request.method == "tools/call":
        tool_name = request.params.get("name")
        if not tool_name:
            return error_response(request.id, INVALID_PARAMS, "Tool name is required")

        result = execute_tool(tool_name, request.params.get("arguments") or {})
        return MCPResponse(
            id=request.id,
            result={"content": [{"type": "text", "text": result.to_text()}]},
        )

    return error_response(request.id, METHOD_NOT_FOUND, f"Method not found: {request.method}")
