"""
Social Logistics — Servidor MCP de Coordenação de Encontros
============================================================
Aplicação FastAPI que expõe um único endpoint /mcp seguindo a convenção
JSON-RPC 2.0 / Model Context Protocol (MCP), além de /health (liveness) e
/ (autodescrição).

Notas de arquitetura:
    Sem estado: cada requisição é independente; o catálogo de ferramentas
    é imutável e os handlers são funções puras (exceto a geração de ids).

    Erros de protocolo nunca derrubam o processo: envelopes malformados
    recebem um objeto ``error`` JSON-RPC em vez de uma exceção.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# ---------------------------------------------------------------------------
# Garante que o pacote compartilhado é importável ao executar este arquivo diretamente.
# ---------------------------------------------------------------------------
_project_root = Path(__file__).resolve().parents[1]
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from meetup_server.catalog import tool_names                    # noqa: E402
from meetup_server.config import ConfigError, load_settings       # noqa: E402
from meetup_server.dispatcher import SERVER_VERSION, dispatch     # noqa: E402
from shared.mcp_types import (                                    # noqa: E402
    INVALID_REQUEST,
    PARSE_ERROR,
    MCPRequest,
    error_response,
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Social Logistics MCP Server",
    description="그룹 모임 일정 조율 AI 에이전트",
    version=SERVER_VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Envelopes malformados → erro JSON-RPC
# ---------------------------------------------------------------------------

@app.exception_handler(RequestValidationError)
async def invalid_envelope_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if any(err.get("type") == "json_invalid" for err in errors):
        response = error_response(None, PARSE_ERROR, "Parse error")
    else:
        body = getattr(exc, "body", None)
        request_id = body.get("id") if isinstance(body, dict) else None
        if not isinstance(request_id, (str, int, float)) or isinstance(request_id, bool):
            request_id = None
        response = error_response(request_id, INVALID_REQUEST, "Invalid Request")
    logger.warning("[MCP] Rejected envelope: %s", errors)
    return JSONResponse(status_code=400, content=response.to_wire())


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@app.post("/mcp")
async def mcp_endpoint(request: MCPRequest) -> JSONResponse:
    """
    Ponto de entrada JSON-RPC 2.0 / MCP.

    Aceita os métodos 'initialize', 'tools/list' e 'tools/call'; qualquer
    outro método recebe erro -32601.
    """
    return JSONResponse(content=dispatch(request).to_wire())


@app.get("/health")
async def health() -> dict[str, str]:
    timestamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
    return {"status": "ok", "timestamp": timestamp.replace("+00:00", "Z")}


@app.get("/")
async def root() -> dict[str, Any]:
    return {
        "name": "Social Logistics MCP Server",
        "version": SERVER_VERSION,
        "description": "그룹 모임 일정 조율 AI 에이전트",
        "endpoints": {"mcp": "POST /mcp", "health": "GET /health"},
        "tools": tool_names(),
    }


# ---------------------------------------------------------------------------
# Execução direta
# ---------------------------------------------------------------------------

def main() -> None:
    import uvicorn

    try:
        settings = load_settings()
    except ConfigError as exc:
        logging.basicConfig(level=logging.ERROR)
        logger.error("Configuração inválida: %s", exc)
        sys.exit(1)

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("🚀 Social Logistics MCP Server running on port %d", settings.port)
    logger.info("📍 Health check: http://localhost:%d/health", settings.port)
    logger.info("🔧 MCP endpoint: http://localhost:%d/mcp", settings.port)

    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level)


if __name__ == "__main__":
    main()
