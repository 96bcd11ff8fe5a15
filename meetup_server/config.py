"""
Configuração do servidor a partir de variáveis de ambiente.

Lê um ``.env`` opcional na raiz do projeto (python-dotenv) antes de
consultar ``os.environ``; variáveis já definidas no ambiente têm prioridade.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

_project_root = Path(__file__).resolve().parents[1]

DEFAULT_PORT = 3000
DEFAULT_HOST = "0.0.0.0"
DEFAULT_LOG_LEVEL = "info"
LOG_LEVELS = ("critical", "error", "warning", "info", "debug")


class ConfigError(ValueError):
    """Valor de configuração inválido."""


@dataclass(frozen=True)
class ServerSettings:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = DEFAULT_LOG_LEVEL


def _parse_port(raw: str) -> int:
    try:
        port = int(raw)
    except ValueError as exc:
        raise ConfigError(f"PORT deve ser um inteiro, recebido: {raw!r}") from exc
    if not 1 <= port <= 65535:
        raise ConfigError(f"PORT fora do intervalo 1-65535: {port}")
    return port


def _parse_log_level(raw: str) -> str:
    level = raw.strip().lower()
    if level not in LOG_LEVELS:
        raise ConfigError(f"LOG_LEVEL inválido: {raw!r} (use um de {', '.join(LOG_LEVELS)})")
    return level


def load_settings(dotenv_path: Path | None = None) -> ServerSettings:
    """Monta ``ServerSettings`` a partir do ``.env`` e do ambiente."""
    load_dotenv(dotenv_path=dotenv_path or _project_root / ".env")

    return ServerSettings(
        host=os.getenv("HOST", DEFAULT_HOST),
        port=_parse_port(os.getenv("PORT", str(DEFAULT_PORT))),
        log_level=_parse_log_level(os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL)),
    )
