"""
Catálogo de Ferramentas — Coordenação de Encontros
=====================================================
Registro estático das cinco ferramentas MCP expostas pelo servidor, cada uma
com seu ``inputSchema`` (JSON Schema) e descrição legível por humanos.

O catálogo é montado uma única vez na importação do módulo e nunca é
alterado depois; leituras concorrentes não precisam de sincronização.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from shared.mcp_types import ToolDescriptor


class ToolName(str, Enum):
    """Conjunto fechado de ferramentas conhecidas pelo servidor."""

    FIND_OPTIMAL_TIMES = "find_optimal_times"
    RECOMMEND_VENUES = "recommend_venues"
    CREATE_MEETUP_POLL = "create_meetup_poll"
    FINALIZE_MEETUP = "finalize_meetup"
    INITIATE_DUTCH_PAY = "initiate_dutch_pay"


def _string_list(description: str) -> dict[str, Any]:
    return {"type": "array", "items": {"type": "string"}, "description": description}


def _object_list(description: str) -> dict[str, Any]:
    return {"type": "array", "items": {"type": "object"}, "description": description}


def _schema(properties: dict[str, Any], required: list[str]) -> dict[str, Any]:
    return {"type": "object", "properties": properties, "required": required}


TOOLS: tuple[ToolDescriptor, ...] = (
    ToolDescriptor(
        name=ToolName.FIND_OPTIMAL_TIMES.value,
        description=(
            "여러 참여자의 일정을 분석하여 모임 가능한 최적의 시간대를 찾습니다. "
            "참여자들의 캘린더 충돌 분석, 저녁 시간대(18-21시) 및 주말 선호도 반영, "
            "전후 30분 버퍼 타임 고려, 최대 다수가 참여 가능한 시간 우선 추천합니다."
        ),
        inputSchema=_schema(
            {
                "participants": _string_list("참여자 이름 또는 ID 목록"),
                "date_range": {
                    "type": "string",
                    "description": "검색할 날짜 범위 (예: 다음 주, 이번 주말)",
                },
                "duration_hours": {
                    "type": "number",
                    "description": "예상 모임 시간 (기본값: 3시간)",
                },
            },
            ["participants", "date_range"],
        ),
    ),
    ToolDescriptor(
        name=ToolName.RECOMMEND_VENUES.value,
        description=(
            "참여자들의 출발 위치를 기반으로 모두에게 공정한 모임 장소를 추천합니다. "
            "지리적 중심점 계산, 최대 이동 시간 최소화, 날씨 고려, 음식 선호도 반영합니다."
        ),
        inputSchema=_schema(
            {
                "participant_locations": _string_list("각 참여자의 출발 위치"),
                "meeting_datetime": {"type": "string", "description": "모임 예정 일시"},
                "category": {
                    "type": "string",
                    "description": "장소 유형 (맛집, 카페, 술집 등)",
                },
                "preferences": {
                    "type": "object",
                    "properties": {
                        "cuisine": {"type": "string"},
                        "no_spicy": {"type": "boolean"},
                        "indoor_only": {"type": "boolean"},
                        "max_budget_per_person": {"type": "number"},
                    },
                },
            },
            ["participant_locations"],
        ),
    ),
    ToolDescriptor(
        name=ToolName.CREATE_MEETUP_POLL.value,
        description=(
            "시간과 장소 옵션으로 투표를 생성합니다. "
            "그룹 채팅에서 참여자들이 선호하는 옵션을 선택할 수 있습니다."
        ),
        inputSchema=_schema(
            {
                "time_options": _object_list("시간 옵션 목록"),
                "venue_options": _object_list("장소 옵션 목록"),
                "deadline_hours": {"type": "number", "description": "투표 마감까지 시간"},
            },
            ["time_options", "venue_options"],
        ),
    ),
    ToolDescriptor(
        name=ToolName.FINALIZE_MEETUP.value,
        description=(
            "투표 결과를 바탕으로 모임을 확정하고 참여자들에게 알립니다. "
            "모든 참여자 캘린더에 일정 등록, 확정 메시지 발송합니다."
        ),
        inputSchema=_schema(
            {
                "selected_time": {"type": "string", "description": "선택된 시간"},
                "selected_venue": {"type": "string", "description": "선택된 장소"},
                "participants": _string_list("참여자 목록"),
                "make_reservation": {"type": "boolean", "description": "예약 진행 여부"},
            },
            ["selected_time", "selected_venue", "participants"],
        ),
    ),
    ToolDescriptor(
        name=ToolName.INITIATE_DUTCH_PAY.value,
        description=(
            "모임 후 정산을 시작합니다. "
            "균등 분할 또는 커스텀 금액 설정, 송금 요청 생성합니다."
        ),
        inputSchema=_schema(
            {
                "total_amount": {"type": "number", "description": "총 금액 (원)"},
                "participants": _string_list("정산 참여자 목록"),
                "payer": {"type": "string", "description": "결제한 사람"},
                "split_type": {
                    "type": "string",
                    "enum": ["equal", "custom"],
                    "description": "분할 방식",
                },
            },
            ["total_amount", "participants", "payer"],
        ),
    ),
)


def list_tools() -> list[dict[str, Any]]:
    """Retorna o catálogo completo, em ordem fixa, no formato de ``tools/list``."""
    return [tool.model_dump(by_alias=True) for tool in TOOLS]


def tool_names() -> list[str]:
    return [tool.name for tool in TOOLS]
