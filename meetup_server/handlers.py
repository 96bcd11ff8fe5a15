"""
Handlers das ferramentas de coordenação de encontros.
=====================================================
Cada handler recebe um modelo de argumentos já validado e devolve um
``ToolResult`` com o payload estruturado e um resumo legível (em coreano,
com emojis) para exibição direta no chat.

Os dados retornados ainda são fixos: agenda, mapa, avaliações e pagamentos
são simulados pelas tabelas mock abaixo. Em produção seriam substituídos por
integrações reais sem alterar o contrato das ferramentas.

Política de argumentos: campos ausentes assumem o valor vazio natural
(lista vazia, string vazia, zero) e o handler produz um resultado
degenerado em vez de falhar. Tipos incompatíveis são rejeitados pela
validação do modelo.
"""

from __future__ import annotations

import math
import time
import uuid
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import AfterValidator, BaseModel, Field

from shared.mcp_types import ToolResult


def _finite(value: Union[int, float]) -> Union[int, float]:
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError("número deve ser finito")
    return value


Number = Annotated[Union[int, float], AfterValidator(_finite)]


# ---------------------------------------------------------------------------
# Modelos de argumentos, um por ferramenta
# ---------------------------------------------------------------------------

class FindOptimalTimesArgs(BaseModel):
    participants: list[str] = Field(default_factory=list)
    date_range: str = ""
    duration_hours: Number = 3


class VenuePreferences(BaseModel):
    cuisine: Optional[str] = None
    no_spicy: Optional[bool] = None
    indoor_only: Optional[bool] = None
    max_budget_per_person: Optional[Number] = None


class RecommendVenuesArgs(BaseModel):
    participant_locations: list[str] = Field(default_factory=list)
    meeting_datetime: str = ""
    category: str = "맛집"
    preferences: Optional[VenuePreferences] = None


class CreateMeetupPollArgs(BaseModel):
    time_options: list[dict[str, Any]] = Field(default_factory=list)
    venue_options: list[dict[str, Any]] = Field(default_factory=list)
    deadline_hours: Number = 24


class FinalizeMeetupArgs(BaseModel):
    selected_time: str = ""
    selected_venue: str = ""
    participants: list[str] = Field(default_factory=list)
    make_reservation: bool = False


class InitiateDutchPayArgs(BaseModel):
    total_amount: Number = 0
    participants: list[str] = Field(default_factory=list)
    payer: str = ""
    split_type: Literal["equal", "custom"] = "equal"


# ---------------------------------------------------------------------------
# Dados mock (simulam agenda e base de estabelecimentos)
# ---------------------------------------------------------------------------
CANDIDATE_SLOTS: tuple[dict[str, Any], ...] = (
    {
        "datetime": "토요일 (1/11) 18:00",
        "score": 0.95,
        "conflict_reason": None,
        "reason": "전원 가능, 저녁 프라임 타임",
    },
    {
        "datetime": "일요일 (1/12) 12:00",
        "score": 0.80,
        "conflict_reason": "오후 일정 있음",
        "reason": "1명 제외 가능",
    },
)

VENUES: tuple[dict[str, Any], ...] = (
    {
        "name": "봉피양 양재점",
        "category": "한식 (칼국수/만두)",
        "rating": 4.6,
        "avg_travel_minutes": 22,
        "fairness_score": 0.92,
        "note": "칼국수 맛집, 단체석 있음",
    },
    {
        "name": "매드포갈릭 강남점",
        "category": "양식 (파스타)",
        "rating": 4.4,
        "avg_travel_minutes": 25,
        "fairness_score": 0.88,
        "note": "분위기 좋음",
    },
)

# Com 3+ locais o ponto médio cai mais ao sul
CENTROID_THRESHOLD = 3
CENTROID_MANY = "양재역"
CENTROID_FEW = "강남역"

RANK_LABELS = (("🥇", "추천 1순위"), ("🥈", "추천 2순위"))


def _new_id(prefix: str) -> str:
    """Identificador único: timestamp em ms + sufixo aleatório."""
    return f"{prefix}_{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}"


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------

def _build_slot(template: dict[str, Any], participants: list[str]) -> dict[str, Any]:
    conflicts: list[dict[str, str]] = []
    available = list(participants)
    if template["conflict_reason"] and participants:
        # O último participante (ordem de entrada) é quem tem conflito
        conflicts.append({"user": available.pop(), "reason": template["conflict_reason"]})
    return {
        "datetime": template["datetime"],
        "score": template["score"],
        "available_count": len(participants) - len(conflicts),
        "available_users": available,
        "conflicts": conflicts,
        "reason": template["reason"],
    }


def find_optimal_times(args: FindOptimalTimesArgs) -> ToolResult:
    count = len(args.participants)
    templates = sorted(CANDIDATE_SLOTS, key=lambda t: t["score"], reverse=True)
    slots = [_build_slot(t, args.participants) for t in templates]

    lines = [f"📅 {count}명의 일정을 분석했어요!"]
    for (medal, label), template, slot in zip(RANK_LABELS, templates, slots):
        availability = (
            f"{slot['available_count']}명 전원 가능 ✅"
            if template["conflict_reason"] is None
            else f"{slot['available_count']}명 가능"
        )
        lines.append(f"{medal} {label}: {slot['datetime']}\n   → {availability}")
    lines.append("어떤 시간으로 할까요?")

    return ToolResult(
        success=True,
        data={
            "search_range": args.date_range,
            "duration_hours": args.duration_hours,
            "total_participants": count,
            "recommended_slots": slots,
        },
        message="\n\n".join(lines),
    )


def recommend_venues(args: RecommendVenuesArgs) -> ToolResult:
    location_count = len(args.participant_locations)
    centroid = CENTROID_MANY if location_count >= CENTROID_THRESHOLD else CENTROID_FEW
    venues = sorted(
        (dict(v) for v in VENUES),
        key=lambda v: (v["fairness_score"], v["rating"]),
        reverse=True,
    )

    lines = [
        f"📍 {location_count}명의 위치를 분석했어요!",
        f"🎯 중심 지점: {centroid} 근처",
    ]
    for (medal, _label), venue in zip(RANK_LABELS, venues):
        lines.append(
            f"{medal} {venue['name']}\n"
            f"   ⭐ {venue['rating']} | 평균 {venue['avg_travel_minutes']}분"
        )
    lines.append("어떤 장소가 좋을까요?")

    return ToolResult(
        success=True,
        data={"centroid": centroid, "category": args.category, "venues": venues},
        message="\n\n".join(lines),
    )


def create_meetup_poll(args: CreateMeetupPollArgs) -> ToolResult:
    time_count = len(args.time_options)
    venue_count = len(args.venue_options)
    return ToolResult(
        success=True,
        data={
            "poll_id": _new_id("poll"),
            "time_options_count": time_count,
            "venue_options_count": venue_count,
            "deadline_hours": args.deadline_hours,
            "status": "active",
        },
        message=(
            "🗳️ 투표를 생성했어요!\n\n"
            f"📅 시간 옵션: {time_count}개\n"
            f"📍 장소 옵션: {venue_count}개\n"
            f"⏰ 마감: {args.deadline_hours}시간 후\n\n"
            "참여자들에게 투표 알림을 보낼게요!"
        ),
    )


def finalize_meetup(args: FinalizeMeetupArgs) -> ToolResult:
    count = len(args.participants)
    message = (
        "✅ 모임이 확정되었어요! 🎉\n\n"
        f"📅 일시: {args.selected_time}\n"
        f"📍 장소: {args.selected_venue}\n"
        f"👥 참석: {', '.join(args.participants)}\n\n"
        f"{count}명의 캘린더에 일정을 등록했어요!"
    )
    if args.make_reservation:
        message += f"\n🍽️ {args.selected_venue} 예약도 요청했어요!"

    return ToolResult(
        success=True,
        data={
            "confirmed_time": args.selected_time,
            "confirmed_venue": args.selected_venue,
            "participants": args.participants,
            "calendar_events_created": count,
            "reservation_requested": args.make_reservation,
        },
        message=message,
    )


def _ceil_div(total: Union[int, float], parts: int) -> int:
    """Teto de total/parts; inteiros usam divisão exata (sem passar por float)."""
    if isinstance(total, int):
        return -(-total // parts)
    return math.ceil(total / parts)


def initiate_dutch_pay(args: InitiateDutchPayArgs) -> ToolResult:
    per_person = _ceil_div(args.total_amount, max(len(args.participants), 1))
    return ToolResult(
        success=True,
        data={
            "request_id": _new_id("pay"),
            "total_amount": args.total_amount,
            "per_person": per_person,
            "payer": args.payer,
            "participants": args.participants,
            "split_type": args.split_type,
        },
        message=(
            "💰 정산을 시작했어요!\n\n"
            f"💵 총 금액: {args.total_amount:,}원\n"
            f"👤 결제자: {args.payer}\n"
            f"📊 1인당: {per_person:,}원\n\n"
            "카카오페이로 송금 요청을 보낼게요!"
        ),
    )
