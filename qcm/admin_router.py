"""Questions Router - Gestao do banco de questoes e estatisticas (admin).

``require_admin`` fica em ``dependencies`` do router: e resolvido antes das
dependencias de cada endpoint, entao 401/403 nunca abrem sessao no banco.

Nao existe DELETE. Questoes saem de circulacao via PATCH com
``status=ARCHIVED`` (tentativas antigas continuam corrigiveis pelo snapshot).
"""

from __future__ import annotations

import math

from fastapi import APIRouter, Depends, Query

import app_state

from .auth import CurrentUser, require_admin
from .engine.stats_engine import StatisticsAggregator
from .exceptions import NotFoundError
from .logger import get_logger
from .models.enums import QuestionDifficulty, QuestionStatus, SortOrder
from .models.schemas import (
    AdminFilterOptionsResponse,
    AttemptStatsResponse,
    QuestionCreate,
    QuestionListFilters,
    QuestionListResponse,
    QuestionRead,
    QuestionStatsResponse,
    QuestionUpdate,
)
from .router import get_question_store
from .storage.question_store import QuestionStore

logger = get_logger("questions")

router = APIRouter(
    prefix="/questions",
    tags=["Questions"],
    dependencies=[Depends(require_admin)],
)


async def get_stats_aggregator() -> StatisticsAggregator:
    database = await app_state.get_database()
    return StatisticsAggregator(database)


# =============================================================================
# ESTATISTICAS
# =============================================================================


@router.get("/stats", response_model=QuestionStatsResponse)
async def get_question_stats(aggregator: StatisticsAggregator = Depends(get_stats_aggregator)):
    """Contagens por status, dificuldade, escola e materia."""
    return await aggregator.get_question_stats()


@router.get("/attempt-stats", response_model=AttemptStatsResponse)
async def get_attempt_stats(aggregator: StatisticsAggregator = Depends(get_stats_aggregator)):
    """Media e taxa de aprovacao por escola/materia."""
    return await aggregator.get_attempt_stats()


@router.get("/filter-options", response_model=AdminFilterOptionsResponse)
async def get_question_filter_options(
    aggregator: StatisticsAggregator = Depends(get_stats_aggregator),
):
    """Taxonomia completa, incluindo questoes nao publicadas."""
    return await aggregator.get_question_filter_options()


# =============================================================================
# CRUD
# =============================================================================


@router.get("", response_model=QuestionListResponse)
async def list_questions(
    search: str | None = Query(default=None),
    school: str | None = Query(default=None),
    matiere: str | None = Query(default=None),
    chapter: str | None = Query(default=None),
    difficulty: QuestionDifficulty | None = Query(default=None),
    status: QuestionStatus | None = Query(default=None),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    sort_by: str = Query(default="created_at", pattern="^(created_at|difficulty|times_answered)$"),
    sort_order: SortOrder = Query(default=SortOrder.DESC),
    store: QuestionStore = Depends(get_question_store),
):
    filters = QuestionListFilters(
        search=search,
        school=school,
        matiere=matiere,
        chapter=chapter,
        difficulty=difficulty,
        status=status,
        page=page,
        limit=limit,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    questions, total = await store.list_questions(filters)
    return QuestionListResponse(
        questions=[QuestionRead.model_validate(q) for q in questions],
        total=total,
        page=page,
        limit=limit,
        total_pages=math.ceil(total / limit),
    )


@router.post("", response_model=QuestionRead, status_code=201)
async def create_question(
    data: QuestionCreate,
    admin: CurrentUser = Depends(require_admin),
    store: QuestionStore = Depends(get_question_store),
):
    question = await store.create_question(data, uploaded_by=admin.id)
    return QuestionRead.model_validate(question)


@router.get("/{question_id}", response_model=QuestionRead)
async def get_question(question_id: str, store: QuestionStore = Depends(get_question_store)):
    question = await store.get_question(question_id)
    if question is None:
        raise NotFoundError("Questao nao encontrada", details={"question_id": question_id})
    return QuestionRead.model_validate(question)


@router.patch("/{question_id}", response_model=QuestionRead)
async def update_question(
    question_id: str,
    data: QuestionUpdate,
    store: QuestionStore = Depends(get_question_store),
):
    """Atualiza questao. Tentativas ja criadas mantem a chave congelada."""
    question = await store.update_question(question_id, data)
    return QuestionRead.model_validate(question)
