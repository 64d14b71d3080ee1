"""Quiz Router - Endpoints FastAPI do fluxo do aluno."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Literal

from fastapi import APIRouter, Depends, Query

import app_state

from .auth import CurrentUser, get_current_user
from .engine.attempt_engine import AttemptEngine
from .logger import get_logger
from .models.enums import SortOrder
from .models.schemas import (
    AttemptDetailResponse,
    FilterOptionsResponse,
    HistoryFilters,
    HistoryResponse,
    MatieresResponse,
    QuestionCountResponse,
    QuizFilterOptionsResponse,
    StartQuizRequest,
    StartQuizResponse,
    SubmitQuizRequest,
    SubmitQuizResponse,
)
from .storage.question_store import QuestionStore

logger = get_logger("quiz")

router = APIRouter(prefix="/quiz", tags=["Quiz"])


# =============================================================================
# DEPENDENCY INJECTION
# =============================================================================


async def get_attempt_engine() -> AttemptEngine:
    """Dependency para obter AttemptEngine configurado."""
    database = await app_state.get_database()
    return AttemptEngine(database)


async def get_question_store() -> AsyncIterator[QuestionStore]:
    """Dependency: QuestionStore com sessao do request."""
    database = await app_state.get_database()
    async with database.session() as session:
        yield QuestionStore(session)


# =============================================================================
# FILTROS
# =============================================================================


@router.get("/options", response_model=FilterOptionsResponse)
async def get_filter_options(
    _user: CurrentUser = Depends(get_current_user),
    store: QuestionStore = Depends(get_question_store),
):
    """Escolas, materias, capitulos e dificuldades das questoes publicadas."""
    return await store.get_filter_options()


@router.get("/filter-options", response_model=QuizFilterOptionsResponse)
async def get_quiz_filter_options(
    _user: CurrentUser = Depends(get_current_user),
    store: QuestionStore = Depends(get_question_store),
):
    """Apenas combinacoes escola/materia que possuem questoes.

    Usado pela tela de inicio para impedir selecao de combinacao vazia.
    """
    return await store.get_quiz_filter_options()


@router.get("/matieres", response_model=MatieresResponse)
async def get_matieres(
    school: str = Query(..., min_length=1),
    _user: CurrentUser = Depends(get_current_user),
    store: QuestionStore = Depends(get_question_store),
):
    matieres = await store.get_matieres_for_school(school)
    return MatieresResponse(school=school, matieres=matieres)


@router.get("/count", response_model=QuestionCountResponse)
async def get_question_count(
    school: str = Query(..., min_length=1),
    matiere: str = Query(..., min_length=1),
    _user: CurrentUser = Depends(get_current_user),
    store: QuestionStore = Depends(get_question_store),
):
    count = await store.get_question_count(school, matiere)
    return QuestionCountResponse(school=school, matiere=matiere, count=count)


# =============================================================================
# CICLO DA TENTATIVA
# =============================================================================


@router.post("/start", response_model=StartQuizResponse)
async def start_quiz(
    request: StartQuizRequest,
    user: CurrentUser = Depends(get_current_user),
    engine: AttemptEngine = Depends(get_attempt_engine),
):
    """Inicia tentativa com questoes sorteadas.

    - Sorteio sem reposicao, refeito a cada chamada
    - Nenhuma questao expoe a alternativa correta
    - Pool vazio retorna ``attempt_id=null`` e ``insufficient=true`` (200)
    """
    return await engine.start(user.id, request)


@router.post("/submit", response_model=SubmitQuizResponse)
async def submit_quiz(
    request: SubmitQuizRequest,
    user: CurrentUser = Depends(get_current_user),
    engine: AttemptEngine = Depends(get_attempt_engine),
):
    """Corrige a tentativa contra o snapshot congelado.

    - Questoes sem resposta contam como erradas
    - Reenvio retorna 409 (a nota gravada nao muda)
    """
    return await engine.submit(user.id, request)


@router.get("/history", response_model=HistoryResponse)
async def get_history(
    school: str | None = Query(default=None),
    matiere: str | None = Query(default=None),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1),
    sort_by: Literal["created_at", "percentage", "correct_count"] = Query(default="created_at"),
    sort_order: SortOrder = Query(default=SortOrder.DESC),
    user: CurrentUser = Depends(get_current_user),
    engine: AttemptEngine = Depends(get_attempt_engine),
):
    """Historico de tentativas do usuario autenticado."""
    filters = HistoryFilters(
        school=school,
        matiere=matiere,
        page=page,
        limit=limit,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return await engine.get_history(user.id, filters)


@router.get("/{attempt_id}", response_model=AttemptDetailResponse)
async def get_attempt(
    attempt_id: str,
    user: CurrentUser = Depends(get_current_user),
    engine: AttemptEngine = Depends(get_attempt_engine),
):
    """Detalhe da tentativa (404 se inexistente ou de outro usuario)."""
    return await engine.get_by_id(attempt_id, user.id)
