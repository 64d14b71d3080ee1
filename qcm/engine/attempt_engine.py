"""Attempt Engine - Ciclo de vida da tentativa (CREATED -> SUBMITTED)."""

from __future__ import annotations

import math
import random

from ..config import QcmSettings, get_settings
from ..exceptions import ConflictError, NotFoundError, ValidationError
from ..logger import get_logger
from ..models.enums import AttemptStatus
from ..models.orm import QuizAttempt, utcnow
from ..models.schemas import (
    AttemptDetailResponse,
    AttemptReviewItem,
    AttemptSummary,
    HistoryFilters,
    HistoryResponse,
    ScoreSummary,
    StartQuizRequest,
    StartQuizResponse,
    SubmitQuizRequest,
    SubmitQuizResponse,
)
from ..models.state import AttemptSnapshot
from ..storage.attempt_store import AttemptStore
from ..storage.database import Database
from ..storage.question_store import QuestionStore
from .sampler import QuestionSampler
from .scoring_engine import QuizScoringEngine

logger = get_logger("attempts")


class AttemptEngine:
    """Maquina de estados da tentativa de quiz.

    Estados:
        CREATED: snapshot persistido, sem respostas
        SUBMITTED: terminal; respostas e nota persistidas

    Cada operacao abre sua propria sessao (unidade de trabalho). A submissao
    e atomica: leitura do status, UPDATE condicional, insercao das respostas
    e contadores das questoes sao gravados no mesmo commit.

    Reenvio de uma tentativa SUBMITTED gera ConflictError; a nota gravada
    nunca muda.
    """

    def __init__(
        self,
        database: Database,
        settings: QcmSettings | None = None,
        scoring: QuizScoringEngine | None = None,
        rng: random.Random | None = None,
    ):
        self.database = database
        self.settings = settings or get_settings()
        self.scoring = scoring or QuizScoringEngine()
        self.rng = rng

    # =========================================================================
    # START
    # =========================================================================

    def _validate_start(self, request: StartQuizRequest) -> int:
        if not request.school or not request.matiere:
            raise ValidationError(
                "Escola e materia sao obrigatorias",
                details={"school": request.school, "matiere": request.matiere},
            )
        count = self.settings.resolve_question_count(request.count)
        low, high = self.settings.QUIZ_MIN_QUESTIONS, self.settings.QUIZ_MAX_QUESTIONS
        if not low <= count <= high:
            raise ValidationError(
                f"Numero de questoes deve ser entre {low} e {high}",
                details={"count": count, "min": low, "max": high},
            )
        return count

    async def start(self, user_id: str, request: StartQuizRequest) -> StartQuizResponse:
        """Sorteia questoes e cria tentativa CREATED com snapshot congelado.

        Pool vazio nao e erro: retorna ``attempt_id=None`` sem persistir nada.
        """
        count = self._validate_start(request)

        async with self.database.session() as session:
            sampler = QuestionSampler(QuestionStore(session), rng=self.rng)
            sample = await sampler.get_random_questions(request.school, request.matiere, count)

            if sample.empty:
                logger.info(
                    "Nenhuma questao disponivel",
                    user_id=user_id,
                    school=request.school,
                    matiere=request.matiere,
                )
                return StartQuizResponse(
                    attempt_id=None,
                    school=request.school,
                    matiere=request.matiere,
                    requested_count=count,
                    available_count=0,
                    insufficient=True,
                    questions=[],
                )

            snapshot = AttemptSnapshot.from_questions(sample.questions)
            attempt = await AttemptStore(session).create_attempt(
                user_id=user_id,
                school=request.school,
                matiere=request.matiere,
                requested_count=count,
                snapshot=snapshot,
            )

        logger.info(
            "Quiz iniciado",
            attempt_id=attempt.id,
            user_id=user_id,
            questions=len(snapshot),
        )
        return StartQuizResponse(
            attempt_id=attempt.id,
            school=attempt.school,
            matiere=attempt.matiere,
            requested_count=count,
            available_count=sample.available_count,
            insufficient=sample.insufficient,
            questions=snapshot.views(),
        )

    # =========================================================================
    # LEITURA
    # =========================================================================

    async def get_by_id(self, attempt_id: str, user_id: str) -> AttemptDetailResponse:
        """Retorna tentativa do proprio usuario.

        Raises:
            NotFoundError: Inexistente ou de outro usuario (mesmo resultado)
        """
        async with self.database.session() as session:
            attempt = await AttemptStore(session).get_for_user(
                attempt_id, user_id, with_answers=True
            )
            if attempt is None:
                raise NotFoundError("Tentativa nao encontrada", details={"attempt_id": attempt_id})
            return self._to_detail(attempt)

    async def get_history(self, user_id: str, filters: HistoryFilters) -> HistoryResponse:
        """Historico paginado das tentativas do usuario."""
        max_limit = self.settings.HISTORY_MAX_LIMIT
        if filters.limit > max_limit:
            raise ValidationError(
                f"limit deve ser no maximo {max_limit}",
                details={"limit": filters.limit},
            )

        async with self.database.session() as session:
            attempts, total = await AttemptStore(session).list_for_user(user_id, filters)

        return HistoryResponse(
            attempts=[self._to_summary(a) for a in attempts],
            total=total,
            page=filters.page,
            limit=filters.limit,
            total_pages=math.ceil(total / filters.limit),
        )

    # =========================================================================
    # SUBMIT
    # =========================================================================

    async def submit(self, user_id: str, request: SubmitQuizRequest) -> SubmitQuizResponse:
        """Corrige e encerra a tentativa (uma unica vez).

        Raises:
            NotFoundError: Inexistente ou de outro usuario
            ConflictError: Tentativa ja submetida
        """
        async with self.database.session() as session:
            attempts = AttemptStore(session)
            attempt = await attempts.get_for_user(request.attempt_id, user_id)
            if attempt is None:
                raise NotFoundError(
                    "Tentativa nao encontrada", details={"attempt_id": request.attempt_id}
                )
            if attempt.status == AttemptStatus.SUBMITTED:
                raise ConflictError(
                    "Tentativa ja submetida",
                    details={"attempt_id": attempt.id, "status": attempt.status.value},
                )

            # rollback expira a instancia: nao ler atributos de ``attempt`` depois dele
            attempt_id = attempt.id
            snapshot = AttemptSnapshot.from_list(attempt.snapshot)
            score = self.scoring.calculate_score(snapshot, request.answers)

            ignored = {a.question_id for a in request.answers} - set(snapshot.question_ids)
            if ignored:
                logger.debug(
                    "Respostas fora do snapshot ignoradas",
                    attempt_id=attempt_id,
                    ignored=len(ignored),
                )

            submitted_at = utcnow()
            claimed = await attempts.mark_submitted(
                attempt_id,
                user_id,
                correct_count=score.correct_count,
                percentage=score.percentage,
                total_points=score.total_points,
                total_time_spent=request.total_time_spent,
                submitted_at=submitted_at,
            )
            if not claimed:
                await session.rollback()
                logger.warning("Submissao concorrente rejeitada", attempt_id=attempt_id)
                raise ConflictError(
                    "Tentativa ja submetida",
                    details={"attempt_id": attempt_id, "status": AttemptStatus.SUBMITTED.value},
                )

            await attempts.add_answers(attempt_id, score.answers)
            await QuestionStore(session).record_answer_outcomes(
                [(a["question_id"], a["correct"]) for a in score.answers]
            )
            await session.commit()

        logger.info(
            "Quiz submetido",
            attempt_id=attempt_id,
            user_id=user_id,
            correct=score.correct_count,
            total=score.total_count,
            percentage=score.percentage,
        )
        return SubmitQuizResponse(
            attempt_id=attempt_id,
            status=AttemptStatus.SUBMITTED,
            score=score.summary(),
            breakdown=score.breakdown(),
            difficulty_breakdown=score.difficulty_breakdown,
            submitted_at=submitted_at,
        )

    # =========================================================================
    # HELPERS
    # =========================================================================

    @staticmethod
    def _score_of(attempt: QuizAttempt) -> ScoreSummary | None:
        if attempt.status != AttemptStatus.SUBMITTED:
            return None
        return ScoreSummary(
            correct=attempt.correct_count or 0,
            total=attempt.total_count,
            percentage=attempt.percentage or 0,
            total_points=attempt.total_points or 0,
            max_points=attempt.max_points,
        )

    def _to_detail(self, attempt: QuizAttempt) -> AttemptDetailResponse:
        snapshot = AttemptSnapshot.from_list(attempt.snapshot)
        review = []
        if attempt.status == AttemptStatus.SUBMITTED:
            answers = {a.question_id: a for a in attempt.answers}
            for question in snapshot:
                answer = answers.get(question.question_id)
                review.append(
                    AttemptReviewItem(
                        question=question.to_view(),
                        selected_option_id=answer.selected_option_id if answer else None,
                        correct=bool(answer and answer.is_correct),
                        correct_option_id=question.correct_option_id,
                        explanation=question.explanation,
                        points_earned=answer.points_earned if answer else 0,
                        time_spent=answer.time_spent if answer else None,
                    )
                )

        return AttemptDetailResponse(
            attempt_id=attempt.id,
            status=attempt.status,
            school=attempt.school,
            matiere=attempt.matiere,
            requested_count=attempt.requested_count,
            created_at=attempt.created_at,
            submitted_at=attempt.submitted_at,
            total_time_spent=attempt.total_time_spent,
            questions=snapshot.views(),
            score=self._score_of(attempt),
            review=review,
        )

    def _to_summary(self, attempt: QuizAttempt) -> AttemptSummary:
        return AttemptSummary(
            attempt_id=attempt.id,
            status=attempt.status,
            school=attempt.school,
            matiere=attempt.matiere,
            total_count=attempt.total_count,
            correct_count=attempt.correct_count,
            percentage=attempt.percentage,
            total_points=attempt.total_points,
            max_points=attempt.max_points,
            total_time_spent=attempt.total_time_spent,
            created_at=attempt.created_at,
            submitted_at=attempt.submitted_at,
        )
