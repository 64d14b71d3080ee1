"""Statistics Aggregator - Agregacoes somente leitura (admin)."""

from __future__ import annotations

from ..config import QcmSettings, get_settings
from ..models.enums import QuestionStatus
from ..models.orm import Question
from ..models.schemas import (
    AdminFilterOptionsResponse,
    AttemptGroupStats,
    AttemptStatsResponse,
    QuestionStatsResponse,
)
from ..storage.attempt_store import AttemptStore
from ..storage.database import Database
from ..storage.question_store import QuestionStore


class StatisticsAggregator:
    """Contagens, taxas e facetas sobre o banco de questoes e tentativas.

    Nenhuma operacao altera dados. Banco vazio retorna zeros e listas vazias.
    """

    def __init__(self, database: Database, settings: QcmSettings | None = None):
        self.database = database
        self.settings = settings or get_settings()

    async def get_question_stats(self) -> QuestionStatsResponse:
        """Contagem por status, dificuldade, escola e materia + taxa de acerto."""
        async with self.database.session() as session:
            store = QuestionStore(session)
            by_status = await store.count_by(Question.status)
            by_difficulty = await store.count_by(Question.difficulty)
            by_school = await store.count_by(Question.school)
            by_matiere = await store.count_by(Question.matiere)
            answered, correct = await store.success_totals()

        success_rate = (correct / answered * 100) if answered > 0 else 0.0
        return QuestionStatsResponse(
            total_questions=sum(by_status.values()),
            published_questions=by_status.get(QuestionStatus.PUBLISHED.value, 0),
            by_status=by_status,
            by_difficulty=by_difficulty,
            by_school=by_school,
            by_matiere=by_matiere,
            average_success_rate=round(success_rate, 1),
        )

    async def get_question_filter_options(self) -> AdminFilterOptionsResponse:
        """Taxonomia completa (inclui DRAFT/ARCHIVED) para gestao de questoes."""
        async with self.database.session() as session:
            store = QuestionStore(session)
            schools = await store.distinct_values(Question.school, published_only=False)
            matieres = await store.distinct_values(Question.matiere, published_only=False)
            chapters = await store.distinct_values(Question.chapter, published_only=False)
            difficulties = await store.present_difficulties(published_only=False)
            statuses = set(await store.distinct_values(Question.status, published_only=False))

        return AdminFilterOptionsResponse(
            schools=schools,
            matieres=matieres,
            chapters=chapters,
            difficulties=difficulties,
            statuses=[s for s in QuestionStatus if s in statuses],
        )

    async def get_attempt_stats(self) -> AttemptStatsResponse:
        """Media e taxa de aprovacao das tentativas SUBMITTED."""
        pass_percentage = self.settings.QUIZ_PASS_PERCENTAGE
        async with self.database.session() as session:
            rows = await AttemptStore(session).aggregate_submitted(pass_percentage)

        groups = [
            AttemptGroupStats(
                school=school,
                matiere=matiere,
                attempts=count,
                average_percentage=round(avg, 1),
                pass_rate=round(passed / count * 100, 1),
            )
            for school, matiere, count, avg, passed in rows
        ]

        total = sum(r[2] for r in rows)
        if total == 0:
            return AttemptStatsResponse(pass_percentage=pass_percentage)

        weighted_avg = sum(r[2] * r[3] for r in rows) / total
        passed_total = sum(r[4] for r in rows)
        return AttemptStatsResponse(
            total_attempts=total,
            average_percentage=round(weighted_avg, 1),
            pass_rate=round(passed_total / total * 100, 1),
            pass_percentage=pass_percentage,
            by_combination=groups,
        )
