"""Attempt Store - Persistencia das tentativas e respostas."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from sqlalchemy import case, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..models.enums import AttemptStatus, SortOrder
from ..models.orm import QuizAnswer, QuizAttempt
from ..models.schemas import HistoryFilters
from ..models.state import AttemptSnapshot

logger = logging.getLogger(__name__)


class AttemptStore:
    """Abstracao sobre ``quiz_attempts`` / ``quiz_answers``.

    Toda leitura e escopada por ``user_id``: a tentativa de outro usuario
    e indistinguivel de uma tentativa inexistente.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_attempt(
        self,
        user_id: str,
        school: str,
        matiere: str,
        requested_count: int,
        snapshot: AttemptSnapshot,
    ) -> QuizAttempt:
        """Persiste tentativa CREATED com o snapshot congelado."""
        attempt = QuizAttempt(
            user_id=user_id,
            school=school,
            matiere=matiere,
            requested_count=requested_count,
            snapshot=snapshot.to_list(),
            status=AttemptStatus.CREATED,
            total_count=len(snapshot),
            max_points=snapshot.max_points,
        )
        self.session.add(attempt)
        await self.session.commit()
        logger.debug(f"Tentativa criada: {attempt.id} ({len(snapshot)} questoes)")
        return attempt

    async def get_for_user(
        self, attempt_id: str, user_id: str, with_answers: bool = False
    ) -> QuizAttempt | None:
        """Busca tentativa do usuario (None se inexistente ou de outro usuario)."""
        stmt = select(QuizAttempt).where(
            QuizAttempt.id == attempt_id,
            QuizAttempt.user_id == user_id,
        )
        if with_answers:
            stmt = stmt.options(selectinload(QuizAttempt.answers))
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def mark_submitted(
        self,
        attempt_id: str,
        user_id: str,
        *,
        correct_count: int,
        percentage: int,
        total_points: int,
        total_time_spent: int | None,
        submitted_at: datetime,
    ) -> bool:
        """Transicao condicional CREATED -> SUBMITTED.

        Executa ``UPDATE ... WHERE status = 'CREATED'`` sem commit. Retorna
        False quando nenhuma linha foi alterada (ja submetida / corrida perdida).
        """
        stmt = (
            update(QuizAttempt)
            .where(
                QuizAttempt.id == attempt_id,
                QuizAttempt.user_id == user_id,
                QuizAttempt.status == AttemptStatus.CREATED,
            )
            .values(
                status=AttemptStatus.SUBMITTED,
                correct_count=correct_count,
                percentage=percentage,
                total_points=total_points,
                total_time_spent=total_time_spent,
                submitted_at=submitted_at,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def add_answers(self, attempt_id: str, answers: list[dict[str, Any]]) -> None:
        """Insere as respostas corrigidas (sem commit)."""
        self.session.add_all(
            [
                QuizAnswer(
                    attempt_id=attempt_id,
                    question_id=a["question_id"],
                    position=position,
                    selected_option_id=a.get("selected_option_id"),
                    is_correct=a["correct"],
                    points_earned=a.get("points_earned", 0),
                    time_spent=a.get("time_spent"),
                )
                for position, a in enumerate(answers)
            ]
        )
        await self.session.flush()

    async def list_for_user(
        self, user_id: str, filters: HistoryFilters
    ) -> tuple[list[QuizAttempt], int]:
        """Historico paginado do usuario."""
        conditions = [QuizAttempt.user_id == user_id]
        if filters.school:
            conditions.append(QuizAttempt.school == filters.school)
        if filters.matiere:
            conditions.append(QuizAttempt.matiere == filters.matiere)

        total = (
            await self.session.execute(
                select(func.count(QuizAttempt.id)).where(*conditions)
            )
        ).scalar_one()

        sort_column = getattr(QuizAttempt, filters.sort_by)
        order = sort_column.asc() if filters.sort_order == SortOrder.ASC else sort_column.desc()
        stmt = (
            select(QuizAttempt)
            .where(*conditions)
            .order_by(order, QuizAttempt.id)
            .offset((filters.page - 1) * filters.limit)
            .limit(filters.limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    async def aggregate_submitted(self, pass_percentage: int) -> list[tuple[str, str, int, float, int]]:
        """Agrega tentativas SUBMITTED por escola/materia.

        Returns:
            Lista de (school, matiere, attempts, avg_percentage, passed)
        """
        passed = func.sum(case((QuizAttempt.percentage >= pass_percentage, 1), else_=0))
        stmt = (
            select(
                QuizAttempt.school,
                QuizAttempt.matiere,
                func.count(QuizAttempt.id),
                func.avg(QuizAttempt.percentage),
                passed,
            )
            .where(QuizAttempt.status == AttemptStatus.SUBMITTED)
            .group_by(QuizAttempt.school, QuizAttempt.matiere)
            .order_by(QuizAttempt.school, QuizAttempt.matiere)
        )
        rows = (await self.session.execute(stmt)).all()
        return [
            (school, matiere, int(count), float(avg or 0), int(ok or 0))
            for school, matiere, count, avg, ok in rows
        ]
