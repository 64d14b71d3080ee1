"""Question Store - Acesso ao banco de questoes (QCM)."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import case, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute

from ..exceptions import ConflictError, NotFoundError, ValidationError
from ..models.enums import QuestionDifficulty, QuestionStatus, SortOrder
from ..models.orm import Question
from ..models.schemas import (
    FilterOptionsResponse,
    QuestionCreate,
    QuestionListFilters,
    QuestionUpdate,
    QuizCombination,
    QuizFilterOptionsResponse,
)

logger = logging.getLogger(__name__)

_DIFFICULTY_ORDER = case(
    {
        QuestionDifficulty.EASY.value: 0,
        QuestionDifficulty.MEDIUM.value: 1,
        QuestionDifficulty.HARD.value: 2,
    },
    value=Question.difficulty,
)

_NULLABLE_FIELDS = {"explanation", "chapter", "time_limit", "image_url"}


class QuestionStore:
    """Abstracao sobre a tabela ``questions``.

    Ausencia de dados nunca e excecao: escola/materia desconhecida retorna
    zero ou lista vazia.

    Example:
        >>> store = QuestionStore(session)
        >>> await store.get_question_count("HEC", "Math")
        5
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    # =========================================================================
    # FACETAS
    # =========================================================================

    async def distinct_values(
        self, column: InstrumentedAttribute, published_only: bool = True
    ) -> list[Any]:
        """Valores distintos (nao nulos) de uma coluna, ordenados."""
        stmt = select(column).where(column.is_not(None)).distinct()
        if published_only:
            stmt = stmt.where(Question.status == QuestionStatus.PUBLISHED)
        result = await self.session.execute(stmt)
        return sorted(result.scalars().all())

    async def count_by(
        self, column: InstrumentedAttribute, published_only: bool = False
    ) -> dict[str, int]:
        """Contagem de questoes agrupada por coluna."""
        stmt = select(column, func.count(Question.id)).group_by(column)
        if published_only:
            stmt = stmt.where(Question.status == QuestionStatus.PUBLISHED)
        result = await self.session.execute(stmt)
        return {
            (key.value if hasattr(key, "value") else str(key)): count
            for key, count in result.all()
        }

    async def present_difficulties(self, published_only: bool = True) -> list[QuestionDifficulty]:
        """Dificuldades presentes, na ordem EASY -> HARD."""
        present = set(await self.distinct_values(Question.difficulty, published_only))
        return [d for d in QuestionDifficulty if d in present]

    async def get_filter_options(self) -> FilterOptionsResponse:
        """Escolas, materias, capitulos e dificuldades das questoes PUBLISHED."""
        return FilterOptionsResponse(
            schools=await self.distinct_values(Question.school),
            matieres=await self.distinct_values(Question.matiere),
            chapters=await self.distinct_values(Question.chapter),
            difficulties=await self.present_difficulties(),
        )

    async def get_question_count(self, school: str, matiere: str) -> int:
        """Numero de questoes PUBLISHED para escola + materia."""
        stmt = select(func.count(Question.id)).where(
            Question.school == school,
            Question.matiere == matiere,
            Question.status == QuestionStatus.PUBLISHED,
        )
        return (await self.session.execute(stmt)).scalar_one()

    async def get_matieres_for_school(self, school: str) -> list[str]:
        """Materias com ao menos uma questao PUBLISHED na escola."""
        stmt = (
            select(Question.matiere)
            .where(
                Question.school == school,
                Question.status == QuestionStatus.PUBLISHED,
            )
            .distinct()
        )
        result = await self.session.execute(stmt)
        return sorted(result.scalars().all())

    async def get_quiz_filter_options(self) -> QuizFilterOptionsResponse:
        """Apenas pares escola/materia com questoes disponiveis."""
        stmt = (
            select(Question.school, Question.matiere, func.count(Question.id))
            .where(Question.status == QuestionStatus.PUBLISHED)
            .group_by(Question.school, Question.matiere)
            .order_by(Question.school, Question.matiere)
        )
        rows = (await self.session.execute(stmt)).all()
        combinations = [
            QuizCombination(school=school, matiere=matiere, question_count=count)
            for school, matiere, count in rows
        ]
        return QuizFilterOptionsResponse(
            schools=sorted({c.school for c in combinations}),
            matieres=sorted({c.matiere for c in combinations}),
            combinations=combinations,
        )

    # =========================================================================
    # LEITURA PARA SORTEIO
    # =========================================================================

    async def list_candidate_ids(self, school: str, matiere: str) -> list[str]:
        """IDs das questoes PUBLISHED elegiveis (apenas IDs, pool pode ser grande)."""
        stmt = (
            select(Question.id)
            .where(
                Question.school == school,
                Question.matiere == matiere,
                Question.status == QuestionStatus.PUBLISHED,
            )
            .order_by(Question.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_many(self, ids: list[str]) -> list[Question]:
        """Carrega questoes preservando a ordem de ``ids``."""
        if not ids:
            return []
        result = await self.session.execute(select(Question).where(Question.id.in_(ids)))
        by_id = {q.id: q for q in result.scalars().all()}
        return [by_id[i] for i in ids if i in by_id]

    # =========================================================================
    # GESTAO (ADMIN)
    # =========================================================================

    async def get_question(self, question_id: str) -> Question | None:
        return await self.session.get(Question, question_id)

    async def create_question(
        self, data: QuestionCreate, uploaded_by: str | None = None
    ) -> Question:
        """Cria questao (versao 1).

        Raises:
            ConflictError: Ja existe questao com o ``id`` informado
        """
        if data.id and await self.get_question(data.id) is not None:
            raise ConflictError("Questao ja existe", details={"question_id": data.id})

        values = data.model_dump(exclude={"id", "options"})
        question = Question(
            **values,
            options=[o.model_dump(mode="json") for o in data.options],
            uploaded_by=uploaded_by,
            version=1,
        )
        if data.id:
            question.id = data.id
        self.session.add(question)
        try:
            await self.session.commit()
        except IntegrityError as e:
            # Corrida entre duas criacoes com o mesmo id
            await self.session.rollback()
            raise ConflictError(
                "Questao ja existe", details={"question_id": data.id}
            ) from e
        logger.info(f"Questao criada: {question.id} ({question.school}/{question.matiere})")
        return question

    async def update_question(self, question_id: str, data: QuestionUpdate) -> Question:
        """Atualiza questao; incrementa versao se alternativas/chave mudarem.

        Snapshots de tentativas existentes nao sao afetados.

        Raises:
            NotFoundError: Questao inexistente
            ValidationError: Chave de resposta fora das alternativas
        """
        question = await self.get_question(question_id)
        if question is None:
            raise NotFoundError(
                "Questao nao encontrada", details={"question_id": question_id}
            )

        changes = {
            name: value
            for name, value in data.model_dump(exclude_unset=True).items()
            if value is not None or name in _NULLABLE_FIELDS
        }
        if "options" in changes:
            changes["options"] = [o.model_dump(mode="json") for o in data.options or []]

        options = changes.get("options", question.options)
        correct = changes.get("correct_option_id", question.correct_option_id)
        option_ids = [o["id"] for o in options]
        if len(set(option_ids)) != len(option_ids):
            raise ValidationError("IDs de alternativas devem ser unicos")
        if correct not in option_ids:
            raise ValidationError(
                "correct_option_id nao esta entre as alternativas",
                details={"correct_option_id": correct, "options": option_ids},
            )

        key_changed = options != question.options or correct != question.correct_option_id
        for name, value in changes.items():
            setattr(question, name, value)
        if key_changed:
            question.version += 1

        await self.session.commit()
        logger.info(f"Questao atualizada: {question_id} (versao {question.version})")
        return question

    async def list_questions(self, filters: QuestionListFilters) -> tuple[list[Question], int]:
        """Listagem paginada com filtros."""
        conditions = []
        if filters.search:
            pattern = f"%{filters.search}%"
            conditions.append(
                or_(Question.text.ilike(pattern), Question.chapter.ilike(pattern))
            )
        if filters.school:
            conditions.append(Question.school == filters.school)
        if filters.matiere:
            conditions.append(Question.matiere == filters.matiere)
        if filters.chapter:
            conditions.append(Question.chapter == filters.chapter)
        if filters.difficulty:
            conditions.append(Question.difficulty == filters.difficulty)
        if filters.status:
            conditions.append(Question.status == filters.status)

        total = (
            await self.session.execute(
                select(func.count(Question.id)).where(*conditions)
            )
        ).scalar_one()

        sort_column = {
            "created_at": Question.created_at,
            "difficulty": _DIFFICULTY_ORDER,
            "times_answered": Question.times_answered,
        }[filters.sort_by]
        order = sort_column.asc() if filters.sort_order == SortOrder.ASC else sort_column.desc()

        stmt = (
            select(Question)
            .where(*conditions)
            .order_by(order, Question.id)
            .offset((filters.page - 1) * filters.limit)
            .limit(filters.limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    # =========================================================================
    # ESTATISTICAS DE RESPOSTA
    # =========================================================================

    async def record_answer_outcomes(self, outcomes: list[tuple[str, bool]]) -> None:
        """Incrementa times_answered/times_correct (sem commit - transacao do chamador)."""
        for question_id, is_correct in outcomes:
            await self.session.execute(
                update(Question)
                .where(Question.id == question_id)
                .values(
                    times_answered=Question.times_answered + 1,
                    times_correct=Question.times_correct + (1 if is_correct else 0),
                )
                .execution_options(synchronize_session=False)
            )

    async def success_totals(self) -> tuple[int, int]:
        """Soma de (times_answered, times_correct) do banco inteiro."""
        stmt = select(
            func.coalesce(func.sum(Question.times_answered), 0),
            func.coalesce(func.sum(Question.times_correct), 0),
        )
        answered, correct = (await self.session.execute(stmt)).one()
        return int(answered), int(correct)
