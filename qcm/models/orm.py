"""QCM ORM - Tabelas SQLAlchemy (questions, quiz_attempts, quiz_answers)."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from .enums import AttemptStatus, QuestionDifficulty, QuestionStatus


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    pass


class Question(Base):
    """Questao do banco (QCM) com chave de resposta unica."""

    __tablename__ = "questions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    # [{"id", "text", "content_type", "image_url"}]
    options: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False)
    correct_option_id: Mapped[str] = mapped_column(String(64), nullable=False)
    explanation: Mapped[str | None] = mapped_column(Text, default=None)
    image_url: Mapped[str | None] = mapped_column(String(2048), default=None)

    school: Mapped[str] = mapped_column(String(120), nullable=False, index=True)
    matiere: Mapped[str] = mapped_column(String(120), nullable=False, index=True)
    chapter: Mapped[str | None] = mapped_column(String(200), default=None)
    difficulty: Mapped[QuestionDifficulty] = mapped_column(
        SAEnum(QuestionDifficulty, native_enum=False, length=16),
        default=QuestionDifficulty.MEDIUM,
        nullable=False,
    )
    status: Mapped[QuestionStatus] = mapped_column(
        SAEnum(QuestionStatus, native_enum=False, length=16),
        default=QuestionStatus.DRAFT,
        nullable=False,
        index=True,
    )

    points: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    time_limit: Mapped[int | None] = mapped_column(Integer, default=None)
    tags: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)

    # Incrementado quando alternativas ou chave mudam
    version: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    times_answered: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    times_correct: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    uploaded_by: Mapped[str | None] = mapped_column(String(64), default=None)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    def __repr__(self) -> str:
        return f"<Question(id={self.id}, school={self.school}, matiere={self.matiere})>"


class QuizAttempt(Base):
    """Tentativa de quiz com snapshot congelado das questoes sorteadas."""

    __tablename__ = "quiz_attempts"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    school: Mapped[str] = mapped_column(String(120), nullable=False)
    matiere: Mapped[str] = mapped_column(String(120), nullable=False)
    requested_count: Mapped[int] = mapped_column(Integer, nullable=False)
    snapshot: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False)

    status: Mapped[AttemptStatus] = mapped_column(
        SAEnum(AttemptStatus, native_enum=False, length=16),
        default=AttemptStatus.CREATED,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    submitted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), default=None)

    correct_count: Mapped[int | None] = mapped_column(Integer, default=None)
    total_count: Mapped[int] = mapped_column(Integer, nullable=False)
    percentage: Mapped[int | None] = mapped_column(Integer, default=None)
    total_points: Mapped[int | None] = mapped_column(Integer, default=None)
    max_points: Mapped[int] = mapped_column(Integer, nullable=False)
    total_time_spent: Mapped[int | None] = mapped_column(Integer, default=None)

    answers: Mapped[list[QuizAnswer]] = relationship(
        back_populates="attempt",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="QuizAnswer.position",
    )

    def __repr__(self) -> str:
        return f"<QuizAttempt(id={self.id}, user_id={self.user_id}, status={self.status})>"


class QuizAnswer(Base):
    """Resposta de uma questao do snapshot (criada na submissao)."""

    __tablename__ = "quiz_answers"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    attempt_id: Mapped[str] = mapped_column(
        ForeignKey("quiz_attempts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    question_id: Mapped[str] = mapped_column(ForeignKey("questions.id"), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    selected_option_id: Mapped[str | None] = mapped_column(String(64), default=None)
    is_correct: Mapped[bool] = mapped_column(default=False, nullable=False)
    points_earned: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    time_spent: Mapped[int | None] = mapped_column(Integer, default=None)

    attempt: Mapped[QuizAttempt] = relationship(back_populates="answers")
