"""Attempt Snapshot - Copia congelada das questoes sorteadas.

O snapshot e gravado junto com a tentativa no momento do start e e a UNICA
fonte usada na correcao. Edicoes posteriores no banco de questoes nao
alteram notas antigas.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .enums import QuestionDifficulty
from .schemas import QuestionOption, QuestionView

if TYPE_CHECKING:
    from .orm import Question


@dataclass(frozen=True)
class SnapshotQuestion:
    """Questao congelada (inclui a chave de resposta - nunca vai ao cliente).

    Attributes:
        question_id: ID da questao no banco
        version: Versao da questao no momento do sorteio
        text: Enunciado
        options: Alternativas (dicts serializaveis)
        correct_option_id: Chave de resposta congelada
        difficulty: Nivel de dificuldade
        points: Pontos da questao
        image_url: Imagem do enunciado (opcional)
    """

    question_id: str
    version: int
    text: str
    options: list[dict[str, Any]]
    correct_option_id: str
    difficulty: QuestionDifficulty
    points: int = 1
    chapter: str | None = None
    explanation: str | None = None
    time_limit: int | None = None
    image_url: str | None = None

    @classmethod
    def from_question(cls, question: Question) -> SnapshotQuestion:
        return cls(
            question_id=question.id,
            version=question.version,
            text=question.text,
            options=[dict(o) for o in question.options],
            correct_option_id=question.correct_option_id,
            difficulty=QuestionDifficulty(question.difficulty),
            points=question.points,
            chapter=question.chapter,
            explanation=question.explanation,
            time_limit=question.time_limit,
            image_url=question.image_url,
        )

    def to_view(self) -> QuestionView:
        """Visao sanitizada (sem chave de resposta)."""
        return QuestionView(
            id=self.question_id,
            text=self.text,
            image_url=self.image_url,
            options=[QuestionOption(**o) for o in self.options],
            difficulty=self.difficulty,
            chapter=self.chapter,
            points=self.points,
            time_limit=self.time_limit,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "question_id": self.question_id,
            "version": self.version,
            "text": self.text,
            "options": self.options,
            "correct_option_id": self.correct_option_id,
            "difficulty": self.difficulty.value,
            "points": self.points,
            "chapter": self.chapter,
            "explanation": self.explanation,
            "time_limit": self.time_limit,
            "image_url": self.image_url,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SnapshotQuestion:
        return cls(
            question_id=data["question_id"],
            version=data.get("version", 1),
            text=data["text"],
            options=list(data.get("options", [])),
            correct_option_id=data["correct_option_id"],
            difficulty=QuestionDifficulty(data.get("difficulty", QuestionDifficulty.MEDIUM)),
            points=data.get("points", 1),
            chapter=data.get("chapter"),
            explanation=data.get("explanation"),
            time_limit=data.get("time_limit"),
            image_url=data.get("image_url"),
        )


@dataclass
class AttemptSnapshot:
    """Sequencia ordenada e de tamanho fixo das questoes da tentativa."""

    questions: list[SnapshotQuestion] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.questions)

    def __iter__(self):
        return iter(self.questions)

    @property
    def question_ids(self) -> list[str]:
        return [q.question_id for q in self.questions]

    @property
    def max_points(self) -> int:
        return sum(q.points for q in self.questions)

    def views(self) -> list[QuestionView]:
        return [q.to_view() for q in self.questions]

    def to_list(self) -> list[dict[str, Any]]:
        """Converte para lista JSON (coluna snapshot)."""
        return [q.to_dict() for q in self.questions]

    @classmethod
    def from_list(cls, data: list[dict[str, Any]]) -> AttemptSnapshot:
        return cls(questions=[SnapshotQuestion.from_dict(d) for d in data])

    @classmethod
    def from_questions(cls, questions: list[Question]) -> AttemptSnapshot:
        return cls(questions=[SnapshotQuestion.from_question(q) for q in questions])
