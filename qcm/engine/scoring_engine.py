"""Quiz Scoring Engine - Motor de correcao contra a chave congelada."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from ..models.enums import QuestionDifficulty
from ..models.schemas import AnswerResult, AnswerSubmission, ScoreSummary
from ..models.state import AttemptSnapshot, SnapshotQuestion


@dataclass
class ScoreResult:
    """Resultado completo da correcao de uma tentativa."""

    correct_count: int
    total_count: int
    percentage: int
    total_points: int
    max_points: int
    answers: list[dict[str, Any]] = field(default_factory=list)
    difficulty_breakdown: dict[str, dict[str, int]] = field(default_factory=dict)

    def summary(self) -> ScoreSummary:
        return ScoreSummary(
            correct=self.correct_count,
            total=self.total_count,
            percentage=self.percentage,
            total_points=self.total_points,
            max_points=self.max_points,
        )

    def breakdown(self) -> list[AnswerResult]:
        return [AnswerResult(**a) for a in self.answers]


class QuizScoringEngine:
    """Motor de correcao binaria (certo/errado) por questao.

    A correcao usa apenas o snapshot gravado no start - nunca o banco de
    questoes atual.

    Regras:
        - Questao sem resposta conta como errada (nunca erro)
        - Resposta para questao fora do snapshot e ignorada
        - Questao repetida na submissao: vale a ultima
        - percentage = round(correct / total * 100), arredondamento half-up

    Example:
        >>> engine = QuizScoringEngine()
        >>> engine.calculate_percentage(2, 3)
        67
    """

    @staticmethod
    def calculate_percentage(correct: int, total: int) -> int:
        """Percentual inteiro com arredondamento half-up."""
        if total <= 0:
            return 0
        return (200 * correct + total) // (2 * total)

    @staticmethod
    def normalize_answers(
        answers: Iterable[AnswerSubmission] | Mapping[str, str | None],
    ) -> dict[str, AnswerSubmission]:
        """Converte submissao em mapa question_id -> resposta."""
        if isinstance(answers, Mapping):
            return {
                qid: AnswerSubmission(question_id=qid, selected_option_id=selected)
                for qid, selected in answers.items()
            }
        return {a.question_id: a for a in answers}

    def evaluate_answer(
        self, question: SnapshotQuestion, answer: AnswerSubmission | None
    ) -> dict[str, Any]:
        """Corrige uma questao do snapshot.

        Args:
            question: Questao congelada
            answer: Resposta do usuario (None = sem resposta)

        Returns:
            Dict no formato de AnswerResult
        """
        selected = answer.selected_option_id if answer else None
        is_correct = selected is not None and selected == question.correct_option_id
        return {
            "question_id": question.question_id,
            "selected_option_id": selected,
            "correct": is_correct,
            "correct_option_id": question.correct_option_id,
            "points_earned": question.points if is_correct else 0,
            "time_spent": answer.time_spent if answer else None,
        }

    def calculate_score(
        self,
        snapshot: AttemptSnapshot,
        answers: Iterable[AnswerSubmission] | Mapping[str, str | None],
    ) -> ScoreResult:
        """Calcula pontuacao completa da tentativa.

        Args:
            snapshot: Questoes congeladas da tentativa
            answers: Respostas submetidas (podem estar incompletas)

        Returns:
            ScoreResult com score, breakdown por questao e por dificuldade
        """
        by_question = self.normalize_answers(answers)

        breakdown = {d.value: {"correct": 0, "total": 0} for d in QuestionDifficulty}
        results = []
        correct_count = 0
        total_points = 0

        for question in snapshot:
            result = self.evaluate_answer(question, by_question.get(question.question_id))
            results.append(result)

            diff_key = question.difficulty.value
            breakdown[diff_key]["total"] += 1
            if result["correct"]:
                correct_count += 1
                total_points += result["points_earned"]
                breakdown[diff_key]["correct"] += 1

        total = len(snapshot)
        return ScoreResult(
            correct_count=correct_count,
            total_count=total,
            percentage=self.calculate_percentage(correct_count, total),
            total_points=total_points,
            max_points=snapshot.max_points,
            answers=results,
            difficulty_breakdown=breakdown,
        )
