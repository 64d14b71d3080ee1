"""Question Sampler - Sorteio aleatorio sem reposicao."""

from __future__ import annotations

import random
from dataclasses import dataclass, field

from ..logger import get_logger
from ..models.orm import Question
from ..storage.question_store import QuestionStore

logger = get_logger("sampler")

# Sem seed fixa: cada chamada produz conjunto/ordem novos
_system_random = random.SystemRandom()


@dataclass
class SampleResult:
    """Resultado do sorteio.

    Attributes:
        questions: Questoes sorteadas (completas, uso interno do servidor)
        requested_count: Quantidade pedida
        available_count: Tamanho do pool elegivel
    """

    questions: list[Question] = field(default_factory=list)
    requested_count: int = 0
    available_count: int = 0

    @property
    def insufficient(self) -> bool:
        return self.available_count < self.requested_count

    @property
    def empty(self) -> bool:
        return not self.questions


class QuestionSampler:
    """Sorteia N questoes PUBLISHED distintas para escola/materia.

    Estrategia shuffle-then-take sobre os IDs elegiveis: carrega apenas os
    IDs do pool, sorteia sem reposicao e so entao carrega as linhas
    escolhidas. Pool menor que N retorna o pool inteiro (sem padding).

    Example:
        >>> sampler = QuestionSampler(QuestionStore(session))
        >>> result = await sampler.get_random_questions("HEC", "Math", 3)
        >>> len(result.questions)
        3
    """

    def __init__(self, store: QuestionStore, rng: random.Random | None = None):
        self.store = store
        self.rng = rng or _system_random

    def draw(self, candidate_ids: list[str], count: int) -> list[str]:
        """Sorteio uniforme sem reposicao (ordem tambem aleatoria)."""
        k = min(count, len(candidate_ids))
        return self.rng.sample(candidate_ids, k)

    async def get_random_questions(self, school: str, matiere: str, count: int) -> SampleResult:
        candidate_ids = await self.store.list_candidate_ids(school, matiere)
        drawn_ids = self.draw(candidate_ids, count)
        questions = await self.store.get_many(drawn_ids)

        if len(candidate_ids) < count:
            logger.info(
                "Pool insuficiente",
                school=school,
                matiere=matiere,
                requested=count,
                available=len(candidate_ids),
            )

        return SampleResult(
            questions=questions,
            requested_count=count,
            available_count=len(candidate_ids),
        )
