"""QCM Schemas - Modelos Pydantic para request/response."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .enums import (
    AttemptStatus,
    OptionContentType,
    QuestionDifficulty,
    QuestionStatus,
    SortOrder,
)

# =============================================================================
# QUESTOES
# =============================================================================


class QuestionOption(BaseModel):
    """Alternativa de multipla escolha (sem indicacao de correta)."""

    id: str = Field(..., min_length=1, max_length=64, description="ID da alternativa")
    text: str = Field(default="", max_length=5000, description="Texto ou LaTeX")
    content_type: OptionContentType = Field(default=OptionContentType.TEXT)
    image_url: str | None = Field(default=None, description="URL da imagem (IMAGE)")

    @model_validator(mode="after")
    def _check_content(self) -> QuestionOption:
        if self.content_type == OptionContentType.IMAGE:
            if not self.image_url:
                raise ValueError(f"Alternativa {self.id}: image_url obrigatoria para IMAGE")
        elif not self.text.strip():
            raise ValueError(f"Alternativa {self.id}: texto obrigatorio")
        return self


def _check_answer_key(options: list[QuestionOption], correct_option_id: str) -> None:
    ids = [o.id for o in options]
    if len(set(ids)) != len(ids):
        raise ValueError("IDs de alternativas devem ser unicos")
    if correct_option_id not in ids:
        raise ValueError(f"correct_option_id '{correct_option_id}' nao esta entre as alternativas")


class QuestionView(BaseModel):
    """Questao enviada ao cliente durante o quiz. Nunca expoe a chave."""

    id: str
    text: str
    image_url: str | None = None
    options: list[QuestionOption]
    difficulty: QuestionDifficulty
    chapter: str | None = None
    points: int = 1
    time_limit: int | None = None


class QuestionCreate(BaseModel):
    """Request para criar questao (admin)."""

    model_config = ConfigDict(str_strip_whitespace=True)

    id: str | None = Field(default=None, max_length=36, description="ID explicito (opcional)")
    text: str = Field(..., min_length=1, max_length=5000)
    image_url: str | None = Field(default=None, max_length=2048, description="Imagem do enunciado")
    options: list[QuestionOption] = Field(..., min_length=2, max_length=10)
    correct_option_id: str = Field(..., min_length=1)
    explanation: str | None = Field(default=None, max_length=2000)
    school: str = Field(..., min_length=1, max_length=120)
    matiere: str = Field(..., min_length=1, max_length=120)
    chapter: str | None = Field(default=None, max_length=200)
    difficulty: QuestionDifficulty = QuestionDifficulty.MEDIUM
    tags: list[str] = Field(default_factory=list)
    points: int = Field(default=1, ge=1, le=100)
    time_limit: int | None = Field(default=None, ge=10, le=600)
    status: QuestionStatus = QuestionStatus.PUBLISHED

    @model_validator(mode="after")
    def _check_key(self) -> QuestionCreate:
        _check_answer_key(self.options, self.correct_option_id)
        if any(len(t) > 50 for t in self.tags):
            raise ValueError("Tags devem ter no maximo 50 caracteres")
        return self


class QuestionUpdate(BaseModel):
    """Request para atualizar questao (parcial)."""

    model_config = ConfigDict(str_strip_whitespace=True)

    text: str | None = Field(default=None, min_length=1, max_length=5000)
    image_url: str | None = Field(default=None, max_length=2048)
    options: list[QuestionOption] | None = Field(default=None, min_length=2, max_length=10)
    correct_option_id: str | None = Field(default=None, min_length=1)
    explanation: str | None = Field(default=None, max_length=2000)
    school: str | None = Field(default=None, min_length=1, max_length=120)
    matiere: str | None = Field(default=None, min_length=1, max_length=120)
    chapter: str | None = Field(default=None, max_length=200)
    difficulty: QuestionDifficulty | None = None
    tags: list[str] | None = None
    points: int | None = Field(default=None, ge=1, le=100)
    time_limit: int | None = Field(default=None, ge=10, le=600)
    status: QuestionStatus | None = None


class QuestionRead(BaseModel):
    """Questao completa (admin) - inclui chave e estatisticas."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    text: str
    image_url: str | None = None
    options: list[QuestionOption]
    correct_option_id: str
    explanation: str | None
    school: str
    matiere: str
    chapter: str | None
    difficulty: QuestionDifficulty
    status: QuestionStatus
    points: int
    time_limit: int | None
    tags: list[str]
    version: int
    times_answered: int
    times_correct: int
    uploaded_by: str | None
    created_at: datetime
    updated_at: datetime


class QuestionListFilters(BaseModel):
    """Filtros da listagem de questoes (admin)."""

    search: str | None = None
    school: str | None = None
    matiere: str | None = None
    chapter: str | None = None
    difficulty: QuestionDifficulty | None = None
    status: QuestionStatus | None = None
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1, le=100)
    sort_by: Literal["created_at", "difficulty", "times_answered"] = "created_at"
    sort_order: SortOrder = SortOrder.DESC


class QuestionListResponse(BaseModel):
    questions: list[QuestionRead]
    total: int
    page: int
    limit: int
    total_pages: int


# =============================================================================
# QUIZ - START / SUBMIT
# =============================================================================


class StartQuizRequest(BaseModel):
    """Request para iniciar tentativa."""

    model_config = ConfigDict(str_strip_whitespace=True)

    school: str = Field(..., min_length=1, description="Escola/filiere")
    matiere: str = Field(..., min_length=1, description="Materia")
    count: int | None = Field(default=None, description="Numero de questoes (default da config)")


class StartQuizResponse(BaseModel):
    """Response do start.

    Pool vazio: ``attempt_id`` None, ``questions`` vazio e ``insufficient`` True.
    """

    attempt_id: str | None = Field(..., description="ID da tentativa (None se pool vazio)")
    school: str
    matiere: str
    requested_count: int = Field(..., description="Questoes pedidas")
    available_count: int = Field(..., description="Questoes PUBLISHED disponiveis")
    insufficient: bool = Field(..., description="Pool menor que o pedido")
    questions: list[QuestionView] = Field(default_factory=list)


class AnswerSubmission(BaseModel):
    """Resposta de uma questao."""

    question_id: str = Field(..., min_length=1)
    selected_option_id: str | None = Field(default=None, description="None = sem resposta")
    time_spent: int | None = Field(default=None, ge=0, description="Segundos")


class SubmitQuizRequest(BaseModel):
    """Request para submeter tentativa."""

    attempt_id: str = Field(..., min_length=1)
    answers: list[AnswerSubmission] = Field(default_factory=list)
    total_time_spent: int | None = Field(default=None, ge=0)


class ScoreSummary(BaseModel):
    correct: int = Field(..., description="Respostas corretas")
    total: int = Field(..., description="Tamanho do snapshot")
    percentage: int = Field(..., description="round(correct / total * 100)")
    total_points: int = 0
    max_points: int = 0


class AnswerResult(BaseModel):
    """Correcao de uma questao."""

    question_id: str
    selected_option_id: str | None
    correct: bool
    correct_option_id: str
    points_earned: int = 0
    time_spent: int | None = None


class SubmitQuizResponse(BaseModel):
    attempt_id: str
    status: AttemptStatus
    score: ScoreSummary
    breakdown: list[AnswerResult]
    difficulty_breakdown: dict[str, dict[str, int]] = Field(
        default_factory=dict, description="Analise por dificuldade (correct/total)"
    )
    submitted_at: datetime | None = None


# =============================================================================
# QUIZ - DETALHE / HISTORICO
# =============================================================================


class AttemptReviewItem(BaseModel):
    """Revisao de uma questao apos a submissao."""

    question: QuestionView
    selected_option_id: str | None
    correct: bool
    correct_option_id: str
    explanation: str | None = None
    points_earned: int = 0
    time_spent: int | None = None


class AttemptDetailResponse(BaseModel):
    attempt_id: str
    status: AttemptStatus
    school: str
    matiere: str
    requested_count: int
    created_at: datetime
    submitted_at: datetime | None = None
    total_time_spent: int | None = None
    questions: list[QuestionView]
    score: ScoreSummary | None = None
    review: list[AttemptReviewItem] = Field(default_factory=list)


class HistoryFilters(BaseModel):
    school: str | None = None
    matiere: str | None = None
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1)
    sort_by: Literal["created_at", "percentage", "correct_count"] = "created_at"
    sort_order: SortOrder = SortOrder.DESC


class AttemptSummary(BaseModel):
    attempt_id: str
    status: AttemptStatus
    school: str
    matiere: str
    total_count: int
    correct_count: int | None = None
    percentage: int | None = None
    total_points: int | None = None
    max_points: int
    total_time_spent: int | None = None
    created_at: datetime
    submitted_at: datetime | None = None


class HistoryResponse(BaseModel):
    attempts: list[AttemptSummary]
    total: int
    page: int
    limit: int
    total_pages: int


# =============================================================================
# FILTROS / ESTATISTICAS
# =============================================================================


class FilterOptionsResponse(BaseModel):
    """Facetas das questoes PUBLISHED."""

    schools: list[str] = Field(default_factory=list)
    matieres: list[str] = Field(default_factory=list)
    chapters: list[str] = Field(default_factory=list)
    difficulties: list[QuestionDifficulty] = Field(default_factory=list)


class AdminFilterOptionsResponse(FilterOptionsResponse):
    """Taxonomia completa (todos os status)."""

    statuses: list[QuestionStatus] = Field(default_factory=list)


class QuizCombination(BaseModel):
    school: str
    matiere: str
    question_count: int


class QuizFilterOptionsResponse(BaseModel):
    """Apenas combinacoes escola/materia com questoes disponiveis."""

    schools: list[str] = Field(default_factory=list)
    matieres: list[str] = Field(default_factory=list)
    combinations: list[QuizCombination] = Field(default_factory=list)


class MatieresResponse(BaseModel):
    school: str
    matieres: list[str]


class QuestionCountResponse(BaseModel):
    school: str
    matiere: str
    count: int


class QuestionStatsResponse(BaseModel):
    total_questions: int = 0
    published_questions: int = 0
    by_status: dict[str, int] = Field(default_factory=dict)
    by_difficulty: dict[str, int] = Field(default_factory=dict)
    by_school: dict[str, int] = Field(default_factory=dict)
    by_matiere: dict[str, int] = Field(default_factory=dict)
    average_success_rate: float = 0.0


class AttemptGroupStats(BaseModel):
    school: str
    matiere: str
    attempts: int
    average_percentage: float
    pass_rate: float


class AttemptStatsResponse(BaseModel):
    total_attempts: int = 0
    average_percentage: float = 0.0
    pass_rate: float = 0.0
    pass_percentage: int = Field(..., description="Nota minima para aprovacao")
    by_combination: list[AttemptGroupStats] = Field(default_factory=list)
