"""QCM Enums - Dificuldade, status e tipos."""

from enum import Enum


class QuestionDifficulty(str, Enum):
    """Niveis de dificuldade das questoes."""

    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"


class QuestionStatus(str, Enum):
    """Ciclo de vida da questao. Apenas PUBLISHED entra em quiz."""

    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    ARCHIVED = "ARCHIVED"


class OptionContentType(str, Enum):
    """Tipo de conteudo de uma alternativa."""

    TEXT = "TEXT"
    IMAGE = "IMAGE"  # image_url obrigatoria
    MATH = "MATH"  # LaTeX


class AttemptStatus(str, Enum):
    """Estados da tentativa: CREATED -> SUBMITTED (terminal)."""

    CREATED = "CREATED"
    SUBMITTED = "SUBMITTED"


class UserRole(str, Enum):
    """Papeis da plataforma."""

    ADMIN = "ADMIN"
    FOUNDER = "FOUNDER"
    STUDENT = "STUDENT"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"
