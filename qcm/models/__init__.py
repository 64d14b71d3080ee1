"""QCM Models - Enums, Schemas, ORM e Snapshot."""

from .enums import (
    AttemptStatus,
    OptionContentType,
    QuestionDifficulty,
    QuestionStatus,
    SortOrder,
    UserRole,
)
from .orm import Base, Question, QuizAnswer, QuizAttempt
from .schemas import (
    AnswerSubmission,
    QuestionCreate,
    QuestionOption,
    QuestionUpdate,
    QuestionView,
    StartQuizRequest,
    StartQuizResponse,
    SubmitQuizRequest,
    SubmitQuizResponse,
)
from .state import AttemptSnapshot, SnapshotQuestion

__all__ = [
    # Enums
    "AttemptStatus",
    "OptionContentType",
    "QuestionDifficulty",
    "QuestionStatus",
    "SortOrder",
    "UserRole",
    # ORM
    "Base",
    "Question",
    "QuizAttempt",
    "QuizAnswer",
    # Schemas
    "AnswerSubmission",
    "QuestionCreate",
    "QuestionOption",
    "QuestionUpdate",
    "QuestionView",
    "StartQuizRequest",
    "StartQuizResponse",
    "SubmitQuizRequest",
    "SubmitQuizResponse",
    # Snapshot
    "AttemptSnapshot",
    "SnapshotQuestion",
]
