"""QCM Storage - Persistencia relacional (SQLAlchemy async)."""

from .attempt_store import AttemptStore
from .database import Database
from .question_store import QuestionStore

__all__ = ["AttemptStore", "Database", "QuestionStore"]
