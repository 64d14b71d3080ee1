"""QCM Module - Motor de quiz de multipla escolha.

Arquitetura:
- models/: Enums, ORM SQLAlchemy, Schemas Pydantic, AttemptSnapshot
- engine/: AttemptEngine, QuestionSampler, QuizScoringEngine, StatisticsAggregator
- storage/: Database, QuestionStore, AttemptStore
- auth.py: Identidade do chamador (headers do gateway)
- router.py: Endpoints do aluno (/quiz)
- admin_router.py: Endpoints administrativos (/questions)
"""

__version__ = "1.0.0"

from .engine import (
    AttemptEngine,
    QuestionSampler,
    QuizScoringEngine,
    StatisticsAggregator,
)
from .exceptions import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    QcmError,
    ValidationError,
)
from .models import AttemptSnapshot, AttemptStatus, QuestionDifficulty, QuestionStatus
from .storage import AttemptStore, Database, QuestionStore

__all__ = [
    "__version__",
    # Models
    "AttemptSnapshot",
    "AttemptStatus",
    "QuestionDifficulty",
    "QuestionStatus",
    # Engines
    "AttemptEngine",
    "QuestionSampler",
    "QuizScoringEngine",
    "StatisticsAggregator",
    # Storage
    "Database",
    "QuestionStore",
    "AttemptStore",
    # Errors
    "QcmError",
    "ValidationError",
    "AuthenticationError",
    "PermissionDeniedError",
    "NotFoundError",
    "ConflictError",
]
