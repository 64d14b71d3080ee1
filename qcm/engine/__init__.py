"""QCM Engines - Logica de negocios."""

from .attempt_engine import AttemptEngine
from .sampler import QuestionSampler, SampleResult
from .scoring_engine import QuizScoringEngine, ScoreResult
from .stats_engine import StatisticsAggregator

__all__ = [
    "AttemptEngine",
    "QuestionSampler",
    "SampleResult",
    "QuizScoringEngine",
    "ScoreResult",
    "StatisticsAggregator",
]
