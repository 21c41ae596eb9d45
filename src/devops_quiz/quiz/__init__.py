"""
Quiz engine for devops-quiz

Schema, loader, catalog, statistics and the runtime state machine.
"""

from .errors import (
    QuizError,
    ValidationError,
    NotFoundError,
    InvalidStateTransition,
    InvalidAnswerError,
)
from .schema import (
    Difficulty,
    QuizIcon,
    QuizTheme,
    QuizMetadata,
    Question,
    QuizDefinition,
)
from .loader import QuizLoader, LoadResult, parse_quiz, validate_quiz_data, normalize_quiz
from .catalog import QuizCatalog, QuizSummary, CatalogSnapshot
from .stats import (
    QuizStats,
    PerformanceReport,
    get_quiz_stats,
    filter_quizzes,
    sort_quizzes,
    analyze_performance,
    recommend_quizzes,
)
from .runtime import QuizRuntime, QuizSession, SessionState, SessionView, RevealResult

__all__ = [
    # Errors
    "QuizError",
    "ValidationError",
    "NotFoundError",
    "InvalidStateTransition",
    "InvalidAnswerError",
    # Schema
    "Difficulty",
    "QuizIcon",
    "QuizTheme",
    "QuizMetadata",
    "Question",
    "QuizDefinition",
    # Loader
    "QuizLoader",
    "LoadResult",
    "parse_quiz",
    "validate_quiz_data",
    "normalize_quiz",
    # Catalog
    "QuizCatalog",
    "QuizSummary",
    "CatalogSnapshot",
    # Stats
    "QuizStats",
    "PerformanceReport",
    "get_quiz_stats",
    "filter_quizzes",
    "sort_quizzes",
    "analyze_performance",
    "recommend_quizzes",
    # Runtime
    "QuizRuntime",
    "QuizSession",
    "SessionState",
    "SessionView",
    "RevealResult",
]
