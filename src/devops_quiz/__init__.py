"""
devops-quiz: data-driven quiz engine.

Loads quiz definitions from JSON content, validates them into an immutable
catalog, and runs single-user quiz attempts with scoring.
"""

from typing import Optional

__version__ = "0.1.0"

from .config import Config, config
from .sources import ContentSource, FilesystemSource, MemorySource, RemoteSource, SourceError, source_from_config
from .quiz import (
    QuizError,
    ValidationError,
    NotFoundError,
    InvalidStateTransition,
    InvalidAnswerError,
    QuizDefinition,
    Question,
    QuizLoader,
    QuizCatalog,
    QuizSummary,
    QuizRuntime,
    SessionState,
)


def create_catalog(cfg: Optional[Config] = None) -> QuizCatalog:
    """Catalog over the content source described by config."""
    return QuizCatalog(QuizLoader(source_from_config(cfg)))


__all__ = [
    # Config
    "Config",
    "config",
    # Sources
    "ContentSource",
    "FilesystemSource",
    "MemorySource",
    "RemoteSource",
    "SourceError",
    "source_from_config",
    # Errors
    "QuizError",
    "ValidationError",
    "NotFoundError",
    "InvalidStateTransition",
    "InvalidAnswerError",
    # Engine
    "QuizDefinition",
    "Question",
    "QuizLoader",
    "QuizCatalog",
    "QuizSummary",
    "QuizRuntime",
    "SessionState",
    "create_catalog",
]
