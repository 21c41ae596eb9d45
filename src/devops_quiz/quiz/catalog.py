"""
Quiz catalog

Aggregated, read-only view over every successfully loaded quiz. The catalog
loads once on first access and keeps the result for the process lifetime;
reload() builds a complete new snapshot and swaps it in.
"""

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Mapping, Optional

from .errors import NotFoundError, ValidationError
from .loader import QuizLoader
from .schema import Number, QuizDefinition, QuizIcon, QuizTheme

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QuizSummary:
    """Listing entry for a quiz."""
    id: str
    title: str
    description: str
    category: str
    icon: QuizIcon
    theme: QuizTheme
    estimated_time: str
    total_points: Number
    question_count: int

    @classmethod
    def from_quiz(cls, quiz: QuizDefinition) -> "QuizSummary":
        return cls(
            id=quiz.id,
            title=quiz.title,
            description=quiz.description,
            category=quiz.category,
            icon=quiz.icon,
            theme=quiz.theme,
            estimated_time=quiz.metadata.estimated_time,
            total_points=quiz.effective_total_points,
            question_count=quiz.question_count,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "category": self.category,
            "icon": self.icon.value,
            "theme": self.theme.to_dict(),
            "estimatedTime": self.estimated_time,
            "totalPoints": self.total_points,
            "questionCount": self.question_count,
        }


@dataclass(frozen=True)
class CatalogSnapshot:
    """One complete load cycle. Never mutated after construction."""
    quizzes: Mapping[str, QuizDefinition] = field(default_factory=lambda: MappingProxyType({}))
    failures: tuple[ValidationError, ...] = ()
    loaded_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())


def _summary_sort_key(quiz: QuizDefinition) -> tuple:
    return (quiz.category.lower(), quiz.title.lower(), quiz.id)


class QuizCatalog:
    """
    Queryable store of loaded quizzes.

    Reads go through an immutable snapshot reference, so concurrent readers
    see either the previous or the next complete catalog, never a partial one.
    """

    def __init__(self, loader: QuizLoader):
        self.loader = loader
        self._snapshot: Optional[CatalogSnapshot] = None
        self._lock = threading.Lock()

    def _build_snapshot(self) -> CatalogSnapshot:
        quizzes: dict[str, QuizDefinition] = {}
        failures: list[ValidationError] = []

        for result in self.loader.list_all():
            if not result.ok:
                failures.append(result.error)
                continue

            quiz = result.quiz
            if quiz.id in quizzes:
                error = ValidationError(
                    [f"Duplicate quiz id '{quiz.id}' (already loaded)"],
                    source=result.source,
                    quiz_id=quiz.id,
                )
                logger.warning(f"Excluding {result.source}: {error}")
                failures.append(error)
                continue

            quizzes[quiz.id] = quiz

        logger.info(
            f"Catalog loaded {len(quizzes)} quizzes from {self.loader.source.name} "
            f"({len(failures)} excluded)"
        )
        return CatalogSnapshot(quizzes=MappingProxyType(quizzes), failures=tuple(failures))

    @property
    def snapshot(self) -> CatalogSnapshot:
        """Current snapshot, loading on first access."""
        snapshot = self._snapshot
        if snapshot is None:
            with self._lock:
                if self._snapshot is None:
                    self._snapshot = self._build_snapshot()
                snapshot = self._snapshot
        return snapshot

    @property
    def is_loaded(self) -> bool:
        return self._snapshot is not None

    def reload(self) -> CatalogSnapshot:
        """Re-read the source and atomically replace the current snapshot."""
        with self._lock:
            self._snapshot = self._build_snapshot()
            return self._snapshot

    @property
    def failures(self) -> tuple[ValidationError, ...]:
        """Validation failures from the last load cycle."""
        return self.snapshot.failures

    def get_by_id(self, quiz_id: str) -> QuizDefinition:
        """
        Look up a quiz by id.

        Raises:
            NotFoundError: If no loaded quiz has that id
        """
        try:
            return self.snapshot.quizzes[quiz_id]
        except KeyError:
            raise NotFoundError(quiz_id) from None

    def list_quizzes(self, category: Optional[str] = None) -> list[QuizDefinition]:
        """All loaded quizzes ordered by category then title, optionally filtered."""
        quizzes = sorted(self.snapshot.quizzes.values(), key=_summary_sort_key)
        if category is not None:
            quizzes = [q for q in quizzes if q.category == category]
        return quizzes

    def get_metadata(self) -> list[QuizSummary]:
        """Summaries for every loaded quiz, ordered by category then title."""
        return [QuizSummary.from_quiz(q) for q in self.list_quizzes()]

    def categories(self) -> list[str]:
        return sorted({q.category for q in self.snapshot.quizzes.values()}, key=str.lower)

    def __contains__(self, quiz_id: object) -> bool:
        return quiz_id in self.snapshot.quizzes

    def __len__(self) -> int:
        return len(self.snapshot.quizzes)
