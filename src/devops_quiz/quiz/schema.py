"""
Quiz schema and data structures

Defines the shape of a quiz definition and its questions. Values are frozen
once built; the loader is the only place they are created from raw records.
"""

from dataclasses import dataclass, field, replace
from typing import Optional, Union
from enum import Enum
import json

Number = Union[int, float]


class Difficulty(str, Enum):
    """Question difficulty levels, easiest first."""
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"

    @property
    def rank(self) -> int:
        return list(Difficulty).index(self)


class QuizIcon(str, Enum):
    """Icon names a quiz may declare. Rendering is up to the presentation layer."""
    GIT_BRANCH = "GitBranch"
    CONTAINER = "Container"
    LAYERS = "Layers"
    SERVER = "Server"
    DATABASE = "Database"
    WORKFLOW = "Workflow"
    CLOUD = "Cloud"
    LOCK = "Lock"
    TERMINAL = "Terminal"
    CODE = "Code"
    NETWORK = "Network"
    SHIELD = "Shield"
    ACTIVITY = "Activity"
    SETTINGS = "Settings"
    ZAP = "Zap"


@dataclass(frozen=True)
class QuizTheme:
    """Opaque presentation hints."""
    primary_color: str = ""
    gradient_from: str = ""
    gradient_to: str = ""

    def to_dict(self) -> dict:
        return {
            "primaryColor": self.primary_color,
            "gradientFrom": self.gradient_from,
            "gradientTo": self.gradient_to,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "QuizTheme":
        return cls(
            primary_color=data.get("primaryColor", ""),
            gradient_from=data.get("gradientFrom", ""),
            gradient_to=data.get("gradientTo", ""),
        )


@dataclass(frozen=True)
class QuizMetadata:
    """Estimated time and question counts per difficulty level."""
    estimated_time: str = ""
    difficulty_levels: tuple[tuple[str, int], ...] = ()

    @property
    def levels(self) -> dict[str, int]:
        return dict(self.difficulty_levels)

    def to_dict(self) -> dict:
        return {
            "estimatedTime": self.estimated_time,
            "difficultyLevels": self.levels,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "QuizMetadata":
        levels = data.get("difficultyLevels") or {}
        return cls(
            estimated_time=data.get("estimatedTime", ""),
            difficulty_levels=tuple(
                (level, int(count)) for level, count in levels.items()
            ),
        )


@dataclass(frozen=True)
class Question:
    """A single multiple-choice question with exactly one correct option."""
    id: str
    title: str
    situation: str
    options: tuple[str, ...]
    correct_answer: int
    explanation: str
    difficulty: Difficulty
    points: Number
    code_example: Optional[str] = None
    hint: Optional[str] = None

    def is_correct(self, option_index: Optional[int]) -> bool:
        return option_index == self.correct_answer

    def to_dict(self) -> dict:
        result = {
            "id": self.id,
            "title": self.title,
            "situation": self.situation,
            "options": list(self.options),
            "correctAnswer": self.correct_answer,
            "explanation": self.explanation,
            "difficulty": self.difficulty.value,
            "points": self.points,
        }
        if self.code_example is not None:
            result["codeExample"] = self.code_example
        if self.hint is not None:
            result["hint"] = self.hint
        return result

    @classmethod
    def from_dict(cls, data: dict) -> "Question":
        return cls(
            id=data["id"],
            title=data["title"],
            situation=data.get("situation") or data.get("description"),
            options=tuple(data["options"]),
            correct_answer=data["correctAnswer"],
            explanation=data["explanation"],
            difficulty=Difficulty(data["difficulty"]),
            points=data["points"],
            code_example=data.get("codeExample"),
            hint=data.get("hint"),
        )


@dataclass(frozen=True)
class QuizDefinition:
    """
    A loaded quiz: metadata plus its ordered questions.

    `total_points` is the declared value until the loader normalizes it;
    definitions handed out by the catalog always carry the effective total.
    """
    id: str
    title: str
    description: str
    category: str
    icon: QuizIcon
    questions: tuple[Question, ...]
    total_points: Number = 0
    theme: QuizTheme = field(default_factory=QuizTheme)
    metadata: QuizMetadata = field(default_factory=QuizMetadata)

    @property
    def question_count(self) -> int:
        return len(self.questions)

    @property
    def points_sum(self) -> Number:
        """Sum of all question points."""
        return sum(q.points for q in self.questions)

    @property
    def effective_total_points(self) -> Number:
        """Declared total if non-zero, otherwise the sum of question points."""
        return self.total_points or self.points_sum

    def question(self, question_id: str) -> Question:
        for q in self.questions:
            if q.id == question_id:
                return q
        raise KeyError(question_id)

    def with_changes(self, **changes) -> "QuizDefinition":
        return replace(self, **changes)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "category": self.category,
            "icon": self.icon.value,
            "totalPoints": self.total_points,
            "theme": self.theme.to_dict(),
            "metadata": self.metadata.to_dict(),
            "questions": [q.to_dict() for q in self.questions],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "QuizDefinition":
        """Build without validation. Use `loader.parse_quiz` for untrusted input."""
        return cls(
            id=data["id"],
            title=data["title"],
            description=data["description"],
            category=data["category"],
            icon=QuizIcon(data["icon"]),
            questions=tuple(Question.from_dict(q) for q in data["questions"]),
            total_points=data.get("totalPoints") or 0,
            theme=QuizTheme.from_dict(data.get("theme") or {}),
            metadata=QuizMetadata.from_dict(data.get("metadata") or {}),
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)
