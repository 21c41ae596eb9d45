"""
Quiz loader

Turns raw records from a content source into validated, normalized
QuizDefinition values. A bad record is reported and skipped; it never stops
the rest of the load.
"""

import json
import logging
import math
import re
from dataclasses import dataclass, replace
from typing import Any, Iterator, Optional

from ..sources.base import ContentSource, RawRecord, SourceError
from .errors import NotFoundError, ValidationError
from .schema import Difficulty, QuizDefinition, QuizIcon

logger = logging.getLogger(__name__)

QUIZ_ID_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")

REQUIRED_QUIZ_FIELDS = ("id", "title", "description", "category", "icon", "questions")
REQUIRED_QUESTION_FIELDS = (
    "id", "title", "options", "correctAnswer", "explanation", "difficulty", "points",
)

ICON_NAMES = {icon.value for icon in QuizIcon}
DIFFICULTY_NAMES = [d.value for d in Difficulty]
THEME_FIELDS = ("primaryColor", "gradientFrom", "gradientTo")


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return isinstance(value, int) or math.isfinite(value)


def _is_missing(data: dict, name: str) -> bool:
    value = data.get(name)
    return value is None or (isinstance(value, str) and not value.strip())


def _validate_theme(theme: Any) -> list[str]:
    if theme is None:
        return []
    if not isinstance(theme, dict):
        return ["'theme' must be an object"]
    return [
        f"theme.{name} must be a string"
        for name in THEME_FIELDS
        if name in theme and not isinstance(theme[name], str)
    ]


def _validate_metadata(metadata: Any) -> list[str]:
    if metadata is None:
        return []
    if not isinstance(metadata, dict):
        return ["'metadata' must be an object"]

    errors = []
    if "estimatedTime" in metadata and not isinstance(metadata["estimatedTime"], str):
        errors.append("metadata.estimatedTime must be a string")

    levels = metadata.get("difficultyLevels")
    if levels is not None:
        if not isinstance(levels, dict):
            errors.append("metadata.difficultyLevels must be an object")
        else:
            for level, count in levels.items():
                if level not in DIFFICULTY_NAMES:
                    errors.append(f"Unknown difficulty level in metadata: '{level}'")
                elif not isinstance(count, int) or isinstance(count, bool) or count < 0:
                    errors.append(f"metadata.difficultyLevels.{level} must be a non-negative integer")
    return errors


def _validate_question(data: Any, label: str) -> list[str]:
    if not isinstance(data, dict):
        return [f"{label} must be an object"]

    errors = []
    for name in REQUIRED_QUESTION_FIELDS:
        if _is_missing(data, name):
            errors.append(f"{label}: missing required field '{name}'")
    if _is_missing(data, "situation") and _is_missing(data, "description"):
        errors.append(f"{label}: missing required field 'situation'")

    for name in ("id", "title", "situation", "description", "explanation", "codeExample", "hint"):
        value = data.get(name)
        if value is not None and not isinstance(value, str):
            errors.append(f"{label}: '{name}' must be a string")

    options = data.get("options")
    option_count = None
    if options is not None:
        if not isinstance(options, list):
            errors.append(f"{label}: 'options' must be a list")
        elif not options:
            errors.append(f"{label}: 'options' is empty")
        elif len(options) < 2:
            errors.append(f"{label}: needs at least two options")
        elif not all(isinstance(o, str) for o in options):
            errors.append(f"{label}: every option must be a string")
        else:
            option_count = len(options)

    answer = data.get("correctAnswer")
    if answer is not None:
        if not isinstance(answer, int) or isinstance(answer, bool):
            errors.append(f"{label}: 'correctAnswer' must be an integer index")
        elif option_count is not None and not 0 <= answer < option_count:
            errors.append(
                f"{label}: correctAnswer {answer} is out of range for {option_count} options"
            )

    difficulty = data.get("difficulty")
    if difficulty is not None and difficulty not in DIFFICULTY_NAMES:
        errors.append(f"{label}: unknown difficulty '{difficulty}'")

    points = data.get("points")
    if points is not None and (not _is_number(points) or points < 0):
        errors.append(f"{label}: 'points' must be a non-negative number")

    return errors


def validate_quiz_data(data: Any) -> tuple[bool, list[str]]:
    """
    Validate a raw quiz definition.

    Args:
        data: Decoded quiz record

    Returns:
        Tuple of (is_valid, list of error messages)
    """
    if not isinstance(data, dict):
        return (False, ["Quiz definition must be an object"])

    errors = []

    for name in REQUIRED_QUIZ_FIELDS:
        if _is_missing(data, name):
            errors.append(f"Missing required field '{name}'")

    for name in ("id", "title", "description", "category", "icon"):
        value = data.get(name)
        if value is not None and not isinstance(value, str):
            errors.append(f"'{name}' must be a string")

    quiz_id = data.get("id")
    if isinstance(quiz_id, str) and quiz_id and not QUIZ_ID_PATTERN.match(quiz_id):
        errors.append(f"Invalid quiz id '{quiz_id}': use lowercase letters, digits and hyphens")

    icon = data.get("icon")
    if isinstance(icon, str) and icon and icon not in ICON_NAMES:
        errors.append(f"Unknown icon '{icon}'")

    total = data.get("totalPoints")
    if total is not None and (not _is_number(total) or total < 0):
        errors.append("'totalPoints' must be a non-negative number")

    errors.extend(_validate_theme(data.get("theme")))
    errors.extend(_validate_metadata(data.get("metadata")))

    questions = data.get("questions")
    if questions is not None:
        if not isinstance(questions, list):
            errors.append("'questions' must be a list")
        elif not questions:
            errors.append("Quiz must have at least one question")
        else:
            seen_ids = set()
            for i, question in enumerate(questions):
                question_id = question.get("id") if isinstance(question, dict) else None
                label = f"question '{question_id}'" if isinstance(question_id, str) else f"questions[{i}]"
                errors.extend(_validate_question(question, label))

                if isinstance(question_id, str):
                    if question_id in seen_ids:
                        errors.append(f"Duplicate question id '{question_id}'")
                    seen_ids.add(question_id)

    return (len(errors) == 0, errors)


def normalize_quiz(quiz: QuizDefinition) -> QuizDefinition:
    """
    Resolve derived fields once, right after parsing.

    - total_points becomes the effective total (declared, or the sum of
      question points when declared as zero)
    - difficulty_levels is counted from the questions when not declared
    """
    points_sum = quiz.points_sum
    if quiz.total_points and quiz.total_points != points_sum:
        logger.warning(
            f"Quiz '{quiz.id}' declares totalPoints={quiz.total_points} "
            f"but its questions sum to {points_sum}"
        )

    metadata = quiz.metadata
    if not metadata.difficulty_levels:
        counts = tuple(
            (level.value, sum(1 for q in quiz.questions if q.difficulty == level))
            for level in Difficulty
        )
        metadata = replace(metadata, difficulty_levels=counts)

    return quiz.with_changes(total_points=quiz.effective_total_points, metadata=metadata)


def decode_payload(payload: Any, source: str = "<memory>") -> Any:
    """Decode JSON text or bytes; mappings pass through untouched."""
    if isinstance(payload, bytes):
        payload = payload.decode("utf-8")
    if isinstance(payload, str):
        try:
            return json.loads(payload)
        except json.JSONDecodeError as e:
            raise ValidationError([f"Invalid JSON: {e}"], source=source) from e
        except RecursionError as e:
            raise ValidationError(["Invalid JSON: nesting too deep"], source=source) from e
    return payload


def parse_quiz(data: Any, source: str = "<memory>") -> QuizDefinition:
    """
    Validate and build a normalized QuizDefinition.

    Raises:
        ValidationError: With every problem found in the record
    """
    is_valid, errors = validate_quiz_data(data)
    if not is_valid:
        quiz_id = data.get("id") if isinstance(data, dict) else None
        raise ValidationError(
            errors,
            source=source,
            quiz_id=quiz_id if isinstance(quiz_id, str) else None,
        )
    return normalize_quiz(QuizDefinition.from_dict(data))


@dataclass(frozen=True)
class LoadResult:
    """Outcome of loading one record: a quiz or the reason it was excluded."""
    source: str
    quiz: Optional[QuizDefinition] = None
    error: Optional[ValidationError] = None

    @property
    def ok(self) -> bool:
        return self.quiz is not None


class QuizLoader:
    """
    Loads quiz definitions from a content source.

    Iteration is lazy and restartable: every call to list_all() re-reads
    the source from the beginning.
    """

    def __init__(self, source: ContentSource):
        self.source = source

    def load_record(self, record: RawRecord) -> LoadResult:
        """Read, decode, validate and normalize a single record."""
        try:
            data = decode_payload(record.read(), source=record.name)
            quiz = parse_quiz(data, source=record.name)
        except ValidationError as e:
            error = e
        except (OSError, UnicodeDecodeError, SourceError) as e:
            error = ValidationError([f"Could not read quiz: {e}"], source=record.name)
        else:
            logger.debug(f"Loaded quiz '{quiz.id}' from {record.name}")
            return LoadResult(source=record.name, quiz=quiz)

        logger.warning(f"Excluding {record.name}: {error}")
        return LoadResult(source=record.name, error=error)

    def list_all(self) -> Iterator[LoadResult]:
        """
        Yield a LoadResult per record in source order.

        Raises:
            SourceError: Only if the source itself cannot be enumerated
        """
        for record in self.source.records():
            yield self.load_record(record)

    def iter_valid(self) -> Iterator[QuizDefinition]:
        for result in self.list_all():
            if result.ok:
                yield result.quiz

    def get_by_id(self, quiz_id: str) -> QuizDefinition:
        """
        Find a quiz by id.

        Raises:
            NotFoundError: If no valid definition has that id
        """
        for quiz in self.iter_valid():
            if quiz.id == quiz_id:
                return quiz
        raise NotFoundError(quiz_id)
