"""
Quiz statistics and analytics

Per-quiz stats, filtering and sorting for listing pages, and post-attempt
performance analysis with follow-up recommendations.
"""

import math
from dataclasses import dataclass, field
from typing import Iterable, Literal, Mapping, Optional

from ..config import config
from .schema import Difficulty, Number, QuizDefinition

SortKey = Literal["title", "category", "difficulty", "questions", "points", "id"]
Rating = Literal["excellent", "good", "needs-improvement", "poor"]


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positive values."""
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class QuizStats:
    """Derived numbers for one quiz."""
    total_questions: int
    total_points: Number
    average_points: int
    difficulty: dict[str, int]
    estimated_time: str
    category: str
    dominant_difficulty: Difficulty

    def to_dict(self) -> dict:
        return {
            "totalQuestions": self.total_questions,
            "totalPoints": self.total_points,
            "averagePoints": self.average_points,
            "difficulty": dict(self.difficulty),
            "estimatedTime": self.estimated_time,
            "category": self.category,
            "dominantDifficulty": self.dominant_difficulty.value,
        }


def count_difficulties(quiz: QuizDefinition) -> dict[str, int]:
    """Question count per difficulty level, easiest first."""
    counts = {level.value: 0 for level in Difficulty}
    for question in quiz.questions:
        counts[question.difficulty.value] += 1
    return counts


def get_dominant_difficulty(quiz: QuizDefinition) -> Difficulty:
    """Most common difficulty; ties go to the easier level."""
    counts = count_difficulties(quiz)
    best = Difficulty.BEGINNER
    for level in Difficulty:
        if counts[level.value] > counts[best.value]:
            best = level
    return best


def get_quiz_stats(quiz: QuizDefinition) -> QuizStats:
    points_sum = quiz.points_sum
    count = quiz.question_count
    return QuizStats(
        total_questions=count,
        total_points=quiz.effective_total_points,
        average_points=round_half_up(points_sum / count) if count else 0,
        difficulty=count_difficulties(quiz),
        estimated_time=quiz.metadata.estimated_time,
        category=quiz.category,
        dominant_difficulty=get_dominant_difficulty(quiz),
    )


def filter_quizzes(
    quizzes: Iterable[QuizDefinition],
    *,
    category: Optional[str] = None,
    difficulty: Optional[Difficulty] = None,
    min_questions: Optional[int] = None,
    max_questions: Optional[int] = None,
    min_points: Optional[Number] = None,
    max_points: Optional[Number] = None,
) -> list[QuizDefinition]:
    """
    Filter quizzes by criteria. Unset criteria match everything.

    Args:
        quizzes: Quizzes to filter
        category: Exact category match
        difficulty: Dominant difficulty match
        min_questions/max_questions: Inclusive question count bounds
        min_points/max_points: Inclusive effective total point bounds

    Returns:
        Matching quizzes in input order
    """
    if difficulty is not None:
        difficulty = Difficulty(difficulty)

    matched = []
    for quiz in quizzes:
        count = quiz.question_count
        total = quiz.effective_total_points

        if category is not None and quiz.category != category:
            continue
        if difficulty is not None and get_dominant_difficulty(quiz) != difficulty:
            continue
        if min_questions is not None and count < min_questions:
            continue
        if max_questions is not None and count > max_questions:
            continue
        if min_points is not None and total < min_points:
            continue
        if max_points is not None and total > max_points:
            continue
        matched.append(quiz)

    return matched


def sort_quizzes(
    quizzes: Iterable[QuizDefinition],
    sort_by: SortKey = "title",
    descending: bool = False,
) -> list[QuizDefinition]:
    """Sort quizzes by a named key. Ties keep input order."""
    keys = {
        "title": lambda q: q.title.lower(),
        "category": lambda q: q.category.lower(),
        "difficulty": lambda q: get_dominant_difficulty(q).rank,
        "questions": lambda q: q.question_count,
        "points": lambda q: q.effective_total_points,
        "id": lambda q: q.id,
    }
    if sort_by not in keys:
        raise ValueError(f"Unknown sort key: {sort_by}. Valid options: {list(keys.keys())}")

    return sorted(quizzes, key=keys[sort_by], reverse=descending)


@dataclass(frozen=True)
class DifficultyScore:
    correct: int = 0
    total: int = 0


@dataclass(frozen=True)
class PerformanceReport:
    """Outcome of a completed attempt."""
    quiz_id: str
    score: Number
    total_points: Number
    percentage: int
    correct_answers: int
    incorrect_answers: int
    difficulty_breakdown: dict[str, DifficultyScore] = field(default_factory=dict)
    time_per_question: Optional[int] = None
    performance: Rating = "poor"

    def to_dict(self) -> dict:
        return {
            "quizId": self.quiz_id,
            "score": self.score,
            "totalPoints": self.total_points,
            "percentage": self.percentage,
            "correctAnswers": self.correct_answers,
            "incorrectAnswers": self.incorrect_answers,
            "difficultyBreakdown": {
                level: {"correct": s.correct, "total": s.total}
                for level, s in self.difficulty_breakdown.items()
            },
            "timePerQuestion": self.time_per_question,
            "performance": self.performance,
        }


def rate_percentage(percentage: Number) -> Rating:
    thresholds = config.catalog.RATING_THRESHOLDS
    if percentage >= thresholds["excellent"]:
        return "excellent"
    if percentage >= thresholds["good"]:
        return "good"
    if percentage >= thresholds["needs-improvement"]:
        return "needs-improvement"
    return "poor"


def analyze_performance(
    quiz: QuizDefinition,
    answers: Mapping[str, int],
    time_spent: Optional[float] = None,
) -> PerformanceReport:
    """
    Score a set of answers against a quiz.

    Args:
        quiz: The quiz that was attempted
        answers: Mapping of question id -> selected option index
        time_spent: Optional seconds spent on the whole attempt

    Returns:
        PerformanceReport; percentage is relative to the effective total
    """
    score = 0
    correct = 0
    breakdown = {level.value: [0, 0] for level in Difficulty}

    for question in quiz.questions:
        entry = breakdown[question.difficulty.value]
        entry[1] += 1
        if question.is_correct(answers.get(question.id)):
            correct += 1
            entry[0] += 1
            score += question.points

    total = quiz.effective_total_points
    percentage = round_half_up(score / total * 100) if total else 0
    count = quiz.question_count

    return PerformanceReport(
        quiz_id=quiz.id,
        score=score,
        total_points=total,
        percentage=percentage,
        correct_answers=correct,
        incorrect_answers=count - correct,
        difficulty_breakdown={
            level: DifficultyScore(correct=c, total=t) for level, (c, t) in breakdown.items()
        },
        time_per_question=round_half_up(time_spent / count) if time_spent and count else None,
        performance=rate_percentage(percentage),
    )


def recommend_quizzes(
    completed: QuizDefinition,
    report: PerformanceReport,
    all_quizzes: Iterable[QuizDefinition],
    limit: Optional[int] = None,
) -> list[QuizDefinition]:
    """
    Suggest what to take next.

    Strong results point to the same category, weak results to
    beginner-level quizzes; other categories always follow.
    """
    limit = config.catalog.max_recommendations if limit is None else limit
    candidates = [q for q in all_quizzes if q.id != completed.id]
    ordered: list[QuizDefinition] = []

    if report.performance in ("excellent", "good"):
        ordered.extend(q for q in candidates if q.category == completed.category)
    else:
        ordered.extend(
            q for q in candidates if get_dominant_difficulty(q) == Difficulty.BEGINNER
        )
    ordered.extend(q for q in candidates if q.category != completed.category)

    seen = set()
    unique = []
    for quiz in ordered:
        if quiz.id not in seen:
            seen.add(quiz.id)
            unique.append(quiz)
    return unique[:limit]
