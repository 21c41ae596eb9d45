"""
Quiz runtime

Single-user state machine for one attempt at one quiz:

    NOT_STARTED --start()--> IN_PROGRESS --advance() on last--> COMPLETED
         ^                                                         |
         +------------------------- restart() --------------------+

Each question is scored at most once, either on reveal() or, if the
player moves on without revealing, on advance(). Once a question is scored
its answer is locked, so the final score always matches the recorded answers.
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .catalog import QuizCatalog
from .errors import InvalidAnswerError, InvalidStateTransition
from .schema import Number, Question, QuizDefinition
from .stats import PerformanceReport, analyze_performance

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    """Lifecycle of a quiz attempt."""
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


@dataclass
class QuizSession:
    """Mutable progress for one attempt. Owned by a QuizRuntime."""
    quiz: QuizDefinition
    current_question_index: int = 0
    answers: dict[str, int] = field(default_factory=dict)
    scored: set[str] = field(default_factory=set)
    score: Number = 0
    started_at: float = field(default_factory=time.monotonic)
    finished_at: Optional[float] = None

    @property
    def current_question(self) -> Question:
        return self.quiz.questions[self.current_question_index]

    @property
    def is_last_question(self) -> bool:
        return self.current_question_index == self.quiz.question_count - 1

    @property
    def elapsed_seconds(self) -> float:
        end = self.finished_at if self.finished_at is not None else time.monotonic()
        return end - self.started_at


@dataclass(frozen=True)
class RevealResult:
    """What the presentation layer shows after checking an answer."""
    question_id: str
    selected: int
    correct_answer: int
    is_correct: bool
    points_awarded: Number
    explanation: str
    hint: Optional[str] = None


@dataclass(frozen=True)
class SessionView:
    """Read-only snapshot of runtime state for rendering."""
    state: SessionState
    quiz_id: Optional[str] = None
    question_index: int = 0
    question_count: int = 0
    question: Optional[Question] = None
    selected: Optional[int] = None
    revealed: bool = False
    hint: Optional[str] = None
    explanation: Optional[str] = None
    score: Number = 0
    total_points: Number = 0

    @property
    def progress(self) -> float:
        """Fraction of questions finished."""
        if not self.question_count:
            return 0.0
        if self.state == SessionState.COMPLETED:
            return 1.0
        return self.question_index / self.question_count


class QuizRuntime:
    """
    Drives one user's progress through one quiz.

    The presentation layer calls start(), select_answer(), reveal(),
    advance() and restart(); it reads view() and report() but never
    computes scores itself.
    """

    def __init__(self, catalog: QuizCatalog):
        self.catalog = catalog
        self.state = SessionState.NOT_STARTED
        self.session: Optional[QuizSession] = None

    def _require(self, action: str, *allowed: SessionState) -> None:
        if self.state not in allowed:
            raise InvalidStateTransition(action, self.state.value)

    def _score_current(self) -> Number:
        """Score the current question once. Returns the points it earned."""
        session = self.session
        question = session.current_question
        selected = session.answers.get(question.id)
        earned = question.points if question.is_correct(selected) else 0

        if question.id not in session.scored:
            session.scored.add(question.id)
            session.score += earned
            logger.debug(
                f"Scored '{question.id}' in '{session.quiz.id}': "
                f"+{earned} (total {session.score})"
            )
        return earned

    def start(self, quiz_id: str) -> SessionView:
        """
        Begin an attempt.

        Raises:
            InvalidStateTransition: If an attempt is already running or finished
            NotFoundError: If the catalog has no such quiz
        """
        self._require("start", SessionState.NOT_STARTED)
        quiz = self.catalog.get_by_id(quiz_id)

        self.session = QuizSession(quiz=quiz)
        self.state = SessionState.IN_PROGRESS
        logger.debug(f"Started quiz '{quiz.id}' ({quiz.question_count} questions)")
        return self.view()

    def select_answer(self, option_index: int) -> SessionView:
        """
        Record an answer for the current question, replacing any earlier one.

        Once the question has been revealed (or scored by advance()) its answer
        is locked, so presentation layers should stop offering options then.

        Raises:
            InvalidStateTransition: Outside IN_PROGRESS, or once the question is scored
            InvalidAnswerError: If the index is not one of the question's options
        """
        self._require("select_answer", SessionState.IN_PROGRESS)
        session = self.session
        question = session.current_question

        if question.id in session.scored:
            raise InvalidStateTransition(
                "select_answer", self.state.value, f"question '{question.id}' is already revealed"
            )
        if isinstance(option_index, bool) or not isinstance(option_index, int) \
                or not 0 <= option_index < len(question.options):
            raise InvalidAnswerError(
                f"Option {option_index!r} is out of range for question '{question.id}' "
                f"({len(question.options)} options)"
            )

        session.answers[question.id] = option_index
        return self.view()

    def reveal(self) -> RevealResult:
        """
        Check the selected answer. Calling again before advance() changes nothing.

        Raises:
            InvalidStateTransition: Outside IN_PROGRESS, or with no answer selected
        """
        self._require("reveal", SessionState.IN_PROGRESS)
        session = self.session
        question = session.current_question
        selected = session.answers.get(question.id)

        if selected is None:
            raise InvalidStateTransition(
                "reveal", self.state.value, f"no answer selected for question '{question.id}'"
            )

        earned = self._score_current()
        return RevealResult(
            question_id=question.id,
            selected=selected,
            correct_answer=question.correct_answer,
            is_correct=question.is_correct(selected),
            points_awarded=earned,
            explanation=question.explanation,
            hint=question.hint,
        )

    def advance(self) -> SessionView:
        """
        Move to the next question, or complete the quiz after the last one.

        An answer that was selected but never revealed is scored here.

        Raises:
            InvalidStateTransition: Outside IN_PROGRESS
        """
        self._require("advance", SessionState.IN_PROGRESS)
        session = self.session

        if session.current_question.id in session.answers:
            self._score_current()

        if session.is_last_question:
            session.finished_at = time.monotonic()
            self.state = SessionState.COMPLETED
            logger.debug(
                f"Completed quiz '{session.quiz.id}': "
                f"{session.score}/{session.quiz.effective_total_points}"
            )
        else:
            session.current_question_index += 1

        return self.view()

    def restart(self) -> SessionView:
        """Discard the attempt and return to NOT_STARTED. Valid from any state."""
        if self.session is not None:
            logger.debug(f"Discarding session for quiz '{self.session.quiz.id}'")
        self.session = None
        self.state = SessionState.NOT_STARTED
        return self.view()

    @property
    def score(self) -> Number:
        return self.session.score if self.session else 0

    def view(self) -> SessionView:
        session = self.session
        if session is None:
            return SessionView(state=self.state)

        quiz = session.quiz
        question = session.current_question
        revealed = question.id in session.scored
        return SessionView(
            state=self.state,
            quiz_id=quiz.id,
            question_index=session.current_question_index,
            question_count=quiz.question_count,
            question=question,
            selected=session.answers.get(question.id),
            revealed=revealed,
            hint=question.hint,
            explanation=question.explanation if revealed else None,
            score=session.score,
            total_points=quiz.effective_total_points,
        )

    def report(self) -> PerformanceReport:
        """
        Performance summary for the finished attempt.

        Raises:
            InvalidStateTransition: Unless COMPLETED
        """
        self._require("report", SessionState.COMPLETED)
        session = self.session
        return analyze_performance(
            session.quiz, session.answers, time_spent=session.elapsed_seconds
        )
