"""
Quiz engine errors

Load-time validation failures, unknown quiz ids, and runtime misuse.
None of these are transient; callers should never retry them.
"""

from typing import Optional


class QuizError(Exception):
    """Base exception for quiz engine errors."""
    pass


class ValidationError(QuizError):
    """
    A quiz definition is malformed or internally inconsistent.

    Collects every problem found in one record so authors can fix them
    in a single pass.
    """

    def __init__(
        self,
        errors: list[str],
        *,
        source: str = "<unknown>",
        quiz_id: Optional[str] = None,
    ):
        self.errors = list(errors)
        self.source = source
        self.quiz_id = quiz_id
        label = quiz_id or source
        super().__init__(f"Invalid quiz '{label}': {'; '.join(self.errors)}")


class NotFoundError(QuizError, KeyError):
    """No quiz definition has the requested id."""

    def __init__(self, quiz_id: str):
        self.quiz_id = quiz_id
        super().__init__(f"Quiz not found: {quiz_id}")

    def __str__(self) -> str:
        # KeyError would repr() the message
        return self.args[0]


class InvalidStateTransition(QuizError):
    """A runtime action was invoked in a state that does not allow it."""

    def __init__(self, action: str, state: str, reason: str = ""):
        self.action = action
        self.state = state
        message = f"Cannot {action}() while {state}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class InvalidAnswerError(QuizError, ValueError):
    """Selected option index is outside the current question's options."""
    pass
