"""
Tests for the quiz runtime state machine.
"""

import pytest

from devops_quiz.quiz.errors import InvalidAnswerError, InvalidStateTransition, NotFoundError
from devops_quiz.quiz.runtime import QuizRuntime, SessionState

from conftest import make_question, make_quiz


@pytest.fixture
def runtime(make_catalog, scenario_data):
    """Runtime over the two-question scenario quiz."""
    return QuizRuntime(make_catalog(scenario_data))


def play(runtime, answers):
    """Answer every question in order, revealing each one."""
    for answer in answers:
        runtime.select_answer(answer)
        runtime.reveal()
        runtime.advance()


class TestScenario:
    """The two-question walkthrough: 10 + 15 points, one right, one wrong."""

    def test_walkthrough(self, runtime):
        view = runtime.start("scenario-quiz")
        assert view.state == SessionState.IN_PROGRESS
        assert view.question_index == 0
        assert view.score == 0

        runtime.select_answer(2)
        result = runtime.reveal()
        assert result.is_correct is True
        assert runtime.score == 10

        view = runtime.advance()
        assert view.question_index == 1
        assert view.state == SessionState.IN_PROGRESS

        runtime.select_answer(1)
        result = runtime.reveal()
        assert result.is_correct is False
        assert result.correct_answer == 0
        assert runtime.score == 10

        view = runtime.advance()
        assert view.state == SessionState.COMPLETED
        assert view.score == 10
        assert view.total_points == 25


class TestStart:
    """Tests for start()."""

    def test_initial_state(self, runtime):
        view = runtime.view()

        assert runtime.state == SessionState.NOT_STARTED
        assert view.quiz_id is None
        assert runtime.score == 0

    def test_unknown_quiz(self, runtime):
        with pytest.raises(NotFoundError):
            runtime.start("missing-quiz")

        assert runtime.state == SessionState.NOT_STARTED

    def test_start_twice(self, runtime):
        runtime.start("scenario-quiz")

        with pytest.raises(InvalidStateTransition):
            runtime.start("scenario-quiz")


class TestSelectAnswer:
    """Tests for select_answer()."""

    def test_before_start(self, runtime):
        with pytest.raises(InvalidStateTransition) as exc_info:
            runtime.select_answer(0)

        assert exc_info.value.action == "select_answer"
        assert exc_info.value.state == "not_started"

    def test_after_completion(self, runtime):
        runtime.start("scenario-quiz")
        play(runtime, [2, 0])

        with pytest.raises(InvalidStateTransition):
            runtime.select_answer(0)

    def test_last_selection_wins(self, runtime):
        """Test only the most recent selection before reveal is scored."""
        runtime.start("scenario-quiz")

        runtime.select_answer(0)
        runtime.select_answer(2)
        result = runtime.reveal()

        assert result.selected == 2
        assert result.is_correct is True
        assert runtime.score == 10

    def test_last_selection_wins_wrong(self, runtime):
        runtime.start("scenario-quiz")

        runtime.select_answer(2)
        runtime.select_answer(3)
        runtime.reveal()

        assert runtime.score == 0

    @pytest.mark.parametrize("option", [-1, 4, 100])
    def test_out_of_range(self, runtime, option):
        runtime.start("scenario-quiz")

        with pytest.raises(InvalidAnswerError):
            runtime.select_answer(option)

        assert runtime.view().selected is None

    def test_locked_after_reveal(self, runtime):
        """Test a revealed answer cannot be changed."""
        runtime.start("scenario-quiz")
        runtime.select_answer(2)
        runtime.reveal()

        with pytest.raises(InvalidStateTransition):
            runtime.select_answer(0)

        assert runtime.view().selected == 2


class TestReveal:
    """Tests for reveal()."""

    def test_without_answer(self, runtime):
        runtime.start("scenario-quiz")

        with pytest.raises(InvalidStateTransition):
            runtime.reveal()

    def test_before_start(self, runtime):
        with pytest.raises(InvalidStateTransition):
            runtime.reveal()

    def test_idempotent(self, runtime):
        """Test revealing twice scores only once."""
        runtime.start("scenario-quiz")
        runtime.select_answer(2)

        first = runtime.reveal()
        second = runtime.reveal()

        assert first == second
        assert runtime.score == 10

    def test_exposes_explanation_and_hint(self, runtime):
        runtime.start("scenario-quiz")
        runtime.select_answer(2)
        runtime.reveal()
        runtime.advance()
        runtime.select_answer(0)

        result = runtime.reveal()

        assert result.explanation == "Explanation for q2"
        assert result.hint == "Think twice"
        assert result.points_awarded == 15

    def test_view_after_reveal(self, runtime):
        runtime.start("scenario-quiz")
        assert runtime.view().explanation is None

        runtime.select_answer(2)
        runtime.reveal()
        view = runtime.view()

        assert view.revealed is True
        assert view.explanation == "Explanation for q1"


class TestAdvance:
    """Tests for advance()."""

    def test_before_start(self, runtime):
        with pytest.raises(InvalidStateTransition):
            runtime.advance()

    def test_from_completed(self, runtime):
        runtime.start("scenario-quiz")
        play(runtime, [2, 0])

        with pytest.raises(InvalidStateTransition):
            runtime.advance()

    def test_last_question_completes(self, runtime):
        """Test advancing past the last question completes instead of failing."""
        runtime.start("scenario-quiz")
        runtime.advance()

        view = runtime.advance()

        assert view.state == SessionState.COMPLETED

    def test_scores_unrevealed_answer(self, runtime):
        """Test an answer selected but not revealed still counts."""
        runtime.start("scenario-quiz")
        runtime.select_answer(2)
        runtime.advance()

        assert runtime.score == 10

    def test_skip_scores_nothing(self, runtime):
        runtime.start("scenario-quiz")
        runtime.advance()
        runtime.advance()

        assert runtime.score == 0

    def test_index_stays_in_range(self, runtime):
        runtime.start("scenario-quiz")
        for _ in range(2):
            view = runtime.view()
            assert 0 <= view.question_index < view.question_count
            runtime.advance()

        assert runtime.view().question_index == 1


class TestScoring:
    """Scoring properties over whole attempts."""

    def test_all_correct(self, make_catalog):
        data = make_quiz(questions=[
            make_question("q1", correct=1, points=5),
            make_question("q2", correct=3, points=7.5),
            make_question("q3", correct=0, points=12),
        ])
        runtime = QuizRuntime(make_catalog(data))
        runtime.start("git-quiz")

        play(runtime, [1, 3, 0])

        assert runtime.state == SessionState.COMPLETED
        assert runtime.score == 24.5

    def test_all_wrong(self, runtime):
        runtime.start("scenario-quiz")

        play(runtime, [0, 3])

        assert runtime.score == 0

    def test_score_never_decreases(self, runtime):
        runtime.start("scenario-quiz")
        scores = [runtime.score]

        for answer in (2, 1):
            runtime.select_answer(answer)
            scores.append(runtime.score)
            runtime.reveal()
            scores.append(runtime.score)
            runtime.advance()
            scores.append(runtime.score)

        assert scores == sorted(scores)

    def test_final_score_matches_answers(self, runtime):
        """Test the completed score equals points of correctly recorded answers."""
        runtime.start("scenario-quiz")
        play(runtime, [2, 0])

        quiz = runtime.session.quiz
        expected = sum(
            q.points for q in quiz.questions
            if runtime.session.answers.get(q.id) == q.correct_answer
        )
        assert runtime.score == expected == 25

    def test_report(self, runtime):
        runtime.start("scenario-quiz")
        play(runtime, [2, 1])

        report = runtime.report()

        assert report.score == 10
        assert report.total_points == 25
        assert report.percentage == 40
        assert report.correct_answers == 1
        assert report.performance == "poor"

    def test_report_before_completion(self, runtime):
        runtime.start("scenario-quiz")

        with pytest.raises(InvalidStateTransition):
            runtime.report()


class TestRestart:
    """Tests for restart()."""

    def test_from_completed(self, runtime):
        """Test restart clears score and answers."""
        runtime.start("scenario-quiz")
        play(runtime, [2, 0])

        view = runtime.restart()

        assert view.state == SessionState.NOT_STARTED
        assert runtime.session is None
        assert runtime.score == 0

    def test_from_in_progress(self, runtime):
        runtime.start("scenario-quiz")
        runtime.select_answer(2)
        runtime.reveal()

        runtime.restart()
        view = runtime.start("scenario-quiz")

        assert view.score == 0
        assert view.question_index == 0
        assert view.selected is None

    def test_from_not_started(self, runtime):
        view = runtime.restart()

        assert view.state == SessionState.NOT_STARTED


class TestSessionView:
    """Tests for the read-only session view."""

    def test_progress(self, runtime):
        assert runtime.view().progress == 0.0

        runtime.start("scenario-quiz")
        runtime.advance()
        assert runtime.view().progress == 0.5

        runtime.advance()
        assert runtime.view().progress == 1.0

    def test_hint_available_before_answer(self, runtime):
        runtime.start("scenario-quiz")
        runtime.advance()

        assert runtime.view().hint == "Think twice"

    def test_sessions_share_definitions(self, make_catalog, scenario_data):
        """Test two runtimes over one catalog keep separate progress."""
        catalog = make_catalog(scenario_data)
        first = QuizRuntime(catalog)
        second = QuizRuntime(catalog)
        first.start("scenario-quiz")
        second.start("scenario-quiz")

        first.select_answer(2)
        first.reveal()

        assert first.score == 10
        assert second.score == 0
        assert first.session.quiz is second.session.quiz
