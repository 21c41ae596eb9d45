"""
Shared fixtures for quiz engine tests.
"""

import copy

import pytest

from devops_quiz.sources.memory import MemorySource
from devops_quiz.quiz.loader import QuizLoader
from devops_quiz.quiz.catalog import QuizCatalog


def make_question(qid: str, correct: int = 0, points=10, difficulty: str = "beginner", **extra) -> dict:
    """Build a raw question record."""
    data = {
        "id": qid,
        "title": f"Question {qid}",
        "situation": f"Situation for {qid}",
        "options": ["Option A", "Option B", "Option C", "Option D"],
        "correctAnswer": correct,
        "explanation": f"Explanation for {qid}",
        "difficulty": difficulty,
        "points": points,
    }
    data.update(extra)
    return data


def make_quiz(quiz_id: str = "git-quiz", questions=None, **extra) -> dict:
    """Build a raw quiz record."""
    data = {
        "id": quiz_id,
        "title": f"{quiz_id.replace('-', ' ').title()}",
        "description": f"Test your knowledge: {quiz_id}",
        "category": "Git",
        "icon": "GitBranch",
        "totalPoints": 0,
        "theme": {
            "primaryColor": "orange",
            "gradientFrom": "from-orange-500",
            "gradientTo": "to-red-600",
        },
        "metadata": {"estimatedTime": "10 minutes"},
        "questions": questions if questions is not None else [
            make_question("q1", correct=1, points=10),
            make_question("q2", correct=0, points=20, difficulty="intermediate"),
        ],
    }
    data.update(extra)
    return data


@pytest.fixture
def quiz_data():
    """A valid raw quiz record."""
    return make_quiz()


@pytest.fixture
def scenario_data():
    """Two questions: Q1 correct=2 for 10 points, Q2 correct=0 for 15 points."""
    return make_quiz(
        "scenario-quiz",
        questions=[
            make_question("q1", correct=2, points=10),
            make_question("q2", correct=0, points=15, difficulty="advanced", hint="Think twice"),
        ],
    )


@pytest.fixture
def make_catalog():
    """Factory: catalog over in-memory records."""
    def _make(*records):
        source = MemorySource([copy.deepcopy(r) for r in records])
        return QuizCatalog(QuizLoader(source))
    return _make
