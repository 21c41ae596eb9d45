"""
Tests for the quiz catalog.
"""

import threading

import pytest

from devops_quiz.quiz.catalog import QuizCatalog, QuizSummary
from devops_quiz.quiz.errors import NotFoundError
from devops_quiz.quiz.loader import QuizLoader
from devops_quiz.sources.memory import MemorySource

from conftest import make_question, make_quiz


class CountingLoader(QuizLoader):
    """Loader that records how often the source is read."""

    def __init__(self, source):
        super().__init__(source)
        self.loads = 0

    def list_all(self):
        self.loads += 1
        return super().list_all()


class TestCatalogLookup:
    """Tests for get_by_id and membership."""

    def test_get_by_id(self, make_catalog, quiz_data):
        catalog = make_catalog(quiz_data)

        quiz = catalog.get_by_id("git-quiz")

        assert quiz.title == "Git Quiz"
        assert quiz.total_points == 30

    def test_not_found(self, make_catalog, quiz_data):
        catalog = make_catalog(quiz_data)

        with pytest.raises(NotFoundError):
            catalog.get_by_id("nope")

    def test_contains_and_len(self, make_catalog, quiz_data):
        catalog = make_catalog(quiz_data, make_quiz("docker-quiz"))

        assert "docker-quiz" in catalog
        assert "nope" not in catalog
        assert len(catalog) == 2

    def test_invalid_quiz_excluded(self, make_catalog, quiz_data):
        """Test a bad quiz is reported but the rest still load."""
        bad = make_quiz("bad-quiz", questions=[make_question("q1", options=[])])
        catalog = make_catalog(bad, quiz_data)

        assert "git-quiz" in catalog
        assert "bad-quiz" not in catalog
        assert len(catalog.failures) == 1
        assert catalog.failures[0].quiz_id == "bad-quiz"

    def test_duplicate_quiz_id(self, make_catalog):
        """Test the first quiz with an id wins and later ones are reported."""
        first = make_quiz("git-quiz", title="First")
        second = make_quiz("git-quiz", title="Second")
        catalog = make_catalog(first, second)

        assert catalog.get_by_id("git-quiz").title == "First"
        assert len(catalog) == 1
        assert "Duplicate quiz id" in catalog.failures[0].errors[0]
        assert catalog.failures[0].source == "memory[1]"

    def test_ids_unique(self, make_catalog):
        catalog = make_catalog(make_quiz("a-quiz"), make_quiz("b-quiz"), make_quiz("a-quiz"))

        ids = [s.id for s in catalog.get_metadata()]
        assert len(ids) == len(set(ids))


class TestCatalogMetadata:
    """Tests for listing."""

    def test_summary_fields(self, make_catalog, quiz_data):
        summary = make_catalog(quiz_data).get_metadata()[0]

        assert isinstance(summary, QuizSummary)
        assert summary.id == "git-quiz"
        assert summary.estimated_time == "10 minutes"
        assert summary.total_points == 30
        assert summary.question_count == 2
        assert summary.theme.primary_color == "orange"

    def test_declared_total_in_summary(self, make_catalog):
        catalog = make_catalog(make_quiz(totalPoints=120))

        assert catalog.get_metadata()[0].total_points == 120

    def test_ordered_by_category_then_title(self, make_catalog):
        catalog = make_catalog(
            make_quiz("z-quiz", category="Docker", title="Zebra"),
            make_quiz("a-quiz", category="Kubernetes", title="Alpha"),
            make_quiz("m-quiz", category="Docker", title="Middle"),
        )

        assert [s.id for s in catalog.get_metadata()] == ["m-quiz", "z-quiz", "a-quiz"]

    def test_categories(self, make_catalog):
        catalog = make_catalog(
            make_quiz("a-quiz", category="Kubernetes"),
            make_quiz("b-quiz", category="Docker"),
            make_quiz("c-quiz", category="Docker"),
        )

        assert catalog.categories() == ["Docker", "Kubernetes"]

    def test_list_quizzes_by_category(self, make_catalog):
        catalog = make_catalog(
            make_quiz("a-quiz", category="Kubernetes"),
            make_quiz("b-quiz", category="Docker"),
        )

        assert [q.id for q in catalog.list_quizzes(category="Docker")] == ["b-quiz"]

    def test_summary_to_dict(self, make_catalog, quiz_data):
        data = make_catalog(quiz_data).get_metadata()[0].to_dict()

        assert data["icon"] == "GitBranch"
        assert data["totalPoints"] == 30


class TestCatalogCaching:
    """Tests for load-once caching and reload."""

    def test_loads_once(self, quiz_data):
        """Test repeated reads reuse the first load."""
        loader = CountingLoader(MemorySource([quiz_data]))
        catalog = QuizCatalog(loader)

        assert catalog.is_loaded is False
        catalog.get_metadata()
        catalog.get_by_id("git-quiz")
        catalog.categories()

        assert catalog.is_loaded is True
        assert loader.loads == 1

    def test_reload_picks_up_changes(self, quiz_data):
        source = MemorySource([quiz_data])
        catalog = QuizCatalog(QuizLoader(source))
        assert len(catalog) == 1

        source.add(make_quiz("docker-quiz"))
        assert len(catalog) == 1

        catalog.reload()
        assert "docker-quiz" in catalog

    def test_loaded_at_is_utc(self, quiz_data):
        catalog = QuizCatalog(QuizLoader(MemorySource([quiz_data])))

        assert catalog.snapshot.loaded_at.endswith("+00:00")

    def test_old_snapshot_untouched_by_reload(self, quiz_data):
        """Test a held snapshot is never mutated by a reload."""
        source = MemorySource([quiz_data])
        catalog = QuizCatalog(QuizLoader(source))
        before = catalog.snapshot

        source.add(make_quiz("docker-quiz"))
        after = catalog.reload()

        assert list(before.quizzes) == ["git-quiz"]
        assert set(after.quizzes) == {"git-quiz", "docker-quiz"}

    def test_snapshot_is_read_only(self, make_catalog, quiz_data):
        catalog = make_catalog(quiz_data)

        with pytest.raises(TypeError):
            catalog.snapshot.quizzes["new"] = None

    def test_concurrent_first_access(self, quiz_data):
        """Test concurrent readers trigger a single load."""
        loader = CountingLoader(MemorySource([quiz_data, make_quiz("docker-quiz")]))
        catalog = QuizCatalog(loader)
        sizes = []

        def read():
            sizes.append(len(catalog.get_metadata()))

        threads = [threading.Thread(target=read) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert sizes == [2] * 8
        assert loader.loads == 1
