"""
Command-line interface for devops-quiz

Lets quiz authors list and validate content and play a quiz in the
terminal. The terminal loop is just another presentation layer: it only
calls runtime actions and never scores anything itself.
"""

import sys
import json
import logging
import argparse
from typing import Callable, List, Optional

from .config import Config, config
from .quiz.catalog import QuizCatalog
from .quiz.errors import InvalidAnswerError, NotFoundError
from .quiz.loader import QuizLoader
from .quiz.runtime import QuizRuntime, RevealResult, SessionState, SessionView
from .quiz.stats import PerformanceReport, get_quiz_stats, recommend_quizzes
from .sources import SourceError, source_from_config

GREEN = "\033[92m"
RED = "\033[91m"
YELLOW = "\033[93m"
BOLD = "\033[1m"
RESET = "\033[0m"

RATING_COLORS = {
    "excellent": GREEN,
    "good": GREEN,
    "needs-improvement": YELLOW,
    "poor": RED,
}


def setup_logging(verbose: bool = False, cfg: Optional[Config] = None) -> None:
    cfg = cfg or config
    level = logging.DEBUG if verbose else getattr(logging, cfg.logging.level.upper(), logging.WARNING)
    logging.basicConfig(level=level, format=cfg.logging.format)


def build_catalog(args: argparse.Namespace) -> QuizCatalog:
    """Catalog for the content location given on the command line or in config."""
    cfg = Config()
    if args.index_url:
        cfg.content.source = "remote"
        cfg.content.index_url = args.index_url
    elif args.content_dir:
        cfg = Config.for_directory(args.content_dir)
    return QuizCatalog(QuizLoader(source_from_config(cfg)))


def format_question(view: SessionView) -> str:
    """Render the current question for the terminal."""
    q = view.question
    lines = [
        "",
        f"{BOLD}Question {view.question_index + 1}/{view.question_count}{RESET}"
        f"  [{q.difficulty.value}, {q.points} pts]  Score: {view.score}/{view.total_points}",
        f"{BOLD}{q.title}{RESET}",
        q.situation,
    ]
    if q.code_example:
        lines.append("")
        lines.extend(f"    {line}" for line in q.code_example.splitlines())
    lines.append("")
    for i, option in enumerate(q.options, start=1):
        lines.append(f"  {i}. {option}")
    return "\n".join(lines)


def format_reveal(result: RevealResult, options: tuple) -> str:
    if result.is_correct:
        head = f"{GREEN}✓ Correct! +{result.points_awarded} pts{RESET}"
    else:
        head = f"{RED}✗ Incorrect.{RESET} Answer: {options[result.correct_answer]}"
    return f"{head}\n{result.explanation}"


def format_report(report: PerformanceReport) -> str:
    color = RATING_COLORS.get(report.performance, "")
    lines = [
        "",
        "=" * 60,
        "QUIZ COMPLETE",
        "=" * 60,
        f"Score: {report.score}/{report.total_points} ({report.percentage}%)",
        f"Correct: {report.correct_answers}  Incorrect: {report.incorrect_answers}",
        f"Performance: {color}{report.performance}{RESET}",
    ]
    for level, breakdown in report.difficulty_breakdown.items():
        if breakdown.total:
            lines.append(f"  {level.title()}: {breakdown.correct}/{breakdown.total}")
    if report.time_per_question is not None:
        lines.append(f"Time per question: {report.time_per_question}s")
    return "\n".join(lines)


def play_quiz(
    catalog: QuizCatalog,
    quiz_id: str,
    input_fn: Callable[[str], str] = input,
    output: Callable[[str], None] = print,
) -> Optional[PerformanceReport]:
    """
    Run one attempt interactively.

    Returns:
        The performance report, or None if the player quit
    """
    runtime = QuizRuntime(catalog)
    view = runtime.start(quiz_id)
    quiz = catalog.get_by_id(quiz_id)
    output(f"\n{BOLD}{quiz.title}{RESET} - {quiz.description}")

    while view.state == SessionState.IN_PROGRESS:
        output(format_question(view))
        option_count = len(view.question.options)

        while True:
            try:
                raw = input_fn(f"Your answer (1-{option_count}, h for hint, q to quit): ")
            except EOFError:
                raw = "q"
            raw = raw.strip().lower()

            if raw == "q":
                runtime.restart()
                output("Quiz abandoned.")
                return None
            if raw == "h":
                output(view.hint or "No hint for this question.")
                continue
            if raw.isdigit():
                try:
                    runtime.select_answer(int(raw) - 1)
                except InvalidAnswerError:
                    output(f"Pick a number between 1 and {option_count}.")
                    continue
                break
            output("Please enter a number, 'h' or 'q'.")

        output(format_reveal(runtime.reveal(), view.question.options))
        view = runtime.advance()

    report = runtime.report()
    output(format_report(report))

    suggestions = recommend_quizzes(quiz, report, catalog.list_quizzes())
    if suggestions:
        output("\nTry next:")
        for suggestion in suggestions:
            output(f"  - {suggestion.title} ({suggestion.id})")
    return report


def print_failures(catalog: QuizCatalog) -> None:
    for error in catalog.failures:
        print(f"{RED}✗ {error.quiz_id or error.source}{RESET} ({error.source})", file=sys.stderr)
        for message in error.errors:
            print(f"    - {message}", file=sys.stderr)


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="devops-quiz",
        description="Validate, list and play data-driven quizzes",
        epilog="Example: devops-quiz --content-dir content/quizzes play git-quiz"
    )
    parser.add_argument(
        "--content-dir",
        help=f"Directory of quiz JSON files (default: {config.content.quiz_dir})"
    )
    parser.add_argument(
        "--index-url",
        help="Load quizzes from a remote JSON index instead of a directory"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    list_parser = subparsers.add_parser("list", help="List available quizzes")
    list_parser.add_argument("--category", help="Only show this category")
    list_parser.add_argument("--json", action="store_true", help="Output as JSON")

    validate_parser = subparsers.add_parser("validate", help="Validate quiz content")
    validate_parser.add_argument("--json", action="store_true", help="Output as JSON")

    show_parser = subparsers.add_parser("show", help="Show quiz statistics")
    show_parser.add_argument("quiz_id", help="Quiz id")
    show_parser.add_argument("--json", action="store_true", help="Output as JSON")

    play_parser = subparsers.add_parser("play", help="Play a quiz in the terminal")
    play_parser.add_argument("quiz_id", help="Quiz id")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    setup_logging(args.verbose)

    try:
        catalog = build_catalog(args)
        catalog.reload()
    except (SourceError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    try:
        if args.command == "list":
            summaries = catalog.get_metadata()
            if args.category:
                summaries = [s for s in summaries if s.category == args.category]

            if args.json:
                print(json.dumps([s.to_dict() for s in summaries], indent=2))
            else:
                current_category = None
                for summary in summaries:
                    if summary.category != current_category:
                        current_category = summary.category
                        print(f"\n{BOLD}{current_category}{RESET}")
                    print(
                        f"  {summary.id:<24} {summary.title} "
                        f"({summary.question_count} questions, {summary.total_points} pts, "
                        f"{summary.estimated_time or 'n/a'})"
                    )
                if catalog.failures:
                    print(f"\n{YELLOW}{len(catalog.failures)} quiz file(s) excluded; run 'validate' for details{RESET}")
            return 0

        if args.command == "validate":
            if args.json:
                print(json.dumps({
                    "loaded": [s.id for s in catalog.get_metadata()],
                    "failures": [
                        {"source": e.source, "quizId": e.quiz_id, "errors": e.errors}
                        for e in catalog.failures
                    ],
                }, indent=2))
            else:
                print(f"{GREEN}✓ {len(catalog)} valid quizzes{RESET}")
                print_failures(catalog)
            return 1 if catalog.failures else 0

        if args.command == "show":
            quiz = catalog.get_by_id(args.quiz_id)
            stats = get_quiz_stats(quiz)
            if args.json:
                print(json.dumps({"quiz": quiz.to_dict(), "stats": stats.to_dict()}, indent=2))
            else:
                print(f"{BOLD}{quiz.title}{RESET} ({quiz.id})")
                print(quiz.description)
                print(f"Category: {quiz.category}")
                print(f"Questions: {stats.total_questions}")
                print(f"Total points: {stats.total_points} (avg {stats.average_points})")
                print(f"Estimated time: {stats.estimated_time or 'n/a'}")
                print(f"Dominant difficulty: {stats.dominant_difficulty.value}")
                for level, count in stats.difficulty.items():
                    print(f"  {level.title()}: {count}")
            return 0

        if args.command == "play":
            report = play_quiz(catalog, args.quiz_id)
            return 0 if report is not None else 1

    except NotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
