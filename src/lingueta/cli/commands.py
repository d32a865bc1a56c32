"""CLI commands for lingueta.

Commands:
- init: Create the learner profile
- languages / select: Browse and pick languages
- lessons / study: List and walk through lessons
- quiz / daily: Timed quizzes and the daily challenge
- stats / status: Analytics and profile overview

State lives under $LINGUETA_DATA_DIR (default: data).
"""

import os
import random
from dataclasses import dataclass
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from lingueta.config.app_config import AppConfig, load_app_config
from lingueta.core.analytics import (
    achievements_triggered,
    grade,
    language_statistics,
    quiz_statistics,
    recommendations,
    weak_areas,
)
from lingueta.core.catalog import Catalog, CatalogError, load_catalog_or_sample
from lingueta.core.history import QuizHistory
from lingueta.core.ledger import ProgressLedger
from lingueta.core.models import Difficulty, Exercise
from lingueta.core.profile import GoalType, JsonProfileStore, User, create_user
from lingueta.core.quiz import QuizResult
from lingueta.core.quiz_engine import QuizEngine
from lingueta.core.walker import LessonWalker, WalkerPhase

app = typer.Typer(
    name="lingueta",
    help="Lessons, quizzes and progress tracking for language learners.",
    no_args_is_help=True,
)

console = Console()


# =============================================================================
# HELPERS
# =============================================================================


@dataclass
class Services:
    """Engine services wired to the data directory."""

    data_dir: Path
    config: AppConfig
    catalog: Catalog
    ledger: ProgressLedger
    history: QuizHistory


def _data_dir() -> Path:
    return Path(os.environ.get("LINGUETA_DATA_DIR", "data"))


def _services() -> Services:
    data_dir = _data_dir()
    config = load_app_config()
    try:
        catalog = load_catalog_or_sample(data_dir / "catalog")
    except CatalogError as e:
        console.print(f"[red]✗ Invalid catalog: {e}[/red]")
        raise typer.Exit(code=1)

    return Services(
        data_dir=data_dir,
        config=config,
        catalog=catalog,
        ledger=ProgressLedger(JsonProfileStore(data_dir), config=config),
        history=QuizHistory(data_dir),
    )


def _require_user(services: Services) -> User:
    user = services.ledger.user
    if user is None:
        console.print("[yellow]⚠ No profile found[/yellow]")
        console.print("  Run first: lingueta init NAME")
        raise typer.Exit(code=1)
    return user


def _require_language(services: Services, code: str) -> None:
    if services.catalog.language(code) is None:
        console.print(f"[red]✗ Unknown language: {code}[/red]")
        available = ", ".join(lang.code for lang in services.catalog.languages())
        console.print(f"  Available: {available}")
        raise typer.Exit(code=1)


def _format_minutes(seconds: float) -> str:
    return f"{seconds / 60:.1f} min"


# =============================================================================
# PROFILE
# =============================================================================


@app.command()
def init(
    name: str = typer.Argument(..., help="Learner name"),
    native: str = typer.Option("en", "--native", help="Native language code"),
    goal: str = typer.Option("regular", "--goal", "-g", help="Goal: casual, regular, intensive"),
    force: bool = typer.Option(False, "--force", "-f", help="Replace an existing profile"),
) -> None:
    """Create the learner profile."""
    services = _services()

    if services.ledger.user is not None and not force:
        console.print(f"[yellow]⚠ Profile already exists: {services.ledger.user.name}[/yellow]")
        console.print("  Use --force to replace it")
        raise typer.Exit(code=1)

    try:
        goal_type = GoalType.from_key(goal)
    except ValueError:
        console.print(f"[red]✗ Unknown goal: {goal}[/red]")
        raise typer.Exit(code=1)

    user = create_user(name, native_language=native, goal=goal_type)
    services.ledger.establish_profile(user)

    console.print(f"[green]✓ Welcome, {user.name}![/green]")
    console.print(
        f"  Goal: {user.goals.daily_goal_minutes} min/day, "
        f"{user.goals.weekly_goal_lessons} lessons/week"
    )


@app.command()
def status() -> None:
    """Show points, rank and streaks."""
    services = _services()
    user = _require_user(services)
    stats = user.statistics

    header = (
        f"[bold]{stats.rank.label}[/bold] - {stats.total_points} points\n"
        f"Streak: {stats.current_streak} days (longest {stats.longest_streak})\n"
        f"Lessons: {stats.total_lessons_completed} | Quizzes: {stats.total_quizzes_taken} | "
        f"Study time: {_format_minutes(stats.total_study_time)}"
    )
    console.print(Panel(header, title=f"[bold]{user.name}[/bold]", expand=False))

    if user.selected_languages:
        table = Table(show_header=True, header_style="bold")
        table.add_column("Language", style="cyan")
        table.add_column("Lessons", justify="right")
        table.add_column("Points", justify="right")
        table.add_column("Completion", justify="right")

        for code in user.selected_languages:
            progress = services.ledger.progress_for(code)
            language = services.catalog.language(code)
            table.add_row(
                language.name if language else code,
                str(len(progress.completed_lessons)) if progress else "0",
                str(progress.total_points) if progress else "0",
                f"{services.ledger.completion_percentage(code):.0f}%",
            )
        console.print(table)

    if user.achievements:
        console.print("\n[bold]Achievements[/bold]")
        for achievement in user.achievements:
            console.print(f"  🏆 {achievement.title} - {achievement.description}")


# =============================================================================
# LANGUAGES & LESSONS
# =============================================================================


@app.command()
def languages() -> None:
    """List the languages in the catalog."""
    services = _services()

    table = Table(show_header=True, header_style="bold")
    table.add_column("Code", style="cyan")
    table.add_column("Language")
    table.add_column("Difficulty")
    table.add_column("Lessons", justify="right")

    for language in services.catalog.languages():
        table.add_row(
            language.code,
            f"{language.flag} {language.name}".strip(),
            language.difficulty.label,
            str(language.total_lessons),
        )
    console.print(table)


@app.command()
def select(code: str = typer.Argument(..., help="Language code (e.g. 'es')")) -> None:
    """Add a language to the profile."""
    services = _services()
    _require_user(services)
    _require_language(services, code)

    services.ledger.select_language(code)
    language = services.catalog.language(code)
    console.print(f"[green]✓ Learning {language.name}[/green]")


@app.command()
def lessons(code: str = typer.Argument(..., help="Language code")) -> None:
    """List lessons with completion marks."""
    services = _services()
    _require_language(services, code)

    table = Table(show_header=True, header_style="bold")
    table.add_column("#", justify="right", width=4)
    table.add_column("Title")
    table.add_column("Difficulty")
    table.add_column("Done", justify="center", width=6)

    for lesson in services.catalog.lessons(code):
        done = services.ledger.is_lesson_completed(code, lesson.lesson_number)
        table.add_row(
            str(lesson.lesson_number),
            lesson.title,
            lesson.difficulty.label,
            "[green]✓[/green]" if done else "",
        )
    console.print(table)

    following = services.ledger.next_lesson(services.catalog, code)
    if following is not None:
        console.print(f"\nNext: [bold]{following.title}[/bold]")
    else:
        console.print("\n[green]All lessons completed[/green]")


def _show_walker_position(walker: LessonWalker) -> None:
    item = walker.current_vocabulary_item()
    if item is not None:
        console.print(
            f"\n[blue]Vocabulary {walker.cursor.vocabulary_index + 1}/{len(walker.lesson.vocabulary)}[/blue]"
        )
        console.print(f"[bold]{item.word}[/bold] ({item.pronunciation}) = {item.translation}")
        if item.example:
            console.print(f"  [dim]{item.example} - {item.example_translation}[/dim]")
        return

    line = walker.current_dialogue_line()
    if line is not None:
        dialogue = walker.current_dialogue()
        if walker.cursor.line_index == 0:
            console.print(f"\n[blue]{dialogue.title}[/blue] [dim]{dialogue.scenario}[/dim]")
        console.print(f"[bold]{line.speaker}:[/bold] {line.text}")
        console.print(f"  [dim]{line.translation}[/dim]")


@app.command()
def study(
    code: str = typer.Argument(..., help="Language code"),
    number: int = typer.Argument(..., help="Lesson number"),
) -> None:
    """Walk through a lesson (Enter = next, b = back, q = quit)."""
    services = _services()
    _require_user(services)
    _require_language(services, code)

    lesson = services.catalog.lesson(code, number)
    if lesson is None:
        console.print(f"[red]✗ Lesson not found: {code} #{number}[/red]")
        raise typer.Exit(code=1)

    console.print(Panel(lesson.description or lesson.title, title=f"[bold]{lesson.title}[/bold]", expand=False))

    walker = LessonWalker(lesson, services.ledger, config=services.config)
    while walker.cursor.phase is not WalkerPhase.COMPLETED:
        _show_walker_position(walker)
        choice = typer.prompt(
            f"[{walker.progress:.0%}] Enter=next, b=back, q=quit",
            default="",
            show_default=False,
        ).strip().lower()

        if choice == "q":
            console.print("[yellow]Lesson paused[/yellow]")
            return
        if choice == "b":
            if not walker.retreat():
                console.print("[dim]Already at the start of this section[/dim]")
            continue
        walker.advance()

    console.print(f"\n[green]✓ Lesson completed! +{walker.earned_points} points[/green]")
    if walker.award is not None and walker.award.rank_changed:
        console.print(f"[bold]🎉 New rank: {walker.award.rank.label}[/bold]")


# =============================================================================
# QUIZZES
# =============================================================================


def _ask_answer(exercise: Exercise) -> str:
    """Prompt for an answer; an option number selects that option."""
    for idx, option in enumerate(exercise.options, start=1):
        console.print(f"  {idx}. {option}")

    raw = typer.prompt("Answer", default="", show_default=False).strip()
    if raw.isdigit() and 1 <= int(raw) <= len(exercise.options):
        return exercise.options[int(raw) - 1]
    return raw


def _run_quiz(engine: QuizEngine) -> QuizResult:
    """Drive the live quiz to completion and return its result."""
    while engine.current_quiz is not None:
        quiz = engine.current_quiz

        # The countdown is checked between prompts
        if engine.tick(quiz.quiz_id):
            console.print("[yellow]⏰ Time's up[/yellow]")
            continue

        exercise = quiz.current_question
        if exercise is None:
            engine.next_question()
            continue

        console.print(
            f"\n[blue]Question {quiz.current_question_index + 1}/{quiz.question_count}[/blue] "
            f"[dim]{exercise.type.label} | {engine.time_remaining()}s left[/dim]"
        )
        console.print(f"[bold]{exercise.question}[/bold]")

        answer = _ask_answer(exercise)
        if engine.submit_answer(quiz.current_question_index, answer):
            console.print(f"[green]✓ Correct! +{exercise.points}[/green]")
        else:
            console.print(f"[red]✗ Correct answer: {exercise.correct_answer}[/red]")
        if exercise.explanation:
            console.print(f"  [dim]{exercise.explanation}[/dim]")

        engine.next_question()

    return engine.history.results()[-1]


def _show_result(services: Services, result: QuizResult) -> None:
    passed = "PASSED" if result.is_passed else "NOT PASSED"
    color = "green" if result.is_passed else "red"

    header = (
        f"[bold]{result.percentage:.0f}%[/bold] ({grade(result.percentage)}) - [{color}]{passed}[/{color}]\n"
        f"Correct: {result.correct_answers}/{result.question_count} | Score: {result.score}"
    )
    if result.is_daily_challenge:
        header += f" + {result.bonus_points} bonus"
    console.print(Panel(header, title="[bold]Quiz result[/bold]", expand=False))

    completed = len(services.history.for_language(result.language_code))
    fresh = services.ledger.unlock_achievements(achievements_triggered(result, completed))
    for achievement in fresh:
        console.print(f"[bold]🏆 {achievement.title}[/bold] - {achievement.description}")


def _new_engine(services: Services) -> QuizEngine:
    return QuizEngine(
        services.catalog,
        services.ledger,
        history=services.history,
        config=services.config,
        rng=random.Random(),
    )


@app.command()
def quiz(
    code: str = typer.Argument(..., help="Language code"),
    difficulty: str = typer.Option("beginner", "--difficulty", "-d", help="beginner, intermediate, advanced"),
    count: int = typer.Option(10, "--count", "-n", help="Number of questions"),
) -> None:
    """Take a timed quiz."""
    services = _services()
    _require_user(services)
    _require_language(services, code)

    try:
        level = Difficulty(difficulty)
    except ValueError:
        console.print(f"[red]✗ Unknown difficulty: {difficulty}[/red]")
        raise typer.Exit(code=1)

    engine = _new_engine(services)
    generated = engine.generate_quiz(code, level, question_count=count)
    if generated.is_completed:
        console.print(f"[yellow]⚠ No {level.value} exercises for {code}[/yellow]")
        raise typer.Exit(code=1)

    console.print(f"[bold]Quiz[/bold]: {generated.question_count} questions, {generated.time_limit}s")
    _show_result(services, _run_quiz(engine))


@app.command()
def daily(code: str = typer.Argument(..., help="Language code")) -> None:
    """Take the daily challenge (bonus points)."""
    services = _services()
    _require_user(services)
    _require_language(services, code)

    engine = _new_engine(services)
    generated = engine.generate_daily_challenge(code)

    console.print(
        f"[bold]Daily challenge[/bold]: {generated.question_count} questions, "
        f"{generated.time_limit}s, +{generated.bonus_points} bonus"
    )
    _show_result(services, _run_quiz(engine))


# =============================================================================
# ANALYTICS
# =============================================================================


@app.command()
def stats(code: str = typer.Argument(..., help="Language code")) -> None:
    """Show quiz statistics, weak areas and recommendations."""
    services = _services()
    user = _require_user(services)
    _require_language(services, code)

    history = services.history.results()
    quiz_stats = quiz_statistics(history, code)

    table = Table(show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Quizzes", str(quiz_stats.total_quizzes))
    table.add_row("Questions", str(quiz_stats.total_questions))
    table.add_row("Correct", str(quiz_stats.correct_answers))
    table.add_row("Accuracy", f"{quiz_stats.accuracy:.1f}%")
    table.add_row("Average score", f"{quiz_stats.average_score:.1f}")
    table.add_row("Best score", str(quiz_stats.best_score))
    table.add_row("Recent improvement", f"{quiz_stats.recent_improvement:+.1f}")
    table.add_row("Performance", quiz_stats.performance_level)
    console.print(table)

    weak = weak_areas(history, code)
    if weak:
        console.print("\n[bold]Weak areas:[/bold] " + ", ".join(t.label for t in weak))

    console.print("\n[bold]Recommendations[/bold]")
    for tip in recommendations(history, code):
        console.print(f"  • {tip}")

    lang_stats = language_statistics(user, services.catalog, code, services.config.progress.completion_denominator)
    console.print(
        f"\n[bold]Progress[/bold]: {lang_stats.completed_lessons} lessons, "
        f"{lang_stats.total_points} points, {lang_stats.completion_percentage:.0f}% "
        f"({lang_stats.proficiency_level})"
    )
    if lang_stats.estimated_time_to_complete > 0:
        console.print(f"  Estimated time to finish: {_format_minutes(lang_stats.estimated_time_to_complete)}")


if __name__ == "__main__":
    app()
