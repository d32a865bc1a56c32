"""Tests for the Progress Ledger (F2).

Tests cover:
- Point awards for lessons and quizzes
- Double counting on repeated lesson completion
- Streak rules across days
- Rank changes
- Persistence (one save per award, failures swallowed)
"""

from lingueta.core.catalog import StaticCatalog
from lingueta.core.ledger import LessonCompletion, ProgressLedger, QuizCompletion
from lingueta.core.models import Achievement, AchievementCategory, Language, Lesson
from lingueta.core.profile import MemoryProfileStore, ProfileStoreError, Rank, create_user


class FailingStore(MemoryProfileStore):
    def save(self, user):
        raise ProfileStoreError("disk full")


class TestAward:
    """Tests for ProgressLedger.award."""

    def test_lesson_award(self, ledger):
        """Lesson completion credits points and marks the lesson."""
        outcome = ledger.award("es", LessonCompletion(1), 120)

        progress = ledger.progress_for("es")
        assert progress.completed_lessons == [1]
        assert progress.total_points == 120
        assert ledger.user.statistics.total_points == 120
        assert ledger.user.statistics.total_lessons_completed == 1
        assert outcome.points == 120
        assert outcome.total_points == 120
        assert outcome.newly_completed is True

    def test_repeated_lesson_double_counts(self, ledger):
        """Completing a lesson twice credits its points twice."""
        ledger.award("es", LessonCompletion(1), 120)
        outcome = ledger.award("es", LessonCompletion(1), 120)

        progress = ledger.progress_for("es")
        assert progress.completed_lessons == [1]
        assert progress.total_points == 240
        assert ledger.user.statistics.total_points == 240
        assert outcome.newly_completed is False

    def test_quiz_award(self, ledger):
        """Quiz completion credits points without completing a lesson."""
        ledger.award("es", QuizCompletion(), 130)

        progress = ledger.progress_for("es")
        assert progress.completed_lessons == []
        assert progress.total_points == 130
        assert ledger.user.statistics.total_quizzes_taken == 1
        assert ledger.user.statistics.total_lessons_completed == 1
        assert ledger.completion_percentage("es") == 0.0

    def test_progress_created_lazily(self, ledger):
        """Progress appears on first award with the user's weekly goal."""
        assert ledger.progress_for("fr") is None
        ledger.award("fr", LessonCompletion(1), 10)
        assert ledger.progress_for("fr").weekly_goal == ledger.user.goals.weekly_goal_lessons

    def test_last_study_date(self, ledger, clock):
        """Award stamps the study date."""
        ledger.award("es", LessonCompletion(1), 10)
        assert ledger.progress_for("es").last_study_date == clock.now

    def test_no_user_is_noop(self, app_config, clock):
        """Without a profile nothing happens and nothing is saved."""
        store = MemoryProfileStore()
        ledger = ProgressLedger(store, config=app_config, clock=clock)
        assert ledger.award("es", LessonCompletion(1), 100) is None
        assert store.save_count == 0


class TestRank:
    """Tests for rank changes on award."""

    def test_rank_up(self, ledger):
        """Crossing 500 points promotes to apprentice."""
        first = ledger.award("es", LessonCompletion(1), 400)
        second = ledger.award("es", LessonCompletion(2), 100)

        assert first.rank is Rank.NOVICE
        assert not first.rank_changed
        assert second.rank is Rank.APPRENTICE
        assert second.previous_rank is Rank.NOVICE
        assert second.rank_changed


class TestStreak:
    """Tests for study-day streaks."""

    def test_first_award_starts_streak(self, ledger):
        """First study day -> streak 1."""
        outcome = ledger.award("es", LessonCompletion(1), 10)
        assert outcome.current_streak == 1
        assert outcome.longest_streak == 1
        assert ledger.progress_for("es").current_streak == 1

    def test_consecutive_days(self, ledger, clock):
        """Studying yesterday and today extends the streak."""
        ledger.award("es", LessonCompletion(1), 10)
        clock.advance(days=1)
        outcome = ledger.award("es", LessonCompletion(2), 10)
        assert outcome.current_streak == 2

    def test_same_day_without_yesterday_stays_one(self, ledger):
        """A second award on the first day keeps the streak at 1."""
        ledger.award("es", LessonCompletion(1), 10)
        outcome = ledger.award("es", LessonCompletion(2), 10)
        assert outcome.current_streak == 1

    def test_same_day_with_yesterday_counts_again(self, ledger, clock):
        """Every award on a day following a study day increments."""
        ledger.award("es", LessonCompletion(1), 10)
        clock.advance(days=1)
        ledger.award("es", LessonCompletion(2), 10)
        outcome = ledger.award("es", LessonCompletion(3), 10)
        assert outcome.current_streak == 3

    def test_gap_resets_streak(self, ledger, clock):
        """Missing a day resets to 1 but keeps the longest streak."""
        ledger.award("es", LessonCompletion(1), 10)
        clock.advance(days=1)
        ledger.award("es", LessonCompletion(2), 10)
        clock.advance(days=3)
        outcome = ledger.award("es", LessonCompletion(3), 10)

        assert outcome.current_streak == 1
        assert outcome.longest_streak == 2

    def test_streak_never_exceeds_longest(self, ledger, clock):
        """current_streak <= longest_streak after every award."""
        for gap in [0, 1, 1, 0, 2, 1, 5, 1, 1, 1]:
            clock.advance(days=gap)
            outcome = ledger.award("es", QuizCompletion(), 5)
            assert outcome.current_streak <= outcome.longest_streak

    def test_study_days_recorded(self, ledger, clock):
        """Each award records its local date key."""
        ledger.award("es", LessonCompletion(1), 10)
        clock.advance(days=1)
        ledger.award("es", LessonCompletion(2), 10)
        assert ledger.user.statistics.study_days == {"2024-03-10", "2024-03-11"}


class TestPersistence:
    """Tests for profile persistence through the ledger."""

    def test_one_save_per_award(self, ledger, store):
        """Each award writes the record once."""
        ledger.award("es", LessonCompletion(1), 10)
        ledger.award("es", QuizCompletion(), 10)
        assert store.save_count == 2
        assert store.load().statistics.total_points == 20

    def test_lesson_study_time_in_same_save(self, ledger, store):
        """Study time carried by a lesson completion is stored with its points."""
        ledger.award("es", LessonCompletion(1, study_seconds=75), 10)
        assert store.save_count == 1
        saved = store.load()
        assert saved.progress["es"].study_time_this_week == 75
        assert saved.statistics.total_study_time == 75

    def test_save_failure_keeps_memory_state(self, app_config, clock):
        """A failing store is logged; the in-memory totals stay."""
        ledger = ProgressLedger(FailingStore(create_user("Ana")), config=app_config, clock=clock)
        outcome = ledger.award("es", LessonCompletion(1), 50)
        assert outcome is not None
        assert ledger.user.statistics.total_points == 50


class TestProfileOperations:
    """Tests for profile helpers on the ledger."""

    def test_establish_profile(self, app_config, clock):
        """A new profile is installed and saved."""
        store = MemoryProfileStore()
        ledger = ProgressLedger(store, config=app_config, clock=clock)
        ledger.establish_profile(create_user("Ana"))
        assert ledger.user.name == "Ana"
        assert store.load().name == "Ana"

    def test_select_language_once(self, ledger):
        """Selecting twice keeps one entry."""
        ledger.select_language("es")
        ledger.select_language("es")
        assert ledger.user.selected_languages == ["es"]

    def test_record_study_time(self, ledger):
        """Study time accumulates per language and overall."""
        ledger.record_study_time("es", 90)
        ledger.record_study_time("es", 30)
        assert ledger.progress_for("es").study_time_this_week == 120
        assert ledger.user.statistics.total_study_time == 120

    def test_unlock_achievements_dedupes(self, ledger):
        """Already unlocked titles are not stored twice."""
        badge = Achievement("Quiz Master", "Completed 5 quizzes", "graduationcap.fill", 5, AchievementCategory.POINTS, True)
        assert ledger.unlock_achievements([badge]) == [badge]
        assert ledger.unlock_achievements([badge]) == []
        assert len(ledger.user.achievements) == 1

    def test_next_lesson(self, ledger):
        """Next lesson is the lowest-numbered one not completed."""
        catalog = StaticCatalog(
            [Language("es", "Spanish")],
            [Lesson("es", n, f"L{n}") for n in (1, 2, 3)],
        )
        ledger.award("es", LessonCompletion(1), 10)
        ledger.award("es", LessonCompletion(3), 10)
        assert ledger.next_lesson(catalog, "es").lesson_number == 2
        ledger.award("es", LessonCompletion(2), 10)
        assert ledger.next_lesson(catalog, "es") is None
