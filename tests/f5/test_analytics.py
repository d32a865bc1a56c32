"""Tests for analytics (F5).

Tests cover:
- Quiz statistics and recent improvement
- Grade boundaries and pass threshold
- Weak areas and recommendations
- Achievements from a completed quiz
- Per-language statistics
"""

import pytest

from lingueta.core.analytics import (
    ENCOURAGEMENT,
    LanguageStatistics,
    QuizStatistics,
    achievements_triggered,
    grade,
    is_passed,
    language_statistics,
    quiz_statistics,
    recent_improvement,
    recommendations,
    weak_areas,
)
from lingueta.core.catalog import StaticCatalog
from lingueta.core.models import ExerciseType, Language
from lingueta.core.profile import LearningProgress, create_user


class TestGrade:
    """Tests for letter grades."""

    @pytest.mark.parametrize(
        "percentage,expected",
        [
            (100.0, "A+"),
            (95.0, "A+"),
            (90.0, "A+"),
            (89.9, "A"),
            (80.0, "A"),
            (72.0, "B"),
            (60.0, "C"),
            (59.9, "D"),
            (55.0, "D"),
            (50.0, "D"),
            (49.9, "F"),
            (40.0, "F"),
            (0.0, "F"),
        ],
    )
    def test_grade_boundaries(self, percentage, expected):
        """Bands: 90 A+, 80 A, 70 B, 60 C, 50 D, else F."""
        assert grade(percentage) == expected

    def test_pass_threshold(self):
        """Passing starts at 60%."""
        assert is_passed(60.0)
        assert not is_passed(59.99)


class TestQuizStatistics:
    """Tests for quiz_statistics."""

    def test_empty_history(self):
        """No quizzes -> zeros and the lowest level."""
        stats = quiz_statistics([], "es")
        assert stats == QuizStatistics()
        assert stats.performance_level == "Needs Improvement"

    def test_aggregates(self, make_result, make_exercises):
        """Totals, accuracy, average and best score."""
        questions = make_exercises(ExerciseType.TRANSLATION, 4)
        history = [
            make_result(questions, {0: "yes", 1: "yes", 2: "yes", 3: "yes"}),
            make_result(questions, {0: "yes", 1: "yes"}),
            make_result(questions, {0: "yes"}, language_code="fr"),
        ]
        stats = quiz_statistics(history, "es")

        assert stats.total_quizzes == 2
        assert stats.total_questions == 8
        assert stats.correct_answers == 6
        assert stats.accuracy == 75.0
        assert stats.average_score == 30.0
        assert stats.best_score == 40
        assert stats.performance_level == "Good"

    @pytest.mark.parametrize(
        "accuracy,level",
        [(95, "Excellent"), (85, "Very Good"), (75, "Good"), (65, "Fair"), (30, "Needs Improvement")],
    )
    def test_performance_levels(self, accuracy, level):
        assert QuizStatistics(accuracy=accuracy).performance_level == level

    def test_recent_improvement(self, make_result, make_exercises):
        """Last three average minus earlier average."""
        questions = make_exercises(ExerciseType.TRANSLATION, 1)
        history = [make_result(questions, {}, score=s) for s in (10, 20, 30, 40)]
        assert recent_improvement(history) == 20.0

    def test_recent_improvement_short_history(self, make_result, make_exercises):
        """Two results: both windows include the first one."""
        questions = make_exercises(ExerciseType.TRANSLATION, 1)
        history = [make_result(questions, {}, score=s) for s in (10, 30)]
        assert recent_improvement(history) == 10.0
        assert recent_improvement(history[:1]) == 0.0


class TestWeakAreas:
    """Tests for weak_areas and recommendations."""

    def test_below_seventy_percent_is_weak(self, make_result, make_exercises):
        """6/10 correct is weak."""
        questions = make_exercises(ExerciseType.MULTIPLE_CHOICE, 10)
        answers = {i: "yes" for i in range(6)}
        assert weak_areas([make_result(questions, answers)], "es") == [ExerciseType.MULTIPLE_CHOICE]

    def test_eighty_percent_is_not_weak(self, make_result, make_exercises):
        """8/10 correct is fine."""
        questions = make_exercises(ExerciseType.MULTIPLE_CHOICE, 10)
        answers = {i: "yes" for i in range(8)}
        assert weak_areas([make_result(questions, answers)], "es") == []

    def test_missing_answers_count_as_wrong(self, make_result, make_exercises):
        """Unanswered questions lower the accuracy."""
        questions = make_exercises(ExerciseType.LISTENING, 2)
        assert weak_areas([make_result(questions, {0: "yes"})], "es") == [ExerciseType.LISTENING]

    def test_accuracy_across_quizzes(self, make_result, make_exercises):
        """Per-type accuracy pools every quiz of the language."""
        questions = make_exercises(ExerciseType.TRANSLATION, 5)
        history = [
            make_result(questions, {i: "yes" for i in range(5)}),
            make_result(questions, {i: "yes" for i in range(2)}),
        ]
        assert weak_areas(history, "es") == []
        assert weak_areas(history, "fr") == []

    def test_recommendations_for_weak_types(self, make_result, make_exercises):
        """One tip per weak type."""
        questions = make_exercises(ExerciseType.FILL_IN_THE_BLANK, 2) + make_exercises(ExerciseType.TRANSLATION, 2)
        tips = recommendations([make_result(questions, {})], "es")
        assert tips == [
            "Focus on grammar and sentence structure",
            "Spend more time on translation exercises",
        ]

    def test_encouragement_when_no_weak_areas(self):
        """Two encouragement lines when nothing is weak."""
        assert recommendations([], "es") == list(ENCOURAGEMENT)


class TestAchievements:
    """Tests for achievements_triggered."""

    def test_perfect_score(self, make_result, make_exercises):
        """100% unlocks Perfect Score."""
        questions = make_exercises(ExerciseType.TRANSLATION, 2)
        result = make_result(questions, {0: "yes", 1: "yes"}, seconds=50)
        titles = [a.title for a in achievements_triggered(result, completed_quiz_count=1)]
        assert titles == ["Perfect Score!"]

    def test_speed_demon(self, make_result, make_exercises):
        """Under half the allotted time per question."""
        questions = make_exercises(ExerciseType.TRANSLATION, 2)
        fast = make_result(questions, {}, seconds=10, time_limit=60)
        slow = make_result(questions, {}, seconds=40, time_limit=60)
        assert [a.title for a in achievements_triggered(fast, 1)] == ["Speed Demon"]
        assert achievements_triggered(slow, 1) == []

    def test_quiz_master_on_fifth_quiz(self, make_result, make_exercises):
        """Only the fifth quiz unlocks Quiz Master."""
        questions = make_exercises(ExerciseType.TRANSLATION, 2)
        result = make_result(questions, {}, seconds=59)
        assert [a.title for a in achievements_triggered(result, 5)] == ["Quiz Master"]
        assert achievements_triggered(result, 4) == []
        assert achievements_triggered(result, 6) == []

    def test_rules_are_independent(self, make_result, make_exercises):
        """A fast perfect fifth quiz earns all three."""
        questions = make_exercises(ExerciseType.TRANSLATION, 2)
        result = make_result(questions, {0: "yes", 1: "yes"}, seconds=5)
        earned = achievements_triggered(result, 5)
        assert {a.title for a in earned} == {"Perfect Score!", "Speed Demon", "Quiz Master"}
        assert all(a.is_unlocked and a.unlocked_at == result.completed_at for a in earned)

    def test_empty_quiz_earns_nothing(self, make_result):
        """No questions, no achievements."""
        assert achievements_triggered(make_result([], {}, seconds=1), 1) == []


class TestLanguageStatistics:
    """Tests for language_statistics."""

    def test_with_progress(self):
        """Derived averages and proficiency band."""
        user = create_user("Ana")
        user.progress["es"] = LearningProgress(
            "es", completed_lessons=[1, 2, 3, 4, 5], total_points=500, study_time_this_week=1000.0
        )
        catalog = StaticCatalog([Language("es", "Spanish", total_lessons=50)], [])

        stats = language_statistics(user, catalog, "es")

        assert stats.completed_lessons == 5
        assert stats.completion_percentage == 10.0
        assert stats.average_points_per_lesson == 100.0
        assert stats.estimated_time_to_complete == 9000.0
        assert stats.proficiency_level == "Beginner"

    def test_without_progress(self):
        """Unstarted language -> zeros."""
        catalog = StaticCatalog([Language("es", "Spanish")], [])
        stats = language_statistics(create_user("Ana"), catalog, "es")
        assert stats.completed_lessons == 0
        assert stats.average_points_per_lesson == 0.0
        assert stats.estimated_time_to_complete == 0.0

    @pytest.mark.parametrize(
        "percentage,level",
        [(0, "Beginner"), (20, "Elementary"), (50, "Intermediate"), (75, "Advanced"), (90, "Expert")],
    )
    def test_proficiency_bands(self, percentage, level):
        assert LanguageStatistics("es", completion_percentage=percentage).proficiency_level == level
