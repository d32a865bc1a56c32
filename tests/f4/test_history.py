"""Tests for quiz history persistence (F4)."""

import json

from lingueta.core.history import HISTORY_SCHEMA, QuizHistory
from lingueta.core.models import Difficulty


class TestQuizHistory:
    """Tests for QuizHistory."""

    def test_results_persist(self, engine, tmp_path, answer_all):
        """Results written to disk load back in order."""
        history = QuizHistory(tmp_path)
        engine.history = history
        engine.generate_quiz("es", Difficulty.ADVANCED, question_count=2)
        answer_all(engine)
        engine.generate_daily_challenge("it")
        engine.complete_quiz()

        reloaded = QuizHistory(tmp_path)
        assert len(reloaded) == 2
        first, second = reloaded.results()
        assert first.score == 20
        assert second.is_daily_challenge
        assert first.questions == history.results()[0].questions

        data = json.loads(history.path.read_text(encoding="utf-8"))
        assert data["$schema"] == HISTORY_SCHEMA

    def test_for_language(self, engine):
        """Results filter by language code."""
        engine.generate_quiz("es", Difficulty.ADVANCED, question_count=2)
        engine.complete_quiz()
        engine.generate_daily_challenge("it")
        engine.complete_quiz()

        assert len(engine.history.for_language("es")) == 1
        assert len(engine.history.for_language("it")) == 1
        assert len(engine.history.for_language()) == 2

    def test_corrupted_file_loads_empty(self, tmp_path):
        """Corrupted history is treated as empty."""
        path = tmp_path / "state" / "quiz_history_v1.json"
        path.parent.mkdir(parents=True)
        path.write_text("[[[", encoding="utf-8")
        assert len(QuizHistory(tmp_path)) == 0

    def test_wrong_schema_loads_empty(self, tmp_path):
        """Unknown schema is treated as empty."""
        path = tmp_path / "state" / "quiz_history_v1.json"
        path.parent.mkdir(parents=True)
        path.write_text(json.dumps({"$schema": "other", "results": []}), encoding="utf-8")
        assert len(QuizHistory(tmp_path)) == 0
