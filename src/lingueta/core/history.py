"""Quiz history module.

Append-only record of completed quizzes, read by analytics.

State persistence (optional):
- data/state/quiz_history_v1.json
"""

from __future__ import annotations

import json
from pathlib import Path

import structlog

from lingueta.core.quiz import QuizResult

logger = structlog.get_logger(__name__)

HISTORY_SCHEMA = "quiz_history_v1"
HISTORY_FILENAME = "quiz_history_v1.json"


class QuizHistory:
    """Completed quiz results in completion order.

    Args:
        data_dir: Base data directory; None keeps history in memory only.
    """

    def __init__(self, data_dir: Path | None = None):
        self.path = data_dir / "state" / HISTORY_FILENAME if data_dir is not None else None
        self._results: list[QuizResult] = self._load()

    def __len__(self) -> int:
        return len(self._results)

    def results(self) -> tuple[QuizResult, ...]:
        return tuple(self._results)

    def for_language(self, language_code: str | None = None) -> list[QuizResult]:
        """Results for one language, or all results when code is None."""
        if language_code is None:
            return list(self._results)
        return [r for r in self._results if r.language_code == language_code]

    def append(self, result: QuizResult) -> None:
        self._results.append(result)
        self._save()

    def _load(self) -> list[QuizResult]:
        if self.path is None or not self.path.exists():
            return []

        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)

            if data.get("$schema") != HISTORY_SCHEMA:
                logger.warning(
                    "quiz_history_invalid_schema",
                    expected=HISTORY_SCHEMA,
                    got=data.get("$schema"),
                )
                return []

            return [QuizResult.from_dict(item) for item in data.get("results", [])]

        except (json.JSONDecodeError, OSError, KeyError, ValueError) as e:
            logger.error("quiz_history_load_failed", error=str(e))
            return []

    def _save(self) -> None:
        if self.path is None:
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(
                    {"$schema": HISTORY_SCHEMA, "results": [r.to_dict() for r in self._results]},
                    f,
                    indent=2,
                    ensure_ascii=False,
                )
        except OSError as e:
            logger.error("quiz_history_save_failed", error=str(e))
