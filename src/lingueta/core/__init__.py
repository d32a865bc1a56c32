"""Core engine modules.

- models: Catalog content entries (languages, lessons, exercises)
- catalog: Catalog interface, YAML loader and bundled sample content
- profile: User record and Profile Stores
- ledger: Progress Ledger (points, streaks, ranks)
- walker: Lesson Walker
- quiz, quiz_engine, quiz_timer, history: Quiz Engine
- analytics: Statistics, grades, weak areas, achievements
"""

__all__ = [
    "models",
    "catalog",
    "profile",
    "ledger",
    "walker",
    "quiz",
    "quiz_engine",
    "quiz_timer",
    "history",
    "analytics",
]
