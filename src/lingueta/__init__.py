"""Lesson and quiz progression engine for language learning."""

__version__ = "0.1.0"
