"""Fixtures for F3 tests - Lesson Walker."""

import pytest

from lingueta.core.ledger import ProgressLedger
from lingueta.core.models import (
    Dialogue,
    DialogueLine,
    Exercise,
    ExerciseType,
    Lesson,
    VocabularyItem,
)
from lingueta.core.profile import MemoryProfileStore, create_user


@pytest.fixture
def store() -> MemoryProfileStore:
    return MemoryProfileStore(create_user("Ana"))


@pytest.fixture
def ledger(store, app_config, clock) -> ProgressLedger:
    return ProgressLedger(store, config=app_config, clock=clock)


@pytest.fixture
def lesson() -> Lesson:
    """2 vocabulary items, one 2-line dialogue, exercises worth 25."""
    return Lesson(
        language_code="es",
        lesson_number=1,
        title="Greetings",
        vocabulary=(VocabularyItem("Hola", "Hello"), VocabularyItem("Adiós", "Goodbye")),
        dialogues=(
            Dialogue(
                "Meeting",
                participants=("Ana", "Luis"),
                lines=(DialogueLine("Ana", "¡Hola!"), DialogueLine("Luis", "¡Hola, Ana!")),
            ),
        ),
        exercises=(
            Exercise(ExerciseType.MULTIPLE_CHOICE, "Hola?", ("Hello", "Bye"), "Hello", points=10),
            Exercise(ExerciseType.TRANSLATION, "Goodbye?", ("Adiós", "Hola"), "Adiós", points=15),
        ),
    )
