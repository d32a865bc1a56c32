"""Content Catalog module.

Responsibilities:
- Define the read-only Catalog interface consumed by the engine
- Serve catalog content from memory (StaticCatalog)
- Load and validate YAML catalog files from data/catalog/
- Build the bundled sample catalog used when no files are present

File structure (YAML, one file per language):
- language: {code, name, difficulty, total_lessons, flag}
- lessons: [{lesson_number, title, difficulty, vocabulary, dialogues, exercises}]
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Protocol

import structlog
import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from lingueta.core.models import (
    Dialogue,
    DialogueLine,
    Difficulty,
    Exercise,
    ExerciseType,
    Language,
    Lesson,
    VocabularyItem,
)

logger = structlog.get_logger(__name__)


class CatalogError(Exception):
    """Error loading or validating catalog content."""

    pass


# =============================================================================
# INTERFACE
# =============================================================================


class Catalog(Protocol):
    """Read-only source of languages and lessons."""

    def languages(self) -> list[Language]: ...

    def language(self, code: str) -> Language | None: ...

    def lessons(self, language_code: str) -> list[Lesson]: ...

    def lesson(self, language_code: str, number: int) -> Lesson | None: ...


class StaticCatalog:
    """In-memory catalog.

    Lessons are kept sorted by lesson number so ``lessons()`` always returns
    them in ascending order.
    """

    def __init__(self, languages: list[Language], lessons: list[Lesson]):
        self._languages = {lang.code: lang for lang in languages}
        self._lessons: dict[str, list[Lesson]] = {}
        for lesson in lessons:
            self._lessons.setdefault(lesson.language_code, []).append(lesson)
        for items in self._lessons.values():
            items.sort(key=lambda item: item.lesson_number)

    def languages(self) -> list[Language]:
        return list(self._languages.values())

    def language(self, code: str) -> Language | None:
        return self._languages.get(code)

    def lessons(self, language_code: str) -> list[Lesson]:
        return list(self._lessons.get(language_code, []))

    def lesson(self, language_code: str, number: int) -> Lesson | None:
        for lesson in self._lessons.get(language_code, []):
            if lesson.lesson_number == number:
                return lesson
        return None


# =============================================================================
# FILE SCHEMAS
# =============================================================================


class VocabularySchema(BaseModel):
    word: str = Field(..., min_length=1)
    translation: str
    pronunciation: str = ""
    example: str = ""
    example_translation: str = ""


class DialogueLineSchema(BaseModel):
    speaker: str
    text: str
    translation: str = ""


class DialogueSchema(BaseModel):
    title: str
    scenario: str = ""
    participants: list[str] = Field(default_factory=list)
    lines: list[DialogueLineSchema] = Field(default_factory=list)


class ExerciseSchema(BaseModel):
    type: ExerciseType
    question: str
    options: list[str] = Field(..., min_length=1)
    correct_answer: str
    explanation: str = ""
    points: int = Field(default=10, gt=0)

    @model_validator(mode="after")
    def _answer_among_options(self) -> ExerciseSchema:
        if self.correct_answer not in self.options:
            raise ValueError(
                f"correct_answer '{self.correct_answer}' is not one of the options"
            )
        return self


class LessonSchema(BaseModel):
    lesson_number: int = Field(..., ge=1)
    title: str
    difficulty: Difficulty = Difficulty.BEGINNER
    description: str = ""
    vocabulary: list[VocabularySchema] = Field(default_factory=list)
    dialogues: list[DialogueSchema] = Field(default_factory=list)
    exercises: list[ExerciseSchema] = Field(default_factory=list)


class LanguageSchema(BaseModel):
    code: str = Field(..., min_length=2, max_length=8)
    name: str
    difficulty: Difficulty = Difficulty.BEGINNER
    total_lessons: int = Field(default=50, ge=0)
    flag: str = ""


class LanguageFileSchema(BaseModel):
    """One catalog file: a language and its lessons."""

    language: LanguageSchema
    lessons: list[LessonSchema] = Field(default_factory=list)

    @model_validator(mode="after")
    def _unique_lesson_numbers(self) -> LanguageFileSchema:
        seen: set[int] = set()
        for lesson in self.lessons:
            if lesson.lesson_number in seen:
                raise ValueError(f"Duplicate lesson_number: {lesson.lesson_number}")
            seen.add(lesson.lesson_number)
        return self


def _lesson_from_schema(language_code: str, raw: LessonSchema) -> Lesson:
    """Build a Lesson from a validated schema."""
    return Lesson(
        language_code=language_code,
        lesson_number=raw.lesson_number,
        title=raw.title,
        difficulty=raw.difficulty,
        description=raw.description,
        vocabulary=tuple(VocabularyItem(**v.model_dump()) for v in raw.vocabulary),
        dialogues=tuple(
            Dialogue(
                title=d.title,
                scenario=d.scenario,
                participants=tuple(d.participants),
                lines=tuple(DialogueLine(**line.model_dump()) for line in d.lines),
            )
            for d in raw.dialogues
        ),
        exercises=tuple(
            Exercise(
                type=e.type,
                question=e.question,
                options=tuple(e.options),
                correct_answer=e.correct_answer,
                explanation=e.explanation,
                points=e.points,
            )
            for e in raw.exercises
        ),
    )


def parse_language_file(data: dict[str, Any]) -> tuple[Language, list[Lesson]]:
    """Validate raw catalog data and convert it to domain models.

    Raises:
        CatalogError: If the data does not match the catalog schema.
    """
    try:
        parsed = LanguageFileSchema.model_validate(data)
    except ValidationError as e:
        raise CatalogError(str(e)) from e

    language = Language(**parsed.language.model_dump())
    lessons = [_lesson_from_schema(language.code, raw) for raw in parsed.lessons]
    return language, lessons


def load_catalog(catalog_dir: Path) -> StaticCatalog:
    """Load every *.yaml file in a directory into a catalog.

    Args:
        catalog_dir: Directory containing language files.

    Returns:
        StaticCatalog with all languages found.

    Raises:
        CatalogError: On unreadable, invalid or duplicated language files.
    """
    languages: list[Language] = []
    lessons: list[Lesson] = []
    seen_codes: set[str] = set()

    for file_path in sorted(catalog_dir.glob("*.yaml")):
        try:
            data = yaml.safe_load(file_path.read_text(encoding="utf-8"))
        except (yaml.YAMLError, OSError) as e:
            raise CatalogError(f"Cannot read {file_path.name}: {e}") from e

        if not isinstance(data, dict):
            raise CatalogError(f"{file_path.name} is not a mapping")

        language, language_lessons = parse_language_file(data)
        if language.code in seen_codes:
            raise CatalogError(f"Duplicate language code: {language.code}")
        seen_codes.add(language.code)

        languages.append(language)
        lessons.extend(language_lessons)

    logger.info("catalog_loaded", path=str(catalog_dir), languages=len(languages), lessons=len(lessons))
    return StaticCatalog(languages, lessons)


def load_catalog_or_sample(catalog_dir: Path) -> StaticCatalog:
    """Load catalog files, or the bundled sample when the directory has none."""
    if catalog_dir.exists() and any(catalog_dir.glob("*.yaml")):
        return load_catalog(catalog_dir)
    logger.info("catalog_dir_empty_using_sample", path=str(catalog_dir))
    return build_sample_catalog()


# =============================================================================
# SAMPLE CONTENT
# =============================================================================

SAMPLE_LANGUAGES = [
    Language("es", "Spanish", Difficulty.BEGINNER, 50, "🇪🇸"),
    Language("fr", "French", Difficulty.BEGINNER, 50, "🇫🇷"),
    Language("de", "German", Difficulty.INTERMEDIATE, 50, "🇩🇪"),
    Language("it", "Italian", Difficulty.BEGINNER, 50, "🇮🇹"),
    Language("pt", "Portuguese", Difficulty.BEGINNER, 50, "🇵🇹"),
    Language("ja", "Japanese", Difficulty.ADVANCED, 75, "🇯🇵"),
    Language("ko", "Korean", Difficulty.ADVANCED, 75, "🇰🇷"),
    Language("zh", "Chinese", Difficulty.ADVANCED, 75, "🇨🇳"),
    Language("ru", "Russian", Difficulty.INTERMEDIATE, 60, "🇷🇺"),
    Language("ar", "Arabic", Difficulty.ADVANCED, 75, "🇸🇦"),
]

SAMPLE_LESSONS_PER_LANGUAGE = 10

_LESSON_TITLES = [
    ("Basic Greetings", "Learn essential greetings and polite expressions"),
    ("Introducing Yourself", "Master self-introduction and personal information"),
    ("Numbers and Time", "Practice numbers, telling time, and dates"),
    ("Family and Friends", "Describe family relationships and friendships"),
    ("Food and Drinks", "Order food and discuss dietary preferences"),
    ("Shopping and Money", "Navigate shopping situations and handle money"),
    ("Directions and Transportation", "Ask for directions and use public transportation"),
    ("Weather and Seasons", "Discuss weather conditions and seasonal activities"),
    ("Hobbies and Interests", "Talk about your interests and free time activities"),
    ("Travel and Accommodation", "Plan trips and communicate at hotels"),
]

# (word, translation, pronunciation, example, example_translation)
_FIRST_LESSON_VOCABULARY: dict[str, list[tuple[str, str, str, str, str]]] = {
    "es": [
        ("Hola", "Hello", "OH-lah", "Hola, ¿cómo estás?", "Hello, how are you?"),
        ("Gracias", "Thank you", "GRAH-see-ahs", "Gracias por tu ayuda", "Thank you for your help"),
        ("Por favor", "Please", "por fah-VOR", "Un café, por favor", "A coffee, please"),
        ("Adiós", "Goodbye", "ah-DYOHS", "Adiós, hasta mañana", "Goodbye, see you tomorrow"),
        ("Disculpe", "Excuse me", "dees-KOOL-peh", "Disculpe, ¿dónde está el baño?", "Excuse me, where is the bathroom?"),
    ],
    "fr": [
        ("Bonjour", "Hello", "bon-ZHOOR", "Bonjour, comment allez-vous?", "Hello, how are you?"),
        ("Merci", "Thank you", "mer-SEE", "Merci beaucoup", "Thank you very much"),
        ("S'il vous plaît", "Please", "seel voo PLEH", "Un café, s'il vous plaît", "A coffee, please"),
        ("Au revoir", "Goodbye", "oh ruh-VWAR", "Au revoir, à bientôt", "Goodbye, see you soon"),
        ("Excusez-moi", "Excuse me", "ek-skew-zay MWAH", "Excusez-moi, où sont les toilettes?", "Excuse me, where are the restrooms?"),
    ],
    "de": [
        ("Hallo", "Hello", "HAH-loh", "Hallo, wie geht es dir?", "Hello, how are you?"),
        ("Danke", "Thank you", "DAHN-keh", "Danke schön", "Thank you very much"),
        ("Bitte", "Please", "BIT-teh", "Ein Kaffee, bitte", "A coffee, please"),
        ("Auf Wiedersehen", "Goodbye", "owf VEE-der-zayn", "Auf Wiedersehen, bis morgen", "Goodbye, see you tomorrow"),
        ("Entschuldigung", "Excuse me", "ent-SHOOL-dee-goong", "Entschuldigung, wo ist die Toilette?", "Excuse me, where is the restroom?"),
    ],
}

_LATER_LESSON_VOCABULARY: dict[str, list[tuple[str, str, str, str, str]]] = {
    "es": [
        ("Buenos días", "Good morning", "BWAY-nohs DEE-ahs", "Buenos días, señora", "Good morning, ma'am"),
        ("Buenas tardes", "Good afternoon", "BWAY-nahs TAR-dehs", "Buenas tardes, doctor", "Good afternoon, doctor"),
    ],
    "fr": [
        ("Bonsoir", "Good evening", "bon-SWAHR", "Bonsoir, madame", "Good evening, ma'am"),
    ],
    "de": [
        ("Guten Morgen", "Good morning", "GOO-ten MOR-gen", "Guten Morgen, Herr Schmidt", "Good morning, Mr. Schmidt"),
    ],
}

_DEFAULT_VOCABULARY = [
    ("Hello", "Hello", "heh-LOH", "Hello, how are you?", "Hello, how are you?"),
    ("Thank you", "Thank you", "THANK you", "Thank you for your help", "Thank you for your help"),
]

# greeting, greeting response, "I'm fine", "me too"
_DIALOGUE_LINES: dict[str, tuple[str, str, str, str]] = {
    "es": ("¡Hola!", "¡Hola! ¿Cómo estás?", "Estoy bien, gracias. ¿Y tú?", "¡Yo también estoy bien, gracias!"),
    "fr": ("Bonjour!", "Bonjour! Comment allez-vous?", "Je vais bien, merci. Et vous?", "Je vais bien aussi, merci!"),
    "de": ("Hallo!", "Hallo! Wie geht es dir?", "Mir geht es gut, danke. Und dir?", "Mir geht es auch gut, danke!"),
    "it": ("Ciao!", "Ciao! Come stai?", "Sto bene, grazie. E tu?", "Anch'io sto bene, grazie!"),
    "pt": ("Olá!", "Olá! Como está?", "Estou bem, obrigado. E você?", "Eu também estou bem, obrigada!"),
}
_DEFAULT_DIALOGUE_LINES = ("Hello!", "Hello! How are you?", "I'm fine, thank you. And you?", "I'm well too, thanks!")
_DIALOGUE_TRANSLATIONS = ("Hello!", "Hello! How are you?", "I'm fine, thank you. And you?", "I'm well too, thanks!")


def _sample_difficulty(lesson_number: int) -> Difficulty:
    if lesson_number <= 3:
        return Difficulty.BEGINNER
    if lesson_number <= 7:
        return Difficulty.INTERMEDIATE
    return Difficulty.ADVANCED


def _sample_vocabulary(language_code: str, lesson_number: int) -> tuple[VocabularyItem, ...]:
    if language_code in _FIRST_LESSON_VOCABULARY:
        rows = _FIRST_LESSON_VOCABULARY[language_code] if lesson_number == 1 else _LATER_LESSON_VOCABULARY[language_code]
    else:
        rows = _DEFAULT_VOCABULARY
    return tuple(VocabularyItem(*row) for row in rows)


def _sample_dialogue(language_code: str) -> Dialogue:
    texts = _DIALOGUE_LINES.get(language_code, _DEFAULT_DIALOGUE_LINES)
    speakers = ("Alex", "Maria", "Alex", "Maria")
    return Dialogue(
        title="Basic Conversation",
        scenario="Meeting someone for the first time",
        participants=("Alex", "Maria"),
        lines=tuple(
            DialogueLine(speaker=s, text=t, translation=tr)
            for s, t, tr in zip(speakers, texts, _DIALOGUE_TRANSLATIONS)
        ),
    )


def _sample_exercises(language: Language, vocabulary: tuple[VocabularyItem, ...]) -> tuple[Exercise, ...]:
    exercises: list[Exercise] = []
    if vocabulary:
        first = vocabulary[0]
        exercises.append(
            Exercise(
                type=ExerciseType.MULTIPLE_CHOICE,
                question=f"What does '{first.word}' mean?",
                options=(first.translation, "Goodbye", "Please", "Thank you"),
                correct_answer=first.translation,
                explanation=f"'{first.word}' means '{first.translation}' in English.",
                points=10,
            )
        )
    if len(vocabulary) > 1:
        second = vocabulary[1]
        exercises.append(
            Exercise(
                type=ExerciseType.TRANSLATION,
                question=f"How do you say '{second.translation}' in {language.name}?",
                options=(second.word, vocabulary[0].word, "incorrect", "wrong"),
                correct_answer=second.word,
                explanation=f"'{second.translation}' is '{second.word}' in {language.name}.",
                points=15,
            )
        )
    return tuple(exercises)


def build_sample_lesson(language: Language, lesson_number: int) -> Lesson:
    """Build one bundled sample lesson."""
    title, description = _LESSON_TITLES[min(lesson_number - 1, len(_LESSON_TITLES) - 1)]
    vocabulary = _sample_vocabulary(language.code, lesson_number)
    return Lesson(
        language_code=language.code,
        lesson_number=lesson_number,
        title=f"Lesson {lesson_number}: {title}",
        difficulty=_sample_difficulty(lesson_number),
        description=description,
        vocabulary=vocabulary,
        dialogues=(_sample_dialogue(language.code),),
        exercises=_sample_exercises(language, vocabulary),
    )


def build_sample_catalog() -> StaticCatalog:
    """Build the bundled sample catalog (first lessons of each language)."""
    lessons: list[Lesson] = []
    for language in SAMPLE_LANGUAGES:
        count = min(SAMPLE_LESSONS_PER_LANGUAGE, language.total_lessons)
        lessons.extend(build_sample_lesson(language, n) for n in range(1, count + 1))
    return StaticCatalog(list(SAMPLE_LANGUAGES), lessons)
