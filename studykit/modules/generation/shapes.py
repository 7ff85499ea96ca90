"""Expected output shapes for structured tasks.

Validation is strict on purpose: quiz scoring and flashcard review read these
fields without further checks, so a string where an integer belongs or a
missing option must be rejected rather than coerced. Field aliases match the
JSON the model is asked to produce; dump with ``by_alias=True`` to get it back.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StringConstraints

NonBlank = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

QUIZ_OPTION_COUNT = 4


class _Shape(BaseModel):
    model_config = ConfigDict(strict=True, populate_by_name=True)


class QuizQuestion(_Shape):
    """A single multiple-choice question."""

    question: NonBlank
    options: list[str] = Field(
        min_length=QUIZ_OPTION_COUNT, max_length=QUIZ_OPTION_COUNT
    )
    correct_answer: int = Field(alias="correctAnswer", ge=0, le=QUIZ_OPTION_COUNT - 1)
    explanation: str


class QuizQuestionSet(_Shape):
    questions: list[QuizQuestion] = Field(min_length=1)


class Flashcard(_Shape):
    front: NonBlank
    back: NonBlank


class FlashcardSet(_Shape):
    cards: list[Flashcard] = Field(min_length=1)


class InterviewQuestionSet(_Shape):
    questions: list[NonBlank] = Field(min_length=1)
    tips: str
