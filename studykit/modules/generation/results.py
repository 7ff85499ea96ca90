"""Per-call generation outcomes."""

from __future__ import annotations

from typing import Annotated, Literal, NoReturn, Optional, Union

from pydantic import BaseModel, Field

from studykit.modules.generation.errors import GenerationError, GenerationErrorKind
from studykit.modules.generation.shapes import (
    FlashcardSet,
    InterviewQuestionSet,
    QuizQuestionSet,
)

StructuredValue = Union[QuizQuestionSet, FlashcardSet, InterviewQuestionSet]


class TextResult(BaseModel):
    """Free-form output of an explanation or chat task."""

    kind: Literal["text"] = "text"
    text: str

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> str:
        return self.text


class StructuredResult(BaseModel):
    """Validated output of a quiz, flashcard or interview task."""

    kind: Literal["structured"] = "structured"
    value: StructuredValue

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> StructuredValue:
        return self.value


class FailureResult(BaseModel):
    kind: Literal["failure"] = "failure"
    error: GenerationErrorKind
    message: str
    raw_text: Optional[str] = None
    field: Optional[str] = None

    @property
    def ok(self) -> bool:
        return False

    @classmethod
    def from_error(cls, exc: GenerationError) -> "FailureResult":
        return cls(
            error=exc.kind,
            message=exc.message,
            raw_text=exc.raw_text,
            field=exc.field,
        )

    def to_error(self) -> GenerationError:
        return GenerationError(
            self.error, self.message, raw_text=self.raw_text, field=self.field
        )

    def unwrap(self) -> NoReturn:
        raise self.to_error()


GenerationResult = Annotated[
    Union[TextResult, StructuredResult, FailureResult],
    Field(discriminator="kind"),
]
