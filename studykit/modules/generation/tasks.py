"""Generation task variants.

Each task is a small Pydantic model tagged by ``kind``. Route handlers can
build them directly or validate raw request payloads with ``parse_task``.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, ClassVar, Literal, Optional, Union

from pydantic import BaseModel, Field, StringConstraints, TypeAdapter

from studykit.modules.generation.shapes import (
    FlashcardSet,
    InterviewQuestionSet,
    QuizQuestionSet,
)

DEFAULT_QUIZ_QUESTIONS = 5
MAX_QUIZ_QUESTIONS = 20
DEFAULT_FLASHCARDS = 10
MAX_FLASHCARDS = 50

Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class Difficulty(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class ModelTier(str, Enum):
    """Which configured model serves a task."""

    FAST = "fast"
    PRO = "pro"
    CHAT = "chat"


class ChatMessage(BaseModel):
    """One prior turn of a conversation, supplied by the caller."""

    role: Literal["user", "assistant"]
    content: str


class ExplanationTask(BaseModel):
    kind: Literal["explanation"] = "explanation"
    tier: ClassVar[ModelTier] = ModelTier.FAST
    shape: ClassVar[Optional[type[BaseModel]]] = None

    topic: Title
    difficulty: Difficulty
    context: Optional[str] = None


class QuizTask(BaseModel):
    kind: Literal["quiz"] = "quiz"
    tier: ClassVar[ModelTier] = ModelTier.PRO
    shape: ClassVar[Optional[type[BaseModel]]] = QuizQuestionSet

    topic: Title
    question_count: int = Field(
        default=DEFAULT_QUIZ_QUESTIONS, ge=1, le=MAX_QUIZ_QUESTIONS
    )


class FlashcardTask(BaseModel):
    kind: Literal["flashcards"] = "flashcards"
    tier: ClassVar[ModelTier] = ModelTier.PRO
    shape: ClassVar[Optional[type[BaseModel]]] = FlashcardSet

    topic: Title
    card_count: int = Field(default=DEFAULT_FLASHCARDS, ge=1, le=MAX_FLASHCARDS)


class InterviewTask(BaseModel):
    kind: Literal["interview"] = "interview"
    tier: ClassVar[ModelTier] = ModelTier.PRO
    shape: ClassVar[Optional[type[BaseModel]]] = InterviewQuestionSet

    role: Title
    experience_level: Title = "intermediate"


class ChatTask(BaseModel):
    kind: Literal["chat"] = "chat"
    tier: ClassVar[ModelTier] = ModelTier.CHAT
    shape: ClassVar[Optional[type[BaseModel]]] = None

    topic_title: Title
    topic_content: str = ""
    history: list[ChatMessage] = Field(default_factory=list)
    question: Title


GenerationTask = Annotated[
    Union[ExplanationTask, QuizTask, FlashcardTask, InterviewTask, ChatTask],
    Field(discriminator="kind"),
]

_task_adapter: TypeAdapter[GenerationTask] = TypeAdapter(GenerationTask)


def parse_task(data: Any) -> GenerationTask:
    """Validate a raw payload (e.g. a request body) into a task variant."""
    return _task_adapter.validate_python(data)
