"""Generation module exports."""

from .errors import GenerationError, GenerationErrorKind
from .generator import (
    StructuredGenerationClient,
    generate,
    generate_chat_reply,
    generate_explanation,
    generate_flashcards,
    generate_interview_questions,
    generate_quiz,
)
from .providers import PydanticAIGenerator, TextGenerator
from .results import FailureResult, GenerationResult, StructuredResult, TextResult
from .shapes import Flashcard, FlashcardSet, InterviewQuestionSet, QuizQuestion, QuizQuestionSet
from .tasks import (
    ChatMessage,
    ChatTask,
    Difficulty,
    ExplanationTask,
    FlashcardTask,
    GenerationTask,
    InterviewTask,
    QuizTask,
    parse_task,
)

__all__ = [
    "GenerationError",
    "GenerationErrorKind",
    "StructuredGenerationClient",
    "generate",
    "generate_chat_reply",
    "generate_explanation",
    "generate_flashcards",
    "generate_interview_questions",
    "generate_quiz",
    "PydanticAIGenerator",
    "TextGenerator",
    "FailureResult",
    "GenerationResult",
    "StructuredResult",
    "TextResult",
    "Flashcard",
    "FlashcardSet",
    "InterviewQuestionSet",
    "QuizQuestion",
    "QuizQuestionSet",
    "ChatMessage",
    "ChatTask",
    "Difficulty",
    "ExplanationTask",
    "FlashcardTask",
    "GenerationTask",
    "InterviewTask",
    "QuizTask",
    "parse_task",
]
