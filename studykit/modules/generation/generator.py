"""Structured content generation client.

Provides:
- StructuredGenerationClient.generate(task) -> GenerationResult
- async generate_explanation / generate_quiz / generate_flashcards /
  generate_interview_questions / generate_chat_reply, which return the typed
  value and raise GenerationError on failure.

Each call builds one prompt, makes one provider request and validates the
reply. Nothing is cached or retried and no state survives between calls, so a
single client can serve any number of concurrent requests.
"""

from __future__ import annotations

from typing import Optional

from studykit.core.config import Settings, settings as default_settings
from studykit.core.logging import get_logger, task_logger
from studykit.modules.generation.errors import GenerationError, GenerationErrorKind
from studykit.modules.generation.extraction import extract_structured, extract_text
from studykit.modules.generation.prompts import Prompt, build_prompt
from studykit.modules.generation.providers import PydanticAIGenerator, TextGenerator
from studykit.modules.generation.results import (
    FailureResult,
    GenerationResult,
    StructuredResult,
    TextResult,
)
from studykit.modules.generation.shapes import (
    FlashcardSet,
    InterviewQuestionSet,
    QuizQuestionSet,
)
from studykit.modules.generation.tasks import (
    DEFAULT_FLASHCARDS,
    DEFAULT_QUIZ_QUESTIONS,
    ChatMessage,
    ChatTask,
    Difficulty,
    ExplanationTask,
    FlashcardTask,
    GenerationTask,
    InterviewTask,
    QuizTask,
)

logger = get_logger(__name__)


class StructuredGenerationClient:
    def __init__(
        self,
        generator: Optional[TextGenerator] = None,
        *,
        settings: Optional[Settings] = None,
    ) -> None:
        self.settings = settings or default_settings
        self.generator = generator or PydanticAIGenerator(self.settings)

    async def _invoke(self, prompt: Prompt) -> Optional[str]:
        try:
            return await self.generator.generate_text(prompt)
        except GenerationError:
            raise
        except Exception as e:
            raise GenerationError(
                GenerationErrorKind.PROVIDER_ERROR,
                f"Model provider call failed: {type(e).__name__}: {e}",
            ) from e

    async def generate(self, task: GenerationTask) -> GenerationResult:
        """Run one task end to end; failures come back as FailureResult."""
        log = task_logger(logger, task.kind)
        prompt = build_prompt(task, assistant_name=self.settings.chat.assistant_name)
        log.info("Generating %s content (tier=%s)", task.kind, prompt.tier.value)
        try:
            raw = await self._invoke(prompt)
            log.debug("Raw model output: %r", raw)
            if task.shape is None:
                return TextResult(text=extract_text(raw))
            return StructuredResult(value=extract_structured(task.shape, raw))
        except GenerationError as e:
            log.warning(
                "Generation failed [%s]: %s",
                e.kind.value,
                e.message,
                exc_info=e.kind is GenerationErrorKind.PROVIDER_ERROR,
            )
            return FailureResult.from_error(e)

    async def generate_explanation(
        self,
        topic: str,
        difficulty: Difficulty | str,
        context: Optional[str] = None,
    ) -> str:
        task = ExplanationTask(topic=topic, difficulty=difficulty, context=context)
        return (await self.generate(task)).unwrap()

    async def generate_quiz(
        self, topic: str, question_count: int = DEFAULT_QUIZ_QUESTIONS
    ) -> QuizQuestionSet:
        task = QuizTask(topic=topic, question_count=question_count)
        return (await self.generate(task)).unwrap()

    async def generate_flashcards(
        self, topic: str, card_count: int = DEFAULT_FLASHCARDS
    ) -> FlashcardSet:
        task = FlashcardTask(topic=topic, card_count=card_count)
        return (await self.generate(task)).unwrap()

    async def generate_interview_questions(
        self, role: str, experience_level: str = "intermediate"
    ) -> InterviewQuestionSet:
        task = InterviewTask(role=role, experience_level=experience_level)
        return (await self.generate(task)).unwrap()

    async def generate_chat_reply(
        self,
        topic_title: str,
        topic_content: str,
        history: list[ChatMessage] | list[dict],
        question: str,
    ) -> str:
        task = ChatTask(
            topic_title=topic_title,
            topic_content=topic_content,
            history=history,
            question=question,
        )
        return (await self.generate(task)).unwrap()


def _default_client() -> StructuredGenerationClient:
    return StructuredGenerationClient()


async def generate(task: GenerationTask) -> GenerationResult:
    return await _default_client().generate(task)


async def generate_explanation(
    topic: str, difficulty: Difficulty | str, context: Optional[str] = None
) -> str:
    """Explain a topic at the requested difficulty using the configured provider."""
    return await _default_client().generate_explanation(topic, difficulty, context)


async def generate_quiz(
    topic: str, question_count: int = DEFAULT_QUIZ_QUESTIONS
) -> QuizQuestionSet:
    return await _default_client().generate_quiz(topic, question_count)


async def generate_flashcards(
    topic: str, card_count: int = DEFAULT_FLASHCARDS
) -> FlashcardSet:
    return await _default_client().generate_flashcards(topic, card_count)


async def generate_interview_questions(
    role: str, experience_level: str = "intermediate"
) -> InterviewQuestionSet:
    return await _default_client().generate_interview_questions(role, experience_level)


async def generate_chat_reply(
    topic_title: str,
    topic_content: str,
    history: list[ChatMessage] | list[dict],
    question: str,
) -> str:
    """Answer one chat turn; the caller owns and resends the full history."""
    return await _default_client().generate_chat_reply(
        topic_title, topic_content, history, question
    )
