"""Prompt construction for every generation task.

Pure and deterministic: the same task always yields the same ``Prompt``.
Structured tasks carry the JSON schema of their expected shape next to the
instruction so providers can pass it on as an output contract.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from studykit.modules.generation.tasks import (
    ChatMessage,
    ChatTask,
    Difficulty,
    ExplanationTask,
    FlashcardTask,
    GenerationTask,
    InterviewTask,
    ModelTier,
    QuizTask,
)

INTERVIEW_QUESTION_COUNT = 5
DEFAULT_ASSISTANT_NAME = "Chaitanya AI"


@dataclass(frozen=True)
class Prompt:
    user: str
    tier: ModelTier
    system: Optional[str] = None
    history: tuple[ChatMessage, ...] = ()
    shape: Optional[dict[str, Any]] = None


EXPLANATION_TEMPLATES: dict[Difficulty, str] = {
    Difficulty.BEGINNER: (
        'Explain "{topic}" like I\'m 10 years old. Use simple words, analogies, '
        "and make it fun and easy to understand. Include examples that a child "
        "would relate to."
    ),
    Difficulty.INTERMEDIATE: (
        'Provide a quick revision summary of "{topic}". Focus on key points, '
        "important concepts, and essential information. Make it concise but "
        "comprehensive for someone who needs a refresher."
    ),
    Difficulty.ADVANCED: (
        'Provide a college-level, in-depth explanation of "{topic}". Include '
        "technical details, theoretical foundations, practical applications, "
        "and advanced concepts. Assume the reader has some background knowledge."
    ),
}

QUIZ_TEMPLATE = (
    'Create exactly {count} multiple-choice questions about "{topic}". '
    "Each question must have exactly 4 options, a zero-based index of the "
    'correct option in "correctAnswer", and a short "explanation" of why it '
    "is correct. Respond with valid JSON only, in this exact format: "
    '{{"questions": [{{"question": "...", "options": ["A", "B", "C", "D"], '
    '"correctAnswer": 0, "explanation": "..."}}]}}'
)

FLASHCARD_TEMPLATE = (
    'Create exactly {count} flashcards about "{topic}". Each card has a '
    '"front" with a short question or term and a "back" with a concise answer. '
    "Respond with valid JSON only, in this exact format: "
    '{{"cards": [{{"front": "...", "back": "..."}}]}}'
)

INTERVIEW_TEMPLATE = (
    "Generate exactly {count} interview questions for a {level} level {role} "
    'position, plus one "tips" string with preparation advice covering both '
    "technical and behavioral angles. Respond with valid JSON only, in this "
    'exact format: {{"questions": ["...", "..."], "tips": "..."}}'
)

CHAT_SYSTEM_TEMPLATE = (
    'You are "{name}", a friendly and encouraging learning assistant. Your ONLY '
    'purpose is to discuss the topic of "{title}".\n'
    "Strict rules:\n"
    '- NEVER answer questions or discuss topics unrelated to "{title}".\n'
    "- If asked about anything else, politely decline and steer the "
    'conversation back to "{title}". For example: "That\'s an interesting '
    "question, but my focus is to help you master {title}. Shall we get back "
    'to it?"\n'
    "- Keep your answers concise and easy to understand.\n"
    "- Use the provided context to answer questions accurately.\n"
    'Here is the context for "{title}":\n'
    "---\n"
    "{content}\n"
    "---"
)


def explanation_prompt(task: ExplanationTask) -> Prompt:
    # KeyError here means a Difficulty member was added without a template
    text = EXPLANATION_TEMPLATES[task.difficulty].format(topic=task.topic)
    if task.context:
        text += f"\n\nContext: {task.context}"
    return Prompt(user=text, tier=task.tier)


def quiz_prompt(task: QuizTask) -> Prompt:
    return Prompt(
        user=QUIZ_TEMPLATE.format(count=task.question_count, topic=task.topic),
        tier=task.tier,
        shape=task.shape.model_json_schema(by_alias=True),
    )


def flashcard_prompt(task: FlashcardTask) -> Prompt:
    return Prompt(
        user=FLASHCARD_TEMPLATE.format(count=task.card_count, topic=task.topic),
        tier=task.tier,
        shape=task.shape.model_json_schema(by_alias=True),
    )


def interview_prompt(task: InterviewTask) -> Prompt:
    return Prompt(
        user=INTERVIEW_TEMPLATE.format(
            count=INTERVIEW_QUESTION_COUNT,
            level=task.experience_level,
            role=task.role,
        ),
        tier=task.tier,
        shape=task.shape.model_json_schema(by_alias=True),
    )


def chat_prompt(task: ChatTask, *, assistant_name: str = DEFAULT_ASSISTANT_NAME) -> Prompt:
    system = CHAT_SYSTEM_TEMPLATE.format(
        name=assistant_name,
        title=task.topic_title,
        content=task.topic_content,
    )
    return Prompt(
        user=task.question,
        tier=task.tier,
        system=system,
        history=tuple(task.history),
    )


def build_prompt(
    task: GenerationTask, *, assistant_name: str = DEFAULT_ASSISTANT_NAME
) -> Prompt:
    """Map a task to its prompt."""
    if isinstance(task, ExplanationTask):
        return explanation_prompt(task)
    if isinstance(task, QuizTask):
        return quiz_prompt(task)
    if isinstance(task, FlashcardTask):
        return flashcard_prompt(task)
    if isinstance(task, InterviewTask):
        return interview_prompt(task)
    if isinstance(task, ChatTask):
        return chat_prompt(task, assistant_name=assistant_name)
    raise TypeError(f"Unsupported generation task: {type(task).__name__}")
