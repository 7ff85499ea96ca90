from __future__ import annotations

import json
from typing import Callable, Optional, Union

import pytest

from studykit.core.config import ChatSettings, Settings
from studykit.modules.generation.generator import StructuredGenerationClient
from studykit.modules.generation.prompts import Prompt
from studykit.modules.generation.providers import TextGenerator

Reply = Union[Optional[str], Exception, Callable[[Prompt], Optional[str]]]

QUIZ_JSON = json.dumps(
    {
        "questions": [
            {
                "question": "Which planet is closest to the sun?",
                "options": ["Venus", "Mercury", "Earth", "Mars"],
                "correctAnswer": 1,
                "explanation": "Mercury orbits at about 0.39 AU.",
            }
        ]
    }
)


class ScriptedGenerator(TextGenerator):
    """Returns a fixed reply (or raises) and records every prompt it sees."""

    def __init__(self, reply: Reply) -> None:
        self.reply = reply
        self.prompts: list[Prompt] = []

    async def generate_text(self, prompt: Prompt) -> Optional[str]:
        self.prompts.append(prompt)
        if isinstance(self.reply, Exception):
            raise self.reply
        if callable(self.reply):
            return self.reply(prompt)
        return self.reply


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        _env_file=None,
        chat=ChatSettings(_env_file=None),
        GEMINI_API_KEY=None,
        OPENAI_API_KEY=None,
        OPENROUTER_API_KEY=None,
        MODEL_PROVIDER="google",
    )


@pytest.fixture
def make_client(test_settings):
    def _make(reply: Reply) -> tuple[StructuredGenerationClient, ScriptedGenerator]:
        generator = ScriptedGenerator(reply)
        return StructuredGenerationClient(generator, settings=test_settings), generator

    return _make
