"""Text generation backends.

``TextGenerator`` is the only capability the generation client needs: prompt
in, raw text out. ``PydanticAIGenerator`` implements it on top of pydantic-ai
models (Gemini, OpenAI, OpenRouter) selected per model tier from settings.
Provider imports stay lazy so a missing SDK or credential only fails the call
that needs it.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Optional

from pydantic_ai.direct import model_request
from pydantic_ai.messages import (
    ModelMessage,
    ModelRequest,
    ModelResponse,
    SystemPromptPart,
    TextPart,
    UserPromptPart,
)
from pydantic_ai.models import Model
from pydantic_ai.settings import ModelSettings

from studykit.core.config import Settings, settings as default_settings
from studykit.modules.generation.prompts import Prompt
from studykit.modules.generation.tasks import ModelTier

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"

SHAPE_INSTRUCTION = (
    "Return only a JSON object that validates against the JSON schema below. "
    "No markdown, no code fences, no commentary.\n"
)


class TextGenerator(ABC):
    @abstractmethod
    async def generate_text(self, prompt: Prompt) -> Optional[str]:
        """Return the model's raw text for ``prompt``, or None if it produced none.

        Implementations raise on transport, auth, quota or safety failures.
        Results are not repeatable: calling twice may give different text.
        """
        raise NotImplementedError


def _build_google_model(model_name: str, settings: Settings):
    """Build the Google Gemini model provider (lazy import)."""
    if not settings.gemini_api_key:
        raise RuntimeError(
            "Gemini API key not configured. Set GEMINI_API_KEY in your environment."
        )

    from pydantic_ai.models.google import GoogleModel, GoogleModelSettings
    from pydantic_ai.providers.google import GoogleProvider

    provider = GoogleProvider(api_key=settings.gemini_api_key)
    settings_obj = None
    if settings.disable_safety_filters:
        from google.genai.types import HarmBlockThreshold, HarmCategory

        categories = (
            HarmCategory.HARM_CATEGORY_HARASSMENT,
            HarmCategory.HARM_CATEGORY_HATE_SPEECH,
            HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT,
            HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT,
        )
        settings_obj = GoogleModelSettings(
            google_safety_settings=[
                {"category": c, "threshold": HarmBlockThreshold.BLOCK_NONE}
                for c in categories
            ]
        )
    return GoogleModel(model_name, provider=provider, settings=settings_obj)


def _build_openai_model(model_name: str, settings: Settings):
    """Build an OpenAI chat model (lazy import)."""
    if not settings.openai_api_key:
        raise RuntimeError(
            "OpenAI API key not configured. Set OPENAI_API_KEY in your environment."
        )

    from pydantic_ai.models.openai import OpenAIChatModel
    from pydantic_ai.providers.openai import OpenAIProvider

    provider = OpenAIProvider(api_key=settings.openai_api_key)
    return OpenAIChatModel(model_name, provider=provider)


def _build_openrouter_model(model_name: str, settings: Settings):
    """Build the OpenRouter model via the OpenAI-compatible provider (lazy import)."""
    if not settings.openrouter_api_key:
        raise RuntimeError(
            "OpenRouter API key not configured. Set OPENROUTER_API_KEY in your environment."
        )

    from pydantic_ai.models.openai import OpenAIChatModel
    from pydantic_ai.providers.openai import OpenAIProvider

    provider = OpenAIProvider(
        api_key=settings.openrouter_api_key,
        base_url=OPENROUTER_BASE_URL,
    )
    return OpenAIChatModel(model_name, provider=provider)


def build_model_for_tier(tier: ModelTier, settings: Settings) -> Model:
    """Return a pydantic-ai Model based on the tier and provider selection."""
    if tier is ModelTier.CHAT:
        provider = (settings.chat.provider or "openai").lower()
        if provider == "google":
            return _build_google_model(settings.chat.model, settings)
        if provider == "openrouter":
            return _build_openrouter_model(settings.chat.model, settings)
        return _build_openai_model(settings.chat.model, settings)

    provider = (settings.model_provider or "google").lower()
    if provider == "openrouter":
        return _build_openrouter_model(settings.openrouter_model, settings)
    if tier is ModelTier.FAST:
        return _build_google_model(settings.explanation_model, settings)
    return _build_google_model(settings.structured_model, settings)


def _instructions(prompt: Prompt) -> Optional[str]:
    blocks = []
    if prompt.system:
        blocks.append(prompt.system)
    if prompt.shape is not None:
        blocks.append(SHAPE_INSTRUCTION + json.dumps(prompt.shape, indent=2))
    return "\n\n".join(blocks) or None


def to_messages(prompt: Prompt) -> list[ModelMessage]:
    """Convert a prompt into pydantic-ai messages: instructions, history, question."""
    messages: list[ModelMessage] = []
    instructions = _instructions(prompt)
    if instructions:
        messages.append(ModelRequest(parts=[SystemPromptPart(content=instructions)]))
    for turn in prompt.history:
        if turn.role == "assistant":
            messages.append(ModelResponse(parts=[TextPart(content=turn.content)]))
        else:
            messages.append(ModelRequest(parts=[UserPromptPart(content=turn.content)]))
    messages.append(ModelRequest(parts=[UserPromptPart(content=prompt.user)]))
    return messages


class PydanticAIGenerator(TextGenerator):
    """Single-request text generation through pydantic-ai models.

    Uses one direct model request per call (no agent loop) so a call never
    turns into several round-trips behind the caller's back.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        model: Optional[Model] = None,
    ) -> None:
        self.settings = settings or default_settings
        self.model = model

    def _model(self, tier: ModelTier) -> Model:
        if self.model is not None:
            return self.model
        return build_model_for_tier(tier, self.settings)

    def _model_settings(self, tier: ModelTier) -> ModelSettings:
        model_settings = ModelSettings()
        if tier is ModelTier.CHAT:
            model_settings["temperature"] = self.settings.chat.temperature
            model_settings["max_tokens"] = self.settings.chat.max_tokens
        if self.settings.request_timeout_sec:
            model_settings["timeout"] = self.settings.request_timeout_sec
        return model_settings

    async def generate_text(self, prompt: Prompt) -> Optional[str]:
        response = await model_request(
            self._model(prompt.tier),
            to_messages(prompt),
            model_settings=self._model_settings(prompt.tier),
        )
        texts = [p.content for p in response.parts if isinstance(p, TextPart)]
        if not texts:
            return None
        return "".join(texts)
