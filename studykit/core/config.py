from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ChatSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )
    # Chat provider selection: "openai", "google" or "openrouter"
    provider: str = Field(default="openai", alias="CHAT_PROVIDER")
    model: str = Field(default="gpt-4o-mini", alias="CHAT_MODEL")
    temperature: float = Field(default=0.7, alias="CHAT_TEMPERATURE")
    max_tokens: int = Field(default=500, alias="CHAT_MAX_TOKENS")
    assistant_name: str = Field(default="Chaitanya AI", alias="CHAT_ASSISTANT_NAME")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    chat: ChatSettings = Field(default_factory=lambda: ChatSettings())

    gemini_api_key: Optional[str] = Field(default=None, alias="GEMINI_API_KEY")
    openai_api_key: Optional[str] = Field(default=None, alias="OPENAI_API_KEY")
    openrouter_api_key: Optional[str] = Field(default=None, alias="OPENROUTER_API_KEY")

    # Model provider for explanations and structured content: "google" or "openrouter"
    model_provider: str = Field(default="google", alias="MODEL_PROVIDER")
    explanation_model: str = Field(default="gemini-2.5-flash", alias="EXPLANATION_MODEL")
    structured_model: str = Field(default="gemini-2.5-pro", alias="STRUCTURED_MODEL")
    openrouter_model: str = Field(
        default="google/gemini-2.5-flash", alias="OPENROUTER_MODEL"
    )

    disable_safety_filters: bool = Field(default=True, alias="GEMINI_DISABLE_SAFETY")
    request_timeout_sec: Optional[float] = Field(default=None, alias="LLM_TIMEOUT_SEC")


settings = Settings()
