from openai import OpenAI
from app.config.settings import settings


class LLMClient:
    """Process-wide OpenAI SDK client pointed at OpenRouter."""

    _client: OpenAI = None

    @classmethod
    def get_client(cls) -> OpenAI:
        if cls._client is None:
            cls._client = OpenAI(
                base_url=settings.openrouter_base_url,
                api_key=settings.openrouter_api_key or "missing-openrouter-key",
            )
        return cls._client

    @classmethod
    def reset_client(cls):
        cls._client = None


def get_llm() -> OpenAI:
    return LLMClient.get_client()
