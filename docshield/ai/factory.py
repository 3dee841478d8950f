from dataclasses import dataclass
from typing import ClassVar

from docshield.ai.client_base import BaseChatClient
from docshield.ai.example_client_adapter import ExampleClientAdapter
from docshield.ai.openai_client_adapter import OpenAIClientAdapter
from docshield.config.settings import Settings


@dataclass(frozen=True)
class ChatBinding:
    """A configured client plus the model parameters to call it with."""

    client: BaseChatClient
    model: str
    temperature: float


class ChatClientFactory:
    """Creates the chat client for settings.ai_provider."""

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "openrouter": "https://openrouter.ai/api/v1",
        "groq": "https://api.groq.com/openai/v1",
        "together": "https://api.together.xyz/v1",
        "deepseek": "https://api.deepseek.com/v1",
        "ollama": "http://localhost:11434/v1",
    }

    @classmethod
    def create(cls, settings: Settings) -> ChatBinding:
        provider = settings.ai_provider.lower()
        if provider == "example":
            return ChatBinding(client=ExampleClientAdapter(), model="example", temperature=0.0)
        base_url = cls._resolve_base_url(provider, settings)
        client = OpenAIClientAdapter(
            api_key=cls._resolve_api_key(provider, settings),
            timeout_seconds=cls._resolve_timeout_seconds(provider, settings),
            base_url=base_url,
        )
        return ChatBinding(
            client=client,
            model=cls._resolve_model_name(provider, settings),
            temperature=settings.ai_temperature,
        )

    @classmethod
    def supported_providers(cls) -> list[str]:
        return ["example", "openai", "openai_compatible", *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS)]

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        if provider == "openai":
            return None
        if provider == "openai_compatible":
            url = settings.ai_openai_compatible_base_url.strip()
            if not url:
                raise ValueError(
                    "ai_openai_compatible_base_url is required for ai_provider=openai_compatible"
                )
            return url
        default_base_url = cls.OPENAI_COMPATIBLE_BASE_URLS.get(provider)
        if default_base_url is None:
            raise ValueError(
                f"Unknown AI provider '{provider}'. Choose from: {cls.supported_providers()}"
            )
        return default_base_url

    @classmethod
    def _resolve_api_key(cls, provider: str, settings: Settings) -> str:
        key_map = {
            "openai": settings.ai_openai_api_key,
            "openai_compatible": settings.ai_openai_compatible_api_key,
            "openrouter": settings.ai_openrouter_api_key,
            "groq": settings.ai_groq_api_key,
            "together": settings.ai_together_api_key,
            "deepseek": settings.ai_deepseek_api_key,
            "ollama": settings.ai_ollama_api_key,
        }
        return key_map.get(provider, "") or ""

    @classmethod
    def _resolve_model_name(cls, provider: str, settings: Settings) -> str:
        key_map = {
            "openai": settings.ai_openai_model_name,
            "openai_compatible": settings.ai_openai_compatible_model_name,
            "openrouter": settings.ai_openrouter_model_name,
            "groq": settings.ai_groq_model_name,
            "together": settings.ai_together_model_name,
            "deepseek": settings.ai_deepseek_model_name,
            "ollama": settings.ai_ollama_model_name,
        }
        model = key_map.get(provider, "")
        if not model:
            raise ValueError(f"No model name configured for AI provider '{provider}'")
        return model

    @classmethod
    def _resolve_timeout_seconds(cls, provider: str, settings: Settings) -> int:
        if provider == "openai_compatible":
            return settings.ai_openai_compatible_timeout_seconds
        return settings.ai_openai_timeout_seconds
