from typing import ClassVar

from statement_pipeline.config.settings import Settings
from statement_pipeline.llm.delegate import LLMDelegate
from statement_pipeline.llm.example_client_adapter import ExampleClientAdapter
from statement_pipeline.llm.openai_client_adapter import OpenAIClientAdapter


class LLMClientFactory:
    """Creates the configured LLM delegate shared by validation, extraction and finalization."""

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "openrouter": "https://openrouter.ai/api/v1",
        "groq": "https://api.groq.com/openai/v1",
        "together": "https://api.together.xyz/v1",
        "deepseek": "https://api.deepseek.com/v1",
        "ollama": "http://localhost:11434/v1",
    }

    @classmethod
    def create(cls, settings: Settings) -> LLMDelegate:
        """Create a configured delegate from application settings."""
        provider = settings.llm_provider.lower()
        if provider == "example":
            return LLMDelegate(client=ExampleClientAdapter(), model="example")
        client = OpenAIClientAdapter(
            api_key=cls._resolve_api_key(provider, settings),
            timeout_seconds=cls._resolve_timeout_seconds(provider, settings),
            base_url=cls._resolve_base_url(provider, settings),
        )
        return LLMDelegate(
            client=client,
            model=cls._resolve_model_name(provider, settings),
            temperature=cls._resolve_temperature(provider, settings),
        )

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        if provider == "openai":
            return None
        if provider == "openai_compatible":
            url = settings.llm_openai_compatible_base_url.strip()
            if not url:
                raise ValueError(
                    "llm_openai_compatible_base_url is required for "
                    "llm_provider=openai_compatible"
                )
            return url
        default_base_url = cls.OPENAI_COMPATIBLE_BASE_URLS.get(provider)
        if default_base_url is not None:
            return default_base_url
        supported = [
            "example",
            "openai",
            "openai_compatible",
            *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS),
        ]
        raise ValueError(f"Unknown LLM provider '{provider}'. Choose from: {supported}")

    @classmethod
    def _resolve_api_key(cls, provider: str, settings: Settings) -> str:
        return str(getattr(settings, f"llm_{provider}_api_key", "") or "")

    @classmethod
    def _resolve_model_name(cls, provider: str, settings: Settings) -> str:
        return str(getattr(settings, f"llm_{provider}_model_name", "") or "")

    @classmethod
    def _resolve_timeout_seconds(cls, provider: str, settings: Settings) -> int:
        return int(getattr(settings, f"llm_{provider}_timeout_seconds", 30) or 30)

    @classmethod
    def _resolve_temperature(cls, provider: str, settings: Settings) -> float:
        if provider == "openai":
            return settings.llm_openai_temperature
        return 0.0
