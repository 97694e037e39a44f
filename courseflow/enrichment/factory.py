from typing import ClassVar

from courseflow.config.settings import Settings
from courseflow.enrichment.example_client_adapter import ExampleClientAdapter
from courseflow.enrichment.openai_client_adapter import OpenAIClientAdapter
from courseflow.enrichment.summarizer import Summarizer


class SummarizerFactory:
    """Creates the summarizer for the configured provider."""

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "openrouter": "https://openrouter.ai/api/v1",
        "groq": "https://api.groq.com/openai/v1",
        "together": "https://api.together.xyz/v1",
        "deepseek": "https://api.deepseek.com/v1",
        "ollama": "http://localhost:11434/v1",
    }

    @classmethod
    def create(cls, settings: Settings) -> Summarizer:
        """Create a configured summarizer from application settings."""
        provider = settings.summary_provider.lower()
        if provider == "example":
            return Summarizer(client=ExampleClientAdapter(), model="example")
        client = OpenAIClientAdapter(
            api_key=cls._resolve_api_key(provider, settings),
            timeout_seconds=cls._resolve_timeout_seconds(provider, settings),
            base_url=cls._resolve_base_url(provider, settings),
        )
        return Summarizer(
            client=client,
            model=cls._resolve_model_name(provider, settings),
            temperature=cls._resolve_temperature(provider, settings),
            max_output_tokens=settings.summary_max_output_tokens,
        )

    @classmethod
    def supported_providers(cls) -> list[str]:
        return ["example", "openai", "openai_compatible", *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS)]

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        if provider == "openai":
            return None
        if provider == "openai_compatible":
            url = (settings.summary_openai_compatible_base_url or "").strip()
            if not url:
                raise ValueError(
                    "summary_openai_compatible_base_url is required for "
                    "summary_provider=openai_compatible"
                )
            return url
        default_base_url = cls.OPENAI_COMPATIBLE_BASE_URLS.get(provider)
        if default_base_url is not None:
            return default_base_url
        raise ValueError(
            f"Unknown summary provider '{provider}'. Choose from: {cls.supported_providers()}"
        )

    @classmethod
    def _resolve_api_key(cls, provider: str, settings: Settings) -> str:
        key_map = {
            "openai": settings.summary_openai_api_key,
            "openai_compatible": settings.summary_openai_compatible_api_key,
            "openrouter": settings.summary_openrouter_api_key,
            "groq": settings.summary_groq_api_key,
            "together": settings.summary_together_api_key,
            "deepseek": settings.summary_deepseek_api_key,
            "ollama": settings.summary_ollama_api_key,
        }
        return key_map.get(provider, "") or ""

    @classmethod
    def _resolve_model_name(cls, provider: str, settings: Settings) -> str:
        key_map = {
            "openai": settings.summary_openai_model_name,
            "openai_compatible": settings.summary_openai_compatible_model_name,
            "openrouter": settings.summary_openrouter_model_name,
            "groq": settings.summary_groq_model_name,
            "together": settings.summary_together_model_name,
            "deepseek": settings.summary_deepseek_model_name,
            "ollama": settings.summary_ollama_model_name,
        }
        return key_map.get(provider, "") or ""

    @classmethod
    def _resolve_timeout_seconds(cls, provider: str, settings: Settings) -> int:
        if provider == "openai":
            return settings.summary_openai_timeout_seconds or 30
        # Hosted OpenAI-compatible providers share one timeout.
        return settings.summary_openai_compatible_timeout_seconds or 30

    @classmethod
    def _resolve_temperature(cls, provider: str, settings: Settings) -> float:
        if provider == "openai":
            return settings.summary_openai_temperature
        return 0.0
