"""Tests for SummarizerFactory."""

from unittest.mock import patch

import pytest

from courseflow.config.settings import Settings
from courseflow.enrichment.factory import SummarizerFactory
from courseflow.enrichment.summarizer import Summarizer


class TestSummarizerFactory:
    def test_creates_example_summarizer(self) -> None:
        summarizer = SummarizerFactory.create(Settings(summary_provider="example"))
        assert isinstance(summarizer, Summarizer)
        result = summarizer.summarize("any text")
        assert result.language == "en"

    def test_uses_openai_settings(self) -> None:
        settings = Settings(
            summary_provider="openai",
            summary_openai_api_key="openai-key",
            summary_openai_model_name="gpt-4",
            summary_openai_timeout_seconds=42,
        )
        with patch("courseflow.enrichment.factory.OpenAIClientAdapter") as mock_adapter:
            SummarizerFactory.create(settings)
        mock_adapter.assert_called_once_with(
            api_key="openai-key",
            timeout_seconds=42,
            base_url=None,
        )

    def test_openai_compatible_requires_base_url(self) -> None:
        settings = Settings(summary_provider="openai_compatible")
        with pytest.raises(ValueError, match="summary_openai_compatible_base_url"):
            SummarizerFactory.create(settings)

    def test_openai_compatible_uses_configured_url(self) -> None:
        settings = Settings(
            summary_provider="openai_compatible",
            summary_openai_compatible_base_url="http://llm.local/v1",
            summary_openai_compatible_api_key="k",
            summary_openai_compatible_model_name="m",
            summary_openai_compatible_timeout_seconds=11,
        )
        with patch("courseflow.enrichment.factory.OpenAIClientAdapter") as mock_adapter:
            SummarizerFactory.create(settings)
        mock_adapter.assert_called_once_with(
            api_key="k",
            timeout_seconds=11,
            base_url="http://llm.local/v1",
        )

    @pytest.mark.parametrize("provider", ["openrouter", "groq", "together", "deepseek", "ollama"])
    def test_hosted_providers_use_default_base_url(self, provider: str) -> None:
        settings = Settings(summary_provider=provider)
        with patch("courseflow.enrichment.factory.OpenAIClientAdapter") as mock_adapter:
            SummarizerFactory.create(settings)
        assert (
            mock_adapter.call_args.kwargs["base_url"]
            == SummarizerFactory.OPENAI_COMPATIBLE_BASE_URLS[provider]
        )

    def test_unknown_provider_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown summary provider"):
            SummarizerFactory.create(Settings(summary_provider="mystery"))

    def test_supported_providers(self) -> None:
        providers = SummarizerFactory.supported_providers()
        assert providers[:3] == ["example", "openai", "openai_compatible"]
        assert "ollama" in providers

    def test_passes_output_token_budget_to_client(self) -> None:
        settings = Settings(
            summary_provider="openai",
            summary_openai_api_key="k",
            summary_max_output_tokens=321,
        )
        with patch("courseflow.enrichment.factory.OpenAIClientAdapter") as mock_adapter:
            mock_adapter.return_value.create_chat_completion.return_value = (
                '{"summary": "s", "key_points": [], "language": "en"}'
            )
            SummarizerFactory.create(settings).summarize("text")
        kwargs = mock_adapter.return_value.create_chat_completion.call_args.kwargs
        assert kwargs["max_output_tokens"] == 321
