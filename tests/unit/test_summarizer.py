"""Tests for the Summarizer (AI-powered summaries and translations)."""

import json
from unittest.mock import MagicMock

import pytest

from courseflow.enrichment.exceptions import (
    SummarizationError,
    SummarizationNetworkError,
    SummarizationValidationError,
)
from courseflow.enrichment.summarizer import Summarizer


def _make_summarizer(client: MagicMock | None = None, **kwargs: object) -> Summarizer:
    if client is None:
        client = MagicMock()
    return Summarizer(client=client, model="test-model", **kwargs)  # type: ignore[arg-type]


def _mock_ai_response(client: MagicMock, content: str) -> None:
    """Configure the mock client to return the given content."""
    client.create_chat_completion.return_value = content


def _valid_summary_response(language: str = "en") -> str:
    return json.dumps({
        "summary": "Lecture 3 covers comparison sorts.",
        "key_points": ["Quicksort is O(n log n) on average", "Mergesort is stable"],
        "language": language,
    })


class TestSummarizeSuccess:
    def test_returns_summary_result(self) -> None:
        client = MagicMock()
        _mock_ai_response(client, _valid_summary_response())
        result = _make_summarizer(client).summarize("Sorting algorithms", "lecture-3.pdf")
        assert result.summary == "Lecture 3 covers comparison sorts."
        assert len(result.key_points) == 2
        assert result.language == "en"

    def test_prompt_contains_text_and_file_name(self) -> None:
        client = MagicMock()
        _mock_ai_response(client, _valid_summary_response())
        _make_summarizer(client).summarize("Sorting algorithms", "lecture-3.pdf")

        kwargs = client.create_chat_completion.call_args.kwargs
        assert "Sorting algorithms" in kwargs["user_prompt"]
        assert "lecture-3.pdf" in kwargs["user_prompt"]
        assert kwargs["model"] == "test-model"
        assert kwargs["json_schema"]["title"] == "summary_result"

    def test_truncates_long_input(self) -> None:
        client = MagicMock()
        _mock_ai_response(client, _valid_summary_response())
        _make_summarizer(client, max_input_chars=10).summarize("abcdefghij" + "Z" * 50)

        assert "Z" not in client.create_chat_completion.call_args.kwargs["user_prompt"]

    def test_handles_markdown_fenced_json(self) -> None:
        client = MagicMock()
        _mock_ai_response(client, f"```json\n{_valid_summary_response()}\n```")
        result = _make_summarizer(client).summarize("text")
        assert result.language == "en"

    def test_clamps_temperature(self) -> None:
        client = MagicMock()
        _mock_ai_response(client, _valid_summary_response())
        _make_summarizer(client, temperature=0.9).summarize("text")
        assert client.create_chat_completion.call_args.kwargs["temperature"] == 0.2

    def test_passes_output_token_budget(self) -> None:
        client = MagicMock()
        _mock_ai_response(client, _valid_summary_response())
        _make_summarizer(client, max_output_tokens=256).summarize("text")
        assert client.create_chat_completion.call_args.kwargs["max_output_tokens"] == 256


class TestSummarizeErrors:
    def test_empty_text_raises_without_calling_ai(self) -> None:
        client = MagicMock()
        with pytest.raises(SummarizationError, match="empty document"):
            _make_summarizer(client).summarize("   ")
        client.create_chat_completion.assert_not_called()

    def test_invalid_json_raises(self) -> None:
        client = MagicMock()
        _mock_ai_response(client, "not json")
        with pytest.raises(SummarizationError, match="Invalid JSON"):
            _make_summarizer(client).summarize("text")

    def test_non_object_json_raises(self) -> None:
        client = MagicMock()
        _mock_ai_response(client, "[1, 2]")
        with pytest.raises(SummarizationError, match="must be an object"):
            _make_summarizer(client).summarize("text")

    def test_invalid_answer_raises_validation_error(self) -> None:
        client = MagicMock()
        _mock_ai_response(client, json.dumps({"summary": "", "language": "en"}))
        with pytest.raises(SummarizationValidationError):
            _make_summarizer(client).summarize("text")

    def test_network_error_propagates(self) -> None:
        client = MagicMock()
        client.create_chat_completion.side_effect = SummarizationNetworkError("down")
        with pytest.raises(SummarizationNetworkError):
            _make_summarizer(client).summarize("text")


class TestTranslate:
    def test_returns_translation(self) -> None:
        client = MagicMock()
        _mock_ai_response(client, json.dumps({"translated_summary": "Hola", "target_language": "es"}))
        result = _make_summarizer(client).translate("Hello", "ES")

        assert result.translated_summary == "Hola"
        assert result.target_language == "es"
        prompt = client.create_chat_completion.call_args.kwargs["user_prompt"]
        assert "Hello" in prompt
        assert "es" in prompt

    def test_empty_summary_skips_ai(self) -> None:
        client = MagicMock()
        result = _make_summarizer(client).translate("", "es")
        assert result.translated_summary == ""
        client.create_chat_completion.assert_not_called()

    def test_missing_target_language_raises(self) -> None:
        with pytest.raises(SummarizationError, match="Target language"):
            _make_summarizer().translate("Hello", " ")
