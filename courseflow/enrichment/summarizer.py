"""LLM-backed study summaries and their translations."""

import json
from pathlib import Path

from courseflow.enrichment.client_base import BaseCompletionClient
from courseflow.enrichment.exceptions import SummarizationError
from courseflow.enrichment.models import SummaryResult, TranslationResult
from courseflow.enrichment.prompt_loader import load_json_schema, load_prompt_template
from courseflow.enrichment.validator import build_summary, build_translation
from courseflow.logging.logger import Log

MAX_INPUT_CHARS = 12_000
MAX_OUTPUT_TOKENS = 800


class Summarizer:
    """Summarizes extracted document text using an AI provider."""

    def __init__(
        self,
        *,
        client: BaseCompletionClient,
        model: str,
        temperature: float = 0.0,
        prompt_dir: Path | None = None,
        system_prompt: str = "",
        max_input_chars: int = MAX_INPUT_CHARS,
        max_sentences: int = 5,
        max_key_points: int = 5,
        max_output_tokens: int = MAX_OUTPUT_TOKENS,
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = max(0.0, min(0.2, temperature))
        self._system_prompt = system_prompt
        self._max_input_chars = max_input_chars
        self._max_sentences = max_sentences
        self._max_key_points = max_key_points
        self._max_output_tokens = max_output_tokens
        self._summary_template = load_prompt_template("summary", prompt_dir)
        self._summary_schema = load_json_schema("summary", prompt_dir)
        self._translation_template = load_prompt_template("translation", prompt_dir)
        self._translation_schema = load_json_schema("translation", prompt_dir)

    def summarize(self, text: str, file_name: str = "") -> SummaryResult:
        """Summarize *text*. Long inputs are truncated to the configured size."""
        if not text.strip():
            raise SummarizationError("Cannot summarize an empty document")
        prompt = self._summary_template.format(
            text=text[: self._max_input_chars],
            file_name=file_name or "unknown",
            max_sentences=self._max_sentences,
            max_key_points=self._max_key_points,
            json_schema=json.dumps(self._summary_schema, indent=2),
        )
        Log.debug(f"Summary prompt:\n{prompt}")

        raw_response = self._call_ai(prompt, self._summary_schema)
        result = build_summary(self._parse_json(raw_response))
        Log.info(f"Summary complete for {file_name or 'document'}: {len(result.key_points)} key points")
        return result

    def translate(self, summary: str, target_language: str) -> TranslationResult:
        """Translate a summary into *target_language* (ISO 639-1)."""
        target = target_language.strip().lower()
        if not target:
            raise SummarizationError("Target language is required")
        if not summary.strip():
            return TranslationResult(translated_summary="", target_language=target)
        prompt = self._translation_template.format(
            summary=summary,
            target_language=target,
            json_schema=json.dumps(self._translation_schema, indent=2),
        )
        raw_response = self._call_ai(prompt, self._translation_schema)
        return build_translation(self._parse_json(raw_response), target)

    def _call_ai(self, prompt: str, schema: dict[str, object]) -> str:
        return self._client.create_chat_completion(
            model=self._model,
            temperature=self._temperature,
            system_prompt=self._system_prompt,
            user_prompt=prompt,
            json_schema=schema,
            max_output_tokens=self._max_output_tokens,
        )

    @staticmethod
    def _parse_json(raw: str) -> dict[str, object]:
        cleaned = raw.strip()
        if cleaned.startswith("```"):
            lines = cleaned.splitlines()
            if lines and lines[0].startswith("```"):
                lines = lines[1:]
            if lines and lines[-1].strip() == "```":
                lines = lines[:-1]
            cleaned = "\n".join(lines)

        try:
            parsed = json.loads(cleaned)
        except json.JSONDecodeError as exc:
            raise SummarizationError(f"Invalid JSON response: {exc}") from exc

        if not isinstance(parsed, dict):
            raise SummarizationError("JSON response must be an object")
        return parsed
