"""Offline completion client.

Use this module as a reference when implementing new provider adapters.
Implement BaseCompletionClient and register the provider in SummarizerFactory.
"""

import json
from typing import ClassVar

from courseflow.enrichment.client_base import BaseCompletionClient


class ExampleClientAdapter(BaseCompletionClient):
    """Returns a fixed valid answer for the requested schema.

    No network calls. Useful for local development and tests.
    """

    DEFAULT_RESPONSES: ClassVar[dict[str, dict[str, object]]] = {
        "summary_result": {
            "summary": "Summary unavailable: the example provider does not read documents.",
            "key_points": [],
            "language": "en",
        },
        "translation_result": {
            "translated_summary": "",
            "target_language": "en",
        },
    }

    def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
        json_schema: dict[str, object],
        max_output_tokens: int,
    ) -> str:
        _ = model, temperature, system_prompt, user_prompt, max_output_tokens
        title = str(json_schema.get("title", "summary_result"))
        return json.dumps(self.DEFAULT_RESPONSES.get(title, self.DEFAULT_RESPONSES["summary_result"]))
