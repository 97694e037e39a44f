import httpx
import openai

from courseflow.enrichment.client_base import BaseCompletionClient
from courseflow.enrichment.exceptions import SummarizationError, SummarizationNetworkError


class OpenAIClientAdapter(BaseCompletionClient):
    """Summary and translation client built on the OpenAI-compatible chat API.

    The answer is constrained to the prompt's JSON schema. A completion that
    stopped at the output token budget is rejected, since a truncated
    summary object is never valid JSON.
    """

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int,
        base_url: str | None = None,
    ) -> None:
        self._client = openai.OpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
        )

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
        schema_name = str(json_schema.get("title", "summary_result"))
        messages = [{"role": "user", "content": user_prompt}]
        if system_prompt:
            messages.insert(0, {"role": "system", "content": system_prompt})
        try:
            response = self._client.chat.completions.create(
                model=model,
                temperature=temperature,
                max_tokens=max_output_tokens,
                response_format={
                    "type": "json_schema",
                    "json_schema": {
                        "name": schema_name,
                        "strict": True,
                        "schema": json_schema,
                    },
                },
                messages=messages,
            )
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise SummarizationNetworkError(f"AI provider network error: {exc}") from exc
        except openai.APIError as exc:
            raise SummarizationNetworkError(f"AI provider API error: {exc}") from exc

        if not response.choices:
            raise SummarizationError("AI returned no choices")
        choice = response.choices[0]
        if choice.finish_reason == "length":
            raise SummarizationError(
                f"AI {schema_name} was cut off at {max_output_tokens} output tokens"
            )
        if choice.finish_reason == "content_filter":
            raise SummarizationError(f"AI provider withheld the {schema_name}")
        content = choice.message.content
        if content is None:
            raise SummarizationError("AI returned empty response")
        return content
