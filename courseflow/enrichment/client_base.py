from abc import ABC, abstractmethod


class BaseCompletionClient(ABC):
    """Contract for provider clients that answer summary and translation prompts.

    Implementations return the provider's JSON answer as text and raise
    SummarizationError when the answer is missing or was cut off by
    *max_output_tokens*, so the caller never parses a partial summary.
    """

    @abstractmethod
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
        """Return provider response as plain text."""
