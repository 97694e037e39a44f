class SummarizationError(Exception):
    """Raised when summarization or translation fails."""


class SummarizationValidationError(SummarizationError):
    """Raised when the model's answer does not have the expected shape."""


class SummarizationNetworkError(SummarizationError):
    """Raised when the AI provider call fails due to network/infrastructure issues."""
