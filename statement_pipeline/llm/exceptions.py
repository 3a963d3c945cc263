class LLMError(Exception):
    """Raised when a language-model delegate call fails."""


class LLMNetworkError(LLMError):
    """Raised when the provider call fails due to network/infrastructure issues."""


class LLMResponseError(LLMError):
    """Raised when the provider answered but the output has the wrong shape."""
