from statement_pipeline.llm.exceptions import LLMResponseError


class FinalizationError(Exception):
    """Raised when the category reconciliation pass fails."""


class FinalizationPayloadError(FinalizationError, LLMResponseError):
    """Raised when the finalization delegate's answer has the wrong shape."""
