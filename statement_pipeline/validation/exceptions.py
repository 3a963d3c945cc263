from statement_pipeline.llm.exceptions import LLMResponseError


class ValidationPayloadError(LLMResponseError):
    """Raised when the primary validator's answer does not have the expected shape."""
