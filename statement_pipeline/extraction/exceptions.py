from statement_pipeline.llm.exceptions import LLMResponseError


class PageExtractionError(Exception):
    """Raised when a page cannot be turned into transactions."""


class ExtractionPayloadError(PageExtractionError, LLMResponseError):
    """Raised when the extraction delegate's answer fails domain validation."""
