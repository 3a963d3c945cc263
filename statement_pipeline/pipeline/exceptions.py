class PipelineError(Exception):
    """Base exception for all pipeline orchestration errors."""


class ConcurrentRunRejectedError(PipelineError):
    """Raised when a run is requested while another one is still active."""


class StatementRejectedError(PipelineError):
    """Raised when the statement does not match the requested bank, month or year."""
