from statement_pipeline.pipeline.events import EventKind, EventStream, PipelineEvent
from statement_pipeline.pipeline.exceptions import (
    ConcurrentRunRejectedError,
    PipelineError,
    StatementRejectedError,
)
from statement_pipeline.pipeline.models import (
    PipelinePhase,
    ProcessingAnalytics,
    ProcessingResult,
    ProgressSnapshot,
    StatementDocument,
)
from statement_pipeline.pipeline.orchestrator import PipelineOrchestrator, build_orchestrator
from statement_pipeline.pipeline.progress import ProgressTracker
from statement_pipeline.pipeline.security import aggregate_security

__all__ = [
    "ConcurrentRunRejectedError",
    "EventKind",
    "EventStream",
    "PipelineError",
    "PipelineEvent",
    "PipelineOrchestrator",
    "PipelinePhase",
    "ProcessingAnalytics",
    "ProcessingResult",
    "ProgressSnapshot",
    "ProgressTracker",
    "StatementDocument",
    "StatementRejectedError",
    "aggregate_security",
    "build_orchestrator",
]
