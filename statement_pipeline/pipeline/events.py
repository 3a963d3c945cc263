"""Structured run events for observers such as a progress UI."""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from statement_pipeline.extraction.models import PageResult
from statement_pipeline.logging.logger import Log
from statement_pipeline.pipeline.models import ProgressSnapshot


class EventKind(str, Enum):
    PHASE_CHANGED = "phase-changed"
    PAGE_STARTED = "page-started"
    PAGE_COMPLETED = "page-completed"
    RUN_TERMINATED = "run-terminated"


@dataclass(frozen=True)
class PipelineEvent:
    kind: EventKind
    snapshot: ProgressSnapshot
    message: str
    page_result: PageResult | None = None


Listener = Callable[[PipelineEvent], None]


class EventStream:
    """Fan-out of pipeline events. A failing listener never affects the run."""

    def __init__(self) -> None:
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener*; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def emit(self, event: PipelineEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as exc:
                Log.warning(f"Event listener failed on {event.kind.value}: {exc}")
