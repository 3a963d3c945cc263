import threading
import time
from collections.abc import Callable, Sequence

from statement_pipeline.categorization.finalizer import CategoryFinalizer
from statement_pipeline.categorization.models import Category
from statement_pipeline.config.settings import Settings
from statement_pipeline.extraction.base import BasePageProcessor
from statement_pipeline.extraction.models import PageResult
from statement_pipeline.extraction.page_processor import PageProcessor
from statement_pipeline.llm.factory import LLMClientFactory
from statement_pipeline.logging.logger import Log
from statement_pipeline.pdf.factory import PdfExtractorFactory
from statement_pipeline.pdf.page_source import PageSource
from statement_pipeline.pipeline.events import EventKind, EventStream, PipelineEvent
from statement_pipeline.pipeline.exceptions import ConcurrentRunRejectedError
from statement_pipeline.pipeline.models import (
    PipelinePhase,
    PipelineRunContext,
    ProcessingAnalytics,
    ProcessingResult,
    ProgressSnapshot,
    StatementDocument,
)
from statement_pipeline.pipeline.progress import ProgressTracker
from statement_pipeline.pipeline.security import aggregate_security
from statement_pipeline.pipeline.steps import (
    FinalizeCategoriesStep,
    LoadPagesStep,
    ProcessPagesStep,
    ValidateStatementStep,
)
from statement_pipeline.sanitization.factory import SanitizerFactory
from statement_pipeline.validation.base import BaseStatementValidator
from statement_pipeline.validation.statement_validator import StatementValidator


class PipelineOrchestrator:
    """Runs one statement through validation, page extraction and categorization.

    Pipeline: load pages -> validate -> process pages -> finalize categories.
    Only one run may be active at a time; a second caller is rejected
    immediately rather than queued.
    """

    def __init__(
        self,
        page_source: PageSource,
        validator: BaseStatementValidator,
        page_processor: BasePageProcessor,
        finalizer: CategoryFinalizer,
        tracker: ProgressTracker | None = None,
        events: EventStream | None = None,
        validation_page_count: int = 3,
        page_delay_seconds: float = 0.5,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.events = events or EventStream()
        self._tracker = tracker or ProgressTracker()
        self._clock = clock
        self._lock = threading.Lock()
        self._progress: ProgressSnapshot | None = None
        self._load_pages = LoadPagesStep(page_source)
        self._validate = ValidateStatementStep(validator, validation_page_count)
        self._process_pages = ProcessPagesStep(
            page_processor,
            self._report,
            page_delay_seconds=page_delay_seconds,
            sleep=sleep,
        )
        self._finalize = FinalizeCategoriesStep(finalizer)

    @property
    def progress(self) -> ProgressSnapshot | None:
        """Latest snapshot of the current or most recent run."""
        return self._progress

    @property
    def is_processing(self) -> bool:
        return self._lock.locked()

    def process_statement(
        self,
        document: StatementDocument,
        bank_name: str,
        month: str,
        year: str | int,
        user_categories: Sequence[Category] = (),
    ) -> ProcessingResult:
        """Run the full pipeline for one statement.

        Validation failures and unexpected errors end the run as FAILED
        instead of raising.

        Raises:
            ConcurrentRunRejectedError: another run is still active.
        """
        if not self._lock.acquire(blocking=False):
            raise ConcurrentRunRejectedError("Another statement is currently being processed")
        try:
            context = PipelineRunContext(
                document=document,
                bank_name=bank_name,
                month=month,
                year=str(year),
                user_categories=[category.name for category in user_categories],
                started_at=self._clock(),
            )
            self._run(context)
            return self._build_result(context)
        finally:
            self._lock.release()

    def _run(self, context: PipelineRunContext) -> None:
        Log.info(
            f"Processing {context.document.filename} for {context.bank_name} "
            f"{context.month} {context.year}"
        )
        try:
            self._transition(context, PipelinePhase.VALIDATING, "Validating statement")
            self._load_pages.run(context)
            self._validate.run(context)

            self._transition(
                context,
                PipelinePhase.PROCESSING,
                f"Processing {context.total_pages} pages",
            )
            self._process_pages.run(context)

            self._transition(context, PipelinePhase.CATEGORIZING, "Finalizing categories")
            self._finalize.run(context)

            context.phase = PipelinePhase.COMPLETED
            self._report(
                EventKind.RUN_TERMINATED,
                context,
                f"Processed {len(context.transactions)} transactions from "
                f"{context.total_pages} pages",
            )
            Log.info(
                f"Statement processed: {context.successful_pages}/{context.total_pages} pages, "
                f"{len(context.transactions)} transactions"
            )
        except Exception as exc:
            context.phase = PipelinePhase.FAILED
            context.error = str(exc) or type(exc).__name__
            Log.error(f"Statement processing failed: {context.error}")
            self._report(EventKind.RUN_TERMINATED, context, context.error)

    def _transition(
        self,
        context: PipelineRunContext,
        phase: PipelinePhase,
        operation: str,
    ) -> None:
        context.phase = phase
        Log.info(f"Phase: {phase.value}")
        self._report(EventKind.PHASE_CHANGED, context, operation)

    def _report(
        self,
        kind: EventKind,
        context: PipelineRunContext,
        operation: str,
        page_result: PageResult | None = None,
    ) -> None:
        snapshot = self._tracker.snapshot(
            phase=context.phase,
            current_page=context.current_page,
            total_pages=context.total_pages,
            operation=operation,
            completed_pages=context.completed_pages,
            successful_pages=context.successful_pages,
            failed_pages=context.failed_pages,
        )
        self._progress = snapshot
        self.events.emit(PipelineEvent(kind, snapshot, operation, page_result))

    def _build_result(self, context: PipelineRunContext) -> ProcessingResult:
        page_results = context.page_results()
        elapsed_ms = int((self._clock() - context.started_at) * 1000)
        return ProcessingResult(
            status=context.phase,
            transactions=list(context.transactions),
            validation_result=context.validation_result,
            page_results=page_results,
            security_breakdown=aggregate_security(page_results),
            analytics=ProcessingAnalytics(
                total_pages=context.total_pages,
                successful_pages=context.successful_pages,
                failed_pages=context.failed_pages,
                total_transactions=len(context.transactions),
                processing_time_ms=max(elapsed_ms, 0),
            ),
            error=context.error,
        )


def build_orchestrator(settings: Settings) -> PipelineOrchestrator:
    """Build a PipelineOrchestrator with all required adapters."""
    delegate = LLMClientFactory.create(settings)
    sanitizer = SanitizerFactory.create(settings)
    return PipelineOrchestrator(
        page_source=PdfExtractorFactory.create_page_source(settings),
        validator=StatementValidator(
            delegate=delegate,
            sanitizer=sanitizer,
            primary_enabled=settings.validation_primary_enabled,
        ),
        page_processor=PageProcessor(delegate=delegate, sanitizer=sanitizer),
        finalizer=CategoryFinalizer(delegate=delegate),
        tracker=ProgressTracker(settings.average_seconds_per_page),
        validation_page_count=settings.validation_page_count,
        page_delay_seconds=settings.page_delay_seconds,
    )
