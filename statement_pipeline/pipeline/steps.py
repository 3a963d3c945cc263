import time
from abc import ABC, abstractmethod
from collections.abc import Callable

from statement_pipeline.categorization.finalizer import CategoryFinalizer
from statement_pipeline.extraction.base import BasePageProcessor
from statement_pipeline.extraction.models import PageResult
from statement_pipeline.llm.outcome import attempt
from statement_pipeline.logging.logger import Log
from statement_pipeline.pdf.page_source import PageSource
from statement_pipeline.pipeline.events import EventKind
from statement_pipeline.pipeline.exceptions import StatementRejectedError
from statement_pipeline.pipeline.models import PipelineRunContext
from statement_pipeline.validation.base import BaseStatementValidator
from statement_pipeline.validation.models import ValidationRequest

Reporter = Callable[[EventKind, PipelineRunContext, str, PageResult | None], None]


class PipelineStep(ABC):
    @abstractmethod
    def run(self, context: PipelineRunContext) -> PipelineRunContext:
        raise NotImplementedError


class LoadPagesStep(PipelineStep):
    def __init__(self, page_source: PageSource) -> None:
        self._page_source = page_source

    def run(self, context: PipelineRunContext) -> PipelineRunContext:
        context.allocate_slots(self._page_source.load_pages(context.document.raw_bytes))
        Log.info(f"Loaded {context.total_pages} pages from {context.document.filename}")
        return context


class ValidateStatementStep(PipelineStep):
    def __init__(self, validator: BaseStatementValidator, page_count: int = 3) -> None:
        self._validator = validator
        self._page_count = page_count

    def run(self, context: PipelineRunContext) -> PipelineRunContext:
        request = ValidationRequest.from_pages(
            context.bank_name,
            context.month,
            context.year,
            [page.text for page in context.pages],
            page_count=self._page_count,
        )
        result = self._validator.validate(request)
        context.validation_result = result
        if not result.is_valid:
            raise StatementRejectedError(result.error_message or "Statement validation failed")
        return context


class ProcessPagesStep(PipelineStep):
    """Runs every page in order, threading the running balance through."""

    def __init__(
        self,
        page_processor: BasePageProcessor,
        report: Reporter,
        page_delay_seconds: float = 0.5,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._page_processor = page_processor
        self._report = report
        self._page_delay_seconds = page_delay_seconds
        self._sleep = sleep

    def run(self, context: PipelineRunContext) -> PipelineRunContext:
        for page in context.pages:
            context.current_page = page.index
            self._report(
                EventKind.PAGE_STARTED,
                context,
                f"Processing page {page.index} of {page.total}",
                None,
            )
            outcome = attempt(
                self._page_processor.process_page,
                page.text,
                page.index,
                page.total,
                previous_balance=context.running_balance,
                user_categories=context.user_categories,
            )
            if outcome.ok:
                result = outcome.unwrap()
            else:
                result = self._failed_page(page.index, page.total, context, outcome.error)
            context.record(result)
            status = "processed" if result.success else "failed"
            self._report(
                EventKind.PAGE_COMPLETED,
                context,
                f"Page {page.index} of {page.total} {status}",
                result,
            )
            if page.index < page.total and self._page_delay_seconds > 0:
                self._sleep(self._page_delay_seconds)
        return context

    @staticmethod
    def _failed_page(
        page_number: int, total_pages: int, context: PipelineRunContext, error: Exception | None
    ) -> PageResult:
        message = str(error) or type(error).__name__
        Log.error(f"Page {page_number} of {total_pages} raised: {message}")
        return PageResult(
            page_number=page_number,
            total_pages=total_pages,
            transactions=[],
            ending_balance=context.running_balance if context.running_balance is not None else 0.0,
            success=False,
            error=message,
            processing_notes=f"Error: {message}",
        )


class FinalizeCategoriesStep(PipelineStep):
    def __init__(self, finalizer: CategoryFinalizer) -> None:
        self._finalizer = finalizer

    def run(self, context: PipelineRunContext) -> PipelineRunContext:
        outcome = attempt(
            self._finalizer.finalize, list(context.transactions), context.user_categories
        )
        if outcome.ok:
            context.transactions = outcome.unwrap()
        else:
            Log.warning(f"Category finalization failed, keeping extracted transactions: {outcome.error}")
        return context
