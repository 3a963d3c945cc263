import threading
from collections.abc import Sequence
from unittest.mock import MagicMock

import pytest

from statement_pipeline.categorization.finalizer import CategoryFinalizer
from statement_pipeline.categorization.models import Category
from statement_pipeline.config.settings import Settings
from statement_pipeline.extraction.base import BasePageProcessor
from statement_pipeline.extraction.models import PageResult, Transaction
from statement_pipeline.pdf.exceptions import PasswordProtectedPdfError
from statement_pipeline.pdf.page_source import PageSource
from statement_pipeline.pipeline.events import EventKind, PipelineEvent
from statement_pipeline.pipeline.exceptions import ConcurrentRunRejectedError
from statement_pipeline.pipeline.models import PipelinePhase, ProcessingResult, StatementDocument
from statement_pipeline.pipeline.orchestrator import PipelineOrchestrator, build_orchestrator
from statement_pipeline.sanitization.models import SecurityBreakdown
from statement_pipeline.validation.base import BaseStatementValidator
from statement_pipeline.validation.models import ValidationResult

DOCUMENT = StatementDocument(raw_bytes=b"%PDF-1.4 fake")


class FakePageProcessor(BasePageProcessor):
    """Adds 100 to the incoming balance per page; listed pages fail."""

    def __init__(self, failing_pages: Sequence[int] = ()) -> None:
        self.failing_pages = set(failing_pages)
        self.calls: list[tuple[int, float | None, list[str]]] = []

    def process_page(
        self,
        page_text: str,
        page_number: int,
        total_pages: int,
        previous_balance: float | None = None,
        user_categories: Sequence[str] = (),
    ) -> PageResult:
        self.calls.append((page_number, previous_balance, list(user_categories)))
        start = previous_balance if previous_balance is not None else 0.0
        if page_number in self.failing_pages:
            return PageResult(
                page_number=page_number,
                total_pages=total_pages,
                transactions=[],
                ending_balance=start,
                success=False,
                error="extraction failed",
                processing_notes="Error: extraction failed",
            )
        return PageResult(
            page_number=page_number,
            total_pages=total_pages,
            transactions=[
                Transaction(
                    "2024-03-01",
                    f"{page_text} credit",
                    100.0,
                    "income",
                    balance=start + 100.0,
                    page_number=page_number,
                )
            ],
            ending_balance=start + 100.0,
            success=True,
            security_breakdown=SecurityBreakdown(emails=1),
        )


class RaisingPageProcessor(FakePageProcessor):
    """Raises instead of returning a failed result on listed pages."""

    def process_page(
        self,
        page_text: str,
        page_number: int,
        total_pages: int,
        previous_balance: float | None = None,
        user_categories: Sequence[str] = (),
    ) -> PageResult:
        if page_number in self.failing_pages:
            self.calls.append((page_number, previous_balance, list(user_categories)))
            raise RuntimeError(f"page {page_number} exploded")
        return super().process_page(
            page_text, page_number, total_pages, previous_balance, user_categories
        )


def _valid() -> ValidationResult:
    return ValidationResult(
        is_valid=True,
        bank_matches=True,
        month_matches=True,
        year_matches=True,
        confidence=90,
    )


def _make_orchestrator(
    pages: list[str],
    validation: ValidationResult | None = None,
    processor: FakePageProcessor | None = None,
    sleep: MagicMock | None = None,
) -> tuple[PipelineOrchestrator, MagicMock, MagicMock, MagicMock]:
    page_source = MagicMock(spec=PageSource)
    page_source.load_pages.return_value = pages
    validator = MagicMock(spec=BaseStatementValidator)
    validator.validate.return_value = validation or _valid()
    finalizer = MagicMock(spec=CategoryFinalizer)
    finalizer.finalize.side_effect = lambda transactions, categories: list(transactions)
    orchestrator = PipelineOrchestrator(
        page_source=page_source,
        validator=validator,
        page_processor=processor or FakePageProcessor(),
        finalizer=finalizer,
        sleep=sleep or MagicMock(),
    )
    return orchestrator, page_source, validator, finalizer


def _run(orchestrator: PipelineOrchestrator, **kwargs: object) -> ProcessingResult:
    return orchestrator.process_statement(DOCUMENT, "HDFC Bank", "March", "2024", **kwargs)  # type: ignore[arg-type]


class TestSuccessfulRun:
    def test_completes_with_all_transactions(self) -> None:
        orchestrator, _, _, _ = _make_orchestrator(["p1", "p2", "p3"])
        result = _run(orchestrator)
        assert result.status is PipelinePhase.COMPLETED
        assert result.succeeded
        assert result.error is None
        assert len(result.transactions) == 3
        assert result.analytics.total_pages == 3
        assert result.analytics.successful_pages == 3
        assert result.analytics.total_transactions == 3
        assert result.analytics.processing_time_ms >= 0

    def test_page_results_keep_page_order(self) -> None:
        orchestrator, _, _, _ = _make_orchestrator(["a", "b", "c", "d"])
        result = _run(orchestrator)
        assert [r.page_number for r in result.page_results] == [1, 2, 3, 4]

    def test_balance_flows_between_pages(self) -> None:
        processor = FakePageProcessor()
        orchestrator, _, _, _ = _make_orchestrator(["a", "b", "c"], processor=processor)
        result = _run(orchestrator)
        assert [call[1] for call in processor.calls] == [None, 100.0, 200.0]
        assert [r.ending_balance for r in result.page_results] == [100.0, 200.0, 300.0]

    def test_validates_first_three_pages_only(self) -> None:
        orchestrator, _, validator, _ = _make_orchestrator(["a", "b", "c", "d", "e"])
        _run(orchestrator)
        request = validator.validate.call_args.args[0]
        assert request.page_text == "a\n\nb\n\nc"
        assert request.bank_name == "HDFC Bank"

    def test_passes_category_names(self) -> None:
        processor = FakePageProcessor()
        orchestrator, _, _, finalizer = _make_orchestrator(["a"], processor=processor)
        _run(orchestrator, user_categories=[Category("Salary", "income"), Category("Food")])
        assert processor.calls[0][2] == ["Salary", "Food"]
        assert finalizer.finalize.call_args.args[1] == ["Salary", "Food"]

    def test_uses_finalized_transactions(self) -> None:
        orchestrator, _, _, finalizer = _make_orchestrator(["a", "b"])
        finalizer.finalize.side_effect = None
        finalizer.finalize.return_value = []
        result = _run(orchestrator)
        assert result.transactions == []
        assert result.analytics.total_transactions == 0

    def test_aggregates_security_counts(self) -> None:
        orchestrator, _, _, _ = _make_orchestrator(["a", "b", "c"])
        result = _run(orchestrator)
        assert result.security_breakdown.emails == 3

    def test_sleeps_between_pages_only(self) -> None:
        sleep = MagicMock()
        orchestrator, _, _, _ = _make_orchestrator(["a", "b", "c"], sleep=sleep)
        _run(orchestrator)
        assert sleep.call_count == 2
        sleep.assert_called_with(0.5)


class TestPartialFailure:
    def test_failed_page_does_not_abort_run(self) -> None:
        processor = FakePageProcessor(failing_pages=[3])
        orchestrator, _, _, _ = _make_orchestrator(["1", "2", "3", "4", "5"], processor=processor)
        result = _run(orchestrator)
        assert result.status is PipelinePhase.COMPLETED
        assert len(result.page_results) == 5
        assert result.analytics.successful_pages == 4
        assert result.analytics.failed_pages == 1
        assert len(result.transactions) == 4
        assert result.failed_page_numbers() == [3]
        assert result.page_results[2].error == "extraction failed"

    def test_failed_page_carries_balance_forward(self) -> None:
        processor = FakePageProcessor(failing_pages=[3])
        orchestrator, _, _, _ = _make_orchestrator(["1", "2", "3", "4", "5"], processor=processor)
        result = _run(orchestrator)
        assert result.page_results[2].ending_balance == 200.0
        assert processor.calls[3][1] == 200.0

    def test_raising_processor_becomes_failed_page(self) -> None:
        processor = RaisingPageProcessor(failing_pages=[3])
        orchestrator, _, _, _ = _make_orchestrator(["1", "2", "3", "4", "5"], processor=processor)
        result = _run(orchestrator)
        assert result.status is PipelinePhase.COMPLETED
        assert result.error is None
        assert len(result.page_results) == 5
        assert result.analytics.successful_pages == 4
        assert result.analytics.failed_pages == 1
        assert result.failed_page_numbers() == [3]
        failed = result.page_results[2]
        assert not failed.success
        assert failed.error == "page 3 exploded"
        assert failed.transactions == []
        assert failed.ending_balance == 200.0
        assert processor.calls[3][1] == 200.0
        assert len(result.transactions) == 4

    def test_raising_first_page_starts_from_zero(self) -> None:
        processor = RaisingPageProcessor(failing_pages=[1])
        orchestrator, _, _, _ = _make_orchestrator(["1", "2"], processor=processor)
        result = _run(orchestrator)
        assert result.status is PipelinePhase.COMPLETED
        assert result.page_results[0].ending_balance == 0.0
        assert processor.calls[1][1] == 0.0


class TestFinalizationFailure:
    def test_finalizer_error_keeps_extracted_transactions(self) -> None:
        orchestrator, _, _, finalizer = _make_orchestrator(["a"])
        finalizer.finalize.side_effect = TimeoutError("finalize timeout")
        result = _run(orchestrator)
        assert result.status is PipelinePhase.COMPLETED
        assert result.error is None
        assert len(result.transactions) == 1
        assert result.transactions[0].description == "a credit"
        assert result.analytics.total_transactions == 1
        assert not orchestrator.is_processing


class TestFailedRun:
    def test_invalid_statement_stops_before_pages(self) -> None:
        processor = FakePageProcessor()
        rejected = ValidationResult.rejected("Validation failed - Bank: FAIL, Month: OK, Year: OK")
        orchestrator, _, _, finalizer = _make_orchestrator(
            ["a", "b"], validation=rejected, processor=processor
        )
        result = _run(orchestrator)
        assert result.status is PipelinePhase.FAILED
        assert not result.succeeded
        assert result.error == "Validation failed - Bank: FAIL, Month: OK, Year: OK"
        assert result.validation_result == rejected
        assert result.page_results == []
        assert processor.calls == []
        finalizer.finalize.assert_not_called()

    def test_page_source_error_fails_run(self) -> None:
        orchestrator, page_source, validator, _ = _make_orchestrator([])
        page_source.load_pages.side_effect = PasswordProtectedPdfError("PDF is password protected")
        result = _run(orchestrator)
        assert result.status is PipelinePhase.FAILED
        assert result.error == "PDF is password protected"
        validator.validate.assert_not_called()

    def test_unexpected_exception_fails_run(self) -> None:
        orchestrator, page_source, _, finalizer = _make_orchestrator(["a"])
        page_source.load_pages.side_effect = RuntimeError("unexpected")
        result = _run(orchestrator)
        assert result.status is PipelinePhase.FAILED
        assert result.error == "unexpected"
        assert not orchestrator.is_processing
        finalizer.finalize.assert_not_called()


class TestProgressAndEvents:
    def test_emits_phases_in_order(self) -> None:
        orchestrator, _, _, _ = _make_orchestrator(["a", "b"])
        events: list[PipelineEvent] = []
        orchestrator.events.subscribe(events.append)
        _run(orchestrator)
        phases = [e.snapshot.phase for e in events if e.kind is EventKind.PHASE_CHANGED]
        assert phases == [
            PipelinePhase.VALIDATING,
            PipelinePhase.PROCESSING,
            PipelinePhase.CATEGORIZING,
        ]
        assert events[-1].kind is EventKind.RUN_TERMINATED
        assert events[-1].snapshot.phase is PipelinePhase.COMPLETED

    def test_page_events_carry_results(self) -> None:
        orchestrator, _, _, _ = _make_orchestrator(["a", "b"])
        events: list[PipelineEvent] = []
        orchestrator.events.subscribe(events.append)
        _run(orchestrator)
        completed = [e for e in events if e.kind is EventKind.PAGE_COMPLETED]
        assert [e.page_result.page_number for e in completed if e.page_result] == [1, 2]
        assert [e.snapshot.percent_complete for e in completed] == [50.0, 100.0]

    def test_counts_stay_consistent_in_every_snapshot(self) -> None:
        processor = FakePageProcessor(failing_pages=[2])
        orchestrator, _, _, _ = _make_orchestrator(["a", "b", "c"], processor=processor)
        events: list[PipelineEvent] = []
        orchestrator.events.subscribe(events.append)
        _run(orchestrator)
        for event in events:
            snapshot = event.snapshot
            assert snapshot.completed_pages == snapshot.successful_pages + snapshot.failed_pages

    def test_progress_reflects_final_state(self) -> None:
        orchestrator, _, _, _ = _make_orchestrator(["a", "b", "c"])
        assert orchestrator.progress is None
        _run(orchestrator)
        assert orchestrator.progress is not None
        assert orchestrator.progress.phase is PipelinePhase.COMPLETED
        assert orchestrator.progress.percent_complete == 100.0
        assert orchestrator.progress.estimated_seconds_remaining == 0.0

    def test_failing_listener_does_not_fail_run(self) -> None:
        orchestrator, _, _, _ = _make_orchestrator(["a"])

        def broken(event: PipelineEvent) -> None:
            raise RuntimeError("listener bug")

        orchestrator.events.subscribe(broken)
        assert _run(orchestrator).succeeded


class TestSingleFlight:
    def test_reentrant_call_is_rejected(self) -> None:
        orchestrator, _, _, _ = _make_orchestrator(["a", "b"])
        rejections: list[Exception] = []
        observed_busy: list[bool] = []

        def reenter(event: PipelineEvent) -> None:
            if event.kind is EventKind.PAGE_STARTED and event.snapshot.current_page == 1:
                observed_busy.append(orchestrator.is_processing)
                try:
                    _run(orchestrator)
                except ConcurrentRunRejectedError as exc:
                    rejections.append(exc)

        orchestrator.events.subscribe(reenter)
        result = _run(orchestrator)
        assert result.succeeded
        assert len(result.page_results) == 2
        assert observed_busy == [True]
        assert len(rejections) == 1
        assert "currently being processed" in str(rejections[0])

    def test_concurrent_thread_is_rejected(self) -> None:
        release = threading.Event()
        started = threading.Event()
        orchestrator, page_source, _, _ = _make_orchestrator(["a"])

        def blocking_load(raw_bytes: bytes) -> list[str]:
            started.set()
            release.wait(timeout=5)
            return ["a"]

        page_source.load_pages.side_effect = blocking_load
        worker = threading.Thread(target=_run, args=(orchestrator,))
        worker.start()
        try:
            assert started.wait(timeout=5)
            with pytest.raises(ConcurrentRunRejectedError):
                _run(orchestrator)
        finally:
            release.set()
            worker.join(timeout=5)
        assert not orchestrator.is_processing

    def test_next_run_allowed_after_completion(self) -> None:
        orchestrator, _, _, _ = _make_orchestrator(["a"])
        assert _run(orchestrator).succeeded
        assert _run(orchestrator).succeeded


class TestBuildOrchestrator:
    def test_builds_from_settings(self) -> None:
        orchestrator = build_orchestrator(Settings(llm_provider="example"))
        assert isinstance(orchestrator, PipelineOrchestrator)
        assert not orchestrator.is_processing
