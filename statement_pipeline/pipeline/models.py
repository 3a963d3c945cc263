from dataclasses import dataclass, field
from enum import Enum

from statement_pipeline.extraction.models import PageResult, Transaction
from statement_pipeline.sanitization.models import SecurityBreakdown
from statement_pipeline.validation.models import ValidationResult


class PipelinePhase(str, Enum):
    VALIDATING = "validating"
    PROCESSING = "processing"
    CATEGORIZING = "categorizing"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class StatementDocument:
    """Uploaded statement file."""

    raw_bytes: bytes
    filename: str = "statement.pdf"


@dataclass(frozen=True)
class Page:
    """One page of extracted text. ``index`` is 1-based."""

    index: int
    total: int
    text: str


@dataclass(frozen=True)
class ProgressSnapshot:
    """Observable pipeline state at one checkpoint."""

    phase: PipelinePhase
    current_page: int
    total_pages: int
    completed_pages: int
    successful_pages: int
    failed_pages: int
    percent_complete: float
    estimated_seconds_remaining: float
    current_operation: str


@dataclass(frozen=True)
class ProcessingAnalytics:
    total_pages: int
    successful_pages: int
    failed_pages: int
    total_transactions: int
    processing_time_ms: int


@dataclass(frozen=True)
class ProcessingResult:
    """Terminal outcome of one statement run."""

    status: PipelinePhase
    transactions: list[Transaction]
    validation_result: ValidationResult | None
    page_results: list[PageResult]
    security_breakdown: SecurityBreakdown
    analytics: ProcessingAnalytics
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status is PipelinePhase.COMPLETED

    def failed_page_numbers(self) -> list[int]:
        """Pages whose source material a caller may want to resubmit."""
        return [r.page_number for r in self.page_results if not r.success]


@dataclass
class PipelineRunContext:
    """Mutable state of a single run, owned by the orchestrator for its duration."""

    document: StatementDocument
    bank_name: str
    month: str
    year: str
    user_categories: list[str]
    started_at: float
    phase: PipelinePhase = PipelinePhase.VALIDATING
    pages: list[Page] = field(default_factory=list)
    page_slots: list[PageResult | None] = field(default_factory=list)
    validation_result: ValidationResult | None = None
    current_page: int = 0
    running_balance: float | None = None
    successful_pages: int = 0
    failed_pages: int = 0
    transactions: list[Transaction] = field(default_factory=list)
    error: str | None = None

    @property
    def total_pages(self) -> int:
        return len(self.pages)

    @property
    def completed_pages(self) -> int:
        return self.successful_pages + self.failed_pages

    def allocate_slots(self, page_texts: list[str]) -> None:
        total = len(page_texts)
        self.pages = [Page(index=i + 1, total=total, text=t) for i, t in enumerate(page_texts)]
        self.page_slots = [None] * total

    def record(self, result: PageResult) -> None:
        """Store a page result in its slot and advance the counters and balance."""
        self.page_slots[result.page_number - 1] = result
        self.running_balance = result.ending_balance
        if result.success:
            self.successful_pages += 1
            self.transactions.extend(result.transactions)
        else:
            self.failed_pages += 1

    def page_results(self) -> list[PageResult]:
        return [r for r in self.page_slots if r is not None]
