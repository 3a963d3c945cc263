from dataclasses import dataclass, field

from statement_pipeline.sanitization.models import SecurityBreakdown

INCOME = "income"
EXPENSE = "expense"


@dataclass(frozen=True)
class Transaction:
    """A candidate transaction extracted from a statement page, not yet persisted."""

    date: str
    description: str
    amount: float  # positive = money in, negative = money out
    transaction_type: str
    category: str | None = None
    balance: float | None = None
    confidence: int | None = None
    page_number: int | None = None


@dataclass(frozen=True)
class BalanceData:
    """Labelled balances printed on a page."""

    opening_balance: float | None = None
    closing_balance: float | None = None
    available_balance: float | None = None
    current_balance: float | None = None
    balance_confidence: int = 0
    balance_extraction_notes: str = ""


@dataclass(frozen=True)
class PageExtraction:
    """Validated output of the extraction delegate for one page."""

    transactions: list[Transaction] = field(default_factory=list)
    ending_balance: float | None = None
    processing_notes: str = ""
    has_incomplete_transactions: bool = False
    balance_data: BalanceData | None = None


@dataclass(frozen=True)
class PageResult:
    """Outcome of processing one page. Produced for every page, including failures."""

    page_number: int
    total_pages: int
    transactions: list[Transaction]
    ending_balance: float
    success: bool
    error: str | None = None
    processing_notes: str = ""
    has_incomplete_transactions: bool = False
    balance_data: BalanceData | None = None
    security_breakdown: SecurityBreakdown | None = None
