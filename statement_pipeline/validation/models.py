from collections.abc import Sequence
from dataclasses import dataclass

from statement_pipeline.sanitization.models import SecurityBreakdown

STRATEGY_PRIMARY = "primary"
STRATEGY_FALLBACK = "fallback"
STRATEGY_ERROR = "error"


@dataclass(frozen=True)
class ValidationRequest:
    """What the caller expects the statement to be, plus the text to check."""

    bank_name: str
    month: str
    year: str
    page_text: str

    @classmethod
    def from_pages(
        cls,
        bank_name: str,
        month: str,
        year: str | int,
        pages: Sequence[str],
        page_count: int = 3,
    ) -> "ValidationRequest":
        """Build a request from the first *page_count* pages, where headers usually sit."""
        head = list(pages[: min(page_count, len(pages))])
        return cls(
            bank_name=bank_name,
            month=month,
            year=str(year),
            page_text="\n\n".join(head),
        )


@dataclass(frozen=True)
class ValidationResult:
    """Verdict on whether the statement matches the requested bank, month and year."""

    is_valid: bool
    bank_matches: bool
    month_matches: bool
    year_matches: bool
    error_message: str | None = None
    detected_bank: str | None = None
    detected_month: str | None = None
    detected_year: str | None = None
    confidence: int = 0
    security_breakdown: SecurityBreakdown | None = None
    strategy: str = STRATEGY_PRIMARY

    def __post_init__(self) -> None:
        if not 0 <= self.confidence <= 100:
            raise ValueError("ValidationResult.confidence must be within 0-100")

    @classmethod
    def rejected(cls, message: str, strategy: str = STRATEGY_ERROR) -> "ValidationResult":
        return cls(
            is_valid=False,
            bank_matches=False,
            month_matches=False,
            year_matches=False,
            error_message=message,
            confidence=0,
            strategy=strategy,
        )
