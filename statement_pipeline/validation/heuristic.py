"""Deterministic fallback used when the primary validator cannot answer."""

from typing import ClassVar

from statement_pipeline.validation.models import (
    STRATEGY_FALLBACK,
    ValidationRequest,
    ValidationResult,
)

_MONTHS = (
    "january", "february", "march", "april", "may", "june",
    "july", "august", "september", "october", "november", "december",
)


def month_number(month: str) -> int | None:
    """Map a month name or abbreviation to 1-12 using its first three letters."""
    prefix = month.strip().lower()[:3]
    if len(prefix) < 3:
        return None
    for index, name in enumerate(_MONTHS, start=1):
        if name.startswith(prefix):
            return index
    return None


class HeuristicValidator:
    """Case-insensitive substring checks for bank, month and year."""

    VALID_CONFIDENCE: ClassVar[int] = 75
    INVALID_CONFIDENCE: ClassVar[int] = 25

    def validate(self, request: ValidationRequest) -> ValidationResult:
        text = request.page_text
        text_lower = text.lower()

        bank_matches = self._bank_matches(request.bank_name, text_lower)
        month_matches = self._month_matches(request.month, request.year, text, text_lower)
        year_matches = bool(request.year.strip()) and request.year.strip() in text

        is_valid = bank_matches and month_matches and year_matches
        return ValidationResult(
            is_valid=is_valid,
            bank_matches=bank_matches,
            month_matches=month_matches,
            year_matches=year_matches,
            error_message=None if is_valid else (
                f"Validation failed - Bank: {_ok(bank_matches)}, "
                f"Month: {_ok(month_matches)}, Year: {_ok(year_matches)}"
            ),
            detected_bank=request.bank_name if bank_matches else None,
            detected_month=request.month if month_matches else None,
            detected_year=request.year if year_matches else None,
            confidence=self.VALID_CONFIDENCE if is_valid else self.INVALID_CONFIDENCE,
            strategy=STRATEGY_FALLBACK,
        )

    @staticmethod
    def _bank_matches(bank_name: str, text_lower: str) -> bool:
        bank = bank_name.strip().lower()
        if not bank:
            return False
        candidates = {bank, bank.replace(" bank", "").strip(), bank.split()[0]}
        return any(c and c in text_lower for c in candidates)

    @staticmethod
    def _month_matches(month: str, year: str, text: str, text_lower: str) -> bool:
        name = month.strip().lower()
        if not name:
            return False
        if name in text_lower or name[:3] in text_lower:
            return True
        number = month_number(name)
        return number is not None and f"{year.strip()}-{number:02d}" in text


def _ok(flag: bool) -> str:
    return "OK" if flag else "FAIL"
