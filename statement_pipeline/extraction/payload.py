"""Validates the extraction delegate's JSON against domain invariants."""

from typing import Any

from statement_pipeline.extraction.exceptions import ExtractionPayloadError
from statement_pipeline.extraction.models import (
    EXPENSE,
    INCOME,
    BalanceData,
    PageExtraction,
    Transaction,
)

_MAX_TRANSACTIONS = 500
_VALID_TYPES = frozenset({INCOME, EXPENSE})


def build_page_extraction(data: dict[str, Any], page_number: int) -> PageExtraction:
    """Validate raw parsed JSON and build a PageExtraction.

    Raises:
        ExtractionPayloadError: on any validation failure.
    """
    if "transactions" not in data:
        raise ExtractionPayloadError("Missing required top-level field: transactions")
    transactions = _build_transactions(data["transactions"], page_number)
    ending_balance = _optional_number(data.get("ending_balance"), "'ending_balance'")
    notes = data.get("processing_notes") or ""
    if not isinstance(notes, str):
        raise ExtractionPayloadError("'processing_notes' must be a string")
    incomplete = data.get("has_incomplete_transactions", False)
    if not isinstance(incomplete, bool):
        raise ExtractionPayloadError("'has_incomplete_transactions' must be a boolean")
    return PageExtraction(
        transactions=transactions,
        ending_balance=ending_balance,
        processing_notes=notes,
        has_incomplete_transactions=incomplete,
        balance_data=_build_balance_data(data.get("balance_data")),
    )


def _build_transactions(raw: Any, page_number: int) -> list[Transaction]:
    if not isinstance(raw, list):
        raise ExtractionPayloadError("'transactions' must be a list")
    if len(raw) > _MAX_TRANSACTIONS:
        raise ExtractionPayloadError(
            f"Too many transactions: {len(raw)} (max {_MAX_TRANSACTIONS})"
        )
    return [_build_transaction(item, i, page_number) for i, item in enumerate(raw)]


def _build_transaction(raw: Any, index: int, page_number: int) -> Transaction:
    if not isinstance(raw, dict):
        raise ExtractionPayloadError(f"Transaction at index {index} must be an object")
    date = raw.get("date")
    if not date or not isinstance(date, str):
        raise ExtractionPayloadError(
            f"Transaction at index {index}: 'date' must be a non-empty string"
        )
    description = raw.get("description")
    if not description or not isinstance(description, str):
        raise ExtractionPayloadError(
            f"Transaction at index {index}: 'description' must be a non-empty string"
        )
    amount = _number(raw.get("amount"), f"Transaction at index {index}: 'amount'")
    amount, transaction_type = _signed_amount(amount, raw.get("type"), index)

    category = raw.get("category")
    if category is not None and not isinstance(category, str):
        raise ExtractionPayloadError(
            f"Transaction at index {index}: 'category' must be a string or null"
        )
    confidence = _optional_number(
        raw.get("confidence"), f"Transaction at index {index}: 'confidence'"
    )
    return Transaction(
        date=date.strip(),
        description=description.strip(),
        amount=amount,
        transaction_type=transaction_type,
        category=(category or "").strip() or None,
        balance=_optional_number(
            raw.get("balance"), f"Transaction at index {index}: 'balance'"
        ),
        confidence=int(max(0.0, min(100.0, confidence))) if confidence is not None else None,
        page_number=page_number,
    )


def _signed_amount(amount: float, raw_type: Any, index: int) -> tuple[float, str]:
    if raw_type is None:
        return amount, INCOME if amount > 0 else EXPENSE
    if raw_type not in _VALID_TYPES:
        raise ExtractionPayloadError(
            f"Transaction at index {index}: 'type' must be one of "
            f"{sorted(_VALID_TYPES)}, got {raw_type!r}"
        )
    signed = abs(amount) if raw_type == INCOME else -abs(amount)
    return signed, raw_type


def _build_balance_data(raw: Any) -> BalanceData | None:
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise ExtractionPayloadError("'balance_data' must be an object or null")
    confidence = _optional_number(
        raw.get("balance_confidence"), "'balance_data.balance_confidence'"
    )
    notes = raw.get("balance_extraction_notes") or ""
    if not isinstance(notes, str):
        raise ExtractionPayloadError("'balance_data.balance_extraction_notes' must be a string")
    return BalanceData(
        opening_balance=_optional_number(
            raw.get("opening_balance"), "'balance_data.opening_balance'"
        ),
        closing_balance=_optional_number(
            raw.get("closing_balance"), "'balance_data.closing_balance'"
        ),
        available_balance=_optional_number(
            raw.get("available_balance"), "'balance_data.available_balance'"
        ),
        current_balance=_optional_number(
            raw.get("current_balance"), "'balance_data.current_balance'"
        ),
        balance_confidence=int(max(0.0, min(100.0, confidence or 0.0))),
        balance_extraction_notes=notes,
    )


def _number(raw: Any, label: str) -> float:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise ExtractionPayloadError(f"{label} must be a number")
    return float(raw)


def _optional_number(raw: Any, label: str) -> float | None:
    if raw is None:
        return None
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise ExtractionPayloadError(f"{label} must be a number or null")
    return float(raw)
