"""Turns the primary validator's JSON into a ValidationResult."""

from typing import Any

from statement_pipeline.validation.exceptions import ValidationPayloadError
from statement_pipeline.validation.models import STRATEGY_PRIMARY, ValidationResult

_FLAGS = ("is_valid", "bank_matches", "month_matches", "year_matches")
_DETECTED = ("detected_bank", "detected_month", "detected_year")


def build_validation_result(data: dict[str, Any]) -> ValidationResult:
    """Validate the delegate's answer and build a ValidationResult.

    A statement is only valid when every field matches, whatever the model
    claims in ``is_valid``.

    Raises:
        ValidationPayloadError: on a missing or mistyped field.
    """
    flags = {name: _require_bool(data, name) for name in _FLAGS}
    detected = {name: _optional_str(data, name) for name in _DETECTED}
    error_message = _optional_str(data, "error_message")
    confidence = _confidence(data.get("confidence"))

    all_match = flags["bank_matches"] and flags["month_matches"] and flags["year_matches"]
    is_valid = flags["is_valid"] and all_match
    if not is_valid and not error_message:
        error_message = _mismatch_message(flags)

    return ValidationResult(
        is_valid=is_valid,
        bank_matches=flags["bank_matches"],
        month_matches=flags["month_matches"],
        year_matches=flags["year_matches"],
        error_message=None if is_valid else error_message,
        confidence=confidence,
        strategy=STRATEGY_PRIMARY,
        **detected,
    )


def _require_bool(data: dict[str, Any], name: str) -> bool:
    if name not in data:
        raise ValidationPayloadError(f"Missing required field: {name}")
    value = data[name]
    if not isinstance(value, bool):
        raise ValidationPayloadError(f"'{name}' must be a boolean")
    return value


def _optional_str(data: dict[str, Any], name: str) -> str | None:
    value = data.get(name)
    if value is None:
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    if not isinstance(value, str):
        raise ValidationPayloadError(f"'{name}' must be a string or null")
    return value.strip() or None


def _confidence(raw: Any) -> int:
    if raw is None:
        return 0
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise ValidationPayloadError("'confidence' must be a number")
    return int(round(max(0.0, min(100.0, float(raw)))))


def _mismatch_message(flags: dict[str, bool]) -> str:
    failed = [
        label
        for label, key in (("bank", "bank_matches"), ("month", "month_matches"), ("year", "year_matches"))
        if not flags[key]
    ]
    if not failed:
        return "Statement validation failed"
    return f"Statement does not match the expected {', '.join(failed)}"
