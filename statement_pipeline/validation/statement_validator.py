from dataclasses import replace

from statement_pipeline.llm.delegate import LLMDelegate
from statement_pipeline.llm.exceptions import LLMError
from statement_pipeline.llm.outcome import attempt
from statement_pipeline.logging.logger import Log
from statement_pipeline.sanitization.base import BaseSanitizer
from statement_pipeline.validation.base import BaseStatementValidator
from statement_pipeline.validation.heuristic import HeuristicValidator
from statement_pipeline.validation.models import ValidationRequest, ValidationResult
from statement_pipeline.validation.payload import build_validation_result


class StatementValidator(BaseStatementValidator):
    """Primary LLM validation with a deterministic heuristic fallback.

    The primary only ever sees sanitized text. The fallback runs on the
    original text because masking can hide the bank identifiers it looks for.
    """

    def __init__(
        self,
        *,
        delegate: LLMDelegate | None,
        sanitizer: BaseSanitizer,
        fallback: HeuristicValidator | None = None,
        primary_enabled: bool = True,
    ) -> None:
        self._delegate = delegate
        self._sanitizer = sanitizer
        self._fallback = fallback or HeuristicValidator()
        self._primary_enabled = primary_enabled

    def validate(self, request: ValidationRequest) -> ValidationResult:
        Log.info(
            f"Validating statement for {request.bank_name} - {request.month}/{request.year}"
        )
        if not request.page_text.strip():
            return ValidationResult.rejected("No statement content available for validation")

        outcome = attempt(self._validate, request)
        if not outcome.ok:
            Log.error(f"Statement validation error: {outcome.error}")
            return ValidationResult.rejected(str(outcome.error) or "Validation failed")

        result = outcome.unwrap()
        if result.is_valid:
            Log.info(f"Statement validation passed ({result.strategy}, {result.confidence}%)")
        else:
            Log.warning(f"Statement validation failed: {result.error_message}")
        return result

    def _validate(self, request: ValidationRequest) -> ValidationResult:
        if self._delegate is None or not self._primary_enabled:
            Log.info("Primary validation disabled, using heuristic")
            return self._fallback.validate(request)

        sanitized = attempt(self._sanitizer.sanitize, request.page_text)
        if not sanitized.ok:
            Log.warning(f"Sanitization failed, skipping primary validation: {sanitized.error}")
            return self._fallback.validate(request)
        breakdown = sanitized.unwrap().breakdown

        primary = attempt(
            self._run_primary, self._delegate, request, sanitized.unwrap().sanitized_text
        )
        if primary.ok:
            return replace(primary.unwrap(), security_breakdown=breakdown)
        if not isinstance(primary.error, LLMError):
            raise primary.error

        Log.warning(f"Primary validation unavailable, using heuristic: {primary.error}")
        return replace(self._fallback.validate(request), security_breakdown=breakdown)

    @staticmethod
    def _run_primary(
        delegate: LLMDelegate,
        request: ValidationRequest,
        sanitized_text: str,
    ) -> ValidationResult:
        prompt = delegate.render(
            "validation",
            bank_name=request.bank_name,
            month=request.month,
            year=request.year,
            page_text=sanitized_text,
        )
        return build_validation_result(delegate.complete_json("validation", prompt))
