"""Regex-based masking of banking identifiers and contact details.

Processing flow:
1. Walk the categories in a fixed order.
2. Run each enabled category's patterns on the output of the previous one,
   so a value that is already masked cannot be matched (or counted) again.
3. Replace every match with a masked copy of the same length.
4. Return the masked text, one Detection per match, and per-category counts.

Patterns target Indian bank statements (PAN, IFSC, +91 mobiles, 6-digit PIN).
"""

from __future__ import annotations

import re
from dataclasses import fields
from typing import ClassVar

from statement_pipeline.logging.logger import Log
from statement_pipeline.sanitization.base import BaseSanitizer
from statement_pipeline.sanitization.exceptions import SanitizationError
from statement_pipeline.sanitization.models import (
    Detection,
    SanitizationConfig,
    SanitizationResult,
    SecurityBreakdown,
)

_ALNUM_RE = re.compile(r"[A-Za-z0-9]")


class Sanitizer(BaseSanitizer):
    """Deterministic masker for statement text."""

    # Order matters: formatted card numbers and mobiles would otherwise be
    # swallowed by the generic account-number digit run.
    _PATTERNS: ClassVar[list[tuple[str, list[re.Pattern[str]]]]] = [
        ("emails", [
            re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b"),
        ]),
        ("card_numbers", [
            re.compile(r"\b\d{4}[\s-]\d{4}[\s-]\d{4}[\s-]\d{4}\b"),
            re.compile(r"\b\d{4}[Xx*]{4,8}\d{4}\b"),
        ]),
        ("mobile_numbers", [
            re.compile(r"(?<!\w)\+?91[\s-]?[6-9]\d{9}\b"),
            re.compile(r"\b0[6-9]\d{9}\b"),
            re.compile(r"\b[6-9]\d{9}\b"),
        ]),
        ("pan_ids", [
            re.compile(r"\bPAN[.\s]?:?\s*[A-Z]{5}\d{4}[A-Z]\b", re.IGNORECASE),
            re.compile(r"\b[A-Z]{5}\d{4}[A-Z]\b"),
        ]),
        ("ifsc_codes", [
            re.compile(r"\bIFSC[.\s]?:?\s*[A-Z]{4}0[A-Z0-9]{6}\b", re.IGNORECASE),
            re.compile(r"\b[A-Z]{4}0[A-Z0-9]{6}\b"),
        ]),
        ("customer_ids", [
            re.compile(r"\bCUST(?:OMER)?[.\s]?ID[.\s]?:?\s*[A-Z0-9]{6,15}\b", re.IGNORECASE),
            re.compile(r"\bCIF[.\s]?(?:NO[.\s]?)?:?\s*[A-Z0-9]{6,15}\b", re.IGNORECASE),
            re.compile(r"\bID[.:]\s*[A-Z0-9]{8,15}\b", re.IGNORECASE),
        ]),
        ("account_numbers", [
            re.compile(r"\bA/?C[.\s]?NO[.\s]?:?\s*\d{9,18}\b", re.IGNORECASE),
            re.compile(r"\bACCOUNT[.\s]?(?:NUMBER|NO)[.\s]?:?\s*\d{9,18}\b", re.IGNORECASE),
            re.compile(r"\b\d{4}[\s-]?\d{4}[\s-]?\d{4}[\s-]?\d{4,6}\b"),
            re.compile(r"\b\d{9,18}\b"),
        ]),
        ("addresses", [
            re.compile(
                r"\b\d{1,4}[/\-,\s]+[A-Z][A-Za-z\s,]{10,50}[,\s]+[A-Z][A-Za-z\s]{5,20}[\s-]*\d{6}\b"
            ),
            re.compile(r"\bPIN(?:\s?CODE)?[.\s]?:?\s*\d{6}\b", re.IGNORECASE),
        ]),
        ("names", [
            re.compile(r"\b(?:MR|MRS|MS|DR)[.\s]+[A-Z][A-Z\s]{2,30}\b"),
        ]),
    ]

    def __init__(self, config: SanitizationConfig | None = None) -> None:
        self._config = config or SanitizationConfig()
        if len(self._config.mask_character) != 1:
            raise ValueError("mask_character must be a single character")

    def sanitize(self, text: str) -> SanitizationResult:
        try:
            return self._run(text)
        except SanitizationError:
            raise
        except Exception as exc:
            raise SanitizationError(f"Sanitization failed: {exc}") from exc

    def _run(self, text: str) -> SanitizationResult:
        if not text:
            return SanitizationResult(sanitized_text="")

        counts = {f.name: 0 for f in fields(SecurityBreakdown)}
        detections: list[Detection] = []
        current = text

        for category, patterns in self._PATTERNS:
            if not getattr(self._config, category):
                continue
            for pattern in patterns:
                current = self._apply(pattern, category, current, detections)
            counts[category] = sum(1 for d in detections if d.type == category)

        breakdown = SecurityBreakdown(**counts)
        if detections:
            Log.info(f"Sanitized {breakdown.total} sensitive values")
            Log.debug(f"Sanitization breakdown: {breakdown.as_dict()}")
        return SanitizationResult(
            sanitized_text=current,
            detections=detections,
            breakdown=breakdown,
        )

    def _apply(
        self,
        pattern: re.Pattern[str],
        category: str,
        text: str,
        detections: list[Detection],
    ) -> str:
        def replace(match: re.Match[str]) -> str:
            original = match.group(0)
            masked = self._mask(original)
            detections.append(
                Detection(
                    type=category,
                    original=original,
                    masked=masked,
                    position=match.start(),
                )
            )
            return masked

        return pattern.sub(replace, text)

    def _mask(self, value: str) -> str:
        char = self._config.mask_character
        if not self._config.preserve_format:
            return char * len(value)
        return _ALNUM_RE.sub(char, value)
