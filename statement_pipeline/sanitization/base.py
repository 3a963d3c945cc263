from abc import ABC, abstractmethod

from statement_pipeline.sanitization.models import SanitizationResult


class BaseSanitizer(ABC):
    """Contract for sensitive-data maskers run before text reaches an LLM."""

    @abstractmethod
    def sanitize(self, text: str) -> SanitizationResult:
        """Mask sensitive values in *text*.

        Returns:
            SanitizationResult with masked text, detections and per-category counts.

        Raises:
            SanitizationError: on any failure.
        """
