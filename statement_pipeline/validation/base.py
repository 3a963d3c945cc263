from abc import ABC, abstractmethod

from statement_pipeline.validation.models import ValidationRequest, ValidationResult


class BaseStatementValidator(ABC):
    """Contract for statement validators."""

    @abstractmethod
    def validate(self, request: ValidationRequest) -> ValidationResult:
        """Decide whether the pages match the requested bank, month and year.

        Never raises: every failure becomes ``is_valid=False`` with a message.
        """
