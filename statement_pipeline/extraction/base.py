from abc import ABC, abstractmethod
from collections.abc import Sequence

from statement_pipeline.extraction.models import PageResult


class BasePageProcessor(ABC):
    """Contract for single-page transaction extractors."""

    @abstractmethod
    def process_page(
        self,
        page_text: str,
        page_number: int,
        total_pages: int,
        previous_balance: float | None = None,
        user_categories: Sequence[str] = (),
    ) -> PageResult:
        """Extract the transactions on one page.

        Never raises: failures come back as ``PageResult(success=False)``
        whose ending balance carries *previous_balance* forward.
        """
