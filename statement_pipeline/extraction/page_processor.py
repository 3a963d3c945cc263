from collections.abc import Sequence

from statement_pipeline.extraction.base import BasePageProcessor
from statement_pipeline.extraction.exceptions import PageExtractionError
from statement_pipeline.extraction.models import PageExtraction, PageResult
from statement_pipeline.extraction.payload import build_page_extraction
from statement_pipeline.llm.delegate import LLMDelegate
from statement_pipeline.llm.outcome import attempt
from statement_pipeline.logging.logger import Log
from statement_pipeline.sanitization.base import BaseSanitizer
from statement_pipeline.sanitization.models import SanitizationResult


class PageProcessor(BasePageProcessor):
    """Extracts one page's transactions through the LLM delegate.

    A failing page never aborts the document: it comes back as an
    unsuccessful PageResult so the remaining pages still count.
    """

    def __init__(self, *, delegate: LLMDelegate, sanitizer: BaseSanitizer) -> None:
        self._delegate = delegate
        self._sanitizer = sanitizer

    def process_page(
        self,
        page_text: str,
        page_number: int,
        total_pages: int,
        previous_balance: float | None = None,
        user_categories: Sequence[str] = (),
    ) -> PageResult:
        Log.info(f"Processing page {page_number} of {total_pages}")

        sanitized = attempt(self._sanitize, page_text)
        if not sanitized.ok:
            return self._failed(page_number, total_pages, previous_balance, sanitized.error)
        sanitization = sanitized.unwrap()

        extraction = attempt(
            self._extract,
            sanitization.sanitized_text,
            page_number,
            total_pages,
            previous_balance,
            user_categories,
        )
        if not extraction.ok:
            return self._failed(
                page_number,
                total_pages,
                previous_balance,
                extraction.error,
                sanitization,
            )

        page = extraction.unwrap()
        result = PageResult(
            page_number=page_number,
            total_pages=total_pages,
            transactions=page.transactions,
            ending_balance=self._ending_balance(page, previous_balance),
            success=True,
            processing_notes=page.processing_notes
            or f"Processed {len(page.transactions)} transactions",
            has_incomplete_transactions=page.has_incomplete_transactions,
            balance_data=page.balance_data,
            security_breakdown=sanitization.breakdown,
        )
        Log.info(
            f"Page {page_number} processed: {len(result.transactions)} transactions, "
            f"ending balance {result.ending_balance}"
        )
        if result.has_incomplete_transactions:
            Log.warning(f"Page {page_number} has incomplete transactions")
        return result

    def _sanitize(self, page_text: str) -> SanitizationResult:
        if not page_text.strip():
            raise PageExtractionError("Page has no text content")
        return self._sanitizer.sanitize(page_text)

    def _extract(
        self,
        sanitized_text: str,
        page_number: int,
        total_pages: int,
        previous_balance: float | None,
        user_categories: Sequence[str],
    ) -> PageExtraction:
        balance_line = (
            f"- Previous page ending balance: {previous_balance}. "
            "Keep the running balance continuous with it."
            if previous_balance is not None
            else "- No previous balance is known for this page."
        )
        prompt = self._delegate.render(
            "page_extraction",
            page_number=page_number,
            total_pages=total_pages,
            previous_balance_line=balance_line,
            categories=", ".join(user_categories) if user_categories else "(none provided)",
            page_text=sanitized_text,
        )
        data = self._delegate.complete_json("page_extraction", prompt)
        return build_page_extraction(data, page_number)

    @staticmethod
    def _ending_balance(page: PageExtraction, previous_balance: float | None) -> float:
        if page.ending_balance is not None:
            return page.ending_balance
        if page.balance_data is not None and page.balance_data.closing_balance is not None:
            return page.balance_data.closing_balance
        for transaction in reversed(page.transactions):
            if transaction.balance is not None:
                return transaction.balance
        return previous_balance if previous_balance is not None else 0.0

    @staticmethod
    def _failed(
        page_number: int,
        total_pages: int,
        previous_balance: float | None,
        error: Exception | None,
        sanitization: SanitizationResult | None = None,
    ) -> PageResult:
        message = str(error) if error is not None and str(error) else "Page processing failed"
        Log.error(f"Page {page_number} error: {message}")
        return PageResult(
            page_number=page_number,
            total_pages=total_pages,
            transactions=[],
            ending_balance=previous_balance if previous_balance is not None else 0.0,
            success=False,
            error=message,
            processing_notes=f"Error: {message}",
            security_breakdown=sanitization.breakdown if sanitization is not None else None,
        )
