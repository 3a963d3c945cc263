from abc import ABC, abstractmethod


class BasePdfExtractor(ABC):
    """Contract for all PDF text extraction adapters."""

    @abstractmethod
    def extract_pages(self, pdf_bytes: bytes) -> list[str]:
        """Extract plain text from every page of a PDF.

        Args:
            pdf_bytes: Raw PDF file content.

        Returns:
            One stripped string per page, in document order.

        Raises:
            PasswordProtectedPdfError: if the document is encrypted.
            PdfExtractionError: if extraction fails for any other reason.
        """

    def extract(self, pdf_bytes: bytes) -> str:
        """Extract the whole document as a single normalized string."""
        return "\n".join(self.extract_pages(pdf_bytes)).strip()
