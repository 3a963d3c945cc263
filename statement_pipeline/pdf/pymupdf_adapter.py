import pymupdf

from statement_pipeline.pdf.base import BasePdfExtractor
from statement_pipeline.pdf.exceptions import PasswordProtectedPdfError, PdfExtractionError


class PyMuPdfAdapter(BasePdfExtractor):
    """Extracts per-page text from PDF using PyMuPDF."""

    def extract_pages(self, pdf_bytes: bytes) -> list[str]:
        try:
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                if doc.needs_pass:
                    raise PasswordProtectedPdfError("PDF is password protected")
                return [page.get_text().strip() for page in doc]
        except PdfExtractionError:
            raise
        except Exception as exc:
            raise PdfExtractionError(f"pymupdf extraction failed: {exc}") from exc
