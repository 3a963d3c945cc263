import io

import pdfplumber
from pdfminer.pdfdocument import PDFEncryptionError

from statement_pipeline.pdf.base import BasePdfExtractor
from statement_pipeline.pdf.exceptions import PasswordProtectedPdfError, PdfExtractionError


def _is_encryption_error(exc: BaseException) -> bool:
    # pdfplumber wraps pdfminer errors, so look through the cause chain and args.
    seen: set[int] = set()
    pending: list[object] = [exc]
    while pending:
        current = pending.pop()
        if not isinstance(current, BaseException) or id(current) in seen:
            continue
        seen.add(id(current))
        if isinstance(current, PDFEncryptionError):
            return True
        pending.extend([current.__cause__, current.__context__, *current.args])
    return False


class PdfPlumberAdapter(BasePdfExtractor):
    """Extracts per-page text from PDF using pdfplumber."""

    def extract_pages(self, pdf_bytes: bytes) -> list[str]:
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                return [(page.extract_text() or "").strip() for page in pdf.pages]
        except PdfExtractionError:
            raise
        except Exception as exc:
            if _is_encryption_error(exc):
                raise PasswordProtectedPdfError("PDF is password protected") from exc
            raise PdfExtractionError(f"pdfplumber extraction failed: {exc}") from exc
