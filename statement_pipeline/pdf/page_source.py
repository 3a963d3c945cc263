from statement_pipeline.logging.logger import Log
from statement_pipeline.pdf.base import BasePdfExtractor
from statement_pipeline.pdf.exceptions import PasswordProtectedPdfError, PdfExtractionError


class PageSource:
    """Turns a statement PDF into an ordered list of page texts.

    Per-page extraction runs on the primary engine. If it fails, the
    fallback engine's whole-document text is returned as a single page.
    Encrypted documents are never retried on the fallback.
    """

    def __init__(
        self,
        primary: BasePdfExtractor,
        fallback: BasePdfExtractor | None = None,
    ) -> None:
        self._primary = primary
        self._fallback = fallback

    def load_pages(self, pdf_bytes: bytes) -> list[str]:
        Log.info(f"Extracting pages from {len(pdf_bytes)} bytes")
        try:
            pages = self._primary.extract_pages(pdf_bytes)
        except PasswordProtectedPdfError:
            raise
        except PdfExtractionError as exc:
            if self._fallback is None:
                raise
            Log.warning(f"Page extraction failed, using single-page fallback: {exc}")
            text = self._fallback.extract(pdf_bytes)
            return [text] if text else []

        Log.info(f"Extracted {len(pages)} pages")
        return pages
