from statement_pipeline.config.settings import Settings
from statement_pipeline.pdf.base import BasePdfExtractor
from statement_pipeline.pdf.page_source import PageSource
from statement_pipeline.pdf.pdfplumber_adapter import PdfPlumberAdapter
from statement_pipeline.pdf.pymupdf_adapter import PyMuPdfAdapter


class PdfExtractorFactory:
    """Creates PDF extractors and the page source based on settings."""

    ADAPTERS: dict[str, type[BasePdfExtractor]] = {
        "pdfplumber": PdfPlumberAdapter,
        "pymupdf": PyMuPdfAdapter,
    }

    @classmethod
    def create(cls, engine: str) -> BasePdfExtractor:
        name = engine.lower()
        adapter_cls = cls.ADAPTERS.get(name)
        if adapter_cls is None:
            raise ValueError(
                f"Unknown PDF engine '{name}'. Choose from: {list(cls.ADAPTERS)}"
            )
        return adapter_cls()

    @classmethod
    def create_page_source(cls, settings: Settings) -> PageSource:
        return PageSource(
            primary=cls.create(settings.pdf_engine),
            fallback=cls.create(settings.pdf_fallback_engine),
        )
