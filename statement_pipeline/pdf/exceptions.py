class PdfExtractionError(Exception):
    """Raised when text cannot be extracted from a PDF."""


class PasswordProtectedPdfError(PdfExtractionError):
    """Raised when the PDF is encrypted and cannot be opened without a password."""
