import io

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

STATEMENT_PAGES = [
    [
        "HDFC Bank Statement",
        "Statement period: March 2024",
        "Email: customer@example.com",
        "Account No: 50100123456789",
    ],
    ["01/03/2024 SALARY CREDIT 50000.00"],
    ["15/03/2024 GROCERY STORE 1200.00"],
]


def _render(pages: list[list[str]], encrypt: str | None = None) -> bytes:
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter, encrypt=encrypt)
    for lines in pages:
        y = 720
        for line in lines:
            c.drawString(72, y, line)
            y -= 20
        c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    return _render([["Hello PDF World"]])


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page PDF with known text on each page."""
    return _render([["Page one content"], ["Page two content"]])


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Generate a valid PDF with no text content (blank page)."""
    return _render([[]])


@pytest.fixture()
def statement_pdf_bytes() -> bytes:
    """Three-page HDFC statement for March 2024 with an email and account number on page 1."""
    return _render(STATEMENT_PAGES)


@pytest.fixture()
def encrypted_pdf_bytes() -> bytes:
    """Statement PDF protected with a user password."""
    return _render(STATEMENT_PAGES, encrypt="secret")
