import pytest
from datetime import date
from decimal import Decimal

from opsflow.pdf.config import PDFSettings
from opsflow.pdf.models import PDFDocumentData, PDFLine
from opsflow.pdf.reportlab_generator import ReportLabPDFGenerator


@pytest.fixture
def generator():
    return ReportLabPDFGenerator(settings=PDFSettings(LOGO_PATH="/nonexistent/logo.png"))


def _document(**overrides) -> PDFDocumentData:
    values = dict(
        kind="invoice",
        title="Facture",
        number="INV-1-00001",
        issue_date=date(2025, 6, 1),
        secondary_date_label="Échéance",
        secondary_date=date(2025, 7, 1),
        status="issued",
        customer_name="Jean Martin",
        lines=[
            PDFLine(description="Dalle béton", quantity=Decimal("2"), unit_price=Decimal("50.00"), total=Decimal("100.00")),
            PDFLine(description="Pose portail", quantity=Decimal("1"), unit_price=Decimal("150.00"), total=Decimal("150.00")),
        ],
        subtotal=Decimal("250.00"),
        tax=Decimal("20.00"),
        discount=Decimal("10.00"),
        total=Decimal("290.00"),
        notes="Accès par le portail arrière",
    )
    values.update(overrides)
    return PDFDocumentData(**values)


def test_filename():
    assert _document().filename == "invoice-INV-1-00001.pdf"


@pytest.mark.asyncio
async def test_render_document_produces_pdf(generator):
    content = await generator.render_document(_document())

    assert content.startswith(b"%PDF")
    assert len(content) > 1000


@pytest.mark.asyncio
async def test_render_document_with_markup_in_text(generator):
    content = await generator.render_document(_document(customer_name="Dupont & <Fils>", notes=None, lines=[]))

    assert content.startswith(b"%PDF")
