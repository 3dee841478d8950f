import io
from datetime import datetime, timezone

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from docshield.documents.models import (
    AnalyzedMetadata,
    DocumentRecord,
    DocumentStatus,
    PiiFinding,
    PiiKind,
    RiskLevel,
)

EXTRACTED_TEXT = "John Smith, john@x.com"


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Patient John Smith, john@x.com")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page PDF with known text on each page."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Page one content")
    c.showPage()
    c.drawString(72, 720, "Page two content")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Generate a valid PDF with no text content (blank page)."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def findings() -> tuple[PiiFinding, ...]:
    return (
        PiiFinding(kind=PiiKind.NAME, value="John Smith", confidence=0.95, location="opening line"),
        PiiFinding(kind=PiiKind.EMAIL, value="john@x.com", confidence=0.99),
    )


@pytest.fixture()
def analyzed_record(findings: tuple[PiiFinding, ...]) -> DocumentRecord:
    return DocumentRecord(
        id="doc-1",
        name="intake.pdf",
        file_kind="pdf",
        source_uri="file:///uploads/intake.pdf",
        owner="analyst@example.com",
        status=DocumentStatus.ANALYZED,
        metadata=AnalyzedMetadata(
            extracted_text=EXTRACTED_TEXT,
            analysis_summary="A name and an email address.",
            risk_level=RiskLevel.MEDIUM,
            processed_at=datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc),
        ),
        findings=findings,
        created_at=datetime(2025, 3, 1, 11, 59, tzinfo=timezone.utc),
    )
