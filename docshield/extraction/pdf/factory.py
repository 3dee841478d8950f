from docshield.config.settings import Settings
from docshield.extraction.pdf.base import BasePdfEngine
from docshield.extraction.pdf.pdfplumber_engine import PdfPlumberEngine
from docshield.extraction.pdf.pymupdf_engine import PyMuPdfEngine


class PdfEngineFactory:
    """Creates the PDF engine named by settings.pdf_engine."""

    ENGINES: dict[str, type[BasePdfEngine]] = {
        PdfPlumberEngine.name: PdfPlumberEngine,
        PyMuPdfEngine.name: PyMuPdfEngine,
    }

    @classmethod
    def create(cls, settings: Settings) -> BasePdfEngine:
        engine = settings.pdf_engine.lower()
        engine_cls = cls.ENGINES.get(engine)
        if engine_cls is None:
            raise ValueError(
                f"Unknown PDF engine '{engine}'. Choose from: {list(cls.ENGINES)}"
            )
        return engine_cls()
