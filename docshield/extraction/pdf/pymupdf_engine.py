import pymupdf

from docshield.extraction.exceptions import TextExtractionError
from docshield.extraction.pdf.base import BasePdfEngine


class PyMuPdfEngine(BasePdfEngine):
    name = "pymupdf"

    def extract(self, pdf_bytes: bytes) -> str:
        try:
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                pages = [page.get_text() for page in doc]
        except Exception as exc:
            raise TextExtractionError(f"pymupdf could not read the PDF: {exc}") from exc
        return "\n".join(pages).strip()
