import io

import pdfplumber

from docshield.extraction.exceptions import TextExtractionError
from docshield.extraction.pdf.base import BasePdfEngine


class PdfPlumberEngine(BasePdfEngine):
    name = "pdfplumber"

    def extract(self, pdf_bytes: bytes) -> str:
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                pages = [page.extract_text() or "" for page in pdf.pages]
        except Exception as exc:
            raise TextExtractionError(f"pdfplumber could not read the PDF: {exc}") from exc
        return "\n".join(pages).strip()
