from abc import ABC, abstractmethod


class BasePdfEngine(ABC):
    """Contract for PDF text extraction engines."""

    name: str = ""

    @abstractmethod
    def extract(self, pdf_bytes: bytes) -> str:
        """Extract plain text from PDF bytes, pages joined by newlines.

        Raises:
            TextExtractionError: if the PDF cannot be parsed.
        """
