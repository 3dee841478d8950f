from enum import Enum
from pathlib import PurePosixPath
from typing import ClassVar
from urllib.parse import urlparse

from docshield.extraction.base import BaseTextExtractor, ExtractionResult
from docshield.extraction.exceptions import TextExtractionError
from docshield.extraction.pdf.base import BasePdfEngine
from docshield.logging.logger import Log
from docshield.storage.base import BaseFileStorage


class ContentKind(str, Enum):
    PDF = "pdf"
    TEXT = "text"
    IMAGE = "image"
    UNKNOWN = "unknown"


class DocumentTextExtractor(BaseTextExtractor):
    """Loads stored bytes and dispatches on the declared MIME type.

    PDFs go through the configured engine, ``text/*`` is decoded, images
    yield empty text (no OCR engine is configured). The URI suffix is only
    consulted when the MIME type is generic, e.g. ``application/octet-stream``.
    """

    TEXT_SUFFIXES: ClassVar[frozenset[str]] = frozenset({".txt", ".csv", ".md", ".log"})
    IMAGE_SUFFIXES: ClassVar[frozenset[str]] = frozenset(
        {".png", ".jpg", ".jpeg", ".tif", ".tiff", ".gif", ".bmp", ".webp"}
    )

    def __init__(self, storage: BaseFileStorage, pdf_engine: BasePdfEngine) -> None:
        self._storage = storage
        self._pdf_engine = pdf_engine

    @classmethod
    def content_kind(cls, mime_type: str, uri: str) -> ContentKind:
        mime_type = mime_type.lower().split(";", 1)[0].strip()
        if "pdf" in mime_type:
            return ContentKind.PDF
        if mime_type.startswith("text/"):
            return ContentKind.TEXT
        if mime_type.startswith("image/"):
            return ContentKind.IMAGE

        suffix = PurePosixPath(urlparse(uri).path).suffix.lower()
        if suffix == ".pdf":
            return ContentKind.PDF
        if suffix in cls.TEXT_SUFFIXES:
            return ContentKind.TEXT
        if suffix in cls.IMAGE_SUFFIXES:
            return ContentKind.IMAGE
        return ContentKind.UNKNOWN

    def extract(self, uri: str, mime_type: str) -> ExtractionResult:
        kind = self.content_kind(mime_type, uri)
        if kind is ContentKind.IMAGE:
            Log.warning(f"No OCR engine configured for '{mime_type}', returning empty text")
            return ExtractionResult(extracted_text="")
        if kind is ContentKind.UNKNOWN:
            raise TextExtractionError(f"Unsupported file type '{mime_type}' for {uri}")

        content = self._storage.load(uri)
        if kind is ContentKind.PDF:
            text = self._pdf_engine.extract(content)
        else:
            text = content.decode("utf-8", errors="replace").strip()

        Log.info(f"Extracted {len(text)} chars from {len(content)} bytes ({kind.value})")
        return ExtractionResult(extracted_text=text)
