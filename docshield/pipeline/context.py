from dataclasses import dataclass

from docshield.detection.models import DetectionResult
from docshield.documents.models import DocumentRecord, file_kind_for


@dataclass(frozen=True)
class SourceFile:
    """A file handed to the pipeline by an upload action."""

    name: str
    content: bytes
    mime_type: str

    @property
    def file_kind(self) -> str:
        return file_kind_for(self.mime_type)


@dataclass(slots=True)
class PipelineContext:
    """Accumulates collaborator results as a file moves through the phases."""

    source: SourceFile
    source_uri: str = ""
    document: DocumentRecord | None = None
    extracted_text: str = ""
    detection: DetectionResult | None = None
