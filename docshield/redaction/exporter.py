from datetime import datetime, timezone
from pathlib import Path, PurePath

from docshield.database.base import BaseDocumentStore
from docshield.documents.exceptions import InvalidTransitionError, TransportError
from docshield.documents.models import (
    DocumentChanges,
    DocumentRecord,
    DocumentStatus,
    ExportedMetadata,
    RedactedMetadata,
    extend_metadata,
)
from docshield.logging.logger import Log
from docshield.redaction.models import RedactedExport


def redacted_filename(document_name: str) -> str:
    """'report.final.pdf' -> 'report.final_REDACTED.txt'"""
    return f"{PurePath(document_name).stem}_REDACTED.txt"


class RedactedExporter:
    """Writes the redacted text of a document out and marks it exported."""

    def __init__(self, store: BaseDocumentStore, export_root: Path) -> None:
        self._store = store
        self._export_root = export_root

    def build(self, document: DocumentRecord) -> RedactedExport:
        if document.redacted_text is None:
            raise InvalidTransitionError(
                f"Document {document.id} is '{document.status.value}' and has no redacted text"
            )
        return RedactedExport(
            filename=redacted_filename(document.name),
            content=document.redacted_text,
        )

    def export_path(self, document: DocumentRecord) -> Path:
        """{export_root}/{document_id}/{stem}_REDACTED.txt"""
        return self._export_root / document.id / redacted_filename(document.name)

    def export(self, document: DocumentRecord) -> tuple[DocumentRecord, Path]:
        """Write the redacted artifact and advance the record to ``exported``.

        Each document exports into its own directory. Re-exporting rewrites
        the file and refreshes ``exported_at``. If the record update fails
        the written file is removed again.

        Raises:
            InvalidTransitionError: if the document has no redacted text.
            TransportError: if the file cannot be written.
        """
        artifact = self.build(document)
        metadata = document.metadata
        if not isinstance(metadata, RedactedMetadata):
            raise InvalidTransitionError(
                f"Document {document.id} is '{document.status.value}' and cannot be exported"
            )

        path = self.export_path(document)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(artifact.content, encoding="utf-8")
        except OSError as exc:
            raise TransportError(f"Failed to write export {path}: {exc}") from exc

        try:
            updated = self._store.update(
                document.id,
                DocumentChanges(
                    status=DocumentStatus.EXPORTED,
                    metadata=extend_metadata(
                        metadata,
                        ExportedMetadata,
                        exported_at=datetime.now(timezone.utc),
                    ),
                ),
            )
        except Exception:
            path.unlink(missing_ok=True)
            raise
        Log.info(f"Exported redacted text of {document.id} to {path}")
        return updated, path
