from collections.abc import Collection
from datetime import datetime, timezone

from docshield.ai.factory import ChatClientFactory
from docshield.config.settings import Settings
from docshield.database.base import BaseDocumentStore
from docshield.documents.exceptions import InvalidSelectionError, InvalidTransitionError
from docshield.documents.models import (
    AnalyzedMetadata,
    DocumentChanges,
    DocumentRecord,
    DocumentStatus,
    RedactedMetadata,
    extend_metadata,
)
from docshield.logging.logger import Log
from docshield.redaction.base import BaseRewriter
from docshield.redaction.llm_rewriter import LLMRewriter


class RedactionApplier:
    """Produces the redacted text for selected findings and commits it in one update."""

    def __init__(self, rewriter: BaseRewriter, store: BaseDocumentStore) -> None:
        self._rewriter = rewriter
        self._store = store

    def apply(self, document: DocumentRecord, selected_indices: Collection[int]) -> DocumentRecord:
        """Redact the selected findings of an analyzed document.

        Nothing is written unless the rewrite succeeds, so a failure leaves
        the stored record exactly as it was.

        Raises:
            InvalidTransitionError: if the document is not analyzed.
            InvalidSelectionError: if the selection is empty or out of range.
            CollaboratorError: if the rewrite fails.
        """
        self._validate(document, selected_indices)
        metadata = document.metadata
        if not isinstance(metadata, AnalyzedMetadata):
            raise InvalidTransitionError(
                f"Document {document.id} has no analysis to redact"
            )

        selected = set(selected_indices)
        targets = tuple(f for i, f in enumerate(document.findings) if i in selected)
        Log.info(f"Redacting {len(targets)} of {len(document.findings)} findings in {document.id}")

        result = self._rewriter.rewrite(metadata.extracted_text, targets)

        findings = tuple(
            finding.mark_redacted() if i in selected else finding
            for i, finding in enumerate(document.findings)
        )
        changes = DocumentChanges(
            status=DocumentStatus.REDACTED,
            findings=findings,
            metadata=extend_metadata(
                metadata,
                RedactedMetadata,
                redacted_text=result.redacted_text,
                redaction_summary=result.redaction_summary,
                redacted_items=targets,
                redaction_date=datetime.now(timezone.utc),
            ),
        )
        updated = self._store.update(document.id, changes)
        Log.info(f"Document {document.id} redacted")
        return updated

    @staticmethod
    def _validate(document: DocumentRecord, selected_indices: Collection[int]) -> None:
        if document.status is not DocumentStatus.ANALYZED:
            raise InvalidTransitionError(
                f"Document {document.id} is '{document.status.value}'; "
                "only analyzed documents can be redacted"
            )
        if not selected_indices:
            raise InvalidSelectionError("Select at least one finding to redact")
        invalid = sorted(i for i in selected_indices if not 0 <= i < len(document.findings))
        if invalid:
            raise InvalidSelectionError(
                f"Finding indices {invalid} are out of range for document {document.id} "
                f"({len(document.findings)} findings)"
            )


def build_applier(settings: Settings, store: BaseDocumentStore) -> RedactionApplier:
    """Build a RedactionApplier backed by the configured AI provider."""
    binding = ChatClientFactory.create(settings)
    rewriter = LLMRewriter(
        client=binding.client,
        model=binding.model,
        temperature=binding.temperature,
    )
    return RedactionApplier(rewriter, store)
