from docshield.documents.exceptions import InvalidSelectionError, InvalidTransitionError
from docshield.documents.models import DocumentRecord, DocumentStatus


class RedactionSelector:
    """Ephemeral set of finding indices chosen for redaction on one document.

    Selection is only allowed while the document is ``analyzed`` and no apply
    is in flight. Nothing here is persisted.
    """

    def __init__(self, document: DocumentRecord) -> None:
        self._document = document
        self._selected: set[int] = set()
        self._locked = False

    @property
    def document(self) -> DocumentRecord:
        return self._document

    @property
    def is_enabled(self) -> bool:
        return self._document.status is DocumentStatus.ANALYZED and not self._locked

    def load(self, document: DocumentRecord) -> None:
        """Switch to another record (or a fresh value of the same one); clears the selection."""
        self._document = document
        self._selected.clear()
        self._locked = False

    def toggle(self, index: int) -> None:
        """Flip membership of ``index``.

        Raises:
            InvalidTransitionError: if selection is disabled for this document.
            InvalidSelectionError: if ``index`` is not a position in findings.
        """
        self._ensure_enabled()
        if not 0 <= index < len(self._document.findings):
            raise InvalidSelectionError(
                f"Finding index {index} is out of range for document {self._document.id} "
                f"({len(self._document.findings)} findings)"
            )
        if index in self._selected:
            self._selected.remove(index)
        else:
            self._selected.add(index)

    def selection(self) -> frozenset[int]:
        return frozenset(self._selected)

    def clear(self) -> None:
        self._selected.clear()

    def lock(self) -> None:
        self._locked = True

    def unlock(self) -> None:
        self._locked = False

    def _ensure_enabled(self) -> None:
        if self._locked:
            raise InvalidTransitionError("Selection is locked while a redaction is being applied")
        if self._document.status is not DocumentStatus.ANALYZED:
            raise InvalidTransitionError(
                f"Document {self._document.id} is '{self._document.status.value}'; "
                "findings can only be selected on analyzed documents"
            )
