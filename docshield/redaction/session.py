from enum import Enum

from docshield.documents.exceptions import InvalidTransitionError
from docshield.documents.models import DocumentRecord
from docshield.logging.logger import Log
from docshield.redaction.applier import RedactionApplier
from docshield.redaction.selector import RedactionSelector


class TextView(str, Enum):
    ORIGINAL = "original"
    REDACTED = "redacted"


def display_text(document: DocumentRecord, view: TextView) -> str:
    """Text shown for the chosen view.

    Raises:
        InvalidTransitionError: if the redacted view is requested before redaction.
    """
    if view is TextView.REDACTED:
        if document.redacted_text is None:
            raise InvalidTransitionError(
                f"Document {document.id} has no redacted version yet"
            )
        return document.redacted_text
    return document.extracted_text or ""


class RedactionSession:
    """Review state for one open document: selection, apply, view toggle.

    The ``applying`` flag is the only guard between selecting and applying;
    execution is single-threaded so a plain boolean is enough.
    """

    def __init__(self, applier: RedactionApplier, document: DocumentRecord) -> None:
        self._applier = applier
        self._selector = RedactionSelector(document)
        self._applying = False
        self._view = TextView.REDACTED if document.redacted_text is not None else TextView.ORIGINAL

    @property
    def document(self) -> DocumentRecord:
        return self._selector.document

    @property
    def selector(self) -> RedactionSelector:
        return self._selector

    @property
    def applying(self) -> bool:
        return self._applying

    @property
    def view(self) -> TextView:
        return self._view

    def open(self, document: DocumentRecord) -> None:
        self._selector.load(document)
        self._view = TextView.REDACTED if document.redacted_text is not None else TextView.ORIGINAL

    def toggle(self, index: int) -> None:
        self._selector.toggle(index)

    def apply(self) -> DocumentRecord:
        """Apply the current selection.

        On success the canonical record replaces the cached one, the
        selection resets, and the view switches to the redacted text. On
        failure the selection is kept so the user can retry.
        """
        if self._applying:
            raise InvalidTransitionError("A redaction is already being applied")
        document = self._selector.document
        selection = self._selector.selection()
        self._applying = True
        self._selector.lock()
        try:
            updated = self._applier.apply(document, selection)
        except Exception as exc:
            Log.error(f"Redaction of {document.id} failed: {exc}")
            self._selector.unlock()
            raise
        finally:
            self._applying = False
        self._selector.load(updated)
        self._view = TextView.REDACTED
        return updated

    def toggle_view(self) -> TextView:
        if self._view is TextView.ORIGINAL and self.document.redacted_text is None:
            raise InvalidTransitionError(
                f"Document {self.document.id} has no redacted version yet"
            )
        self._view = TextView.ORIGINAL if self._view is TextView.REDACTED else TextView.REDACTED
        return self._view

    def text(self) -> str:
        return display_text(self.document, self._view)
