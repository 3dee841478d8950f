from abc import ABC, abstractmethod
from collections.abc import Mapping

from docshield.documents.models import DocumentChanges, DocumentRecord, NewDocument

SUPPORTED_QUERY_KEYS = frozenset({"owner", "status", "file_kind"})
SUPPORTED_SORT_KEYS = frozenset({"created_at", "updated_at", "name"})


def parse_sort_key(sort_key: str) -> tuple[str, bool]:
    """Split ``"-created_at"`` into ``("created_at", True)`` (descending).

    Raises:
        ValueError: for unknown sort columns.
    """
    descending = sort_key.startswith("-")
    column = sort_key.lstrip("-")
    if column not in SUPPORTED_SORT_KEYS:
        raise ValueError(
            f"Unknown sort key '{column}'. Choose from: {sorted(SUPPORTED_SORT_KEYS)}"
        )
    return column, descending


def check_query(query: Mapping[str, object]) -> None:
    unknown = set(query) - SUPPORTED_QUERY_KEYS
    if unknown:
        raise ValueError(
            f"Unsupported filter keys {sorted(unknown)}. Choose from: {sorted(SUPPORTED_QUERY_KEYS)}"
        )


class BaseDocumentStore(ABC):
    """Contract for the persisted-document datastore.

    Every operation either succeeds or raises; updates go through
    ``DocumentRecord.evolve`` so lifecycle invariants hold for every store.
    """

    @abstractmethod
    def create(self, new: NewDocument) -> DocumentRecord:
        """Persist a new record and return it with its assigned id."""

    @abstractmethod
    def update(self, document_id: str, changes: DocumentChanges) -> DocumentRecord:
        """Apply ``changes`` to the stored record and return the new value.

        Raises:
            DocumentNotFoundError: if no document with this id exists.
            InvalidTransitionError: if the change violates the lifecycle.
        """

    @abstractmethod
    def find_by_id(self, document_id: str) -> DocumentRecord:
        """Raises DocumentNotFoundError if missing."""

    @abstractmethod
    def filter(
        self,
        query: Mapping[str, object],
        sort_key: str = "-created_at",
        limit: int | None = None,
    ) -> list[DocumentRecord]:
        """Return records matching every key in ``query`` (exact match)."""
