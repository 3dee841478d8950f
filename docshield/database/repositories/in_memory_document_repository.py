import uuid
from collections.abc import Mapping
from datetime import datetime, timezone

from docshield.database.base import BaseDocumentStore, check_query, parse_sort_key
from docshield.documents.exceptions import DocumentNotFoundError
from docshield.documents.models import DocumentChanges, DocumentRecord, NewDocument


class InMemoryDocumentRepository(BaseDocumentStore):
    """Process-local record store for development and tests.

    No persistence across runs. Applies the same lifecycle rules as the
    PostgreSQL repository through ``DocumentRecord.evolve``.
    """

    def __init__(self) -> None:
        self._records: dict[str, DocumentRecord] = {}

    def create(self, new: NewDocument) -> DocumentRecord:
        now = datetime.now(timezone.utc)
        record = DocumentRecord(
            id=str(uuid.uuid4()),
            name=new.name,
            file_kind=new.file_kind,
            source_uri=new.source_uri,
            owner=new.owner,
            status=new.status,
            created_at=now,
            updated_at=now,
        )
        self._records[record.id] = record
        return record

    def update(self, document_id: str, changes: DocumentChanges) -> DocumentRecord:
        current = self.find_by_id(document_id)
        updated = current.evolve(changes, updated_at=datetime.now(timezone.utc))
        self._records[document_id] = updated
        return updated

    def find_by_id(self, document_id: str) -> DocumentRecord:
        try:
            return self._records[document_id]
        except KeyError:
            raise DocumentNotFoundError(f"Document {document_id} not found") from None

    def filter(
        self,
        query: Mapping[str, object],
        sort_key: str = "-created_at",
        limit: int | None = None,
    ) -> list[DocumentRecord]:
        check_query(query)
        column, descending = parse_sort_key(sort_key)
        matches = [
            record
            for record in self._records.values()
            if all(getattr(record, key) == value for key, value in query.items())
        ]
        matches.sort(key=lambda record: getattr(record, column), reverse=descending)
        return matches if limit is None else matches[:limit]

    def put(self, record: DocumentRecord) -> DocumentRecord:
        """Seed a record as-is (fixtures, imports)."""
        self._records[record.id] = record
        return record
