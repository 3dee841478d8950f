from collections.abc import Iterable
from dataclasses import dataclass

from docshield.documents.models import DocumentRecord, DocumentStatus, RiskLevel


@dataclass(frozen=True)
class DocumentFilter:
    """Library filters; ``None`` means "all"."""

    search: str | None = None
    status: DocumentStatus | None = None
    risk_level: RiskLevel | None = None
    file_kind: str | None = None

    @property
    def active_count(self) -> int:
        return sum(
            1 for value in (self.status, self.risk_level, self.file_kind) if value is not None
        )


def filter_documents(
    records: Iterable[DocumentRecord],
    criteria: DocumentFilter,
) -> list[DocumentRecord]:
    needle = criteria.search.lower() if criteria.search else None
    return [
        record
        for record in records
        if (needle is None or needle in record.name.lower())
        and (criteria.status is None or record.status is criteria.status)
        and (criteria.risk_level is None or record.risk_level is criteria.risk_level)
        and (criteria.file_kind is None or record.file_kind == criteria.file_kind)
    ]
