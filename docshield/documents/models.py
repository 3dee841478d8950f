"""Document lifecycle domain model.

A document moves forward through ``uploaded -> processing -> analyzed ->
redacted -> exported``. Metadata is a tagged union: each status carries
exactly the metadata variant valid at that stage, so "redacted text present
iff redacted" is a property of the type rather than of a loose mapping.

Records are immutable values. Every change goes through
``DocumentRecord.evolve`` which returns a new record and rejects changes that
would regress the status or rewrite findings after analysis.
"""

from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from enum import Enum

from docshield.documents.exceptions import InvalidTransitionError


class PiiKind(str, Enum):
    NAME = "name"
    EMAIL = "email"
    PHONE = "phone"
    SSN = "ssn"
    ADDRESS = "address"
    CREDIT_CARD = "credit_card"
    DATE_OF_BIRTH = "date_of_birth"
    MEDICAL_ID = "medical_id"
    LICENSE_NUMBER = "license_number"
    OTHER = "other"


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class DocumentStatus(str, Enum):
    UPLOADED = "uploaded"
    PROCESSING = "processing"
    ANALYZED = "analyzed"
    REDACTED = "redacted"
    EXPORTED = "exported"

    @property
    def rank(self) -> int:
        return list(DocumentStatus).index(self)


@dataclass(frozen=True)
class PiiFinding:
    """Single detected PII item. Only ``is_redacted`` ever changes."""

    kind: PiiKind
    value: str
    confidence: float
    location: str | None = None
    is_redacted: bool = False

    def mark_redacted(self) -> "PiiFinding":
        return replace(self, is_redacted=True)


@dataclass(frozen=True)
class PendingMetadata:
    """Metadata of a document that has not finished analysis (no fields yet)."""


@dataclass(frozen=True)
class AnalyzedMetadata:
    extracted_text: str
    analysis_summary: str
    risk_level: RiskLevel
    processed_at: datetime


@dataclass(frozen=True)
class RedactedMetadata(AnalyzedMetadata):
    redacted_text: str
    redaction_summary: str
    redacted_items: tuple[PiiFinding, ...]
    redaction_date: datetime


@dataclass(frozen=True)
class ExportedMetadata(RedactedMetadata):
    exported_at: datetime


DocumentMetadata = PendingMetadata | AnalyzedMetadata | RedactedMetadata | ExportedMetadata

METADATA_BY_STATUS: dict[DocumentStatus, type] = {
    DocumentStatus.UPLOADED: PendingMetadata,
    DocumentStatus.PROCESSING: PendingMetadata,
    DocumentStatus.ANALYZED: AnalyzedMetadata,
    DocumentStatus.REDACTED: RedactedMetadata,
    DocumentStatus.EXPORTED: ExportedMetadata,
}


def extend_metadata(base: AnalyzedMetadata, target: type, **extra: object) -> DocumentMetadata:
    """Build a later-stage metadata variant carrying over every field of ``base``."""
    carried = {f.name: getattr(base, f.name) for f in fields(base)}
    carried.update(extra)
    return target(**carried)  # type: ignore[no-any-return]


@dataclass(frozen=True)
class DocumentChanges:
    """Partial update applied to a record by the record store."""

    status: DocumentStatus
    metadata: DocumentMetadata
    findings: tuple[PiiFinding, ...] | None = None


@dataclass(frozen=True)
class NewDocument:
    """Fields supplied when a record is first created."""

    name: str
    file_kind: str
    source_uri: str
    owner: str
    status: DocumentStatus = DocumentStatus.PROCESSING


@dataclass(frozen=True)
class DocumentRecord:
    id: str
    name: str
    file_kind: str
    source_uri: str
    owner: str
    status: DocumentStatus
    metadata: DocumentMetadata = field(default_factory=PendingMetadata)
    findings: tuple[PiiFinding, ...] = ()
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        expected = METADATA_BY_STATUS[self.status]
        if type(self.metadata) is not expected:
            raise InvalidTransitionError(
                f"Document {self.id}: status '{self.status.value}' requires "
                f"{expected.__name__}, got {type(self.metadata).__name__}"
            )
        if self.findings and self.status.rank < DocumentStatus.ANALYZED.rank:
            raise InvalidTransitionError(
                f"Document {self.id}: findings cannot exist before analysis"
            )

    @property
    def extracted_text(self) -> str | None:
        if isinstance(self.metadata, AnalyzedMetadata):
            return self.metadata.extracted_text
        return None

    @property
    def redacted_text(self) -> str | None:
        if isinstance(self.metadata, RedactedMetadata):
            return self.metadata.redacted_text
        return None

    @property
    def risk_level(self) -> RiskLevel | None:
        """Detector-reported risk for this document (not the fleet risk level)."""
        if isinstance(self.metadata, AnalyzedMetadata):
            return self.metadata.risk_level
        return None

    @property
    def has_pii(self) -> bool:
        return len(self.findings) > 0

    def evolve(
        self,
        changes: DocumentChanges,
        updated_at: datetime | None = None,
    ) -> "DocumentRecord":
        """Return a new record with ``changes`` applied.

        Raises:
            InvalidTransitionError: if the status would regress or findings
                would change in anything other than their redaction flags.
        """
        if changes.status.rank < self.status.rank:
            raise InvalidTransitionError(
                f"Document {self.id} cannot move from '{self.status.value}' "
                f"back to '{changes.status.value}'"
            )
        findings = self.findings if changes.findings is None else tuple(changes.findings)
        self._check_findings(changes.status, findings)
        return replace(
            self,
            status=changes.status,
            metadata=changes.metadata,
            findings=findings,
            updated_at=updated_at if updated_at is not None else self.updated_at,
        )

    def _check_findings(
        self,
        target: DocumentStatus,
        findings: tuple[PiiFinding, ...],
    ) -> None:
        if findings == self.findings:
            return
        if (
            self.status.rank < DocumentStatus.ANALYZED.rank
            and target is DocumentStatus.ANALYZED
        ):
            return
        if len(findings) != len(self.findings):
            raise InvalidTransitionError(
                f"Document {self.id}: findings are fixed at analysis "
                f"({len(self.findings)} items, got {len(findings)})"
            )
        for index, (before, after) in enumerate(zip(self.findings, findings)):
            if replace(after, is_redacted=before.is_redacted) != before:
                raise InvalidTransitionError(
                    f"Document {self.id}: finding {index} changed beyond its redaction flag"
                )
            if before.is_redacted and not after.is_redacted:
                raise InvalidTransitionError(
                    f"Document {self.id}: finding {index} cannot be un-redacted"
                )


def file_kind_for(mime_type: str) -> str:
    """Derive the short file kind shown in the library ('pdf', 'png', ...)."""
    mime_type = mime_type.lower()
    if "pdf" in mime_type:
        return "pdf"
    _, _, subtype = mime_type.partition("/")
    return subtype or mime_type
