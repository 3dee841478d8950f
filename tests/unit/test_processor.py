from pathlib import Path
from unittest.mock import MagicMock

import pytest

from docshield.database.repositories.in_memory_document_repository import (
    InMemoryDocumentRepository,
)
from docshield.detection.base import BaseDetector
from docshield.detection.exceptions import DetectionError
from docshield.detection.models import DetectionResult
from docshield.documents.exceptions import (
    IdentityError,
    InvalidTransitionError,
    TransportError,
)
from docshield.documents.models import DocumentStatus, PiiFinding, PiiKind, RiskLevel
from docshield.extraction.base import BaseTextExtractor, ExtractionResult
from docshield.extraction.document_extractor import DocumentTextExtractor
from docshield.extraction.pdf.pdfplumber_engine import PdfPlumberEngine
from docshield.identity.static_identity import StaticIdentityProvider
from docshield.pipeline.context import SourceFile
from docshield.pipeline.processor import Processor
from docshield.pipeline.state import PipelinePhase, PipelineState
from docshield.pipeline.steps import (
    AnalyzePiiStep,
    CreateRecordStep,
    ExtractContentStep,
    FinalizeStep,
    UploadStep,
)
from docshield.storage.base import BaseFileStorage, StoredFile
from docshield.storage.local_storage import LocalFileStorage

_URI = "file:///uploads/2025/03/abc.pdf"


def _source() -> SourceFile:
    return SourceFile(name="intake.pdf", content=b"%PDF-fake", mime_type="application/pdf")


def _detection() -> DetectionResult:
    return DetectionResult(
        risk_level=RiskLevel.MEDIUM,
        findings=(
            PiiFinding(kind=PiiKind.NAME, value="John Smith", confidence=0.95),
            PiiFinding(kind=PiiKind.EMAIL, value="john@x.com", confidence=0.99),
        ),
        summary="A name and an email address.",
    )


def _make_pipeline(
    email: str = "analyst@example.com",
) -> tuple[Processor, MagicMock, InMemoryDocumentRepository, MagicMock, MagicMock]:
    storage = MagicMock(spec=BaseFileStorage)
    extractor = MagicMock(spec=BaseTextExtractor)
    detector = MagicMock(spec=BaseDetector)
    store = InMemoryDocumentRepository()

    storage.upload.return_value = StoredFile(uri=_URI, size_bytes=9)
    extractor.extract.return_value = ExtractionResult(extracted_text="John Smith, john@x.com")
    detector.detect.return_value = _detection()

    processor = Processor(
        steps=[
            UploadStep(storage),
            CreateRecordStep(store, StaticIdentityProvider(email)),
            ExtractContentStep(extractor),
            AnalyzePiiStep(detector),
            FinalizeStep(store),
        ]
    )
    return processor, storage, store, extractor, detector


class TestProcessSuccess:
    def test_produces_analyzed_record(self) -> None:
        processor, storage, store, extractor, detector = _make_pipeline()

        record = processor.process(_source())

        storage.upload.assert_called_once_with(b"%PDF-fake", "intake.pdf")
        extractor.extract.assert_called_once_with(_URI, "application/pdf")
        detector.detect.assert_called_once_with("John Smith, john@x.com")
        assert record.status is DocumentStatus.ANALYZED
        assert len(record.findings) == 2
        assert record.risk_level is RiskLevel.MEDIUM
        assert record.extracted_text == "John Smith, john@x.com"
        assert record.owner == "analyst@example.com"
        assert record.file_kind == "pdf"
        assert record.source_uri == _URI
        assert store.find_by_id(record.id) == record

    def test_findings_start_unredacted(self) -> None:
        processor, *_ = _make_pipeline()
        record = processor.process(_source())
        assert not any(f.is_redacted for f in record.findings)

    def test_ends_in_complete_at_full_progress(self) -> None:
        processor, *_ = _make_pipeline()
        record = processor.process(_source())
        assert processor.state.phase is PipelinePhase.COMPLETE
        assert processor.state.progress == 100
        assert processor.state.document_id == record.id

    def test_reports_monotonic_progress_through_every_phase(self) -> None:
        processor, *_ = _make_pipeline()
        seen: list[PipelineState] = []
        processor.subscribe(seen.append)

        processor.process(_source())

        assert [s.phase for s in seen] == [
            PipelinePhase.UPLOADING,
            PipelinePhase.CREATING_RECORD,
            PipelinePhase.EXTRACTING_CONTENT,
            PipelinePhase.ANALYZING_PII,
            PipelinePhase.FINALIZING,
            PipelinePhase.COMPLETE,
        ]
        progress = [s.progress for s in seen]
        assert progress == sorted(progress)
        assert progress[-1] == 100

    def test_record_is_processing_while_extracting(self) -> None:
        processor, _storage, store, extractor, _detector = _make_pipeline()
        statuses: list[DocumentStatus] = []

        def _extract(uri: str, mime_type: str) -> ExtractionResult:
            statuses.extend(r.status for r in store.filter({}))
            return ExtractionResult(extracted_text="John Smith, john@x.com")

        extractor.extract.side_effect = _extract
        processor.process(_source())

        assert statuses == [DocumentStatus.PROCESSING]

    def test_empty_extraction_still_runs_detection(self) -> None:
        processor, _storage, _store, extractor, detector = _make_pipeline()
        extractor.extract.return_value = ExtractionResult(extracted_text="")
        detector.detect.return_value = DetectionResult(risk_level=RiskLevel.LOW)

        record = processor.process(_source())

        detector.detect.assert_called_once_with("")
        assert record.status is DocumentStatus.ANALYZED
        assert record.findings == ()
        assert record.risk_level is RiskLevel.LOW


class TestProcessFailure:
    def test_upload_failure_creates_no_record(self) -> None:
        processor, storage, store, extractor, _detector = _make_pipeline()
        storage.upload.side_effect = TransportError("disk full")

        with pytest.raises(TransportError, match="disk full"):
            processor.process(_source())

        assert store.filter({}) == []
        extractor.extract.assert_not_called()
        assert processor.state.phase is PipelinePhase.ERROR
        assert processor.state.document_id is None

    def test_detection_failure_leaves_record_processing(self) -> None:
        processor, _storage, store, _extractor, detector = _make_pipeline()
        detector.detect.side_effect = DetectionError("malformed payload")

        with pytest.raises(DetectionError):
            processor.process(_source())

        [record] = store.filter({})
        assert record.status is DocumentStatus.PROCESSING
        assert record.findings == ()
        assert processor.state.phase is PipelinePhase.ERROR
        assert processor.state.progress == 70
        assert processor.state.document_id == record.id
        assert processor.state.error_message == "malformed payload"

    def test_missing_identity_fails_in_creating_record(self) -> None:
        processor, _storage, store, extractor, _detector = _make_pipeline(email="")

        with pytest.raises(IdentityError):
            processor.process(_source())

        assert store.filter({}) == []
        extractor.extract.assert_not_called()

    def test_later_phases_never_start_after_failure(self) -> None:
        processor, _storage, _store, extractor, detector = _make_pipeline()
        extractor.extract.side_effect = TransportError("gone")

        with pytest.raises(TransportError):
            processor.process(_source())

        detector.detect.assert_not_called()


class TestRetry:
    def test_retry_runs_a_fresh_attempt(self) -> None:
        processor, storage, store, _extractor, detector = _make_pipeline()
        detector.detect.side_effect = [DetectionError("timeout"), _detection()]

        with pytest.raises(DetectionError):
            processor.process(_source())
        record = processor.retry()

        assert storage.upload.call_count == 2
        assert record.status is DocumentStatus.ANALYZED
        assert processor.state.phase is PipelinePhase.COMPLETE
        statuses = sorted(r.status.value for r in store.filter({}))
        assert statuses == ["analyzed", "processing"]

    def test_retry_without_failure_is_rejected(self) -> None:
        processor, *_ = _make_pipeline()
        processor.process(_source())
        with pytest.raises(InvalidTransitionError, match="only available after a failed run"):
            processor.retry()

    def test_retry_before_any_run_is_rejected(self) -> None:
        processor, *_ = _make_pipeline()
        with pytest.raises(InvalidTransitionError, match="Nothing to retry"):
            processor.retry()


class TestSingleRunInFlight:
    def test_rejects_resubmission_during_a_run(self) -> None:
        processor, _storage, _store, extractor, _detector = _make_pipeline()
        nested_errors: list[Exception] = []

        def _extract(uri: str, mime_type: str) -> ExtractionResult:
            try:
                processor.process(_source())
            except InvalidTransitionError as exc:
                nested_errors.append(exc)
            return ExtractionResult(extracted_text="text")

        extractor.extract.side_effect = _extract
        processor.process(_source())

        assert len(nested_errors) == 1
        assert processor.state.phase is PipelinePhase.COMPLETE


class TestProcessWithLocalCollaborators:
    def _make_local_pipeline(
        self, tmp_path: Path
    ) -> tuple[Processor, InMemoryDocumentRepository, MagicMock]:
        storage = LocalFileStorage(tmp_path)
        detector = MagicMock(spec=BaseDetector)
        detector.detect.return_value = DetectionResult(risk_level=RiskLevel.LOW)
        store = InMemoryDocumentRepository()
        processor = Processor(
            steps=[
                UploadStep(storage),
                CreateRecordStep(store, StaticIdentityProvider("analyst@example.com")),
                ExtractContentStep(DocumentTextExtractor(storage, PdfPlumberEngine())),
                AnalyzePiiStep(detector),
                FinalizeStep(store),
            ]
        )
        return processor, store, detector

    def test_pdf_named_without_extension(self, tmp_path: Path, sample_pdf_bytes: bytes) -> None:
        processor, _store, detector = self._make_local_pipeline(tmp_path)

        record = processor.process(
            SourceFile(name="scan_0001", content=sample_pdf_bytes, mime_type="application/pdf")
        )

        assert record.status is DocumentStatus.ANALYZED
        assert record.file_kind == "pdf"
        assert "John Smith" in detector.detect.call_args.args[0]

    def test_plain_text_named_json(self, tmp_path: Path) -> None:
        processor, _store, detector = self._make_local_pipeline(tmp_path)

        record = processor.process(
            SourceFile(name="contacts.json", content=b"jane@x.com", mime_type="text/plain")
        )

        assert record.status is DocumentStatus.ANALYZED
        detector.detect.assert_called_once_with("jane@x.com")
