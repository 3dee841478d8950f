from abc import ABC, abstractmethod
from datetime import datetime, timezone

from docshield.database.base import BaseDocumentStore
from docshield.detection.base import BaseDetector
from docshield.documents.models import (
    AnalyzedMetadata,
    DocumentChanges,
    DocumentStatus,
    NewDocument,
)
from docshield.extraction.base import BaseTextExtractor
from docshield.identity.base import BaseIdentityProvider
from docshield.logging.logger import Log
from docshield.pipeline.context import PipelineContext
from docshield.pipeline.state import PipelinePhase
from docshield.storage.base import BaseFileStorage


class PipelineStep(ABC):
    phase: PipelinePhase

    @abstractmethod
    def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError


class UploadStep(PipelineStep):
    phase = PipelinePhase.UPLOADING

    def __init__(self, storage: BaseFileStorage) -> None:
        self._storage = storage

    def run(self, context: PipelineContext) -> PipelineContext:
        stored = self._storage.upload(context.source.content, context.source.name)
        context.source_uri = stored.uri
        Log.info(f"Uploaded '{context.source.name}' ({stored.size_bytes} bytes)")
        return context


class CreateRecordStep(PipelineStep):
    phase = PipelinePhase.CREATING_RECORD

    def __init__(self, store: BaseDocumentStore, identity: BaseIdentityProvider) -> None:
        self._store = store
        self._identity = identity

    def run(self, context: PipelineContext) -> PipelineContext:
        user = self._identity.current_user()
        context.document = self._store.create(
            NewDocument(
                name=context.source.name,
                file_kind=context.source.file_kind,
                source_uri=context.source_uri,
                owner=user.email,
                status=DocumentStatus.PROCESSING,
            )
        )
        Log.info(f"Created document {context.document.id} for {user.email}")
        return context


class ExtractContentStep(PipelineStep):
    phase = PipelinePhase.EXTRACTING_CONTENT

    def __init__(self, extractor: BaseTextExtractor) -> None:
        self._extractor = extractor

    def run(self, context: PipelineContext) -> PipelineContext:
        result = self._extractor.extract(context.source_uri, context.source.mime_type)
        context.extracted_text = result.extracted_text or ""
        if not context.extracted_text:
            Log.warning(f"No text extracted from '{context.source.name}', continuing with empty text")
        else:
            Log.info(f"Extracted {len(context.extracted_text)} chars from '{context.source.name}'")
        return context


class AnalyzePiiStep(PipelineStep):
    phase = PipelinePhase.ANALYZING_PII

    def __init__(self, detector: BaseDetector) -> None:
        self._detector = detector

    def run(self, context: PipelineContext) -> PipelineContext:
        context.detection = self._detector.detect(context.extracted_text)
        Log.info(
            f"Detected {len(context.detection.findings)} PII items in '{context.source.name}' "
            f"(risk {context.detection.risk_level.value})"
        )
        return context


class FinalizeStep(PipelineStep):
    phase = PipelinePhase.FINALIZING

    def __init__(self, store: BaseDocumentStore) -> None:
        self._store = store

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.document is None:
            raise ValueError("PipelineContext.document must be set before finalizing")
        if context.detection is None:
            raise ValueError("PipelineContext.detection must be set before finalizing")
        context.document = self._store.update(
            context.document.id,
            DocumentChanges(
                status=DocumentStatus.ANALYZED,
                findings=context.detection.findings,
                metadata=AnalyzedMetadata(
                    extracted_text=context.extracted_text,
                    analysis_summary=context.detection.summary,
                    risk_level=context.detection.risk_level,
                    processed_at=datetime.now(timezone.utc),
                ),
            ),
        )
        Log.info(f"Document {context.document.id} analyzed")
        return context
