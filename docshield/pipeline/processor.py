from collections.abc import Callable, Sequence

from docshield.ai.factory import ChatClientFactory
from docshield.config.settings import Settings
from docshield.database.base import BaseDocumentStore
from docshield.detection.llm_detector import LLMDetector
from docshield.documents.exceptions import InvalidTransitionError
from docshield.documents.models import DocumentRecord
from docshield.extraction.document_extractor import DocumentTextExtractor
from docshield.extraction.pdf.factory import PdfEngineFactory
from docshield.identity.base import BaseIdentityProvider
from docshield.identity.static_identity import StaticIdentityProvider
from docshield.logging.logger import Log
from docshield.pipeline.context import PipelineContext, SourceFile
from docshield.pipeline.state import (
    PhaseCompleted,
    PipelineEvent,
    PipelinePhase,
    PipelineState,
    RunFailed,
    RunStarted,
    transition,
)
from docshield.pipeline.steps import (
    AnalyzePiiStep,
    CreateRecordStep,
    ExtractContentStep,
    FinalizeStep,
    PipelineStep,
    UploadStep,
)
from docshield.storage.base import BaseFileStorage
from docshield.storage.local_storage import LocalFileStorage

ProgressListener = Callable[[PipelineState], None]


class Processor:
    """Drives one uploaded file through upload -> record -> extract -> detect -> finalize.

    Each step's collaborator call returns before the next phase starts. A
    failure moves the pipeline to ``error`` and re-raises; records already
    committed stay as they are. ``retry`` starts a fresh run with the same file.
    """

    def __init__(self, steps: Sequence[PipelineStep]) -> None:
        self._steps = list(steps)
        self._state = PipelineState()
        self._source: SourceFile | None = None
        self._listeners: list[ProgressListener] = []

    @property
    def state(self) -> PipelineState:
        return self._state

    def subscribe(self, listener: ProgressListener) -> None:
        self._listeners.append(listener)

    def process(self, source: SourceFile) -> DocumentRecord:
        """Run every phase for ``source`` and return the analyzed record.

        Raises:
            InvalidTransitionError: if a run is already in flight.
            TransportError, CollaboratorError: re-raised after moving to ``error``.
        """
        self._advance(RunStarted())
        self._source = source
        Log.info(f"Processing '{source.name}' ({len(source.content)} bytes, {source.mime_type})")

        context = PipelineContext(source=source)
        try:
            for step in self._steps:
                context = step.run(context)
                self._advance(
                    PhaseCompleted(
                        phase=step.phase,
                        document_id=context.document.id if context.document else None,
                    )
                )
        except Exception as exc:
            failed_phase = self._state.phase
            self._advance(RunFailed(message=str(exc)))
            Log.error(f"Processing '{source.name}' failed in phase '{failed_phase.value}': {exc}")
            raise

        if self._state.phase is not PipelinePhase.COMPLETE or context.document is None:
            raise InvalidTransitionError(
                f"Pipeline stopped in phase '{self._state.phase.value}' without completing"
            )
        Log.info(f"Processing '{source.name}' complete: document {context.document.id}")
        return context.document

    def retry(self) -> DocumentRecord:
        """Re-run the whole pipeline from the upload phase with the last file."""
        if self._source is None:
            raise InvalidTransitionError("Nothing to retry: no file has been processed")
        if self._state.phase is not PipelinePhase.ERROR:
            raise InvalidTransitionError(
                f"Retry is only available after a failed run (phase '{self._state.phase.value}')"
            )
        Log.info(f"Retrying '{self._source.name}'")
        return self.process(self._source)

    def _advance(self, event: PipelineEvent) -> None:
        self._state = transition(self._state, event)
        Log.debug(f"Pipeline phase '{self._state.phase.value}' ({self._state.progress}%)")
        for listener in self._listeners:
            listener(self._state)


def build_processor(
    settings: Settings,
    store: BaseDocumentStore,
    storage: BaseFileStorage | None = None,
    identity: BaseIdentityProvider | None = None,
) -> Processor:
    """Build a Processor with all required adapters."""
    storage = storage if storage is not None else LocalFileStorage(settings.storage_root)
    identity = (
        identity if identity is not None else StaticIdentityProvider(settings.current_user_email)
    )
    binding = ChatClientFactory.create(settings)
    detector = LLMDetector(
        client=binding.client,
        model=binding.model,
        temperature=binding.temperature,
    )
    extractor = DocumentTextExtractor(storage, PdfEngineFactory.create(settings))
    return Processor(
        steps=[
            UploadStep(storage),
            CreateRecordStep(store, identity),
            ExtractContentStep(extractor),
            AnalyzePiiStep(detector),
            FinalizeStep(store),
        ]
    )
