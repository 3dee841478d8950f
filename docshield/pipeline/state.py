"""Processing pipeline state machine.

``transition(state, event)`` is a pure function. Phases run strictly in
order; the only way forward is completing the current phase, and any
active phase may fail into ``error``. Progress never decreases within a run.
"""

from dataclasses import dataclass, replace
from enum import Enum

from docshield.documents.exceptions import InvalidTransitionError


class PipelinePhase(str, Enum):
    IDLE = "idle"
    UPLOADING = "uploading"
    CREATING_RECORD = "creating_record"
    EXTRACTING_CONTENT = "extracting_content"
    ANALYZING_PII = "analyzing_pii"
    FINALIZING = "finalizing"
    COMPLETE = "complete"
    ERROR = "error"


WORK_PHASES: tuple[PipelinePhase, ...] = (
    PipelinePhase.UPLOADING,
    PipelinePhase.CREATING_RECORD,
    PipelinePhase.EXTRACTING_CONTENT,
    PipelinePhase.ANALYZING_PII,
    PipelinePhase.FINALIZING,
)

PHASE_PROGRESS: dict[PipelinePhase, int] = {
    PipelinePhase.IDLE: 0,
    PipelinePhase.UPLOADING: 20,
    PipelinePhase.CREATING_RECORD: 30,
    PipelinePhase.EXTRACTING_CONTENT: 50,
    PipelinePhase.ANALYZING_PII: 70,
    PipelinePhase.FINALIZING: 90,
    PipelinePhase.COMPLETE: 100,
}

TERMINAL_PHASES = frozenset({PipelinePhase.IDLE, PipelinePhase.COMPLETE, PipelinePhase.ERROR})


@dataclass(frozen=True)
class PipelineState:
    phase: PipelinePhase = PipelinePhase.IDLE
    progress: int = 0
    document_id: str | None = None
    error_message: str | None = None

    @property
    def in_flight(self) -> bool:
        return self.phase not in TERMINAL_PHASES


@dataclass(frozen=True)
class RunStarted:
    pass


@dataclass(frozen=True)
class PhaseCompleted:
    phase: PipelinePhase
    document_id: str | None = None


@dataclass(frozen=True)
class RunFailed:
    message: str


PipelineEvent = RunStarted | PhaseCompleted | RunFailed


def transition(state: PipelineState, event: PipelineEvent) -> PipelineState:
    """Return the state that follows ``event``.

    Raises:
        InvalidTransitionError: for events the current phase does not accept.
    """
    if isinstance(event, RunStarted):
        if state.in_flight:
            raise InvalidTransitionError(
                f"A pipeline run is already in flight (phase '{state.phase.value}')"
            )
        first = WORK_PHASES[0]
        return PipelineState(phase=first, progress=PHASE_PROGRESS[first])

    if isinstance(event, RunFailed):
        if not state.in_flight:
            raise InvalidTransitionError(f"Cannot fail a run in phase '{state.phase.value}'")
        return replace(state, phase=PipelinePhase.ERROR, error_message=event.message)

    if event.phase is not state.phase or state.phase not in WORK_PHASES:
        raise InvalidTransitionError(
            f"Phase '{event.phase.value}' completed while pipeline is in '{state.phase.value}'"
        )
    position = WORK_PHASES.index(state.phase)
    following = (
        WORK_PHASES[position + 1] if position + 1 < len(WORK_PHASES) else PipelinePhase.COMPLETE
    )
    return replace(
        state,
        phase=following,
        progress=max(state.progress, PHASE_PROGRESS[following]),
        document_id=event.document_id or state.document_id,
    )
