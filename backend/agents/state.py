"""Immutable state threaded through the search workflow."""
import time
from dataclasses import dataclass, field, replace
from enum import Enum

from adapters.browser import SessionHandle
from models import RawResult, SearchOutcome, SearchParameters


class WorkflowStep(str, Enum):
    INITIALIZE = "initialize"
    AUTHENTICATE = "authenticate"
    SEARCH = "search"
    EXTRACT_RESULTS = "extract_results"
    FORMAT_RESULTS = "format_results"
    COMPLETE = "complete"
    ERROR = "error"
    FAILED = "failed"  # error step gave up; no outcome


TERMINAL_STEPS = {WorkflowStep.COMPLETE, WorkflowStep.FAILED}


@dataclass(frozen=True)
class StepError:
    message: str
    retryable: bool = False
    step: WorkflowStep | None = None


@dataclass(frozen=True)
class WorkflowState:
    params: SearchParameters
    step: WorkflowStep = WorkflowStep.INITIALIZE
    retry_count: int = 0
    error: StepError | None = None
    session: SessionHandle | None = None
    raw_results: tuple[RawResult, ...] = ()
    outcome: SearchOutcome | None = None
    started_at: float = field(default_factory=time.monotonic)

    @property
    def done(self) -> bool:
        return self.step in TERMINAL_STEPS

    def advance(self, step: WorkflowStep, **changes) -> "WorkflowState":
        return replace(self, step=step, **changes)

    def fail(self, message: str, retryable: bool) -> "WorkflowState":
        return replace(
            self,
            step=WorkflowStep.ERROR,
            error=StepError(message=message, retryable=retryable, step=self.step),
        )
