"""
Tagged outcomes emitted by provider adapters.

Adapters translate every provider response into one of these shapes; the
normalizer is the only code that turns them into a ``GenerationResult``.
"""

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from .models import ErrorKind


class StateClass(str, Enum):
    READY = "ready"
    PENDING = "pending"
    FAILED = "failed"


class StatusVocabulary(BaseModel):
    """The status values one provider API reports, grouped by meaning.

    Values outside all three groups are unexpected by definition.
    """

    model_config = ConfigDict(frozen=True)

    ready: frozenset[str]
    pending: frozenset[str]
    failed: frozenset[str]

    def classify(self, state: str | None) -> StateClass | None:
        if state is None:
            return None
        if state in self.ready:
            return StateClass.READY
        if state in self.pending:
            return StateClass.PENDING
        if state in self.failed:
            return StateClass.FAILED
        return None


class ArtifactOutcome(BaseModel):
    """The provider answered with the finished artifact."""

    kind: Literal["artifact"] = "artifact"
    data: bytes | None = None
    url: str | None = None
    mime_type: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class TaskHandleOutcome(BaseModel):
    """The provider accepted the job and handed back a task id to poll."""

    kind: Literal["task"] = "task"
    task_id: str
    metadata: dict[str, Any] = Field(default_factory=dict)


class StatusOutcome(BaseModel):
    """Raw answer to one poll, still in the provider's vocabulary."""

    kind: Literal["status"] = "status"
    task_id: str
    state: str | None
    vocabulary: StatusVocabulary
    artifact_url: str | None = None
    artifact_data: bytes | None = None
    mime_type: str | None = None
    error_message: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class FailureOutcome(BaseModel):
    """The call failed at the transport or API level."""

    kind: Literal["failure"] = "failure"
    error_kind: ErrorKind = ErrorKind.PROVIDER_ERROR
    message: str
    status_code: int | None = None


AdapterOutcome = ArtifactOutcome | TaskHandleOutcome | StatusOutcome | FailureOutcome
