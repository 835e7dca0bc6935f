"""
Transcription status state machine for Limud.

Pure reducer over the locally displayed state of one recording's
transcription job.  The effect layer (:mod:`status.poller`) feeds it
poll snapshots and retry outcomes and performs all I/O itself.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Union

from limud_common.models import JobState, JobStatus, StatusSnapshot, Transcription


@dataclass(frozen=True)
class PollerState:
    """Locally displayed state of one transcription job.

    Attributes:
        status: Last observed job status.
        transcription: Last observed transcript payload.
        error: User-visible error message (empty when none).
        retrying: Whether a retry submission is in flight.
        completion_notified: Whether the current ``completed`` state has
            already been reported to the completion listener.
    """

    status: JobStatus = field(default_factory=JobStatus)
    transcription: Transcription | None = None
    error: str = ""
    retrying: bool = False
    completion_notified: bool = False

    @property
    def state(self) -> JobState:
        return self.status.state

    @property
    def can_retry(self) -> bool:
        return self.state == JobState.FAILED and not self.retrying


@dataclass(frozen=True)
class SnapshotReceived:
    snapshot: StatusSnapshot


@dataclass(frozen=True)
class RetryStarted:
    pass


@dataclass(frozen=True)
class RetrySucceeded:
    pass


@dataclass(frozen=True)
class RetryFailed:
    message: str


Event = Union[SnapshotReceived, RetryStarted, RetrySucceeded, RetryFailed]


def is_complete(snapshot: StatusSnapshot) -> bool:
    """Whether *snapshot* reports a finished job with a transcript payload."""
    return snapshot.state == JobState.COMPLETED and snapshot.transcription is not None


def reduce(state: PollerState, event: Event) -> PollerState:
    """Return the state that follows *state* after *event*."""
    if isinstance(event, SnapshotReceived):
        snap = event.snapshot
        if snap.state == JobState.COMPLETED:
            notified = state.completion_notified or is_complete(snap)
        else:
            notified = False
        return replace(
            state,
            status=snap.status,
            transcription=snap.transcription,
            error="",
            completion_notified=notified,
        )
    if isinstance(event, RetryStarted):
        return replace(state, retrying=True, error="")
    if isinstance(event, RetrySucceeded):
        return PollerState(status=JobStatus(state=JobState.PENDING))
    if isinstance(event, RetryFailed):
        return replace(state, retrying=False, error=event.message)
    raise TypeError(f"unknown status event: {event!r}")


def newly_completed(before: PollerState, after: PollerState) -> bool:
    """Whether the transition *before* → *after* should notify completion."""
    return after.completion_notified and not before.completion_notified
