"""
Bulk transcription status poller for Limud.

Polls the statuses of a whole list of recordings with one request per
tick, keeping a :class:`~status.state.PollerState` per recording.
Recordings the backend does not report are shown as ``not_started``.
Unlike the single-recording poller, fetch failures are surfaced as a
panel-level error message until the next successful poll.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import Any

import httpx
import structlog

from limud_common.clients.recordings import TRANSCRIBE_FAILED_MESSAGE, RecordingsApiError
from limud_common.utils import maybe_await

from status.poller import DEFAULT_INTERVAL_S, POLLS, CompletionCallback
from status.source import BulkJobStatusSource
from status.state import (
    PollerState,
    RetryFailed,
    RetryStarted,
    RetrySucceeded,
    SnapshotReceived,
    newly_completed,
    reduce,
)

logger = structlog.get_logger()

LOAD_ERROR_MESSAGE = "שגיאה בטעינת סטטוס התמלול"
CONNECTION_ERROR_MESSAGE = "שגיאה בחיבור לשרת"


class BulkStatusPoller:
    """Observe the transcription jobs of several recordings.

    Args:
        source: Status source supporting bulk lookups.
        recording_ids: Recordings to observe; blank ids are ignored.
        interval_s: Seconds between polls.
        on_transcription_complete: Called with the transcript once per
            recording transition into ``completed``.
    """

    def __init__(
        self,
        source: BulkJobStatusSource,
        recording_ids: Sequence[str] = (),
        *,
        interval_s: float = DEFAULT_INTERVAL_S,
        on_transcription_complete: CompletionCallback | None = None,
    ) -> None:
        self._source = source
        self._recording_ids = [rid for rid in recording_ids if rid]
        self._interval_s = interval_s
        self._on_complete = on_transcription_complete
        self._states: dict[str, PollerState] = {}
        self._task: asyncio.Task[None] | None = None
        self.error = ""

    # ── public API ──

    @property
    def recording_ids(self) -> list[str]:
        return list(self._recording_ids)

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def state_of(self, recording_id: str) -> PollerState:
        """Return the state of *recording_id* (``not_started`` if unknown)."""
        return self._states.get(recording_id, PollerState())

    def states(self) -> dict[str, PollerState]:
        return {rid: self.state_of(rid) for rid in self._recording_ids}

    def start(self) -> None:
        """Start polling; a no-op when running or when there is nothing to observe."""
        if self.running or not self._recording_ids:
            return
        self._task = asyncio.create_task(self._run(), name="bulk-status-poll")
        logger.info("bulk_status_polling_started", recordings=len(self._recording_ids))

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
            logger.info("bulk_status_polling_stopped")

    async def set_recordings(self, recording_ids: Sequence[str]) -> None:
        """Observe a new list of recordings, restarting the loop if it changed."""
        ids = [rid for rid in recording_ids if rid]
        if ids == self._recording_ids:
            return
        was_running = self.running
        await self.stop()
        self._recording_ids = ids
        self._states = {rid: s for rid, s in self._states.items() if rid in ids}
        if was_running:
            self.start()

    async def poll_once(self) -> None:
        """Fetch all statuses once and apply them."""
        if not self._recording_ids:
            return
        try:
            snapshots = await self._source.fetch_bulk_status(self._recording_ids)
        except RecordingsApiError as exc:
            POLLS.labels(outcome="error").inc()
            logger.error("bulk_status_poll_rejected", error=str(exc), status=exc.status_code)
            self.error = LOAD_ERROR_MESSAGE
            return
        except (httpx.HTTPError, ValueError) as exc:
            POLLS.labels(outcome="error").inc()
            logger.error("bulk_status_poll_failed", error=str(exc))
            self.error = CONNECTION_ERROR_MESSAGE
            return
        except Exception as exc:  # noqa: BLE001
            POLLS.labels(outcome="error").inc()
            logger.error("bulk_status_poll_error", error=str(exc), error_type=type(exc).__name__)
            self.error = CONNECTION_ERROR_MESSAGE
            return

        POLLS.labels(outcome="ok").inc()
        self.error = ""
        for rid, snapshot in snapshots.items():
            if rid not in self._recording_ids:
                continue
            before = self.state_of(rid)
            after = reduce(before, SnapshotReceived(snapshot))
            self._states[rid] = after
            if newly_completed(before, after) and snapshot.transcription is not None:
                logger.info("transcription_completed", recording_id=rid)
                if self._on_complete is not None:
                    try:
                        await maybe_await(self._on_complete, snapshot.transcription)
                    except Exception as exc:  # noqa: BLE001
                        logger.error("completion_callback_failed", recording_id=rid, error=str(exc))

    async def retry(self, recording_id: str) -> bool:
        """Re-submit the job of *recording_id* and mark it ``pending``."""
        state = self.state_of(recording_id)
        if state.retrying:
            return False
        log = logger.bind(recording_id=recording_id)
        self._states[recording_id] = reduce(state, RetryStarted())
        try:
            await self._source.request_transcription(recording_id)
        except Exception as exc:  # noqa: BLE001
            log.error("transcription_retry_failed", error=str(exc))
            self._states[recording_id] = reduce(
                self._states[recording_id],
                RetryFailed(str(exc) or TRANSCRIBE_FAILED_MESSAGE),
            )
            return False
        self._states[recording_id] = reduce(self._states[recording_id], RetrySucceeded())
        log.info("transcription_retry_submitted")
        return True

    async def __aenter__(self) -> BulkStatusPoller:
        self.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.stop()

    # ── internal ──

    async def _run(self) -> None:
        while True:
            await self.poll_once()
            await asyncio.sleep(self._interval_s)
