"""
Transcription status poller for Limud.

Polls one recording's transcription status immediately and then on a
fixed interval until stopped.  Reports completion exactly once per
transition into ``completed`` and lets the user re-submit a failed job.

Poll failures are logged and polling continues on the next tick.  Retry
failures become a visible error message and never stop polling.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, Union

import structlog
from prometheus_client import Counter

from limud_common.clients.recordings import TRANSCRIBE_FAILED_MESSAGE, RecordingsApiError
from limud_common.models import Transcription
from limud_common.utils import maybe_await

from status.source import JobStatusSource
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

DEFAULT_INTERVAL_S: float = 5.0

CompletionCallback = Callable[[Transcription], Union[Awaitable[Any], Any]]

# ── Prometheus metrics ──
POLLS = Counter(
    "status_polls_total",
    "Total transcription status polls, by outcome.",
    ["outcome"],
)


class StatusPoller:
    """Observe the transcription job of one recording.

    Args:
        source: Where statuses are fetched and retries submitted.
        recording_id: Recording to observe; ``None`` means nothing is
            observed until :meth:`watch` is called.
        interval_s: Seconds between polls.
        on_transcription_complete: Called with the transcript once per
            transition into ``completed``.  May be a coroutine function.
    """

    def __init__(
        self,
        source: JobStatusSource,
        recording_id: str | None = None,
        *,
        interval_s: float = DEFAULT_INTERVAL_S,
        on_transcription_complete: CompletionCallback | None = None,
    ) -> None:
        self._source = source
        self._recording_id = recording_id
        self._interval_s = interval_s
        self._on_complete = on_transcription_complete
        self._state = PollerState()
        self._task: asyncio.Task[None] | None = None

    # ── public API ──

    @property
    def state(self) -> PollerState:
        return self._state

    @property
    def recording_id(self) -> str | None:
        return self._recording_id

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start polling; a no-op when already running or nothing is observed."""
        if self.running or not self._recording_id:
            return
        self._task = asyncio.create_task(
            self._run(),
            name=f"status-poll-{self._recording_id}",
        )
        logger.info("status_polling_started", recording_id=self._recording_id)

    async def stop(self) -> None:
        """Cancel the polling loop and wait for it to finish."""
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
            logger.info("status_polling_stopped", recording_id=self._recording_id)

    async def watch(self, recording_id: str | None) -> None:
        """Observe *recording_id* instead, resetting local state."""
        if recording_id == self._recording_id and self.running:
            return
        await self.stop()
        self._recording_id = recording_id
        self._state = PollerState()
        self.start()

    async def poll_once(self) -> PollerState:
        """Fetch the current status once and apply it.

        Returns:
            The (possibly unchanged) state after the poll.
        """
        recording_id = self._recording_id
        if not recording_id:
            return self._state
        log = logger.bind(recording_id=recording_id)
        try:
            snapshot = await self._source.fetch_status(recording_id)
        except Exception as exc:  # noqa: BLE001
            POLLS.labels(outcome="error").inc()
            log.error("status_poll_failed", error=str(exc))
            return self._state

        # A watch() may have switched recordings while the fetch was pending.
        if recording_id != self._recording_id:
            return self._state

        POLLS.labels(outcome="ok").inc()
        before = self._state
        self._state = reduce(before, SnapshotReceived(snapshot))
        if self._state.state != before.state:
            log.info("status_changed", previous=before.state.value, current=self._state.state.value)

        if newly_completed(before, self._state) and snapshot.transcription is not None:
            log.info("transcription_completed")
            if self._on_complete is not None:
                try:
                    await maybe_await(self._on_complete, snapshot.transcription)
                except Exception as exc:  # noqa: BLE001
                    log.error("completion_callback_failed", error=str(exc))
        return self._state

    async def retry(self) -> bool:
        """Re-submit the transcription job.

        Ignored while another retry is in flight.  On success the local
        state resets to ``pending``; on failure the error message is kept
        for display.

        Returns:
            ``True`` if the job was re-submitted.
        """
        recording_id = self._recording_id
        if not recording_id or self._state.retrying:
            return False
        log = logger.bind(recording_id=recording_id)
        self._state = reduce(self._state, RetryStarted())
        try:
            await self._source.request_transcription(recording_id)
        except RecordingsApiError as exc:
            log.error("transcription_retry_failed", error=str(exc))
            self._state = reduce(self._state, RetryFailed(str(exc) or TRANSCRIBE_FAILED_MESSAGE))
            return False
        except Exception as exc:  # noqa: BLE001
            log.error("transcription_retry_error", error=str(exc))
            self._state = reduce(self._state, RetryFailed(str(exc) or TRANSCRIBE_FAILED_MESSAGE))
            return False
        self._state = reduce(self._state, RetrySucceeded())
        log.info("transcription_retry_submitted")
        return True

    async def __aenter__(self) -> StatusPoller:
        self.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.stop()

    # ── internal ──

    async def _run(self) -> None:
        while True:
            await self.poll_once()
            await asyncio.sleep(self._interval_s)
