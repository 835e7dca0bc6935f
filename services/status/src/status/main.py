"""
Command-line watcher for a recording's transcription job.

Polls the recordings API until the job completes or fails, logging
every status change, and prints the status lines once it settles.

Usage::

    limud-status-watch <recording_id> [--interval 5] [--retry-on-failure]
"""

from __future__ import annotations

import argparse
import asyncio
import sys

import structlog

from limud_common.clients.recordings import RecordingsApiClient
from limud_common.config import get_settings
from limud_common.logging import configure_logging
from limud_common.models import JobState

from status.display import describe
from status.poller import StatusPoller
from status.source import HttpJobStatusSource, JobStatusSource

logger = structlog.get_logger()


async def watch_until_settled(
    source: JobStatusSource,
    recording_id: str,
    *,
    interval_s: float,
    retry_on_failure: bool = False,
) -> StatusPoller:
    """Poll *recording_id* until its job is ``completed`` or ``failed``.

    With *retry_on_failure* a failed job is re-submitted once and
    watched again.

    Returns:
        The poller, stopped, holding the final state.
    """
    poller = StatusPoller(source, recording_id, interval_s=interval_s)
    retried = False
    while True:
        state = await poller.poll_once()
        if state.state == JobState.COMPLETED and state.transcription is not None:
            break
        if state.state == JobState.FAILED:
            if retry_on_failure and not retried:
                retried = True
                if await poller.retry():
                    continue
            break
        await asyncio.sleep(interval_s)
    return poller


async def _main(args: argparse.Namespace) -> int:
    settings = get_settings()
    client = RecordingsApiClient.from_settings(settings)
    source = HttpJobStatusSource.from_settings(client, settings)
    interval = args.interval or settings.status_poll_interval_s
    try:
        poller = await watch_until_settled(
            source,
            args.recording_id,
            interval_s=interval,
            retry_on_failure=args.retry_on_failure,
        )
    finally:
        await client.close()

    for line in describe(poller.state):
        print(line)
    return 0 if poller.state.state == JobState.COMPLETED else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Watch a recording's transcription job.")
    parser.add_argument("recording_id", help="Recording id on the Limud backend.")
    parser.add_argument(
        "--interval",
        type=float,
        default=None,
        help="Seconds between polls (default: LIMUD_STATUS_POLL_INTERVAL_S).",
    )
    parser.add_argument(
        "--retry-on-failure",
        action="store_true",
        help="Re-submit the job once if it fails.",
    )
    return parser


def run(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging("status", get_settings().log_level)
    try:
        return asyncio.run(_main(args))
    except KeyboardInterrupt:
        logger.info("status_watch_interrupted", recording_id=args.recording_id)
        return 130


if __name__ == "__main__":
    sys.exit(run())
