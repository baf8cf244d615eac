"""Submit a recognition job and poll it to a terminal state.

WHY: File recognition is not instant. After submitting a job the client
must query its status until the service reports success or failure, and
it must give up eventually instead of hanging on a stuck job.

HOW: A small state machine, Submitting → Polling → {Succeeded | Failed |
TimedOut}. Submission is one call. Polling sleeps a fixed interval before
every status check and stops after max_attempts checks. The service is
anything implementing RecognitionService, so tests drive the loop with
scripted statuses and a fake sleep.

RULES:
- Submission failures raise JobCreationError immediately (no retry)
- A failed status check is logged and counts as one attempt; the loop goes on
- Succeeded returns the SentenceSource and stops polling at once
- Failed raises RecognitionFailedError with the remote message
- Exhausting max_attempts raises RecognitionTimeoutError
- One job at a time; checks are strictly sequential
- The optional cancel_event is checked before every status check
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Protocol

from pr_autosub.config import POLL_INTERVAL_S, POLL_MAX_ATTEMPTS
from pr_autosub.core.ir import (
    Failed,
    JobHandle,
    JobStatus,
    RecognitionOptions,
    SentenceSource,
    Succeeded,
)
from pr_autosub.errors import (
    JobCreationError,
    PipelineCancelledError,
    RecognitionFailedError,
    RecognitionTimeoutError,
    ServiceError,
)

logger = logging.getLogger(__name__)

_PROGRESS_EVERY = 5


class RecognitionService(Protocol):
    """The two remote calls the poller needs."""

    async def create_task(self, audio_url: str, options: RecognitionOptions) -> JobHandle:
        ...

    async def describe_task(self, handle: JobHandle) -> JobStatus:
        ...


async def submit_and_wait(
    service: RecognitionService,
    audio_url: str,
    options: RecognitionOptions,
    on_status: Callable[[str], None] | None = None,
    *,
    interval_s: float = POLL_INTERVAL_S,
    max_attempts: int = POLL_MAX_ATTEMPTS,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    cancel_event: asyncio.Event | None = None,
) -> SentenceSource:
    """Create a recognition job for audio_url and wait for its result.

    Args:
        service: Remote recognition service.
        audio_url: Signed URL the service fetches the audio from.
        options: Engine model, hotwords, number conversion, etc.
        on_status: Optional callback for status updates.
        interval_s: Delay before each status check.
        max_attempts: Maximum number of status checks.
        sleep: Awaitable delay function (injected by tests).
        cancel_event: When set, the wait ends with PipelineCancelledError.

    Returns:
        The StructuredResult or TextResult of the finished job.
    """
    try:
        handle = await service.create_task(audio_url, options)
    except ServiceError as exc:
        raise JobCreationError(str(exc), cause=exc) from exc

    _emit(on_status, "Recognition task submitted, TaskId: {}".format(handle.task_id))

    return await poll_until_complete(
        service,
        handle,
        on_status,
        interval_s=interval_s,
        max_attempts=max_attempts,
        sleep=sleep,
        cancel_event=cancel_event,
    )


async def poll_until_complete(
    service: RecognitionService,
    handle: JobHandle,
    on_status: Callable[[str], None] | None = None,
    *,
    interval_s: float = POLL_INTERVAL_S,
    max_attempts: int = POLL_MAX_ATTEMPTS,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    cancel_event: asyncio.Event | None = None,
) -> SentenceSource:
    """Poll an existing job until it succeeds, fails, or runs out of attempts."""
    _emit(on_status, "Waiting for recognition result...")

    for attempt in range(1, max_attempts + 1):
        await sleep(interval_s)

        if cancel_event is not None and cancel_event.is_set():
            raise PipelineCancelledError(
                "cancelled while waiting for task {}".format(handle.task_id)
            )

        try:
            status = await service.describe_task(handle)
        except ServiceError as exc:
            _emit(
                on_status,
                "Status check failed (retrying): {}".format(exc),
                level=logging.WARNING,
            )
            continue

        if isinstance(status, Succeeded):
            _emit(on_status, "Recognition complete.")
            return status.source

        if isinstance(status, Failed):
            raise RecognitionFailedError(status.reason)

        if attempt % _PROGRESS_EVERY == 1:
            _emit(on_status, "Recognizing... ({})".format(status.status))

    raise RecognitionTimeoutError(handle.task_id, max_attempts)


def _emit(
    on_status: Callable[[str], None] | None,
    message: str,
    level: int = logging.INFO,
) -> None:
    logger.log(level, message)
    if on_status:
        on_status(message)
