"""
src/tools/poller.py — bounded "submit, then poll until done" driver for remote jobs

Long-running platform operations (query execution, segment jobs, ...) return a
job that has to be re-fetched until it leaves a non-terminal state. We wait for
it, but never for longer than `timeout`: a job that is still running by then is
handed back annotated with `polling=True` so the caller can check again later.

How it works:
    1) submit() once.
    2) While the job is non-terminal and time is left: sleep, then fetch_status(id).
    3) Terminal -> return it as-is. Out of time -> return the last job + marker.

Sleeping uses asyncio.sleep, so cancelling the caller's task cancels the wait.
"""


import asyncio
import time
from enum import Enum
from typing import Any, Awaitable, Callable, FrozenSet, Optional
from loguru import logger
from pydantic import BaseModel, ConfigDict

import config


class JobState(str, Enum):

    SUBMITTED = "SUBMITTED"
    IN_PROGRESS = "IN_PROGRESS"
    PENDING = "PENDING"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"
    ERROR = "ERROR"


NON_TERMINAL_STATES: FrozenSet[str] = frozenset({JobState.SUBMITTED.value, JobState.IN_PROGRESS.value, JobState.PENDING.value})
STILL_RUNNING_MESSAGE = "Query is still running. Check back later."


class Job(BaseModel):
    """
    A remote job as last reported by the platform.
    Unknown fields from the remote payload are kept (extra="allow").
    """

    model_config = ConfigDict(extra="allow")

    id: str
    state: str
    message: Optional[str] = None
    polling: Optional[bool] = None


async def run_to_completion(
        submit: Callable[[], Awaitable[Job]],
        fetch_status: Callable[[str], Awaitable[Job]],
        *,
        non_terminal_states: FrozenSet[str] = NON_TERMINAL_STATES,
        poll_interval: float = config.POLL_INTERVAL_SECONDS,
        timeout: float = config.POLL_TIMEOUT_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> Job:
    """
    Submit a job and poll it to a terminal state or until `timeout` seconds pass.

    Args:
        submit: Creates the job; called exactly once.
        fetch_status: Re-reads a job by id.
        non_terminal_states: States that mean "keep waiting".
        poll_interval: Seconds between status fetches.
        timeout: Seconds after submission before giving up waiting.
        clock/sleep: Injectable for tests.

    Returns:
        The terminal job, or a copy of the latest job with `message` and
        `polling=True` when time ran out.
    """

    started = clock()
    job = await submit()
    logger.info("Submitted job {} (state={})", job.id, job.state)

    while job.state in non_terminal_states:
        remaining = timeout - (clock() - started)
        if remaining <= 0:
            logger.info("Job {} still {} after {}s; returning for later re-check", job.id, job.state, timeout)
            return job.model_copy(update={"message": STILL_RUNNING_MESSAGE, "polling": True})

        await sleep(min(poll_interval, remaining))
        job = await fetch_status(job.id)
        logger.debug("Job {} state={}", job.id, job.state)

    return job
