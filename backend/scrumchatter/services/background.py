"""
Scrum Chatter Backend: Background Executor
===========================================

What:  Runs store mutations (create / rename / soft-delete member) as
       tracked asyncio tasks, away from the code path that requested them.
How:   submit() wraps a job in a task; the task retries transient database
       errors with tenacity and logs the final failure. Callers that need
       the outcome can await the returned task; drain() awaits everything.
Who:   MemberDialogs schedules jobs here; the app lifespan drains it on
       shutdown, before the engine is disposed.

Failure Reporting:
    Mutation failures are not reported back to the dialog that triggered
    them. They are logged with the stack trace, counted in `failed_jobs`,
    and the latest one is kept in `last_error`.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, Set, TypeVar

from sqlalchemy.exc import OperationalError
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)

from scrumchatter.config import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


def is_transient_db_error(exc: BaseException) -> bool:
    """OperationalError, raised directly or wrapped into an app exception."""
    return isinstance(exc, OperationalError) or isinstance(exc.__cause__, OperationalError)


class BackgroundExecutor:
    """
    Background execution context for store work.

    Configuration (from settings):
        mutation_retry_max_attempts: attempts per job (default: 3)
        mutation_retry_min_wait / mutation_retry_max_wait: backoff bounds
    """

    def __init__(
        self,
        max_attempts: Optional[int] = None,
        min_wait: Optional[float] = None,
        max_wait: Optional[float] = None,
    ):
        self.max_attempts = max_attempts or settings.mutation_retry_max_attempts
        self.min_wait = settings.mutation_retry_min_wait if min_wait is None else min_wait
        self.max_wait = settings.mutation_retry_max_wait if max_wait is None else max_wait
        self.completed_jobs = 0
        self.failed_jobs = 0
        self.last_error: Optional[BaseException] = None
        self._tasks: Set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def submit(
        self,
        job: Callable[[], Awaitable[T]],
        description: str = "background job",
    ) -> "asyncio.Task[Optional[T]]":
        """
        Schedule `job` on the running event loop.

        Returns the task; it resolves to the job's result, or None when the
        job failed for good.
        """
        task = asyncio.get_running_loop().create_task(
            self._run(job, description), name=description,
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        logger.debug("Scheduled %s (%d pending)", description, len(self._tasks))
        return task

    async def drain(self) -> None:
        """Wait until every submitted job has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def _run(self, job: Callable[[], Awaitable[T]], description: str) -> Optional[T]:
        try:
            result = await self._run_with_retry(job, description)
        except Exception as e:
            self.failed_jobs += 1
            self.last_error = e
            logger.error("%s failed: %s", description, str(e), exc_info=True)
            return None
        self.completed_jobs += 1
        return result

    async def _run_with_retry(self, job: Callable[[], Awaitable[T]], description: str) -> T:
        retrying = AsyncRetrying(
            retry=retry_if_exception(is_transient_db_error),
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential_jitter(
                initial=self.min_wait,
                max=self.max_wait,
                jitter=self.min_wait,
            ),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                result = await job()
        return result


# ── Singleton Instance ────────────────────────────────────────────────────
background_executor = BackgroundExecutor()
