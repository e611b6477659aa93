import asyncio
from typing import Any, Awaitable, Callable, Optional, Set

from loguru import logger

from forward_relay.common.metrics import metrics


Job = Callable[[], Awaitable[Any]]


class ForwardScheduler:
    """Shared pool of background jobs on the running event loop.

    At most ``max_workers`` jobs run at once; the rest wait their turn.
    Jobs are independent: no ordering between them, and a failing job is
    logged without affecting the others or the code that submitted it.
    """

    def __init__(self, max_workers: int = 4):
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.max_workers = max_workers
        self._semaphore: Optional[asyncio.Semaphore] = None
        self._tasks: Set[asyncio.Task] = set()
        self._closed = False

    @property
    def pending(self) -> int:
        return len(self._tasks)

    @property
    def closed(self) -> bool:
        return self._closed

    def submit(self, job: Job) -> asyncio.Task:
        """Schedule ``job`` and return immediately."""
        if self._closed:
            raise RuntimeError("Scheduler is shut down")

        task = asyncio.get_running_loop().create_task(self._run(job))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        metrics.jobs_scheduled_total.inc()
        return task

    async def _run(self, job: Job) -> Any:
        if self._semaphore is None:
            self._semaphore = asyncio.Semaphore(self.max_workers)

        async with self._semaphore:
            try:
                return await job()
            except Exception as e:
                logger.error(f"Forwarding job failed: {e}")
                return None

    async def drain(self):
        """Wait until every submitted job has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def shutdown(self, timeout: Optional[float] = None):
        """Stop accepting jobs and wait for pending ones.

        Jobs still running after ``timeout`` seconds are cancelled.
        """
        self._closed = True
        if not self._tasks:
            return

        logger.info(f"Waiting for {self.pending} forwarding job(s) to finish")
        try:
            await asyncio.wait_for(self.drain(), timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Cancelling {self.pending} unfinished forwarding job(s)")
            for task in list(self._tasks):
                task.cancel()
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
