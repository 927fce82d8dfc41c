import asyncio
import logging
import uuid
from typing import Dict, List, Optional

from exprparts.config import ExtractionConfig
from exprparts.errors import ExpressionError
from exprparts.events import ExpressionEvents, NullEvents
from exprparts.parts import ExpressionPart
from exprparts.scanner import ExpressionScanner

logger = logging.getLogger(__name__)


class ExtractionJob:
    """Handle for one scheduled extraction."""

    def __init__(self, job_id: str, expression: str, task: "asyncio.Task[List[ExpressionPart]]"):
        self.job_id = job_id
        self.expression = expression
        self.task = task

    def cancel(self) -> bool:
        return self.task.cancel()

    def done(self) -> bool:
        return self.task.done()

    def cancelled(self) -> bool:
        return self.task.cancelled()

    async def wait(self, timeout: Optional[float] = None) -> List[ExpressionPart]:
        """Variables found by the job; re-raises its error or CancelledError."""
        if timeout is None:
            return await asyncio.shield(self.task)
        return await asyncio.wait_for(asyncio.shield(self.task), timeout)

    def __repr__(self):
        state = "cancelled" if self.cancelled() else "done" if self.done() else "pending"
        return f"ExtractionJob({self.job_id}, {self.expression!r}, {state})"


class ExtractionService:
    """Schedules variable extraction jobs and reports them to an events sink.

    Every ``start_extraction`` call schedules a new job, even for an
    expression that is already being processed. A job waits ``due_time``
    seconds, scans the expression, and then emits ``process_completed``
    exactly once. A cancelled or failed job emits nothing.
    """

    def __init__(self, config: Optional[ExtractionConfig] = None, events: Optional[ExpressionEvents] = None):
        self.config = config or ExtractionConfig()
        self.events = events or NullEvents()
        self.jobs: Dict[str, ExtractionJob] = {}

    def start_extraction(self, expression: str) -> ExtractionJob:
        job_id = uuid.uuid4().hex
        task = asyncio.get_running_loop().create_task(self._run(job_id, expression))
        job = ExtractionJob(job_id, expression, task)
        self.jobs[job_id] = job
        task.add_done_callback(lambda t: self._finished(job_id, t))
        logger.info("Scheduled job %s for %r", job_id, expression)
        return job

    def _finished(self, job_id: str, task: "asyncio.Task") -> None:
        self.jobs.pop(job_id, None)
        # the error is surfaced by wait(); mark it retrieved for unawaited jobs
        if not task.cancelled():
            task.exception()

    async def _run(self, job_id: str, expression: str) -> List[ExpressionPart]:
        try:
            await asyncio.sleep(self.config.due_time)
            scanner = ExpressionScanner(self.config, self.events)
            result = await scanner.extract_variables(expression)
        except asyncio.CancelledError:
            logger.warning("Job %s for %r cancelled", job_id, expression)
            raise
        except ExpressionError as e:
            logger.error("Job %s for %r failed: %s", job_id, expression, e)
            raise
        except Exception:
            logger.exception("Job %s for %r failed", job_id, expression)
            raise

        self.events.process_completed(expression, result)
        logger.info("Job %s for %r completed with %d variables", job_id, expression, len(result))
        return result

    async def extract_variables(self, expression: str) -> List[ExpressionPart]:
        """Schedule a job and wait for its variables."""
        return await self.start_extraction(expression).wait()

    async def cancel_all(self) -> None:
        jobs = list(self.jobs.values())
        for job in jobs:
            job.cancel()
        await asyncio.gather(*(job.task for job in jobs), return_exceptions=True)
