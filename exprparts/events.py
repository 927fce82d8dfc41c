"""
Notification contract for extraction progress and completion.

The scanner and the job service push two kinds of notifications:
``progress_updated`` repeatedly during a top-level scan, and
``process_completed`` once per finished job. Sinks decide how they travel:
plain callbacks, an asyncio queue, or the log.
"""

import asyncio
import dataclasses
import logging
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Callable, List, Optional, Sequence, Union

from exprparts.parts import ExpressionPart

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class ProgressUpdated:
    expression: str
    percent: Decimal


@dataclasses.dataclass(frozen=True)
class ProcessCompleted:
    expression: str
    variables: List[ExpressionPart]


Event = Union[ProgressUpdated, ProcessCompleted]


class ExpressionEvents(ABC):
    """Push-only receiver of extraction notifications."""

    @abstractmethod
    def progress_updated(self, expression: str, percent: Decimal) -> None:
        pass

    @abstractmethod
    def process_completed(self, expression: str, variables: Sequence[ExpressionPart]) -> None:
        pass


class NullEvents(ExpressionEvents):
    def progress_updated(self, expression, percent):
        pass

    def process_completed(self, expression, variables):
        pass


class CallbackEvents(ExpressionEvents):
    """Forwards notifications to caller-supplied functions."""

    def __init__(
        self,
        on_progress: Optional[Callable[[str, Decimal], None]] = None,
        on_completed: Optional[Callable[[str, List[ExpressionPart]], None]] = None,
    ):
        self.on_progress = on_progress
        self.on_completed = on_completed

    def progress_updated(self, expression, percent):
        if self.on_progress is not None:
            self.on_progress(expression, percent)

    def process_completed(self, expression, variables):
        if self.on_completed is not None:
            self.on_completed(expression, list(variables))


class ChannelEvents(ExpressionEvents):
    """Puts ProgressUpdated / ProcessCompleted values on an asyncio queue, in emission order."""

    def __init__(self, queue: Optional[asyncio.Queue] = None):
        self.queue: asyncio.Queue = queue if queue is not None else asyncio.Queue()

    def progress_updated(self, expression, percent):
        self.queue.put_nowait(ProgressUpdated(expression, percent))

    def process_completed(self, expression, variables):
        self.queue.put_nowait(ProcessCompleted(expression, list(variables)))

    async def get(self) -> Event:
        return await self.queue.get()


class LoggingEvents(ExpressionEvents):
    def __init__(self, log: Optional[logging.Logger] = None):
        self.log = log or logger

    def progress_updated(self, expression, percent):
        self.log.debug("%r: %.1f%%", expression, percent)

    def process_completed(self, expression, variables):
        names = ", ".join(v.text for v in variables) or "<none>"
        self.log.info("%r: variables %s", expression, names)
