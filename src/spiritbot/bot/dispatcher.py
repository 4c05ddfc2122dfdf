"""
Task-per-event dispatch with a per-task error boundary.

Listeners hand their work to :meth:`EventDispatcher.spawn` and return at
once. Each unit of work runs in its own asyncio task; an exception escaping
it is reported through the :class:`ExceptionReporter` and goes no further,
so one failing event never affects another or the gateway loop.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Coroutine, Any

from spiritbot.services.exception_reporter import ExceptionContext, ExceptionReporter
from spiritbot.util.logger import get_logger

logger = get_logger("event_dispatcher")

ContextFactory = Callable[[], ExceptionContext]


class EventDispatcher:
    """Spawns guarded handler tasks and keeps them referenced until they finish."""

    def __init__(self, reporter: ExceptionReporter) -> None:
        self._reporter = reporter
        self._tasks: set[asyncio.Task] = set()

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    def spawn(
        self,
        work: Coroutine[Any, Any, None],
        context: ContextFactory,
        description: str,
        *,
        ping_owner: bool = False,
    ) -> asyncio.Task:
        """
        Run ``work`` as an independent task.

        Args:
            work: The handler coroutine.
            context: Builds the exception context if ``work`` fails.
            description: Names the failing handler in the report.
            ping_owner: Mention the owner in the report.

        Returns:
            asyncio.Task: The spawned task.
        """
        task = asyncio.create_task(self._guarded(work, context, description, ping_owner))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _guarded(
        self,
        work: Awaitable[None],
        context: ContextFactory,
        description: str,
        ping_owner: bool,
    ) -> None:
        try:
            await work
        except Exception as exc:
            try:
                exception_context = context()
            except Exception:
                logger.exception("Could not build exception context for '%s'", description)
                exception_context = ExceptionContext()
            await self._reporter.notify(exc, exception_context, description, ping_owner)

    async def drain(self) -> None:
        """Wait for every in-flight handler task to finish."""
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
