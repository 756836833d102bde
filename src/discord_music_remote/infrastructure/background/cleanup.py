"""Periodic removal of expired control sessions."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from discord_music_remote.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ...application.services.session_registry import SessionRegistry

logger = logging.getLogger(__name__)


class SessionSweepJob:
    """Sweeps the session registry on a fixed interval.

    Catches sessions nobody ever resolved again; lazy expiry on read
    handles the rest.
    """

    def __init__(self, *, session_registry: SessionRegistry, interval_minutes: int) -> None:
        self._registry = session_registry
        self._interval_seconds = interval_minutes * 60
        self._running = False
        self._task: asyncio.Task | None = None

    def start(self) -> None:
        if self._running:
            logger.warning(LogTemplates.CLEANUP_ALREADY_RUNNING)
            return

        self._running = True
        self._task = asyncio.create_task(self._run_loop())
        logger.info(LogTemplates.CLEANUP_STARTED)

    async def stop(self) -> None:
        self._running = False

        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        logger.info(LogTemplates.CLEANUP_STOPPED)

    async def _run_loop(self) -> None:
        while self._running:
            try:
                await asyncio.sleep(self._interval_seconds)
            except asyncio.CancelledError:
                break

            try:
                self.run_sweep()
            except Exception as exc:
                logger.error(LogTemplates.CLEANUP_FAILED, exc)

    def run_sweep(self) -> int:
        logger.debug(LogTemplates.CLEANUP_CYCLE_RUNNING)
        removed = self._registry.sweep()
        if removed > 0:
            logger.info(LogTemplates.CLEANUP_COMPLETED, removed)
        return removed

    @property
    def is_running(self) -> bool:
        return self._running
