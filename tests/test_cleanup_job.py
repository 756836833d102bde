"""
Unit Tests for SessionSweepJob

Tests for:
- run_sweep removing expired sessions
- start/stop lifecycle and the double-start guard
- Loop survives a failing sweep
"""

import asyncio
from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from discord_music_remote.application.services.session_registry import SessionRegistry
from discord_music_remote.domain.shared.datetime_utils import utcnow
from discord_music_remote.infrastructure.background.cleanup import SessionSweepJob


@pytest.fixture
def registry():
    return SessionRegistry(ttl=timedelta(hours=1))


@pytest.fixture
def job(registry):
    return SessionSweepJob(session_registry=registry, interval_minutes=60)


class TestRunSweep:
    def test_removes_expired(self, job, registry, sample_user):
        registry.issue(sample_user, now=utcnow() - timedelta(hours=2))
        registry.issue(sample_user)

        assert job.run_sweep() == 1
        assert len(registry) == 1

    def test_nothing_to_remove(self, job):
        assert job.run_sweep() == 0


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_start_and_stop(self, job):
        job.start()
        assert job.is_running
        assert job._task is not None

        await job.stop()
        assert not job.is_running
        assert job._task is None

    @pytest.mark.asyncio
    async def test_double_start_keeps_one_task(self, job):
        job.start()
        task = job._task
        job.start()
        assert job._task is task
        await job.stop()

    @pytest.mark.asyncio
    async def test_stop_without_start(self, job):
        await job.stop()
        assert not job.is_running

    @pytest.mark.asyncio
    async def test_loop_sweeps_on_interval(self, registry, sample_user):
        registry.issue(sample_user, now=utcnow() - timedelta(hours=2))
        job = SessionSweepJob(session_registry=registry, interval_minutes=0)

        job.start()
        for _ in range(10):
            await asyncio.sleep(0)
        await job.stop()

        assert len(registry) == 0

    @pytest.mark.asyncio
    async def test_loop_survives_failed_sweep(self):
        calls = []

        def sweep():
            calls.append(1)
            if len(calls) == 1:
                raise RuntimeError("boom")
            return 0

        registry = MagicMock()
        registry.sweep.side_effect = sweep
        job = SessionSweepJob(session_registry=registry, interval_minutes=0)

        job.start()
        for _ in range(10):
            await asyncio.sleep(0)
        await job.stop()

        assert registry.sweep.call_count >= 2
