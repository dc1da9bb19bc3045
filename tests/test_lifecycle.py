"""Tests for the screen task scope."""

import asyncio

import pytest

from chatlogin.lifecycle import CancelStrategy


class TestCancelStrategy:
    """Tests for CancelStrategy."""

    @pytest.mark.asyncio
    async def test_launch_runs_coroutine(self):
        strategy = CancelStrategy()

        async def work():
            return 42

        assert await strategy.launch(work()) == 42
        assert strategy.active_tasks == 0

    @pytest.mark.asyncio
    async def test_cancel_stops_pending_tasks(self):
        strategy = CancelStrategy()
        finished = []

        async def work():
            await asyncio.sleep(10)
            finished.append(True)

        task = strategy.launch(work())
        await asyncio.sleep(0)
        strategy.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert finished == []
        assert strategy.is_cancelled is True

    @pytest.mark.asyncio
    async def test_launch_after_cancel_is_refused(self):
        strategy = CancelStrategy()
        strategy.cancel()

        async def work():
            return 1

        with pytest.raises(RuntimeError):
            strategy.launch(work())

    @pytest.mark.asyncio
    async def test_completed_tasks_are_untouched(self):
        strategy = CancelStrategy()

        async def work():
            return "done"

        task = strategy.launch(work())
        await task
        strategy.cancel()

        assert task.result() == "done"
