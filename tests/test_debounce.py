"""Tests for crawldash.services.debounce.Debouncer (real time, short windows)."""

import asyncio

import pytest

from crawldash.services.debounce import Debouncer

_WINDOW = 0.05


def _collector():
    calls = []

    async def callback(value):
        calls.append((value, asyncio.get_running_loop().time()))

    return calls, callback


class TestDebouncer:
    @pytest.mark.asyncio
    async def test_burst_fires_once_with_last_value(self):
        calls, callback = _collector()
        debouncer = Debouncer(_WINDOW, callback)
        loop = asyncio.get_running_loop()

        debouncer.trigger("e")
        await asyncio.sleep(_WINDOW / 5)
        debouncer.trigger("ex")
        await asyncio.sleep(_WINDOW / 5)
        last = loop.time()
        debouncer.trigger("exa")
        await asyncio.sleep(_WINDOW * 4)

        assert [value for value, _ in calls] == ["exa"]
        assert calls[0][1] - last >= _WINDOW * 0.9

    @pytest.mark.asyncio
    async def test_spaced_triggers_fire_each(self):
        calls, callback = _collector()
        debouncer = Debouncer(_WINDOW, callback)

        debouncer.trigger("a")
        await asyncio.sleep(_WINDOW * 3)
        debouncer.trigger("b")
        await asyncio.sleep(_WINDOW * 3)

        assert [value for value, _ in calls] == ["a", "b"]

    @pytest.mark.asyncio
    async def test_cancel_prevents_firing(self):
        calls, callback = _collector()
        debouncer = Debouncer(_WINDOW, callback)

        debouncer.trigger("a")
        assert debouncer.pending is True
        debouncer.cancel()
        await asyncio.sleep(_WINDOW * 3)

        assert calls == []
        assert debouncer.pending is False

    @pytest.mark.asyncio
    async def test_cancel_does_not_abort_running_callback(self):
        started = asyncio.Event()
        finished = []

        async def slow(value):
            started.set()
            await asyncio.sleep(_WINDOW)
            finished.append(value)

        debouncer = Debouncer(0, slow)
        debouncer.trigger("x")
        await started.wait()
        debouncer.cancel()
        await asyncio.sleep(_WINDOW * 3)

        assert finished == ["x"]

    @pytest.mark.asyncio
    async def test_running_callback_task_stays_referenced(self):
        started = asyncio.Event()
        release = asyncio.Event()

        async def blocking(value):
            started.set()
            await release.wait()

        debouncer = Debouncer(0, blocking)
        debouncer.trigger("x")
        await started.wait()

        assert debouncer.pending is False
        assert len(debouncer._running) == 1

        release.set()
        await asyncio.sleep(_WINDOW)

        assert debouncer._running == set()
