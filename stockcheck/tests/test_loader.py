"""
Tests for SingleFlightLoader.

Run with: pytest stockcheck/tests/test_loader.py -v
"""

import asyncio

import pytest

from stockcheck.loader import SingleFlightLoader


class CountingLoad:
    """Async load function that counts calls and can be told to fail."""

    def __init__(self, fail_times: int = 0):
        self.calls = 0
        self.fail_times = fail_times

    async def __call__(self):
        self.calls += 1
        await asyncio.sleep(0.01)
        if self.calls <= self.fail_times:
            raise RuntimeError(f"load {self.calls} failed")
        return {"generation": self.calls}


class TestSingleFlightLoader:

    def test_loads_once(self):
        load = CountingLoad()
        loader = SingleFlightLoader("test", load)

        async def scenario():
            first = await loader.get()
            second = await loader.get()
            return first, second

        first, second = asyncio.run(scenario())
        assert first is second
        assert load.calls == 1
        assert loader.is_loaded

    def test_concurrent_callers_join_in_flight_load(self):
        load = CountingLoad()
        loader = SingleFlightLoader("test", load)

        async def scenario():
            return await asyncio.gather(*(loader.get() for _ in range(20)))

        results = asyncio.run(scenario())
        assert load.calls == 1
        assert all(r is results[0] for r in results)

    def test_failure_propagates_and_is_not_cached(self):
        load = CountingLoad(fail_times=1)
        loader = SingleFlightLoader("test", load)

        with pytest.raises(RuntimeError):
            asyncio.run(loader.get())
        assert not loader.is_loaded
        assert not loader.is_loading

        assert asyncio.run(loader.get()) == {"generation": 2}
        assert load.calls == 2

    def test_reload_replaces_value(self):
        load = CountingLoad()
        loader = SingleFlightLoader("test", load)

        async def scenario():
            first = await loader.get()
            second = await loader.reload()
            return first, second

        first, second = asyncio.run(scenario())
        assert first == {"generation": 1}
        assert second == {"generation": 2}
        assert loader.value == {"generation": 2}

    def test_reload_joins_in_flight_load(self):
        load = CountingLoad()
        loader = SingleFlightLoader("test", load)

        async def scenario():
            return await asyncio.gather(loader.get(), loader.reload(), loader.reload())

        results = asyncio.run(scenario())
        assert load.calls == 1
        assert results == [{"generation": 1}] * 3

    def test_invalidate(self):
        load = CountingLoad()
        loader = SingleFlightLoader("test", load)

        asyncio.run(loader.get())
        loader.invalidate()
        assert not loader.is_loaded
        assert loader.value is None

        asyncio.run(loader.get())
        assert load.calls == 2

    def test_cancelled_waiter_does_not_cancel_load(self):
        load = CountingLoad()
        loader = SingleFlightLoader("test", load)

        async def scenario():
            waiter = asyncio.ensure_future(loader.get())
            await asyncio.sleep(0)
            waiter.cancel()
            return await loader.get()

        assert asyncio.run(scenario()) == {"generation": 1}
        assert load.calls == 1
