"""
Single-flight loading for process-lifetime indices.

Each index is fetched and built at most once. Callers arriving while the
first load is still running wait on that same load instead of starting
their own fetch.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SingleFlightLoader(Generic[T]):
    """
    Memoizes both the in-flight load and its result.

    A failed load is not cached: every waiter of that load gets the error,
    and the next get() starts a new attempt.
    """

    def __init__(self, name: str, load: Callable[[], Awaitable[T]]):
        self.name = name
        self._load = load
        self._value: Optional[T] = None
        self._loaded = False
        self._task: Optional[asyncio.Task] = None

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def is_loading(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def value(self) -> Optional[T]:
        """Built value if loaded, without triggering a load."""
        return self._value

    async def get(self) -> T:
        """Return the value, loading it on first use."""
        if self._loaded:
            return self._value

        if self._task is None or self._task.done():
            logger.debug("Starting load of %s", self.name)
            self._task = asyncio.ensure_future(self._run())
        else:
            logger.debug("Joining in-flight load of %s", self.name)

        # Shielded so one cancelled waiter does not cancel the shared load
        return await asyncio.shield(self._task)

    async def reload(self) -> T:
        """
        Rebuild the value from the source.

        Joins the current load if one is running instead of starting a
        second one.
        """
        if self.is_loading:
            return await asyncio.shield(self._task)
        self.invalidate()
        return await self.get()

    def invalidate(self):
        """Forget the built value; an in-flight load is left to finish."""
        self._value = None
        self._loaded = False

    async def _run(self) -> T:
        try:
            value = await self._load()
        except Exception:
            logger.error("Load of %s failed", self.name)
            raise
        finally:
            self._task = None

        self._value = value
        self._loaded = True
        return value
