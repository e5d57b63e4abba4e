from asyncio import Condition
from contextlib import asynccontextmanager
from typing import AsyncIterator


class ReadWriteLock:
    """Shared/exclusive lock for the event loop.

    Any number of readers may hold the lock together; a writer holds it alone.
    Waiting writers go before new readers, so steady reads cannot starve writes.
    """

    def __init__(self):
        self._condition = Condition()
        self._readers = 0  # readers currently inside
        self._writer = False  # a writer is inside
        self._writers_waiting = 0

    @asynccontextmanager
    async def read(self) -> AsyncIterator[None]:
        """Hold the lock shared with other readers"""
        async with self._condition:
            await self._condition.wait_for(
                lambda: not self._writer and self._writers_waiting == 0
            )
            self._readers += 1
        try:
            yield
        finally:
            async with self._condition:
                self._readers -= 1
                if self._readers == 0:
                    self._condition.notify_all()

    @asynccontextmanager
    async def write(self) -> AsyncIterator[None]:
        """Hold the lock exclusively"""
        async with self._condition:
            self._writers_waiting += 1
            try:
                await self._condition.wait_for(
                    lambda: not self._writer and self._readers == 0
                )
            finally:
                self._writers_waiting -= 1
                # a cancelled writer must not keep readers blocked
                self._condition.notify_all()
            self._writer = True
        try:
            yield
        finally:
            async with self._condition:
                self._writer = False
                self._condition.notify_all()

    @property
    def readers(self) -> int:
        return self._readers

    @property
    def writers_waiting(self) -> int:
        return self._writers_waiting

    @property
    def locked_for_write(self) -> bool:
        return self._writer
