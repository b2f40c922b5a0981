import asyncio
from typing import AsyncIterator, Generic, TypeVar

T = TypeVar("T")

_END_OF_STREAM = object()


class HandoffQueue(Generic[T]):
    """Bounded FIFO between two pipeline stages.

    ``close`` enqueues one end-of-stream marker per consumer, so every
    consumer iterating with ``async for`` stops after the items put before
    the close have been drained.
    """

    def __init__(self, maxsize: int, consumers: int = 1) -> None:
        if consumers < 1:
            raise ValueError(f"consumers must be >= 1, got {consumers}")
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self._consumers = consumers
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def put(self, item: T) -> None:
        if self._closed:
            raise RuntimeError("HandoffQueue is closed.")
        await self._queue.put(item)

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        for _ in range(self._consumers):
            await self._queue.put(_END_OF_STREAM)

    async def __aiter__(self) -> AsyncIterator[T]:
        while True:
            item = await self._queue.get()
            if item is _END_OF_STREAM:
                return
            yield item
