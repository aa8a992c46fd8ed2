"""docextract/ingestion/streamers.py
###############################################################################
ChunkStream – bounded producer/consumer channel
###############################################################################
Extraction work (workbook parsing, PDF layout analysis, subprocess calls) is
blocking.  A :class:`ChunkStream` runs an extractor's blocking chunk iterator
in a worker thread via ``asyncio.to_thread()`` and hands the chunks to an
``async for`` consumer through a bounded ``asyncio.Queue``.

Design considerations
=====================
1. **Backpressure** – the queue holds at most *maxsize* chunks; a producer
   that gets ahead blocks until the consumer catches up.
2. **Abandonable sends** – a blocked producer re-checks a cancellation event
   every *poll_interval* seconds, so closing the stream (or dropping it)
   releases the worker promptly instead of leaving it parked on a full queue.
3. **No lost progress** – a producer exception is queued *behind* every chunk
   produced before it and re-raised from ``__anext__`` only after those
   chunks were delivered.
4. **Resource release** – on cancellation the producer closes the chunk
   generator, which runs the extractor's ``finally`` blocks (file handles,
   workbook handles).
5. **Ordering** – a single producer feeds a FIFO queue; chunks arrive in
   exactly the order the extractor yielded them.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import threading
import weakref
from typing import Any, Callable, Final, Iterable, List, Optional

import structlog

from docextract.parsing.chunks import Chunk

__all__: list[str] = ["ChunkStream", "DEFAULT_BUFFER_SIZE"]

logger = structlog.get_logger(__name__)

DEFAULT_BUFFER_SIZE: Final[int] = 10
DEFAULT_POLL_INTERVAL: Final[float] = 0.05


class _EndOfStream:
    pass


_END: Final = _EndOfStream()


class _ProducerFailure:
    def __init__(self, error: BaseException) -> None:
        self.error = error


class _Channel:
    """State shared between the worker thread and the consumer.

    The worker only holds a reference to the channel, never to the
    `ChunkStream`, so a stream dropped without ``aclose()`` can still be
    garbage collected – its finalizer then cancels the producer.
    """

    def __init__(
        self, loop: asyncio.AbstractEventLoop, maxsize: int, poll_interval: float
    ) -> None:
        self.loop = loop
        self.queue: "asyncio.Queue[Any]" = asyncio.Queue(maxsize=maxsize)
        self.cancelled = threading.Event()
        self.poll_interval = poll_interval

    def send(self, item: Any) -> bool:
        """Put *item* on the queue from the worker thread.

        Returns ``False`` if the consumer went away before the item could be
        delivered.
        """

        if self.cancelled.is_set():
            return False
        try:
            future = asyncio.run_coroutine_threadsafe(self.queue.put(item), self.loop)
        except RuntimeError:  # event loop closed underneath us
            return False
        while True:
            try:
                future.result(timeout=self.poll_interval)
                return True
            except concurrent.futures.TimeoutError:
                if self.cancelled.is_set():
                    future.cancel()
                    return False
            except concurrent.futures.CancelledError:
                return False


def _produce(
    channel: _Channel, factory: Callable[[], Iterable[Chunk]], name: str
) -> None:
    """Worker-thread body: drain *factory*'s iterator into *channel*."""

    iterator: Optional[Iterable[Chunk]] = None
    sent = 0
    try:
        iterator = factory()
        for chunk in iterator:
            if not channel.send(chunk):
                logger.debug("stream_cancelled", extractor=name, chunks_sent=sent)
                return
            sent += 1
        channel.send(_END)
        logger.debug("stream_completed", extractor=name, chunks_sent=sent)
    except Exception as e:  # noqa: BLE001 – re-raised on the consumer side
        logger.debug("stream_failed", extractor=name, chunks_sent=sent, error=str(e))
        channel.send(_ProducerFailure(e))
    finally:
        close = getattr(iterator, "close", None)
        if close is not None:
            close()


class ChunkStream:
    """
    Cancellable, backpressured async sequence of `Chunk` objects.

    Single consumer, single pass.  Use as an async iterator, ideally inside
    ``async with`` so the producer is always released::

        async with await stream_chunks(path) as stream:
            async for chunk in stream:
                ...

    Args:
        factory: Zero-argument callable returning the blocking chunk iterator
            (typically ``extractor.iter_chunks``).  Called in the worker.
        maxsize: Capacity of the bounded buffer.
        poll_interval: Seconds between cancellation checks of a blocked
            producer.
        name: Label used in log events.
    """

    def __init__(
        self,
        factory: Callable[[], Iterable[Chunk]],
        *,
        maxsize: int = DEFAULT_BUFFER_SIZE,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        name: str = "extractor",
    ) -> None:
        if maxsize <= 0:
            raise ValueError("maxsize must be greater than 0")
        self._factory = factory
        self._maxsize = maxsize
        self._poll_interval = poll_interval
        self.name = name
        self._channel: Optional[_Channel] = None
        self._worker: Optional["asyncio.Future[None]"] = None
        self._finished = False

    @property
    def started(self) -> bool:
        return self._worker is not None

    @property
    def closed(self) -> bool:
        return self._finished

    def start(self) -> "ChunkStream":
        """Launch the producer; idempotent.  Must be called from a running loop."""

        if self._worker is not None:
            return self
        if self._finished:
            raise RuntimeError("stream is closed")
        loop = asyncio.get_running_loop()
        channel = _Channel(loop, self._maxsize, self._poll_interval)
        self._channel = channel
        self._worker = asyncio.ensure_future(
            asyncio.to_thread(_produce, channel, self._factory, self.name)
        )
        # Dropping the stream without aclose() still stops the producer.
        weakref.finalize(self, channel.cancelled.set)
        logger.debug("stream_started", extractor=self.name, maxsize=self._maxsize)
        return self

    def __aiter__(self) -> "ChunkStream":
        return self

    async def __anext__(self) -> Chunk:
        if self._finished:
            raise StopAsyncIteration
        self.start()
        assert self._channel is not None

        item = await self._channel.queue.get()
        if isinstance(item, _EndOfStream):
            await self._finish()
            raise StopAsyncIteration
        if isinstance(item, _ProducerFailure):
            await self._finish()
            raise item.error
        return item

    async def _finish(self) -> None:
        self._finished = True
        if self._worker is not None:
            await self._worker

    async def aclose(self) -> None:
        """Stop the producer and wait for the worker thread to exit."""

        if self._worker is None:
            self._finished = True
            return
        if self._worker.done():
            self._finished = True
            return

        self._finished = True
        assert self._channel is not None
        self._channel.cancelled.set()
        # Free a slot for a producer parked on a full queue.
        while not self._channel.queue.empty():
            self._channel.queue.get_nowait()
        await self._worker
        logger.debug("stream_closed", extractor=self.name)

    async def collect(self) -> List[Chunk]:
        """Drain the remaining chunks into a list."""

        try:
            return [chunk async for chunk in self]
        finally:
            await self.aclose()

    async def __aenter__(self) -> "ChunkStream":
        return self.start()

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
