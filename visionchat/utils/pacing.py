"""
Pacing utilities for streamed text.

A Pacer spaces out sends; paced() runs a fragment source through a
per-request queue drained by a single consumer at a fixed cadence.
"""
import asyncio
import logging
import time
from contextlib import aclosing, suppress
from typing import AsyncGenerator, Optional

logger = logging.getLogger(__name__)

# Marks the end of a source in the pacing queue
_END = object()


class Pacer:
    """
    Keeps consecutive sends at least `interval` seconds apart.

    The first call to wait() returns immediately.

    Example:
        pacer = Pacer(interval=0.05)
        await pacer.wait()  # Wait if needed before sending
        # Send chunk here
    """

    def __init__(self, interval: float = 0.05):
        """
        Initialize pacer.

        Args:
            interval: Minimum number of seconds between sends
        """
        self.interval = interval
        self.last_send: Optional[float] = None

    async def wait(self):
        """
        Wait if necessary to respect the cadence.

        Calculates time since the last send and sleeps for the remainder
        of the interval.
        """
        now = time.monotonic()
        if self.last_send is not None:
            since_last_send = now - self.last_send
            if since_last_send < self.interval:
                await asyncio.sleep(self.interval - since_last_send)
        self.last_send = time.monotonic()

    def reset(self):
        """Reset the pacer (clear last send time)."""
        self.last_send = None


async def _fill(source: AsyncGenerator[str, None], queue: asyncio.Queue) -> None:
    try:
        async with aclosing(source) as fragments:
            async for fragment in fragments:
                await queue.put(fragment)
    except Exception:
        await queue.put(_END)
        raise
    await queue.put(_END)


async def paced(
    source: AsyncGenerator[str, None],
    interval: float,
    maxsize: int = 0,
) -> AsyncGenerator[str, None]:
    """
    Relay fragments from `source` at most one per `interval` seconds.

    The source is drained by a producer task into a queue owned by this
    call; fragments come out in the order they went in. The first
    fragment is released immediately. With a non-positive interval the
    source is relayed as-is.

    Closing the returned iterator (e.g. the client went away) cancels the
    producer, which closes the source.

    Args:
        source: Async generator of fragments
        interval: Seconds between released fragments
        maxsize: Queue bound; 0 for unbounded

    Yields:
        Fragments in source order
    """
    if interval <= 0:
        async with aclosing(source) as fragments:
            async for fragment in fragments:
                yield fragment
        return

    queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
    producer = asyncio.create_task(_fill(source, queue))
    pacer = Pacer(interval)

    try:
        while True:
            fragment = await queue.get()
            if fragment is _END:
                break
            await pacer.wait()
            yield fragment

        # Surface producer failures to the caller
        await producer
    finally:
        if not producer.done():
            logger.debug("Pacing relay closed early; cancelling producer")
            producer.cancel()
            with suppress(asyncio.CancelledError):
                await producer
