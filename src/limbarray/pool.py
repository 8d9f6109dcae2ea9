from __future__ import annotations

import itertools
from collections import OrderedDict

import attr

from limbarray.utils import LoggerWithTrace

logger: LoggerWithTrace = LoggerWithTrace.get(__name__)


@attr.s(frozen=True, slots=True)
class PoolStatistics:
    """
    A snapshot of a :class:`.BufferPool`'s usage.
    """

    #: The number of bytes handed out and not yet given back.
    outstanding_bytes: int = attr.ib()

    #: The number of released buffers waiting to be reused.
    idle_buffers: int = attr.ib()

    #: The total size of the released buffers waiting to be reused.
    idle_bytes: int = attr.ib()


class BufferPool:
    """
    A free-list of byte buffers, keyed by size, that backs heap-allocated bit arrays.

    Released buffers are kept and handed out again, unwiped, to the next request of the same
    size. Once the idle buffers of all sizes add up to more than ``max_idle_bytes``, the oldest
    are dropped.
    """

    def __init__(
        self,
        max_bytes: int | None = None,
        max_idle: int = 8,
        max_idle_bytes: int = 512 * 1024,
    ) -> None:
        """
        :param max_bytes: The maximum number of bytes that may be handed out at once. ``None``
                          means no limit.
        :param max_idle: The maximum number of idle buffers kept per size.
        :param max_idle_bytes: The maximum total size of idle buffers kept across all sizes.
        """

        self._max_bytes = max_bytes
        self._max_idle = max_idle
        self._max_idle_bytes = max_idle_bytes

        # idle buffers in release order, keyed by a release ticket
        self._idle: OrderedDict[int, bytearray] = OrderedDict()
        # tickets of the idle buffers of each size, oldest first
        self._tickets_by_size: dict[int, list[int]] = {}
        self._tickets = itertools.count()

        self._idle_bytes = 0
        self._outstanding = 0

    def _take_idle(self, size: int) -> bytearray | None:
        tickets = self._tickets_by_size.get(size)
        if not tickets:
            return None

        ticket = tickets.pop()
        if not tickets:
            del self._tickets_by_size[size]

        buffer = self._idle.pop(ticket)
        self._idle_bytes -= size
        return buffer

    def _evict_oldest(self) -> None:
        ticket, buffer = self._idle.popitem(last=False)
        size = len(buffer)

        tickets = self._tickets_by_size[size]
        tickets.remove(ticket)
        if not tickets:
            del self._tickets_by_size[size]

        self._idle_bytes -= size
        logger.trace(f"Evicted idle {size} byte buffer")

    def acquire(self, size: int) -> bytearray | None:
        """
        Gets a buffer of exactly ``size`` bytes. Its contents are unspecified.

        :return: The buffer, or None if the request can't be satisfied.
        """

        if self._max_bytes is not None and self._outstanding + size > self._max_bytes:
            logger.debug(
                f"Refusing {size} byte buffer ({self._outstanding}/{self._max_bytes} bytes in use)"
            )
            return None

        buffer = self._take_idle(size)
        if buffer is not None:
            logger.trace(f"Reusing idle {size} byte buffer")
        else:
            try:
                buffer = bytearray(size)
            except MemoryError:
                logger.debug(f"Failed to allocate {size} byte buffer")
                return None

            logger.trace(f"Allocated new {size} byte buffer")

        self._outstanding += size
        return buffer

    def give_back(self, buffer: bytearray) -> None:
        """
        Returns a buffer previously acquired from this pool.
        """

        size = len(buffer)
        self._outstanding -= size

        tickets = self._tickets_by_size.get(size, [])
        if len(tickets) >= self._max_idle or size > self._max_idle_bytes:
            return

        ticket = next(self._tickets)
        self._idle[ticket] = buffer
        tickets.append(ticket)
        self._tickets_by_size[size] = tickets
        self._idle_bytes += size

        while self._idle_bytes > self._max_idle_bytes:
            self._evict_oldest()

    def statistics(self) -> PoolStatistics:
        """
        Gets the current usage statistics for this pool.
        """

        return PoolStatistics(
            outstanding_bytes=self._outstanding,
            idle_buffers=len(self._idle),
            idle_bytes=self._idle_bytes,
        )


_default_pool = BufferPool()


def default_pool() -> BufferPool:
    """
    Gets the process-wide pool used when no pool is passed to an allocation function.
    """

    return _default_pool
