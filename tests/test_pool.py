import pytest

import limbarray.pool as pool_module
from limbarray import BufferPool, allocate, allocate_zeroed, release
from limbarray.pool import default_pool


def test_acquire_and_reuse(pool: BufferPool):
    """
    Tests that a given back buffer is handed out again, unwiped.
    """

    buffer = pool.acquire(16)
    assert buffer is not None
    assert len(buffer) == 16

    buffer[0] = 0xAB
    pool.give_back(buffer)

    again = pool.acquire(16)
    assert again is buffer
    assert again[0] == 0xAB


def test_sizes_kept_apart(pool: BufferPool):
    buffer = pool.acquire(16)
    assert buffer is not None
    pool.give_back(buffer)

    other = pool.acquire(8)
    assert other is not buffer
    assert pool.statistics().idle_buffers == 1


def test_max_idle():
    """
    Tests that the pool only keeps so many idle buffers of one size.
    """

    pool = BufferPool(max_idle=1)
    first, second = pool.acquire(8), pool.acquire(8)
    assert first is not None and second is not None

    pool.give_back(first)
    pool.give_back(second)

    stats = pool.statistics()
    assert stats.idle_buffers == 1
    assert stats.outstanding_bytes == 0


def test_max_bytes():
    """
    Tests that the pool refuses requests over its byte limit.
    """

    pool = BufferPool(max_bytes=24)

    first = pool.acquire(16)
    assert first is not None
    assert pool.acquire(16) is None

    pool.give_back(first)
    assert pool.acquire(16) is not None


def test_default_pool():
    assert default_pool() is default_pool()


def test_idle_bytes_bounded_across_sizes():
    """
    Tests that releasing buffers of many different sizes keeps the idle total under the limit.
    """

    pool = BufferPool(max_idle_bytes=4096)
    for size in range(4, 2004, 4):
        buffer = pool.acquire(size)
        assert buffer is not None
        pool.give_back(buffer)

    stats = pool.statistics()
    assert stats.idle_bytes <= 4096
    assert stats.idle_buffers < 100
    assert stats.outstanding_bytes == 0


def test_released_arrays_bounded():
    """
    Tests that a pool with default limits doesn't keep every released array alive.
    """

    pool = BufferPool()
    for bits in range(1, 2001):
        release(allocate(bits * 32, pool=pool))

    stats = pool.statistics()
    assert stats.idle_buffers < 100
    assert stats.idle_bytes <= 512 * 1024


def test_oldest_idle_evicted_first():
    """
    Tests that the least recently released buffer is dropped first.
    """

    pool = BufferPool(max_idle_bytes=32)
    oldest, middle, newest = pool.acquire(16), pool.acquire(12), pool.acquire(8)
    assert oldest is not None and middle is not None and newest is not None

    pool.give_back(oldest)
    pool.give_back(middle)
    pool.give_back(newest)

    stats = pool.statistics()
    assert stats.idle_buffers == 2
    assert stats.idle_bytes == 20

    assert pool.acquire(16) is not oldest
    assert pool.acquire(12) is middle
    assert pool.acquire(8) is newest
    assert pool.statistics().idle_buffers == 0


def test_oversized_buffer_not_kept():
    pool = BufferPool(max_idle_bytes=8)
    buffer = pool.acquire(16)
    assert buffer is not None
    pool.give_back(buffer)

    assert pool.statistics().idle_buffers == 0


def test_memory_error(monkeypatch: pytest.MonkeyPatch, pool: BufferPool):
    """
    Tests that running out of memory is reported as None rather than raised.
    """

    def _out_of_memory(size: int) -> bytearray:
        raise MemoryError

    monkeypatch.setattr(pool_module, "bytearray", _out_of_memory, raising=False)

    assert pool.acquire(16) is None
    assert allocate(64, pool=pool) is None
    assert allocate_zeroed(64, pool=pool) is None
    assert pool.statistics().outstanding_bytes == 0
