"""
The ways of getting hold of a bit array.

- :func:`declare_inplace` makes a zeroed array scoped like any other Python value.
- :func:`allocate` and :func:`allocate_zeroed` take a buffer from a :class:`.BufferPool`, which
  has to be given back with :func:`release` (or by using the array as a context manager).
- :func:`adopt` lays an array over a buffer the caller already owns.
"""

from __future__ import annotations

from typing_extensions import Buffer

from limbarray.array import BitArray, HeapBitArray
from limbarray.exc import NotOwnedError
from limbarray.layout import (
    BITS_PER_BYTE,
    HEADER_BYTES,
    LIMB_BYTES,
    adoptable_bit_count,
    pack_header,
    storage_bytes_for,
)
from limbarray.pool import BufferPool, default_pool
from limbarray.utils import LoggerWithTrace

__all__ = (
    "declare_inplace",
    "allocate",
    "allocate_zeroed",
    "release",
    "adopt",
)

logger: LoggerWithTrace = LoggerWithTrace.get(__name__)


def declare_inplace(bit_count: int, *, checked: bool = True) -> BitArray:
    """
    Declares a new, zeroed bit array. The array isn't tied to any pool and must not be released.
    """

    header = pack_header(bit_count)
    storage = bytearray(storage_bytes_for(bit_count))
    storage[:HEADER_BYTES] = header

    return BitArray(memoryview(storage), checked=checked)


def _allocate(
    bit_count: int, pool: BufferPool | None, *, zeroed: bool, checked: bool
) -> HeapBitArray | None:
    header = pack_header(bit_count)
    if pool is None:
        pool = default_pool()

    size = storage_bytes_for(bit_count)
    buffer = pool.acquire(size)
    if buffer is None:
        logger.debug(f"Allocation of {bit_count} bit array ({size} bytes) failed")
        return None

    buffer[:HEADER_BYTES] = header
    array = HeapBitArray(buffer, pool=pool, checked=checked)
    if zeroed:
        array.zero()

    return array


def allocate(
    bit_count: int, *, pool: BufferPool | None = None, checked: bool = True
) -> HeapBitArray | None:
    """
    Allocates a bit array from a pool without clearing it. The bits may hold whatever the
    previous owner of the buffer left behind.

    :param bit_count: The number of bits to allocate.
    :param pool: The pool to allocate from. Defaults to the shared pool.
    :param checked: If True, bit indexes are validated against the bit count.
    :return: The new array, or None if the pool couldn't provide a buffer.
    """

    return _allocate(bit_count, pool, zeroed=False, checked=checked)


def allocate_zeroed(
    bit_count: int, *, pool: BufferPool | None = None, checked: bool = True
) -> HeapBitArray | None:
    """
    Allocates a bit array from a pool with every bit cleared.

    :param bit_count: The number of bits to allocate.
    :param pool: The pool to allocate from. Defaults to the shared pool.
    :param checked: If True, bit indexes are validated against the bit count.
    :return: The new array, or None if the pool couldn't provide a buffer.
    """

    return _allocate(bit_count, pool, zeroed=True, checked=checked)


def release(array: BitArray | None) -> None:
    """
    Releases a heap-allocated bit array. Does nothing if ``array`` is None.
    """

    if array is None:
        return

    if not isinstance(array, HeapBitArray):
        raise NotOwnedError(f"{array!r} does not own its storage and cannot be released")

    array.release()


def adopt(
    buffer: Buffer, buffer_size: int | None = None, *, checked: bool = True
) -> BitArray | None:
    """
    Lays a bit array over a writable buffer owned by the caller, using every byte after the
    header slot for bits. The buffer is written to directly and must outlive the array.

    For example, a 1024 byte buffer holds a little under 8192 bits::

        buf = bytearray(1024)
        array = adopt(buf)  # 8160 bits

    Readers and writers of an adopted buffer must agree on the layout in :mod:`limbarray.layout`.
    Buffers bigger than the header can describe are only used up to ``MAX_BIT_COUNT // 8``
    payload bytes; the bytes past that are left untouched.

    :param buffer: Any writable object supporting the buffer protocol.
    :param buffer_size: The number of bytes of ``buffer`` to use. Defaults to all of it.
    :param checked: If True, bit indexes are validated against the bit count.
    :return: The adopted array, or None if the buffer is too small to even hold the header. The
             buffer is left untouched in that case.
    """

    view = memoryview(buffer).cast("B")
    if view.readonly:
        raise TypeError("cannot adopt a read-only buffer")

    if buffer_size is None:
        buffer_size = len(view)
    elif not 0 <= buffer_size <= len(view):
        raise ValueError(f"buffer size {buffer_size} outside of buffer (length: {len(view)})")

    available_limbs = buffer_size // LIMB_BYTES
    logger.trace(f"Adopting {buffer_size} byte buffer ({available_limbs} limbs available)")
    if available_limbs < 1:
        logger.debug(f"Buffer of {buffer_size} bytes is too small to adopt")
        return None

    bit_count = adoptable_bit_count(buffer_size)
    logger.trace(f"Adopted buffer holds {bit_count} bits")

    storage = view[: HEADER_BYTES + bit_count // BITS_PER_BYTE]
    storage[:HEADER_BYTES] = pack_header(bit_count)

    array = BitArray(storage, checked=checked)
    array.zero()
    return array
