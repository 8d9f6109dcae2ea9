from __future__ import annotations

from collections.abc import Iterator
from types import TracebackType
from typing import Self

from typing_extensions import override

from limbarray.exc import BitIndexError
from limbarray.layout import (
    BITS_PER_BYTE,
    BYTE_ORDER,
    HEADER_BYTES,
    LIMB_BYTES,
    byte_span,
    limb_count_for,
    locate,
    unpack_header,
)
from limbarray.pool import BufferPool
from limbarray.utils import LoggerWithTrace

logger: LoggerWithTrace = LoggerWithTrace.get(__name__)


class BitArray:
    """
    A fixed-capacity, packed array of bits stored over a single contiguous byte buffer.

    The first ``HEADER_BYTES`` of the buffer hold the bit count, the rest hold the limbs. The
    array never copies its buffer; every operation reads and writes it directly, so an array
    adopted over a caller's buffer is a live view of that buffer.

    Instances aren't created directly; use one of the functions in :mod:`limbarray.construct`.
    """

    __slots__ = ("_storage", "_checked")

    def __init__(self, storage: memoryview, *, checked: bool = True) -> None:
        """
        :param storage: A writable, byte-formatted view holding an already-written header.
        :param checked: If True, bit indexes are validated against the bit count. Negative indexes
                        are rejected either way.
        """

        self._storage = storage
        self._checked = checked

    @property
    def bit_count(self) -> int:
        """
        The number of addressable bits in this array.
        """

        return unpack_header(self._storage)

    @property
    def limb_count(self) -> int:
        """
        The number of limbs in this array, not counting the header slot.
        """

        return limb_count_for(self.bit_count)

    @property
    def storage_units(self) -> int:
        """
        The number of storage units this array occupies, including the header slot.
        """

        return 1 + self.limb_count

    @property
    def storage_bytes(self) -> int:
        """
        The number of bytes of the backing buffer used by this array.
        """

        return len(self._storage)

    @property
    def checked(self) -> bool:
        """
        Whether this array validates bit indexes.
        """

        return self._checked

    def _check_index(self, n: int) -> None:
        # a negative index would address the header slot
        if n < 0:
            raise BitIndexError(n, self.bit_count)

        if self._checked:
            bit_count = self.bit_count
            if n >= bit_count:
                raise BitIndexError(n, bit_count)

    def _limb_window(self, limb_index: int) -> memoryview:
        # the final limb of an adopted buffer may be shorter than LIMB_BYTES
        start = HEADER_BYTES + limb_index * LIMB_BYTES
        return self._storage[start : start + LIMB_BYTES]

    def _read_limb(self, limb_index: int) -> int:
        return int.from_bytes(self._limb_window(limb_index), byteorder=BYTE_ORDER)

    def _write_limb(self, limb_index: int, value: int) -> None:
        window = self._limb_window(limb_index)
        window[:] = value.to_bytes(len(window), byteorder=BYTE_ORDER)

    def set(self, n: int) -> None:
        """
        Sets bit ``n`` to 1.
        """

        self._check_index(n)
        limb_index, mask = locate(n)
        self._write_limb(limb_index, self._read_limb(limb_index) | mask)

    def clear(self, n: int) -> None:
        """
        Sets bit ``n`` to 0.
        """

        self._check_index(n)
        limb_index, mask = locate(n)
        self._write_limb(limb_index, self._read_limb(limb_index) & ~mask)

    def toggle(self, n: int) -> None:
        """
        Flips bit ``n``.
        """

        self._check_index(n)
        limb_index, mask = locate(n)
        self._write_limb(limb_index, self._read_limb(limb_index) ^ mask)

    def test(self, n: int) -> bool:
        """
        Returns True if bit ``n`` is set.
        """

        self._check_index(n)
        limb_index, mask = locate(n)
        return (self._read_limb(limb_index) & mask) != 0

    def zero(self) -> None:
        """
        Clears every bit in this array. The header is left untouched.
        """

        payload_bytes = len(self._storage) - HEADER_BYTES
        logger.trace(f"Zeroing {payload_bytes} payload bytes")
        self._storage[HEADER_BYTES:] = bytes(payload_bytes)

    def clear_range_prefix(self, up_to_bit_count: int) -> None:
        """
        Clears bits ``0`` through ``up_to_bit_count - 1``. Any count at or above the bit count of
        this array clears the whole array.
        """

        if up_to_bit_count < 0:
            raise ValueError(f"prefix length must be non-negative, not {up_to_bit_count}")

        if up_to_bit_count >= self.bit_count:
            self.zero()
            return

        full_bytes, trailing_bits = byte_span(up_to_bit_count)
        if trailing_bits:
            # the leading partial byte is cleared bit by bit, highest first
            first_partial_bit = full_bytes * BITS_PER_BYTE
            for n in range(up_to_bit_count - 1, first_partial_bit - 1, -1):
                limb_index, mask = locate(n)
                self._write_limb(limb_index, self._read_limb(limb_index) & ~mask)

        logger.trace(
            f"Clearing prefix of {up_to_bit_count} bits ({full_bytes} bytes + {trailing_bits} bits)"
        )
        self._storage[HEADER_BYTES : HEADER_BYTES + full_bytes] = bytes(full_bytes)

    def count(self) -> int:
        """
        Returns the number of set bits in this array.
        """

        bit_count = self.bit_count
        # little-endian payload means the whole payload is one integer with bit n at 1 << n
        payload = int.from_bytes(self._storage[HEADER_BYTES:], byteorder=BYTE_ORDER)
        return (payload & ((1 << bit_count) - 1)).bit_count()

    def __len__(self) -> int:
        return self.bit_count

    def __iter__(self) -> Iterator[bool]:
        for idx in range(0, self.bit_count):
            yield self.test(idx)

    def __getitem__(self, item: int) -> bool:
        return self.test(item)

    def __setitem__(self, key: int, value: bool) -> None:
        if value:
            self.set(key)
        else:
            self.clear(key)

    def __bytes__(self) -> bytes:
        return bytes(self._storage)

    @override
    def __repr__(self) -> str:
        return (
            f"<{type(self).__name__} bit_count={self.bit_count} limb_count={self.limb_count}>"
        )


class HeapBitArray(BitArray):
    """
    A bit array that owns a buffer taken from a :class:`.BufferPool`.

    The buffer goes back to the pool when :meth:`release` is called, or when the ``with`` block
    the array is used in exits. Any operation on a released array raises :class:`ValueError`.
    """

    __slots__ = ("_pool", "_buffer")

    def __init__(self, buffer: bytearray, *, pool: BufferPool, checked: bool = True) -> None:
        """
        :param buffer: A buffer acquired from ``pool``, with its header already written.
        :param pool: The pool to give the buffer back to on release.
        :param checked: If True, bit indexes are validated against the bit count.
        """

        super().__init__(memoryview(buffer), checked=checked)

        self._pool = pool
        self._buffer: bytearray | None = buffer

    @property
    def released(self) -> bool:
        """
        Whether this array's buffer has been given back to its pool.
        """

        return self._buffer is None

    def release(self) -> None:
        """
        Gives this array's buffer back to its pool. Releasing an already-released array does
        nothing.
        """

        if self._buffer is None:
            return

        buffer, self._buffer = self._buffer, None
        self._storage.release()
        self._pool.give_back(buffer)
        logger.trace(f"Released {len(buffer)} byte buffer")

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.release()

    @override
    def __repr__(self) -> str:
        if self._buffer is None:
            return f"<{type(self).__name__} (released)>"

        return super().__repr__()
