"""
Layout arithmetic shared by every bit array.

A bit array is a single run of bytes: one header slot holding the bit count, followed by the
limbs holding the bits themselves. Both the header and the limbs are ``LIMB_BYTES`` wide and
little-endian, so bit ``n`` always lives in payload byte ``n // 8``.
"""

from __future__ import annotations

from typing import Final, Literal

__all__ = (
    "BITS_PER_BYTE",
    "LIMB_BYTES",
    "LIMB_BITS",
    "HEADER_BYTES",
    "BYTE_ORDER",
    "MAX_BIT_COUNT",
    "limb_count_for",
    "storage_units_for",
    "storage_bytes_for",
    "locate",
    "byte_span",
    "adoptable_bit_count",
    "pack_header",
    "unpack_header",
)

BITS_PER_BYTE: Final[int] = 8

#: The width of a single storage unit, in bytes.
LIMB_BYTES: Final[int] = 4

#: The width of a single storage unit, in bits.
LIMB_BITS: Final[int] = LIMB_BYTES * BITS_PER_BYTE

#: The header slot is exactly one storage unit wide.
HEADER_BYTES: Final[int] = LIMB_BYTES

#: Byte order of both the header and the limbs.
BYTE_ORDER: Final[Literal["little", "big"]] = "little"

#: The largest bit count that fits in the header slot.
MAX_BIT_COUNT: Final[int] = (1 << LIMB_BITS) - 1


def limb_count_for(bit_count: int) -> int:
    """
    Returns the number of limbs needed to store ``bit_count`` bits, not counting the header.
    """

    if bit_count < 0:
        raise ValueError(f"bit count must be non-negative, not {bit_count}")

    return (bit_count + LIMB_BITS - 1) // LIMB_BITS


def storage_units_for(bit_count: int) -> int:
    """
    Returns the number of storage units (the header slot plus the limbs) for ``bit_count`` bits.
    """

    return 1 + limb_count_for(bit_count)


def storage_bytes_for(bit_count: int) -> int:
    """
    Returns the total number of bytes needed for a bit array of ``bit_count`` bits.
    """

    return storage_units_for(bit_count) * LIMB_BYTES


def locate(n: int) -> tuple[int, int]:
    """
    Maps a bit index to the limb containing it and the mask selecting it within that limb.

    Bits are numbered least-significant first: bit 0 is ``1 << 0`` of limb 0, bit 33 is
    ``1 << 1`` of limb 1.

    :param n: The bit index.
    :return: A ``(limb_index, mask)`` pair.
    """

    limb_index, bit = divmod(n, LIMB_BITS)
    return limb_index, 1 << bit


def byte_span(bit_count: int) -> tuple[int, int]:
    """
    Splits a prefix of ``bit_count`` bits into whole bytes and the bits left over after them.
    """

    return divmod(bit_count, BITS_PER_BYTE)


def adoptable_bit_count(buffer_size: int) -> int:
    """
    Returns the number of bits an adopted buffer of ``buffer_size`` bytes holds: every whole
    byte after the header slot, up to the largest whole-byte count the header can describe.
    """

    payload_bytes = min(buffer_size - HEADER_BYTES, MAX_BIT_COUNT // BITS_PER_BYTE)
    return payload_bytes * BITS_PER_BYTE


def pack_header(bit_count: int) -> bytes:
    """
    Encodes a bit count into the bytes of a header slot.
    """

    if not 0 <= bit_count <= MAX_BIT_COUNT:
        raise ValueError(f"bit count {bit_count} does not fit in a {LIMB_BITS}-bit header")

    return bit_count.to_bytes(HEADER_BYTES, byteorder=BYTE_ORDER)


def unpack_header(data: bytes | memoryview) -> int:
    """
    Decodes the bit count from the first ``HEADER_BYTES`` of ``data``.
    """

    return int.from_bytes(data[:HEADER_BYTES], byteorder=BYTE_ORDER)
