from __future__ import annotations

from limbarray.array import BitArray
from limbarray.layout import LIMB_BYTES

__all__ = ("render_base16", "render_base2")


def render_base16(array: BitArray) -> str:
    """
    Renders every storage unit of an array, header first, as hex byte pairs in memory order.
    Units are separated by a single space.
    """

    raw = bytes(array)
    units = (raw[idx : idx + LIMB_BYTES] for idx in range(0, len(raw), LIMB_BYTES))
    return " ".join(unit.hex() for unit in units)


def render_base2(array: BitArray) -> str:
    """
    Renders the bits of an array as ``0`` and ``1`` characters, bit 0 first.
    """

    return "".join("1" if bit else "0" for bit in array)
