from __future__ import annotations

__all__ = (
    "BitArrayError",
    "BitIndexError",
    "NotOwnedError",
)


class BitArrayError(Exception):
    """
    Base class exception for all bit array exceptions.
    """

    __slots__ = ()


class BitIndexError(BitArrayError, IndexError):
    """
    Thrown when a checked bit array is given a bit index outside of its capacity.
    """

    __slots__ = ("index", "bit_count")

    def __init__(self, index: int, bit_count: int):
        #: The offending bit index.
        self.index: int = index
        #: The capacity of the array the index was used on.
        self.bit_count: int = bit_count

        super().__init__(f"bit index {index} out of range (bit count: {bit_count})")


class NotOwnedError(BitArrayError):
    """
    Thrown when trying to release a bit array that doesn't own its storage.
    """

    __slots__ = ()
