import pytest

from limbarray import BitArray, BufferPool, declare_inplace


@pytest.fixture
def pool() -> BufferPool:
    """
    A fresh pool, so that allocation tests don't share idle buffers.
    """

    return BufferPool()


@pytest.fixture
def full_128() -> BitArray:
    """
    A 128-bit array with every bit set.
    """

    array = declare_inplace(128)
    for idx in range(0, 128):
        array.set(idx)

    return array
