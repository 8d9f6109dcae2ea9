import logging

from limbarray.utils import TRACE

# our public exports, relatively minimal
from limbarray.array import BitArray as BitArray, HeapBitArray as HeapBitArray
from limbarray.construct import (
    adopt as adopt,
    allocate as allocate,
    allocate_zeroed as allocate_zeroed,
    declare_inplace as declare_inplace,
    release as release,
)
from limbarray.exc import (
    BitArrayError as BitArrayError,
    BitIndexError as BitIndexError,
    NotOwnedError as NotOwnedError,
)
from limbarray.layout import (
    HEADER_BYTES as HEADER_BYTES,
    LIMB_BITS as LIMB_BITS,
    LIMB_BYTES as LIMB_BYTES,
    limb_count_for as limb_count_for,
    locate as locate,
)
from limbarray.pool import BufferPool as BufferPool, PoolStatistics as PoolStatistics
from limbarray.render import render_base2 as render_base2, render_base16 as render_base16

logging.addLevelName(TRACE, "TRACE")
