"""
Layer 3 — PADDING
=================
Block padding applied to the plaintext before it is sealed.

GCM does not need block alignment. The padding is kept because the sealed
length is part of the wire format peers already expect.

    add_padding:     append k = 16 - len % 16 bytes, each equal to k (1..16)
    remove_padding:  read k from the last byte, reject k == 0 or k > 16
"""

import logging

from ..config import BLOCK_SIZE
from ..exceptions import PaddingError

logger = logging.getLogger(__name__)


def add_padding(data: bytes, block_size: int = BLOCK_SIZE) -> bytes:
    count = block_size - len(data) % block_size
    return bytes(data) + bytes([count]) * count


def remove_padding(data: bytes, block_size: int = BLOCK_SIZE) -> bytes:
    if not data:
        logger.debug("Padding rejected: empty buffer")
        raise PaddingError("Padding incorrect")
    count = data[-1]
    if count == 0 or count > block_size or count > len(data):
        logger.debug(f"Padding rejected: count={count} len={len(data)}")
        raise PaddingError("Padding incorrect")
    return bytes(data[:-count])
