"""
The BlaBla block function.

Expands four key words and a block index into 16 output words: a fixed
16-word input is mixed by `rounds` double passes of the ARX quarter-round
over columns then diagonals, and the input is added back at the end.

Quarter-rounds within a column pass (and within a diagonal pass) touch
disjoint words, so each pass runs as one vectorized numpy step over all
four quadruples and over any number of blocks at once.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from blabla_types import Block, BlockIndex, Key
from prng.constants import (
    BLOCK_CONSTANTS,
    BLOCK_NONCE,
    BLOCK_WORDS,
    DEFAULT_ROUNDS,
    QUARTER_ROUNDS,
    ROTATIONS,
    WORD_BITS,
)

_CONSTANTS = np.array(BLOCK_CONSTANTS, dtype=np.uint64)
_NONCE = np.array(BLOCK_NONCE, dtype=np.uint64)
_ONE = np.uint64(1)

# (a, b, c, d) index vectors for the column pass and the diagonal pass.
_COLUMNS = tuple(np.array(lane) for lane in zip(*QUARTER_ROUNDS[:4]))
_DIAGONALS = tuple(np.array(lane) for lane in zip(*QUARTER_ROUNDS[4:]))


def _rotr(x: Block, n: int) -> Block:
    """Rotate every uint64 lane right by n bits (0 < n < 64)."""
    return (x >> np.uint64(n)) | (x << np.uint64(WORD_BITS - n))


def _mix(
    x: Block, a: np.ndarray, b: np.ndarray, c: np.ndarray, d: np.ndarray
) -> None:
    """Apply one quarter-round to x[:, (a, b, c, d)] in place."""
    r1, r2, r3, r4 = ROTATIONS
    x[:, a] += x[:, b]
    x[:, d] = _rotr(x[:, d] ^ x[:, a], r1)
    x[:, c] += x[:, d]
    x[:, b] = _rotr(x[:, b] ^ x[:, c], r2)
    x[:, a] += x[:, b]
    x[:, d] = _rotr(x[:, d] ^ x[:, a], r3)
    x[:, c] += x[:, d]
    x[:, b] = _rotr(x[:, b] ^ x[:, c], r4)


def block_input(key: Key, block_indices: Sequence[int]) -> Block:
    """Build the pre-permutation input rows for a batch of block indices.

    Args:
        key: The four key words.
        block_indices: Logical block numbers (ctr // 16).

    Returns:
        uint64 array of shape (len(block_indices), 16).
    """
    indices = np.asarray(block_indices, dtype=np.uint64).reshape(-1)
    rows = np.zeros((indices.shape[0], BLOCK_WORDS), dtype=np.uint64)
    rows[:, 0:4] = _CONSTANTS
    rows[:, 4:8] = np.array(key, dtype=np.uint64)
    rows[:, 8:13] = _NONCE
    # Block counters start at 1; words 14-15 stay zero.
    rows[:, 13] = indices + _ONE
    return rows


def generate_blocks(
    key: Key, block_indices: Sequence[int], rounds: int = DEFAULT_ROUNDS
) -> Block:
    """Compute output blocks for several block indices in one pass.

    Args:
        key: The four key words.
        block_indices: Logical block numbers to compute.
        rounds: Number of column+diagonal double passes.

    Returns:
        uint64 array of shape (len(block_indices), 16).
    """
    initial = block_input(key, block_indices)
    working = initial.copy()
    for _ in range(rounds):
        _mix(working, *_COLUMNS)
        _mix(working, *_DIAGONALS)
    # Feed-forward keeps the block function one-way.
    working += initial
    return working


def generate_block(
    key: Key, block_index: BlockIndex, rounds: int = DEFAULT_ROUNDS
) -> Block:
    """Compute the 16-word output block for a single block index."""
    return generate_blocks(key, [block_index], rounds)[0]
