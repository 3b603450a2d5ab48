"""Tests for the vectorized block function."""

from __future__ import annotations

import numpy as np

from checks.vectors import DEFAULT_FIRST_32
from prng.constants import (
    BLOCK_CONSTANTS,
    BLOCK_NONCE,
    DEFAULT_SEED,
    DEFAULT_STREAM,
    MASK64,
    QUARTER_ROUNDS,
    RESERVED_KEY,
)
from prng.permutation import block_input, generate_block, generate_blocks

DEFAULT_KEY = (RESERVED_KEY[0], RESERVED_KEY[1], DEFAULT_SEED, DEFAULT_STREAM)


def _rotr(value: int, n: int) -> int:
    return ((value >> n) | (value << (64 - n))) & MASK64


def _reference_block(
    key: tuple[int, int, int, int], index: int, rounds: int
) -> list[int]:
    """Word-at-a-time block function over plain ints."""
    initial = [
        *BLOCK_CONSTANTS,
        *key,
        *BLOCK_NONCE,
        (index + 1) & MASK64,
        0,
        0,
    ]
    x = list(initial)
    for _ in range(rounds):
        for a, b, c, d in QUARTER_ROUNDS:
            x[a] = (x[a] + x[b]) & MASK64
            x[d] = _rotr(x[d] ^ x[a], 32)
            x[c] = (x[c] + x[d]) & MASK64
            x[b] = _rotr(x[b] ^ x[c], 24)
            x[a] = (x[a] + x[b]) & MASK64
            x[d] = _rotr(x[d] ^ x[a], 16)
            x[c] = (x[c] + x[d]) & MASK64
            x[b] = _rotr(x[b] ^ x[c], 63)
    return [(w + i) & MASK64 for w, i in zip(x, initial, strict=True)]


def test_block_input_layout() -> None:
    """Input rows hold constants, key, nonce and index + 1."""
    key = (1, 2, 3, 4)
    rows = block_input(key, [0, 9])
    assert rows.shape == (2, 16)
    assert rows.dtype == np.uint64
    assert [int(w) for w in rows[0, 0:4]] == list(BLOCK_CONSTANTS)
    assert [int(w) for w in rows[1, 4:8]] == [1, 2, 3, 4]
    assert [int(w) for w in rows[0, 8:13]] == list(BLOCK_NONCE)
    assert int(rows[0, 13]) == 1
    assert int(rows[1, 13]) == 10
    assert int(rows[1, 14]) == 0 and int(rows[1, 15]) == 0


def test_vectorized_matches_word_at_a_time() -> None:
    """Parallel column/diagonal passes equal sequential quarter-rounds."""
    key = (0xDEADBEEF, MASK64, 0, 0x8000000000000000)
    for rounds in (1, 2, 10):
        for index in (0, 1, 17, (1 << 60) - 1):
            block = generate_block(key, index, rounds)
            assert [int(w) for w in block] == _reference_block(
                key, index, rounds
            )


def test_reference_block_matches_pinned_vector() -> None:
    """The first default block is the first 16 pinned words."""
    assert _reference_block(DEFAULT_KEY, 0, 10) == list(DEFAULT_FIRST_32[:16])
    block = generate_block(DEFAULT_KEY, 1)
    assert [int(w) for w in block] == list(DEFAULT_FIRST_32[16:32])


def test_batch_matches_single_blocks() -> None:
    """generate_blocks rows equal individual generate_block calls."""
    indices = [5, 0, 3]
    batch = generate_blocks(DEFAULT_KEY, indices)
    for row, index in zip(batch, indices, strict=True):
        assert np.array_equal(row, generate_block(DEFAULT_KEY, index))


def test_round_count_changes_output() -> None:
    """Different round counts give different blocks."""
    ten = generate_block(DEFAULT_KEY, 0, 10)
    twenty = generate_block(DEFAULT_KEY, 0, 20)
    assert not np.array_equal(ten, twenty)


def test_zero_rounds_is_doubled_input() -> None:
    """With no rounds the feed-forward doubles every input word."""
    block = generate_block(DEFAULT_KEY, 4, 0)
    initial = block_input(DEFAULT_KEY, [4])[0]
    assert np.array_equal(block, initial + initial)
