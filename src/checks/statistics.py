"""
Statistical smoke tests. Not a substitute for a real test battery.
"""

from __future__ import annotations

import numpy as np

from blabla_types import Word
from prng import DEFAULT_ROUNDS, DEFAULT_STREAM, BlaBla, blabla_family
from prng.constants import BLOCK_WORDS, WORD_BITS


def monobit_fraction(words: np.ndarray) -> float:
    """Return the fraction of set bits across a uint64 word array."""
    if words.shape[0] == 0:
        return 0.0
    bits = np.unpackbits(words.astype(np.uint64).view(np.uint8))
    return float(bits.mean())


def _first_block(gen: BlaBla) -> np.ndarray:
    return gen.random_raw(BLOCK_WORDS)


def avalanche_fraction(
    seedval: Word,
    bit: int,
    stream: Word = DEFAULT_STREAM,
    rounds: int = DEFAULT_ROUNDS,
) -> float:
    """Fraction of first-block bits that change when one seed bit flips.

    Args:
        seedval: Base seed word.
        bit: Index of the seed bit to flip (0-63).
        stream: Stream selector held fixed.
        rounds: Round count of the generator family.

    Returns:
        Hamming distance between the two first blocks divided by 1024.
    """
    if not 0 <= bit < WORD_BITS:
        raise ValueError(f"bit must be in [0, {WORD_BITS}), got {bit}")
    family = blabla_family(rounds)
    base = _first_block(family(seedval, stream))
    flipped = _first_block(family(seedval ^ (1 << bit), stream))
    return monobit_fraction(base ^ flipped)
