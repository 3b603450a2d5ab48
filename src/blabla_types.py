"""
Core type aliases and small protocols.

Hard requirements:
- No Any
- Words are plain Python ints in [0, 2**64) at the public surface
- Blocks are numpy uint64 arrays internally
"""

from __future__ import annotations

from typing import NewType, Protocol

import numpy as np
import numpy.typing as npt

# One 64-bit output or key word.
type Word = int
# Key material: constants/seed/stream, always exactly four words.
type Key = tuple[Word, Word, Word, Word]
# A (16,) or (n, 16) uint64 array of permutation output.
type Block = npt.NDArray[np.uint64]

# Strongly-typed integer wrappers for positions.
Counter = NewType("Counter", int)
BlockIndex = NewType("BlockIndex", int)


class EntropySource(Protocol):
    """Anything that can produce 32-bit seed words on request.

    numpy.random.SeedSequence satisfies this protocol.
    """

    def generate_state(
        self, n_words: int, dtype: type[np.uint32]
    ) -> npt.NDArray[np.uint32]: ...
