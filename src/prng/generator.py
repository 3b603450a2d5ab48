"""
BlaBla: a counter-based 64-bit PRNG built on an ARX block function.

The generator keeps four key words and a 64-bit position counter. Output
word `ctr` is word `ctr % 16` of block `ctr // 16`; the most recent block
is cached and recomputed only when a draw lands in a different block.
"""

from __future__ import annotations

import functools
import operator
from typing import ClassVar, Final, Self

import numpy as np

from blabla_types import Block, BlockIndex, Counter, EntropySource, Key, Word
from prng.constants import (
    BLOCK_WORDS,
    DEFAULT_ROUNDS,
    DEFAULT_SEED,
    DEFAULT_STREAM,
    ENTROPY_WORDS,
    MASK64,
    RESERVED_KEY,
)
from prng.permutation import generate_block, generate_blocks

# Number of distinct block indices a 64-bit counter can address.
_BLOCK_SPACE: Final[int] = (MASK64 + 1) // BLOCK_WORDS
_FIELD_NAMES: Final[tuple[str, ...]] = ("key0", "key1", "key2", "key3", "ctr")


def _check_word(value: int, name: str) -> Word:
    """Validate that value is an int in [0, 2**64).

    Raises:
        TypeError: If value is not an integer.
        ValueError: If value does not fit in an unsigned 64-bit word.
    """
    if isinstance(value, bool):
        raise TypeError(f"{name} must be an int, not bool")
    word = operator.index(value)
    if not 0 <= word <= MASK64:
        raise ValueError(f"{name} out of range for a 64-bit word: {word}")
    return word


def _parse_field(token: str, name: str) -> Word:
    """Parse one serialized decimal field.

    Raises:
        ValueError: If the token is not a plain decimal u64.
    """
    # Only ASCII digits: no sign, no grouping, no other numerals.
    if not (token.isascii() and token.isdigit()):
        raise ValueError(f"{name}: not a decimal integer: {token!r}")
    value = int(token)
    if value > MASK64:
        raise ValueError(f"{name}: out of range for a 64-bit word: {token}")
    return value


def pack_entropy(words: np.ndarray) -> Key:
    """Pack eight 32-bit words pairwise into four 64-bit key words.

    Key word i takes words[2i] as its high half and words[2i + 1] as its
    low half.
    """
    halves = [int(w) & 0xFFFFFFFF for w in words[:ENTROPY_WORDS]]
    return (
        (halves[0] << 32) | halves[1],
        (halves[2] << 32) | halves[3],
        (halves[4] << 32) | halves[5],
        (halves[6] << 32) | halves[7],
    )


class BlaBla:
    """Seekable 64-bit PRNG with 10 rounds.

    Other round counts are separate generator families obtained through
    `blabla_family`; instances of different families never compare equal.

    Instances are not thread-safe. Give each worker its own instance
    (see `streams.StreamFamily`) or guard a shared one with a lock.
    """

    rounds: ClassVar[int] = DEFAULT_ROUNDS

    def __init__(
        self, seedval: Word = DEFAULT_SEED, stream: Word = DEFAULT_STREAM
    ) -> None:
        """Seed from a (seed, stream) pair."""
        # Number of blocks this instance has computed so far.
        self.blocks_generated = 0
        self.seed(seedval, stream)

    @classmethod
    def from_entropy(cls, source: EntropySource) -> Self:
        """Create a generator seeded from an entropy source."""
        gen = cls()
        gen.seed_from_entropy(source)
        return gen

    @classmethod
    def from_text(cls, text: str) -> Self:
        """Create a generator from the output of `serialize`."""
        return cls().deserialize(text)

    @staticmethod
    def min_value() -> Word:
        """Smallest value `next` can return."""
        return 0

    @staticmethod
    def max_value() -> Word:
        """Largest value `next` can return."""
        return MASK64

    @property
    def key(self) -> Key:
        """The four key words."""
        return self._key

    @property
    def counter(self) -> Counter:
        """Index of the next word to be drawn."""
        return Counter(self._ctr)

    def seed(
        self, seedval: Word = DEFAULT_SEED, stream: Word = DEFAULT_STREAM
    ) -> None:
        """Reset to position 0 of the stream selected by (seedval, stream).

        Args:
            seedval: Seed word, stored as key word 2.
            stream: Stream selector, stored as key word 3.
        """
        seedval = _check_word(seedval, "seedval")
        stream = _check_word(stream, "stream")
        self._key: Key = (RESERVED_KEY[0], RESERVED_KEY[1], seedval, stream)
        self._reset()

    def seed_from_entropy(self, source: EntropySource) -> None:
        """Reset with all four key words taken from an entropy source.

        Exactly eight 32-bit words are requested from
        `source.generate_state`; unlike `seed`, the reserved key words are
        overwritten too.
        """
        words = source.generate_state(ENTROPY_WORDS, np.uint32)
        self._key = pack_entropy(np.asarray(words))
        self._reset()

    def next(self) -> Word:
        """Draw one 64-bit word and advance the counter by one."""
        block_idx, offset = divmod(self._ctr, BLOCK_WORDS)
        if block_idx != self._block_idx:
            self._refresh(BlockIndex(block_idx))
        self._ctr = (self._ctr + 1) & MASK64
        return int(self._block[offset])

    __next__ = next
    __call__ = next

    def __iter__(self) -> Self:
        return self

    def random_raw(self, size: int) -> np.ndarray:
        """Draw `size` words at once as a uint64 array.

        Equivalent to `size` calls of `next`, but every block involved is
        computed in a single vectorized pass.

        Args:
            size: Number of words to draw.

        Returns:
            uint64 array of shape (size,).

        Raises:
            ValueError: If size is negative.
        """
        size = operator.index(size)
        if size < 0:
            raise ValueError(f"size must be non-negative, got {size}")
        if size == 0:
            return np.empty((0,), dtype=np.uint64)

        first_block, offset = divmod(self._ctr, BLOCK_WORDS)
        n_blocks = (offset + size + BLOCK_WORDS - 1) // BLOCK_WORDS
        # Block indices wrap with the counter.
        indices = (
            np.arange(n_blocks, dtype=np.uint64) + np.uint64(first_block)
        ) % np.uint64(_BLOCK_SPACE)
        # Reuse the cached block when the draw starts inside it.
        cached = first_block == self._block_idx
        todo = indices[1:] if cached else indices
        blocks = generate_blocks(self._key, todo, self.rounds)
        self.blocks_generated += int(todo.shape[0])
        if cached:
            blocks = np.concatenate([self._block[np.newaxis], blocks])

        # Keep the last block touched as the cache.
        self._block = blocks[-1].copy()
        self._block_idx = BlockIndex(int(indices[-1]))
        self._ctr = (self._ctr + size) & MASK64
        return blocks.reshape(-1)[offset : offset + size]

    def discard(self, n: int) -> None:
        """Skip n words in O(1) without computing any block."""
        n = _check_word(n, "discard count")
        self._ctr = (self._ctr + n) & MASK64

    def serialize(self) -> str:
        """Return the state as five space-separated decimal words.

        Order: key0 key1 key2 key3 ctr. The block cache is never written.
        """
        return " ".join(str(word) for word in (*self._key, self._ctr))

    def deserialize(self, text: str) -> Self:
        """Restore the state written by `serialize`.

        All five fields are parsed before anything is assigned, so a
        failed parse leaves the generator untouched.

        Raises:
            ValueError: If the text does not hold exactly five decimal
                64-bit words.
        """
        tokens = text.split()
        if len(tokens) != len(_FIELD_NAMES):
            raise ValueError(
                f"expected {len(_FIELD_NAMES)} fields, got {len(tokens)}"
            )
        k0, k1, k2, k3, ctr = (
            _parse_field(token, name)
            for token, name in zip(tokens, _FIELD_NAMES, strict=True)
        )
        self._key = (k0, k1, k2, k3)
        self._reset(Counter(ctr))
        return self

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BlaBla) or type(other) is not type(self):
            return NotImplemented
        return self._key == other._key and self._ctr == other._ctr

    # Mutable: equal instances may diverge after a draw.
    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return self.serialize()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(rounds={self.rounds}, ctr={self._ctr})"

    def __reduce__(self) -> tuple[object, tuple[int, str]]:
        # Families are created on demand, so pickle by round count.
        return (_restore, (self.rounds, self.serialize()))

    def _reset(self, ctr: Counter = Counter(0)) -> None:
        """Set the counter and drop the block cache."""
        self._ctr = ctr
        self._block: Block = np.zeros((BLOCK_WORDS,), dtype=np.uint64)
        # None means no block is cached.
        self._block_idx: BlockIndex | None = None

    def _refresh(self, block_idx: BlockIndex) -> None:
        """Recompute the cached block for block_idx."""
        self._block = generate_block(self._key, block_idx, self.rounds)
        self._block_idx = block_idx
        self.blocks_generated += 1


@functools.lru_cache(maxsize=None, typed=True)
def blabla_family(rounds: int) -> type[BlaBla]:
    """Return the generator class for a given round count.

    The same round count always yields the same class, and
    `blabla_family(10)` is `BlaBla` itself.

    Raises:
        ValueError: If rounds is not a positive int.
    """
    if isinstance(rounds, bool) or not isinstance(rounds, int) or rounds < 1:
        raise ValueError(f"rounds must be a positive int, got {rounds!r}")
    if rounds == DEFAULT_ROUNDS:
        return BlaBla
    return type(
        f"BlaBla{rounds}",
        (BlaBla,),
        {"rounds": rounds, "__doc__": f"BlaBla with {rounds} rounds."},
    )


def _restore(rounds: int, text: str) -> BlaBla:
    """Unpickle helper."""
    return blabla_family(rounds).from_text(text)
