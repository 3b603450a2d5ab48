"""
Independent generator streams for concurrent work.

A BlaBla instance is not safe to share between threads. Instead each
worker gets its own instance on a distinct stream of a common seed.
"""

from __future__ import annotations

from dataclasses import dataclass

import jax
import jax.numpy as jnp
import numpy as np

from blabla_types import Word
from prng import DEFAULT_ROUNDS, DEFAULT_SEED, BlaBla, blabla_family


@dataclass(frozen=True, slots=True)
class StreamFamily:
    """Hands out generators that share a seed but not a stream.

    The family is immutable: every call returns a fresh generator at
    position 0, so the same arguments always give the same sequence.
    """

    seed: Word = DEFAULT_SEED
    rounds: int = DEFAULT_ROUNDS

    def generator_for_stream(self, stream: Word) -> BlaBla:
        """Create a generator for an explicit stream selector.

        Args:
            stream: 64-bit stream selector.

        Returns:
            A new generator seeded with (seed, stream).
        """
        return blabla_family(self.rounds)(self.seed, stream)

    def generator_for_worker(self, index: int) -> BlaBla:
        """Create the generator for worker `index`.

        Args:
            index: Non-negative worker index, used as the stream selector.

        Returns:
            A new generator private to that worker.
        """
        if index < 0:
            raise ValueError(f"worker index must be non-negative, got {index}")
        return self.generator_for_stream(index)


def jax_key(gen: BlaBla) -> jax.Array:
    """Draw one word and pack it as a JAX PRNGKey (uint32[2]).

    The high half becomes key[0] and the low half key[1], matching the
    layout of jax.random.PRNGKey.
    """
    word = gen.next()
    halves = np.array([word >> 32, word & 0xFFFFFFFF], dtype=np.uint32)
    return jnp.asarray(halves)
