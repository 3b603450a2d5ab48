"""Tests for per-worker stream derivation and the JAX key bridge."""

from __future__ import annotations

import jax.numpy as jnp
import pytest

from checks.vectors import DEFAULT_FIRST_32
from prng import BlaBla, blabla_family
from streams import StreamFamily, jax_key


def test_worker_generators_are_independent() -> None:
    """Each worker gets its own stream of the shared seed."""
    family = StreamFamily(seed=99)
    first = family.generator_for_worker(0)
    second = family.generator_for_worker(1)
    assert first == BlaBla(99, 0)
    assert second == BlaBla(99, 1)
    assert first.random_raw(16).tolist() != second.random_raw(16).tolist()


def test_worker_generators_are_fresh() -> None:
    """Repeated calls give new generators at position 0."""
    family = StreamFamily(seed=3)
    a = family.generator_for_stream(7)
    a.next()
    b = family.generator_for_stream(7)
    assert b.counter == 0
    assert a is not b


def test_stream_family_rounds() -> None:
    """The family's round count selects the generator class."""
    gen = StreamFamily(seed=1, rounds=20).generator_for_worker(2)
    assert type(gen) is blabla_family(20)


def test_negative_worker_rejected() -> None:
    """Worker indices must be non-negative."""
    with pytest.raises(ValueError, match="non-negative"):
        StreamFamily().generator_for_worker(-1)


def test_jax_key_packs_one_word() -> None:
    """jax_key splits the next word into a uint32[2] key."""
    gen = BlaBla()
    key = jax_key(gen)
    word = DEFAULT_FIRST_32[0]
    assert key.shape == (2,)
    assert key.dtype == jnp.uint32
    assert int(key[0]) == word >> 32
    assert int(key[1]) == word & 0xFFFFFFFF
    assert gen.counter == 1
