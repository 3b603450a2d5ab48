"""
BlaBla generator: block function, constants and the generator class.
"""

from prng.constants import DEFAULT_ROUNDS, DEFAULT_SEED, DEFAULT_STREAM
from prng.generator import BlaBla, blabla_family, pack_entropy
from prng.permutation import generate_block, generate_blocks

__all__ = [
    "DEFAULT_ROUNDS",
    "DEFAULT_SEED",
    "DEFAULT_STREAM",
    "BlaBla",
    "blabla_family",
    "generate_block",
    "generate_blocks",
    "pack_entropy",
]
