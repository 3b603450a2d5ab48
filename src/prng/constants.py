"""
Fixed constants of the BlaBla generator.

None of these may change without changing every output sequence.
"""

from __future__ import annotations

from typing import Final

WORD_BITS: Final[int] = 64
MASK64: Final[int] = (1 << WORD_BITS) - 1
BLOCK_WORDS: Final[int] = 16
DEFAULT_ROUNDS: Final[int] = 10

DEFAULT_SEED: Final[int] = 0x1EE106E9041096E4
DEFAULT_STREAM: Final[int] = 0x037926AFC39DCBD9

# Key words 0-1, reserved for a wider seed/stream.
RESERVED_KEY: Final[tuple[int, int]] = (0x1FE2C9482A400D2E, 0xE6C7993DA713D61D)

# Block input words 0-3.
BLOCK_CONSTANTS: Final[tuple[int, int, int, int]] = (
    0x6170786593810FAB,
    0x3320646EC7398AEE,
    0x79622D3217318274,
    0x6B206574BABADADA,
)

# Block input words 8-12.
BLOCK_NONCE: Final[tuple[int, int, int, int, int]] = (
    0x2AE36E593E46AD5F,
    0xB68F143029225FC9,
    0x8DA1E08468303AA6,
    0xA48A209ACD50A4A7,
    0x7FDC12F23F90778C,
)

# Quarter-round index quadruples, applied in this order every round.
QUARTER_ROUNDS: Final[tuple[tuple[int, int, int, int], ...]] = (
    (0, 4, 8, 12),
    (1, 5, 9, 13),
    (2, 6, 10, 14),
    (3, 7, 11, 15),
    (0, 5, 10, 15),
    (1, 6, 11, 12),
    (2, 7, 8, 13),
    (3, 4, 9, 14),
)

# Right-rotation amounts for the four steps of a quarter-round.
ROTATIONS: Final[tuple[int, int, int, int]] = (32, 24, 16, 63)

# Entropy seeding consumes this many 32-bit words.
ENTROPY_WORDS: Final[int] = 8
