"""
Draw summaries and state snapshots as TOML.

Generator words are unsigned 64-bit, which TOML integers cannot hold, so
words and states are written as decimal strings.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import numpy as np

from checks.statistics import monobit_fraction
from prng import BlaBla, blabla_family
from toml_io import TomlValue, load_toml, save_toml


@dataclass(frozen=True, slots=True)
class DrawSummary:
    """Figures describing one batch of drawn words.

    Attributes:
        count: Number of words drawn.
        start_counter: Generator position before the first word.
        blocks_generated: Blocks computed while drawing.
        first_word: First word drawn (0 if none).
        last_word: Last word drawn (0 if none).
        ones_fraction: Mean fraction of set bits per word.
    """

    count: int
    start_counter: int
    blocks_generated: int
    first_word: int
    last_word: int
    ones_fraction: float


def summarize_words(
    words: np.ndarray, start_counter: int, blocks_generated: int
) -> DrawSummary:
    """Build a DrawSummary for a uint64 array of drawn words."""
    count = int(words.shape[0])
    if count == 0:
        return DrawSummary(0, start_counter, blocks_generated, 0, 0, 0.0)
    return DrawSummary(
        count=count,
        start_counter=start_counter,
        blocks_generated=blocks_generated,
        first_word=int(words[0]),
        last_word=int(words[-1]),
        ones_fraction=monobit_fraction(words),
    )


def write_summary(path: Path, summary: DrawSummary) -> None:
    """Write a draw summary TOML file."""
    data: dict[str, TomlValue] = {
        "count": summary.count,
        "start_counter": str(summary.start_counter),
        "blocks_generated": summary.blocks_generated,
        "first_word": str(summary.first_word),
        "last_word": str(summary.last_word),
        "ones_fraction": summary.ones_fraction,
    }
    save_toml(path, data)


def save_state(path: Path, gen: BlaBla) -> None:
    """Write a generator state snapshot."""
    data: dict[str, TomlValue] = {
        "family": type(gen).__name__,
        "rounds": gen.rounds,
        "state": gen.serialize(),
    }
    save_toml(path, data)


def load_state(path: Path) -> BlaBla:
    """Rebuild a generator from a state snapshot written by save_state.

    Raises:
        ValueError: If the snapshot is missing fields or malformed.
    """
    data = load_toml(path)
    rounds = data.get("rounds")
    state = data.get("state")
    if not isinstance(rounds, int) or isinstance(rounds, bool):
        raise ValueError("Missing int key: rounds")
    if not isinstance(state, str):
        raise ValueError("Missing string key: state")
    return blabla_family(rounds).from_text(state)
