"""Tests for draw summaries and state snapshots."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest

from prng import BlaBla, blabla_family
from report import load_state, save_state, summarize_words, write_summary
from toml_io import load_toml


def test_summarize_words() -> None:
    """Summary records count, ends and bit density."""
    words = np.array([0, 2**64 - 1, 5], dtype=np.uint64)
    summary = summarize_words(words, start_counter=16, blocks_generated=1)
    assert summary.count == 3
    assert summary.start_counter == 16
    assert summary.first_word == 0
    assert summary.last_word == 5
    assert summary.ones_fraction == pytest.approx((64 + 2) / 192)


def test_summarize_empty() -> None:
    """An empty draw gives a zeroed summary."""
    summary = summarize_words(np.empty(0, dtype=np.uint64), 7, 0)
    assert summary.count == 0
    assert summary.start_counter == 7
    assert summary.ones_fraction == 0.0


def test_write_summary_stores_words_as_strings(tmp_path: Path) -> None:
    """Unsigned words land in TOML as decimal strings."""
    words = np.array([2**64 - 1], dtype=np.uint64)
    path = tmp_path / "summary.toml"
    write_summary(path, summarize_words(words, 0, 1))
    data = load_toml(path)
    assert data["first_word"] == str(2**64 - 1)
    assert data["count"] == 1
    assert data["blocks_generated"] == 1


def test_state_snapshot_roundtrip(tmp_path: Path) -> None:
    """save_state/load_state preserve family, key and counter."""
    gen = blabla_family(20)(2**64 - 1, 4)
    gen.discard(12345)
    path = tmp_path / "state.toml"
    save_state(path, gen)
    restored = load_state(path)
    assert type(restored) is type(gen)
    assert restored == gen
    assert load_toml(path)["family"] == "BlaBla20"


def test_load_state_rejects_missing_fields(tmp_path: Path) -> None:
    """Snapshots need both rounds and state."""
    path = tmp_path / "state.toml"
    path.write_text('state = "1 2 3 4 5"\n', encoding="utf-8")
    with pytest.raises(ValueError, match="rounds"):
        load_state(path)
    path.write_text("rounds = 10\n", encoding="utf-8")
    with pytest.raises(ValueError, match="state"):
        load_state(path)


def test_load_state_default_family(tmp_path: Path) -> None:
    """A 10-round snapshot restores a plain BlaBla."""
    path = tmp_path / "state.toml"
    save_state(path, BlaBla())
    assert type(load_state(path)) is BlaBla
