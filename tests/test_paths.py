"""Tests for run directory layout."""

from __future__ import annotations

from pathlib import Path

from paths import RunPaths


def test_create_run_paths(tmp_path: Path) -> None:
    """RunPaths.create makes the run directory and names artifacts."""
    paths = RunPaths.create("20250101_000000_demo", tmp_path)
    assert paths.root == (tmp_path / "20250101_000000_demo").resolve()
    assert paths.root.is_dir()
    assert paths.events_toml.name == "events.toml"
    assert paths.state_toml.name == "state.toml"
    assert paths.verify_toml.name == "verify_results.toml"
    assert paths.words_txt.parent == paths.root


def test_create_is_idempotent(tmp_path: Path) -> None:
    """Creating the same run twice is harmless."""
    first = RunPaths.create("run", tmp_path)
    second = RunPaths.create("run", tmp_path)
    assert first == second
