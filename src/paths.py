"""
Centralized path conventions for runs/ outputs.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Final

# Default base directory for run artifacts.
RUNS_DIR: Final[Path] = Path("runs")


@dataclass(frozen=True, slots=True)
class RunPaths:
    """All filesystem paths for a single CLI run."""

    root: Path
    config_toml: Path
    events_toml: Path
    state_toml: Path
    words_txt: Path
    summary_toml: Path
    verify_toml: Path

    @staticmethod
    def create(run_id: str, runs_dir: Path = RUNS_DIR) -> RunPaths:
        """Create the run directory runs_dir/<run_id>."""
        root = (runs_dir / run_id).resolve()
        root.mkdir(parents=True, exist_ok=True)
        return RunPaths(
            root=root,
            config_toml=root / "config.toml",
            events_toml=root / "events.toml",
            state_toml=root / "state.toml",
            words_txt=root / "words.txt",
            summary_toml=root / "summary.toml",
            verify_toml=root / "verify_results.toml",
        )
