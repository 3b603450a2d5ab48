"""
Command-line entrypoints.

Commands:
- draw: draw words from a configured generator and record the run
- verify: run known-answer and property self-checks
"""

from __future__ import annotations

import argparse
import platform
import sys
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from checks import run_all_checks
from paths import RUNS_DIR, RunPaths
from prng import (
    DEFAULT_ROUNDS,
    DEFAULT_SEED,
    DEFAULT_STREAM,
    BlaBla,
    blabla_family,
)
from report import save_state, summarize_words, write_summary
from toml_io import TomlValue, load_toml, save_toml


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(prog="blabla")
    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("draw", "Draw words from a generator"),
        ("verify", "Run generator self-checks"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument(
            "--config",
            type=Path,
            required=True,
            help="Path to TOML config",
        )
        sub.add_argument(
            "--runs-dir",
            type=Path,
            default=RUNS_DIR,
            help="Directory that receives run artifacts",
        )

    return parser


@dataclass(frozen=True, slots=True)
class RunConfig:
    """Run-level configuration.

    Attributes:
        name: Run name used in artifact paths.
    """

    name: str


@dataclass(frozen=True, slots=True)
class GeneratorConfig:
    """How to construct the generator.

    Attributes:
        seed: Seed word.
        stream: Stream selector word.
        rounds: Round count (generator family).
        state: Serialized state; overrides seed and stream when set.
    """

    seed: int
    stream: int
    rounds: int
    state: str | None


@dataclass(frozen=True, slots=True)
class DrawConfig:
    """What to draw.

    Attributes:
        count: Number of words to draw.
        discard: Words to skip before drawing.
        format: "dec" or "hex".
    """

    count: int
    discard: int
    format: str


@dataclass(frozen=True, slots=True)
class VerifyConfig:
    """Self-check parameters."""

    avalanche_trials: int
    min_flip_fraction: float


_FORMATS = ("dec", "hex")


def _get_int(table: dict[str, TomlValue], key: str) -> int:
    """Fetch a required integer from a TOML table.

    Raises:
        ValueError: If the key is missing or not an int.
    """
    value = table.get(key)
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"Missing int key: {key}")
    return value


def _get_float(table: dict[str, TomlValue], key: str) -> float:
    """Fetch a required float from a TOML table (ints coerced).

    Raises:
        ValueError: If the key is missing or not a float-like value.
    """
    value = table.get(key)
    if isinstance(value, int) and not isinstance(value, bool):
        return float(value)
    if not isinstance(value, float):
        raise ValueError(f"Missing float key: {key}")
    return value


def _get_str(table: dict[str, TomlValue], key: str) -> str:
    """Fetch a required string from a TOML table.

    Raises:
        ValueError: If the key is missing or not a string.
    """
    value = table.get(key)
    if not isinstance(value, str):
        raise ValueError(f"Missing string key: {key}")
    return value


def _get_word(table: dict[str, TomlValue], key: str) -> int:
    """Fetch a required 64-bit word.

    TOML integers stop at 2**63 - 1, so words may also be given as
    strings in any base int() accepts with a prefix ("0x...", "123").

    Raises:
        ValueError: If the key is missing or not a valid word.
    """
    value = table.get(key)
    if isinstance(value, str):
        try:
            value = int(value, 0)
        except ValueError:
            raise ValueError(
                f"Invalid word for key {key}: {value!r}"
            ) from None
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"Missing word key: {key}")
    if not 0 <= value < (1 << 64):
        raise ValueError(f"Word out of range for key {key}: {value}")
    return value


def _get_table(data: dict[str, TomlValue], key: str) -> dict[str, TomlValue]:
    """Fetch a required TOML table.

    Raises:
        ValueError: If the key is missing or not a table.
    """
    value = data.get(key)
    if not isinstance(value, dict):
        raise ValueError(f"Missing TOML table: {key}")
    return value


def _get_table_optional(
    data: dict[str, TomlValue], key: str
) -> dict[str, TomlValue] | None:
    """Fetch an optional TOML table.

    Raises:
        ValueError: If the key exists but is not a table.
    """
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, dict):
        raise ValueError(f"Missing TOML table: {key}")
    return value


def _parse_run_config(config: dict[str, TomlValue]) -> RunConfig:
    """Parse the [run] table."""
    run_table = _get_table(config, "run")
    return RunConfig(name=_get_str(run_table, "name"))


def _parse_generator_config(config: dict[str, TomlValue]) -> GeneratorConfig:
    """Parse the [generator] table."""
    table = _get_table(config, "generator")
    rounds = table.get("rounds", DEFAULT_ROUNDS)
    if not isinstance(rounds, int) or isinstance(rounds, bool) or rounds < 1:
        raise ValueError(f"rounds must be a positive int, got {rounds!r}")
    state = table.get("state")
    if state is not None and not isinstance(state, str):
        raise ValueError("state must be a string")
    if state is not None:
        # A saved state carries its own key; seed and stream are optional.
        return GeneratorConfig(
            seed=_get_word(table, "seed") if "seed" in table else DEFAULT_SEED,
            stream=(
                _get_word(table, "stream")
                if "stream" in table
                else DEFAULT_STREAM
            ),
            rounds=rounds,
            state=state,
        )
    return GeneratorConfig(
        seed=_get_word(table, "seed"),
        stream=_get_word(table, "stream"),
        rounds=rounds,
        state=None,
    )


def _parse_draw_config(config: dict[str, TomlValue]) -> DrawConfig:
    """Parse the [draw] table."""
    table = _get_table(config, "draw")
    draw_cfg = DrawConfig(
        count=_get_int(table, "count"),
        discard=_get_int(table, "discard"),
        format=_get_str(table, "format"),
    )
    if draw_cfg.count < 0 or draw_cfg.discard < 0:
        raise ValueError("count and discard must be non-negative")
    if draw_cfg.format not in _FORMATS:
        raise ValueError(f"format must be one of {_FORMATS}")
    return draw_cfg


def _parse_verify_config(config: dict[str, TomlValue]) -> VerifyConfig:
    """Parse the optional [verify] table, falling back to defaults."""
    table = _get_table_optional(config, "verify")
    if table is None:
        return VerifyConfig(avalanche_trials=64, min_flip_fraction=0.4)
    return VerifyConfig(
        avalanche_trials=_get_int(table, "avalanche_trials"),
        min_flip_fraction=_get_float(table, "min_flip_fraction"),
    )


def make_generator(cfg: GeneratorConfig) -> BlaBla:
    """Construct the generator described by cfg."""
    family = blabla_family(cfg.rounds)
    if cfg.state is not None:
        return family.from_text(cfg.state)
    return family(cfg.seed, cfg.stream)


def _append_event(paths: RunPaths, event: dict[str, TomlValue]) -> None:
    """Append a run event to events.toml with stable numbering."""
    data = load_toml(paths.events_toml) if paths.events_toml.exists() else {}
    idx = 0
    for key in data:
        if key.startswith("event_"):
            try:
                idx = max(idx, int(key.split("_", 1)[1]))
            except ValueError:
                continue
    data[f"event_{idx + 1:04d}"] = event
    save_toml(paths.events_toml, data)


def _git_sha() -> str:
    """Resolve the current git SHA, or "unknown" outside a checkout."""
    head_path = Path(".git") / "HEAD"
    if not head_path.exists():
        return "unknown"
    head = head_path.read_text(encoding="utf-8").strip()
    if head.startswith("ref: "):
        ref_path = Path(".git") / head.split(" ", 1)[1]
        if ref_path.exists():
            return ref_path.read_text(encoding="utf-8").strip()
        return "unknown"
    return head


def _run_id(run_name: str) -> str:
    """Construct a UTC run_id with timestamp and name."""
    stamp = datetime.now(UTC).strftime("%Y%m%d_%H%M%S")
    return f"{stamp}_{run_name}"


def _write_start_event(
    paths: RunPaths, run_id: str, run_name: str, command: str
) -> None:
    """Write a run start event."""
    event: dict[str, TomlValue] = {
        "event": "start",
        "command": command,
        "run_id": run_id,
        "run_name": run_name,
        "started_utc": datetime.now(UTC).isoformat(),
        "git_sha": _git_sha(),
        "host": platform.node(),
        "platform": platform.platform(),
        "python": platform.python_version(),
    }
    _append_event(paths, event)


def _write_stop_event(
    paths: RunPaths, run_id: str, run_name: str, reason: str
) -> None:
    """Write a run stop event."""
    event: dict[str, TomlValue] = {
        "event": "stop",
        "run_id": run_id,
        "run_name": run_name,
        "stopped_utc": datetime.now(UTC).isoformat(),
        "reason": reason,
    }
    _append_event(paths, event)


def _format_word(word: int, fmt: str) -> str:
    """Render a word as decimal or zero-padded hex."""
    if fmt == "hex":
        return f"0x{word:016x}"
    return str(word)


def _draw(config: dict[str, TomlValue], paths: RunPaths, run_id: str) -> int:
    """Draw words, print them and write the run artifacts.

    Returns:
        Process exit code.
    """
    run_cfg = _parse_run_config(config)
    gen_cfg = _parse_generator_config(config)
    draw_cfg = _parse_draw_config(config)

    gen = make_generator(gen_cfg)
    gen.discard(draw_cfg.discard)
    start_counter = int(gen.counter)
    blocks_before = gen.blocks_generated
    words = gen.random_raw(draw_cfg.count)

    lines = [_format_word(int(word), draw_cfg.format) for word in words]
    text = "\n".join(lines) + ("\n" if lines else "")
    sys.stdout.write(text)
    paths.words_txt.write_text(text, encoding="utf-8")

    summary = summarize_words(
        words, start_counter, gen.blocks_generated - blocks_before
    )
    write_summary(paths.summary_toml, summary)
    save_state(paths.state_toml, gen)
    _write_stop_event(paths, run_id, run_cfg.name, "complete")
    return 0


def _verify(config: dict[str, TomlValue], paths: RunPaths, run_id: str) -> int:
    """Run self-checks and write verify_results.toml.

    Returns:
        0 if every check passed, 1 otherwise.
    """
    run_cfg = _parse_run_config(config)
    verify_cfg = _parse_verify_config(config)
    results = run_all_checks(
        avalanche_trials=verify_cfg.avalanche_trials,
        min_flip_fraction=verify_cfg.min_flip_fraction,
    )

    passed = all(result.passed for result in results)
    data: dict[str, TomlValue] = {"passed": passed}
    for result in results:
        data[result.name] = {"passed": result.passed, "detail": result.detail}
        status = "ok" if result.passed else "FAIL"
        print(f"{result.name}: {status} ({result.detail})")
    save_toml(paths.verify_toml, data)

    reason = "verify_passed" if passed else "verify_failed"
    _write_stop_event(paths, run_id, run_cfg.name, reason)
    return 0 if passed else 1


def main(argv: list[str] | None = None) -> int:
    """Main entrypoint.

    Returns:
        Process exit code (0 for success).
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    config = load_toml(args.config)
    run_cfg = _parse_run_config(config)
    run_id = _run_id(run_cfg.name)
    # Create the run directory and persist config.
    paths = RunPaths.create(run_id, args.runs_dir)
    save_toml(paths.config_toml, config)
    _write_start_event(paths, run_id, run_cfg.name, args.command)
    if args.command == "draw":
        return _draw(config, paths, run_id)
    return _verify(config, paths, run_id)
