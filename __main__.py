"""Module entrypoint that puts src/ on sys.path and runs the blabla CLI."""

from __future__ import annotations

import sys
from pathlib import Path


def _ensure_src_on_path() -> None:
    """Prepend the src/ directory to sys.path."""
    src_path = (Path(__file__).resolve().parent / "src").as_posix()
    if src_path not in sys.path:
        sys.path.insert(0, src_path)


def main() -> int:
    """Run `blabla` from a source checkout."""
    _ensure_src_on_path()
    # Import after sys.path update to resolve local modules.
    import cli

    return cli.main()


if __name__ == "__main__":
    raise SystemExit(main())
