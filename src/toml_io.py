"""
TOML-only IO with strict typing.

Constraints:
- Reading: use tomllib
- Writing: a small deterministic serializer for the types we emit
- Integers must fit TOML's signed 64-bit range; unsigned 64-bit
  generator words are stored as strings instead
"""

from __future__ import annotations

import re
import tomllib
from pathlib import Path
from typing import Final, TypeGuard, cast

type TomlScalar = str | int | float | bool
type TomlValue = TomlScalar | list["TomlValue"] | dict[str, "TomlValue"]
type TomlRawValue = (
    str | int | float | bool | list["TomlRawValue"] | dict[str, "TomlRawValue"]
)
type TomlRawTable = dict[str, TomlRawValue]

TOML_INT_MIN: Final[int] = -(1 << 63)
TOML_INT_MAX: Final[int] = (1 << 63) - 1

_BARE_KEY = re.compile(r"^[A-Za-z0-9_-]+$")
_ESCAPES: Final[dict[str, str]] = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def load_toml(path: Path) -> dict[str, TomlValue]:
    """Load a TOML file into a strictly-typed nested dictionary.

    Args:
        path: Path to TOML file.

    Returns:
        Parsed TOML as nested dict[str, TomlValue].

    Raises:
        FileNotFoundError: If path does not exist.
        tomllib.TOMLDecodeError: If the file is not valid TOML.
        ValueError: If parsed content contains unsupported values.
    """
    data = cast(TomlRawTable, tomllib.loads(path.read_text(encoding="utf-8")))
    if not _is_str_key_dict(data):
        raise ValueError("TOML root must be a table with string keys.")
    return _validate_toml_dict(data)


def dump_toml(data: dict[str, TomlValue]) -> str:
    """Serialize a TOML dictionary with sorted keys.

    Raises:
        ValueError: If data contains unsupported values.
    """
    return _dumps_table(data, prefix="")


def save_toml(path: Path, data: dict[str, TomlValue]) -> None:
    """Write TOML to disk with stable ordering."""
    path.write_text(dump_toml(data), encoding="utf-8")


def _is_str_key_dict(value: TomlRawValue) -> TypeGuard[TomlRawTable]:
    """Check whether a value is a dict with string keys."""
    return isinstance(value, dict) and all(
        isinstance(key, str) for key in value
    )


def _validate_toml_dict(raw: TomlRawTable) -> dict[str, TomlValue]:
    """Validate TOML data without leaking `object` to callers."""
    validated: dict[str, TomlValue] = {}
    for key, value in raw.items():
        if _is_str_key_dict(value):
            validated[key] = _validate_toml_dict(value)
            continue
        validated[key] = _validate_toml_value(value)
    return validated


def _validate_toml_value(value: TomlRawValue) -> TomlValue:
    """Validate a TOML value against allowed types.

    Raises:
        ValueError: If the value is an unsupported type or an integer
            outside the signed 64-bit range.
    """
    if isinstance(value, bool | str | float):
        return value

    if isinstance(value, int):
        return _check_int(value)

    # Lists are allowed but cannot contain tables.
    if isinstance(value, list):
        validated_list: list[TomlValue] = []
        for item in value:
            if isinstance(item, dict):
                raise ValueError("dict values in lists are not supported")
            validated_list.append(_validate_toml_value(item))
        return validated_list

    raise ValueError(f"unsupported TOML value type: {type(value)}")


def _check_int(value: int) -> int:
    """Reject integers TOML cannot represent."""
    if not TOML_INT_MIN <= value <= TOML_INT_MAX:
        raise ValueError(
            f"integer {value} outside TOML's signed 64-bit range; "
            "store it as a string"
        )
    return value


def _format_key(key: str) -> str:
    """Quote keys that are not valid bare keys."""
    if _BARE_KEY.match(key):
        return key
    return _format_str(key)


def _format_str(value: str) -> str:
    """Format a basic TOML string."""
    escaped = "".join(_ESCAPES.get(ch, ch) for ch in value)
    return f'"{escaped}"'


def _dumps_table(table: dict[str, TomlValue], prefix: str) -> str:
    """Dump a TOML table and nested subtables with deterministic ordering."""
    scalar_items: dict[str, TomlValue] = {}
    table_items: dict[str, dict[str, TomlValue]] = {}

    # Scalars first, then subtables, so headers never capture scalars.
    for key, value in table.items():
        if isinstance(value, dict):
            table_items[key] = value
        else:
            scalar_items[key] = value

    lines: list[str] = []
    if prefix:
        lines.append(f"[{prefix}]")

    for key in sorted(scalar_items):
        rendered = _format_value(scalar_items[key])
        lines.append(f"{_format_key(key)} = {rendered}")

    for key in sorted(table_items):
        if lines:
            lines.append("")
        name = _format_key(key)
        next_prefix = f"{prefix}.{name}" if prefix else name
        lines.append(
            _dumps_table(table_items[key], prefix=next_prefix).rstrip("\n")
        )

    return "\n".join(lines) + "\n"


def _format_value(value: TomlValue) -> str:
    """Format a TOML value into its literal representation.

    Raises:
        ValueError: If the value type is unsupported or out of range.
    """
    # Booleans first so ints don't swallow them.
    if isinstance(value, bool):
        return "true" if value else "false"

    if isinstance(value, int):
        return str(_check_int(value))

    if isinstance(value, float):
        return repr(value)

    if isinstance(value, str):
        return _format_str(value)

    if isinstance(value, list):
        rendered = ", ".join(_format_value(item) for item in value)
        return f"[{rendered}]"

    raise ValueError("unsupported TOML value type")
