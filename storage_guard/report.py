"""
Human-readable and machine-readable output for storage layout checks.
"""

import json
import os
from typing import IO, Any, Dict, List, Sequence

import yaml
from colorama import Style

from .analysis.levenshtein import Operation
from .core.errors import MalformedInputError, StorageUpgradeErrors
from .core.layout import StorageItem, StorageLayout

LAYOUT_FORMATS = ("json", "yaml")


def _bold(text: str, color: bool) -> str:
    return f"{Style.BRIGHT}{text}{Style.RESET_ALL}" if color else text


def render_upgrade_errors(error: StorageUpgradeErrors, color: bool = True) -> str:
    """Render every unsafe change, one paragraph each, with the location in bold."""
    lines = [
        _bold(e.location, color) + f": {e.action} of variable {e.label}"
        for e in error.errors
    ]
    return f"{error.message}\n\n" + "\n\n".join(lines)


def _describe(item: StorageItem, layout: StorageLayout) -> str:
    return f"{item.label} ({layout.type_label(item)}) at {item.src}"


def render_operations(
    operations: Sequence[Operation[StorageItem]],
    original: StorageLayout,
    updated: StorageLayout,
) -> str:
    """Render an alignment as one line per operation."""
    if not operations:
        return "No changes to existing storage."

    lines = []
    for op in operations:
        if op.original is not None and op.updated is not None:
            lines.append(
                f"{op.action:<10} {_describe(op.original, original)} -> {_describe(op.updated, updated)}"
            )
        elif op.updated is not None:
            lines.append(f"{op.action:<10} {_describe(op.updated, updated)}")
        elif op.original is not None:
            lines.append(f"{op.action:<10} {_describe(op.original, original)}")
        else:
            lines.append(op.action)
    return "\n".join(lines)


def operations_to_dicts(operations: Sequence[Operation[StorageItem]]) -> List[Dict[str, Any]]:
    return [
        {
            "action": op.action,
            "original": op.original.to_dict() if op.original is not None else None,
            "updated": op.updated.to_dict() if op.updated is not None else None,
        }
        for op in operations
    ]


def dump_data(data: Any, fmt: str, stream: IO[str]) -> None:
    """Write data as JSON or YAML."""
    if fmt == "yaml":
        yaml.safe_dump(data, stream, default_flow_style=False, sort_keys=False)
    elif fmt == "json":
        json.dump(data, stream, indent=2)
        stream.write("\n")
    else:
        raise ValueError(f"Unsupported format: {fmt}")


def dump_layout(layout: StorageLayout, fmt: str, stream: IO[str]) -> None:
    dump_data(layout.to_dict(), fmt, stream)


def layout_format_for_path(file_path: str) -> str:
    """Guess the snapshot format from the file extension, defaulting to JSON."""
    ext = os.path.splitext(file_path)[1].lower()
    return "yaml" if ext in (".yaml", ".yml") else "json"


def load_data(file_path: str) -> Any:
    """
    Read a JSON or YAML file.

    Raises:
        FileNotFoundError: If the file doesn't exist
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"File not found: {file_path}")

    with open(file_path, "r") as f:
        if layout_format_for_path(file_path) == "yaml":
            return yaml.safe_load(f)
        return json.load(f)


def load_layout(file_path: str) -> StorageLayout:
    """Load a layout snapshot written by ``dump_layout``."""
    data = load_data(file_path)
    if not isinstance(data, dict):
        raise MalformedInputError(f"Storage layout snapshot must be a mapping: {file_path}")
    return StorageLayout.from_dict(data)
