"""
Rendering of solc ``src`` attributes as ``path:line``.

Every AST node carries ``src = "<start>:<length>:<source index>"`` where
start is a byte offset into the source file with the given index.
"""

from bisect import bisect_right
from typing import Any, Callable, Dict, List, Optional, Tuple

import structlog

logger = structlog.get_logger()

UNKNOWN_LOCATION = "unknown"


def _line_starts(content: str) -> List[int]:
    # Byte offsets at which each line begins
    data = content.encode("utf-8")
    starts = [0]
    index = data.find(b"\n")
    while index != -1:
        starts.append(index + 1)
        index = data.find(b"\n", index + 1)
    return starts


def parse_src(src: str) -> Tuple[int, int, int]:
    """
    Split a ``src`` attribute into (start, length, source index).

    Raises:
        ValueError: If the attribute is not three colon separated integers
    """
    parts = src.split(":")
    if len(parts) != 3:
        raise ValueError(f"Invalid src attribute: {src!r}")
    start, length, source_index = (int(part) for part in parts)
    return start, length, source_index


def solc_input_output_decoder(
    solc_input: Dict[str, Any], solc_output: Dict[str, Any]
) -> Callable[[Dict[str, Any]], str]:
    """
    Create a src decoder for one compilation.

    Args:
        solc_input: Standard JSON input given to solc (for file contents)
        solc_output: Standard JSON output of solc (for source ids)

    Returns:
        Function mapping an AST node to ``"path:line"``
    """
    paths_by_id = {
        source["id"]: path
        for path, source in solc_output.get("sources", {}).items()
        if "id" in source
    }
    input_sources = solc_input.get("sources", {})
    line_starts: Dict[int, Optional[List[int]]] = {}

    def get_line_starts(source_id: int) -> Optional[List[int]]:
        if source_id not in line_starts:
            content = input_sources.get(paths_by_id[source_id], {}).get("content")
            line_starts[source_id] = _line_starts(content) if content is not None else None
        return line_starts[source_id]

    def decode_src(node: Dict[str, Any]) -> str:
        start, _, source_id = parse_src(node["src"])

        if source_id not in paths_by_id:
            logger.debug("Source id not found in compiler output", src=node["src"])
            return UNKNOWN_LOCATION

        path = paths_by_id[source_id]
        starts = get_line_starts(source_id)
        if starts is None:
            return path

        line = bisect_right(starts, start)
        return f"{path}:{line}"

    return decode_src
