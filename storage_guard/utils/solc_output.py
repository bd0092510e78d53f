"""
Helpers for reading solc compilation results.

Supports the build-info files written by Hardhat (``artifacts/build-info``)
and Foundry (``out/build-info``), which bundle the standard JSON input and
output of a single compiler run.
"""

import json
import os
from typing import Any, Dict, Iterator, List, Optional, Tuple

import structlog

from ..analysis.layout_extractor import SrcDecoder, extract_storage_layout
from ..core.layout import StorageLayout
from .src_decoder import solc_input_output_decoder

logger = structlog.get_logger()


def load_build_info(file_path: str) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """
    Load the solc input and output from a build-info file.

    Args:
        file_path: Path to the build-info JSON file

    Returns:
        Tuple containing (solc input, solc output)

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file is not a build-info file
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"Build info file not found: {file_path}")

    with open(file_path, "r") as f:
        build_info = json.load(f)

    if not is_build_info(build_info):
        raise ValueError(f"Unrecognized build info format: {file_path}")

    logger.info(
        "Loaded build info",
        path=file_path,
        solc_version=build_info.get("solcVersion") or build_info.get("solcLongVersion"),
    )
    return build_info["input"], build_info["output"]


def is_build_info(data: Any) -> bool:
    return (
        isinstance(data, dict)
        and isinstance(data.get("input"), dict)
        and isinstance(data.get("output"), dict)
        and "sources" in data["output"]
    )


def iter_contract_definitions(solc_output: Dict[str, Any]) -> Iterator[Tuple[str, Dict[str, Any]]]:
    """Yield (source path, ContractDefinition node) for every contract in the output."""
    for path, source in solc_output.get("sources", {}).items():
        ast = source.get("ast") or {}
        for node in ast.get("nodes", []):
            if node.get("nodeType") == "ContractDefinition":
                yield path, node


def find_contract_definition(solc_output: Dict[str, Any], contract_name: str) -> Dict[str, Any]:
    """
    Find a contract by name.

    Args:
        solc_output: Standard JSON output of solc
        contract_name: ``Name`` or fully qualified ``path/to/File.sol:Name``

    Raises:
        ValueError: If no contract, or more than one, has that name
    """
    source_path: Optional[str] = None
    name = contract_name
    if ":" in contract_name:
        source_path, name = contract_name.rsplit(":", 1)

    matches = [
        (path, node)
        for path, node in iter_contract_definitions(solc_output)
        if node.get("name") == name and (source_path is None or path == source_path)
    ]

    if not matches:
        raise ValueError(f"Contract {contract_name} not found in compilation output")
    if len(matches) > 1:
        candidates = ", ".join(f"{path}:{name}" for path, _ in matches)
        raise ValueError(
            f"Contract name {contract_name} is ambiguous, use a fully qualified name: {candidates}"
        )

    path, node = matches[0]
    logger.debug("Found contract", contract=name, path=path)
    return node


def _contract_definitions_by_id(solc_output: Dict[str, Any]) -> Dict[int, Dict[str, Any]]:
    return {node["id"]: node for _, node in iter_contract_definitions(solc_output) if "id" in node}


def extract_linearized_layout(
    solc_output: Dict[str, Any], contract_def: Dict[str, Any], decode_src: SrcDecoder
) -> StorageLayout:
    """
    Build the full storage layout of a contract including its base contracts.

    ``linearizedBaseContracts`` lists the contract itself first and its most
    basic ancestor last; storage is allocated in the opposite order.

    Raises:
        ValueError: If a base contract is missing from the output
    """
    definitions = _contract_definitions_by_id(solc_output)
    base_ids: List[int] = contract_def.get("linearizedBaseContracts") or [contract_def["id"]]

    layouts = []
    for base_id in reversed(base_ids):
        if base_id == contract_def.get("id"):
            base = contract_def
        elif base_id in definitions:
            base = definitions[base_id]
        else:
            raise ValueError(
                f"Base contract with id {base_id} of {contract_def['name']} not found in compilation output"
            )
        layouts.append(extract_storage_layout(base, decode_src))

    return StorageLayout.concat(layouts)


def layout_from_solc(
    solc_input: Dict[str, Any], solc_output: Dict[str, Any], contract_name: str
) -> StorageLayout:
    """Extract the full storage layout of one contract from a compilation."""
    contract_def = find_contract_definition(solc_output, contract_name)
    decode_src = solc_input_output_decoder(solc_input, solc_output)
    layout = extract_linearized_layout(solc_output, contract_def, decode_src)

    logger.info("Extracted storage layout", contract=contract_name, variables=len(layout))
    return layout


def layout_from_build_info(file_path: str, contract_name: str) -> StorageLayout:
    """Load a build-info file and extract the full storage layout of one contract."""
    solc_input, solc_output = load_build_info(file_path)
    return layout_from_solc(solc_input, solc_output, contract_name)
