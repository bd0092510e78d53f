"""
Extraction of a contract's storage layout from the solc AST.
"""

from typing import Any, Callable, Dict, List

import structlog

from ..core.errors import MalformedInputError
from ..core.layout import StorageItem, StorageLayout, TypeItem
from .type_identifier import decode_type_identifier

logger = structlog.get_logger()

SrcDecoder = Callable[[Dict[str, Any]], str]


def is_storage_variable(node: Dict[str, Any]) -> bool:
    """
    Check whether an AST node declares a variable that occupies storage.

    Constants and immutables are inlined into the bytecode and take no slot.
    """
    return (
        node.get("nodeType") == "VariableDeclaration"
        and not node.get("constant", False)
        and node.get("mutability") not in ("constant", "immutable")
    )


def _type_descriptions(node: Dict[str, Any]) -> Dict[str, str]:
    descriptions = node.get("typeDescriptions") or {}
    type_identifier = descriptions.get("typeIdentifier")
    type_string = descriptions.get("typeString")

    if not isinstance(type_identifier, str) or not isinstance(type_string, str):
        raise MalformedInputError(
            f"Variable '{node.get('name', '?')}' has no type identifier or type string"
        )

    return {"typeIdentifier": type_identifier, "typeString": type_string}


def extract_storage_layout(contract_def: Dict[str, Any], decode_src: SrcDecoder) -> StorageLayout:
    """
    Build the storage layout of a contract's own state variables.

    Inherited variables are not included; see
    ``utils.solc_output.extract_linearized_layout`` for the full layout.

    Args:
        contract_def: ``ContractDefinition`` node of the solc AST
        decode_src: Renders a node's ``src`` attribute for diagnostics

    Returns:
        StorageLayout with variables in declaration order

    Raises:
        MalformedInputError: If a variable lacks its name, src or type descriptions
    """
    contract_name = contract_def["name"]
    storage: List[StorageItem] = []
    types: Dict[str, TypeItem] = {}

    for node in contract_def.get("nodes", []):
        if not is_storage_variable(node):
            continue

        if not isinstance(node.get("name"), str) or not isinstance(node.get("src"), str):
            raise MalformedInputError(
                f"Variable declaration in contract {contract_name} has no name or src attribute"
            )

        descriptions = _type_descriptions(node)
        type_key = decode_type_identifier(descriptions["typeIdentifier"])

        storage.append(
            StorageItem(
                contract=contract_name,
                label=node["name"],
                type=type_key,
                src=decode_src(node),
            )
        )
        types[type_key] = TypeItem(label=descriptions["typeString"])

    logger.debug(
        "Extracted storage layout",
        contract=contract_name,
        variables=len(storage),
        types=len(types),
    )
    return StorageLayout(storage=tuple(storage), types=types)
