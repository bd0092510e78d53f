"""
Storage layout compatibility analysis.

Aligns the storage of an original and an updated contract and decides
whether every change keeps existing slots readable by the new code.
"""

from typing import Callable, List

import structlog

from ..core.errors import StorageUpgradeError, StorageUpgradeErrors
from ..core.layout import StorageItem, StorageLayout
from .levenshtein import APPEND, EQUAL, Operation, levenshtein

logger = structlog.get_logger()

TYPECHANGE = "typechange"
RENAME = "rename"
REPLACE = "replace"

# Appends are dropped before this check. Anything else, including actions
# this module does not know about, is unsafe.
SAFE_ACTIONS = frozenset({EQUAL, TYPECHANGE})


def match_storage_item(
    original: StorageLayout, updated: StorageLayout
) -> Callable[[StorageItem, StorageItem], str]:
    """
    Build the pairwise classifier used to align two layouts.

    Types are compared by their rendered label, not by their key.
    """

    def match(o: StorageItem, u: StorageItem) -> str:
        name_matches = o.label == u.label
        type_matches = original.type_label(o) == updated.type_label(u)

        if type_matches and name_matches:
            return EQUAL
        elif type_matches:
            return TYPECHANGE
        elif name_matches:
            return RENAME
        else:
            return REPLACE

    return match


def get_storage_upgrade_operations(
    original: StorageLayout, updated: StorageLayout
) -> List[Operation[StorageItem]]:
    """
    Align two layouts and return every operation except appends.

    Variables added after the end of the original layout never overlap an
    existing slot, so they are left out.
    """
    operations = levenshtein(original.storage, updated.storage, match_storage_item(original, updated))
    return [op for op in operations if op.action != APPEND]


def is_safe(operation: Operation) -> bool:
    return operation.action in SAFE_ACTIONS


def get_storage_upgrade_errors(
    original: StorageLayout, updated: StorageLayout
) -> List[Operation[StorageItem]]:
    """Return only the operations that make the upgrade unsafe."""
    return [op for op in get_storage_upgrade_operations(original, updated) if not is_safe(op)]


def to_upgrade_error(operation: Operation[StorageItem]) -> StorageUpgradeError:
    # Deleted variables have no updated item; point at the original one
    item = operation.updated or operation.original
    if item is None:
        return StorageUpgradeError(location="unknown", action=operation.action, label="unknown")
    return StorageUpgradeError(location=item.src, action=operation.action, label=item.label)


def assert_storage_upgrade_safe(original: StorageLayout, updated: StorageLayout) -> None:
    """
    Check that ``updated`` can be deployed over storage written by ``original``.

    Args:
        original: Layout of the deployed contract
        updated: Layout of the new implementation

    Raises:
        StorageUpgradeErrors: Listing every unsafe change
    """
    errors = get_storage_upgrade_errors(original, updated)

    if errors:
        logger.debug("Storage layout is incompatible", errors=len(errors))
        raise StorageUpgradeErrors([to_upgrade_error(op) for op in errors])

    logger.debug(
        "Storage layout is compatible",
        original_variables=len(original),
        updated_variables=len(updated),
    )
