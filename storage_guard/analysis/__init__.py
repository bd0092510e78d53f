from .type_identifier import decode_type_identifier, encode_type_identifier
from .layout_extractor import extract_storage_layout, is_storage_variable
from .levenshtein import Operation, levenshtein
from .compatibility import (
    SAFE_ACTIONS,
    match_storage_item,
    get_storage_upgrade_operations,
    get_storage_upgrade_errors,
    assert_storage_upgrade_safe,
)

__all__ = [
    "decode_type_identifier",
    "encode_type_identifier",
    "extract_storage_layout",
    "is_storage_variable",
    "Operation",
    "levenshtein",
    "SAFE_ACTIONS",
    "match_storage_item",
    "get_storage_upgrade_operations",
    "get_storage_upgrade_errors",
    "assert_storage_upgrade_safe",
]
