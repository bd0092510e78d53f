"""
Storage layout upgrade safety checks for Solidity contracts.
"""

# Data model
from .core.layout import StorageItem, TypeItem, StorageLayout
from .core.errors import (
    UpgradesError,
    MalformedInputError,
    TypeIdentifierDecodeError,
    StorageUpgradeError,
    StorageUpgradeErrors,
)

# Analysis
from .analysis.type_identifier import decode_type_identifier
from .analysis.layout_extractor import extract_storage_layout
from .analysis.levenshtein import Operation, levenshtein
from .analysis.compatibility import (
    get_storage_upgrade_operations,
    get_storage_upgrade_errors,
    assert_storage_upgrade_safe,
)

# Compiler output
from .utils.solc_output import layout_from_build_info
from .utils.src_decoder import solc_input_output_decoder

__version__ = "0.1.0"

__all__ = [
    # Data model
    "StorageItem",
    "TypeItem",
    "StorageLayout",
    "UpgradesError",
    "MalformedInputError",
    "TypeIdentifierDecodeError",
    "StorageUpgradeError",
    "StorageUpgradeErrors",
    # Analysis
    "decode_type_identifier",
    "extract_storage_layout",
    "Operation",
    "levenshtein",
    "get_storage_upgrade_operations",
    "get_storage_upgrade_errors",
    "assert_storage_upgrade_safe",
    # Compiler output
    "layout_from_build_info",
    "solc_input_output_decoder",
]
