from .errors import (
    UpgradesError,
    MalformedInputError,
    TypeIdentifierDecodeError,
    StorageUpgradeError,
    StorageUpgradeErrors,
)
from .layout import StorageItem, TypeItem, StorageLayout

__all__ = [
    "UpgradesError",
    "MalformedInputError",
    "TypeIdentifierDecodeError",
    "StorageUpgradeError",
    "StorageUpgradeErrors",
    "StorageItem",
    "TypeItem",
    "StorageLayout",
]
