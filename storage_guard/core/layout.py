"""
Storage layout data model.

A storage layout is an ordered list of the persistent fields of a contract,
together with the human-readable label of every type key those fields use.
Field order is the on-chain slot order and is never rearranged.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Tuple

from .errors import MalformedInputError


@dataclass(frozen=True)
class StorageItem:
    """A single persistent field."""

    contract: str  # Declaring contract
    label: str  # Field name as declared
    type: str  # Canonical type key, see analysis.type_identifier
    src: str  # Opaque source location, only used for display

    def to_dict(self) -> Dict[str, str]:
        return {
            "contract": self.contract,
            "label": self.label,
            "type": self.type,
            "src": self.src,
        }


@dataclass(frozen=True)
class TypeItem:
    """Metadata for one canonical type key."""

    label: str  # Type string as the compiler renders it, e.g. "mapping(address => uint256)"

    def to_dict(self) -> Dict[str, str]:
        return {"label": self.label}


@dataclass(frozen=True)
class StorageLayout:
    """
    One full storage schema snapshot.

    Attributes:
        storage: Persistent fields in declaration (slot) order
        types: Canonical type key -> TypeItem
    """

    storage: Tuple[StorageItem, ...] = ()
    types: Mapping[str, TypeItem] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        # Accept any iterable of items and any mapping but keep both read-only
        if not isinstance(self.storage, tuple):
            object.__setattr__(self, "storage", tuple(self.storage))
        object.__setattr__(self, "types", MappingProxyType(dict(self.types)))

        missing = sorted({item.type for item in self.storage if item.type not in self.types})
        if missing:
            raise MalformedInputError(
                f"Storage layout references unknown types: {', '.join(missing)}"
            )

    def __len__(self) -> int:
        return len(self.storage)

    def type_label(self, item: StorageItem) -> str:
        """Return the human-readable type of a field of this layout."""
        return self.types[item.type].label

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the layout to a JSON/YAML friendly dictionary.

        Returns:
            {"storage": [...], "types": {key: {"label": ...}}}
        """
        return {
            "storage": [item.to_dict() for item in self.storage],
            "types": {key: type_item.to_dict() for key, type_item in self.types.items()},
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "StorageLayout":
        """
        Rebuild a layout from the dictionary produced by ``to_dict``.

        Raises:
            MalformedInputError: If required keys are missing or a section
                has the wrong shape
        """
        try:
            raw_storage = data["storage"]
            raw_types = data["types"]

            if not isinstance(raw_storage, list) or not all(isinstance(e, Mapping) for e in raw_storage):
                raise MalformedInputError("Invalid storage layout snapshot: 'storage' must be a list of mappings")
            if not isinstance(raw_types, Mapping) or not all(isinstance(v, Mapping) for v in raw_types.values()):
                raise MalformedInputError("Invalid storage layout snapshot: 'types' must be a mapping of mappings")

            storage = [
                StorageItem(
                    contract=entry["contract"],
                    label=entry["label"],
                    type=entry["type"],
                    src=entry.get("src", "unknown"),
                )
                for entry in raw_storage
            ]
            types = {key: TypeItem(label=value["label"]) for key, value in raw_types.items()}
        except KeyError as e:
            raise MalformedInputError(f"Invalid storage layout snapshot: missing key {e}") from e

        return cls(storage=tuple(storage), types=types)

    @classmethod
    def concat(cls, layouts: Iterable["StorageLayout"]) -> "StorageLayout":
        """Join layouts end to end, e.g. the layouts of a contract's bases."""
        storage = []
        types: Dict[str, TypeItem] = {}
        for layout in layouts:
            storage.extend(layout.storage)
            types.update(layout.types)
        return cls(storage=tuple(storage), types=types)
