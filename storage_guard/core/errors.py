"""
Exceptions raised by the storage compatibility checks.
"""

from dataclasses import dataclass
from typing import List, Sequence


class UpgradesError(Exception):
    """
    Base class for all errors raised by storage_guard.

    Subclasses may override ``details`` to attach a longer, multi-line
    explanation that is appended to the message when the error is printed.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def details(self) -> str:
        return ""

    def __str__(self) -> str:
        details = self.details()
        if details:
            return f"{self.message}\n\n{details}"
        return self.message


class MalformedInputError(UpgradesError):
    """Input does not have the shape the compiler is expected to produce."""


class TypeIdentifierDecodeError(UpgradesError):
    """The type identifier decoder reached a state it should never reach."""


@dataclass(frozen=True)
class StorageUpgradeError:
    """One unsafe change between two storage layouts."""

    location: str
    action: str
    label: str

    def to_dict(self):
        return {"location": self.location, "action": self.action, "label": self.label}


class StorageUpgradeErrors(UpgradesError):
    """
    The updated storage layout is incompatible with the original one.

    Attributes:
        errors: Every unsafe change found, in layout order
    """

    def __init__(self, errors: Sequence[StorageUpgradeError]):
        super().__init__("New storage layout is incompatible")
        self.errors: List[StorageUpgradeError] = list(errors)

    def details(self) -> str:
        return "\n\n".join(
            f"{e.location}: {e.action} of variable {e.label}" for e in self.errors
        )
