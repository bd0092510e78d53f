"""
Edit-distance alignment of two sequences.

The alignment is generic: the caller supplies a ``match`` function that
classifies a pair of elements. A pair classified as ``equal`` is free, any
other classification counts as a substitution. The result is the list of
operations that turns the first sequence into the second.
"""

from dataclasses import dataclass
from typing import Callable, Generic, List, Optional, Sequence, TypeVar

T = TypeVar("T")

EQUAL = "equal"
APPEND = "append"
INSERT = "insert"
DELETE = "delete"

SUBSTITUTION_COST = 3
INSERTION_COST = 2
DELETION_COST = 2

Match = Callable[[T, T], str]


@dataclass(frozen=True)
class Operation(Generic[T]):
    """One step of an alignment."""

    action: str
    original: Optional[T] = None
    updated: Optional[T] = None


def levenshtein(a: Sequence[T], b: Sequence[T], match: Match) -> List[Operation[T]]:
    """
    Compute a minimum-cost alignment of ``a`` and ``b``.

    Matched pairs carry the classification returned by ``match``. Elements
    only in ``b`` are ``append`` when they come after the last element of
    ``a`` and ``insert`` otherwise; elements only in ``a`` are ``delete``.
    Ties are broken in favour of substitution, then insertion, then
    deletion, so the same inputs always give the same operations.

    Args:
        a: Original sequence
        b: Updated sequence
        match: Classifies a pair (element of a, element of b)

    Returns:
        Operations in sequence order
    """
    actions = [[match(x, y) for y in b] for x in a]
    matrix = _build_matrix(len(a), len(b), actions)
    return _walk_matrix(matrix, a, b, actions)


def _substitution_cost(action: str) -> int:
    return 0 if action == EQUAL else SUBSTITUTION_COST


def _build_matrix(n: int, m: int, actions: List[List[str]]) -> List[List[int]]:
    # matrix[i][j] is the cost of turning a[i:] into b[j:]
    matrix = [[0] * (m + 1) for _ in range(n + 1)]

    for i in range(n, -1, -1):
        for j in range(m, -1, -1):
            if i == n and j == m:
                continue
            if i == n:
                matrix[i][j] = matrix[i][j + 1] + INSERTION_COST
            elif j == m:
                matrix[i][j] = matrix[i + 1][j] + DELETION_COST
            else:
                matrix[i][j] = min(
                    matrix[i + 1][j + 1] + _substitution_cost(actions[i][j]),
                    matrix[i][j + 1] + INSERTION_COST,
                    matrix[i + 1][j] + DELETION_COST,
                )

    return matrix


def _walk_matrix(
    matrix: List[List[int]],
    a: Sequence[T],
    b: Sequence[T],
    actions: List[List[str]],
) -> List[Operation[T]]:
    operations: List[Operation[T]] = []
    i = j = 0

    while i < len(a) or j < len(b):
        if i == len(a):
            operations.append(Operation(APPEND, updated=b[j]))
            j += 1
        elif j == len(b):
            operations.append(Operation(DELETE, original=a[i]))
            i += 1
        else:
            cost = matrix[i][j]
            action = actions[i][j]
            if cost == matrix[i + 1][j + 1] + _substitution_cost(action):
                operations.append(Operation(action, original=a[i], updated=b[j]))
                i += 1
                j += 1
            elif cost == matrix[i][j + 1] + INSERTION_COST:
                operations.append(Operation(INSERT, updated=b[j]))
                j += 1
            else:
                operations.append(Operation(DELETE, original=a[i]))
                i += 1

    return operations
