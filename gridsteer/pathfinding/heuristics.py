"""Distance heuristics over absolute coordinate deltas."""

import math
from typing import Callable, Dict, Optional

from ..errors import InvalidParameter
from ..model.grid import DiagonalMovement

Heuristic = Callable[[int, int], float]

SQRT2 = math.sqrt(2)
OCTILE_F = SQRT2 - 1


def manhattan(dx: int, dy: int) -> float:
    return dx + dy


def euclidean(dx: int, dy: int) -> float:
    return math.sqrt(dx * dx + dy * dy)


def octile(dx: int, dy: int) -> float:
    return max(dx, dy) + OCTILE_F * min(dx, dy)


def chebyshev(dx: int, dy: int) -> float:
    return max(dx, dy)


HEURISTICS: Dict[str, Heuristic] = {
    'manhattan': manhattan,
    'euclidean': euclidean,
    'octile': octile,
    'chebyshev': chebyshev,
}


def default_heuristic(diagonal_movement: DiagonalMovement) -> Heuristic:
    """Octile when diagonal moves are possible, Manhattan otherwise."""
    if diagonal_movement is DiagonalMovement.NEVER:
        return manhattan
    return octile


def resolve_heuristic(heuristic, diagonal_movement: DiagonalMovement
                      ) -> Heuristic:
    """Accept a callable, a registered name, or None for the default."""
    if heuristic is None:
        return default_heuristic(diagonal_movement)
    if callable(heuristic):
        return heuristic
    try:
        return HEURISTICS[str(heuristic).lower()]
    except KeyError:
        raise InvalidParameter(
            f"unknown heuristic {heuristic!r}, expected one of "
            f"{sorted(HEURISTICS)}") from None


def heuristic_name(heuristic: Optional[Heuristic]) -> str:
    for name, fn in HEURISTICS.items():
        if fn is heuristic:
            return name
    return getattr(heuristic, '__name__', repr(heuristic))
