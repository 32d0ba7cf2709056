"""Name-based selection of pathfinders."""

import logging
from typing import Any, Dict, Mapping, Optional, Tuple, Type

from ..errors import UnknownAlgorithm
from ..model.grid import Grid
from ..model.state import PathResult
from .base import Finder
from .best_first import (AStarFinder, BestFirstFinder, BreadthFirstFinder,
                         DijkstraFinder)
from .bidirectional import (BiAStarFinder, BiBestFirstFinder,
                            BiBreadthFirstFinder, BiDijkstraFinder)
from .ida_star import IDAStarFinder
from .jump_point import JumpPointFinder, OrthogonalJumpPointFinder

logger = logging.getLogger(__name__)

Point = Tuple[int, int]

FINDERS: Dict[str, Type[Finder]] = {
    cls.name: cls for cls in (
        AStarFinder,
        BreadthFirstFinder,
        DijkstraFinder,
        BestFirstFinder,
        IDAStarFinder,
        JumpPointFinder,
        OrthogonalJumpPointFinder,
        BiAStarFinder,
        BiBreadthFirstFinder,
        BiDijkstraFinder,
        BiBestFirstFinder,
    )
}

ALIASES: Dict[str, str] = {
    'astar': 'AStarFinder',
    'a_star': 'AStarFinder',
    'bfs': 'BreadthFirstFinder',
    'breadth_first': 'BreadthFirstFinder',
    'dijkstra': 'DijkstraFinder',
    'best_first': 'BestFirstFinder',
    'greedy': 'BestFirstFinder',
    'ida_star': 'IDAStarFinder',
    'idastar': 'IDAStarFinder',
    'jps': 'JumpPointFinder',
    'jump_point': 'JumpPointFinder',
    'orthogonal_jps': 'OrthogonalJumpPointFinder',
    'orthogonal_jump_point': 'OrthogonalJumpPointFinder',
    'bi_astar': 'BiAStarFinder',
    'bi_a_star': 'BiAStarFinder',
    'bi_bfs': 'BiBreadthFirstFinder',
    'bi_breadth_first': 'BiBreadthFirstFinder',
    'bi_dijkstra': 'BiDijkstraFinder',
    'bi_best_first': 'BiBestFirstFinder',
}

DEFAULT_ALGORITHM = 'AStarFinder'


def available_algorithms():
    return sorted(FINDERS)


def resolve_algorithm(name: str) -> str:
    if name in FINDERS:
        return name
    canonical = ALIASES.get(str(name).strip().lower().replace('-', '_'))
    if canonical is None:
        raise UnknownAlgorithm(
            f"unknown pathfinding algorithm {name!r}; "
            f"expected one of {available_algorithms()}")
    return canonical


def create_finder(name: str, fallback: bool = False, **options) -> Finder:
    """
    Instantiate a finder by registry name or alias.

    Unknown names raise UnknownAlgorithm. With `fallback=True` they log a
    warning and build an AStarFinder instead.
    """
    try:
        canonical = resolve_algorithm(name)
    except UnknownAlgorithm:
        if not fallback:
            raise
        logger.warning("Unknown algorithm %r, falling back to %s",
                       name, DEFAULT_ALGORITHM)
        canonical = DEFAULT_ALGORITHM
    return FINDERS[canonical](**options)


def _merge_options(heuristic_config: Optional[Any],
                   options: Dict[str, Any]) -> Dict[str, Any]:
    merged: Dict[str, Any] = {}
    if heuristic_config is not None:
        if isinstance(heuristic_config, Mapping):
            merged.update(heuristic_config)
        else:
            merged.update(heuristic_config.finder_options())
    merged.update(options)
    return merged


def find_path(algorithm_name: str, start: Point, goal: Point, grid: Grid,
              heuristic_config: Optional[Any] = None,
              fallback: bool = False, **options) -> PathResult:
    """
    Run one query with the named algorithm.

    `heuristic_config` is a mapping of finder options (allow_diagonal,
    dont_cross_corners, heuristic, weight, budgets, ...) or a
    PathfindingConfig; keyword options override it.
    """
    finder = create_finder(algorithm_name, fallback=fallback,
                           **_merge_options(heuristic_config, options))
    return finder.find_path(start[0], start[1], goal[0], goal[1], grid)
