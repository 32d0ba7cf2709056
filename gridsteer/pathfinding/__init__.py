"""Grid pathfinding algorithms."""

from .base import Finder
from .best_first import (AStarFinder, BestFirstFinder, BreadthFirstFinder,
                         DijkstraFinder)
from .bidirectional import (BiAStarFinder, BiBestFirstFinder,
                            BiBreadthFirstFinder, BiDijkstraFinder)
from .heuristics import HEURISTICS, chebyshev, euclidean, manhattan, octile
from .ida_star import IDAStarFinder
from .jump_point import JumpPointFinder, OrthogonalJumpPointFinder
from .registry import (FINDERS, available_algorithms, create_finder,
                       find_path)
from .util import (compress_path, expand_path, interpolate, path_cost,
                   path_length, smoothen_path)

__all__ = [
    'Finder',
    'AStarFinder',
    'BestFirstFinder',
    'BreadthFirstFinder',
    'DijkstraFinder',
    'BiAStarFinder',
    'BiBestFirstFinder',
    'BiBreadthFirstFinder',
    'BiDijkstraFinder',
    'IDAStarFinder',
    'JumpPointFinder',
    'OrthogonalJumpPointFinder',
    'HEURISTICS',
    'manhattan',
    'euclidean',
    'octile',
    'chebyshev',
    'FINDERS',
    'available_algorithms',
    'create_finder',
    'find_path',
    'compress_path',
    'expand_path',
    'interpolate',
    'path_cost',
    'path_length',
    'smoothen_path',
]
