"""Exception hierarchy for gridsteer."""


class GridSteerError(Exception):
    """Base class for every error raised by gridsteer."""


class OutOfBounds(GridSteerError, IndexError):
    """Grid coordinate outside of the grid."""

    def __init__(self, x: int, y: int, width: int, height: int):
        self.x = x
        self.y = y
        super().__init__(
            f"({x}, {y}) is outside of the {width}x{height} grid"
        )


class InvalidGridDimensions(GridSteerError, ValueError):
    """Grid width or height is not a positive integer."""


class InvalidParameter(GridSteerError, ValueError):
    """Numeric parameter outside of its allowed range."""


class EmptyHeap(GridSteerError, IndexError):
    """Pop from an empty heap."""


class SearchDepthExceeded(GridSteerError, RuntimeError):
    """Depth-first search went deeper than its configured cap."""


class UnknownAlgorithm(GridSteerError, KeyError):
    """Pathfinder name not present in the registry."""

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return str(self.args[0]) if self.args else ""


class ConfigError(GridSteerError, ValueError):
    """Malformed configuration file."""
