"""Exceptions raised by the jigsaw puzzle core."""


class PuzzleError(Exception):
    """Base class for puzzle errors."""


class InvalidGridSizeError(PuzzleError, ValueError):
    """Raised when a grid size falls outside the configured bounds."""

    def __init__(self, grid_size: int, min_size: int, max_size: int):
        """Initialize the error.

        Args:
            grid_size: The rejected grid size.
            min_size: Smallest accepted grid size.
            max_size: Largest accepted grid size.
        """
        super().__init__(f"Grid size {grid_size} is outside the allowed range [{min_size}, {max_size}]")
        self.grid_size = grid_size
        self.min_size = min_size
        self.max_size = max_size


class EmptyPuzzleError(PuzzleError):
    """Raised when a puzzle session cannot start because no pieces were produced."""


class PuzzleNotSolvedError(PuzzleError):
    """Raised when a score is submitted for a puzzle that is not solved."""


class InvalidPlayerNameError(PuzzleError, ValueError):
    """Raised when a score is submitted without a player name."""
