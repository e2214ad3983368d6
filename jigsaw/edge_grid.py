"""Edge grid generation for puzzle image cutting.

Every interior edge is chosen once, by the piece above or to the left of it,
and the neighbouring piece receives the complementary kind. Border edges are
flat.
"""

import random
from typing import Iterator, List, Literal, Optional, Tuple

from .models import EdgeKind, EdgeSet

EdgeGrid = List[List[EdgeSet]]
Side = Literal["top", "right", "bottom", "left"]

_INTERLOCKING = (EdgeKind.TAB, EdgeKind.BLANK)


def get_opposite_edge_type(kind: EdgeKind) -> EdgeKind:
    """Get the edge kind a neighbour sees on a shared edge."""
    return kind.complement


def generate_edge_grid(
    grid_size: int,
    rng: Optional[random.Random] = None,
    seed: Optional[int] = None,
) -> EdgeGrid:
    """Generate complementary edges for a square puzzle.

    Args:
        grid_size: Number of rows and columns.
        rng: Random generator to draw tab/blank choices from.
        seed: Seed for a new generator, used when rng is None.

    Returns:
        A grid_size x grid_size matrix of EdgeSet indexed by [row][col].

    Raises:
        ValueError: If grid_size is smaller than 1.
    """
    if grid_size < 1:
        raise ValueError(f"grid_size must be at least 1, got {grid_size}")
    if rng is None:
        rng = random.Random(seed)

    last = grid_size - 1
    grid: EdgeGrid = []

    for r in range(grid_size):
        row: List[EdgeSet] = []
        for c in range(grid_size):
            top = EdgeKind.FLAT if r == 0 else grid[r - 1][c].bottom.complement
            left = EdgeKind.FLAT if c == 0 else row[c - 1].right.complement
            bottom = EdgeKind.FLAT if r == last else rng.choice(_INTERLOCKING)
            right = EdgeKind.FLAT if c == last else rng.choice(_INTERLOCKING)
            row.append(EdgeSet(top=top, right=right, bottom=bottom, left=left))
        grid.append(row)

    return grid


def iter_shared_edges(grid: EdgeGrid) -> Iterator[Tuple[Tuple[int, int, Side], Tuple[int, int, Side], EdgeKind, EdgeKind]]:
    """Yield every interior edge as seen from both pieces.

    Each item is ((row, col, side), (row, col, side), kind_a, kind_b) where
    the first piece is above or to the left of the second.
    """
    size = len(grid)
    for r in range(size):
        for c in range(size):
            if c + 1 < size:
                yield (r, c, "right"), (r, c + 1, "left"), grid[r][c].right, grid[r][c + 1].left
            if r + 1 < size:
                yield (r, c, "bottom"), (r + 1, c, "top"), grid[r][c].bottom, grid[r + 1][c].top


def iter_border_edges(grid: EdgeGrid) -> Iterator[Tuple[int, int, Side, EdgeKind]]:
    """Yield every edge that lies on the outer boundary of the puzzle."""
    size = len(grid)
    for r in range(size):
        for c in range(size):
            edges = grid[r][c]
            if r == 0:
                yield r, c, "top", edges.top
            if r == size - 1:
                yield r, c, "bottom", edges.bottom
            if c == 0:
                yield r, c, "left", edges.left
            if c == size - 1:
                yield r, c, "right", edges.right


def flatten_grid(grid: EdgeGrid) -> List[EdgeSet]:
    """Row-major list of the grid's edge sets (index = row * size + col)."""
    return [edges for row in grid for edges in row]
