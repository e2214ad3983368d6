"""Service for cutting puzzle images into jigsaw-shaped pieces."""

import logging
import random
from typing import List, Optional

from PIL import Image

from .edge_grid import generate_edge_grid
from .geometry import build_outline
from .image_slicing import DEFAULT_TAB_RATIO, slice_image
from .masking import apply_mask, create_piece_mask
from .models import PieceRecord, Rect

logger = logging.getLogger(__name__)


class PuzzleCutter:
    """Cuts puzzle images into jigsaw-shaped pieces using Bezier curves."""

    def __init__(
        self,
        tab_ratio: float = DEFAULT_TAB_RATIO,
        points_per_curve: int = 20,
        antialias_scale: int = 4,
    ):
        """Initialize the puzzle cutter.

        Args:
            tab_ratio: Tab size relative to the piece size.
            points_per_curve: Number of points to sample per Bezier curve.
            antialias_scale: Supersampling factor for piece masks.
        """
        self.tab_ratio = tab_ratio
        self.points_per_curve = points_per_curve
        self.antialias_scale = antialias_scale

    def cut(
        self,
        puzzle_image: Optional[Image.Image],
        grid_size: int,
        rng: Optional[random.Random] = None,
    ) -> List[PieceRecord]:
        """Cut a puzzle image into jigsaw-shaped pieces.

        Args:
            puzzle_image: The puzzle image to cut, or None if it failed to decode.
            grid_size: Number of rows and columns.
            rng: Random generator for edge generation.

        Returns:
            Pieces in row-major order; empty if the image yields no pieces.
        """
        sub_images = slice_image(puzzle_image, grid_size, self.tab_ratio)
        if not sub_images:
            return []

        edge_grid = generate_edge_grid(grid_size, rng=rng)
        pieces: List[PieceRecord] = []

        for r in range(grid_size):
            for c in range(grid_size):
                sub_image = sub_images[r][c]
                frame = Rect(0.0, 0.0, float(sub_image.width), float(sub_image.height))
                outline = build_outline(edge_grid[r][c], frame, self.tab_ratio)

                mask = create_piece_mask(
                    outline,
                    sub_image.size,
                    points_per_curve=self.points_per_curve,
                    antialias_scale=self.antialias_scale,
                )

                pieces.append(
                    PieceRecord(
                        original_index=r * grid_size + c,
                        grid_size=grid_size,
                        edges=edge_grid[r][c],
                        outline=outline,
                        image=apply_mask(sub_image, mask),
                    )
                )

        logger.debug("Cut %d pieces for a %dx%d grid", len(pieces), grid_size, grid_size)
        return pieces
