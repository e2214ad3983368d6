"""Test helpers for building images, pieces and clocks."""

from typing import List

import numpy as np
from PIL import Image

from jigsaw import ClosedPath, EdgeSet, PieceRecord


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_gradient_image(width: int, height: int) -> Image.Image:
    """Create an RGB image whose pixels encode their own coordinates.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        Image where pixel (x, y) is (x % 256, y % 256, (x + y) % 256).
    """
    xs, ys = np.meshgrid(np.arange(width), np.arange(height))
    data = np.stack([xs % 256, ys % 256, (xs + ys) % 256], axis=-1).astype(np.uint8)
    return Image.fromarray(data)


def make_pieces(grid_size: int, with_images: bool = False) -> List[PieceRecord]:
    """Create bare pieces in row-major order."""
    return [
        PieceRecord(
            original_index=i,
            grid_size=grid_size,
            edges=EdgeSet.flat(),
            outline=ClosedPath(),
            image=Image.new("RGBA", (8, 8), (255, 0, 0, 255)) if with_images else None,
        )
        for i in range(grid_size * grid_size)
    ]
