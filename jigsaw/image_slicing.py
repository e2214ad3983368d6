"""Slicing of puzzle images into overscanned per-piece sub-images.

Each piece captures its grid cell plus a margin on every side, so that tabs
protruding from the piece still have image content beneath them. Captures
that run off the image are letterboxed with transparent pixels, so every
sub-image of a puzzle has the same size.
"""

import io
import logging
from pathlib import Path
from typing import BinaryIO, List, Optional, Tuple, Union

from PIL import Image, UnidentifiedImageError

from .models import Rect

logger = logging.getLogger(__name__)

DEFAULT_TAB_RATIO = 0.3

# Integer crop box (left, upper, right, lower) as used by PIL
Box = Tuple[int, int, int, int]
ImageSource = Union[str, Path, bytes, BinaryIO]


def load_image(source: ImageSource) -> Optional[Image.Image]:
    """Decode a raster image.

    Args:
        source: File path, raw bytes or a binary file object.

    Returns:
        The decoded image, or None if it cannot be decoded.
    """
    if isinstance(source, bytes):
        source = io.BytesIO(source)
    try:
        image = Image.open(source)
        image.load()
    except (UnidentifiedImageError, OSError) as e:
        logger.warning("Could not decode puzzle image: %s", e)
        return None
    return image


def capture_size(image_size: Tuple[int, int], grid_size: int, tab_ratio: float = DEFAULT_TAB_RATIO) -> Tuple[int, int]:
    """Pixel size shared by every sub-image of a puzzle.

    Args:
        image_size: (width, height) of the source image.
        grid_size: Number of rows and columns.
        tab_ratio: Overscan on each side relative to the piece size.

    Returns:
        Tuple of (width, height).
    """
    width, height = image_size
    piece_width = width / grid_size
    piece_height = height / grid_size
    return (
        int(round(piece_width * (1 + 2 * tab_ratio))),
        int(round(piece_height * (1 + 2 * tab_ratio))),
    )


def capture_rect(
    image_size: Tuple[int, int],
    grid_size: int,
    row: int,
    col: int,
    tab_ratio: float = DEFAULT_TAB_RATIO,
) -> Rect:
    """Source region captured for a piece, before clamping to the image.

    Args:
        image_size: (width, height) of the source image.
        grid_size: Number of rows and columns.
        row: Piece row index.
        col: Piece column index.
        tab_ratio: Overscan on each side relative to the piece size.

    Returns:
        The nominal cell rect expanded by the overscan on all four sides.
    """
    width, height = image_size
    piece_width = width / grid_size
    piece_height = height / grid_size
    margin_x = piece_width * tab_ratio
    margin_y = piece_height * tab_ratio
    return Rect(
        col * piece_width - margin_x,
        row * piece_height - margin_y,
        piece_width + 2 * margin_x,
        piece_height + 2 * margin_y,
    )


def capture_box(
    image_size: Tuple[int, int],
    grid_size: int,
    row: int,
    col: int,
    tab_ratio: float = DEFAULT_TAB_RATIO,
) -> Box:
    """Integer pixel box of a capture, sized exactly like every other capture."""
    rect = capture_rect(image_size, grid_size, row, col, tab_ratio)
    out_width, out_height = capture_size(image_size, grid_size, tab_ratio)
    left = int(round(rect.x))
    top = int(round(rect.y))
    return (left, top, left + out_width, top + out_height)


def slice_piece(image: Image.Image, box: Box) -> Image.Image:
    """Crop a capture box from the image, letterboxing what falls outside it.

    Args:
        image: Source image.
        box: Capture box, possibly extending past the image bounds.

    Returns:
        RGBA sub-image with the size of the box.
    """
    left, top, right, bottom = box
    width, height = image.size

    clamped = (max(0, left), max(0, top), min(width, right), min(height, bottom))
    if clamped == box:
        return image.crop(box).convert("RGBA")

    canvas = Image.new("RGBA", (right - left, bottom - top), (0, 0, 0, 0))
    if clamped[2] > clamped[0] and clamped[3] > clamped[1]:
        region = image.crop(clamped).convert("RGBA")
        canvas.paste(region, (clamped[0] - left, clamped[1] - top))
    return canvas


def slice_image(
    image: Optional[Image.Image],
    grid_size: int,
    tab_ratio: float = DEFAULT_TAB_RATIO,
) -> List[List[Image.Image]]:
    """Cut an image into overscanned sub-images, one per grid cell.

    Args:
        image: Source image, or None when decoding failed.
        grid_size: Number of rows and columns.
        tab_ratio: Overscan on each side relative to the piece size.

    Returns:
        Sub-images indexed by [row][col]; empty if there is no image or it is
        too small to give every piece at least one pixel.
    """
    if image is None or grid_size < 1 or image.width == 0 or image.height == 0:
        return []

    out_width, out_height = capture_size(image.size, grid_size, tab_ratio)
    if out_width == 0 or out_height == 0:
        logger.warning("Image of %dx%d is too small for a %dx%d grid", image.width, image.height, grid_size, grid_size)
        return []

    if image.mode not in ("RGB", "RGBA"):
        image = image.convert("RGBA")

    return [
        [slice_piece(image, capture_box(image.size, grid_size, r, c, tab_ratio)) for c in range(grid_size)]
        for r in range(grid_size)
    ]
