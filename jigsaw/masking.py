"""Mask rendering for puzzle piece outlines."""

from typing import Tuple

from PIL import Image, ImageChops, ImageDraw

from .models import ClosedPath


def create_piece_mask(
    outline: ClosedPath,
    size: Tuple[int, int],
    points_per_curve: int = 20,
    antialias_scale: int = 4,
) -> Image.Image:
    """Create a mask image for a puzzle piece with anti-aliased edges.

    Uses supersampling for anti-aliasing: renders at higher resolution
    then downsamples.

    Args:
        outline: Piece outline in the mask's pixel coordinates.
        size: (width, height) of the mask.
        points_per_curve: Number of points to sample from each Bezier curve.
        antialias_scale: Supersampling factor (4 = render at 4x, then downsample).

    Returns:
        Grayscale PIL Image where white=inside, black=outside.
    """
    width, height = size
    hi_res_mask = Image.new("L", (width * antialias_scale, height * antialias_scale), 0)
    draw = ImageDraw.Draw(hi_res_mask)

    polygon = [(x * antialias_scale, y * antialias_scale) for x, y in outline.to_polygon(points_per_curve)]
    if len(polygon) >= 3:
        draw.polygon(polygon, fill=255)

    if antialias_scale == 1:
        return hi_res_mask
    return hi_res_mask.resize((width, height), Image.Resampling.LANCZOS)


def apply_mask(image: Image.Image, mask: Image.Image) -> Image.Image:
    """Cut an image to a piece shape.

    Pixels already transparent in the image (letterbox padding) stay
    transparent.

    Args:
        image: Piece sub-image.
        mask: Grayscale mask of the same size.

    Returns:
        RGBA image of the piece with transparent background.
    """
    result = image.convert("RGBA")
    alpha = ImageChops.multiply(result.getchannel("A"), mask)
    result.putalpha(alpha)
    return result
