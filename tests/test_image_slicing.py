"""Tests for slicing puzzle images into overscanned sub-images."""

import io
import logging
from typing import Callable

import pytest
from PIL import Image

from jigsaw import capture_box, capture_rect, capture_size, load_image, slice_image

TAB_RATIO = 0.3

ImageFactory = Callable[[int, int], Image.Image]


class TestSliceImage:
    """Tests for slice_image."""

    @pytest.mark.parametrize("width,height", [(500, 500), (640, 480), (333, 217), (101, 999)])
    def test_uniform_sub_image_size(self, gradient_image: ImageFactory, width: int, height: int) -> None:
        """Every piece of a 5x5 grid has the same size, including border pieces."""
        expected = (round(width / 5 * (1 + 2 * TAB_RATIO)), round(height / 5 * (1 + 2 * TAB_RATIO)))

        pieces = slice_image(gradient_image(width, height), 5, TAB_RATIO)

        assert len(pieces) == 5
        for row in pieces:
            assert len(row) == 5
            for piece in row:
                assert piece.size == expected
                assert piece.mode == "RGBA"

    def test_corner_piece_is_letterboxed(self, gradient_image: ImageFactory) -> None:
        """The off-image part of a corner capture is transparent."""
        pieces = slice_image(gradient_image(500, 500), 5, TAB_RATIO)
        corner = pieces[0][0]

        # Capture starts 30 pixels above and left of the image
        assert corner.getpixel((5, 5))[3] == 0
        assert corner.getpixel((29, 80))[3] == 0
        assert corner.getpixel((80, 80)) == (50, 50, 100, 255)

    def test_bottom_right_piece_is_letterboxed(self, gradient_image: ImageFactory) -> None:
        """Overscan past the right and bottom edges is transparent too."""
        pieces = slice_image(gradient_image(500, 500), 5, TAB_RATIO)
        corner = pieces[4][4]

        # Capture spans 370..530, the image ends at 500
        assert corner.getpixel((155, 155))[3] == 0
        assert corner.getpixel((129, 129)) == (499 % 256, 499 % 256, 998 % 256, 255)

    def test_interior_piece_content(self, gradient_image: ImageFactory) -> None:
        """Interior captures copy the source pixels at the expected offset."""
        pieces = slice_image(gradient_image(500, 500), 5, TAB_RATIO)
        piece = pieces[2][3]

        # Column 3 starts at x=300, row 2 at y=200, minus 30 pixels of overscan
        assert piece.getpixel((0, 0)) == (270 % 256, 170, (270 + 170) % 256, 255)
        assert all(piece.getpixel((x, y))[3] == 255 for x, y in [(0, 0), (159, 0), (0, 159), (159, 159)])

    def test_row_major_order(self, gradient_image: ImageFactory) -> None:
        """pieces[r][c] holds the capture of row r and column c."""
        pieces = slice_image(gradient_image(400, 400), 4, TAB_RATIO)

        for r in range(4):
            for c in range(4):
                left, top, _, _ = capture_box((400, 400), 4, r, c, TAB_RATIO)
                x, y = max(0, -left) + 40, max(0, -top) + 40
                assert pieces[r][c].getpixel((x, y))[:2] == ((left + x) % 256, (top + y) % 256)

    def test_missing_image_yields_no_pieces(self) -> None:
        """A failed decode produces an empty slice."""
        assert slice_image(None, 3) == []

    @pytest.mark.parametrize("width,height", [(3, 3), (3, 300), (300, 3)])
    def test_too_small_image_yields_no_pieces(
        self, width: int, height: int, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Images that would give zero-pixel pieces produce an empty slice."""
        with caplog.at_level(logging.WARNING, logger="jigsaw.image_slicing"):
            assert slice_image(Image.new("RGB", (width, height)), 10, TAB_RATIO) == []

        assert "too small" in caplog.text

    def test_grayscale_image_is_converted(self) -> None:
        """Non-RGB sources are sliced into RGBA pieces."""
        pieces = slice_image(Image.new("L", (90, 90), 128), 3, TAB_RATIO)

        assert pieces[1][1].mode == "RGBA"
        assert pieces[1][1].getpixel((20, 20)) == (128, 128, 128, 255)


class TestCaptureGeometry:
    """Tests for the capture rect helpers."""

    def test_capture_rect_expands_cell(self) -> None:
        """The capture is the nominal cell grown by tab_ratio on every side."""
        rect = capture_rect((500, 250), 5, 1, 2, TAB_RATIO)

        assert rect.x == pytest.approx(200 - 30)
        assert rect.y == pytest.approx(50 - 15)
        assert rect.width == pytest.approx(160)
        assert rect.height == pytest.approx(80)

    def test_capture_size(self) -> None:
        """The shared capture size rounds the overscanned piece size."""
        assert capture_size((500, 250), 5, TAB_RATIO) == (160, 80)

    def test_capture_box_matches_size(self) -> None:
        """Integer boxes all have the shared size."""
        size = capture_size((333, 217), 5, TAB_RATIO)
        for r in range(5):
            for c in range(5):
                left, top, right, bottom = capture_box((333, 217), 5, r, c, TAB_RATIO)
                assert (right - left, bottom - top) == size


class TestLoadImage:
    """Tests for load_image."""

    def test_load_png_bytes(self, gradient_image: ImageFactory) -> None:
        """Encoded images decode to their original size."""
        buffer = io.BytesIO()
        gradient_image(64, 32).save(buffer, format="PNG")

        image = load_image(buffer.getvalue())

        assert image is not None
        assert image.size == (64, 32)

    def test_load_file_path(self, gradient_image: ImageFactory, tmp_path) -> None:
        """Images can be loaded from disk."""
        path = tmp_path / "puzzle.png"
        gradient_image(20, 10).save(path)

        image = load_image(path)

        assert image is not None
        assert image.size == (20, 10)

    def test_undecodable_bytes(self, caplog: pytest.LogCaptureFixture) -> None:
        """Garbage input returns None and logs a warning."""
        with caplog.at_level(logging.WARNING, logger="jigsaw.image_slicing"):
            assert load_image(b"fake image content") is None

        assert "Could not decode puzzle image" in caplog.text

    def test_missing_file(self, tmp_path) -> None:
        """A missing file is treated like an undecodable image."""
        assert load_image(tmp_path / "missing.png") is None
