"""Shared fixtures for the jigsaw tests."""

from typing import Callable, Generator

import pytest
from PIL import Image

from jigsaw.config import get_settings
from tests.helpers import FakeClock, make_gradient_image


@pytest.fixture
def clock() -> FakeClock:
    """A clock that only moves when told to."""
    return FakeClock()


@pytest.fixture
def gradient_image() -> Callable[[int, int], Image.Image]:
    """Factory for coordinate-encoding test images."""
    return make_gradient_image


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Drop cached settings so environment overrides are picked up."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
