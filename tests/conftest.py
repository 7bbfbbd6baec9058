import io

import pytest
from PIL import Image

from src.logofit.models import Bitmap


@pytest.fixture
def make_bitmap():
    """Factory for solid-color RGBA bitmaps."""

    def _make(width, height, color=(200, 30, 30, 255)):
        return Bitmap(width, height, bytes(color) * (width * height))

    return _make


@pytest.fixture
def png_bytes():
    """Factory for encoded PNG files of a given size and color."""

    def _make(width, height, color=(10, 120, 200, 255)):
        buffer = io.BytesIO()
        Image.new("RGBA", (width, height), color).save(buffer, format="PNG")
        return buffer.getvalue()

    return _make
