"""Canvas composition: padding, centering, scaling and cropping.

Functions in this module take a decoded ``Bitmap`` and a ``FitResult`` and
produce the padded canvas, either as a Pillow image (``compose``) or as
encoded PNG bytes (``render``).
"""

from __future__ import annotations

import math
from typing import Tuple

from loguru import logger
from PIL import Image

from .errors import InvalidInput
from .io_utils import encode, map_resample
from .models import Bitmap, CropBox, FitResult, RenderOptions


def _blit(canvas: Image.Image, image: Image.Image, x: int, y: int) -> None:
    """Alpha-composite ``image`` onto ``canvas`` at (x, y), dropping overflow."""

    left, top = max(0, -x), max(0, -y)
    right = min(image.width, canvas.width - x)
    bottom = min(image.height, canvas.height - y)
    if right <= left or bottom <= top:
        return
    canvas.alpha_composite(
        image, dest=(x + left, y + top), source=(left, top, right, bottom)
    )


def _check_fit(fit_result: FitResult) -> None:
    if fit_result.canvas_width <= 0 or fit_result.canvas_height <= 0:
        raise InvalidInput(
            f"Canvas must have positive dimensions, got "
            f"{fit_result.canvas_width}x{fit_result.canvas_height}"
        )
    if fit_result.content_width <= 0 or fit_result.content_height <= 0:
        raise InvalidInput(
            f"Content must have positive dimensions, got "
            f"{fit_result.content_width}x{fit_result.content_height}"
        )


def compose(
    bitmap: Bitmap,
    fit_result: FitResult,
    options: RenderOptions = RenderOptions(),
    resample: str = "bilinear",
) -> Image.Image:
    """Build the padded canvas for ``bitmap``.

    Parameters
    ----------
    bitmap
        Source pixels.
    fit_result
        Canvas geometry from ``fit`` or ``fit_within``.
    options
        Background mode and fill color.
    resample
        Resampling method name, used only when the content is scaled.

    Returns
    -------
    Image.Image
        RGBA canvas of ``fit_result.canvas_size``.
    """

    bitmap.check()
    _check_fit(fit_result)

    canvas = Image.new("RGBA", fit_result.canvas_size, options.background)
    source = bitmap.to_image()
    if fit_result.content_size != bitmap.size:
        source = source.resize(fit_result.content_size, map_resample(resample))
    _blit(canvas, source, fit_result.offset_x, fit_result.offset_y)
    return canvas


def render(
    bitmap: Bitmap,
    fit_result: FitResult,
    options: RenderOptions = RenderOptions(),
    resample: str = "bilinear",
) -> bytes:
    """Compose the padded canvas and encode it as PNG bytes."""

    canvas = compose(bitmap, fit_result, options, resample=resample)
    return encode(canvas, "PNG")


def _clamp_box(box: CropBox, size: Tuple[int, int]) -> Tuple[int, int, int, int]:
    width, height = size
    x0 = min(max(0, math.floor(box.x)), width)
    y0 = min(max(0, math.floor(box.y)), height)
    x1 = min(max(0, math.floor(box.x) + math.floor(box.width)), width)
    y1 = min(max(0, math.floor(box.y) + math.floor(box.height)), height)
    return x0, y0, x1, y1


def crop_bitmap(bitmap: Bitmap, box: CropBox) -> Bitmap:
    """Extract a sub-rectangle of ``bitmap``.

    Coordinates are floored to whole pixels and the rectangle is clamped to the
    bitmap bounds.

    Raises
    ------
    InvalidInput
        If nothing of the rectangle lies inside the bitmap.
    """

    bitmap.check()
    x0, y0, x1, y1 = _clamp_box(box, bitmap.size)
    if x1 <= x0 or y1 <= y0:
        raise InvalidInput(f"Crop box {box} lies outside the {bitmap.width}x{bitmap.height} image")
    if (x0, y0, x1, y1) == (0, 0) + bitmap.size:
        return bitmap
    logger.debug(f"Cropping {bitmap.width}x{bitmap.height} to box {(x0, y0, x1, y1)}")
    return Bitmap.from_image(bitmap.to_image().crop((x0, y0, x1, y1)))
