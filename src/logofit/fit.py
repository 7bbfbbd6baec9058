"""Canvas geometry for padding images to an exact aspect ratio.

``fit`` computes the smallest canvas that contains the whole source, matches
the ratio exactly as integers and satisfies the minimum dimensions.
``fit_within`` computes the scale-to-fit geometry used for fixed-size icons.
"""

from __future__ import annotations

import math
from typing import Optional

from loguru import logger

from .errors import InvalidInput
from .models import AspectRatio, FitResult


def _ceil_div(a: int, b: int) -> int:
    return -(-a // b)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _check_dimension(name: str, value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInput(f"{name} must be an integer, got {value!r}")
    if value <= 0:
        raise InvalidInput(f"{name} must be positive, got {value}")
    return value


def _floor(value: Optional[int]) -> int:
    # None, zero and negatives all mean "no minimum"
    if value is None or value <= 0:
        return 0
    return int(value)


def fit(
    source_width: int,
    source_height: int,
    ratio: AspectRatio,
    min_width: Optional[int] = 0,
    min_height: Optional[int] = 0,
) -> FitResult:
    """Compute the padded canvas for a source image.

    Parameters
    ----------
    source_width, source_height
        Source image dimensions in pixels.
    ratio
        Target width:height ratio. It is reduced to lowest terms first.
    min_width, min_height
        Minimum canvas dimensions. ``None`` or values <= 0 disable the floor.

    Returns
    -------
    FitResult
        Canvas size satisfying ``canvas_width * den == canvas_height * num``,
        both minimums, and covering the source, plus the centering offsets.

    Raises
    ------
    InvalidInput
        On non-positive source dimensions or a malformed ratio.
    """

    sw = _check_dimension("source_width", source_width)
    sh = _check_dimension("source_height", source_height)
    if not isinstance(ratio, AspectRatio):
        raise InvalidInput(f"ratio must be an AspectRatio, got {ratio!r}")
    ratio = ratio.reduced()
    num, den = ratio.numerator, ratio.denominator
    min_w, min_h = _floor(min_width), _floor(min_height)

    if sw * den > sh * num:
        # Wider than the target: pad top and bottom
        width = sw
        height = _ceil_div(width * den, num)
    else:
        # Taller than (or equal to) the target: pad left and right
        height = sh
        width = _ceil_div(height * num, den)

    while width < min_w or height < min_h:
        if width < min_w:
            width = min_w
            height = _ceil_div(width * den, num)
        if height < min_h:
            height = min_h
            width = _ceil_div(height * num, den)

    units = max(_ceil_div(height, den), _ceil_div(width, num))
    width, height = units * num, units * den

    offset_x = (width - sw) // 2
    offset_y = (height - sh) // 2
    if offset_x < 0 or offset_y < 0:
        raise InvalidInput(
            f"Canvas {width}x{height} cannot contain source {sw}x{sh} at ratio {ratio}"
        )

    logger.debug(
        f"fit {sw}x{sh} -> {width}x{height} (ratio {ratio}, min {min_w}x{min_h}, "
        f"offset {offset_x},{offset_y})"
    )
    return FitResult(
        canvas_width=width,
        canvas_height=height,
        offset_x=offset_x,
        offset_y=offset_y,
        content_width=sw,
        content_height=sh,
    )


def fit_within(source_width: int, source_height: int, size: int) -> FitResult:
    """Scale a source uniformly to fit inside a ``size`` x ``size`` canvas.

    The content keeps its aspect ratio; each scaled side is rounded half up and
    kept at least one pixel so extreme aspects still draw something.
    """

    sw = _check_dimension("source_width", source_width)
    sh = _check_dimension("source_height", source_height)
    size = _check_dimension("size", size)

    scale = min(size / sw, size / sh)
    content_w = min(size, max(1, _round_half_up(sw * scale)))
    content_h = min(size, max(1, _round_half_up(sh * scale)))

    offset_x = (size - content_w) // 2
    offset_y = (size - content_h) // 2

    logger.debug(
        f"fit_within {sw}x{sh} -> {content_w}x{content_h} on {size}x{size} "
        f"(offset {offset_x},{offset_y})"
    )
    return FitResult(
        canvas_width=size,
        canvas_height=size,
        offset_x=offset_x,
        offset_y=offset_y,
        content_width=content_w,
        content_height=content_h,
    )
