"""Data containers shared by the fitting, compositing and keying stages.

All containers are frozen dataclasses; stages build new instances rather than
mutating the ones they are given.
"""

from __future__ import annotations

import base64
import math
from dataclasses import dataclass, field
from typing import Tuple

from PIL import Image

from .errors import InvalidInput

RGB = Tuple[int, int, int]

WHITE: RGB = (255, 255, 255)


def parse_hex_color(value: str) -> RGB:
    """Parse ``#RRGGBB`` (or ``RRGGBB``) into an RGB triple.

    Parameters
    ----------
    value
        Hex color string.

    Returns
    -------
    tuple
        ``(r, g, b)`` with each channel in 0..255.
    """

    text = (value or "").strip().lstrip("#")
    if len(text) != 6:
        raise InvalidInput(f"Expected a #RRGGBB color, got {value!r}")
    try:
        return (int(text[0:2], 16), int(text[2:4], 16), int(text[4:6], 16))
    except ValueError as exc:
        raise InvalidInput(f"Expected a #RRGGBB color, got {value!r}") from exc


def _check_rgb(color: RGB) -> RGB:
    if len(color) != 3 or any(not 0 <= int(c) <= 255 for c in color):
        raise InvalidInput(f"RGB channels must be in 0..255, got {color!r}")
    return (int(color[0]), int(color[1]), int(color[2]))


@dataclass(frozen=True)
class Bitmap:
    """Decoded RGBA image.

    Attributes
    ----------
    width, height
        Dimensions in pixels.
    pixels
        RGBA samples, one byte per channel, row-major, top row first.
    """

    width: int
    height: int
    pixels: bytes = field(repr=False)

    @classmethod
    def from_image(cls, image: Image.Image) -> "Bitmap":
        """Build a bitmap from a Pillow image, converting to RGBA."""

        rgba = image if image.mode == "RGBA" else image.convert("RGBA")
        return cls(rgba.width, rgba.height, rgba.tobytes())

    def to_image(self) -> Image.Image:
        """Return a new Pillow RGBA image holding a copy of the pixels."""

        self.check()
        return Image.frombytes("RGBA", (self.width, self.height), self.pixels)

    def check(self) -> None:
        """Raise ``InvalidInput`` if the bitmap is empty or malformed."""

        if self.width <= 0 or self.height <= 0:
            raise InvalidInput(
                f"Bitmap must have positive dimensions, got {self.width}x{self.height}"
            )
        expected = self.width * self.height * 4
        if len(self.pixels) != expected:
            raise InvalidInput(
                f"Bitmap buffer holds {len(self.pixels)} bytes, expected {expected}"
            )

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)


@dataclass(frozen=True)
class AspectRatio:
    """Width:height ratio as a pair of positive integers."""

    numerator: int
    denominator: int

    def __post_init__(self) -> None:
        for term in (self.numerator, self.denominator):
            if isinstance(term, bool) or not isinstance(term, int) or term <= 0:
                raise InvalidInput(
                    f"Aspect ratio terms must be positive integers, got "
                    f"{self.numerator}:{self.denominator}"
                )

    @classmethod
    def parse(cls, label: str) -> "AspectRatio":
        """Parse a label such as ``"5:2"`` or ``"73/100"``."""

        text = (label or "").replace("/", ":")
        parts = text.split(":")
        if len(parts) != 2:
            raise InvalidInput(f"Malformed aspect ratio {label!r}; expected 'W:H'")
        try:
            numerator, denominator = int(parts[0]), int(parts[1])
        except ValueError as exc:
            raise InvalidInput(f"Malformed aspect ratio {label!r}") from exc
        return cls(numerator, denominator)

    def reduced(self) -> "AspectRatio":
        divisor = math.gcd(self.numerator, self.denominator)
        return AspectRatio(self.numerator // divisor, self.denominator // divisor)

    def __str__(self) -> str:
        return f"{self.numerator}:{self.denominator}"


@dataclass(frozen=True)
class FitResult:
    """Canvas geometry computed for one source image.

    Attributes
    ----------
    canvas_width, canvas_height
        Output canvas size.
    offset_x, offset_y
        Top-left position of the drawn source on the canvas.
    content_width, content_height
        Size the source is drawn at. Equal to the source size unless the
        variant scales the source to fit.
    """

    canvas_width: int
    canvas_height: int
    offset_x: int
    offset_y: int
    content_width: int
    content_height: int

    @property
    def canvas_size(self) -> Tuple[int, int]:
        return (self.canvas_width, self.canvas_height)

    @property
    def content_size(self) -> Tuple[int, int]:
        return (self.content_width, self.content_height)


@dataclass(frozen=True)
class RenderOptions:
    """Background handling for the compositor.

    Attributes
    ----------
    transparent
        Fill the canvas with fully transparent pixels instead of a color.
    fill_color
        RGB padding color used when ``transparent`` is False.
    """

    transparent: bool = False
    fill_color: RGB = WHITE

    def __post_init__(self) -> None:
        object.__setattr__(self, "fill_color", _check_rgb(self.fill_color))

    @property
    def background(self) -> Tuple[int, int, int, int]:
        if self.transparent:
            return (0, 0, 0, 0)
        return self.fill_color + (255,)


@dataclass(frozen=True)
class KeyingSpec:
    """Reference color and Euclidean RGB distance tolerance for keying."""

    target: RGB = WHITE
    tolerance: float = 30.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "target", _check_rgb(self.target))
        if self.tolerance < 0:
            raise InvalidInput(f"Tolerance must be non-negative, got {self.tolerance}")

    @classmethod
    def from_hex(cls, color: str, tolerance: float) -> "KeyingSpec":
        return cls(parse_hex_color(color), float(tolerance))


@dataclass(frozen=True)
class CropBox:
    """Crop rectangle in source pixel coordinates."""

    x: float
    y: float
    width: float
    height: float

    def __post_init__(self) -> None:
        if not all(math.isfinite(v) for v in (self.x, self.y, self.width, self.height)):
            raise InvalidInput(
                f"Crop box values must be finite, got "
                f"{self.x},{self.y},{self.width},{self.height}"
            )

    @classmethod
    def parse(cls, text: str) -> "CropBox":
        """Parse ``"x,y,width,height"``."""

        parts = [p.strip() for p in (text or "").split(",")]
        if len(parts) != 4:
            raise InvalidInput(f"Crop box must be 'x,y,width,height', got {text!r}")
        try:
            x, y, w, h = (float(p) for p in parts)
        except ValueError as exc:
            raise InvalidInput(f"Crop box must be numeric, got {text!r}") from exc
        return cls(x, y, w, h)


@dataclass(frozen=True)
class ProcessedImage:
    """Encoded output of one variant."""

    variant: str
    data: bytes = field(repr=False)
    fit: FitResult
    format: str = "PNG"

    @property
    def mime_type(self) -> str:
        return f"image/{self.format.lower()}"

    def to_data_url(self) -> str:
        """Return the encoded bytes as a base64 ``data:`` URL."""

        b64 = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{b64}"
