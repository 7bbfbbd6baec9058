"""I/O utilities and helpers for image processing.

This module is the boundary between files on disk and the in-memory core: it
enumerates input images, decodes uploaded bytes into ``Bitmap`` objects,
encodes canvases to PNG bytes, and maps resampling method names to Pillow
constants.
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import Generator

from loguru import logger
from PIL import Image, ImageOps, UnidentifiedImageError

try:
    import pillow_avif  # noqa: F401
except Exception:  # noqa: BLE001
    # AVIF decoding is optional; install the 'avif' extra for pillow-avif-plugin
    pass

from config import IMAGE_EXTENSIONS
from .errors import DecodeError, EncodeError
from .models import Bitmap, ProcessedImage

SUPPORTED_OUTPUT_FORMATS = {"PNG"}


def iter_image_paths(input_path: Path) -> Generator[Path, None, None]:
    """Yield image file paths from a file or directory.

    Parameters
    ----------
    input_path
        A path to a single image or a directory containing images.

    Yields
    ------
    Path
        Individual image file paths.
    """

    path = Path(input_path)
    if path.is_file():
        if path.suffix.lower() in IMAGE_EXTENSIONS:
            yield path
        return
    if path.is_dir():
        for p in sorted(path.rglob("*")):
            if p.is_file() and p.suffix.lower() in IMAGE_EXTENSIONS:
                yield p


def ensure_dir(path: Path) -> None:
    """Create a directory if it does not exist."""

    Path(path).mkdir(parents=True, exist_ok=True)


def decode(file_bytes: bytes) -> Bitmap:
    """Decode image file bytes into an RGBA bitmap.

    Only the first frame of multi-frame files is used. EXIF orientation is
    applied so the bitmap is upright.

    Parameters
    ----------
    file_bytes
        Raw contents of an uploaded image file.

    Returns
    -------
    Bitmap
        Decoded RGBA pixels.

    Raises
    ------
    DecodeError
        If the bytes are empty, unsupported or corrupt.
    """

    if not file_bytes:
        raise DecodeError("No image data supplied")
    try:
        with Image.open(io.BytesIO(file_bytes)) as img:
            img.seek(0)
            img.load()
            upright = ImageOps.exif_transpose(img)
            bitmap = Bitmap.from_image(upright)
    except (UnidentifiedImageError, Image.DecompressionBombError) as exc:
        raise DecodeError(f"Unsupported or unsafe image data: {exc}") from exc
    except (OSError, ValueError, SyntaxError) as exc:
        raise DecodeError(f"Corrupt image data: {exc}") from exc

    if bitmap.width <= 0 or bitmap.height <= 0:
        raise DecodeError(f"Decoded image has no pixels ({bitmap.width}x{bitmap.height})")
    logger.debug(f"Decoded {bitmap.width}x{bitmap.height} image")
    return bitmap


def load_bitmap(image_path: Path) -> Bitmap:
    """Read an image file and decode it.

    Parameters
    ----------
    image_path
        Path to the image file.

    Returns
    -------
    Bitmap
        Decoded RGBA pixels.
    """

    path = Path(image_path)
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise DecodeError(f"Cannot read {path}: {exc}") from exc
    try:
        return decode(data)
    except DecodeError as exc:
        raise DecodeError(f"{path.name}: {exc}") from exc


def encode(image: Image.Image, fmt: str = "PNG") -> bytes:
    """Serialize a Pillow image to bytes.

    Parameters
    ----------
    image
        Canvas to encode. RGBA is kept as is so the alpha channel survives.
    fmt
        Output format; only PNG is supported.

    Returns
    -------
    bytes
        Encoded image stream.
    """

    fmt_upper = (fmt or "").upper()
    if fmt_upper not in SUPPORTED_OUTPUT_FORMATS:
        raise EncodeError(f"Unsupported output format {fmt!r}; only PNG is produced")
    buffer = io.BytesIO()
    try:
        image.save(buffer, format=fmt_upper, optimize=True)
    except (OSError, ValueError, KeyError) as exc:
        raise EncodeError(f"Failed to encode {image.width}x{image.height} canvas: {exc}") from exc
    return buffer.getvalue()


def save_processed(processed: ProcessedImage, dest_path: Path) -> None:
    """Write an encoded variant to disk, creating parent directories."""

    dest_path = Path(dest_path)
    ensure_dir(dest_path.parent)
    dest_path.write_bytes(processed.data)
    logger.debug(f"Saved {len(processed.data)} bytes -> {dest_path}")


def map_resample(name: str) -> int:
    """Map a resample name to a Pillow constant.

    Parameters
    ----------
    name
        One of 'nearest', 'bilinear', 'bicubic', 'lanczos'.

    Returns
    -------
    int
        Pillow resampling constant.
    """

    name_lower = (name or "").lower()
    if name_lower == "nearest":
        return Image.NEAREST
    if name_lower == "bicubic":
        return Image.BICUBIC
    if name_lower == "lanczos":
        return Image.LANCZOS
    return Image.BILINEAR
