"""Multi-variant processing of logos and headshots.

Each variant pairs a geometry profile from ``config.VARIANT_PROFILES`` with the
fitter and the compositor. Multi-variant requests are all-or-nothing: the first
failing variant raises and no partial result set is returned.
"""

from __future__ import annotations

from typing import Dict, Mapping, Optional, Tuple

from loguru import logger

from config import CONFIG, VariantProfile
from .compositor import crop_bitmap, render
from .errors import InvalidInput
from .fit import fit, fit_within
from .io_utils import encode
from .keying import key_out
from .models import (
    AspectRatio,
    Bitmap,
    CropBox,
    FitResult,
    KeyingSpec,
    ProcessedImage,
    RenderOptions,
)


def _profile(name: str, profiles: Optional[Mapping[str, VariantProfile]]) -> VariantProfile:
    profiles = profiles if profiles is not None else CONFIG.variants
    if name not in profiles:
        choices = ", ".join(profiles.keys())
        raise InvalidInput(f"Unknown variant '{name}'. Choose from: {choices}")
    return profiles[name]


def process_variant(
    bitmap: Bitmap,
    name: str,
    transparent: bool = False,
    fill_color: Tuple[int, int, int] = CONFIG.behavior.fill_color,
    resample: str = CONFIG.behavior.resample,
    profiles: Optional[Mapping[str, VariantProfile]] = None,
) -> ProcessedImage:
    """Fit, compose and encode one variant.

    Parameters
    ----------
    bitmap
        Decoded source image.
    name
        Variant name, e.g. 'rectangular', 'square', 'favicon', 'headshot'.
    transparent
        Pad with transparent pixels. Ignored by always-opaque variants.
    fill_color
        RGB padding color for opaque backgrounds.
    resample
        Resampling method for variants that scale the source.
    profiles
        Optional override of the variant table.

    Returns
    -------
    ProcessedImage
        PNG bytes plus the geometry that produced them.
    """

    profile = _profile(name, profiles)
    bitmap.check()

    if profile.fixed_size:
        geometry = fit_within(bitmap.width, bitmap.height, profile.fixed_size)
    else:
        geometry = fit(
            bitmap.width,
            bitmap.height,
            AspectRatio(*profile.ratio),
            profile.min_width,
            profile.min_height,
        )

    if profile.always_opaque:
        options = RenderOptions(transparent=False)
    else:
        options = RenderOptions(transparent=transparent, fill_color=fill_color)

    data = render(bitmap, geometry, options, resample=resample)
    logger.debug(
        f"{name}: {bitmap.width}x{bitmap.height} -> "
        f"{geometry.canvas_width}x{geometry.canvas_height}"
    )
    return ProcessedImage(variant=name, data=data, fit=geometry)


def process_logo_variants(
    bitmap: Bitmap,
    use_transparent_background: bool = False,
    include_square: bool = True,
    include_favicon: bool = True,
    fill_color: Tuple[int, int, int] = CONFIG.behavior.fill_color,
    resample: str = CONFIG.behavior.resample,
) -> Dict[str, ProcessedImage]:
    """Produce the rectangular, square and favicon logo variants.

    The favicon is derived alongside the square logo and is only produced
    when ``include_square`` is True.

    Returns
    -------
    dict
        Variant name -> ``ProcessedImage``, in 'rectangular', 'square',
        'favicon' order for the variants requested.
    """

    names = ["rectangular"]
    if include_square:
        names.append("square")
        if include_favicon:
            names.append("favicon")

    results: Dict[str, ProcessedImage] = {}
    for name in names:
        results[name] = process_variant(
            bitmap,
            name,
            transparent=use_transparent_background,
            fill_color=fill_color,
            resample=resample,
        )
    return results


def process_headshot(bitmap: Bitmap) -> ProcessedImage:
    """Pad a headshot to 73:100 and at least 292x400 on white."""

    return process_variant(bitmap, "headshot")


def remove_background(
    bitmap: Bitmap,
    target_color: str = CONFIG.keying.target_color,
    tolerance: float = CONFIG.keying.tolerance,
) -> Bitmap:
    """Key out pixels near ``target_color`` and return the new bitmap."""

    spec = KeyingSpec.from_hex(target_color, tolerance)
    return key_out(bitmap, spec)


def process_background_removal(
    bitmap: Bitmap,
    target_color: str = CONFIG.keying.target_color,
    tolerance: float = CONFIG.keying.tolerance,
) -> ProcessedImage:
    """Key out the background and encode the result at its original size."""

    keyed = remove_background(bitmap, target_color=target_color, tolerance=tolerance)
    geometry = FitResult(
        canvas_width=keyed.width,
        canvas_height=keyed.height,
        offset_x=0,
        offset_y=0,
        content_width=keyed.width,
        content_height=keyed.height,
    )
    return ProcessedImage(variant="nobg", data=encode(keyed.to_image()), fit=geometry)


def prepare_source(
    bitmap: Bitmap,
    crop: Optional[CropBox] = None,
    strip_background: bool = False,
    target_color: str = CONFIG.keying.target_color,
    tolerance: float = CONFIG.keying.tolerance,
) -> Bitmap:
    """Apply the optional crop and background removal before variant output."""

    if crop is not None:
        bitmap = crop_bitmap(bitmap, crop)
    if strip_background:
        bitmap = remove_background(bitmap, target_color=target_color, tolerance=tolerance)
    return bitmap
