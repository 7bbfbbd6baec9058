"""Global configuration for the logo and headshot preparation toolkit.

This module centralizes defaults and user-tunable settings for:
- the fixed output variants (aspect ratio, minimum size, icon size)
- background fill, resampling and color-keying behavior

All values can be overridden via CLI flags or by passing arguments directly to
the processing functions; nothing here is mutated at runtime.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple


# Supported file extensions for input images
IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp", ".bmp", ".gif", ".tiff", ".avif"}


RESAMPLE_METHOD = "bilinear"  # one of {nearest, bilinear, bicubic, lanczos}

# Favicons are emitted as a single PNG at this size; no ICO container is built.
FAVICON_SIZE = 64

DEFAULT_FILL_COLOR: Tuple[int, int, int] = (255, 255, 255)


@dataclass(frozen=True)
class VariantProfile:
    """Geometry rules for one output variant.

    Attributes
    ----------
    ratio
        Target aspect ratio as (width, height) integers.
    min_width, min_height
        Minimum canvas dimensions; 0 disables the floor.
    fixed_size
        Side of a fixed square canvas. When set, the source is scaled to fit
        instead of padded to ``ratio``.
    always_opaque
        Ignore the caller's transparency flag and pad with white.
    """

    ratio: Tuple[int, int]
    min_width: int = 0
    min_height: int = 0
    fixed_size: Optional[int] = None
    always_opaque: bool = False


VARIANT_PROFILES: Dict[str, VariantProfile] = {
    "rectangular": VariantProfile(ratio=(5, 2), min_width=400, min_height=160),
    "square": VariantProfile(ratio=(1, 1), min_width=40, min_height=40),
    "favicon": VariantProfile(ratio=(1, 1), fixed_size=FAVICON_SIZE),
    "headshot": VariantProfile(
        ratio=(73, 100), min_width=292, min_height=400, always_opaque=True
    ),
}

LOGO_VARIANTS = ("rectangular", "square", "favicon")


@dataclass
class Behavior:
    """Processing behavior toggles.

    Attributes
    ----------
    overwrite
        Whether to overwrite files in the output directory.
    transparent
        Pad logo variants with transparent pixels instead of ``fill_color``.
    fill_color
        RGB padding color for opaque backgrounds.
    resample
        Resampling method used when a variant scales the source. One of:
        'nearest', 'bilinear', 'bicubic', 'lanczos'.
    """

    overwrite: bool = False
    transparent: bool = False
    fill_color: Tuple[int, int, int] = DEFAULT_FILL_COLOR
    resample: str = RESAMPLE_METHOD


@dataclass
class Keying:
    """Defaults for color-keyed background removal.

    Attributes
    ----------
    target_color
        Hex color treated as background.
    tolerance
        Euclidean RGB distance below which a pixel counts as background
        (0-441 scale; 0 removes nothing).
    """

    target_color: str = "#FFFFFF"
    tolerance: float = 30.0


@dataclass
class ProjectConfig:
    """Top-level configuration container.

    Attributes
    ----------
    behavior
        Execution-time toggles.
    keying
        Background removal defaults.
    variants
        Mapping from variant name to its geometry profile.
    """

    behavior: Behavior = field(default_factory=Behavior)
    keying: Keying = field(default_factory=Keying)
    variants: Dict[str, VariantProfile] = field(
        default_factory=lambda: dict(VARIANT_PROFILES)
    )


# Default config instance used by the CLI unless overridden
CONFIG = ProjectConfig()
