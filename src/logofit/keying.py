"""Color keying for naive background removal.

Every pixel whose RGB color lies within a Euclidean distance of the reference
color has its alpha zeroed. Pixels are classified independently, so specks of
the key color inside the foreground are removed as well.
"""

from __future__ import annotations

import numpy as np
from loguru import logger

from .errors import InvalidInput
from .models import Bitmap, KeyingSpec


def key_out(bitmap: Bitmap, spec: KeyingSpec) -> Bitmap:
    """Make pixels close to ``spec.target`` fully transparent.

    Parameters
    ----------
    bitmap
        Source pixels; left untouched.
    spec
        Reference color and strict distance threshold (``distance < tolerance``).

    Returns
    -------
    Bitmap
        New bitmap of the same size with alpha updated.
    """

    bitmap.check()
    data = np.frombuffer(bitmap.pixels, dtype=np.uint8).reshape(
        bitmap.height, bitmap.width, 4
    ).copy()

    diff = data[:, :, :3].astype(np.int32) - np.asarray(spec.target, dtype=np.int32)
    distance = np.sqrt((diff * diff).sum(axis=2))
    mask = distance < spec.tolerance
    data[mask, 3] = 0

    result = Bitmap(bitmap.width, bitmap.height, data.tobytes())
    if result.size != bitmap.size:
        raise InvalidInput(
            f"Keying changed dimensions {bitmap.width}x{bitmap.height} -> "
            f"{result.width}x{result.height}"
        )
    logger.debug(
        f"Keyed out {int(mask.sum())} of {mask.size} pixels "
        f"(target {spec.target}, tolerance {spec.tolerance})"
    )
    return result
