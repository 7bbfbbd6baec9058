"""Exception types raised by the logo/headshot processing core."""

from __future__ import annotations


class LogoFitError(Exception):
    """Base class for all processing errors."""


class InvalidInput(LogoFitError, ValueError):
    """Zero or negative dimensions, malformed ratios, bad bitmaps or options."""


class DecodeError(LogoFitError):
    """Source bytes could not be decoded into a bitmap."""


class EncodeError(LogoFitError):
    """A canvas could not be serialized to the requested format."""
