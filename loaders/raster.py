"""Thin pygame layer: decode encoded images and build surfaces from pixels.

Surfaces returned here are plain :class:`pygame.Surface` objects that have
not been converted to the display format, so they can be created before a
window exists (and in headless tests).
"""

from __future__ import annotations

import io
import math
import struct
from typing import Optional, Sequence

import pygame

import constants
from .errors import DecoderRejectedError, ImplausibleDimensionsError, SinkFailureError
from .signatures import format_extension


def decode(data: bytes, tag: Optional[str] = None) -> pygame.Surface:
    """Decode PNG/JPEG/GIF/BMP ``data`` with pygame's image loader.

    ``tag`` (e.g. ``"PNG"``) is passed on as a file name hint so the loader
    does not have to rely on probing the stream alone.
    """

    ext = format_extension(tag)
    namehint = f"asset{ext}" if ext else ""
    try:
        surface = pygame.image.load(io.BytesIO(data), namehint)
    except Exception as exc:
        raise DecoderRejectedError(str(exc) or exc.__class__.__name__) from exc
    if not is_valid(surface):
        raise DecoderRejectedError(f"decoder returned unusable surface {surface!r}")
    return surface


def from_bytes(data: bytes, width: int, height: int, has_alpha: bool) -> pygame.Surface:
    """Build a surface straight from headerless ``A,R,G,B`` or ``R,G,B`` bytes.

    This is the raw pixel path only, so on top of the usual validity check
    each side is capped at :data:`constants.MAX_IMAGE_DIMENSION`.
    """

    bpp = 4 if has_alpha else 3
    if width <= 0 or height <= 0 or len(data) != width * height * bpp:
        raise SinkFailureError(
            f"{len(data)} bytes do not fill a {width}x{height} surface"
        )
    if width > constants.MAX_IMAGE_DIMENSION or height > constants.MAX_IMAGE_DIMENSION:
        raise ImplausibleDimensionsError(
            f"{width}x{height} exceeds {constants.MAX_IMAGE_DIMENSION} pixels a side"
        )
    try:
        surface = pygame.image.frombytes(
            bytes(data), (width, height), "ARGB" if has_alpha else "RGB"
        )
    except Exception as exc:
        raise SinkFailureError(str(exc) or exc.__class__.__name__) from exc
    if not is_valid(surface):
        raise SinkFailureError(f"pixel sink returned unusable surface {surface!r}")
    return surface


def from_pixels(
    pixels: Sequence[int], width: int, height: int, has_alpha: bool
) -> pygame.Surface:
    """Build a surface from row-major ``A,R,G,B`` words.

    With ``has_alpha`` false the alpha byte of every word is dropped and an
    opaque RGB surface is returned.
    """

    if width <= 0 or height <= 0 or len(pixels) != width * height:
        raise SinkFailureError(
            f"{len(pixels)} pixels do not fill a {width}x{height} surface"
        )
    try:
        raw = bytearray(struct.pack(f">{len(pixels)}I", *pixels))
    except struct.error as exc:
        raise SinkFailureError(str(exc)) from exc
    if not has_alpha:
        del raw[0::4]
    return from_bytes(raw, width, height, has_alpha)


def _dimension_ok(value: object) -> bool:
    if isinstance(value, float) and (math.isnan(value) or math.isinf(value)):
        return False
    try:
        return value >= 1  # type: ignore[operator]
    except TypeError:
        return False


def is_valid(surface: Optional[pygame.Surface]) -> bool:
    """Return ``True`` if ``surface`` has a usable, sane size."""

    if surface is None:
        return False
    try:
        width, height = surface.get_width(), surface.get_height()
    except Exception:  # pragma: no cover - robustness
        return False
    return _dimension_ok(width) and _dimension_ok(height)
