"""Interpret a run of bytes as raw ARGB or RGB pixels.

The legacy build stored many images as the int arrays it later handed to
``createRGBImage``, without any width or height.  The dimensions are
therefore guessed from the pixel count alone by :func:`infer_dims`.

Known quirk: the aspect-ratio rule multiplies both sides of the ratio by the
raw quotient ``P / (a*b)`` instead of its square root, so it only produces a
canvas of exactly ``P`` pixels when ``P == a*b``.  Bigger canvases are
rejected by :func:`layout_dims`.  The rule is kept as the original
game shipped it; changing it changes which assets decode.
"""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass
from typing import List, Optional, Tuple

import constants
from .errors import ImplausibleDimensionsError

# Ranks of the rule that produced a set of dimensions, most plausible first
RANK_SQUARE = 0
RANK_RATIO = 1
RANK_FACTOR = 2


@dataclass
class PixelBuffer:
    """Row-major ARGB words with their dimensions."""

    pixels: List[int]
    width: int
    height: int
    has_alpha: bool

    @property
    def bytes_per_pixel(self) -> int:
        return 4 if self.has_alpha else 3


def factor_dims(pixel_count: int) -> Optional[Tuple[int, int]]:
    """Return ``(w, pixel_count // w)`` for the smallest divisor ``w``."""

    for w in range(1, math.isqrt(pixel_count) + 1):
        if pixel_count % w == 0:
            return w, pixel_count // w
    return None


def rank_dims(pixel_count: int) -> Optional[Tuple[int, Tuple[int, int]]]:
    """Return ``(rank, (w, h))`` as picked by :func:`infer_dims`."""

    if pixel_count <= 0:
        return None

    side = math.isqrt(pixel_count)
    if side * side == pixel_count:
        return RANK_SQUARE, (side, side)

    for a, b in constants.COMMON_RATIOS:
        if pixel_count % (a * b) == 0:
            scale = pixel_count // (a * b)
            return RANK_RATIO, (a * scale, b * scale)

    dims = factor_dims(pixel_count)
    if dims is None:
        return None
    return RANK_FACTOR, dims


def infer_dims(pixel_count: int) -> Optional[Tuple[int, int]]:
    """Guess ``(width, height)`` for ``pixel_count`` pixels.

    Tried in order: a perfect square, the ratios in
    :data:`constants.COMMON_RATIOS`, then the smallest divisor.
    """

    ranked = rank_dims(pixel_count)
    return None if ranked is None else ranked[1]


def pack_argb(data: bytes) -> List[int]:
    """Return one ``A,R,G,B`` word per 4 bytes of ``data``."""

    count = len(data) // 4
    return list(struct.unpack(f">{count}I", data[: count * 4]))


def pack_rgb(data: bytes) -> List[int]:
    """Return one opaque ``0xFF,R,G,B`` word per 3 bytes of ``data``."""

    return [
        0xFF000000 | (data[i] << 16) | (data[i + 1] << 8) | data[i + 2]
        for i in range(0, len(data) - len(data) % 3, 3)
    ]


def layout_dims(data: bytes, has_alpha: bool) -> Tuple[int, int]:
    """Return the inferred ``(width, height)`` of ``data`` in the given layout.

    Raises :class:`ImplausibleDimensionsError` when the byte count is not a
    whole number of pixels or the inferred canvas does not hold exactly that
    many pixels.
    """

    bpp = 4 if has_alpha else 3
    if not data or len(data) % bpp:
        raise ImplausibleDimensionsError(
            f"{len(data)} bytes is not a whole number of {bpp} byte pixels"
        )
    pixel_count = len(data) // bpp
    dims = infer_dims(pixel_count)
    if dims is None:
        raise ImplausibleDimensionsError(f"no dimensions for {pixel_count} pixels")
    width, height = dims
    if width * height != pixel_count:
        raise ImplausibleDimensionsError(
            f"{width}x{height} does not fit {pixel_count} pixels"
        )
    return width, height


def parse_pixel_buffer(data: bytes, has_alpha: bool) -> PixelBuffer:
    """Read ``data`` as ARGB (``has_alpha``) or RGB pixels of inferred size."""

    width, height = layout_dims(data, has_alpha)
    pixels = pack_argb(data) if has_alpha else pack_rgb(data)
    return PixelBuffer(pixels, width, height, has_alpha)


def candidate_layouts(data: bytes) -> List[bool]:
    """Return the ``has_alpha`` values worth trying for ``data``, best first.

    A layout whose pixel count is a perfect square beats one that only fits
    an aspect ratio; on equal footing ARGB is tried before RGB.
    """

    ranked = []
    for order, has_alpha in enumerate((True, False)):
        bpp = 4 if has_alpha else 3
        if not data or len(data) % bpp:
            continue
        found = rank_dims(len(data) // bpp)
        if found is not None:
            ranked.append((found[0], order, has_alpha))
    ranked.sort()
    return [has_alpha for _rank, _order, has_alpha in ranked]
