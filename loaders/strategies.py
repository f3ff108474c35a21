"""Decoding strategies tried, in order, on an opaque asset blob.

Each strategy takes the whole blob and either returns a :class:`Decoded`
result or raises an :class:`~loaders.errors.AssetLoadError` subclass.  None
of them modifies the blob.  :data:`STRATEGIES` fixes the order used by
:class:`loaders.asset_manager.LegacyAssetLoader`.

The raw pixel strategy is only applied to container sections.  Run over an
unframed blob it would accept almost any byte run whose length divides by
three or four.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

import pygame

from . import raster
from .errors import (
    AssetLoadError,
    DecoderRejectedError,
    ImplausibleDimensionsError,
    MalformedContainerError,
)
from .index_table import parse_index_table
from .pixel_buffer import candidate_layouts, layout_dims
from .signatures import UNKNOWN, find_embedded, sniff, sniff_at


@dataclass
class Decoded:
    """A validated surface plus how it was obtained."""

    surface: pygame.Surface
    origin: str
    section_index: Optional[int] = None
    offset: Optional[int] = None
    bytes_per_pixel: Optional[int] = None
    source_length: Optional[int] = None

    @property
    def size(self) -> Tuple[int, int]:
        return self.surface.get_width(), self.surface.get_height()


Strategy = Callable[[bytes], Decoded]


def standard_decode(data: bytes) -> Decoded:
    """Hand the blob to the raster decoder as-is."""

    return Decoded(raster.decode(data), "Standard")


def sniffed_decode(data: bytes) -> Decoded:
    """Retry the raster decoder with the format named by the blob's magic."""

    tag = sniff(data)
    if tag == UNKNOWN:
        raise DecoderRejectedError("no known signature at offset 0")
    return Decoded(raster.decode(data, tag), tag)


def raw_pixel_decode(data: bytes) -> Decoded:
    """Read ``data`` as headerless ARGB or RGB pixels."""

    layouts = candidate_layouts(data)
    if not layouts:
        raise ImplausibleDimensionsError(f"no pixel layout fits {len(data)} bytes")
    error: AssetLoadError = ImplausibleDimensionsError("no layout tried")
    for has_alpha in layouts:
        try:
            width, height = layout_dims(data, has_alpha)
            surface = raster.from_bytes(data, width, height, has_alpha)
        except AssetLoadError as exc:
            error = exc
            continue
        return Decoded(
            surface,
            "Raw",
            bytes_per_pixel=4 if has_alpha else 3,
            source_length=len(data),
        )
    raise error


def container_decode(data: bytes) -> Decoded:
    """Parse the legacy index table and decode the first usable section."""

    table = parse_index_table(data)
    for sl in table.sections(len(data)):
        if sl.length == 0:
            continue
        try:
            decoded = raw_pixel_decode(sl.read(data))
        except AssetLoadError:
            continue
        return dataclasses.replace(
            decoded, origin="Container", section_index=sl.index
        )
    raise MalformedContainerError(
        f"none of {table.count} sections decoded as pixels"
    )


def embedded_decode(data: bytes) -> Decoded:
    """Decode a PNG/JPEG that starts after a custom header."""

    offset = find_embedded(data)
    if offset < 0:
        raise DecoderRejectedError("no embedded PNG/JPEG signature")
    tag = sniff_at(data, offset)
    surface = raster.decode(data[offset:], tag)
    return Decoded(surface, f"Extracted-{tag}", offset=offset)


STRATEGIES: List[Tuple[str, Strategy]] = [
    ("standard", standard_decode),
    ("sniffed", sniffed_decode),
    ("container", container_decode),
    ("embedded", embedded_decode),
]
