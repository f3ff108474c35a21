"""Magic-byte detection for the standard raster formats.

Only the leading bytes of a blob are inspected; nothing here decodes pixels.
GIF and BMP are recognised at offset zero only, their 6 and 2 byte
signatures turn up far too often inside arbitrary data to be searched for.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

import constants

PNG = "PNG"
JPEG = "JPEG"
GIF = "GIF"
BMP = "BMP"
UNKNOWN = "Unknown"

FORMAT_TAGS = (PNG, JPEG, GIF, BMP)

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
JPEG_SIGNATURE = b"\xff\xd8\xff"
GIF87_SIGNATURE = b"GIF87a"
GIF89_SIGNATURE = b"GIF89a"
BMP_SIGNATURE = b"BM"

# Checked in order; the first match wins
SIGNATURES: List[Tuple[str, bytes]] = [
    (PNG, PNG_SIGNATURE),
    (JPEG, JPEG_SIGNATURE),
    (GIF, GIF87_SIGNATURE),
    (GIF, GIF89_SIGNATURE),
    (BMP, BMP_SIGNATURE),
]

# Formats that may start somewhere other than offset zero
EMBEDDABLE: List[Tuple[str, bytes]] = [
    (PNG, PNG_SIGNATURE),
    (JPEG, JPEG_SIGNATURE),
]

_EXTENSIONS: Dict[str, str] = {
    PNG: ".png",
    JPEG: ".jpg",
    "JPG": ".jpg",
    GIF: ".gif",
    BMP: ".bmp",
}

_MIME_TYPES: Dict[str, str] = {
    PNG: "image/png",
    JPEG: "image/jpeg",
    "JPG": "image/jpeg",
    GIF: "image/gif",
    BMP: "image/bmp",
}


def sniff(data: bytes) -> str:
    """Return the format tag whose signature starts ``data``, else ``UNKNOWN``."""

    for tag, signature in SIGNATURES:
        if data[: len(signature)] == signature:
            return tag
    return UNKNOWN


def sniff_at(data: bytes, offset: int) -> str:
    """Return ``PNG`` or ``JPEG`` if that signature starts at ``offset``."""

    if offset < 0 or offset >= len(data):
        return UNKNOWN
    for tag, signature in EMBEDDABLE:
        if data[offset : offset + len(signature)] == signature:
            return tag
    return UNKNOWN


def find_embedded(data: bytes) -> int:
    """Return the offset of the first PNG/JPEG signature in ``data`` or ``-1``.

    The first kilobyte is scanned byte by byte.  Larger headers are only
    caught if the image happens to start at one of
    :data:`constants.EMBEDDED_SAMPLE_OFFSETS`.
    """

    size = len(data)
    limit = min(constants.EMBEDDED_SCAN_LIMIT, size - 8)
    for offset in range(max(0, limit)):
        if sniff_at(data, offset) != UNKNOWN:
            return offset
    for offset in constants.EMBEDDED_SAMPLE_OFFSETS:
        if offset < size - 8 and sniff_at(data, offset) != UNKNOWN:
            return offset
    return -1


def is_image_header(data: bytes) -> bool:
    return sniff(data) != UNKNOWN


def format_extension(tag: Optional[str]) -> Optional[str]:
    """Return the file extension for ``tag`` (``".png"``, ``".jpg"`` ...)."""

    if not tag:
        return None
    return _EXTENSIONS.get(tag.upper())


def mime_type(tag: Optional[str]) -> Optional[str]:
    if not tag:
        return None
    return _MIME_TYPES.get(tag.upper())
