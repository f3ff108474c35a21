"""Parser for the index-table container used by the original mobile build.

Layout, little-endian throughout::

    uint16  count
    uint32  offsets[count + 1]     payload-relative, last entry is the end
    ...     payload                sections concatenated

Section ``i`` covers ``payload[offsets[i]:offsets[i + 1]]``.  There is no
magic number, so :func:`looks_like_container` can only apply sanity checks
to the header.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import List, Optional, Tuple

import constants
from .errors import MalformedContainerError

_U16 = struct.Struct("<H")
_U32 = struct.Struct("<I")


@dataclass(frozen=True)
class SectionSlice:
    """A ``(start, length)`` view into the blob a table was parsed from."""

    index: int
    start: int
    length: int

    @property
    def end(self) -> int:
        return self.start + self.length

    def read(self, data: bytes) -> bytes:
        return data[self.start : self.end]


@dataclass(frozen=True)
class IndexTable:
    count: int
    offsets: Tuple[int, ...]

    @property
    def header_size(self) -> int:
        return 2 + 4 * (self.count + 1)

    def section(self, index: int, blob_size: int) -> Optional[SectionSlice]:
        """Return the slice for section ``index`` or ``None`` if it is unusable.

        Sections with a negative length (decreasing offsets) or that run past
        ``blob_size`` are reported as ``None`` rather than failing the table.
        """

        if index < 0 or index >= self.count:
            return None
        length = self.offsets[index + 1] - self.offsets[index]
        if length < 0:
            return None
        start = self.header_size + self.offsets[index]
        if start + length > blob_size:
            return None
        return SectionSlice(index, start, length)

    def sections(self, blob_size: int) -> List[SectionSlice]:
        """Return every usable section in ascending index order."""

        result = []
        for index in range(self.count):
            sl = self.section(index, blob_size)
            if sl is not None:
                result.append(sl)
        return result


def read_u16_le(data: bytes, offset: int) -> int:
    if offset < 0 or offset + 2 > len(data):
        return 0
    return _U16.unpack_from(data, offset)[0]


def read_u32_le(data: bytes, offset: int) -> int:
    if offset < 0 or offset + 4 > len(data):
        return 0
    return _U32.unpack_from(data, offset)[0]


def looks_like_container(data: bytes) -> bool:
    """Cheap header check run before the full offset table is parsed."""

    size = len(data)
    if size < constants.CONTAINER_MIN_SIZE:
        return False
    count = read_u16_le(data, 0)
    if count > constants.CONTAINER_MAX_SECTIONS:
        return False
    if size < 2 + 4 * (count + 1):
        return False
    return read_u32_le(data, 2) <= size


def section_count(data: bytes) -> int:
    """Return the section count stored in ``data`` or ``-1`` if implausible."""

    if len(data) < 2:
        return -1
    count = read_u16_le(data, 0)
    if count > constants.CONTAINER_MAX_SECTIONS:
        return -1
    return count


def parse_index_table(data: bytes) -> IndexTable:
    """Parse the count and offset table of ``data``.

    Raises :class:`MalformedContainerError` when the header is implausible or
    any offset points past the end of the blob.
    """

    if not looks_like_container(data):
        raise MalformedContainerError("header is not an index table")
    count = read_u16_le(data, 0)
    size = len(data)
    offsets = []
    for i in range(count + 1):
        value = read_u32_le(data, 2 + 4 * i)
        if value > size:
            raise MalformedContainerError(
                f"offset {i} is {value}, past end of {size} byte blob"
            )
        offsets.append(value)
    return IndexTable(count, tuple(offsets))


def read_section(data: bytes, table: IndexTable, index: int) -> Optional[bytes]:
    """Return the bytes of section ``index``; ``None`` if missing or empty."""

    sl = table.section(index, len(data))
    if sl is None or sl.length == 0:
        return None
    return sl.read(data)
