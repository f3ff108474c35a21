import io
import os
import struct
import sys
import zlib

import pytest

# Headless SDL so pygame never needs a real display
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

# Ensure the project root is on the path so modules can be imported in tests
ROOT = os.path.dirname(os.path.dirname(__file__))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

import pygame

from loaders.core import MemorySource
from state.event_bus import EVENT_BUS


def _chunk(tag: bytes, data: bytes) -> bytes:
    return (
        struct.pack(">I", len(data))
        + tag
        + data
        + struct.pack(">I", zlib.crc32(tag + data) & 0xFFFFFFFF)
    )


def make_png(width: int, height: int, colour=(255, 0, 0, 255)) -> bytes:
    """Return an RGBA PNG of ``width`` x ``height`` filled with ``colour``."""

    row = b"\x00" + bytes(colour) * width
    png = b"\x89PNG\r\n\x1a\n"
    png += _chunk(b"IHDR", struct.pack(">IIBBBBB", width, height, 8, 6, 0, 0, 0))
    png += _chunk(b"IDAT", zlib.compress(row * height, 9))
    png += _chunk(b"IEND", b"")
    return png


def encode_surface(width: int, height: int, ext: str, colour=(0, 128, 255)) -> bytes:
    """Encode a solid surface with pygame's writer (``ext`` like ``".jpg"``)."""

    surface = pygame.Surface((width, height))
    surface.fill(colour)
    buf = io.BytesIO()
    pygame.image.save(surface, buf, f"fixture{ext}")
    return buf.getvalue()


def make_container(sections) -> bytes:
    """Wrap ``sections`` in the legacy index table."""

    offsets = [0]
    for section in sections:
        offsets.append(offsets[-1] + len(section))
    header = struct.pack("<H", len(sections))
    header += b"".join(struct.pack("<I", off) for off in offsets)
    return header + b"".join(sections)


def rgb_pixels(count: int) -> bytes:
    """Return ``count`` distinct RGB triples."""

    return b"".join(bytes((i * 13 % 256, 200 - i * 7 % 200, 40 + i)) for i in range(count))


class CountingSource(MemorySource):
    """In-memory source that records every fetch."""

    def __init__(self, blobs=None):
        super().__init__(blobs)
        self.calls = []

    def fetch(self, key):
        self.calls.append(key)
        return super().fetch(key)


@pytest.fixture
def source():
    return CountingSource()


@pytest.fixture
def png_bytes():
    """Return the :func:`make_png` factory."""

    return make_png


@pytest.fixture
def container_bytes():
    return make_container


@pytest.fixture
def encoded_image():
    return encode_surface


@pytest.fixture(autouse=True)
def _reset_event_bus():
    """Isolate global event subscriptions between tests."""

    EVENT_BUS.reset()
    yield
    EVENT_BUS.reset()


@pytest.fixture
def rgb_run():
    return rgb_pixels
