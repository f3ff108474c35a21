"""
Shared limits and fixed tables for the legacy asset loader.

Keeping these values in one place makes it easy to audit the heuristics
the loader applies to opaque blobs without hunting through each module.
"""

from typing import List, Tuple

# Largest width or height accepted for any decoded surface
MAX_IMAGE_DIMENSION = 16384

# Number of leading bytes shown when logging a rejected blob
HEX_PREVIEW_BYTES = 16

# ---------------------------------------------------------------------------
# Signature search
# ---------------------------------------------------------------------------
# Bytes scanned exhaustively for an embedded PNG/JPEG signature
EMBEDDED_SCAN_LIMIT = 1024

# Offsets probed after the exhaustive scan, for headers larger than 1 KiB
EMBEDDED_SAMPLE_OFFSETS: List[int] = [100, 500, 1000, 2000, 5000, 10000, 20000, 50000]

# ---------------------------------------------------------------------------
# Legacy index-table container
# ---------------------------------------------------------------------------
CONTAINER_MIN_SIZE = 6
CONTAINER_MAX_SECTIONS = 10000

# ---------------------------------------------------------------------------
# Raw pixel buffers
# ---------------------------------------------------------------------------
# Aspect ratios tried, in order, when a pixel count is not a perfect square
COMMON_RATIOS: List[Tuple[int, int]] = [(16, 9), (4, 3), (3, 2), (2, 1), (1, 1)]

# ---------------------------------------------------------------------------
# Cache keys
# ---------------------------------------------------------------------------
# Origin tags appended to a key for diagnostics, e.g. ``images/3[Container]``
ORIGIN_TAGS: List[str] = [
    "Standard",
    "PNG",
    "JPEG",
    "GIF",
    "BMP",
    "Container",
    "Extracted-PNG",
    "Extracted-JPEG",
]

# Extensions tried when a numbered asset has no usable extension-less file
NUMBERED_EXTENSIONS: List[str] = [".png", ".jpg", ".jpeg", ".gif", ".bmp"]
