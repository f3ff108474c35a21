"""Decoding of the legacy mobile build's image assets."""

from .asset_manager import CacheEntry, LegacyAssetLoader, PreloadSummary
from .core import DirectorySource, MemorySource

__all__ = [
    "LegacyAssetLoader",
    "CacheEntry",
    "PreloadSummary",
    "DirectorySource",
    "MemorySource",
]
