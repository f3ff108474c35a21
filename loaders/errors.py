"""Exceptions raised while turning a legacy asset blob into a surface.

Every decoding stage reports failure by raising one of these.  The loader
driver catches :class:`AssetLoadError` around each strategy, so none of them
ever escape :meth:`loaders.asset_manager.LegacyAssetLoader.load`.
"""

from __future__ import annotations


class AssetLoadError(Exception):
    """Base class for a strategy that did not produce an image."""


class MalformedContainerError(AssetLoadError):
    """The blob is not a usable legacy index-table container."""


class DecoderRejectedError(AssetLoadError):
    """The raster decoder failed or returned an unusable surface."""


class ImplausibleDimensionsError(AssetLoadError):
    """No width/height could be inferred for a raw pixel run."""


class SinkFailureError(AssetLoadError):
    """The pixel sink refused to build a surface from a pixel buffer."""
