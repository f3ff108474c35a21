"""Cache-backed loader for the legacy game's image assets.

The ``LegacyAssetLoader`` turns an asset key into a :class:`pygame.Surface`.
Blobs come from a :class:`~loaders.core.ByteSource` and are run through the
strategies in :data:`loaders.strategies.STRATEGIES` until one produces a
valid surface.  Successful results are cached per key; keys whose blob no
strategy accepts are remembered in a skip set so they are neither retried
nor reported twice.  Both are emptied only by :meth:`LegacyAssetLoader.clear`.

The loader is meant to be driven from the game thread only.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional, Set

import pygame

import constants
import settings
from state.event_bus import (
    EVENT_BUS,
    ON_ASSET_LOAD_PROGRESS,
    ON_ASSET_LOADED,
    ON_ASSET_SKIPPED,
)

from .core import ByteSource, DirectorySource
from .errors import AssetLoadError
from .strategies import STRATEGIES, Decoded

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    """A cached surface and the strategy that produced it."""

    surface: pygame.Surface
    origin: str
    section_index: Optional[int] = None
    offset: Optional[int] = None
    bytes_per_pixel: Optional[int] = None
    source_length: Optional[int] = None

    @classmethod
    def from_decoded(cls, decoded: Decoded) -> "CacheEntry":
        return cls(
            surface=decoded.surface,
            origin=decoded.origin,
            section_index=decoded.section_index,
            offset=decoded.offset,
            bytes_per_pixel=decoded.bytes_per_pixel,
            source_length=decoded.source_length,
        )

    @property
    def width(self) -> int:
        return self.surface.get_width()

    @property
    def height(self) -> int:
        return self.surface.get_height()

    def label(self, key: str) -> str:
        """Return the diagnostic form of ``key``, e.g. ``images/3[Container]``."""

        return f"{key}[{self.origin}]"


@dataclass(frozen=True)
class PreloadSummary:
    loaded: int
    skipped: int
    cached: int


def hex_preview(data: bytes, length: int = constants.HEX_PREVIEW_BYTES) -> str:
    """Return the first ``length`` bytes of ``data`` as ``"AA BB .."``."""

    return " ".join(f"{b:02X}" for b in data[:length])


class LegacyAssetLoader:
    """Decode legacy asset blobs into surfaces, at most once per key."""

    def __init__(
        self,
        source: ByteSource,
        *,
        debug: Optional[bool] = None,
        image_prefix: Optional[str] = None,
        progress_callback: Callable[[int, int], None] | None = None,
    ) -> None:
        self.source = source
        self.debug = settings.DEBUG_ASSETS if debug is None else debug
        self.image_prefix = settings.IMAGE_PREFIX if image_prefix is None else image_prefix
        self._progress_callback = progress_callback
        self._images: Dict[str, CacheEntry] = {}
        self._skipped: Set[str] = set()
        self._missing_numbers: Set[int] = set()

    @classmethod
    def from_settings(cls, **kwargs) -> "LegacyAssetLoader":
        """Build a loader reading files from :data:`settings.ASSETS_DIRS`."""

        return cls(DirectorySource(settings.ASSETS_DIRS), **kwargs)

    # ------------------------------------------------------------------
    # Cache access
    # ------------------------------------------------------------------
    def describe(self, key: str) -> Optional[CacheEntry]:
        """Return the cache entry for ``key``.

        ``key`` may carry one of the diagnostic suffixes listed in
        :data:`constants.ORIGIN_TAGS`, e.g. ``"images/3[Container]"``.
        """

        entry = self._images.get(key)
        if entry is not None:
            return entry
        if key.endswith("]"):
            for tag in constants.ORIGIN_TAGS:
                suffix = f"[{tag}]"
                if key.endswith(suffix):
                    entry = self._images.get(key[: -len(suffix)])
                    if entry is not None:
                        return entry
        return None

    def get(self, key: str) -> Optional[pygame.Surface]:
        """Return the cached surface for ``key`` without decoding anything."""

        entry = self.describe(key)
        return None if entry is None else entry.surface

    def is_skipped(self, key: str) -> bool:
        return key in self._skipped

    def size(self) -> int:
        return len(self._images)

    def __len__(self) -> int:
        return len(self._images)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.describe(key) is not None

    def clear(self) -> None:
        """Forget every cached surface and skipped key."""

        count = len(self._images)
        self._images.clear()
        self._skipped.clear()
        self._missing_numbers.clear()
        self._trace("Cleared %d cached images and skipped keys", count)

    def set_debug_mode(self, enabled: bool) -> None:
        self.debug = bool(enabled)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    def load(self, key: str) -> Optional[pygame.Surface]:
        """Return the surface for ``key``, decoding its blob on first use.

        Returns ``None`` if the source has no blob for ``key`` (a later call
        asks the source again) or if no strategy could decode it (later calls
        return ``None`` straight away until :meth:`clear`).
        """

        return self._load(key, report_missing=True)

    def load_by_number(self, number: int) -> Optional[pygame.Surface]:
        """Load numbered image ``number``, trying common extensions as well."""

        cached = self.get_by_number(number)
        if cached is not None:
            return cached
        base = f"{self.image_prefix}{number}"
        for key in [base] + [base + ext for ext in constants.NUMBERED_EXTENSIONS]:
            surface = self._load(key, report_missing=False)
            if surface is not None:
                return surface
        if number not in self._missing_numbers:
            self._missing_numbers.add(number)
            self._trace("Could not load image by number %d", number)
        return None

    def get_by_number(self, number: int) -> Optional[pygame.Surface]:
        base = f"{self.image_prefix}{number}"
        for key in [base] + [base + ext for ext in constants.NUMBERED_EXTENSIONS]:
            surface = self.get(key)
            if surface is not None:
                return surface
        return None

    def preload(
        self, keys: Optional[Iterable[str]] = None, numbered: Optional[int] = None
    ) -> PreloadSummary:
        """Load the startup assets and report how many succeeded.

        ``keys`` defaults to :data:`settings.PRELOAD_KEYS` and ``numbered``
        to :data:`settings.PRELOAD_NUMBERED`.  Keys that fail end up in the
        skip set exactly as with :meth:`load`.
        """

        key_list = list(settings.PRELOAD_KEYS if keys is None else keys)
        count = settings.PRELOAD_NUMBERED if numbered is None else numbered
        total = len(key_list) + count
        loaded = skipped = done = 0

        self._trace("Preloading %d common assets", total)
        for key in key_list:
            if self.load(key) is not None:
                loaded += 1
            else:
                skipped += 1
            done += 1
            self._report_progress(done, total)
        for number in range(count):
            if self.load_by_number(number) is not None:
                loaded += 1
            else:
                skipped += 1
            done += 1
            self._report_progress(done, total)

        summary = PreloadSummary(loaded, skipped, len(self._images))
        logger.info(
            "Preload summary: %d loaded, %d skipped, %d total cached",
            summary.loaded,
            summary.skipped,
            summary.cached,
        )
        return summary

    # ------------------------------------------------------------------
    def _load(self, key: str, report_missing: bool) -> Optional[pygame.Surface]:
        entry = self._images.get(key)
        if entry is not None:
            self._trace("Using cached image %s", entry.label(key))
            return entry.surface
        if key in self._skipped:
            return None

        try:
            data = self.source.fetch(key)
        except Exception as exc:
            logger.warning("Could not fetch asset %s: %s", key, exc)
            return None
        if data is None:
            if report_missing:
                logger.warning("Missing asset %s", key)
            else:
                self._trace("Missing asset %s", key)
            return None

        decoded = self._decode(key, bytes(data))
        if decoded is None:
            self._skipped.add(key)
            logger.info(
                "Skipping non-image asset %s (size: %d bytes, first bytes: %s)",
                key,
                len(data),
                hex_preview(data),
            )
            EVENT_BUS.publish(ON_ASSET_SKIPPED, key)
            return None

        entry = CacheEntry.from_decoded(decoded)
        self._images[key] = entry
        self._trace(
            "Loaded image %s (%dx%d)", entry.label(key), entry.width, entry.height
        )
        EVENT_BUS.publish(ON_ASSET_LOADED, key, entry.origin)
        return entry.surface

    def _decode(self, key: str, data: bytes) -> Optional[Decoded]:
        """Run the strategies in order and return the first result."""

        for name, strategy in STRATEGIES:
            try:
                decoded = strategy(data)
            except AssetLoadError as exc:
                self._trace("%s: %s strategy failed: %s", key, name, exc)
                continue
            self._trace("%s: %s strategy produced %s", key, name, decoded.origin)
            return decoded
        return None

    def _trace(self, msg: str, *args: object) -> None:
        if self.debug:
            logger.debug(msg, *args)

    def _report_progress(self, done: int, total: int) -> None:
        """Notify listeners about preload progress."""

        if self._progress_callback:
            self._progress_callback(done, total)
        EVENT_BUS.publish(ON_ASSET_LOAD_PROGRESS, done, total)
