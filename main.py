"""Entry point that warms the legacy asset cache.

Initialises Pygame, builds a :class:`LegacyAssetLoader` over the configured
asset directories and runs the startup preload.  The game shell calls
:func:`build_loader` itself; running this module only reports what would be
decoded.
"""

import logging
import os

import pygame

try:  # pragma: no cover - package vs script execution
    from . import settings
    from .loaders.asset_manager import LegacyAssetLoader, PreloadSummary
except ImportError:  # pragma: no cover - fallback when run as a script
    import settings  # type: ignore
    from loaders.asset_manager import LegacyAssetLoader, PreloadSummary  # type: ignore

logger = logging.getLogger(__name__)


def build_loader() -> LegacyAssetLoader:
    """Return a loader reading from :data:`settings.ASSETS_DIRS`."""

    loader = LegacyAssetLoader.from_settings()
    logger.info("Asset search paths: %s", os.pathsep.join(settings.ASSETS_DIRS))
    return loader


def main() -> PreloadSummary:
    logging.basicConfig(
        level=logging.DEBUG if settings.DEBUG_ASSETS else logging.INFO,
        format="[%(name)s] %(message)s",
    )
    pygame.init()
    try:
        loader = build_loader()
        return loader.preload()
    finally:
        pygame.quit()


if __name__ == "__main__":
    main()
