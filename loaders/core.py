"""Byte sources the legacy loader pulls asset blobs from.

A source maps a logical asset key (``"images/3"``, ``"/images/icon.png"``)
to the complete blob, or ``None`` when it has no such asset.  Sources are
passed to :class:`loaders.asset_manager.LegacyAssetLoader` explicitly so
tests can inject blobs without touching the filesystem.
"""

from __future__ import annotations

import logging
import os
from typing import Dict, List, Mapping, Optional, Protocol, Sequence

logger = logging.getLogger(__name__)


class ByteSource(Protocol):
    def fetch(self, key: str) -> Optional[bytes]:
        ...


def normalize_key(key: str) -> str:
    """Return ``key`` with forward slashes and no leading slash."""

    return key.replace("\\", "/").lstrip("/")


class MemorySource:
    """Serve blobs from an in-memory mapping."""

    def __init__(self, blobs: Optional[Mapping[str, bytes]] = None) -> None:
        self._blobs: Dict[str, bytes] = {}
        for key, data in (blobs or {}).items():
            self.add(key, data)

    def add(self, key: str, data: bytes) -> None:
        self._blobs[normalize_key(key)] = bytes(data)

    def fetch(self, key: str) -> Optional[bytes]:
        return self._blobs.get(normalize_key(key))


class DirectorySource:
    """Serve blobs from files under one or more asset directories.

    Keys are resolved relative to each directory in ``search_paths`` in
    order.  Lookups are case-insensitive through an index of every file that
    is built once at construction.
    """

    def __init__(self, search_paths: Sequence[str]) -> None:
        self.search_paths: List[str] = [str(p) for p in search_paths]
        self._index: Dict[str, str] = {}
        self._build_index()

    def fetch(self, key: str) -> Optional[bytes]:
        path = self.resolve(key)
        if path is None:
            return None
        try:
            with open(path, "rb") as fh:
                return fh.read()
        except OSError as exc:
            logger.warning("Could not read asset %s: %s", path, exc)
            return None

    def resolve(self, key: str) -> Optional[str]:
        """Return the file backing ``key`` or ``None``."""

        rel = normalize_key(key)
        if not rel:
            return None
        path = self._index.get(rel.lower())
        if path and os.path.isfile(path):
            return path
        for base in self.search_paths:
            candidate = os.path.join(base, rel)
            if os.path.isfile(candidate):
                self._index.setdefault(rel.lower(), candidate)
                return candidate
        return None

    def rebuild_index(self) -> None:
        self._index.clear()
        self._build_index()

    # ------------------------------------------------------------------
    def _build_index(self) -> None:
        """Index all available asset files using lowercase paths."""

        for base in self.search_paths:
            if not os.path.isdir(base):
                continue
            for root, _dirs, files in os.walk(base):
                for fname in files:
                    rel = os.path.relpath(os.path.join(root, fname), base).replace(
                        os.sep, "/"
                    )
                    self._index.setdefault(rel.lower(), os.path.join(root, fname))
