"""Music library: discovers albums and tracks from the filesystem.

Expected directory layout::

    <basepath>/
        ncs/
            info.json        {"title": "...", "description": "..."}
            cover.jpg
            01 - First Track.mp3
            02 - Second Track.mp3
        lofi/
            ...

Each direct sub-directory of *basepath* is treated as an album.  Files
inside an album directory that carry a recognised audio extension are its
tracks.  Albums and tracks are returned sorted so that the order is stable
between calls; the catalog then uses that order verbatim.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from albumdeck.errors import FetchError, NotFoundError

logger = logging.getLogger(__name__)

AUDIO_EXTENSIONS: frozenset[str] = frozenset(
    {".mp3", ".flac", ".ogg", ".wav", ".m4a", ".aac", ".wma", ".opus"}
)

INFO_FILE = "info.json"
COVER_FILE = "cover.jpg"


@dataclass(frozen=True)
class Album:
    """Album metadata as shown on an album card."""

    id: str
    title: str
    description: str
    cover_ref: str


class CatalogProvider(Protocol):
    """Anything that can list albums, their tracks and their metadata."""

    def list_albums(self) -> list[str]: ...

    def list_tracks(self, album_id: str) -> list[str]: ...

    def get_album_metadata(self, album_id: str) -> Album: ...

    def track_source(self, album_id: str, filename: str) -> str: ...


def album_from_info(album_id: str, info: object, cover_ref: str) -> Album:
    """Build an :class:`Album` from a decoded ``info.json`` payload."""
    if not isinstance(info, dict):
        raise NotFoundError(f"Info for album '{album_id}' is not an object.")
    return Album(
        id=album_id,
        title=str(info.get("title") or album_id),
        description=str(info.get("description") or ""),
        cover_ref=cover_ref,
    )


def _is_plain_name(name: str) -> bool:
    """True if *name* is a single path component of the host filesystem."""
    if not name or name in (".", ".."):
        return False
    return not any(sep and sep in name for sep in (os.sep, os.altsep))

class MusicLibrary:
    """Read-only view on a folder-based album collection."""

    def __init__(self, basepath: str | Path) -> None:
        self._basepath = Path(basepath)

    @property
    def basepath(self) -> Path:
        return self._basepath

    def list_albums(self) -> list[str]:
        """Return sorted list of album folder names."""
        try:
            entries = list(self._basepath.iterdir())
        except OSError as exc:
            logger.error("Error reading songs directory %s: %s", self._basepath, exc)
            raise FetchError(f"Cannot read music directory '{self._basepath}'.") from exc
        return sorted(entry.name for entry in entries if entry.is_dir())

    def list_tracks(self, album_id: str) -> list[str]:
        """Return sorted list of audio file names in *album_id*."""
        album_path = self.album_path(album_id)
        try:
            entries = list(album_path.iterdir())
        except OSError as exc:
            logger.error("Error reading album folder %s: %s", album_path, exc)
            raise NotFoundError(f"Album '{album_id}' not found.") from exc
        return sorted(
            entry.name
            for entry in entries
            if entry.is_file() and entry.suffix.lower() in AUDIO_EXTENSIONS
        )

    def get_album_metadata(self, album_id: str) -> Album:
        """Read ``info.json`` of *album_id*."""
        info_path = self.album_path(album_id) / INFO_FILE
        try:
            with open(info_path, encoding="utf-8") as f:
                info = json.load(f)
        except (OSError, ValueError) as exc:
            logger.error("Error reading %s: %s", info_path, exc)
            raise NotFoundError(f"Info for album '{album_id}' not found.") from exc
        return album_from_info(album_id, info, str(self.album_path(album_id) / COVER_FILE))

    def track_source(self, album_id: str, filename: str) -> str:
        return str(self.get_track_path(album_id, filename))

    def album_path(self, album_id: str) -> Path:
        """Return the directory of *album_id*, refusing names that escape *basepath*."""
        if not _is_plain_name(album_id):
            raise NotFoundError(f"Album '{album_id}' not found.")
        return self._basepath / album_id

    def get_track_path(self, album_id: str, filename: str) -> Path:
        """Return the full path to a file inside an album."""
        if not _is_plain_name(filename):
            raise NotFoundError(f"Track '{filename}' not found.")
        return self.album_path(album_id) / filename
