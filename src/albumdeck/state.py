"""Session state: the album catalog and the player's position in it.

Catalog
-------
Ordered album identifiers exactly as the provider returned them, plus two
lazily filled caches: album metadata and per-album track lists.  Nothing is
mutated in place; :meth:`Catalog.refresh` replaces everything at once.

PlayerState
-----------
- album_index   : int | None  – index of the active album in the catalog.
- track_list    : list[str]   – track filenames of that album.
- loaded_source : str | None  – source reference currently loaded into the
  audio device.  The active track index is always derived from it.
- transport     : Transport   – stopped, paused or playing.
- volume, current_time, duration.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import PurePath
from urllib.parse import unquote, urlsplit

from albumdeck.errors import CatalogError
from albumdeck.library import Album, CatalogProvider

logger = logging.getLogger(__name__)

DEFAULT_VOLUME = 1.0


def clamp(value: float, low: float, high: float) -> float:
    """Clamp *value* into ``[low, high]``; NaN collapses to *low*."""
    if math.isnan(value):
        return low
    return max(low, min(high, value))


def source_filename(source: str) -> str:
    """Return the decoded filename at the end of a path or URL *source*."""
    if "://" in source:
        return unquote(urlsplit(source).path.rsplit("/", 1)[-1])
    return PurePath(source).name


class Catalog:
    """Ordered albums from a :class:`CatalogProvider`, cached for the session."""

    def __init__(self, provider: CatalogProvider) -> None:
        self._provider = provider
        self._album_ids: tuple[str, ...] = ()
        self._albums: dict[str, Album] = {}
        self._tracks: dict[str, tuple[str, ...]] = {}

    @property
    def album_ids(self) -> tuple[str, ...]:
        return self._album_ids

    def __len__(self) -> int:
        return len(self._album_ids)

    def refresh(self) -> None:
        """Reload the album list, dropping every cached album and track list.

        Raises :class:`~albumdeck.errors.CatalogError` and keeps the old
        contents if the provider fails.
        """
        album_ids = tuple(self._provider.list_albums())
        self._album_ids = album_ids
        self._albums = {}
        self._tracks = {}
        logger.info("Catalog loaded with %d albums", len(album_ids))

    def index_of(self, album_id: str) -> int | None:
        try:
            return self._album_ids.index(album_id)
        except ValueError:
            return None

    def initial_album_index(self, default_album: str | None) -> int | None:
        """Pick the start-up album: *default_album* if present, else the first."""
        if not self._album_ids:
            return None
        if default_album is not None:
            index = self.index_of(default_album)
            if index is not None:
                return index
        return 0

    def album(self, index: int) -> Album:
        """Metadata of the album at *index*, fetched once and cached."""
        album_id = self._album_ids[index]
        album = self._albums.get(album_id)
        if album is None:
            album = self._provider.get_album_metadata(album_id)
            self._albums[album_id] = album
        return album

    def albums(self) -> list[Album]:
        """Metadata for every album, in catalog order.

        Albums whose metadata cannot be loaded are still listed, with their
        identifier as title, so that navigation order is unaffected.
        """
        result = []
        for index, album_id in enumerate(self._album_ids):
            try:
                result.append(self.album(index))
            except CatalogError as exc:
                logger.warning("Error loading info for album %s: %s", album_id, exc)
                result.append(Album(id=album_id, title=album_id, description="", cover_ref=""))
        return result

    def cached_tracks(self, index: int) -> tuple[str, ...] | None:
        return self._tracks.get(self._album_ids[index])

    def tracks(self, index: int) -> tuple[str, ...]:
        """Track filenames of the album at *index*.

        The provider is asked at most once per album; failures are not cached.
        """
        album_id = self._album_ids[index]
        tracks = self._tracks.get(album_id)
        if tracks is None:
            tracks = tuple(self._provider.list_tracks(album_id))
            self._tracks[album_id] = tracks
            logger.debug("Fetched %d tracks for album %s", len(tracks), album_id)
        return tracks

    def track_source(self, index: int, filename: str) -> str:
        return self._provider.track_source(self._album_ids[index], filename)


class Transport(Enum):
    STOPPED = auto()
    PAUSED = auto()
    PLAYING = auto()


@dataclass
class PlayerState:
    """Mutable playback position, owned by the playback controller."""

    album_index: int | None = None
    track_list: tuple[str, ...] = ()
    loaded_source: str | None = None
    transport: Transport = Transport.STOPPED
    volume: float = DEFAULT_VOLUME
    current_time: float = 0.0
    duration: float = 0.0

    @property
    def is_playing(self) -> bool:
        return self.transport is Transport.PLAYING

    @property
    def current_track(self) -> str | None:
        if self.loaded_source is None:
            return None
        return source_filename(self.loaded_source)

    @property
    def track_index(self) -> int:
        """Position of the loaded track in :attr:`track_list`, or ``-1``."""
        filename = self.current_track
        if filename is None:
            return -1
        try:
            return self.track_list.index(filename)
        except ValueError:
            return -1
