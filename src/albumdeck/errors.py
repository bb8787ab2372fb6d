"""Exceptions shared by the catalog, navigation and playback layers.

Every failure a collaborator can report derives from :class:`PlayerError`.
The navigation engine and the playback controller catch these and hand
them back as reportable errors; anything else is a bug and propagates.
"""

from __future__ import annotations


class PlayerError(Exception):
    """Base class for all reportable, non-fatal player failures."""


class CatalogError(PlayerError):
    """The catalog provider could not deliver what was asked for."""


class FetchError(CatalogError):
    """Transport or status failure while reaching the catalog provider."""


class NotFoundError(CatalogError):
    """The requested album, track list or metadata does not exist."""


class PlaybackError(PlayerError):
    """The audio device refused to load or play a resolved source."""
