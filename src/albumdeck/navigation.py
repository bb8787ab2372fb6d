"""Navigation engine: decides which track plays next.

Triggers
--------
- REQUEST_NEXT     : the user pressed "next".
- REQUEST_PREVIOUS : the user pressed "previous".
- TRACK_ENDED      : the audio device finished the loaded track.

Rules
-----
The active track position ``i`` is resolved by matching the filename of the
device's loaded source against the current track list (``-1`` if absent).

REQUEST_NEXT / TRACK_ENDED:
    i + 1 < len(tracks)            → PlayTrack(album, i + 1)
    album + 1 < len(catalog)       → PlayTrack(album + 1, 0)   (fetches tracks)
    otherwise                      → NoOp

REQUEST_PREVIOUS:
    i - 1 >= 0                     → PlayTrack(album, i - 1)
    i == 0 and album - 1 >= 0      → PlayTrack(album - 1, last) (fetches tracks)
    otherwise                      → NoOp

Entering an album whose track list is empty, or cannot be fetched, yields
NoOp.  A failed fetch is returned alongside the NoOp as a reportable error.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto

from albumdeck.errors import CatalogError, PlayerError
from albumdeck.state import Catalog, PlayerState

logger = logging.getLogger(__name__)


class Trigger(Enum):
    REQUEST_NEXT = auto()
    REQUEST_PREVIOUS = auto()
    TRACK_ENDED = auto()


@dataclass(frozen=True)
class PlayTrack:
    album_index: int
    track_index: int


@dataclass(frozen=True)
class NoOp:
    reason: str = ""


Decision = PlayTrack | NoOp


@dataclass(frozen=True)
class Outcome:
    """A decision together with the error that caused it, if any."""

    decision: Decision
    error: PlayerError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _enter_album(catalog: Catalog, album_index: int, *, last: bool) -> Outcome:
    try:
        tracks = catalog.tracks(album_index)
    except CatalogError as exc:
        logger.warning(
            "Cannot switch to album %s: %s", catalog.album_ids[album_index], exc
        )
        return Outcome(NoOp("album fetch failed"), error=exc)
    if not tracks:
        return Outcome(NoOp("album is empty"))
    return Outcome(PlayTrack(album_index, len(tracks) - 1 if last else 0))


def decide(state: PlayerState, catalog: Catalog, trigger: Trigger) -> Outcome:
    """Return the :class:`Outcome` of *trigger* given *state* and *catalog*.

    Only reads *state*; the caller applies the decision.
    """
    album = state.album_index
    if album is None or not 0 <= album < len(catalog):
        return Outcome(NoOp("no album selected"))

    i = state.track_index

    if trigger is Trigger.REQUEST_PREVIOUS:
        if i - 1 >= 0:
            return Outcome(PlayTrack(album, i - 1))
        if i == 0 and album - 1 >= 0:
            return _enter_album(catalog, album - 1, last=True)
        return Outcome(NoOp("first track of first album"))

    if i + 1 < len(state.track_list):
        return Outcome(PlayTrack(album, i + 1))
    if album + 1 < len(catalog):
        return _enter_album(catalog, album + 1, last=False)
    if trigger is Trigger.TRACK_ENDED:
        logger.info("All albums and songs finished.")
        return Outcome(NoOp("catalog exhausted"))
    return Outcome(NoOp("last track of last album"))
