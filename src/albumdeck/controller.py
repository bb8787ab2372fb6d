"""Playback controller: applies navigation decisions to the audio device.

The controller owns the :class:`~albumdeck.state.PlayerState` and is the
only writer to the audio device.  Every operation returns an
:class:`~albumdeck.navigation.Outcome`; collaborator failures are caught,
logged, passed to the optional *report* hook and returned as the outcome's
error, leaving the player usable.

Operations
----------
start()                 select the start-up album, load its first track paused
open_album(album)       switch album and play its first track
play_track(index)       play a track of the current album
next() / previous()     explicit navigation
toggle_play()           play/pause button
seek(), seek_fraction() clamped to the track duration
set_volume(), toggle_mute()

Device notifications are wired through ``on_time_update``, ``on_ended`` and
``on_error``.  They arrive one at a time on the caller's thread, as do user
commands, so album switches are applied strictly in event order.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Callable

from albumdeck.errors import CatalogError, PlaybackError, PlayerError
from albumdeck.navigation import NoOp, Outcome, PlayTrack, Trigger, decide
from albumdeck.state import Catalog, PlayerState, Transport, clamp
from albumdeck.titles import format_time, normalize_title

if TYPE_CHECKING:
    from albumdeck.audio import AudioPlayer
    from albumdeck.library import Album

logger = logging.getLogger(__name__)

DEFAULT_ALBUM = "ncs"

# Volume restored when un-muting from zero.
UNMUTE_VOLUME = 0.1


class PlaybackController:
    """Orchestrates the catalog, the navigation engine and the audio device."""

    def __init__(
        self,
        catalog: Catalog,
        audio: AudioPlayer,
        *,
        default_album: str | None = DEFAULT_ALBUM,
        report: Callable[[PlayerError], None] | None = None,
    ) -> None:
        self._catalog = catalog
        self._audio = audio
        self._default_album = default_album
        self._report = report
        self._state = PlayerState()

        self._audio.set_volume(self._state.volume)
        self._audio.set_callbacks(
            on_time_update=self.on_time_update,
            on_ended=self.on_ended,
            on_error=self.on_error,
        )

    # -- public properties ---------------------------------------------------

    @property
    def state(self) -> PlayerState:
        return self._state

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    @property
    def current_album(self) -> Album | None:
        if self._state.album_index is None:
            return None
        try:
            return self._catalog.album(self._state.album_index)
        except CatalogError as exc:
            logger.debug("No metadata for current album: %s", exc)
            return None

    @property
    def current_title(self) -> str | None:
        track = self._state.current_track
        return normalize_title(track) if track is not None else None

    @property
    def time_display(self) -> str:
        return f"{format_time(self._state.current_time)} / {format_time(self._state.duration)}"

    @property
    def progress(self) -> float:
        """Fraction of the loaded track already played, ``0.0`` if unknown."""
        if self._state.duration <= 0:
            return 0.0
        return clamp(self._state.current_time / self._state.duration, 0.0, 1.0)

    # -- album and track selection -------------------------------------------

    def start(self) -> Outcome:
        """Load the catalog and cue the first track of the start-up album."""
        try:
            self._catalog.refresh()
        except CatalogError as exc:
            return self._fail(Outcome(NoOp("catalog unavailable"), error=exc))

        index = self._catalog.initial_album_index(self._default_album)
        if index is None:
            logger.info("Catalog is empty, nothing to play")
            return Outcome(NoOp("catalog is empty"))

        try:
            tracks = self._catalog.tracks(index)
        except CatalogError as exc:
            return self._fail(Outcome(NoOp("album fetch failed"), error=exc))

        self._state.album_index = index
        self._state.track_list = tracks
        if not tracks:
            return Outcome(NoOp("album is empty"))
        return self.apply(PlayTrack(index, 0), autoplay=False)

    def open_album(self, album: int | str) -> Outcome:
        """Switch to *album* (index or identifier) and play its first track."""
        index = album if isinstance(album, int) else self._catalog.index_of(album)
        if index is None or not 0 <= index < len(self._catalog):
            return self._fail(
                Outcome(NoOp("unknown album"), error=CatalogError(f"Unknown album '{album}'."))
            )
        try:
            tracks = self._catalog.tracks(index)
        except CatalogError as exc:
            return self._fail(Outcome(NoOp("album fetch failed"), error=exc))
        if not tracks:
            return Outcome(NoOp("album is empty"))
        return self.apply(PlayTrack(index, 0))

    def play_track(self, track_index: int) -> Outcome:
        """Play the track at *track_index* of the current album."""
        album = self._state.album_index
        if album is None or not 0 <= track_index < len(self._state.track_list):
            return Outcome(NoOp("no such track"))
        return self.apply(PlayTrack(album, track_index))

    # -- navigation ----------------------------------------------------------

    def next(self) -> Outcome:
        return self.handle(Trigger.REQUEST_NEXT)

    def previous(self) -> Outcome:
        return self.handle(Trigger.REQUEST_PREVIOUS)

    def handle(self, trigger: Trigger) -> Outcome:
        """Ask the navigation engine about *trigger* and apply its decision."""
        self._state.loaded_source = self._audio.source
        outcome = decide(self._state, self._catalog, trigger)
        if outcome.error is not None:
            return self._fail(outcome)
        if isinstance(outcome.decision, PlayTrack):
            return self.apply(outcome.decision)
        logger.debug("%s: %s", trigger.name, outcome.decision.reason)
        return outcome

    def apply(self, decision: PlayTrack | NoOp, *, autoplay: bool = True) -> Outcome:
        """Load the track named by *decision* and, if *autoplay*, start it.

        The album switch is committed only once the device accepted the new
        source; a refused load leaves the position untouched.
        """
        if isinstance(decision, NoOp):
            return Outcome(decision)

        album_index = decision.album_index
        try:
            tracks = self._catalog.tracks(album_index)
            source = self._catalog.track_source(
                album_index, tracks[decision.track_index]
            )
        except CatalogError as exc:
            return self._fail(Outcome(NoOp("track unavailable"), error=exc))

        logger.info("Playing song: %s", source)
        try:
            self._audio.load(source)
        except PlaybackError as exc:
            self._state.transport = Transport.STOPPED
            self._state.loaded_source = self._audio.source
            return self._fail(Outcome(NoOp("load failed"), error=exc))

        self._state.album_index = album_index
        self._state.track_list = tracks
        self._state.loaded_source = source
        self._state.current_time = 0.0
        self._state.duration = 0.0
        self._state.transport = Transport.PAUSED

        if autoplay:
            try:
                self._audio.play()
            except PlaybackError as exc:
                self._state.transport = Transport.STOPPED
                return self._fail(Outcome(decision, error=exc))
            self._state.transport = Transport.PLAYING
        return Outcome(decision)

    # -- transport -----------------------------------------------------------

    def toggle_play(self) -> Outcome:
        if self._state.is_playing:
            return self.pause()
        return self.resume()

    def resume(self) -> Outcome:
        if self._audio.source is None:
            return Outcome(NoOp("nothing loaded"))
        try:
            self._audio.play()
        except PlaybackError as exc:
            self._state.transport = Transport.STOPPED
            return self._fail(Outcome(NoOp("play failed"), error=exc))
        self._state.transport = Transport.PLAYING
        return Outcome(NoOp("resumed"))

    def pause(self) -> Outcome:
        if not self._state.is_playing:
            return Outcome(NoOp("not playing"))
        self._audio.pause()
        self._state.transport = Transport.PAUSED
        return Outcome(NoOp("paused"))

    def seek(self, seconds: float) -> float:
        """Seek to *seconds*, clamped to ``[0, duration]``; returns the position."""
        position = clamp(seconds, 0.0, self._state.duration)
        if self._audio.source is not None:
            self._audio.seek(position)
            self._state.current_time = position
        return position

    def seek_fraction(self, fraction: float) -> float:
        """Seek to *fraction* of the duration, as a click on the seek bar does."""
        return self.seek(clamp(fraction, 0.0, 1.0) * self._state.duration)

    def set_volume(self, volume: float) -> float:
        """Set the volume, clamped to ``[0, 1]``; returns the stored value."""
        volume = clamp(volume, 0.0, 1.0)
        self._audio.set_volume(volume)
        self._state.volume = volume
        return volume

    def toggle_mute(self) -> float:
        """Mute to exactly ``0``, or restore ``0.1`` when already silent."""
        if self._state.volume == 0:
            return self.set_volume(UNMUTE_VOLUME)
        return self.set_volume(0.0)

    # -- device notifications ------------------------------------------------

    def on_time_update(self, current_time: float, duration: float) -> None:
        self._state.current_time = 0.0 if math.isnan(current_time) else current_time
        self._state.duration = 0.0 if math.isnan(duration) else duration

    def on_ended(self) -> Outcome:
        return self.handle(Trigger.TRACK_ENDED)

    def on_error(self, detail: str) -> Outcome:
        self._state.transport = Transport.STOPPED
        return self._fail(
            Outcome(NoOp("device error"), error=PlaybackError(f"Failed to play audio: {detail}"))
        )

    # -- internal helpers ----------------------------------------------------

    def _fail(self, outcome: Outcome) -> Outcome:
        logger.warning("%s", outcome.error)
        if self._report is not None and outcome.error is not None:
            self._report(outcome.error)
        return outcome
