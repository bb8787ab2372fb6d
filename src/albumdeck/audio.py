"""Audio playback backend using sounddevice and soundfile.

Uses ALSA directly via PortAudio — no PulseAudio dependency.  Sources are
local paths or ``http(s)://`` URLs; remote files are downloaded to a
temporary file before decoding.

Device notifications (time updates, end of track, errors) are produced on
the playback thread but only delivered from :meth:`AudioPlayer.check_events`,
so every callback runs on the caller's thread.
"""

from __future__ import annotations

import logging
import os
import queue
import tempfile
import threading
from pathlib import Path
from typing import Callable

import requests
import sounddevice as sd
import soundfile as sf

from albumdeck.errors import PlaybackError

logger = logging.getLogger(__name__)

# Number of frames to read per chunk during streaming playback.
_BLOCK_SIZE = 2048

# Seconds of audio between two time-update notifications.
_TIME_UPDATE_INTERVAL = 0.25


class AudioPlayer:
    """Streams one loaded source at a time through ALSA via sounddevice."""

    def __init__(self) -> None:
        self._on_time_update: Callable[[float, float], None] | None = None
        self._on_ended: Callable[[], None] | None = None
        self._on_error: Callable[[str], None] | None = None
        self._events: queue.Queue[tuple] = queue.Queue()
        self._paused = threading.Event()
        self._stop_event = threading.Event()
        self._playback_thread: threading.Thread | None = None
        self._source: str | None = None
        self._path: Path | None = None
        self._tempfile: Path | None = None
        self._samplerate = 0
        self._frames = 0
        self._position = 0
        self._seek_to: int | None = None
        self._volume = 1.0
        # Bumped on every load so stale notifications can be dropped.
        self._generation = 0

    # -- properties ----------------------------------------------------------

    @property
    def source(self) -> str | None:
        return self._source

    @property
    def duration(self) -> float:
        if not self._samplerate:
            return 0.0
        return self._frames / self._samplerate

    @property
    def current_time(self) -> float:
        if not self._samplerate:
            return 0.0
        return self._position / self._samplerate

    @property
    def volume(self) -> float:
        return self._volume

    @property
    def paused(self) -> bool:
        return not (self._is_streaming() and self._paused.is_set())

    # -- playback controls ---------------------------------------------------

    def load(self, source: str) -> None:
        """Replace whatever is loaded with *source*, positioned at the start."""
        self.stop()
        self._generation += 1
        self._discard_tempfile()
        self._source = source
        self._path = None
        self._samplerate = 0
        self._frames = 0
        self._position = 0
        self._seek_to = None

        try:
            path = self._resolve(source)
            info = sf.info(str(path))
        except (OSError, RuntimeError, requests.RequestException) as exc:
            raise PlaybackError(f"Failed to load audio: {source} ({exc})") from exc
        self._path = path
        self._samplerate = info.samplerate
        self._frames = info.frames

    def play(self) -> None:
        """Start or resume playback of the loaded source."""
        if self._path is None:
            raise PlaybackError("No source loaded.")
        if self._is_streaming():
            self._paused.set()
            return
        if self._frames and self._position >= self._frames:
            self._position = 0
        self._stop_event.clear()
        self._paused.set()
        self._playback_thread = threading.Thread(
            target=self._stream_file,
            args=(self._path, self._position, self._generation),
            daemon=True,
        )
        self._playback_thread.start()

    def pause(self) -> None:
        """Pause the currently playing source."""
        self._paused.clear()

    def seek(self, seconds: float) -> None:
        """Move the play position to *seconds* from the start."""
        frame = int(max(0.0, seconds) * self._samplerate)
        if self._frames:
            frame = min(frame, self._frames)
        if self._is_streaming():
            self._seek_to = frame
        self._position = frame

    def set_volume(self, volume: float) -> None:
        """Set the gain applied to every block, ``0.0`` to ``1.0``."""
        self._volume = volume

    def stop(self) -> None:
        """Stop playback entirely."""
        self._stop_event.set()
        self._paused.set()  # unblock the thread if it is waiting on pause
        if self._playback_thread is not None:
            self._playback_thread.join(timeout=2.0)
            self._playback_thread = None

    def close(self) -> None:
        self.stop()
        self._discard_tempfile()

    # -- notifications -------------------------------------------------------

    def set_callbacks(
        self,
        *,
        on_time_update: Callable[[float, float], None] | None = None,
        on_ended: Callable[[], None] | None = None,
        on_error: Callable[[str], None] | None = None,
    ) -> None:
        """Register the handlers invoked by :meth:`check_events`."""
        self._on_time_update = on_time_update
        self._on_ended = on_ended
        self._on_error = on_error

    def check_events(self) -> None:
        """Deliver queued notifications for the currently loaded source.

        Must be called periodically (e.g. from the main loop).
        """
        while True:
            try:
                generation, kind, *args = self._events.get_nowait()
            except queue.Empty:
                return
            if generation != self._generation:
                continue
            if kind == "time" and self._on_time_update is not None:
                self._on_time_update(*args)
            elif kind == "ended" and self._on_ended is not None:
                self._on_ended()
            elif kind == "error" and self._on_error is not None:
                self._on_error(*args)

    # -- internal ------------------------------------------------------------

    def _is_streaming(self) -> bool:
        return self._playback_thread is not None and self._playback_thread.is_alive()

    def _resolve(self, source: str) -> Path:
        if not source.startswith(("http://", "https://")):
            return Path(source)
        suffix = Path(source.rsplit("/", 1)[-1]).suffix
        fd, name = tempfile.mkstemp(prefix="albumdeck-", suffix=suffix)
        self._tempfile = Path(name)
        logger.debug("Downloading %s to %s", source, name)
        with os.fdopen(fd, "wb") as out:
            with requests.get(source, stream=True, timeout=30) as r:
                r.raise_for_status()
                for chunk in r.iter_content(chunk_size=64 * 1024):
                    out.write(chunk)
        return self._tempfile

    def _discard_tempfile(self) -> None:
        if self._tempfile is not None:
            self._tempfile.unlink(missing_ok=True)
            self._tempfile = None

    def _stream_file(self, file_path: Path, start: int, generation: int) -> None:
        """Worker that streams *file_path* through an ALSA output stream."""
        interval = int(self._samplerate * _TIME_UPDATE_INTERVAL) or _BLOCK_SIZE
        last_update = start - interval
        try:
            with sf.SoundFile(str(file_path)) as f:
                f.seek(start)
                stream = sd.OutputStream(
                    samplerate=f.samplerate,
                    channels=f.channels,
                    dtype="float32",
                )
                stream.start()
                try:
                    while True:
                        self._paused.wait()
                        if self._stop_event.is_set():
                            return
                        target, self._seek_to = self._seek_to, None
                        if target is not None:
                            f.seek(target)
                        data = f.read(_BLOCK_SIZE, dtype="float32")
                        if len(data) == 0:
                            break
                        stream.write(data * self._volume)
                        self._position = f.tell()
                        if abs(self._position - last_update) >= interval:
                            last_update = self._position
                            self._events.put(
                                (generation, "time", self.current_time, self.duration)
                            )
                finally:
                    stream.stop()
                    stream.close()
        except Exception as exc:
            logger.error("Audio: playback error: %s", exc)
            self._events.put((generation, "error", str(exc)))
            return

        # Only signal track-end when playback finished naturally.
        if not self._stop_event.is_set():
            self._events.put((generation, "time", self.duration, self.duration))
            self._events.put((generation, "ended"))
