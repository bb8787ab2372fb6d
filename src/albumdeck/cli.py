"""Simple interactive CLI for the albumdeck player."""

from __future__ import annotations

import argparse
import logging
import queue
import sys
import threading

from albumdeck.config import DEFAULT_CONFIG_PATH, load_config
from albumdeck.controller import PlaybackController
from albumdeck.errors import PlayerError
from albumdeck.library import MusicLibrary
from albumdeck.state import Catalog
from albumdeck.titles import normalize_title

HELP = (
    "Available commands: albums, open <album>, tracks, play [n], pause, "
    "next, prev, seek <sec>, volume <0-1>, mute, status, quit"
)


def _print_error(exc: PlayerError) -> None:
    print(f"  Error: {exc}")


def _print_status(player: PlaybackController) -> None:
    album = player.current_album
    print(
        f"  [{player.state.transport.name}]"
        f"  album: {album.title if album else '–'}"
        f"  title: {player.current_title or '–'}"
        f"  {player.time_display}"
        f"  vol: {player.state.volume:.2f}"
    )


def _print_albums(player: PlaybackController) -> None:
    for index, album in enumerate(player.catalog.albums()):
        marker = "*" if index == player.state.album_index else " "
        print(f" {marker}{index:3d}  {album.title}  ({album.id})")
        if album.description:
            print(f"        {album.description}")


def _print_tracks(player: PlaybackController) -> None:
    current = player.state.track_index
    for index, track in enumerate(player.state.track_list):
        marker = "*" if index == current else " "
        print(f" {marker}{index:3d}  {normalize_title(track)}")


def _start_input_thread() -> queue.Queue[str | None]:
    """Read commands on a daemon thread; ``None`` marks end of input.

    The main loop keeps pumping audio events while waiting for a line.
    """
    lines: queue.Queue[str | None] = queue.Queue()

    def _read() -> None:
        while True:
            try:
                line = input("albumdeck> ")
            except (EOFError, KeyboardInterrupt):
                lines.put(None)
                return
            lines.put(line)

    threading.Thread(target=_read, daemon=True).start()
    return lines


def _album_arg(arg: str) -> int | str:
    return int(arg) if arg.isdigit() else arg


def _dispatch(player: PlaybackController, cmd: str, arg: str | None) -> None:
    if cmd == "albums":
        _print_albums(player)
    elif cmd == "open":
        if arg is None:
            raise ValueError("open requires an album index or name.")
        player.open_album(_album_arg(arg))
        _print_status(player)
    elif cmd == "tracks":
        _print_tracks(player)
    elif cmd == "play":
        if arg is None:
            player.resume()
        else:
            player.play_track(int(arg))
        _print_status(player)
    elif cmd in ("pause", "toggle"):
        player.toggle_play()
        _print_status(player)
    elif cmd == "next":
        player.next()
        _print_status(player)
    elif cmd == "prev":
        player.previous()
        _print_status(player)
    elif cmd == "seek":
        if arg is None:
            raise ValueError("seek requires a position in seconds.")
        player.seek(float(arg))
        _print_status(player)
    elif cmd == "volume":
        if arg is None:
            raise ValueError("volume requires a value between 0 and 1.")
        player.set_volume(float(arg))
        _print_status(player)
    elif cmd == "mute":
        player.toggle_mute()
        _print_status(player)
    elif cmd == "status":
        _print_status(player)
    elif cmd == "help":
        print(HELP)
    else:
        print(f"  Unknown command: {cmd}")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        description="albumdeck – a folder-based album player",
    )
    parser.add_argument(
        "--config",
        default=str(DEFAULT_CONFIG_PATH),
        help=f"Path to TOML config file (default: {DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument(
        "--music-dir",
        default=None,
        help="Base path to the album folders",
    )
    parser.add_argument(
        "--catalog-url",
        default=None,
        help="Base URL of an albumdeck server to play from instead of --music-dir",
    )
    parser.add_argument(
        "--default-album",
        default=None,
        help="Album to cue at start-up",
    )
    parser.add_argument(
        "--serve",
        action="store_true",
        help="Serve the music directory over HTTP instead of playing",
    )
    parser.add_argument("--host", default=None, help="Server bind address")
    parser.add_argument("--port", type=int, default=None, help="Server port")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Load config file (silently skip if not found)
    cfg = load_config(args.config)

    # CLI flags override config values (only when explicitly provided)
    music_dir = args.music_dir if args.music_dir is not None else cfg.music_dir
    catalog_url = args.catalog_url if args.catalog_url is not None else cfg.catalog_url
    default_album = (
        args.default_album if args.default_album is not None else cfg.default_album
    )
    host = args.host if args.host is not None else cfg.host
    port = args.port if args.port is not None else cfg.port

    if args.serve:
        from albumdeck.server import run_server

        run_server(MusicLibrary(music_dir), host, port)
        return

    if catalog_url:
        from albumdeck.remote import HttpCatalog

        provider = HttpCatalog(catalog_url)
    else:
        provider = MusicLibrary(music_dir)

    from albumdeck.audio import AudioPlayer

    audio = AudioPlayer()
    player = PlaybackController(
        Catalog(provider),
        audio,
        default_album=default_album,
        report=_print_error,
    )

    player.start()
    if not len(player.catalog):
        print(f"No albums found in {catalog_url or music_dir}")
        audio.close()
        sys.exit(1)

    print("albumdeck – interactive mode")
    print(HELP)
    print()
    _print_status(player)

    lines = _start_input_thread()
    try:
        while True:
            audio.check_events()
            try:
                raw = lines.get(timeout=0.1)
            except queue.Empty:
                continue
            except KeyboardInterrupt:
                print()
                break

            if raw is None:
                print()
                break
            raw = raw.strip()
            if not raw:
                continue

            parts = raw.split(maxsplit=1)
            cmd = parts[0].lower()
            arg = parts[1] if len(parts) > 1 else None

            if cmd == "quit":
                break
            try:
                _dispatch(player, cmd, arg)
            except ValueError as exc:
                print(f"  Error: {exc}")
    finally:
        audio.close()


if __name__ == "__main__":
    main()
