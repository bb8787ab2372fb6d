"""Load albumdeck configuration from a TOML file."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path

DEFAULT_CONFIG_PATH = Path("/etc/albumdeck.toml")


@dataclass
class Config:
    """Albumdeck configuration."""

    music_dir: str = "public/songs"
    default_album: str | None = "ncs"
    catalog_url: str | None = None
    host: str = "127.0.0.1"
    port: int = 3000


def load_config(path: Path | str) -> Config:
    """Load configuration from a TOML file.

    Returns a :class:`Config` with defaults for any missing keys.
    If the file does not exist, returns a default :class:`Config`.
    """
    path = Path(path)
    if not path.is_file():
        return Config()

    with open(path, "rb") as f:
        data = tomllib.load(f)

    server = data.get("server", {})

    return Config(
        music_dir=data.get("music-dir", Config.music_dir),
        default_album=data.get("default-album", Config.default_album),
        catalog_url=data.get("catalog-url"),
        host=server.get("host", Config.host),
        port=int(server.get("port", Config.port)),
    )
