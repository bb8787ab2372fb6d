"""Tests for albumdeck.config."""

from __future__ import annotations

from pathlib import Path

from albumdeck.config import Config, load_config


def test_load_config_missing_file_returns_defaults(tmp_path: Path) -> None:
    cfg = load_config(tmp_path / "nonexistent.toml")
    assert cfg == Config()


def test_load_config_empty_file(tmp_path: Path) -> None:
    p = tmp_path / "empty.toml"
    p.write_text("")
    cfg = load_config(p)
    assert cfg == Config()


def test_load_config_full(tmp_path: Path) -> None:
    p = tmp_path / "albumdeck.toml"
    p.write_text(
        'music-dir = "/srv/songs"\n'
        'default-album = "lofi"\n'
        'catalog-url = "http://jukebox:3000"\n'
        "\n"
        "[server]\n"
        'host = "0.0.0.0"\n'
        "port = 8080\n"
    )
    cfg = load_config(p)
    assert cfg.music_dir == "/srv/songs"
    assert cfg.default_album == "lofi"
    assert cfg.catalog_url == "http://jukebox:3000"
    assert cfg.host == "0.0.0.0"
    assert cfg.port == 8080


def test_load_config_partial(tmp_path: Path) -> None:
    p = tmp_path / "albumdeck.toml"
    p.write_text('music-dir = "/data/music"\n')
    cfg = load_config(p)
    assert cfg.music_dir == "/data/music"
    assert cfg.default_album == "ncs"
    assert cfg.catalog_url is None
    assert cfg.port == 3000


def test_load_config_server_partial(tmp_path: Path) -> None:
    p = tmp_path / "albumdeck.toml"
    p.write_text("[server]\nport = 9000\n")
    cfg = load_config(p)
    assert cfg.port == 9000
    assert cfg.host == "127.0.0.1"
