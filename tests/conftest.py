"""Shared fixtures: a small album folder tree on disk."""

from __future__ import annotations

import json

import pytest


@pytest.fixture()
def music_dir(tmp_path):
    """Create the ``ncs``/``lofi`` music library used across the tests."""
    ncs = tmp_path / "ncs"
    ncs.mkdir()
    (ncs / "a.mp3").touch()
    (ncs / "b.mp3").touch()
    (ncs / "cover.jpg").write_bytes(b"jpeg")
    (ncs / "info.json").write_text(
        json.dumps({"title": "NCS", "description": "No copyright sounds"})
    )

    lofi = tmp_path / "lofi"
    lofi.mkdir()
    (lofi / "c.mp3").touch()
    (lofi / "info.json").write_text(json.dumps({"title": "Lofi"}))

    return tmp_path
