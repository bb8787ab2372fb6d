"""HTTP album server: lists albums and tracks and serves their files.

Routes
------
GET /songs/                        JSON list of album identifiers
GET /songs/{album}/                JSON list of track filenames
GET /songs/{album}/info.json       album metadata
GET /songs/{album}/{filename}      cover image or audio file
"""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.responses import FileResponse, JSONResponse

from albumdeck.errors import FetchError, NotFoundError
from albumdeck.library import MusicLibrary

logger = logging.getLogger(__name__)


def create_app(library: MusicLibrary) -> FastAPI:
    app = FastAPI(title="albumdeck")

    @app.get("/songs/")
    def list_albums():
        try:
            return library.list_albums()
        except FetchError:
            return JSONResponse({"error": "Error reading songs directory"}, status_code=500)

    @app.get("/songs/{album}/")
    def list_tracks(album: str):
        try:
            return library.list_tracks(album)
        except NotFoundError:
            return JSONResponse({"error": "Album not found"}, status_code=404)

    @app.get("/songs/{album}/info.json")
    def album_info(album: str):
        try:
            info = library.get_album_metadata(album)
        except NotFoundError:
            return JSONResponse({"error": "Info not found"}, status_code=404)
        return {"title": info.title, "description": info.description}

    @app.get("/songs/{album}/{filename}")
    def album_file(album: str, filename: str):
        try:
            path = library.get_track_path(album, filename)
        except NotFoundError:
            return JSONResponse({"error": "File not found"}, status_code=404)
        if not path.is_file():
            return JSONResponse({"error": "File not found"}, status_code=404)
        return FileResponse(path)

    return app


def run_server(library: MusicLibrary, host: str, port: int) -> None:
    import uvicorn

    logger.info("Server running at http://%s:%d", host, port)
    uvicorn.run(create_app(library), host=host, port=port)
