"""Catalog provider talking to an ``albumdeck --serve`` instance over HTTP."""

from __future__ import annotations

import logging
from urllib.parse import quote

import requests

from albumdeck.errors import FetchError, NotFoundError
from albumdeck.library import COVER_FILE, INFO_FILE, Album, album_from_info

logger = logging.getLogger(__name__)

USER_AGENT = "albumdeck/0.1"


class HttpCatalog:
    """Remote counterpart of :class:`~albumdeck.library.MusicLibrary`."""

    def __init__(self, base_url: str, *, timeout: float = 15.0) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = requests.Session()
        self._session.headers.update(
            {"accept": "application/json", "user-agent": USER_AGENT}
        )

    def _url(self, *parts: str) -> str:
        path = "/".join(quote(p, safe="") for p in parts)
        return f"{self.base_url}/songs/{path}"

    def _get_json(self, url: str) -> object:
        logger.debug("GET %s", url)
        try:
            r = self._session.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            raise FetchError(f"Failed to reach {url}: {exc}") from exc

        if r.status_code == 404:
            raise NotFoundError(f"Not found: {url}")
        try:
            r.raise_for_status()
        except requests.HTTPError as exc:
            raise FetchError(f"Failed to fetch {url}: {r.status_code}") from exc

        try:
            return r.json()
        except ValueError as exc:
            raise FetchError(f"Invalid response from {url}") from exc

    def _get_names(self, url: str) -> list[str]:
        data = self._get_json(url)
        if not isinstance(data, list):
            raise FetchError(f"Expected a list from {url}")
        return [str(name) for name in data]

    def list_albums(self) -> list[str]:
        return self._get_names(f"{self.base_url}/songs/")

    def list_tracks(self, album_id: str) -> list[str]:
        return self._get_names(self._url(album_id) + "/")

    def get_album_metadata(self, album_id: str) -> Album:
        info = self._get_json(self._url(album_id, INFO_FILE))
        return album_from_info(album_id, info, self._url(album_id, COVER_FILE))

    def track_source(self, album_id: str, filename: str) -> str:
        return self._url(album_id, filename)
