from __future__ import annotations
import logging
import urllib.parse
from typing import Any, Dict, Optional

import requests

log = logging.getLogger(__name__)


class ApiClientError(Exception):
    def __init__(self, message: str, status: Optional[int] = None, payload: Any = None):
        super().__init__(message)
        self.status = status
        self.payload = payload


def _quote(name: str) -> str:
    return urllib.parse.quote(name, safe="")


class ViewMaxAPI:
    """Thin wrapper over the /api routes; one method per route."""

    def __init__(self, base_url: str = "http://localhost:3000", session: Optional[requests.Session] = None,
                 timeout: float = 15):
        self.base_url = base_url.rstrip("/")
        self.api_url = f"{self.base_url}/api"
        self.session = session or requests.Session()
        self.timeout = timeout

    def fetch(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> dict:
        url = f"{self.api_url}{endpoint}"
        try:
            r = self.session.get(url, params=params or None, timeout=self.timeout)
        except requests.RequestException as e:
            log.error("API request to %s failed: %s", url, e)
            raise ApiClientError(str(e)) from e
        try:
            payload = r.json()
        except ValueError:
            payload = None
        if not r.ok:
            raise ApiClientError(f"HTTP error! status: {r.status_code}", r.status_code, payload)
        return payload

    def get_movies(self, **params) -> dict:
        return self.fetch("/movies", params)

    def get_movie(self, name: str) -> dict:
        return self.fetch(f"/movies/{_quote(name)}")

    def get_series(self, **params) -> dict:
        return self.fetch("/series", params)

    def get_series_info(self, name: str) -> dict:
        return self.fetch(f"/series/{_quote(name)}")

    def get_episodes(self, series_name: str, **params) -> dict:
        return self.fetch(f"/series/{_quote(series_name)}/episodes", params)

    def search(self, query: str, **params) -> dict:
        return self.fetch("/search", {"q": query, **params})

    def get_iframe_sources(self, title: str, **params) -> dict:
        return self.fetch("/iframe", {"title": title, **params})

    def get_trending(self, **params) -> dict:
        return self.fetch("/trending", params)

    def get_stats(self) -> dict:
        return self.fetch("/stats")

    def get_genres(self) -> dict:
        return self.fetch("/genres")

    def health_check(self) -> dict:
        return self.fetch("/health")
