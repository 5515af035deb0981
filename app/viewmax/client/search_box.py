from __future__ import annotations
import logging
import threading
import urllib.parse
from typing import Callable, List, Optional

from .api import ApiClientError, ViewMaxAPI
from .templates import render
from .storage import CURRENT_MOVIE, CURRENT_SERIES, LastViewed

log = logging.getLogger(__name__)


class Debouncer:
    """Runs only the last call made within ``delay`` seconds."""

    def __init__(self, delay: float = 0.3):
        self.delay = delay
        self._timer: Optional[threading.Timer] = None
        self._pending: Optional[Callable[[], None]] = None
        self._lock = threading.Lock()

    def call(self, fn: Callable, *args) -> None:
        with self._lock:
            self._cancel()
            self._pending = lambda: fn(*args)
            self._timer = threading.Timer(self.delay, self._fire)
            self._timer.daemon = True
            self._timer.start()

    def cancel(self) -> None:
        with self._lock:
            self._cancel()

    def flush(self) -> None:
        """Run the pending call now instead of waiting for the timer."""
        with self._lock:
            pending = self._pending
            self._cancel()
        if pending:
            pending()

    def _cancel(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
        self._timer = None
        self._pending = None

    def _fire(self) -> None:
        with self._lock:
            pending = self._pending
            self._timer = None
            self._pending = None
        if not pending:
            return
        # runs on the timer thread
        try:
            pending()
        except Exception:
            log.exception("Debounced call failed")


def player_url(name: str, kind: str) -> str:
    if kind == "movie":
        return f"player.html?movie={urllib.parse.quote(name)}"
    return f"Seriesplayer.html?series={urllib.parse.quote(name)}"


class SearchBox:
    """Autocomplete box backed by the universal search route."""

    def __init__(self, api: ViewMaxAPI, last_viewed: LastViewed, delay: float = 0.3,
                 min_length: int = 2, limit: int = 8):
        self.api = api
        self.last_viewed = last_viewed
        self.min_length = min_length
        self.limit = limit
        self.debouncer = Debouncer(delay)
        self._lock = threading.Lock()
        self.results: List[dict] = []
        self.dropdown = ""
        self.visible = False

    def on_input(self, text: str) -> None:
        query = text.strip()
        if len(query) < self.min_length:
            self.debouncer.cancel()
            self.hide()
            return
        self.debouncer.call(self.show_suggestions, query)

    def show_suggestions(self, query: str) -> None:
        try:
            resp = self.api.search(query, limit=self.limit)
        except ApiClientError as e:
            log.error("Search error: %s", e)
            return
        if resp and resp.get("success"):
            self.display(resp.get("data") or [])

    def display(self, results: List[dict]) -> None:
        dropdown = render("dropdown.html", results=results)
        with self._lock:
            self.results = results
            self.dropdown = dropdown
            self.visible = True

    def hide(self) -> None:
        with self._lock:
            self.visible = False

    def select_item(self, name: str, kind: str) -> str:
        self.last_viewed.set(CURRENT_MOVIE if kind == "movie" else CURRENT_SERIES, name)
        self.hide()
        return player_url(name, kind)
