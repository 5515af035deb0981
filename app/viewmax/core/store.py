from __future__ import annotations
import json
import logging
from typing import List

from .models import Title

log = logging.getLogger(__name__)


class ContentStore:
    """Flat-file collections, re-read on every call.

    A missing or corrupt file yields an empty collection; invalid records
    are skipped.
    """

    def __init__(self, movies_path: str, series_path: str):
        self.movies_path = movies_path
        self.series_path = series_path

    @classmethod
    def from_config(cls, config) -> "ContentStore":
        return cls(config.data.movies_path, config.data.series_path)

    def movies(self) -> List[Title]:
        return self._load(self.movies_path, is_series=False)

    def series(self) -> List[Title]:
        return self._load(self.series_path, is_series=True)

    def _read(self, path: str) -> list:
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            log.error("Error reading %s: %s", path, e)
            return []
        if not isinstance(data, list):
            log.error("Error reading %s: top level is %s, not a list", path, type(data).__name__)
            return []
        return data

    def _load(self, path: str, is_series: bool) -> List[Title]:
        titles = []
        for i, raw in enumerate(self._read(path)):
            try:
                titles.append(Title.from_dict(raw, is_series=is_series))
            except ValueError as e:
                log.warning("Skipping record %d in %s: %s", i, path, e)
        return titles
