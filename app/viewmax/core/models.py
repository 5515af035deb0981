"""
Record schema for the movie and series collections.

Raw JSON records are validated into dataclasses with explicit defaults:
- name is required and is the only identity key
- rating is kept as the string stored in the file ("0" when absent)
- episodes only exist on series
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

log = logging.getLogger(__name__)

SOURCE_KEYS = ("source1", "source2", "source3")
SOURCE_SLOTS = {
    "primary": "source1",
    "secondary": "source2",
    "tertiary": "source3",
}


def _text(value: Any, default: str = "") -> str:
    if value is None:
        return default
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    raise ValueError(f"expected a string, got {type(value).__name__}")


def _whole(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{name} must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    raise ValueError(f"{name} must be an integer")


@dataclass
class Sources:
    source1: Optional[str] = None
    source2: Optional[str] = None
    source3: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Any) -> "Sources":
        if not raw:
            return cls()
        if not isinstance(raw, dict):
            raise ValueError("sources must be a mapping")
        return cls(**{k: (_text(raw.get(k)) or None) for k in SOURCE_KEYS})

    def available(self) -> List[str]:
        return [k for k in SOURCE_KEYS if getattr(self, k)]

    def pick(self, selector: Optional[str] = "primary") -> Optional[str]:
        """Return the URL for a source slot, falling back to source1."""
        key = SOURCE_SLOTS.get(selector or "", "source1")
        return getattr(self, key) or self.source1

    def __bool__(self) -> bool:
        return bool(self.available())

    def to_dict(self) -> Dict[str, str]:
        return {k: getattr(self, k) for k in self.available()}


@dataclass
class Episode:
    season: int
    episode: int
    title: str = ""
    sources: Sources = field(default_factory=Sources)

    @classmethod
    def from_dict(cls, raw: Any) -> "Episode":
        if not isinstance(raw, dict):
            raise ValueError("episode must be a mapping")
        return cls(
            season=_whole(raw.get("season"), "season"),
            episode=_whole(raw.get("episode"), "episode"),
            title=_text(raw.get("title")),
            sources=Sources.from_dict(raw.get("sources")),
        )

    def to_dict(self) -> dict:
        return {
            "season": self.season,
            "episode": self.episode,
            "title": self.title,
            "sources": self.sources.to_dict(),
        }


@dataclass
class Title:
    """A movie or series record."""
    name: str
    genre: str = ""
    description: str = ""
    rating: str = "0"
    releaseDate: str = ""
    image: str = ""
    sources: Sources = field(default_factory=Sources)
    episodes: List[Episode] = field(default_factory=list)
    is_series: bool = False

    @classmethod
    def from_dict(cls, raw: Any, is_series: bool = False) -> "Title":
        if not isinstance(raw, dict):
            raise ValueError("record must be a mapping")
        name = _text(raw.get("name")).strip()
        if not name:
            raise ValueError("record has no name")

        episodes = []
        if is_series:
            raw_eps = raw.get("episodes") or []
            if not isinstance(raw_eps, list):
                raise ValueError(f"{name}: episodes must be a list")
            for i, raw_ep in enumerate(raw_eps):
                try:
                    episodes.append(Episode.from_dict(raw_ep))
                except ValueError as e:
                    log.warning("%s: skipping episode %d: %s", name, i, e)

        return cls(
            name=name,
            genre=_text(raw.get("genre")),
            description=_text(raw.get("description")),
            rating=_text(raw.get("rating"), "0") or "0",
            releaseDate=_text(raw.get("releaseDate")),
            image=_text(raw.get("image")),
            sources=Sources.from_dict(raw.get("sources")),
            episodes=episodes,
            is_series=is_series,
        )

    @property
    def rating_value(self) -> float:
        try:
            return float(self.rating)
        except ValueError:
            return 0.0

    def genre_tags(self) -> List[str]:
        return [g.strip() for g in self.genre.split(",") if g.strip()]

    def matches_name(self, name: str) -> bool:
        return self.name.lower() == name.lower()

    def info(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "genre": self.genre,
            "rating": self.rating,
            "releaseDate": self.releaseDate,
            "image": self.image,
        }

    def to_dict(self, kind: Optional[str] = None) -> dict:
        out = self.info()
        out["sources"] = self.sources.to_dict()
        if self.is_series:
            out["episodes"] = [e.to_dict() for e in self.episodes]
        if kind:
            out["type"] = kind
        return out
