"""
In-memory filtering, pagination and trending over Title collections.
"""

from __future__ import annotations
import random
from dataclasses import dataclass
from typing import Iterable, List, Mapping, Optional, Sequence

from .errors import BadRequest
from .models import Title

DEFAULT_LIMIT = 20
KINDS = ("movie", "series")


@dataclass
class PageRequest:
    limit: int = DEFAULT_LIMIT
    offset: int = 0


@dataclass
class Page:
    items: list
    total: int
    limit: int
    offset: int

    @property
    def has_more(self) -> bool:
        return self.offset + self.limit < self.total

    def envelope(self, **extra) -> dict:
        out = {
            "success": True,
            "data": self.items,
            "total": self.total,
            "limit": self.limit,
            "offset": self.offset,
            "hasMore": self.has_more,
        }
        out.update(extra)
        return out


def parse_int(args: Mapping[str, str], name: str, default: Optional[int] = None,
              minimum: Optional[int] = None) -> Optional[int]:
    """Read an integer query parameter; empty or absent means default."""
    raw = args.get(name)
    if raw is None or str(raw).strip() == "":
        return default
    try:
        value = int(str(raw).strip())
    except ValueError:
        raise BadRequest(f"Invalid {name} parameter")
    if minimum is not None and value < minimum:
        raise BadRequest(f"Invalid {name} parameter")
    return value


def parse_page(args: Mapping[str, str], default_limit: int = DEFAULT_LIMIT) -> PageRequest:
    return PageRequest(
        limit=parse_int(args, "limit", default_limit, minimum=0),
        offset=parse_int(args, "offset", 0, minimum=0),
    )


def matches_search(title: Title, term: str) -> bool:
    term = term.lower()
    return (
        term in title.name.lower()
        or term in title.description.lower()
        or term in title.genre.lower()
    )


def filter_titles(titles: Iterable[Title], search: Optional[str] = None,
                  genre: Optional[str] = None) -> List[Title]:
    """Search across name/description/genre, then AND a genre substring filter."""
    out = list(titles)
    if search:
        out = [t for t in out if matches_search(t, search)]
    if genre and genre.lower() != "all":
        g = genre.lower()
        out = [t for t in out if g in t.genre.lower()]
    return out


def paginate(items: Sequence, limit: int = DEFAULT_LIMIT, offset: int = 0) -> Page:
    return Page(items=list(items[offset:offset + limit]), total=len(items), limit=limit, offset=offset)


def _wants(kind: Optional[str], which: str) -> bool:
    return not kind or kind == "all" or kind == which


def universal_search(movies: Iterable[Title], series: Iterable[Title], q: str,
                     kind: Optional[str] = None, genre: Optional[str] = None) -> List[dict]:
    """Search movies then series, tagging each hit with its type."""
    results: List[Title] = []
    tags: List[str] = []
    if _wants(kind, "movie"):
        hits = filter_titles(movies, search=q)
        results.extend(hits)
        tags.extend(["movie"] * len(hits))
    if _wants(kind, "series"):
        hits = filter_titles(series, search=q)
        results.extend(hits)
        tags.extend(["series"] * len(hits))

    tagged = zip(results, tags)
    if genre and genre.lower() != "all":
        g = genre.lower()
        tagged = [(t, k) for t, k in tagged if g in t.genre.lower()]
    return [t.to_dict(kind=k) for t, k in tagged]


def top_rated(titles: Iterable[Title], count: int) -> List[Title]:
    return sorted(titles, key=lambda t: t.rating_value, reverse=True)[:max(count, 0)]


def trending(movies: Iterable[Title], series: Iterable[Title], limit: int = DEFAULT_LIMIT,
             kind: Optional[str] = None, rng: Optional[random.Random] = None) -> List[dict]:
    """
    Highest-rated half-quota from each collection, shuffled and truncated.

    The shuffle uses the module-level random generator unless an explicit
    ``rng`` is given, so output order differs between calls by default.
    """
    quota = limit // 2
    picked: List[dict] = []
    if _wants(kind, "movie"):
        picked.extend(t.to_dict(kind="movie") for t in top_rated(movies, quota))
    if _wants(kind, "series"):
        picked.extend(t.to_dict(kind="series") for t in top_rated(series, quota))

    (rng or random).shuffle(picked)
    return picked[:limit]
