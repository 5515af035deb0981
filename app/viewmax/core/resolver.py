"""
Name lookup and iframe source resolution.

Movies are checked first; a matching movie ends the lookup. For a series the
requested (season, episode) is used when it exists and has sources, otherwise
the first stored episode stands in.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from .errors import NotFound
from .models import Episode, Title

log = logging.getLogger(__name__)


@dataclass
class IframeResult:
    title: str
    type: str
    iframe: str
    available_sources: List[str] = field(default_factory=list)
    season: Optional[int] = None
    episode: Optional[int] = None
    episode_title: Optional[str] = None

    def to_dict(self) -> dict:
        out = {
            "title": self.title,
            "type": self.type,
            "iframe": self.iframe,
            "availableSources": self.available_sources,
        }
        if self.type == "series":
            out["season"] = self.season
            out["episode"] = self.episode
            out["episodeTitle"] = self.episode_title
        return out


def find_title(titles: Iterable[Title], name: str) -> Optional[Title]:
    for t in titles:
        if t.matches_name(name):
            return t
    return None


def find_episode(show: Title, season: int, episode: int) -> Optional[Episode]:
    for ep in show.episodes:
        if ep.season == season and ep.episode == episode:
            return ep
    return None


def episodes_for(show: Title, season: Optional[int] = None,
                 episode: Optional[int] = None) -> List[Episode]:
    eps = show.episodes
    if season is not None:
        eps = [e for e in eps if e.season == season]
    if episode is not None:
        eps = [e for e in eps if e.episode == episode]
    return list(eps)


def _episode_result(show: Title, ep: Episode, source: str) -> Optional[IframeResult]:
    url = ep.sources.pick(source)
    if not url:
        return None
    return IframeResult(
        title=show.name,
        type="series",
        iframe=url,
        available_sources=ep.sources.available(),
        season=ep.season,
        episode=ep.episode,
        episode_title=ep.title,
    )


def resolve_iframe(movies: Iterable[Title], series: Iterable[Title], title: str,
                   source: str = "primary", season: Optional[int] = None,
                   episode: Optional[int] = None) -> IframeResult:
    movie = find_title(movies, title)
    if movie is not None:
        url = movie.sources.pick(source)
        if not url:
            raise NotFound("Source not found")
        return IframeResult(
            title=movie.name,
            type="movie",
            iframe=url,
            available_sources=movie.sources.available(),
        )

    show = find_title(series, title)
    if show is not None:
        if season is not None and episode is not None:
            ep = find_episode(show, season, episode)
            if ep is not None and ep.sources:
                result = _episode_result(show, ep, source)
                if result is not None:
                    return result
            log.debug("%s S%sE%s not resolvable; using first episode", show.name, season, episode)

        if show.episodes:
            result = _episode_result(show, show.episodes[0], source)
            if result is not None:
                return result

    raise NotFound("Content not found")
