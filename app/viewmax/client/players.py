"""
Movie and series player controllers.

Player state lives in explicit dataclasses that callers own and pass to the
render functions; nothing here keeps module-level selection state.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional

from .api import ApiClientError, ViewMaxAPI
from .templates import render

log = logging.getLogger(__name__)

SITE_NAME = "ViewMax"
SOURCE_COUNT = 3


def initial_name(query: Mapping[str, str], param: str, stored: Optional[str] = None) -> Optional[str]:
    """Name from the page query string, else the last persisted one."""
    return query.get(param) or stored or None


def pick_source(sources: Optional[Mapping[str, str]], number: int) -> Optional[str]:
    if not sources:
        return None
    return sources.get(f"source{number}") or sources.get("source1")


def render_error(message: str) -> str:
    return render("error.html", message=message)


def render_player(url: Optional[str]) -> str:
    if not url:
        return ""
    return render("player.html", url=url)


def render_source_buttons(active: int) -> str:
    return render("buttons.html", count=SOURCE_COUNT, active=active)


def render_suggestions(items: List[dict], kind: str) -> str:
    if kind == "movie":
        page, param = "player.html", "movie"
    else:
        page, param = "Seriesplayer.html", "series"
    return render("suggestions.html", items=items, page=page, param=param)


def load_suggestions(api: ViewMaxAPI, kind: str, limit: int = 6) -> List[dict]:
    try:
        resp = api.get_movies(limit=limit) if kind == "movie" else api.get_series(limit=limit)
    except ApiClientError as e:
        log.error("Error loading suggestions: %s", e)
        return []
    return resp.get("data", []) if resp and resp.get("success") else []


def _info(record: dict, prefix: str) -> Dict[str, str]:
    title = f"{record.get('name', '')} - {SITE_NAME}"
    description = record.get("description", "")
    return {
        f"{prefix}-title": record.get("name", ""),
        f"{prefix}-genre": record.get("genre", ""),
        f"{prefix}-description": description,
        f"{prefix}-rating": record.get("rating", ""),
        f"{prefix}-release": record.get("releaseDate", ""),
        "page-title": title,
        "page-description": description,
        "og-title": title,
        "og-description": description,
        "twitter-title": title,
        "twitter-description": description,
    }


# ===== Movie player ==========================================================
@dataclass
class MoviePlayerState:
    movie: dict
    source: int = 1


def load_movie(api: ViewMaxAPI, name: str) -> Optional[MoviePlayerState]:
    try:
        resp = api.get_movie(name)
    except ApiClientError as e:
        log.error("Error loading movie %r: %s", name, e)
        return None
    if not resp or not resp.get("success"):
        return None
    return MoviePlayerState(movie=resp["data"])


def change_source(state, number: int):
    state.source = number
    return state


def movie_iframe(state: MoviePlayerState) -> Optional[str]:
    return pick_source(state.movie.get("sources"), state.source)


def render_movie_info(state: MoviePlayerState) -> Dict[str, str]:
    return _info(state.movie, "movie")


def render_movie_page(state: Optional[MoviePlayerState]) -> Dict[str, str]:
    if state is None:
        return {"player": render_error("Failed to load movie")}
    out = render_movie_info(state)
    out["player"] = render_player(movie_iframe(state))
    out["player-buttons"] = render_source_buttons(state.source)
    return out


# ===== Series player =========================================================
@dataclass
class SeriesPlayerState:
    series: dict
    season: int = 1
    episode: int = 1
    source: int = 1

    @property
    def episodes(self) -> List[dict]:
        return self.series.get("episodes") or []


def load_series(api: ViewMaxAPI, name: str) -> Optional[SeriesPlayerState]:
    try:
        resp = api.get_series_info(name)
    except ApiClientError as e:
        log.error("Error loading series %r: %s", name, e)
        return None
    if not resp or not resp.get("success"):
        return None
    state = SeriesPlayerState(series=resp["data"])
    if state.episodes and current_episode(state) is None:
        first = state.episodes[0]
        state.season, state.episode = first["season"], first["episode"]
    return state


def season_numbers(state: SeriesPlayerState) -> List[int]:
    return sorted({ep["season"] for ep in state.episodes})


def season_episodes(state: SeriesPlayerState) -> List[dict]:
    return [ep for ep in state.episodes if ep["season"] == state.season]


def select_season(state: SeriesPlayerState, season: int) -> SeriesPlayerState:
    state.season = season
    state.episode = 1
    return state


def select_episode(state: SeriesPlayerState, episode: int) -> SeriesPlayerState:
    state.episode = episode
    return state


def current_episode(state: SeriesPlayerState) -> Optional[dict]:
    for ep in state.episodes:
        if ep["season"] == state.season and ep["episode"] == state.episode:
            return ep
    return None


def series_iframe(state: SeriesPlayerState) -> Optional[str]:
    ep = current_episode(state)
    if ep is None:
        return None
    return pick_source(ep.get("sources"), state.source)


def render_seasons(state: SeriesPlayerState) -> str:
    return render("seasons.html", seasons=season_numbers(state), current=state.season)


def render_episodes(state: SeriesPlayerState) -> str:
    return render("episodes.html", episodes=season_episodes(state), current=state.episode)


def render_series_info(state: SeriesPlayerState) -> Dict[str, str]:
    return _info(state.series, "series")


def render_series_page(state: Optional[SeriesPlayerState]) -> Dict[str, str]:
    if state is None:
        return {"episode-iframe": render_error("Failed to load series")}
    out = render_series_info(state)
    out["seasons-list"] = render_seasons(state)
    out["episodes-container"] = render_episodes(state)
    out["episode-iframe"] = render_player(series_iframe(state))
    out["player-buttons"] = render_source_buttons(state.source)
    return out


def current_iframe(state) -> Optional[str]:
    """Iframe URL for whichever player ``state`` belongs to."""
    if isinstance(state, SeriesPlayerState):
        return series_iframe(state)
    return movie_iframe(state)
