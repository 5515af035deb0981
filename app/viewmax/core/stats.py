from __future__ import annotations
from typing import Iterable, List, Sequence

from .models import Title


def genre_tags(*collections: Iterable[Title]) -> List[str]:
    """Deduplicated trimmed genre tags, in first-seen order."""
    seen = {}
    for titles in collections:
        for t in titles:
            for tag in t.genre_tags():
                seen.setdefault(tag, None)
    return list(seen)


def average_rating(titles: Sequence[Title]) -> str:
    # An empty collection has no average; report it as non-numeric.
    if not titles:
        return "NaN"
    return f"{sum(t.rating_value for t in titles) / len(titles):.1f}"


def build_stats(movies: Sequence[Title], series: Sequence[Title]) -> dict:
    genres = genre_tags(movies, series)
    return {
        "totalMovies": len(movies),
        "totalSeries": len(series),
        "totalEpisodes": sum(len(s.episodes) for s in series),
        "totalGenres": len(genres),
        "genres": genres,
        "averageMovieRating": average_rating(movies),
        "averageSeriesRating": average_rating(series),
    }
