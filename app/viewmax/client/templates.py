"""HTML fragments rendered into the player and search pages."""

from __future__ import annotations

from jinja2 import DictLoader, Environment

TEMPLATES = {
    "player.html": (
        '<iframe src="{{ url }}" allowfullscreen scrolling="no" '
        'style="width: 100%; height: 100%; border: none; border-radius: 20px;"></iframe>'
    ),
    "error.html": '<div class="error-message"><p>{{ message }}</p></div>',
    "buttons.html": (
        "{% for n in range(1, count + 1) %}"
        '<button data-source="{{ n }}"{% if n == active %} class="active"{% endif %}>Server {{ n }}</button>'
        "{% endfor %}"
    ),
    "seasons.html": (
        "{% for s in seasons %}"
        '<li data-season="{{ s }}"{% if s == current %} class="active"{% endif %}>Season {{ s }}</li>'
        "{% endfor %}"
    ),
    "episodes.html": (
        "{% for ep in episodes %}"
        '<button data-episode="{{ ep.episode }}"{% if ep.episode == current %} class="active"{% endif %}>'
        "Episode {{ ep.episode }}: {{ ep.title }}</button>"
        "{% endfor %}"
    ),
    "suggestions.html": (
        "{% for item in items %}"
        '<div class="suggestion-item"><a href="{{ page }}?{{ param }}={{ item.name | urlencode }}">'
        '<img src="{{ item.image }}" alt="{{ item.name }}" loading="lazy"><p>{{ item.name }}</p></a></div>'
        "{% endfor %}"
    ),
    "dropdown.html": (
        "{% if not results %}"
        '<li class="no-results">No results found</li>'
        "{% else %}{% for item in results %}"
        '<li class="suggestion-item" data-name="{{ item.name }}" data-type="{{ item.type }}">'
        '<img src="{{ item.image }}" alt="{{ item.name }}" loading="lazy">'
        '<div class="suggestion-info"><h4>{{ item.name }}</h4>'
        "<p>{{ 'Movie' if item.type == 'movie' else 'TV Series' }} &bull; {{ item.genre }}</p>"
        '<span class="rating">&#11088; {{ item.rating }}</span></div></li>'
        "{% endfor %}{% endif %}"
    ),
}

env = Environment(loader=DictLoader(TEMPLATES), autoescape=True)


def render(name: str, **context) -> str:
    return env.get_template(name).render(**context)
