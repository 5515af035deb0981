import os
import json
from typing import Optional

import typer

from viewmax.config import get_config
from viewmax.client.api import ApiClientError, ViewMaxAPI
from viewmax.client.storage import CURRENT_MOVIE, CURRENT_SERIES, LastViewed

app = typer.Typer(add_completion=False)

DEFAULT_BASE = os.environ.get("VIEWMAX_URL", "http://localhost:3000")
LAST_VIEWED = os.path.join(os.path.expanduser("~"), ".viewmax", "last_viewed.json")


def _api(base_url: str) -> ViewMaxAPI:
    return ViewMaxAPI(base_url)


def _fail(e: ApiClientError):
    msg = (e.payload or {}).get("error") if isinstance(e.payload, dict) else None
    typer.echo(f"error: {msg or e}", err=True)
    raise typer.Exit(code=1)


@app.command()
def serve(config: Optional[str] = typer.Option(None, help="Path to config.yaml")):
    """Run the API server with Flask's built-in server."""
    from viewmax.server import create_app

    cfg = get_config(config, reload=config is not None)
    flask_app = create_app(cfg)
    flask_app.run(host=cfg.server.host, port=cfg.server.port, debug=cfg.is_development)


@app.command()
def search(query: str, kind: Optional[str] = typer.Option(None, "--type"), genre: Optional[str] = None, limit: int = 8,
           base_url: str = DEFAULT_BASE):
    """Universal search across movies and series."""
    params = {"limit": limit}
    if kind:
        params["type"] = kind
    if genre:
        params["genre"] = genre
    try:
        resp = _api(base_url).search(query, **params)
    except ApiClientError as e:
        _fail(e)
    for item in resp.get("data", []):
        typer.echo(f"[{item.get('type')}] {item.get('name')} ({item.get('rating')}) - {item.get('genre')}")
    typer.echo(f"{resp.get('total', 0)} result(s)")


@app.command()
def play(title: Optional[str] = typer.Argument(None), season: Optional[int] = None,
         episode: Optional[int] = None, source: str = "primary", series: bool = False,
         base_url: str = DEFAULT_BASE):
    """Print the iframe URL for a title (defaults to the last one played)."""
    store = LastViewed(LAST_VIEWED)
    key = CURRENT_SERIES if series else CURRENT_MOVIE
    title = title or store.get(key)
    if not title:
        typer.echo("error: no title given and nothing played yet", err=True)
        raise typer.Exit(code=2)
    params = {"source": source}
    if season is not None:
        params["season"] = season
    if episode is not None:
        params["episode"] = episode
    try:
        resp = _api(base_url).get_iframe_sources(title, **params)
    except ApiClientError as e:
        _fail(e)
    data = resp["data"]
    store.set(CURRENT_SERIES if data.get("type") == "series" else CURRENT_MOVIE, data["title"])
    typer.echo(data["iframe"])


@app.command()
def stats(base_url: str = DEFAULT_BASE):
    """Show library statistics."""
    try:
        resp = _api(base_url).get_stats()
    except ApiClientError as e:
        _fail(e)
    typer.echo(json.dumps(resp.get("data", {}), indent=2))


@app.command()
def health(base_url: str = DEFAULT_BASE):
    """Ping the API health route."""
    try:
        resp = _api(base_url).health_check()
    except ApiClientError as e:
        _fail(e)
    typer.echo(f"{resp.get('message')} (version {resp.get('version')}, {resp.get('timestamp')})")


if __name__ == "__main__":
    app()
