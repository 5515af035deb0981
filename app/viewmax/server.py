"""
ViewMax HTTP layer.

All API routes are GET-only and read the flat files anew per request.
Responses use the envelope {success, data?, error?, message?, ...}.
"""

from __future__ import annotations
import os
import fnmatch
import logging
from datetime import datetime, timezone
from typing import Optional

from flask import Flask, Blueprint, current_app, jsonify, request, send_from_directory, abort
from flask_compress import Compress
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from werkzeug.exceptions import HTTPException
from werkzeug.security import safe_join

from viewmax.config import ViewMaxConfig, get_config, configure_logging
from viewmax.core.errors import ViewMaxError, BadRequest, NotFound
from viewmax.core.store import ContentStore
from viewmax.core import query, resolver, stats

log = logging.getLogger(__name__)

AVAILABLE_ENDPOINTS = [
    "GET /api/movies",
    "GET /api/movies/:name",
    "GET /api/series",
    "GET /api/series/:name",
    "GET /api/series/:name/episodes",
    "GET /api/search",
    "GET /api/iframe",
    "GET /api/trending",
    "GET /api/stats",
    "GET /api/genres",
    "GET /api/health",
]

RATE_LIMIT_MESSAGE = "Too many requests from this IP, please try again later."

# Sent on every response unless a handler already set them
SECURITY_HEADERS = {
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
    "Origin-Agent-Cluster": "?1",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
    "X-Content-Type-Options": "nosniff",
    "X-DNS-Prefetch-Control": "off",
    "X-Download-Options": "noopen",
    "X-Frame-Options": "SAMEORIGIN",
    "X-Permitted-Cross-Domain-Policies": "none",
    "X-XSS-Protection": "0",
}

api = Blueprint("api", __name__, url_prefix="/api")


def _config() -> ViewMaxConfig:
    return current_app.config["VIEWMAX"]


def _store() -> ContentStore:
    return ContentStore.from_config(_config())


def _listing(titles):
    args = request.args
    page = query.parse_page(args, _config().query.default_limit)
    filtered = query.filter_titles(titles, search=args.get("search"), genre=args.get("genre"))
    result = query.paginate([t.to_dict() for t in filtered], page.limit, page.offset)
    return jsonify(result.envelope())


# ===== Movies ================================================================
@api.get("/movies")
def list_movies():
    return _listing(_store().movies())


@api.get("/movies/<path:name>")
def get_movie(name):
    movie = resolver.find_title(_store().movies(), name)
    if movie is None:
        raise NotFound("Movie not found")
    return jsonify(success=True, data=movie.to_dict())


# ===== Series ================================================================
@api.get("/series")
def list_series():
    return _listing(_store().series())


@api.get("/series/<path:name>/episodes")
def get_episodes(name):
    show = resolver.find_title(_store().series(), name)
    if show is None:
        raise NotFound("Series not found")
    season = query.parse_int(request.args, "season")
    episode = query.parse_int(request.args, "episode")
    eps = resolver.episodes_for(show, season=season, episode=episode)
    return jsonify(success=True, data=[e.to_dict() for e in eps], seriesInfo=show.info())


@api.get("/series/<path:name>")
def get_series(name):
    show = resolver.find_title(_store().series(), name)
    if show is None:
        raise NotFound("Series not found")
    return jsonify(success=True, data=show.to_dict())


# ===== Search / iframe / trending ===========================================
@api.get("/search")
def search():
    args = request.args
    q = args.get("q", "")
    if not q:
        raise BadRequest("Search query is required")
    page = query.parse_page(args, _config().query.default_limit)
    store = _store()
    results = query.universal_search(
        store.movies(), store.series(), q,
        kind=args.get("type"), genre=args.get("genre"),
    )
    return jsonify(query.paginate(results, page.limit, page.offset).envelope(query=q))


@api.get("/iframe")
def iframe():
    args = request.args
    title = args.get("title", "")
    if not title:
        raise BadRequest("Title is required")
    store = _store()
    result = resolver.resolve_iframe(
        store.movies(), store.series(), title,
        source=args.get("source") or "primary",
        season=query.parse_int(args, "season"),
        episode=query.parse_int(args, "episode"),
    )
    return jsonify(success=True, data=result.to_dict())


@api.get("/trending")
def trending():
    args = request.args
    limit = query.parse_int(args, "limit", _config().query.default_limit, minimum=0)
    store = _store()
    data = query.trending(store.movies(), store.series(), limit=limit, kind=args.get("type"))
    return jsonify(success=True, data=data)


# ===== Aggregates ============================================================
@api.get("/stats")
def api_stats():
    store = _store()
    return jsonify(success=True, data=stats.build_stats(store.movies(), store.series()))


@api.get("/genres")
def genres():
    store = _store()
    return jsonify(success=True, data=sorted(stats.genre_tags(store.movies(), store.series())))


@api.get("/health")
def health():
    return jsonify(
        success=True,
        message="ViewMax API is running",
        timestamp=datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
        version=_config().version,
    )


@api.route("", defaults={"rest": ""}, methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
@api.route("/<path:rest>", methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
def unknown_endpoint(rest):
    return jsonify(
        success=False,
        error="API endpoint not found",
        availableEndpoints=AVAILABLE_ENDPOINTS,
    ), 404


# ===== Static ================================================================
def _denied(path: str, patterns) -> bool:
    parts = [p for p in path.replace("\\", "/").split("/") if p]
    return any(fnmatch.fnmatch(part, pat) for part in parts for pat in patterns)


def serve_static(path: str = ""):
    cfg = _config().static
    path = path or cfg.index
    if _denied(path, cfg.deny):
        abort(403)
    full = safe_join(cfg.root, path)
    if full is None:
        abort(404)
    if os.path.isdir(full):
        abort(403)
    return send_from_directory(cfg.root, path)


# ===== App ===================================================================
def create_app(config: Optional[ViewMaxConfig] = None) -> Flask:
    config = config or get_config()
    configure_logging(config)

    # static_folder=None: the catch-all route below owns static serving
    app = Flask(__name__, static_folder=None)
    app.config["VIEWMAX"] = config
    app.json.sort_keys = False

    CORS(
        app,
        origins=config.server.cors_origins,
        methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization"],
    )
    Compress(app)
    limiter = Limiter(get_remote_address, app=app, storage_uri="memory://")
    # one counter per client across every /api route
    limiter.shared_limit(config.server.rate_limit, scope="api", error_message=RATE_LIMIT_MESSAGE)(api)

    app.register_blueprint(api)
    app.add_url_rule("/", "index", serve_static)
    app.add_url_rule("/<path:path>", "static_file", serve_static)

    @app.after_request
    def _stamp_version(resp):
        resp.headers["X-ViewMax-Version"] = config.version
        for name, value in SECURITY_HEADERS.items():
            resp.headers.setdefault(name, value)
        return resp

    @app.errorhandler(ViewMaxError)
    def _api_error(e: ViewMaxError):
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(HTTPException)
    def _http_error(e: HTTPException):
        if request.path == "/api" or request.path.startswith("/api/"):
            if e.code == 429:
                return jsonify(success=False, error=e.description), 429
            return jsonify(success=False, error=e.name), e.code
        return e

    @app.errorhandler(Exception)
    def _unhandled(e: Exception):
        log.exception("Unhandled error on %s", request.path)
        return jsonify(
            success=False,
            error="Internal server error",
            message=str(e) if config.is_development else "Something went wrong",
        ), 500

    log.info("ViewMax app ready (data=%s, static=%s, mode=%s)",
             config.data.dir, config.static.root, config.mode)
    return app


app = create_app()

if __name__ == "__main__":
    cfg = app.config["VIEWMAX"]
    app.run(host=cfg.server.host, port=cfg.server.port, debug=cfg.is_development)
