"""Pytest configuration and fixtures for ViewMax tests."""
import json
import pytest

from viewmax.config import load_config
from viewmax.core.models import Title

MOVIES = [
    {
        "name": "Incendies",
        "genre": "Drama, Mystery, War",
        "description": "Twins journey to uncover their mother's past.",
        "rating": "8.3",
        "releaseDate": "2010-09-17",
        "image": "https://img.test/incendies.jpg",
        "sources": {
            "source1": "https://one.test/incendies",
            "source2": "https://two.test/incendies",
            "source3": "https://three.test/incendies",
        },
    },
    {
        "name": "Inception",
        "genre": "Action, Sci-Fi, Thriller",
        "description": "A thief plants an idea inside a dream.",
        "rating": "8.8",
        "releaseDate": "2010-07-16",
        "image": "https://img.test/inception.jpg",
        "sources": {
            "source1": "https://one.test/inception",
            "source2": "https://two.test/inception",
        },
    },
    {
        "name": "Paddington 2",
        "genre": "Comedy, Family",
        "description": "A bear takes odd jobs to buy a present.",
        "rating": "7.8",
        "releaseDate": "2018-01-12",
        "image": "https://img.test/paddington.jpg",
        "sources": {"source1": "https://one.test/paddington"},
    },
    {
        "name": "Heat",
        "genre": "Action, Crime, Drama",
        "description": "A detective hunts a crew of professional thieves.",
        "releaseDate": "1995-12-15",
        "image": "https://img.test/heat.jpg",
        "sources": {"source1": "https://one.test/heat"},
    },
]

SERIES = [
    {
        "name": "Dark",
        "genre": "Crime, Drama, Mystery, Sci-Fi",
        "description": "A town's missing children expose a loop in time.",
        "rating": "8.7",
        "releaseDate": "2017-12-01",
        "image": "https://img.test/dark.jpg",
        "episodes": [
            {"season": 1, "episode": 1, "title": "Secrets",
             "sources": {"source1": "https://one.test/dark/1/1", "source2": "https://two.test/dark/1/1"}},
            {"season": 1, "episode": 2, "title": "Lies",
             "sources": {"source1": "https://one.test/dark/1/2"}},
            {"season": 2, "episode": 1, "title": "Beginnings and Endings",
             "sources": {"source1": "https://one.test/dark/2/1", "source3": "https://three.test/dark/2/1"}},
        ],
    },
    {
        "name": "Ted Lasso",
        "genre": "Comedy, Drama, Sport",
        "description": "An American coach manages an English football club.",
        "rating": "8.8",
        "releaseDate": "2020-08-14",
        "image": "https://img.test/ted-lasso.jpg",
        "episodes": [
            {"season": 1, "episode": 1, "title": "Pilot",
             "sources": {"source1": "https://one.test/ted/1/1"}},
        ],
    },
    {
        "name": "Empty Show",
        "genre": "Documentary",
        "description": "Nothing has aired yet.",
        "rating": "6.0",
        "releaseDate": "2024-01-01",
        "image": "https://img.test/empty.jpg",
        "episodes": [],
    },
]


def write_json(path, payload):
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


@pytest.fixture
def movies():
    return [Title.from_dict(m) for m in MOVIES]


@pytest.fixture
def series():
    return [Title.from_dict(s, is_series=True) for s in SERIES]


@pytest.fixture
def data_dir(tmp_path):
    d = tmp_path / "data"
    d.mkdir()
    write_json(d / "movies.json", MOVIES)
    write_json(d / "series.json", SERIES)
    return d


@pytest.fixture
def static_root(tmp_path):
    root = tmp_path / "web"
    root.mkdir()
    (root / "index.html").write_text("<html><body>ViewMax</body></html>", encoding="utf-8")
    (root / "app.js").write_text("console.log('ok');", encoding="utf-8")
    (root / "catalog.json").write_text("[]", encoding="utf-8")
    (root / ".env").write_text("SECRET=1", encoding="utf-8")
    (root / "assets").mkdir()
    return root


@pytest.fixture
def config(tmp_path, data_dir, static_root, monkeypatch):
    """Configuration pointing at the temporary data and static dirs."""
    monkeypatch.setenv("DATA_DIR", str(data_dir))
    monkeypatch.setenv("STATIC_ROOT", str(static_root))
    monkeypatch.setenv("FLASK_ENV", "testing")
    monkeypatch.delenv("PORT", raising=False)
    monkeypatch.delenv("HOST", raising=False)
    monkeypatch.delenv("VIEWMAX_RATE_LIMIT", raising=False)
    monkeypatch.delenv("CORS_ORIGINS", raising=False)
    return load_config(str(tmp_path / "no-such-config.yaml"))


@pytest.fixture
def app(config):
    """Create Flask app for testing."""
    from viewmax.server import create_app

    flask_app = create_app(config)
    flask_app.config["TESTING"] = True
    yield flask_app


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


class _FlaskResponse:
    def __init__(self, resp):
        self._resp = resp
        self.status_code = resp.status_code
        self.ok = resp.status_code < 400

    def json(self):
        data = self._resp.get_json(silent=True)
        if data is None:
            raise ValueError("not JSON")
        return data


class FlaskSession:
    """Stands in for requests.Session, answering from the Flask test client."""

    def __init__(self, test_client):
        self.client = test_client
        self.calls = []

    def get(self, url, params=None, timeout=None):
        path = url.split("://", 1)[-1]
        path = path[path.index("/"):]
        self.calls.append((path, params))
        return _FlaskResponse(self.client.get(path, query_string=params))


@pytest.fixture
def api(client):
    from viewmax.client.api import ViewMaxAPI

    return ViewMaxAPI("http://viewmax.test", session=FlaskSession(client))


@pytest.fixture
def temp_config_file(tmp_path):
    """Create a temporary config file for testing."""
    path = tmp_path / "config.yaml"
    path.write_text(
        """
server:
  host: 127.0.0.1
  port: 8099
  cors_origins:
    - http://localhost:3000
  rate_limit: 50 per minute

data:
  dir: /srv/viewmax/data
  movies_file: films.json

static:
  root: /srv/viewmax/web
  deny:
    - "*.json"

query:
  default_limit: 10

mode: development
log_level: debug
""",
        encoding="utf-8",
    )
    return str(path)
