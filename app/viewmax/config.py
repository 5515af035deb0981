"""
Central configuration module for ViewMax.

This module provides a single source of configuration loading from:
- YAML configuration files
- Environment variables
- Defaults

Key features:
- Data file locations (movies / series collections)
- Static asset root and its access policy
- Server bind address and mode flag
"""

from __future__ import annotations
import os
import logging
import yaml
from typing import List, Optional
from dataclasses import dataclass, field

log = logging.getLogger(__name__)

REPO_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
DEFAULT_CONFIG_PATH = "/config/config.yaml"
API_VERSION = "1.0.0"


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.environ.get(name, default))
    except (ValueError, TypeError):
        return default


@dataclass
class ServerConfig:
    """HTTP server bind address and cross-origin / rate-limit policy."""
    host: str = "0.0.0.0"
    port: int = 3000
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    # flask-limiter notation, applied per client address on /api
    rate_limit: str = "1000 per 15 minutes"

    def __post_init__(self):
        self.host = os.environ.get("HOST", self.host)
        self.port = _env_int("PORT", self.port)
        self.rate_limit = os.environ.get("VIEWMAX_RATE_LIMIT", self.rate_limit)
        origins = os.environ.get("CORS_ORIGINS")
        if origins:
            self.cors_origins = [o.strip() for o in origins.split(",") if o.strip()]


@dataclass
class DataConfig:
    """Location of the flat-file collections."""
    dir: str = ""
    movies_file: str = "movies.json"
    series_file: str = "series.json"

    def __post_init__(self):
        self.dir = os.environ.get("DATA_DIR", self.dir) or os.path.join(REPO_ROOT, "data")

    @property
    def movies_path(self) -> str:
        return os.path.join(self.dir, self.movies_file)

    @property
    def series_path(self) -> str:
        return os.path.join(self.dir, self.series_file)


@dataclass
class StaticConfig:
    """Static asset root and the patterns it refuses to serve."""
    root: str = ""
    index: str = "index.html"
    deny: List[str] = field(default_factory=lambda: ["*.json", ".*"])

    def __post_init__(self):
        self.root = os.environ.get("STATIC_ROOT", self.root) or os.path.join(REPO_ROOT, "web")


@dataclass
class QueryConfig:
    """Query defaults."""
    default_limit: int = 20


@dataclass
class ViewMaxConfig:
    """Main ViewMax configuration."""
    server: ServerConfig = field(default_factory=ServerConfig)
    data: DataConfig = field(default_factory=DataConfig)
    static: StaticConfig = field(default_factory=StaticConfig)
    query: QueryConfig = field(default_factory=QueryConfig)

    # Runtime options
    mode: str = "production"
    log_level: str = "INFO"
    version: str = API_VERSION

    def __post_init__(self):
        # Apply environment variable overrides
        self.mode = os.environ.get("FLASK_ENV", self.mode).lower()
        self.log_level = os.environ.get("VIEWMAX_LOG_LEVEL", self.log_level).upper()

    @property
    def is_development(self) -> bool:
        return self.mode == "development"


def load_yaml_config(config_path: str) -> dict:
    """
    Load configuration from a YAML file.

    Args:
        config_path: Path to the YAML configuration file

    Returns:
        Dictionary containing the parsed YAML configuration, or empty dict on error
    """
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        return {}
    except yaml.YAMLError as e:
        log.error("Error parsing YAML config at %s: %s", config_path, e)
        return {}
    except OSError as e:
        log.error("Error loading config from %s: %s", config_path, e)
        return {}
    if not isinstance(data, dict):
        log.error("Config at %s is not a mapping; ignoring", config_path)
        return {}
    return data


def parse_server_config(data: dict) -> ServerConfig:
    """Parse server configuration from YAML data."""
    server_data = data.get("server") or {}

    port = server_data.get("port", 3000)
    try:
        port = int(port)
    except (ValueError, TypeError):
        port = 3000

    origins = server_data.get("cors_origins")
    if origins is None:
        origins = ["*"]
    elif isinstance(origins, str):
        origins = [origins]

    return ServerConfig(
        host=server_data.get("host", "0.0.0.0"),
        port=port,
        cors_origins=[str(o) for o in origins],
        rate_limit=str(server_data.get("rate_limit") or "1000 per 15 minutes"),
    )


def parse_data_config(data: dict) -> DataConfig:
    """Parse data file configuration from YAML data."""
    data_cfg = data.get("data") or {}

    return DataConfig(
        dir=data_cfg.get("dir", ""),
        movies_file=data_cfg.get("movies_file", "movies.json"),
        series_file=data_cfg.get("series_file", "series.json"),
    )


def parse_static_config(data: dict) -> StaticConfig:
    """Parse static asset configuration from YAML data."""
    static_data = data.get("static") or {}

    deny = static_data.get("deny")
    if deny is None:
        deny = ["*.json", ".*"]

    return StaticConfig(
        root=static_data.get("root", ""),
        index=static_data.get("index", "index.html"),
        deny=[str(p) for p in deny],
    )


def parse_query_config(data: dict) -> QueryConfig:
    query_data = data.get("query") or {}
    try:
        default_limit = int(query_data.get("default_limit", 20))
    except (ValueError, TypeError):
        default_limit = 20
    return QueryConfig(default_limit=default_limit)


def load_config(config_path: Optional[str] = None) -> ViewMaxConfig:
    """
    Load the complete ViewMax configuration.

    Configuration is loaded from:
    1. YAML file (if provided or found at CONFIG_FILE env var)
    2. Environment variables (override YAML)
    3. Defaults

    Args:
        config_path: Optional path to YAML config file. If None, uses CONFIG_FILE env var
                     or defaults to /config/config.yaml

    Returns:
        ViewMaxConfig object with complete configuration
    """
    if config_path is None:
        config_path = os.environ.get("CONFIG_FILE", DEFAULT_CONFIG_PATH)

    yaml_data = load_yaml_config(config_path)

    return ViewMaxConfig(
        server=parse_server_config(yaml_data),
        data=parse_data_config(yaml_data),
        static=parse_static_config(yaml_data),
        query=parse_query_config(yaml_data),
        mode=str(yaml_data.get("mode", "production")),
        log_level=str(yaml_data.get("log_level", "INFO")),
    )


# Singleton pattern for global config access
_global_config: Optional[ViewMaxConfig] = None


def get_config(config_path: Optional[str] = None, reload: bool = False) -> ViewMaxConfig:
    """
    Get the global configuration instance.

    Args:
        config_path: Optional path to config file (only used on first load or reload)
        reload: If True, force reload the configuration

    Returns:
        ViewMaxConfig instance
    """
    global _global_config

    if _global_config is None or reload:
        _global_config = load_config(config_path)

    return _global_config


def configure_logging(config: ViewMaxConfig) -> None:
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def to_dict(config: ViewMaxConfig) -> dict:
    """
    Convert ViewMaxConfig to a dictionary for serialization (e.g., JSON API).

    Args:
        config: ViewMaxConfig instance

    Returns:
        Dictionary representation of the configuration
    """
    return {
        "server": {
            "host": config.server.host,
            "port": config.server.port,
            "cors_origins": list(config.server.cors_origins),
            "rate_limit": config.server.rate_limit,
        },
        "data": {
            "dir": config.data.dir,
            "movies_file": config.data.movies_file,
            "series_file": config.data.series_file,
        },
        "static": {
            "root": config.static.root,
            "index": config.static.index,
            "deny": list(config.static.deny),
        },
        "query": {
            "default_limit": config.query.default_limit,
        },
        "mode": config.mode,
        "log_level": config.log_level,
        "version": config.version,
    }
