"""Configuration management with Pydantic settings."""

import os
from typing import List, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, Field, field_validator
import yaml


def _env_flag(value: str) -> bool:
    return value.lower() in ("true", "1", "yes", "on")


class MonitorConfig(BaseModel):
    """A monitor seeded into the store at startup."""
    id: str = Field(..., min_length=1, max_length=64)
    name: Optional[str] = None
    endpoint: str

    @field_validator('endpoint')
    @classmethod
    def endpoint_must_be_http_url(cls, v):
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError('endpoint must be an absolute http(s) URL')
        return v


class DatabaseConfig(BaseModel):
    """Database configuration."""
    type: str = "sqlite"
    url: str = "sqlite+aiosqlite:///./data/api_sentinel.db"
    pool_size: int = 5
    max_overflow: int = 10
    pool_pre_ping: bool = True
    echo: bool = False

    @field_validator('type')
    @classmethod
    def database_type_must_be_supported(cls, v):
        supported = ['sqlite', 'postgresql', 'memory']
        if v not in supported:
            raise ValueError(f'database type must be one of {supported}')
        return v


class ProbeConfig(BaseModel):
    """Outbound probe settings."""
    timeout_seconds: float = 5.0
    failure_status: int = 504
    max_connections: int = 20
    user_agent: str = "API-Sentinel/1.0"

    @field_validator('timeout_seconds')
    @classmethod
    def timeout_must_be_positive(cls, v):
        if v <= 0:
            raise ValueError('timeout_seconds must be positive')
        return v

    @field_validator('failure_status')
    @classmethod
    def failure_status_must_be_server_error(cls, v):
        if not (500 <= v <= 599):
            raise ValueError('failure_status must be between 500 and 599')
        return v

    @field_validator('max_connections')
    @classmethod
    def max_connections_must_be_positive(cls, v):
        if v < 1:
            raise ValueError('max_connections must be at least 1')
        return v


class HistoryConfig(BaseModel):
    """History window served to dashboards."""
    limit: int = 60

    @field_validator('limit')
    @classmethod
    def limit_must_be_positive(cls, v):
        if v < 1:
            raise ValueError('history limit must be at least 1')
        return v


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = "INFO"
    format: str = "json"
    file: Optional[str] = None
    console: bool = True

    @field_validator('level')
    @classmethod
    def log_level_must_be_valid(cls, v):
        if isinstance(v, str):
            v = v.upper()
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v not in valid_levels:
            raise ValueError(f'log level must be one of {valid_levels}')
        return v


class PrometheusConfig(BaseModel):
    """Prometheus metrics configuration."""
    enabled: bool = False
    path: str = "/metrics"


class CORSConfig(BaseModel):
    """CORS configuration."""
    enabled: bool = True
    allow_origins: List[str] = Field(default_factory=lambda: ["http://localhost:5173"])
    allow_credentials: bool = True
    allow_methods: List[str] = Field(
        default_factory=lambda: ["GET", "HEAD", "PUT", "PATCH", "POST", "DELETE"]
    )
    allow_headers: List[str] = Field(default_factory=lambda: ["*"])


class AuthConfig(BaseModel):
    """API access control configuration."""
    enabled: bool = False
    api_key: str = ""
    header_name: str = "X-API-Key"


class APIConfig(BaseModel):
    """API server configuration."""
    host: str = "0.0.0.0"
    port: int = 3001
    workers: int = 1
    reload: bool = False
    demo_routes: bool = True
    cors: CORSConfig = Field(default_factory=CORSConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)

    @field_validator('port')
    @classmethod
    def port_must_be_valid(cls, v):
        if not (1 <= v <= 65535):
            raise ValueError('port must be between 1 and 65535')
        return v


class Config(BaseModel):
    """Main configuration class."""
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    probe: ProbeConfig = Field(default_factory=ProbeConfig)
    history: HistoryConfig = Field(default_factory=HistoryConfig)
    monitors: List[MonitorConfig] = Field(default_factory=list)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    prometheus: PrometheusConfig = Field(default_factory=PrometheusConfig)
    api: APIConfig = Field(default_factory=APIConfig)

    @field_validator('api')
    @classmethod
    def validate_api_config(cls, v):
        if v.auth.enabled and not v.auth.api_key:
            raise ValueError('API key must be set when authentication is enabled')
        return v


def _load_dotenv(path: str = ".env") -> None:
    """Copy KEY=VALUE lines from a .env file into the environment."""
    if not os.path.exists(path):
        return
    with open(path, "r") as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith("#") and "=" in line:
                key, value = line.split("=", 1)
                os.environ[key.strip()] = value.strip().strip('"').strip("'")


def load_config() -> Config:
    """
    Load configuration from YAML file and environment variables.

    Returns:
        Config: Loaded configuration

    Raises:
        FileNotFoundError: If config file doesn't exist outside development
        ValueError: If the YAML or the resulting configuration is invalid
    """
    _load_dotenv()

    app_env = os.getenv("APP_ENV", "development")
    config_path = os.getenv("CONFIG_PATH", "config/config.yaml")

    config_data = {}
    if os.path.exists(config_path):
        try:
            with open(config_path, 'r') as f:
                config_data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in config file {config_path}: {e}")
    elif app_env != "development":
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        config = Config(**config_data)
    except Exception as e:
        raise ValueError(f"Configuration validation failed: {e}")

    database_url = os.getenv("DATABASE_URL")
    if database_url:
        config.database.url = database_url
        if database_url.startswith("postgresql"):
            config.database.type = "postgresql"

    log_level = os.getenv("LOG_LEVEL")
    if log_level:
        config.logging.level = log_level.upper()

    probe_timeout = os.getenv("PROBE_TIMEOUT_SECONDS")
    if probe_timeout:
        config.probe.timeout_seconds = float(probe_timeout)

    api_auth_enabled = os.getenv("API_AUTH_ENABLED")
    if api_auth_enabled is not None:
        config.api.auth.enabled = _env_flag(api_auth_enabled)

    api_auth_api_key = os.getenv("API_AUTH_API_KEY")
    if api_auth_api_key:
        config.api.auth.api_key = api_auth_api_key

    if config.api.auth.enabled and not config.api.auth.api_key:
        raise ValueError("API authentication is enabled but no API key is set")

    return config
