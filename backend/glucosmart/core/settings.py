import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


class ServerConfig(BaseModel):
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000, ge=1, le=65535)


class SecurityConfig(BaseModel):
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])


class DataConfig(BaseModel):
    data_dir: Path = Field(default=Path("backend/data"))

    @field_validator("data_dir", mode="before")
    def _expand_path(cls, v: str | Path) -> Path:
        return Path(v).expanduser()


class ShareConfig(BaseModel):
    public_base_url: str = Field(default="http://localhost:8000")
    ttl_hours: int = Field(default=24, ge=1, le=168)

    @field_validator("public_base_url")
    def _strip_slash(cls, v: str) -> str:
        return v.rstrip("/")


class JobsConfig(BaseModel):
    enabled: bool = True


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO")
    access_log: bool = True

    @field_validator("level")
    def _known_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level {v!r}")
        return level


class Settings(BaseModel):
    server: ServerConfig = Field(default_factory=ServerConfig)
    security: SecurityConfig = Field(default_factory=SecurityConfig)
    data: DataConfig = Field(default_factory=DataConfig)
    share: ShareConfig = Field(default_factory=ShareConfig)
    jobs: JobsConfig = Field(default_factory=JobsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(arbitrary_types_allowed=True)


def _config_path() -> Path:
    return Path(os.environ.get("CONFIG_PATH", "config/config.json"))


def _load_file_config(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open("r", encoding="utf-8") as fh:
            return json.load(fh)
    except json.JSONDecodeError as exc:
        raise RuntimeError(f"Invalid JSON configuration at {path}") from exc


def _load_env() -> dict[str, Any]:
    env_config: dict[str, Any] = {}

    host = os.environ.get("SERVER_HOST")
    if host:
        env_config.setdefault("server", {})["host"] = host

    port = os.environ.get("SERVER_PORT")
    if port:
        env_config.setdefault("server", {})["port"] = port

    cors_origins = os.environ.get("CORS_ORIGINS")
    if cors_origins:
        env_config.setdefault("security", {})["cors_origins"] = [
            origin.strip() for origin in cors_origins.split(",") if origin.strip()
        ]

    data_dir = os.environ.get("DATA_DIR")
    if data_dir:
        env_config.setdefault("data", {})["data_dir"] = data_dir

    share_base_url = os.environ.get("SHARE_BASE_URL")
    if share_base_url:
        env_config.setdefault("share", {})["public_base_url"] = share_base_url

    share_ttl = os.environ.get("SHARE_TTL_HOURS")
    if share_ttl:
        env_config.setdefault("share", {})["ttl_hours"] = share_ttl

    jobs_enabled = os.environ.get("JOBS_ENABLED")
    if jobs_enabled:
        env_config.setdefault("jobs", {})["enabled"] = jobs_enabled.lower() in ("1", "true", "yes")

    log_level = os.environ.get("LOG_LEVEL")
    if log_level:
        env_config.setdefault("logging", {})["level"] = log_level

    access_log = os.environ.get("ACCESS_LOG")
    if access_log:
        env_config.setdefault("logging", {})["access_log"] = access_log.lower() in ("1", "true", "yes")

    return env_config


def merge_settings(env_config: dict[str, Any], file_config: dict[str, Any]) -> dict[str, Any]:
    merged: dict[str, Any] = {}
    for section in ("server", "security", "data", "share", "jobs", "logging"):
        merged[section] = {**file_config.get(section, {}), **env_config.get(section, {})}
    return merged


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    env_config = _load_env()
    file_config = _load_file_config(_config_path())
    merged = merge_settings(env_config=env_config, file_config=file_config)
    try:
        return Settings.model_validate(merged)
    except ValidationError as exc:
        raise RuntimeError(f"Configuration error: {exc}") from exc


__all__ = ["LoggingConfig", "Settings", "get_settings", "merge_settings"]
