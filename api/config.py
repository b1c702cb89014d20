"""
Settings
Environment-sourced configuration, built once per process
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .errors import ConfigurationError
from .security.env_validator import validate_env


@dataclass(frozen=True)
class Settings:
    """Everything the API reads from the environment."""
    db_host: str = "127.0.0.1"
    db_user: str = "root"
    db_password: str = ""
    db_name: str = "wortle"
    database_url: Optional[str] = None
    cors_origin: str = "*"
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-3.5-turbo"
    upstream_timeout: float = 5.0
    state_backend: str = "memory"
    redis_url: Optional[str] = None
    redis_token: Optional[str] = None

    @property
    def generation_enabled(self) -> bool:
        return bool(self.openai_api_key)


def _get(environ: Mapping[str, str], name: str, default: Optional[str] = None) -> Optional[str]:
    value = environ.get(name)
    if value is None or value.strip() == "":
        return default
    return value.strip()


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from the environment.

    Raises ConfigurationError when a mandatory value is invalid. A missing
    OPENAI_API_KEY is not fatal: it only disables example generation.
    """
    environ = os.environ if environ is None else environ

    errors = validate_env(environ)
    if errors:
        for error in errors:
            print(f"[CONFIG] {error}")
        raise ConfigurationError("; ".join(errors))

    settings = Settings(
        db_host=_get(environ, "DB_HOST", "127.0.0.1"),
        db_user=_get(environ, "DB_USER", "root"),
        # Passwords are taken verbatim
        db_password=environ.get("DB_PASS", ""),
        db_name=_get(environ, "DB_NAME", "wortle"),
        database_url=_get(environ, "DATABASE_URL"),
        cors_origin=_get(environ, "CORS_ORIGIN", "*"),
        openai_api_key=_get(environ, "OPENAI_API_KEY"),
        openai_model=_get(environ, "OPENAI_MODEL", "gpt-3.5-turbo"),
        upstream_timeout=float(_get(environ, "UPSTREAM_TIMEOUT_SECONDS", "5")),
        state_backend=_get(environ, "STATE_BACKEND", "memory").lower(),
        redis_url=_get(environ, "UPSTASH_REDIS_REST_URL"),
        redis_token=_get(environ, "UPSTASH_REDIS_REST_TOKEN"),
    )

    if not settings.generation_enabled:
        print("[CONFIG] OPENAI_API_KEY not set, example generation is disabled")

    return settings


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get Settings singleton."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings
