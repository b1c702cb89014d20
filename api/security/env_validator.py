"""
Environment Variable Validation Module

Catalogues every environment variable the API reads and validates them
before the settings are built, so a broken deployment fails at startup
instead of halfway through a request.
"""

import os
from typing import Callable, Dict, List, Mapping, Optional, Tuple
from dataclasses import dataclass


VALID_STATE_BACKENDS = ("memory", "redis")


def _is_positive_number(value: str) -> bool:
    try:
        return float(value) > 0
    except ValueError:
        return False


@dataclass
class EnvVarConfig:
    """Configuration for an environment variable."""
    name: str
    required: bool = False
    description: str = ""
    default: Optional[str] = None
    sensitive: bool = True  # Don't log the value
    validator: Optional[Callable[[str], bool]] = None


ENV_VARS: List[EnvVarConfig] = [
    EnvVarConfig(
        name="DB_HOST",
        description="MySQL host",
        default="127.0.0.1",
        sensitive=False,
    ),
    EnvVarConfig(
        name="DB_USER",
        description="MySQL user",
        default="root",
        sensitive=False,
    ),
    EnvVarConfig(
        name="DB_PASS",
        description="MySQL password",
        default="",
    ),
    EnvVarConfig(
        name="DB_NAME",
        description="MySQL database name",
        default="wortle",
        sensitive=False,
    ),
    EnvVarConfig(
        name="DATABASE_URL",
        description="Full SQLAlchemy URL, overrides the DB_* variables",
    ),
    EnvVarConfig(
        name="CORS_ORIGIN",
        description="Value of the Access-Control-Allow-Origin header",
        default="*",
        sensitive=False,
    ),
    EnvVarConfig(
        name="OPENAI_API_KEY",
        description="OpenAI API key (example generation is disabled without it)",
    ),
    EnvVarConfig(
        name="OPENAI_MODEL",
        description="Chat model used for example sentences",
        default="gpt-3.5-turbo",
        sensitive=False,
    ),
    EnvVarConfig(
        name="UPSTREAM_TIMEOUT_SECONDS",
        description="Timeout for Google, OpenAI and database connects",
        default="5",
        sensitive=False,
        validator=_is_positive_number,
    ),
    EnvVarConfig(
        name="STATE_BACKEND",
        description="Where rate limit and cache state lives: memory or redis",
        default="memory",
        sensitive=False,
        validator=lambda v: v.strip().lower() in VALID_STATE_BACKENDS,
    ),
    EnvVarConfig(
        name="UPSTASH_REDIS_REST_URL",
        description="Upstash Redis REST API URL (needed for STATE_BACKEND=redis)",
        sensitive=False,
    ),
    EnvVarConfig(
        name="UPSTASH_REDIS_REST_TOKEN",
        description="Upstash Redis REST API token (needed for STATE_BACKEND=redis)",
    ),
]

# Only required once STATE_BACKEND=redis
REDIS_ENV_VARS = ("UPSTASH_REDIS_REST_URL", "UPSTASH_REDIS_REST_TOKEN")


def _lookup(environ: Mapping[str, str], config: EnvVarConfig) -> Optional[str]:
    value = environ.get(config.name)
    if value is None or value.strip() == "":
        return config.default
    return value


def validate_env_var(
    config: EnvVarConfig,
    environ: Optional[Mapping[str, str]] = None,
) -> Tuple[bool, Optional[str]]:
    """
    Validate a single environment variable.

    Returns:
        Tuple of (is_valid, error_message)
    """
    environ = os.environ if environ is None else environ
    value = _lookup(environ, config)

    if value is None or value == "":
        if config.required:
            return False, f"Missing required environment variable: {config.name}"
        return True, None

    if config.validator:
        try:
            if not config.validator(value):
                return False, f"Invalid value for {config.name}: validation failed"
        except Exception as e:
            return False, f"Invalid value for {config.name}: {e}"

    return True, None


def validate_env(environ: Optional[Mapping[str, str]] = None) -> List[str]:
    """
    Validate every catalogued variable.

    Returns the list of error messages (empty when the environment is usable).
    """
    environ = os.environ if environ is None else environ
    errors: List[str] = []

    for config in ENV_VARS:
        is_valid, error = validate_env_var(config, environ)
        if not is_valid and error:
            errors.append(error)

    backend = (environ.get("STATE_BACKEND") or "memory").strip().lower()
    if backend == "redis":
        for name in REDIS_ENV_VARS:
            if not (environ.get(name) or "").strip():
                errors.append(f"Missing required environment variable: {name} (STATE_BACKEND=redis)")

    return errors


def env_status(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Dict[str, object]]:
    """
    Get status of all environment variables (for debugging).

    Returns dict with var names and their status (set/unset, never values).
    """
    environ = os.environ if environ is None else environ
    status = {}

    for config in ENV_VARS:
        value = environ.get(config.name)
        is_set = value is not None and value.strip() != ""

        status[config.name] = {
            "is_set": is_set,
            "uses_default": not is_set and config.default is not None,
            "description": config.description,
            "valid": validate_env_var(config, environ)[0],
        }

    return status
