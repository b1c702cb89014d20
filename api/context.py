"""
Application Context
The capabilities selected once at startup and shared by every request
"""

from dataclasses import dataclass
from typing import Callable, Optional

from sqlalchemy.orm import sessionmaker

from .config import Settings, get_settings
from .data import create_db_engine, create_session_factory, get_redis
from .errors import ConfigurationError
from .services.example_cache import ExampleCache, InMemoryExampleCache, UpstashExampleCache
from .services.example_service import ExampleGenerator, get_openai_client
from .services.google_service import VerifiedIdentity, verify_google_token
from .services.rate_limiter import InMemoryRateLimiter, RateLimiter, UpstashRateLimiter


@dataclass
class AppContext:
    settings: Settings
    session_factory: sessionmaker
    rate_limiter: RateLimiter
    example_cache: ExampleCache
    verify_token: Callable[[str], VerifiedIdentity]
    # None when OPENAI_API_KEY is absent
    example_generator: Optional[ExampleGenerator] = None


def build_context(settings: Settings) -> AppContext:
    """Wire the configured backends together."""
    if settings.state_backend == "redis":
        redis = get_redis(settings)
        if redis is None:
            raise ConfigurationError("STATE_BACKEND=redis but Upstash Redis is unavailable")
        rate_limiter = UpstashRateLimiter(redis)
        example_cache = UpstashExampleCache(redis)
    else:
        rate_limiter = InMemoryRateLimiter()
        example_cache = InMemoryExampleCache()

    example_generator = None
    if settings.generation_enabled:
        example_generator = ExampleGenerator(
            get_openai_client(settings.openai_api_key, settings.upstream_timeout),
            model=settings.openai_model,
        )

    timeout = settings.upstream_timeout

    def verify_token(access_token: str) -> VerifiedIdentity:
        return verify_google_token(access_token, timeout=timeout)

    return AppContext(
        settings=settings,
        session_factory=create_session_factory(create_db_engine(settings)),
        rate_limiter=rate_limiter,
        example_cache=example_cache,
        verify_token=verify_token,
        example_generator=example_generator,
    )


_context: Optional[AppContext] = None


def get_context() -> AppContext:
    """Get AppContext singleton (built on the first request of an instance)."""
    global _context
    if _context is None:
        _context = build_context(get_settings())
        print(f"[CONFIG] Context ready (state backend: {_context.settings.state_backend})")
    return _context
