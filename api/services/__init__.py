"""
Services Module
Re-exports all service modules
"""

from .display_name_service import (
    DISPLAY_NAME_LABELS,
    DISPLAY_NAME_PATTERN,
    generate_display_name,
)

from .google_service import (
    VerifiedIdentity,
    verify_google_token,
)

from .rate_limiter import (
    RATE_LIMIT,
    RATE_WINDOW_SECONDS,
    RateLimiter,
    InMemoryRateLimiter,
    UpstashRateLimiter,
    get_client_ip,
)

from .example_service import (
    ExampleResult,
    ParsedExample,
    ExampleGenerator,
    build_prompt,
    parse_example_text,
    get_openai_client,
)

from .example_cache import (
    ExampleCache,
    InMemoryExampleCache,
    UpstashExampleCache,
    normalize_cache_key,
)

__all__ = [
    # Display names
    "DISPLAY_NAME_LABELS",
    "DISPLAY_NAME_PATTERN",
    "generate_display_name",
    # Google
    "VerifiedIdentity",
    "verify_google_token",
    # Rate limiting
    "RATE_LIMIT",
    "RATE_WINDOW_SECONDS",
    "RateLimiter",
    "InMemoryRateLimiter",
    "UpstashRateLimiter",
    "get_client_ip",
    # Example generation
    "ExampleResult",
    "ParsedExample",
    "ExampleGenerator",
    "build_prompt",
    "parse_example_text",
    "get_openai_client",
    # Example cache
    "ExampleCache",
    "InMemoryExampleCache",
    "UpstashExampleCache",
    "normalize_cache_key",
]
