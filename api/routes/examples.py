"""
Example Routes
Rate-limited, memoized example sentences for a word
"""

from typing import Any, Optional, Tuple

from ..errors import (
    AdmissionRejected,
    ApiError,
    ConfigurationError,
    ConfigurationMissing,
    MethodNotAllowed,
)
from ..security.validators import require_word
from ..services.example_cache import normalize_cache_key
from ..services.example_service import PARSED_JSON
from ..services.rate_limiter import get_client_ip

EXAMPLE_PATH = "/api/openai-example"

MISSING_KEY_DETAIL = "OpenAI API key not set. Add OPENAI_API_KEY to environment variables."


def handle_examples_routes(handler, method: str, path: str) -> Optional[Tuple[int, Any]]:
    """
    Route handler for example generation.

    Order: method, rate limit, body, configuration, cache, generation.

    Returns:
        Tuple of (status_code, response_body) or None if not handled
    """
    if path != EXAMPLE_PATH:
        return None  # Not handled

    try:
        # POST /api/openai-example - Example sentence for a word
        if method != "POST":
            raise MethodNotAllowed(method)

        # Without a configuration there is no limiter. The request still ends
        # in a configuration error, but only after the body has been checked.
        context = None
        config_error = None
        try:
            context = handler.context
        except ConfigurationError as e:
            config_error = e

        client_ip = get_client_ip(handler.headers)
        if context is not None and not context.rate_limiter.admit(client_ip):
            print(f"[RATELIMIT] Rejected example request from {client_ip}")
            raise AdmissionRejected()

        body = handler.read_body("example")
        word = require_word(body)

        if config_error is not None:
            raise config_error
        if context.example_generator is None:
            raise ConfigurationMissing(MISSING_KEY_DETAIL)

        cache_key = normalize_cache_key(word)
        cached = context.example_cache.get(cache_key)
        if cached is not None:
            print(f"[EXAMPLE] Cache hit for word: {word}")
            return 200, {"from_cache": True, "result": cached.to_dict()}

        print(f"[EXAMPLE] Generating example for word: {word}")
        parsed = context.example_generator.generate(word)
        if parsed.source != PARSED_JSON:
            print(f"[EXAMPLE] Model reply for {word} was not JSON, used line fallback")

        context.example_cache.put(cache_key, parsed.result)
        return 200, {"from_cache": False, "result": parsed.result.to_dict()}

    except ApiError as e:
        if e.status >= 500:
            print(f"[EXAMPLE] {e.error}: {e.detail}")
        return e.status, e.to_body()
