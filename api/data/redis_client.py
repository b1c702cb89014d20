"""
Redis Client Module
Centralized Upstash Redis connection management
"""

from ..config import Settings

# Lazy-initialized Redis client
_redis_client = None


def is_redis_configured(settings: Settings) -> bool:
    """Check if Redis is properly configured."""
    return bool(settings.redis_url and settings.redis_token)


def get_redis(settings: Settings):
    """Get Redis client singleton. Returns None when Redis is unavailable."""
    global _redis_client
    if _redis_client is None:
        if not is_redis_configured(settings):
            return None
        try:
            from upstash_redis import Redis
            _redis_client = Redis(
                url=settings.redis_url,
                token=settings.redis_token,
            )
        except Exception as e:
            print(f"[DATA] Failed to initialize Redis: {e}")
            return None
    return _redis_client
