"""
Data Layer Module
Re-exports all data access modules
"""

from .redis_client import get_redis, is_redis_configured
from .database import (
    database_url,
    create_db_engine,
    create_session_factory,
    session_scope,
    init_db,
)
from .models import Base, Player
from .user_repository import PlayerProfile, upsert_player

__all__ = [
    # Redis client
    "get_redis",
    "is_redis_configured",
    # Database
    "database_url",
    "create_db_engine",
    "create_session_factory",
    "session_scope",
    "init_db",
    # Models
    "Base",
    "Player",
    # User repository
    "PlayerProfile",
    "upsert_player",
]
