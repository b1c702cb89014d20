"""
User Repository
Create-or-update of player records keyed by the Google subject
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from ..errors import StoreError
from ..services.display_name_service import generate_display_name
from .database import session_scope
from .models import Player


@dataclass
class PlayerProfile:
    """Player record as returned to the client."""
    id: int
    google_id: str
    email: Optional[str]
    name: Optional[str]
    picture: Optional[str]
    display_name: str
    total_score: int

    @classmethod
    def from_player(cls, player: Player) -> "PlayerProfile":
        return cls(
            id=player.id,
            google_id=player.google_id,
            email=player.email,
            name=player.name,
            picture=player.picture,
            display_name=player.display_name,
            total_score=player.total_score or 0,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "google_id": self.google_id,
            "email": self.email,
            "name": self.name,
            "picture": self.picture,
            "display_name": self.display_name,
            "total_score": self.total_score,
        }


def _find_player(session: Session, google_id: str) -> Optional[Player]:
    return session.execute(
        select(Player).where(Player.google_id == google_id)
    ).scalar_one_or_none()


def _insert_player(
    session: Session,
    google_id: str,
    email: Optional[str],
    name: Optional[str],
    picture: Optional[str],
    display_name: str,
) -> Optional[Player]:
    """Insert a new player. Returns None if another request inserted it first."""
    player = Player(
        google_id=google_id,
        email=email,
        name=name,
        picture=picture,
        display_name=display_name,
        total_score=0,
    )
    session.add(player)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        print(f"[DATA] Player {google_id} was created concurrently, reusing it")
        return None
    return player


def upsert_player(
    session_factory: sessionmaker,
    google_id: str,
    email: Optional[str],
    name: Optional[str],
    picture: Optional[str],
    name_generator: Callable[[], str] = generate_display_name,
) -> PlayerProfile:
    """
    Create the player on first sight, otherwise refresh email/name/picture.

    display_name and total_score of an existing player are never touched.
    Raises StoreError on any database failure.
    """
    try:
        with session_scope(session_factory) as session:
            player = _find_player(session, google_id)

            if player is None:
                player = _insert_player(
                    session, google_id, email, name, picture, name_generator()
                )
                if player is not None:
                    print(f"[DATA] Created player {player.id} ({player.display_name})")
                    return PlayerProfile.from_player(player)

                player = _find_player(session, google_id)
                if player is None:
                    raise StoreError("Player insert was rejected but no existing player was found")

            player.email = email
            player.name = name
            player.picture = picture
            session.commit()
            return PlayerProfile.from_player(player)
    except SQLAlchemyError as e:
        print(f"[DATA] Failed to upsert player {google_id}: {e}")
        raise StoreError(f"Database operation failed: {e.__class__.__name__}") from e
