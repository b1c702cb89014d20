"""
Auth Routes
Resolves a Google access token into a player profile
"""

from typing import Any, Optional, Tuple

from ..data import upsert_player
from ..errors import ApiError, MethodNotAllowed, VerificationError
from ..security.validators import require_access_token

AUTH_PATH = "/api/auth-google"


def handle_auth_routes(handler, method: str, path: str) -> Optional[Tuple[int, Any]]:
    """
    Route handler for authentication endpoints.

    The body is validated before the context is built, so a malformed request
    is a 400 even when the configuration is broken.

    Returns:
        Tuple of (status_code, response_body) or None if not handled
    """
    if path != AUTH_PATH:
        return None  # Not handled

    try:
        # POST /api/auth-google - Verify token and upsert the player
        if method != "POST":
            raise MethodNotAllowed(method)

        body = handler.read_body("auth")
        access_token = require_access_token(body)

        context = handler.context
        identity = context.verify_token(access_token)
        player = upsert_player(
            context.session_factory,
            identity.subject,
            identity.email,
            identity.name,
            identity.picture,
        )
        print(f"[AUTH] Resolved player {player.id}")
        return 200, {"user": player.to_dict()}

    except VerificationError as e:
        print(f"[AUTH] Verification failed ({e.reason}): {e.detail}")
        return e.status, e.to_body()
    except ApiError as e:
        if e.status >= 500:
            print(f"[AUTH] {e.error}: {e.detail}")
        return e.status, e.to_body()
