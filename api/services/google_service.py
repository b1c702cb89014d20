"""
Google Service
Verifies Google access tokens and extracts the player's identity
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from ..errors import VerificationError

GOOGLE_TOKENINFO_URL = "https://www.googleapis.com/oauth2/v3/tokeninfo"

DEFAULT_TIMEOUT_SECONDS = 5.0


@dataclass
class VerifiedIdentity:
    """What Google vouches for. Missing profile fields are None, never ""."""
    subject: str
    email: Optional[str] = None
    name: Optional[str] = None
    picture: Optional[str] = None


def _optional_claim(token_info: Dict[str, Any], claim: str) -> Optional[str]:
    value = token_info.get(claim)
    if value is None or value == "":
        return None
    return str(value)


def verify_google_token(access_token: str, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> VerifiedIdentity:
    """
    Verify an access token against Google's tokeninfo endpoint.

    Never retried: a provider outage surfaces immediately as VerificationError.

    Raises:
        VerificationError: token missing, rejected, unreadable, or Google unreachable
    """
    if not access_token:
        raise VerificationError(VerificationError.MISSING_TOKEN, "Missing access_token")

    try:
        response = requests.get(
            GOOGLE_TOKENINFO_URL,
            params={"access_token": access_token},
            timeout=timeout,
        )
    except requests.Timeout as e:
        raise VerificationError(
            VerificationError.TIMEOUT,
            f"Google verification timed out after {timeout:g}s",
        ) from e
    except requests.RequestException as e:
        raise VerificationError(
            VerificationError.TRANSPORT_ERROR,
            f"Google verification request failed: {e.__class__.__name__}",
        ) from e

    if response.status_code != 200:
        raise VerificationError(
            VerificationError.PROVIDER_REJECTED,
            f"Google verification failed: {response.status_code}",
        )

    try:
        token_info = response.json()
    except ValueError as e:
        raise VerificationError(
            VerificationError.MALFORMED_RESPONSE,
            "Google verification returned a non-JSON body",
        ) from e

    if not isinstance(token_info, dict) or not token_info.get("sub"):
        raise VerificationError(
            VerificationError.MALFORMED_RESPONSE,
            "Invalid token: missing sub claim",
        )

    return VerifiedIdentity(
        subject=str(token_info["sub"]),
        email=_optional_claim(token_info, "email"),
        name=_optional_claim(token_info, "name"),
        picture=_optional_claim(token_info, "picture"),
    )
