"""
Centralized Input Validation Module

Validation of request bodies and of the fields each endpoint needs,
with one consistent error type for every rejection.
"""

import json
from typing import Any, Dict, Optional, Tuple
from dataclasses import dataclass

from ..errors import PayloadTooLarge, ValidationError


@dataclass
class ValidationResult:
    """Result of a validation operation."""
    is_valid: bool
    value: Optional[str]
    error: Optional[str] = None


MAX_ACCESS_TOKEN_LENGTH = 4096
MAX_WORD_LENGTH = 100


def validate_text(value: Any, max_length: int) -> ValidationResult:
    """
    Require a string that is non-empty once stripped.

    The value itself is returned untouched; callers decide on normalization.
    """
    if value is None:
        return ValidationResult(False, None, "Value is required")

    if not isinstance(value, str):
        return ValidationResult(False, None, "Value must be a string")

    if not value.strip():
        return ValidationResult(False, None, "Value must not be empty")

    if len(value) > max_length:
        return ValidationResult(False, None, f"Value must be at most {max_length} characters")

    return ValidationResult(True, value, None)


def sanitize_access_token(token: Any) -> Optional[str]:
    """
    Validate the Google access token field.

    Only presence is checked, Google decides whether the token is good.
    """
    result = validate_text(token, MAX_ACCESS_TOKEN_LENGTH)
    return result.value.strip() if result.is_valid else None


def sanitize_word(word: Any) -> Optional[str]:
    """Validate the word field. Returns the word as sent, or None if invalid."""
    result = validate_text(word, MAX_WORD_LENGTH)
    return result.value if result.is_valid else None


def require_access_token(body: Dict[str, Any]) -> str:
    token = sanitize_access_token(body.get("access_token"))
    if token is None:
        raise ValidationError("Missing access_token")
    return token


def require_word(body: Dict[str, Any]) -> str:
    word = sanitize_word(body.get("word"))
    if word is None:
        raise ValidationError("Missing or empty word parameter")
    return word


def validate_request_body_size(
    content_length: int,
    max_size: int = 10240,  # 10KB default
) -> Tuple[bool, str]:
    """
    Validate request body size.

    Args:
        content_length: Content-Length header value
        max_size: Maximum allowed size in bytes

    Returns:
        Tuple of (is_valid, error_message)
    """
    if content_length <= 0:
        return True, ""  # Empty body is OK

    if content_length > max_size:
        return False, f"Request body too large. Maximum size is {max_size} bytes."

    return True, ""


def parse_json_body(raw: bytes) -> Dict[str, Any]:
    """
    Decode a request body into a dict. An empty body counts as {}.

    Raises:
        ValidationError: body is not a JSON object
    """
    if not raw:
        return {}
    try:
        body = json.loads(raw)
    except (ValueError, UnicodeDecodeError):
        raise ValidationError("Invalid JSON body", "Request body must be a JSON object")
    if not isinstance(body, dict):
        raise ValidationError("Invalid JSON body", "Request body must be a JSON object")
    return body


# Request body size limits by endpoint type
REQUEST_SIZE_LIMITS = {
    "general": 10240,      # 10KB
    "auth": 8192,          # 8KB, access tokens can be long
    "example": 1024,       # 1KB
}


def get_request_size_limit(endpoint_type: str) -> int:
    """Get the request body size limit for an endpoint type."""
    return REQUEST_SIZE_LIMITS.get(endpoint_type, REQUEST_SIZE_LIMITS["general"])


def check_request_size(content_length: int, endpoint_type: str) -> None:
    is_valid, message = validate_request_body_size(
        content_length, get_request_size_limit(endpoint_type)
    )
    if not is_valid:
        raise PayloadTooLarge(message)
