"""
Error Taxonomy
Every failure a request can run into, with its status code and envelope label
"""

from typing import Any, Dict, Optional


class ApiError(Exception):
    """Base error that maps directly onto a JSON error envelope."""

    status = 500
    error = "Internal error"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(detail or self.error)
        self.detail = detail or self.error

    def to_body(self) -> Dict[str, Any]:
        return {"error": self.error, "detail": self.detail}


class ValidationError(ApiError):
    status = 400
    error = "Bad request"

    def __init__(self, error: str, detail: Optional[str] = None):
        self.error = error
        super().__init__(detail or error)


class PayloadTooLarge(ApiError):
    status = 413
    error = "Payload too large"


class MethodNotAllowed(ApiError):
    status = 405
    error = "Method not allowed"

    def __init__(self, method: str):
        super().__init__(f"{method} is not supported, use POST")


class AdmissionRejected(ApiError):
    """Not an error condition: the client simply has to wait."""

    status = 429
    error = "Rate limited"

    def __init__(self, detail: str = "Too many requests"):
        super().__init__(detail)


class VerificationError(ApiError):
    """Identity provider refused the token or answered with garbage."""

    error = "Authentication failed"

    MISSING_TOKEN = "MissingToken"
    PROVIDER_REJECTED = "ProviderRejected"
    MALFORMED_RESPONSE = "MalformedResponse"
    TIMEOUT = "Timeout"
    TRANSPORT_ERROR = "TransportError"

    def __init__(self, reason: str, detail: str):
        super().__init__(detail)
        self.reason = reason


class StoreError(ApiError):
    """Store failure during sign-in. The detail names the database problem."""

    error = "Authentication failed"


class GenerationError(ApiError):
    error = "Generation failed"


class ConfigurationMissing(ApiError):
    error = "Configuration error"


class ConfigurationError(RuntimeError):
    """Raised at startup when mandatory configuration is invalid."""
