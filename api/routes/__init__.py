"""
Routes Module
Modular route handlers for the API
"""

from .auth import AUTH_PATH, handle_auth_routes
from .examples import EXAMPLE_PATH, handle_examples_routes

ROUTE_HANDLERS = (
    handle_auth_routes,
    handle_examples_routes,
)

__all__ = [
    "AUTH_PATH",
    "EXAMPLE_PATH",
    "ROUTE_HANDLERS",
    "handle_auth_routes",
    "handle_examples_routes",
]
