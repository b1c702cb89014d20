"""Vercel serverless function for the Wortle API (auth + example sentences)."""

import json
from http.server import BaseHTTPRequestHandler
from urllib.parse import urlsplit

from api.config import get_settings
from api.context import get_context
from api.errors import ApiError, ConfigurationError, ValidationError
from api.routes import ROUTE_HANDLERS
from api.security.validators import check_request_size, parse_json_body


class handler(BaseHTTPRequestHandler):
    _context = None

    @property
    def context(self):
        # Built lazily: a broken configuration only fails requests that need it
        if self._context is None:
            self._context = get_context()
        return self._context

    def _get_cors_origin(self) -> str:
        if self._context is not None:
            return self._context.settings.cors_origin
        try:
            return get_settings().cors_origin
        except ConfigurationError:
            return "*"

    def _send_json(self, data, status=200):
        payload = json.dumps(data).encode()
        self.send_response(status)
        self.send_header('Content-Type', 'application/json')
        self.send_header('Content-Length', str(len(payload)))
        self.send_header('Access-Control-Allow-Origin', self._get_cors_origin())
        self.send_header('Access-Control-Allow-Methods', 'POST, OPTIONS')
        self.send_header('Access-Control-Allow-Headers', 'Content-Type')
        # Security headers
        self.send_header('X-Content-Type-Options', 'nosniff')
        self.send_header('Cache-Control', 'no-store, no-cache, must-revalidate')
        self.end_headers()
        if self.command != "HEAD":
            self.wfile.write(payload)

    def _send_error(self, error, detail, status):
        self._send_json({"error": error, "detail": detail}, status)

    def read_body(self, endpoint_type: str = "general") -> dict:
        """Read and decode the JSON body. Raises ApiError subclasses."""
        try:
            content_length = int(self.headers.get('Content-Length', 0) or 0)
        except ValueError:
            raise ValidationError("Invalid Content-Length")
        check_request_size(content_length, endpoint_type)
        raw = self.rfile.read(content_length) if content_length > 0 else b""
        return parse_json_body(raw)

    def _dispatch(self, method: str):
        path = urlsplit(self.path).path

        try:
            for route in ROUTE_HANDLERS:
                result = route(self, method, path)
                if result is not None:
                    status, body = result
                    return self._send_json(body, status)
        except ApiError as e:
            return self._send_json(e.to_body(), e.status)
        except ConfigurationError as e:
            print(f"[CONFIG] {e}")
            return self._send_error("Configuration error", str(e), 500)
        except Exception as e:
            print(f"[API] Unhandled error on {method} {path}: {e!r}")
            return self._send_error("Internal error", e.__class__.__name__, 500)

        return self._send_error("Not found", f"No route for {path}", 404)

    def do_OPTIONS(self):
        # Preflight: always OK, body is never read
        self._send_json({"message": "OK"}, 200)

    def do_POST(self):
        self._dispatch("POST")

    def do_GET(self):
        self._dispatch("GET")

    def do_PUT(self):
        self._dispatch("PUT")

    def do_PATCH(self):
        self._dispatch("PATCH")

    def do_DELETE(self):
        self._dispatch("DELETE")

    def do_HEAD(self):
        self._dispatch("HEAD")

    def __getattr__(self, name):
        # Any other verb (TRACE, CONNECT, ...) gets the JSON 405 instead of a 501 page
        if name.startswith("do_"):
            return lambda: self._dispatch(name[3:])
        raise AttributeError(name)
