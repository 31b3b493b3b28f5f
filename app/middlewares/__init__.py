"""ASGI middleware shared by every route: correlation ids and response headers."""

from __future__ import annotations

from .request_id import RequestIdMiddleware, principal_ctx_var, request_id_ctx_var
from .security_headers import SecurityHeadersMiddleware

__all__ = [
    "principal_ctx_var",
    "request_id_ctx_var",
    "RequestIdMiddleware",
    "SecurityHeadersMiddleware",
]
