"""Forwarded headers middleware."""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from typing import Callable

from shortlinks.common.headers import extract_forwarded_headers


class ForwardedHeadersMiddleware(BaseHTTPMiddleware):
    """Record the proxy-reported client address on the request state."""

    async def dispatch(self, request: Request, call_next: Callable):
        forwarded = extract_forwarded_headers(dict(request.headers))
        forwarded_for = forwarded["forwarded_for"]

        request.state.forwarded_proto = forwarded["forwarded_proto"]
        request.state.forwarded_host = forwarded["forwarded_host"]
        request.state.client_ip = forwarded_for.split(",")[0].strip() if forwarded_for else None

        return await call_next(request)
