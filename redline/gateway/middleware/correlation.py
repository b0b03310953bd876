"""Request correlation IDs.

Every HTTP request gets a ``request_id``: the client's ``X-Request-ID`` if
it is well formed, otherwise a generated ``req_<hex>``. The id is bound to
structlog contextvars for the duration of the request, stored on
``request.state`` and echoed in the response header.
"""

from __future__ import annotations

import re
import uuid

from starlette.datastructures import Headers, MutableHeaders
from starlette.requests import Request
from starlette.types import ASGIApp, Message, Receive, Scope, Send

import redline.logging

REQUEST_ID_HEADER = "X-Request-ID"

# At most 128 characters of [A-Za-z0-9_.-]; anything else is replaced.
_VALID_REQUEST_ID_RE = re.compile(r"^[a-zA-Z0-9_.\-]{1,128}$")


def _generate_request_id() -> str:
    return f"req_{uuid.uuid4().hex}"


def _sanitize_request_id(raw: str | None) -> str:
    """Keep a client-supplied id only if it is well formed."""
    if raw and _VALID_REQUEST_ID_RE.match(raw):
        return raw
    return _generate_request_id()


class CorrelationIdMiddleware:
    """ASGI middleware assigning a correlation id to each HTTP request.

    Written against raw ASGI rather than ``BaseHTTPMiddleware`` so the
    CSV export response passes through untouched.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = _sanitize_request_id(Headers(scope=scope).get(REQUEST_ID_HEADER))
        redline.logging.reset_context(request_id=request_id)
        Request(scope).state.request_id = request_id

        async def send_with_request_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                MutableHeaders(scope=message).append(REQUEST_ID_HEADER, request_id)
            await send(message)

        await self.app(scope, receive, send_with_request_id)
