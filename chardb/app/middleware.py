"""Request ID middleware for per-request log correlation.

This middleware:
1. Extracts the request ID from the X-Request-ID header if present
2. Generates a new UUID if the header is missing
3. Stores the ID in ``request.state.request_id``
4. Adds the ID to the logging context, so authorization decisions logged
   while serving the request carry it
5. Includes X-Request-ID in response headers
6. Clears the logging context after the request completes
"""

from __future__ import annotations

from typing import TYPE_CHECKING
import uuid

from starlette.datastructures import MutableHeaders

from chardb.infra.logging import clear_log_context, set_log_context

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Message, Receive, Scope, Send

__all__ = ["RequestIDMiddleware"]


class RequestIDMiddleware:
    """Pure ASGI middleware tagging every HTTP request with an ID.

    Usage:
        app = FastAPI()
        app.add_middleware(RequestIDMiddleware)
    """

    header_name = "x-request-id"
    state_key = "request_id"

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = dict(scope.get("headers", []))
        header_bytes = headers.get(self.header_name.encode("latin-1"))
        request_id = header_bytes.decode("latin-1") if header_bytes else str(uuid.uuid4())

        scope.setdefault("state", {})[self.state_key] = request_id
        set_log_context(request_id=request_id)

        async def send_with_header(message: Message) -> None:
            if message["type"] == "http.response.start":
                MutableHeaders(scope=message).append(self.header_name, request_id)
            await send(message)

        try:
            await self.app(scope, receive, send_with_header)
        finally:
            clear_log_context()
