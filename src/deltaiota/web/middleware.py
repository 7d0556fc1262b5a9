"""ASGI middleware."""

from typing import Any

from starlette.types import ASGIApp, Message, Receive, Scope, Send


class HeadResponseMiddleware:
    """Send status and headers only for HEAD requests, with ``content-length: 0``.

    Applies to every response, including error envelopes produced by exception handlers.
    """

    def __init__(self, app: ASGIApp) -> None:
        self._app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or scope["method"] != "HEAD":
            await self._app(scope, receive, send)
            return

        async def send_without_body(message: Message) -> None:
            if message["type"] == "http.response.start":
                message = {**message, "headers": self._zero_length(message.get("headers", []))}
            elif message["type"] == "http.response.body":
                message = {**message, "body": b""}
            await send(message)

        await self._app(scope, receive, send_without_body)

    @staticmethod
    def _zero_length(headers: Any) -> list[tuple[bytes, bytes]]:
        result = [(key, value) for key, value in headers if key.lower() != b"content-length"]
        result.append((b"content-length", b"0"))
        return result
