from __future__ import annotations

import logging
import typing as t

from notmodified._config import ConditionalOptions
from notmodified._core._headers import Headers
from notmodified._core._freshness import HTTP_NOT_MODIFIED, is_not_modified

logger = logging.getLogger(__name__)


class _ASGIScope(t.TypedDict, total=False):
    """ASGI HTTP scope type."""

    type: str
    asgi: dict[str, str]
    http_version: str
    method: str
    scheme: str
    path: str
    query_string: bytes
    root_path: str
    headers: list[tuple[bytes, bytes]]
    server: tuple[str, int | None] | None
    client: tuple[str, int] | None
    state: dict[str, t.Any]
    extensions: dict[str, t.Any]


_Scope = _ASGIScope
_Receive = t.Callable[[], t.Awaitable[dict[str, t.Any]]]
_Send = t.Callable[[dict[str, t.Any]], t.Awaitable[None]]
_ASGIApp = t.Callable[[_Scope, _Receive, _Send], t.Awaitable[None]]


class ConditionalGetMiddleware:
    """
    ASGI middleware that answers fresh conditional GET requests with 304.

    The wrapped application still runs; when it starts a 200 response whose
    `Last-Modified` is not newer than the request's `If-Modified-Since`, the
    response is replaced by an empty 304 and the application's body is
    discarded.

    Use it in front of applications that set `Last-Modified` but never look
    at `If-Modified-Since` themselves. Endpoints that can skip expensive work
    should use `notmodified.fastapi.Detacher` instead.

    Args:
        app: The ASGI application to wrap.
        options: Which methods are evaluated and which headers are stripped
            from the 304. Defaults to `ConditionalOptions()`.

    Example:
        ```python
        from notmodified.asgi import ConditionalGetMiddleware

        app = ConditionalGetMiddleware(app=my_asgi_app)
        ```
    """

    def __init__(self, app: _ASGIApp, options: ConditionalOptions | None = None) -> None:
        self.app = app
        self._options = options or ConditionalOptions()

        logger.info(
            "Initialized ConditionalGetMiddleware with supported_methods=%s",
            ",".join(self._options.supported_methods),
        )

    async def __call__(self, scope: _Scope, receive: _Receive, send: _Send) -> None:
        """
        Handle an ASGI request.

        Args:
            scope: The ASGI scope dictionary.
            receive: The ASGI receive callable.
            send: The ASGI send callable.
        """
        if scope["type"] != "http":
            logger.debug("Skipping non-HTTP request: type=%s", scope["type"])
            await self.app(scope, receive, send)
            return

        method = scope.get("method", "GET")
        path = scope.get("path", "/")

        if not self._options.supports(method):
            logger.debug("Skipping unsupported method: method=%s path=%s", method, path)
            await self.app(scope, receive, send)
            return

        since = Headers.from_raw(scope.get("headers", [])).if_modified_since()
        if since is None:
            await self.app(scope, receive, send)
            return

        logger.debug("Conditional request: method=%s path=%s since=%d", method, path, since)

        not_modified = False

        async def conditional_send(message: dict[str, t.Any]) -> None:
            nonlocal not_modified

            if message["type"] == "http.response.start":
                if message["status"] == 200:
                    headers = Headers.from_raw(message.get("headers", []))
                    last_modified = headers.last_modified()
                    if last_modified is not None and is_not_modified(since, last_modified):
                        not_modified = True
                        message = self._not_modified_start(message, headers)
                        logger.info(
                            "Not modified: method=%s path=%s last_modified=%d",
                            method,
                            path,
                            last_modified,
                        )
                await send(message)
                if not_modified:
                    await send({"type": "http.response.body", "body": b"", "more_body": False})
            elif message["type"] == "http.response.body":
                if not_modified:
                    # body already terminated
                    return
                await send(message)
            else:
                await send(message)

        await self.app(scope, receive, conditional_send)

    def _not_modified_start(self, message: dict[str, t.Any], headers: Headers) -> dict[str, t.Any]:
        kept = headers.without(self._options.strip_headers)
        return {
            **message,
            "status": HTTP_NOT_MODIFIED,
            "headers": kept.raw(),
        }
