from __future__ import annotations

from typing import Any

import pytest
from inline_snapshot import snapshot

from notmodified import ConditionalOptions
from notmodified.asgi import ConditionalGetMiddleware, _ASGIScope

LAST_MODIFIED = b"Tue, 14 Nov 2023 22:13:20 GMT"


# Mock ASGI application that returns a response with Last-Modified
async def last_modified_asgi_app(scope: _ASGIScope, receive: Any, send: Any) -> None:
    """Simple ASGI app that returns a 200 OK response with a Last-Modified header."""
    if scope["type"] != "http":
        return

    await send(
        {
            "type": "http.response.start",
            "status": 200,
            "headers": [
                (b"content-type", b"text/plain"),
                (b"content-length", b"13"),
                (b"cache-control", b"max-age=60"),
                (b"last-modified", LAST_MODIFIED),
            ],
        }
    )
    await send(
        {
            "type": "http.response.body",
            "body": b"Hello, World!",
            "more_body": False,
        }
    )


# Mock ASGI application that streams its body
async def streaming_asgi_app(scope: _ASGIScope, receive: Any, send: Any) -> None:
    """ASGI app that streams response in multiple chunks."""
    if scope["type"] != "http":
        return

    await send(
        {
            "type": "http.response.start",
            "status": 200,
            "headers": [(b"last-modified", LAST_MODIFIED)],
        }
    )
    for i in range(3):
        await send(
            {
                "type": "http.response.body",
                "body": f"Chunk {i}\n".encode(),
                "more_body": True,
            }
        )
    await send({"type": "http.response.body", "body": b"", "more_body": False})


# Mock ASGI application without Last-Modified
async def plain_asgi_app(scope: _ASGIScope, receive: Any, send: Any) -> None:
    """ASGI app that returns a response without validators."""
    if scope["type"] != "http":
        return

    await send(
        {
            "type": "http.response.start",
            "status": 200,
            "headers": [(b"content-type", b"text/plain")],
        }
    )
    await send({"type": "http.response.body", "body": b"Hello, World!", "more_body": False})


# Mock ASGI application that fails with Last-Modified set
async def error_asgi_app(scope: _ASGIScope, receive: Any, send: Any) -> None:
    """ASGI app that returns a 500 carrying Last-Modified."""
    await send(
        {
            "type": "http.response.start",
            "status": 500,
            "headers": [(b"last-modified", LAST_MODIFIED)],
        }
    )
    await send({"type": "http.response.body", "body": b"Oops", "more_body": False})


def create_asgi_scope(
    method: str = "GET",
    path: str = "/",
    headers: list[tuple[bytes, bytes]] | None = None,
) -> _ASGIScope:
    """Create an ASGI HTTP scope for testing."""
    return {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": method,
        "scheme": "https",
        "path": path,
        "query_string": b"",
        "root_path": "",
        "headers": headers or [],
        "server": ("testserver", 80),
    }


async def simple_receive() -> dict[str, Any]:
    """Simple receive callable that returns empty body."""
    return {"type": "http.request", "body": b"", "more_body": False}


class ResponseCollector:
    """Helper class to collect ASGI response messages."""

    def __init__(self) -> None:
        self.messages: list[dict[str, Any]] = []

    async def send(self, message: dict[str, Any]) -> None:
        self.messages.append(message)

    @property
    def status(self) -> int | None:
        for message in self.messages:
            if message["type"] == "http.response.start":
                return message["status"]
        return None

    @property
    def headers(self) -> list[tuple[bytes, bytes]]:
        for message in self.messages:
            if message["type"] == "http.response.start":
                return message.get("headers", [])
        return []

    def get_body(self) -> bytes:
        return b"".join(m.get("body", b"") for m in self.messages if m["type"] == "http.response.body")

    def get_header(self, name: str) -> bytes | None:
        for key, value in self.headers:
            if key.decode().lower() == name.lower():
                return value
        return None


@pytest.mark.anyio
async def test_fresh_request_gets_not_modified(caplog: pytest.LogCaptureFixture) -> None:
    middleware = ConditionalGetMiddleware(app=last_modified_asgi_app)
    scope = create_asgi_scope(headers=[(b"if-modified-since", LAST_MODIFIED)])
    collector = ResponseCollector()

    with caplog.at_level("DEBUG", logger="notmodified"):
        await middleware(scope, simple_receive, collector.send)

    assert collector.status == 304
    assert collector.get_body() == b""
    assert collector.headers == snapshot(
        [
            (b"cache-control", b"max-age=60"),
            (b"last-modified", b"Tue, 14 Nov 2023 22:13:20 GMT"),
        ]
    )
    assert caplog.messages == snapshot(
        [
            "Conditional request: method=GET path=/ since=1700000000",
            "Not modified: method=GET path=/ last_modified=1700000000",
        ]
    )


@pytest.mark.anyio
async def test_newer_client_date_gets_not_modified() -> None:
    middleware = ConditionalGetMiddleware(app=last_modified_asgi_app)
    scope = create_asgi_scope(headers=[(b"If-Modified-Since", b"Wed, 15 Nov 2023 00:00:00 GMT")])
    collector = ResponseCollector()

    await middleware(scope, simple_receive, collector.send)

    assert collector.status == 304


@pytest.mark.anyio
async def test_stale_request_passes_through() -> None:
    middleware = ConditionalGetMiddleware(app=last_modified_asgi_app)
    scope = create_asgi_scope(headers=[(b"if-modified-since", b"Tue, 14 Nov 2023 22:13:19 GMT")])
    collector = ResponseCollector()

    await middleware(scope, simple_receive, collector.send)

    assert collector.status == 200
    assert collector.get_body() == b"Hello, World!"
    assert collector.get_header("content-length") == b"13"


@pytest.mark.anyio
async def test_unconditional_request_passes_through() -> None:
    middleware = ConditionalGetMiddleware(app=last_modified_asgi_app)
    collector = ResponseCollector()

    await middleware(create_asgi_scope(), simple_receive, collector.send)

    assert collector.status == 200
    assert collector.get_body() == b"Hello, World!"


@pytest.mark.anyio
async def test_malformed_header_passes_through() -> None:
    middleware = ConditionalGetMiddleware(app=last_modified_asgi_app)
    scope = create_asgi_scope(headers=[(b"if-modified-since", b"soon")])
    collector = ResponseCollector()

    await middleware(scope, simple_receive, collector.send)

    assert collector.status == 200


@pytest.mark.anyio
async def test_streamed_body_is_swallowed() -> None:
    middleware = ConditionalGetMiddleware(app=streaming_asgi_app)
    scope = create_asgi_scope(headers=[(b"if-modified-since", LAST_MODIFIED)])
    collector = ResponseCollector()

    await middleware(scope, simple_receive, collector.send)

    assert collector.status == 304
    assert [m["type"] for m in collector.messages] == ["http.response.start", "http.response.body"]
    assert collector.messages[-1] == {"type": "http.response.body", "body": b"", "more_body": False}


@pytest.mark.anyio
async def test_response_without_last_modified_passes_through() -> None:
    middleware = ConditionalGetMiddleware(app=plain_asgi_app)
    scope = create_asgi_scope(headers=[(b"if-modified-since", LAST_MODIFIED)])
    collector = ResponseCollector()

    await middleware(scope, simple_receive, collector.send)

    assert collector.status == 200
    assert collector.get_body() == b"Hello, World!"


@pytest.mark.anyio
async def test_non_200_response_passes_through() -> None:
    middleware = ConditionalGetMiddleware(app=error_asgi_app)
    scope = create_asgi_scope(headers=[(b"if-modified-since", LAST_MODIFIED)])
    collector = ResponseCollector()

    await middleware(scope, simple_receive, collector.send)

    assert collector.status == 500
    assert collector.get_body() == b"Oops"


@pytest.mark.anyio
async def test_unsupported_method_passes_through() -> None:
    middleware = ConditionalGetMiddleware(app=last_modified_asgi_app)
    scope = create_asgi_scope(method="POST", headers=[(b"if-modified-since", LAST_MODIFIED)])
    collector = ResponseCollector()

    await middleware(scope, simple_receive, collector.send)

    assert collector.status == 200


@pytest.mark.anyio
async def test_custom_options() -> None:
    options = ConditionalOptions(supported_methods=["GET"], strip_headers=["Cache-Control"])
    middleware = ConditionalGetMiddleware(app=last_modified_asgi_app, options=options)

    head = ResponseCollector()
    await middleware(
        create_asgi_scope(method="HEAD", headers=[(b"if-modified-since", LAST_MODIFIED)]),
        simple_receive,
        head.send,
    )
    get = ResponseCollector()
    await middleware(
        create_asgi_scope(headers=[(b"if-modified-since", LAST_MODIFIED)]),
        simple_receive,
        get.send,
    )

    assert head.status == 200
    assert get.status == 304
    assert get.get_header("cache-control") is None
    assert get.get_header("content-type") == b"text/plain"


@pytest.mark.anyio
async def test_non_http_scope_passes_through() -> None:
    calls: list[str] = []

    async def lifespan_app(scope: Any, receive: Any, send: Any) -> None:
        calls.append(scope["type"])

    middleware = ConditionalGetMiddleware(app=lifespan_app)
    await middleware({"type": "lifespan"}, simple_receive, ResponseCollector().send)

    assert calls == ["lifespan"]
