# /// script
# requires-python = ">=3.9"
# dependencies = [
#     "notmodified",
#     "httpx",
# ]
#
# [tool.uv.sources]
# notmodified = { path = "../", editable = true }
# ///


import asyncio

import httpx

from notmodified.asgi import ConditionalGetMiddleware


async def app(scope, receive, send):
    await send(
        {
            "type": "http.response.start",
            "status": 200,
            "headers": [
                (b"content-type", b"text/plain"),
                (b"last-modified", b"Tue, 14 Nov 2023 22:13:20 GMT"),
            ],
        }
    )
    await send({"type": "http.response.body", "body": b"Hello, World!"})


async def main():
    transport = httpx.ASGITransport(app=ConditionalGetMiddleware(app))
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        response = await client.get("/", headers={"If-Modified-Since": "Tue, 14 Nov 2023 22:13:20 GMT"})
        print(f"Response: status={response.status_code} body={response.content!r}")


if __name__ == "__main__":
    asyncio.run(main())
