# /// script
# requires-python = ">=3.9"
# dependencies = [
#     "notmodified[fastapi]",
#     "httpx",
# ]
#
# [tool.uv.sources]
# notmodified = { path = "../", editable = true }
# ///


import asyncio
import time

import httpx
from fastapi import FastAPI

from notmodified.fastapi import Detacher, conditional

app = FastAPI()

started_at = int(time.time())
rendered_pages = 0


@app.get("/items/")
async def read_items(detacher: Detacher = conditional()):
    global rendered_pages
    detacher.detach_if_not_modified_since(started_at)
    rendered_pages += 1
    return {"rendered_pages": rendered_pages}


async def main():
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://testserver") as client:
        first = await client.get("/items/")
        print(f"First: status={first.status_code} last_modified={first.headers['last-modified']}")

        second = await client.get("/items/", headers={"If-Modified-Since": first.headers["last-modified"]})
        print(f"Second: status={second.status_code} body={second.content!r}")


if __name__ == "__main__":
    asyncio.run(main())
