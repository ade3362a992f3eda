"""
Pytest configuration and fixtures.

``fake_api`` runs an in-process aiohttp server that imitates the Vibe Slides
API. Deck and export status responses are scripted per test.
"""
import asyncio

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from vibe_slides.core import Settings

DECK_ID = "abcdef1234567890"
EXPORT_ID = "exp-42"
FILE_BYTES = b"%PDF-1.4 fake deck\n" * 64


class FakeVibeApi:
    """Scriptable stand-in for the remote API.

    Each entry in ``deck_responses`` / ``export_responses`` is a body dict;
    the optional ``_status`` and ``_headers`` keys control the HTTP response.
    The last entry is repeated once the script runs out.
    """

    def __init__(self):
        self.base_url = ""
        self.requests: list[dict] = []
        self.deck_responses: list[dict] = [
            {"status": "complete", "slides_count": 5, "slides_complete": 5},
        ]
        self.export_responses: list[dict] = [
            {"status": "complete", "progress": 100, "download_url": "{base}/files/deck.pdf"},
        ]
        self.create_response: dict = {"id": DECK_ID, "name": "Quarterly update", "status": "pending"}
        self.export_start_response: dict = {"export_id": EXPORT_ID}
        self.file_bytes = FILE_BYTES
        self.hits: dict[str, int] = {}
        self.slow_chunks = 15
        self.slow_delay = 0.1
        self.stall_seconds = 2.0

    def calls(self, method: str, path_prefix: str) -> list[dict]:
        return [
            r for r in self.requests
            if r["method"] == method and r["path"].startswith(path_prefix)
        ]

    def _next(self, script: list[dict]) -> dict:
        return script.pop(0) if len(script) > 1 else script[0]

    def _respond(self, entry: dict) -> web.Response:
        body = {k: v for k, v in entry.items() if not k.startswith("_")}
        if isinstance(body.get("download_url"), str):
            body["download_url"] = body["download_url"].replace("{base}", self.base_url)
        return web.json_response(
            body,
            status=entry.get("_status", 200),
            headers=entry.get("_headers"),
        )

    async def _record(self, request: web.Request) -> None:
        body = await request.json() if request.can_read_body else None
        self.requests.append({
            "method": request.method,
            "path": request.path,
            "query": dict(request.query),
            "headers": request.headers.copy(),
            "json": body,
        })

    async def create_deck(self, request: web.Request) -> web.Response:
        await self._record(request)
        return self._respond(self.create_response)

    async def get_deck(self, request: web.Request) -> web.Response:
        await self._record(request)
        return self._respond(self._next(self.deck_responses))

    async def start_export(self, request: web.Request) -> web.Response:
        await self._record(request)
        return self._respond(self.export_start_response)

    async def get_export(self, request: web.Request) -> web.Response:
        await self._record(request)
        return self._respond(self._next(self.export_responses))

    async def plain_text(self, request: web.Request) -> web.Response:
        await self._record(request)
        return web.Response(text="Bad Gateway", status=502)

    async def file(self, request: web.Request) -> web.Response:
        name = request.match_info["name"]
        self.hits[name] = self.hits.get(name, 0) + 1
        if name == "empty.pdf":
            return web.Response(body=b"")
        if name == "missing.pdf":
            return web.Response(status=404, text="not found")
        return web.Response(body=self.file_bytes, content_type="application/pdf")

    async def redirect(self, request: web.Request) -> web.Response:
        target = request.match_info["target"]
        self.hits[f"redirect/{target}"] = self.hits.get(f"redirect/{target}", 0) + 1
        if target == "loop":
            raise web.HTTPFound("/redirect/loop")
        if target == "absolute":
            raise web.HTTPFound(f"{self.base_url}/files/deck.pdf")
        if target == "chain":
            raise web.HTTPMovedPermanently("/redirect/relative")
        raise web.HTTPFound(f"/files/{target.replace('relative', 'deck')}.pdf")

    async def slow(self, request: web.Request) -> web.StreamResponse:
        """Stream ``slow_chunks`` KiB with ``slow_delay`` seconds between them."""
        mode = request.match_info["mode"]
        self.hits[f"slow/{mode}"] = self.hits.get(f"slow/{mode}", 0) + 1
        resp = web.StreamResponse(headers={"Content-Type": "application/pdf"})
        await resp.prepare(request)
        if mode == "stall":
            await asyncio.sleep(self.stall_seconds)
            return resp
        for _ in range(self.slow_chunks):
            await resp.write(b"x" * 1024)
            await asyncio.sleep(self.slow_delay)
        await resp.write_eof()
        return resp

    def build_app(self) -> web.Application:
        app = web.Application()
        app.router.add_post("/v1/decks", self.create_deck)
        app.router.add_get("/v1/decks/{deck_id}", self.get_deck)
        app.router.add_post("/v1/decks/{deck_id}/export", self.start_export)
        app.router.add_get("/v1/decks/{deck_id}/export", self.get_export)
        app.router.add_get("/text", self.plain_text)
        app.router.add_get("/files/{name}", self.file)
        app.router.add_get("/redirect/{target}", self.redirect)
        app.router.add_get("/slow/{mode}", self.slow)
        return app


@pytest_asyncio.fixture
async def fake_api():
    """Start the fake API on a free local port."""
    api = FakeVibeApi()
    server = TestServer(api.build_app())
    await server.start_server()
    api.base_url = f"http://{server.host}:{server.port}"
    yield api
    await server.close()


@pytest.fixture
def settings():
    """Settings with tiny poll intervals, pointed at nothing in particular."""
    return Settings(
        api_key="test-key",
        api_url="http://127.0.0.1:1",
        poll_deck_interval=0.01,
        poll_export_interval=0.01,
        timeout=5,
        request_timeout=5,
        download_timeout=5,
    )


@pytest.fixture
def api_settings(settings, fake_api):
    """Settings pointed at the running fake API."""
    return settings.model_copy(update={"api_url": fake_api.base_url})


# Every setting Settings reads from the environment
VIBE_ENV_VARS = [
    "VIBE_API_KEY",
    "VIBE_API_URL",
    "VIBE_VIEW_URL_BASE",
    "VIBE_POLL_DECK_INTERVAL",
    "VIBE_POLL_EXPORT_INTERVAL",
    "VIBE_TIMEOUT",
    "VIBE_REQUEST_TIMEOUT",
    "VIBE_DOWNLOAD_TIMEOUT",
    "VIBE_MAX_REDIRECTS",
]


@pytest.fixture
def clean_environment(monkeypatch):
    """Provide a clean environment for tests."""
    for var in VIBE_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
