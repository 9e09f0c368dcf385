import asyncio
import json

from aiohttp import web
from aiohttp.test_utils import TestServer
import pytest

from shared.apis.dadjokes import Dadjoke


CHICKEN = {"id": "abc123", "joke": "Why did the chicken cross the road?", "status": 200}


class JokeServer:
    """Local stand-in for the joke endpoint; tests set what it answers with"""

    def __init__(self) -> None:
        self.url = ""
        self.status = 200
        self.body: bytes = json.dumps(CHICKEN).encode()
        self.delay = 0.0
        self.requests: list[web.Request] = []

    async def handle(self, request: web.Request) -> web.Response:
        self.requests.append(request)
        if self.delay:
            await asyncio.sleep(self.delay)
        return web.Response(body=self.body, status=self.status, content_type="application/json")


@pytest.fixture
async def joke_server():
    state = JokeServer()
    app = web.Application()
    app.router.add_get("/", state.handle)
    server = TestServer(app)
    await server.start_server()
    state.url = str(server.make_url("/"))
    yield state
    await server.close()


@pytest.fixture
def chicken() -> Dadjoke:
    return Dadjoke.model_validate(CHICKEN)


@pytest.fixture
def other_joke() -> Dadjoke:
    return Dadjoke(id="xyz789", text="I'm reading a book about anti-gravity. It's impossible to put down.", status_code=200)
