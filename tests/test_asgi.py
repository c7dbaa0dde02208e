"""ASGI integration tests — a Router served through the full request pipeline."""

import anyio
import httpx
import pytest

from perch import Response, RouterOptions, router
from perch.testing import TestClient


def greet(request, ctx, params):
    return f"Hello {params['name']}"


def show_user(request, ctx, params):
    return {"id": params["id"], "client": list(ctx.client)}


async def create_user(request, ctx, params):
    payload = await request.json()
    return {"created": payload["name"]}, 201, {"Location": "/users/1"}


@pytest.fixture
def app():
    return router(
        {
            "/": lambda request: Response("home"),
            "/hello/:name": greet,
            "/users": {
                "POST@/": create_user,
                "GET@/:id": show_user,
                "PATCH@/:id": lambda request, ctx, params: None,
            },
            "/boom": lambda request: 1 / 0,
        },
        context={"greeting": "hi"},
    )


class TestClientPipeline:
    async def test_text_response(self, app) -> None:
        async with TestClient(app) as client:
            response = await client.get("/")
        assert response.status == 200
        assert response.text == "home"
        assert response.content_type is None

    async def test_string_return_is_text_plain(self, app) -> None:
        async with TestClient(app) as client:
            response = await client.get("/hello/J%C3%B6rg")
        assert response.text == "Hello Jörg"
        assert response.content_type == "text/plain; charset=utf-8"

    async def test_json_return(self, app) -> None:
        async with TestClient(app, client=("10.1.2.3", 999)) as client:
            response = await client.get("/users/7")
        assert "application/json" in response.content_type
        assert response.text == '{"id": "7", "client": ["10.1.2.3", 999]}'

    async def test_post_with_status_and_headers(self, app) -> None:
        async with TestClient(app) as client:
            response = await client.post("/users/", json={"name": "ada"})
        assert response.status == 201
        assert response.text == '{"created": "ada"}'
        assert ("location", "/users/1") in response.headers

    async def test_none_return_is_empty_200(self, app) -> None:
        async with TestClient(app) as client:
            response = await client.patch("/users/7")
        assert response.status == 200
        assert response.body == b""

    async def test_not_found(self, app) -> None:
        async with TestClient(app) as client:
            response = await client.get("/missing")
        assert response.status == 404
        assert response.body == b""

    async def test_method_not_allowed(self, app) -> None:
        async with TestClient(app) as client:
            response = await client.delete("/users/7")
        assert response.status == 405
        assert response.header("accept") == "GET, PATCH"

    async def test_handler_error_is_500(self, app) -> None:
        async with TestClient(app) as client:
            response = await client.get("/boom")
        assert response.status == 500
        assert response.body == b""

    async def test_context_extra_reaches_handler(self) -> None:
        app = router({"/": lambda request, ctx: ctx["greeting"]}, context={"greeting": "hi"})
        async with TestClient(app) as client:
            response = await client.get("/")
        assert response.text == "hi"

    async def test_handler_sees_request_url(self) -> None:
        app = router({"/:name": lambda request: request.url})
        async with TestClient(app, host="example.com") as client:
            response = await client.get("/J%C3%B6rg?x=1")
        assert response.text == "http://example.com/J%C3%B6rg?x=1"

    async def test_unconvertible_return_raises(self) -> None:
        app = router({"/": lambda request: object()})
        async with TestClient(app) as client:
            with pytest.raises(TypeError):
                await client.get("/")

    async def test_custom_other_handler(self) -> None:
        options = RouterOptions(other_handler=lambda request, ctx: ("Nothing here", 404))
        async with TestClient(router({}, options)) as client:
            response = await client.get("/anything")
        assert response.status == 404
        assert response.text == "Nothing here"


class TestHostHeader:
    async def _get(self, app, path: str, host: bytes) -> tuple[int, bytes]:
        messages: list[dict] = []

        async def receive() -> dict:
            return {"type": "http.request", "body": b"", "more_body": False}

        async def send(message: dict) -> None:
            messages.append(message)

        scope = {
            "type": "http",
            "method": "GET",
            "scheme": "http",
            "path": path,
            "raw_path": path.encode(),
            "query_string": b"",
            "headers": [(b"host", host)],
            "server": ("127.0.0.1", 8000),
            "client": ("127.0.0.1", 5000),
        }
        await app(scope, receive, send)
        return messages[0]["status"], messages[1]["body"]

    @pytest.mark.parametrize("host", [b"evil/admin#", b"evil/admin?"])
    async def test_host_cannot_redirect_to_another_route(self, host: bytes) -> None:
        app = router({"/admin": lambda request: "admin", "/public": lambda request: "public"})
        assert await self._get(app, "/public", host) == (200, b"public")

    async def test_host_cannot_truncate_path(self) -> None:
        app = router({"/": lambda request: "index", "/other": lambda request: "other"})
        assert await self._get(app, "/other", b"x?") == (200, b"other")
        assert await self._get(app, "/missing", b"x?") == (404, b"")


class TestLifespanAndScopes:
    async def test_lifespan(self, app) -> None:
        async with TestClient(app) as client:
            sent = await client.lifespan()
        assert sent == ["lifespan.startup.complete", "lifespan.shutdown.complete"]

    async def test_other_scope_types_ignored(self, app) -> None:
        sent: list[dict] = []

        async def receive() -> dict:
            return {"type": "websocket.connect"}

        async def send(message: dict) -> None:
            sent.append(message)

        await app({"type": "websocket", "path": "/"}, receive, send)
        assert sent == []


class TestHttpxTransport:
    async def test_roundtrip(self, app) -> None:
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
            response = await client.get("/hello/Jörg")
        assert response.status_code == 200
        assert response.text == "Hello Jörg"

    async def test_405_header(self, app) -> None:
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
            response = await client.put("/users/1")
        assert response.status_code == 405
        assert response.headers["accept"] == "GET, PATCH"

    async def test_concurrent_requests(self, app) -> None:
        results: dict[str, str] = {}
        transport = httpx.ASGITransport(app=app)

        async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:

            async def fetch(name: str) -> None:
                response = await client.get(f"/hello/{name}")
                results[name] = response.text

            async with anyio.create_task_group() as tg:
                for name in ("ada", "grace", "linus"):
                    tg.start_soon(fetch, name)

        assert results == {name: f"Hello {name}" for name in ("ada", "grace", "linus")}
