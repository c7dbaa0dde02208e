"""Immutable HTTP request.

Frozen metadata with async body access. The request is honest about
what it is: received data that doesn't change.
"""

from __future__ import annotations

import json as json_module
import re
from collections.abc import AsyncGenerator, Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote, unquote, urlsplit

from perch._internal.asgi import Receive, Scope
from perch.http.headers import Headers

_DEFAULT_PORTS = {"http": 80, "https": 443}

# RFC 3986 host (reg-name or IP literal) with an optional port
_AUTHORITY = re.compile(r"(?:[A-Za-z0-9\-._~!$&'()*+,;=%]+|\[[0-9A-Fa-f:.]+\])(?::[0-9]*)?")


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    ``url`` is the full request URL as it arrived on the wire (scheme,
    host, percent-encoded path and query). Route patterns are matched
    against it, so path parameters are captured in their encoded form
    and decoded by the router afterwards. ``path`` is the already
    decoded path, for display and logging.

    Body is accessed asynchronously via ``.body()``, ``.text()``, ``.json()``.
    """

    method: str
    url: str
    path: str
    headers: Headers
    scheme: str = "http"
    http_version: str = "1.1"
    server: tuple[str, int] | None = None
    client: tuple[str, int] | None = None

    # Private: ASGI receive callable for body streaming
    _receive: Receive | None = field(default=None, repr=False, compare=False)

    # Private: mutable cache for the body
    # (dict contents are mutable even though the field reference is frozen)
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    # -- Computed properties --

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    @property
    def raw_path(self) -> str:
        """The percent-encoded path component of ``url``."""
        return urlsplit(self.url).path

    # -- Async body access --

    async def body(self) -> bytes:
        """Read the full request body.

        Result is cached: the ASGI receive is consumed once, then
        the same bytes are returned on subsequent calls.
        """
        if "_body" in self._cache:
            return self._cache["_body"]
        chunks = [chunk async for chunk in self.stream()]
        result = b"".join(chunks)
        self._cache["_body"] = result
        return result

    async def stream(self) -> AsyncGenerator[bytes, None]:
        """Stream the request body in chunks."""
        if self._receive is None:
            return
        while True:
            message = await self._receive()
            body = message.get("body", b"")
            if body:
                yield body
            if not message.get("more_body", False):
                break

    async def text(self) -> str:
        """Read the body as text (UTF-8)."""
        raw = await self.body()
        return raw.decode("utf-8")

    async def json(self) -> Any:
        """Parse the body as JSON."""
        raw = await self.body()
        return json_module.loads(raw)

    # -- Factories --

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive) -> Request:
        """Create a Request from an ASGI scope and receive callable."""
        headers = Headers(tuple(scope.get("headers", ())))
        scheme = scope.get("scheme", "http")
        server = scope.get("server")
        client = scope.get("client")
        query_string: bytes = scope.get("query_string", b"")

        raw_path = scope.get("raw_path")
        if raw_path:
            path_part = raw_path.decode("latin-1").split("?", 1)[0].replace("#", "%23")
        else:
            path_part = quote(scope["path"], safe="/:@!$&'()*+,;=-._~")
        if not path_part.startswith("/"):
            path_part = "/" + path_part

        # Host is used only when it is a bare host[:port]
        host = headers.get("host")
        if not host or not _AUTHORITY.fullmatch(host):
            host = _host_from_server(scheme, server)
        url = f"{scheme}://{host}{path_part}"
        if query_string:
            url = f"{url}?{query_string.decode('latin-1')}"

        return cls(
            method=scope["method"],
            url=url,
            path=scope["path"],
            headers=headers,
            scheme=scheme,
            http_version=scope.get("http_version", "1.1"),
            server=tuple(server) if server else None,
            client=tuple(client) if client else None,
            _receive=receive,
        )

    @classmethod
    def build(
        cls,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: bytes = b"",
    ) -> Request:
        """Create a Request directly from a method and an absolute URL.

        Useful for calling ``Router.dispatch`` without an ASGI server::

            request = Request.build("GET", "https://example.com/hello/world")
        """
        parts = urlsplit(url)
        body_sent = False

        async def receive() -> dict[str, Any]:
            nonlocal body_sent
            if not body_sent:
                body_sent = True
                return {"type": "http.request", "body": body, "more_body": False}
            return {"type": "http.disconnect"}

        return cls(
            method=method.upper(),
            url=url,
            path=unquote(parts.path) or "/",
            headers=Headers.from_dict(headers or {}),
            scheme=parts.scheme or "http",
            _receive=receive,
        )


def _host_from_server(scheme: str, server: Any) -> str:
    """Derive the URL authority from the ASGI ``server`` tuple."""
    if not server:
        return "localhost"
    host, port = server[0], server[1]
    if port is None or _DEFAULT_PORTS.get(scheme) == port:
        return host
    return f"{host}:{port}"
