"""Per-request handler context.

Every handler receives a ``HandlerContext`` next to the request: the
connection metadata the server knows about, merged with whatever extra
fields the application passed to ``router(..., context={...})``.

The context is frozen. Extra fields are read through mapping-style
access::

    app = router({"/": index}, context={"db": database})

    def index(request, ctx, params):
        rows = ctx["db"].all()
        peer = ctx.client
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from perch._internal.asgi import Scope


@dataclass(frozen=True, slots=True)
class HandlerContext:
    """Connection metadata plus caller-defined extra fields."""

    server: tuple[str, int] | None = None
    client: tuple[str, int] | None = None
    scheme: str = "http"
    extra: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def __getitem__(self, key: str) -> Any:
        return self.extra[key]

    def __contains__(self, key: object) -> bool:
        return key in self.extra

    def get(self, key: str, default: Any = None) -> Any:
        """Return the extra field *key*, or *default* if missing."""
        return self.extra.get(key, default)

    @classmethod
    def from_asgi(cls, scope: Scope, extra: Mapping[str, Any] | None = None) -> HandlerContext:
        """Build a context from an ASGI scope."""
        server = scope.get("server")
        client = scope.get("client")
        return cls(
            server=tuple(server) if server else None,
            client=tuple(client) if client else None,
            scheme=scope.get("scheme", "http"),
            extra=MappingProxyType(dict(extra or {})),
        )
