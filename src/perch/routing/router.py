"""Router — first-match dispatch over an ordered route table.

The router is built once from a route declaration and never changes.
Each request walks the table in order; the first route whose pattern
matches the URL decides the outcome, whether or not it has a handler
for the request's method::

    app = router({
        "/": index,
        "GET@/users/:id": show_user,
        "PATCH@/users/:id": update_user,
    })

    # PATCH /users/7 -> update_user(request, ctx, {"id": "7"})
    # POST  /users/7 -> 405, Accept: GET, PATCH
    # GET   /nope    -> 404

``Router`` is an ASGI application. ``Router.dispatch`` is the server
independent core: ``(request, ctx) -> whatever the handler returned``.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any

from perch._internal.asgi import Receive, Scope, Send
from perch._internal.invoke import invoke_handler
from perch.config import RouterOptions
from perch.context import HandlerContext
from perch.http.request import Request
from perch.routing.builder import Branch, build_routes
from perch.routing.params import decode_params
from perch.routing.route import ANY, CompiledRoute
from perch.server.defaults import (
    default_error_handler,
    default_other_handler,
    default_unknown_method_handler,
)
from perch.server.handler import handle_request


class Router:
    """A compiled, immutable route table plus its fallback chain.

    *routes* is either a route declaration (nested mapping or ``Branch``)
    which is built with base path ``/``, or an iterable of pre-built
    ``CompiledRoute``s used as-is and in the given order.

    *context* holds extra fields merged into every ``HandlerContext``
    the ASGI entry point creates.
    """

    __slots__ = (
        "_error_handler",
        "_other_handler",
        "_routes",
        "_unknown_method_handler",
        "context",
    )

    def __init__(
        self,
        routes: Mapping[str, Any] | Branch | Iterable[CompiledRoute],
        options: RouterOptions | None = None,
        *,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        options = options or RouterOptions()
        self._other_handler = options.other_handler or default_other_handler
        self._error_handler = options.error_handler or default_error_handler
        self._unknown_method_handler = (
            options.unknown_method_handler or default_unknown_method_handler
        )

        if isinstance(routes, Mapping | Branch):
            self._routes = build_routes(routes, "/")
        else:
            self._routes = tuple(
                route if isinstance(route, CompiledRoute) else CompiledRoute(*route)
                for route in routes
            )

        self.context: Mapping[str, Any] = MappingProxyType(dict(context or {}))

    @property
    def routes(self) -> tuple[CompiledRoute, ...]:
        """The route table, in matching order."""
        return self._routes

    async def dispatch(self, request: Request, ctx: HandlerContext | None = None) -> Any:
        """Route one request and return the chosen handler's result.

        Every failure raised by a handler, the other/unknown-method
        handlers or parameter decoding is passed to the error handler.
        A failure in the error handler itself propagates to the caller.
        """
        if ctx is None:
            ctx = HandlerContext(
                server=request.server,
                client=request.client,
                scheme=request.scheme,
                extra=self.context,
            )

        try:
            for route in self._routes:
                captured = route.pattern.match(request.url)
                if captured is None:
                    continue

                params = decode_params(captured)
                methods = route.methods
                if request.method in methods:
                    return await invoke_handler(methods[request.method], request, ctx, params)
                if ANY in methods:
                    return await invoke_handler(methods[ANY], request, ctx, params)
                return await invoke_handler(self._unknown_method_handler, request, ctx, list(methods))

            return await invoke_handler(self._other_handler, request, ctx)
        except Exception as exc:
            return await invoke_handler(self._error_handler, request, ctx, exc)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        await handle_request(scope, receive, send, router=self)

    def __repr__(self) -> str:
        return f"<Router routes={len(self._routes)}>"


def router(
    routes: Mapping[str, Any] | Branch | Iterable[CompiledRoute],
    options: RouterOptions | None = None,
    *,
    context: Mapping[str, Any] | None = None,
) -> Router:
    """Build a ``Router`` from a route declaration or a pre-built route table.

    Usage::

        from perch import Response, router

        app = router({
            "/": lambda request, ctx, params: Response("Hello world!"),
        })

    ``app`` can be served by any ASGI server, or called directly with
    ``await app.dispatch(Request.build("GET", "http://localhost/"))``.
    """
    return Router(routes, options, context=context)
