"""perch — a tiny router that turns nested route declarations into one handler.

Routes are a mapping of ``[METHOD@]path`` keys to handlers or to further
mappings. The result is an ASGI application, and ``Router.dispatch`` can be
called directly by anything that can build a ``Request``.

Basic usage::

    from perch import Response, router

    app = router({
        "/": lambda request: Response("Hello world!"),
        "/hello": {
            "GET@/:name": lambda request, ctx, params: Response(f"Hello {params['name']}"),
        },
    })

Serve ``app`` with any ASGI server.
"""

__version__ = "0.1.0"
__all__ = [
    "ANY",
    "KNOWN_METHODS",
    "Branch",
    "CompiledRoute",
    "ConfigurationError",
    "HTTPError",
    "HandlerContext",
    "Leaf",
    "MethodNotAllowed",
    "NotFound",
    "ParamDecodeError",
    "PathPattern",
    "PerchError",
    "RegexPattern",
    "Request",
    "Response",
    "Router",
    "RouterOptions",
    "build_routes",
    "router",
]

# name -> module that defines it
_LAZY_IMPORTS: dict[str, str] = {
    "ANY": "perch.routing.route",
    "KNOWN_METHODS": "perch.routing.route",
    "CompiledRoute": "perch.routing.route",
    "Branch": "perch.routing.builder",
    "Leaf": "perch.routing.builder",
    "build_routes": "perch.routing.builder",
    "PathPattern": "perch.routing.pattern",
    "RegexPattern": "perch.routing.pattern",
    "Router": "perch.routing.router",
    "router": "perch.routing.router",
    "RouterOptions": "perch.config",
    "HandlerContext": "perch.context",
    "Request": "perch.http.request",
    "Response": "perch.http.response",
    "PerchError": "perch.errors",
    "ConfigurationError": "perch.errors",
    "ParamDecodeError": "perch.errors",
    "HTTPError": "perch.errors",
    "NotFound": "perch.errors",
    "MethodNotAllowed": "perch.errors",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import perch`` fast while providing a clean top-level API.
    """
    module_name = _LAZY_IMPORTS.get(name)
    if module_name is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    from importlib import import_module

    return getattr(import_module(module_name), name)
