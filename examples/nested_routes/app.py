"""Nested routes — mappings inside mappings.

``/hello`` prefixes every key of its nested mapping, so the handler
below answers ``/hello/world``. ``/hello`` itself has no route.

Run with any ASGI server:
    uvicorn app:app
"""

from perch import Response, router

app = router({
    "/hello": {
        "/world": lambda request: Response("Hello world!", status=200),
        "/api": {
            "{/}?": lambda request: {"versions": ["v1"]},
            "GET@/v1": lambda request: {"version": "v1"},
        },
    },
})
