"""Hello World — the smallest perch app.

One route, one handler, plain ``Response``.

Run with any ASGI server:
    uvicorn app:app
"""

from perch import Response, router

app = router({
    "/": lambda request: Response("Hello world!", status=200),
})
