"""Path parameters — named segments captured into ``params``.

Values arrive percent-decoded: ``/hello/J%C3%B6rg`` greets ``Jörg``.
Parameters a route does not declare are simply not in ``params``.

Run with any ASGI server:
    uvicorn app:app
"""

from perch import Response, router


def hello(request, ctx, params):
    return Response(f"Hello {params['name']}", status=200)


def both(request, ctx, params):
    return Response(f"Hello {params.get('missing')} and {params['present']}")


def file(request, ctx, params):
    return {"name": params["name"], "ext": params["ext"]}


app = router({
    "/hello/:name": hello,
    "/both/:present": both,
    "/files/:name([^/.]+).:ext(png|jpg)": file,
})
