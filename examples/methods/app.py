"""Methods — ``METHOD@`` keys, a shared context and custom fallbacks.

A small in-memory notes API. Each path lists its handlers per method;
a request with any other method gets a 405 naming the ones that exist.
The fallback handlers are replaced to answer in JSON, and the error
handler turns an ``HTTPError`` raised by a handler into its own status
(the built-in one answers 500 for every failure).

Run with any ASGI server:
    uvicorn app:app
"""

import itertools

from perch import HTTPError, NotFound, Response, RouterOptions, router
from perch.server.defaults import error_response

_ids = itertools.count(1)
notes: dict[str, str] = {}


def list_notes(request, ctx, params):
    return [{"id": note_id, "text": text} for note_id, text in ctx["notes"].items()]


async def create_note(request, ctx, params):
    payload = await request.json()
    note_id = str(next(_ids))
    ctx["notes"][note_id] = payload["text"]
    return {"id": note_id, "text": payload["text"]}, 201, {"Location": f"/notes/{note_id}"}


def show_note(request, ctx, params):
    try:
        return {"id": params["id"], "text": ctx["notes"][params["id"]]}
    except KeyError:
        raise NotFound(f"No note {params['id']}") from None


def delete_note(request, ctx, params):
    ctx["notes"].pop(params["id"], None)
    return Response(status=204)


def not_found(request, ctx):
    return {"error": f"Nothing at {request.path}"}, 404


def wrong_method(request, ctx, known_methods):
    body = {"error": f"{request.method} not allowed", "allowed": known_methods}
    return body, 405, {"Accept": ", ".join(known_methods)}


def on_error(request, ctx, error):
    if isinstance(error, HTTPError):
        return error_response(error)
    return {"error": "Internal error"}, 500


app = router(
    {
        "/notes": {
            "GET@/": list_notes,
            "POST@/": create_note,
            "GET@/:id(\\d+)": show_note,
            "DELETE@/:id(\\d+)": delete_note,
        },
    },
    RouterOptions(
        other_handler=not_found,
        unknown_method_handler=wrong_method,
        error_handler=on_error,
    ),
    context={"notes": notes},
)
