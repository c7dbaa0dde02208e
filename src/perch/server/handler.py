"""ASGI handler — translates ASGI scope/messages to perch types.

The only component that touches raw ASGI directly. Converts the scope
into a ``Request`` and a ``HandlerContext``, runs the router's dispatch,
and sends the negotiated ``Response`` back through ASGI ``send()``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from perch._internal.asgi import Receive, Scope, Send
from perch.context import HandlerContext
from perch.http.request import Request
from perch.server.negotiation import negotiate
from perch.server.sender import send_response

if TYPE_CHECKING:
    from perch.routing.router import Router


async def handle_request(scope: Scope, receive: Receive, send: Send, *, router: Router) -> None:
    """Process a single ASGI connection scope."""
    if scope["type"] == "lifespan":
        await handle_lifespan(receive, send)
        return

    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)
    ctx = HandlerContext.from_asgi(scope, router.context)

    result = await router.dispatch(request, ctx)
    await send_response(negotiate(result), send)


async def handle_lifespan(receive: Receive, send: Send) -> None:
    """Acknowledge the ASGI lifespan protocol.

    The route table is built before the app is handed to a server, so
    there is nothing to do at startup or shutdown.
    """
    while True:
        message = await receive()
        msg_type = message["type"]

        if msg_type == "lifespan.startup":
            await send({"type": "lifespan.startup.complete"})
        elif msg_type == "lifespan.shutdown":
            await send({"type": "lifespan.shutdown.complete"})
            return
