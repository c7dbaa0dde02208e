"""Invoke helpers — call sync or async handlers uniformly.

perch handlers can be ``def`` or ``async def``, and may accept fewer
positional arguments than the router offers (``request`` only, or
``request, ctx``). Any code that calls a user-provided handler goes
through this module so those checks live in exactly one place.

Usage::

    from perch._internal.invoke import invoke_handler

    result = await invoke_handler(handler, request, ctx, params)
"""

import inspect
from typing import Any

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


async def invoke(handler: Any, *args: Any, **kwargs: Any) -> Any:
    """Call a handler and await the result if it's awaitable.

    Works with both sync and async callables::

        def hello(request, ctx, params):
            return Response("hi")

        async def hello(request, ctx, params):
            data = await fetch_data()
            return Response(data)
    """
    result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result


async def invoke_handler(handler: Any, *args: Any) -> Any:
    """Call a handler with as many leading positional *args* as it accepts.

    ``def index(request)`` gets the request only, ``def show(request, ctx,
    params)`` gets all three. Handlers taking ``*args`` (or whose signature
    cannot be inspected) get everything.
    """
    capacity = positional_capacity(handler)
    if capacity is not None:
        args = args[:capacity]
    return await invoke(handler, *args)


def positional_capacity(handler: Any) -> int | None:
    """Number of positional parameters *handler* takes, ``None`` if unbounded."""
    try:
        sig = inspect.signature(handler)
    except (TypeError, ValueError):
        return None
    count = 0
    for param in sig.parameters.values():
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            return None
        if param.kind in _POSITIONAL:
            count += 1
    return count
