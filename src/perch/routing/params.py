"""Path parameter decoding.

Patterns capture parameters from the encoded URL. Before a handler sees
them every value is percent-decoded as UTF-8. Malformed escapes are an
error rather than passed through, so ``/files/%zz`` never reaches a
handler as a literal ``%zz``.
"""

import re
from collections.abc import Mapping
from urllib.parse import unquote

from perch.errors import ParamDecodeError

# A '%' that does not start a two-digit hex escape
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def decode_param(name: str, value: str) -> str:
    """Percent-decode one captured value.

    ``+`` is left alone (path semantics, not form encoding).
    Raises ``ParamDecodeError`` on a malformed escape or invalid UTF-8.
    """
    if "%" not in value:
        return value
    if _BAD_ESCAPE.search(value):
        raise ParamDecodeError(name, value)
    try:
        return unquote(value, errors="strict")
    except UnicodeDecodeError as exc:
        raise ParamDecodeError(name, value) from exc


def decode_params(captured: Mapping[str, str]) -> dict[str, str]:
    """Decode every captured parameter, preserving capture order."""
    return {name: decode_param(name, value) for name, value in captured.items()}
