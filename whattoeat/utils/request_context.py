"""Request identifiers for correlating favorites log lines and error payloads.

A toggle can log from the coordinator, a listener and an exception handler
within one request. All of them read the same id from :data:`REQUEST_ID_CONTEXT`
so a client reporting the ``X-Request-ID`` of a failed toggle can be matched to
every line it produced. Callers that already carry an id (a gateway in front of
the API) may pass it in; anything that does not look like an opaque token is
replaced with a fresh UUID.
"""

from __future__ import annotations

import re
import uuid
from contextvars import ContextVar, Token

__all__ = [
    "REQUEST_ID_CONTEXT",
    "REQUEST_ID_HEADER",
    "clear_request_id",
    "get_request_id",
    "resolve_request_id",
    "set_request_id",
]

REQUEST_ID_HEADER = "X-Request-ID"

_ACCEPTED_REQUEST_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")

REQUEST_ID_CONTEXT: ContextVar[str] = ContextVar("request_id", default="")


def resolve_request_id(incoming: str | None) -> str:
    """Return ``incoming`` when it is a usable token, otherwise a new UUID.

    Inbound ids end up in log lines and JSON bodies, so they are limited to 64
    characters of ``[A-Za-z0-9._-]``.
    """

    if incoming:
        candidate = incoming.strip()
        if _ACCEPTED_REQUEST_ID.match(candidate):
            return candidate
    return str(uuid.uuid4())


def set_request_id(request_id: str) -> Token[str]:
    return REQUEST_ID_CONTEXT.set(request_id)


def get_request_id() -> str:
    """Return the active request id, or an empty string outside a request."""

    return REQUEST_ID_CONTEXT.get()


def clear_request_id(token: Token[str] | None = None) -> None:
    """Restore the previous id when a token is given, otherwise blank it."""

    if token is not None:
        REQUEST_ID_CONTEXT.reset(token)
    else:
        REQUEST_ID_CONTEXT.set("")
