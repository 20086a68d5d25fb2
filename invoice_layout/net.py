"""Detection of clients that go away mid-request."""

from __future__ import annotations

import errno

DISCONNECT_ERRNOS = frozenset(
    code
    for code in (
        errno.EPIPE,
        errno.ECONNRESET,
        errno.ECONNABORTED,
        errno.ETIMEDOUT,
        getattr(errno, "WSAECONNRESET", None),
        getattr(errno, "WSAECONNABORTED", None),
    )
    if code is not None
)

DISCONNECT_EXCEPTIONS = (BrokenPipeError, ConnectionResetError, ConnectionAbortedError, TimeoutError)


def is_client_disconnect(exc: BaseException) -> bool:
    """True when ``exc`` means the peer closed the socket, not a server fault."""
    if isinstance(exc, DISCONNECT_EXCEPTIONS):
        return True
    return isinstance(exc, OSError) and exc.errno in DISCONNECT_ERRNOS
