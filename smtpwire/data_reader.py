"""Reading an escaped DATA stream up to, and including, its end marker."""

from __future__ import annotations

import enum
from typing import Optional, Protocol


class _Readable(Protocol):
    def read(self, size: int) -> bytes: ...


class _State(enum.Enum):
    START = "start"
    CR = "cr"
    CRLF = "crlf"
    CRLF_DOT = "crlf_dot"
    CRLF_DOT_CR = "crlf_dot_cr"
    END = "end"
    COMPLETED = "completed"


_TRANSITIONS = {
    (_State.CR, 0x0A): _State.CRLF,
    (_State.CRLF, ord(".")): _State.CRLF_DOT,
    (_State.CRLF_DOT, 0x0D): _State.CRLF_DOT_CR,
    (_State.CRLF_DOT_CR, 0x0A): _State.END,
}


def _step(state: _State, byte: int) -> _State:
    nxt = _TRANSITIONS.get((state, byte))
    if nxt is not None:
        return nxt
    return _State.CR if byte == 0x0D else _State.START


class EscapedDataReader:
    """Reads the still-escaped DATA stream, stopping right after the ``.\\r\\n`` line.

    The bytes returned are the raw wire bytes, end marker included; a line
    starting with ``.`` is not unescaped here. ``unhandled`` holds bytes that
    were already read from the connection and come before ``stream``.
    """

    def __init__(self, unhandled: bytes, stream: _Readable) -> None:
        self._unhandled = bytes(unhandled)
        self._stream = stream
        self._state = _State.CRLF

    def read(self, size: int) -> bytes:
        """Read at most ``size`` bytes; return ``b""`` once the end marker was passed.

        Raises :class:`ConnectionAbortedError` if the input ends before the marker.
        """
        if size < 0:
            raise ValueError("size must not be negative")
        if self.is_finished():
            return b""

        if self._unhandled:
            data = self._unhandled[:size]
            self._unhandled = self._unhandled[size:]
        else:
            data = self._stream.read(size)

        if not data:
            if size == 0:
                return b""
            raise ConnectionAbortedError(
                "connection aborted without finishing the data stream"
            )

        for index, byte in enumerate(data):
            self._state = _step(self._state, byte)
            if self._state is _State.END:
                self._unhandled = data[index + 1:] + self._unhandled
                return data[: index + 1]
        return data

    def is_finished(self) -> bool:
        """Return whether the end-of-data marker has been read."""
        return self._state in (_State.END, _State.COMPLETED)

    def complete(self) -> None:
        """Mark the message as fully received; the end marker must have been read."""
        if not self.is_finished():
            raise RuntimeError("the data stream has not reached its end marker")
        self._state = _State.COMPLETED

    def get_unhandled(self) -> Optional[bytes]:
        """Return the bytes read past the end marker once completed, else ``None``."""
        if self._state is _State.COMPLETED:
            return self._unhandled
        return None