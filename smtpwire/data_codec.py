"""Dot-stuffing of DATA bodies: escaping for sending, unescaping after receiving."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterable, Optional, Protocol


class _Writable(Protocol):
    def write(self, data: bytes, /) -> Optional[int]: ...

    def flush(self) -> None: ...


@dataclass(frozen=True)
class DataUnescapeRes:
    """Result of one :meth:`DataUnescaper.unescape` call.

    ``unescaped`` is the message content recovered from the input, and
    ``unhandled_idx`` is the offset in the input from which bytes could not
    be decided yet; those bytes must start the next call's input.
    """

    unescaped: bytes
    unhandled_idx: int

    @property
    def written(self) -> int:
        """Number of unescaped bytes produced."""
        return len(self.unescaped)


class DataUnescaper:
    """Removes the escaping of a single DATA stream, buffer after buffer.

    Use one unescaper per stream. With ``is_preceded_by_crlf`` true (the usual
    case) the stream is taken to start at the beginning of a line.
    """

    def __init__(self, is_preceded_by_crlf: bool = True) -> None:
        self._preceded_by_crlf = is_preceded_by_crlf

    def unescape(self, data: bytes) -> DataUnescapeRes:
        """Unescape ``data`` as far as it can be decided.

        The undecided tail, ``data[res.unhandled_idx:]``, is never longer than
        four bytes (``b"\\r\\n.\\r"``) and must be prepended to the next buffer.
        When the end-of-data line is found, ``unhandled_idx`` points right
        after it.
        """
        data = bytes(data)
        out = bytearray()
        idx = 0

        if self._preceded_by_crlf:
            if len(data) <= 3:
                return DataUnescapeRes(b"", 0)
            if data.startswith(b".\r\n"):
                return DataUnescapeRes(b"", 3)
            if data.startswith(b"."):
                idx = 1
            self._preceded_by_crlf = False

        while True:
            pos = data.find(b"\r\n.", idx)
            if pos == -1:
                break
            if len(data) <= pos + 4:
                out += data[idx:pos]
                return DataUnescapeRes(bytes(out), pos)
            out += data[idx:pos + 2]
            if data[pos + 3:pos + 5] == b"\r\n":
                return DataUnescapeRes(bytes(out), pos + 5)
            idx = pos + 3

        if data.endswith(b"\r\n"):
            keep = len(data) - 2
        elif data.endswith(b"\r"):
            keep = len(data) - 1
        else:
            keep = len(data)
        out += data[idx:keep]
        return DataUnescapeRes(bytes(out), keep)


class _WriterState(enum.Enum):
    START = "start"
    CR = "cr"
    CRLF = "crlf"


class EscapingDataWriter:
    """Writes a message body to ``stream``, doubling every dot that starts a line.

    Call :meth:`finish` once the whole body was written to send the
    end-of-data line.
    """

    def __init__(self, stream: _Writable) -> None:
        self._stream = stream
        self._state = _WriterState.CRLF

    def _write_all(self, data: bytes) -> None:
        view = memoryview(data)
        while view:
            written = self._stream.write(view)
            if written is None:
                raise BlockingIOError("underlying stream would block")
            view = view[written:]

    def _escape(self, data: bytes) -> bytes:
        out = bytearray()
        start = 0
        for index, byte in enumerate(data):
            if byte == 0x0D:
                self._state = _WriterState.CR
            elif self._state is _WriterState.CR and byte == 0x0A:
                self._state = _WriterState.CRLF
            elif self._state is _WriterState.CRLF and byte == ord("."):
                out += data[start:index + 1]
                start = index
                self._state = _WriterState.START
            else:
                self._state = _WriterState.START
        out += data[start:]
        return bytes(out)

    def write(self, data: bytes) -> int:
        """Escape and write all of ``data``; return ``len(data)``."""
        data = bytes(data)
        self._write_all(self._escape(data))
        return len(data)

    def write_vectored(self, bufs: Iterable[bytes]) -> int:
        """Write several buffers as one contiguous piece; return the total length."""
        return self.write(b"".join(bytes(buf) for buf in bufs))

    def flush(self) -> None:
        """Flush the underlying stream."""
        self._stream.flush()

    def close(self) -> None:
        """Refuse to close: a message is being written; use :meth:`finish`."""
        raise OSError("tried closing a stream during a message")

    def finish(self) -> None:
        """Write the end-of-data line, ending the current line first if needed."""
        if self._state is _WriterState.CRLF:
            self._write_all(b".\r\n")
        else:
            self._write_all(b"\r\n.\r\n")