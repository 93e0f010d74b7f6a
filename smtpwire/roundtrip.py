"""Escaping a message body onto the wire and reading it back again."""

from __future__ import annotations

import io
import re
from typing import Iterable, Sequence

from smtpwire.data_codec import DataUnescaper, EscapingDataWriter
from smtpwire.data_reader import EscapedDataReader

_MAX_READ = 16 * 1024 * 1024
# The unescaper may hold back up to 4 bytes, and every read needs at least 1 more.
_MIN_READ = 5
_ESCAPE_NOT_AT_END = re.compile(rb"\r\n\.[^.]", re.DOTALL)


def _check(condition: bool, message: str) -> None:
    if not condition:
        raise AssertionError(message)


def escape_data(writes: Iterable[Iterable[bytes]]) -> bytes:
    """Escape a message given as successive vectored writes; return the wire bytes.

    The result includes the end-of-data line.
    """
    sink = io.BytesIO()
    writer = EscapingDataWriter(sink)
    for write in writes:
        writer.write_vectored(write)
    writer.finish()
    return sink.getvalue()


def escaping_then_unescaping(
    data: Sequence[Sequence[bytes]],
    maxread: int,
    initread: int,
    readlen: Sequence[int],
) -> bytes:
    """Escape ``data``, read it back in chunks, unescape it and check the result.

    ``maxread`` bounds the read buffer, ``initread`` is how many wire bytes are
    handed to the reader up front, and ``readlen`` cycles through the sizes of
    successive reads. Returns the recovered message; raises
    :class:`AssertionError` if the wire form or the recovered message is wrong.
    """
    read_sizes = list(readlen) or [1]

    wire = escape_data(data)
    _check(
        wire == b".\r\n" or wire.endswith(b"\r\n.\r\n"),
        f"wire does not end with the end-of-data line: {wire[-16:]!r}",
    )
    found = _ESCAPE_NOT_AT_END.search(wire)
    _check(
        found is None or found.start() == len(wire) - 5,
        "an unescaped line-starting dot appears before the end of the wire",
    )

    maxread = max(min(maxread, _MAX_READ), _MIN_READ)
    initread = min(initread, maxread, len(wire))
    reader = EscapedDataReader(wire[:initread], io.BytesIO(wire[initread:]))
    unescaper = DataUnescaper(True)

    recovered = bytearray()
    pending = b""
    index = 0
    while True:
        size = min(max(1, read_sizes[index % len(read_sizes)]), maxread - len(pending))
        _check(size > 0, "read size dropped to zero")
        chunk = reader.read(size)
        if not chunk:
            break
        buffered = pending + chunk
        result = unescaper.unescape(buffered)
        recovered += result.unescaped
        pending = buffered[result.unhandled_idx:]
        index += 1

    reader.complete()
    _check(reader.get_unhandled() == b"", "data was left after the end-of-data line")

    expected = b"".join(b"".join(write) for write in data)
    if expected and not expected.endswith(b"\r\n"):
        expected += b"\r\n"
    _check(
        bytes(recovered) == expected,
        f"recovered {bytes(recovered)[:64]!r}, expected {expected[:64]!r}",
    )
    return bytes(recovered)