"""Shared streaming-parser primitives and small value types."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import Tuple, Union

PatternLike = Union[bytes, "re.Pattern[bytes]"]


class ParseError(Exception):
    """Base class for every parsing failure."""


class Incomplete(ParseError):
    """The input ended before a decision could be made; more data is needed."""


class Invalid(ParseError):
    """The input can never be parsed, whatever data follows."""


def apply_regex(pattern: Tuple[PatternLike, PatternLike], buf: bytes) -> tuple[bytes, bytes]:
    """Match ``pattern`` at the start of ``buf`` and return ``(rest, matched)``.

    ``pattern`` is a pair ``(full, viable_prefix)``: ``full`` is the anchored
    expression to match, and ``viable_prefix`` fully matches every byte string
    that could still be extended into a match of ``full``. When ``full`` does
    not match, :class:`Incomplete` is raised if all of ``buf`` is such a
    prefix, and :class:`Invalid` otherwise.
    """
    full, prefix = (re.compile(p) for p in pattern)
    m = full.match(buf)
    if m is not None:
        end = m.end()
        return buf[end:], buf[:end]
    if prefix.fullmatch(buf) is not None:
        raise Incomplete("need more data to match pattern")
    raise Invalid(f"input does not match pattern: {buf[:32]!r}")


def terminate(buf: bytes, term: bytes) -> tuple[bytes, str]:
    """Check, without consuming it, that ``buf`` starts with a byte of ``term``.

    Returns ``buf`` unchanged together with that byte as a one-character string.
    """
    if not buf:
        raise Incomplete("need more data to find a terminator")
    if buf[0] not in term:
        raise Invalid(f"expected one of {term!r}, got {buf[:1]!r}")
    return buf, chr(buf[0])


class NextCrLfState(enum.Enum):
    """Carry-over state of :func:`next_crlf` between successive buffers."""

    START = "start"
    CR_PASSED = "cr_passed"


def next_crlf(buf: bytes, state: NextCrLfState) -> tuple[int | None, NextCrLfState]:
    """Find the index of the ``\\n`` ending the first ``\\r\\n`` in ``buf``.

    Returns ``(index, new_state)``; ``index`` is ``None`` if no line end was
    found yet, in which case ``new_state`` must be passed to the next call
    along with the following buffer.
    """
    if not buf:
        return None, state
    if state is NextCrLfState.CR_PASSED and buf[0] == 0x0A:
        return 0, state
    pos = buf.find(b"\r\n")
    if pos != -1:
        return pos + 1, state
    new_state = NextCrLfState.CR_PASSED if buf.endswith(b"\r") else NextCrLfState.START
    return None, new_state


@dataclass(frozen=True)
class MaybeUtf8:
    """A piece of text flagged as either pure ASCII or (possibly) UTF-8."""

    text: str
    utf8: bool = False

    @classmethod
    def from_str(cls, s: str) -> MaybeUtf8:
        """Wrap ``s``, flagging it as UTF-8 only if it is not pure ASCII."""
        return cls(s, utf8=not s.isascii())

    def to_bytes(self) -> bytes:
        """Return the wire form of the text."""
        return self.text.encode("utf-8")

    def __str__(self) -> str:
        return self.text