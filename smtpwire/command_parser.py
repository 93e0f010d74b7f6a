"""Parsing of SMTP command lines into :class:`~smtpwire.command.Command` values."""

from __future__ import annotations

from typing import Callable

from smtpwire.address import email_with_path
from smtpwire.command import (
    Command,
    Data,
    Ehlo,
    Expn,
    Helo,
    Help,
    Mail,
    Noop,
    Quit,
    Rcpt,
    Rset,
    Starttls,
    Vrfy,
)
from smtpwire.hostname import Hostname
from smtpwire.parameters import Parameters
from smtpwire.parsing import Incomplete, Invalid, MaybeUtf8

_CRLF = b"\r\n"
_BLANKS = b" \t"
_HOST_TERM = b" \t\r"

_Branch = Callable[[bytes], "tuple[bytes, Command]"]


def _tag(buf: bytes, literal: bytes) -> bytes:
    """Consume ``literal`` at the start of ``buf`` and return what follows."""
    if buf.startswith(literal):
        return buf[len(literal):]
    if literal.startswith(buf):
        raise Incomplete(f"need more data to match {literal!r}")
    raise Invalid(f"expected {literal!r}, got {buf[:len(literal)]!r}")


def _tag_no_case(buf: bytes, literal: bytes) -> bytes:
    """Like :func:`_tag`, ignoring ASCII case."""
    n = min(len(buf), len(literal))
    if buf[:n].lower() != literal[:n].lower():
        raise Invalid(f"expected {literal!r}, got {buf[:len(literal)]!r}")
    if len(buf) < len(literal):
        raise Incomplete(f"need more data to match {literal!r}")
    return buf[len(literal):]


def _blanks(buf: bytes) -> bytes:
    """Consume one or more spaces or tabs."""
    rest = buf.lstrip(_BLANKS)
    if not rest:
        raise Incomplete("need more data after blanks")
    if len(rest) == len(buf):
        raise Invalid(f"expected a blank, got {buf[:1]!r}")
    return rest


def _opt_blanks(buf: bytes) -> bytes:
    try:
        return _blanks(buf)
    except Invalid:
        return buf


def _one_blank(buf: bytes) -> bytes:
    if not buf:
        raise Incomplete("need more data to find a blank")
    if buf[0] not in _BLANKS:
        raise Invalid(f"expected a blank, got {buf[:1]!r}")
    return buf[1:]


def _take_line(buf: bytes) -> tuple[bytes, bytes]:
    """Split ``buf`` at the first CRLF, consuming it; return ``(rest, line)``."""
    pos = buf.find(_CRLF)
    if pos == -1:
        raise Incomplete("need more data to find the end of the line")
    return buf[pos + 2:], buf[:pos]


def _text(raw: bytes) -> MaybeUtf8:
    try:
        return MaybeUtf8.from_str(raw.decode("utf-8"))
    except UnicodeDecodeError:
        raise Invalid(f"argument is not valid UTF-8: {raw[:32]!r}") from None


def _bare(verb: bytes, factory: Callable[[], Command]) -> _Branch:
    def branch(buf: bytes) -> tuple[bytes, Command]:
        rest = _tag_no_case(buf, verb)
        rest = _tag(_opt_blanks(rest), _CRLF)
        return rest, factory()

    return branch


def _greeting(verb: bytes, factory: Callable[[Hostname], Command]) -> _Branch:
    def branch(buf: bytes) -> tuple[bytes, Command]:
        rest = _blanks(_tag_no_case(buf, verb))
        rest, hostname = Hostname.parse_until(rest, _HOST_TERM)
        rest = _tag(_opt_blanks(rest), _CRLF)
        return rest, factory(hostname)

    return branch


def _required_text(verb: bytes, factory: Callable[[MaybeUtf8], Command]) -> _Branch:
    def branch(buf: bytes) -> tuple[bytes, Command]:
        rest = _one_blank(_tag_no_case(buf, verb))
        rest, raw = _take_line(rest)
        return rest, factory(_text(raw))

    return branch


def _optional_text(verb: bytes, factory: Callable[[MaybeUtf8], Command]) -> _Branch:
    def branch(buf: bytes) -> tuple[bytes, Command]:
        after_verb = _tag_no_case(buf, verb)
        try:
            rest, raw = _take_line(_one_blank(after_verb))
        except Invalid:
            rest, raw = _tag(after_verb, _CRLF), b""
        return rest, factory(_text(raw))

    return branch


def _address_args(buf: bytes, allow_null: bool):
    rest = _opt_blanks(buf)
    path = email = None
    null_sender = False
    if allow_null:
        try:
            rest = _tag(rest, b"<>")
            null_sender = True
        except Invalid:
            pass
    if not null_sender:
        rest, (path, email) = email_with_path(
            rest, b" \t\r", b" \t\r@", b" \t\r>", b" \t\r@>"
        )
    rest, params = Parameters.parse_until(rest, b" \t\r")
    rest = _tag(_opt_blanks(rest), _CRLF)
    return rest, path, email, params


def _mail(buf: bytes) -> tuple[bytes, Command]:
    rest, path, email, params = _address_args(_tag_no_case(buf, b"MAIL FROM:"), True)
    return rest, Mail(path=path, email=email, params=params)


def _rcpt(buf: bytes) -> tuple[bytes, Command]:
    rest, path, email, params = _address_args(_tag_no_case(buf, b"RCPT TO:"), False)
    return rest, Rcpt(email=email, path=path, params=params)


_BRANCHES: tuple[_Branch, ...] = (
    _bare(b"DATA", Data),
    _greeting(b"EHLO", Ehlo),
    _required_text(b"EXPN", Expn),
    _greeting(b"HELO", Helo),
    _optional_text(b"HELP", Help),
    _mail,
    _optional_text(b"NOOP", Noop),
    _bare(b"QUIT", Quit),
    _rcpt,
    _bare(b"RSET", Rset),
    _bare(b"STARTTLS", Starttls),
    _required_text(b"VRFY", Vrfy),
)


def parse_command(buf: bytes) -> tuple[bytes, Command]:
    """Parse one CRLF-terminated command at the start of ``buf``.

    Returns ``(rest, command)``. Raises :class:`Incomplete` if more data is
    needed to decide, and :class:`Invalid` if ``buf`` holds no known command.
    """
    buf = bytes(buf)
    for branch in _BRANCHES:
        try:
            return branch(buf)
        except Invalid:
            continue
    raise Invalid(f"unrecognized command: {buf[:32]!r}")