"""Mailbox addresses: local parts, e-mail addresses and source routes."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Optional

from smtpwire.hostname import _NON_ASCII_CHAR, _PARTIAL_NON_ASCII_CHAR, Hostname
from smtpwire.parsing import Incomplete, Invalid, MaybeUtf8, apply_regex, terminate

# The first atom class spans "+" to "/" as a range, so it also admits "," "-" ".".
_DOT_STRING_FIRST = rb"a-zA-Z0-9!#$%&'*+,\-./=?^_`{|}~"
_DOT_STRING_NEXT = rb"a-zA-Z0-9!#$%&'*+/=?^_`{|}~\-"

_QUOTED_ASCII_CHAR = rb"[\x20\x21\x23-\x5b\x5d-\x7e]|\\[\x20-\x7e]"

_LOCALPART_ASCII = (
    rb'"(?:' + _QUOTED_ASCII_CHAR + rb')+"'
    rb"|[" + _DOT_STRING_FIRST + rb"]+(?:\.[" + _DOT_STRING_NEXT + rb"]+)*",
    rb'(?:"(?:' + _QUOTED_ASCII_CHAR + rb")*\\?)?",
)

_QUOTED_UTF8_CHAR = (
    rb"[\x20\x21\x23-\x5b\x5d-\x7e]|"
    + _NON_ASCII_CHAR
    + rb"|\\(?:[\x20-\x7e]|"
    + _NON_ASCII_CHAR
    + rb")"
)
_DOT_STRING_UTF8_CHAR = rb"[" + _DOT_STRING_FIRST + rb"]|" + _NON_ASCII_CHAR

_LOCALPART_UTF8 = (
    rb'"(?:' + _QUOTED_UTF8_CHAR + rb')+"'
    rb"|(?:" + _DOT_STRING_UTF8_CHAR + rb")+(?:\.(?:" + _DOT_STRING_UTF8_CHAR + rb")+)*",
    rb'(?:"(?:'
    + _QUOTED_UTF8_CHAR
    + rb")*\\?(?:"
    + _PARTIAL_NON_ASCII_CHAR
    + rb")?|"
    + _PARTIAL_NON_ASCII_CHAR
    + rb")?",
)


def _tag(buf: bytes, literal: bytes) -> bytes:
    """Consume ``literal`` at the start of ``buf`` and return what follows."""
    if buf.startswith(literal):
        return buf[len(literal):]
    if literal.startswith(buf):
        raise Incomplete(f"need more data to match {literal!r}")
    raise Invalid(f"expected {literal!r}, got {buf[:len(literal)]!r}")


class LocalpartKind(enum.Enum):
    """How the local part of an address was written."""

    ASCII = "ascii"
    QUOTED_ASCII = "quoted_ascii"
    UTF8 = "utf8"
    QUOTED_UTF8 = "quoted_utf8"


@dataclass(frozen=True, eq=False)
class Localpart:
    """The part of an address before the ``@``, kept exactly as written.

    Equality and hashing look at ``raw`` only.
    """

    raw: str
    kind: LocalpartKind = LocalpartKind.ASCII

    @classmethod
    def parse_until(cls, buf: bytes, term: bytes) -> tuple[bytes, Localpart]:
        """Parse a local part followed by a byte of ``term`` (not consumed)."""
        try:
            rest, matched = apply_regex(_LOCALPART_ASCII, buf)
            terminate(rest, term)
        except Invalid:
            pass
        else:
            kind = LocalpartKind.QUOTED_ASCII if matched.startswith(b'"') else LocalpartKind.ASCII
            return rest, cls(matched.decode("ascii"), kind)

        rest, matched = apply_regex(_LOCALPART_UTF8, buf)
        terminate(rest, term)
        kind = LocalpartKind.QUOTED_UTF8 if matched.startswith(b'"') else LocalpartKind.UTF8
        return rest, cls(matched.decode("utf-8"), kind)

    def unquote(self) -> MaybeUtf8:
        """Return the local part with quoting and backslash escapes removed."""
        utf8 = self.kind in (LocalpartKind.UTF8, LocalpartKind.QUOTED_UTF8)
        if self.kind in (LocalpartKind.ASCII, LocalpartKind.UTF8):
            return MaybeUtf8(self.raw, utf8=utf8)
        return MaybeUtf8(_unquoted(self.raw), utf8=utf8)

    def to_bytes(self) -> bytes:
        """Return the wire form of the local part."""
        return self.raw.encode("utf-8")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Localpart):
            return NotImplemented
        return self.raw == other.raw

    def __hash__(self) -> int:
        return hash(self.raw)

    def __str__(self) -> str:
        return self.raw


def _unquoted(raw: str) -> str:
    out = []
    escaped = False
    for ch in raw[1:]:
        if escaped:
            out.append(ch)
            escaped = False
        elif ch == '"':
            continue
        elif ch == "\\":
            escaped = True
        else:
            out.append(ch)
    return "".join(out)


@dataclass(frozen=True)
class Email:
    """An e-mail address; the hostname is absent for bare names like ``postmaster``."""

    localpart: Localpart
    hostname: Optional[Hostname] = None

    @classmethod
    def parse_until(
        cls, buf: bytes, term: bytes, term_with_atsign: bytes
    ) -> tuple[bytes, Email]:
        """Parse an address followed by a byte of ``term``.

        ``term_with_atsign`` must be ``term`` with ``@`` added.
        """
        rest, localpart = Localpart.parse_until(buf, term_with_atsign)
        try:
            after_host, hostname = Hostname.parse_until(_tag(rest, b"@"), term)
        except Invalid:
            return rest, cls(localpart, None)
        return after_host, cls(localpart, hostname)

    @classmethod
    def parse_bracketed(cls, buf: bytes) -> Email:
        """Parse ``buf``, which must be exactly one address within ``<`` and ``>``."""
        rest = _tag(buf, b"<")
        rest, email = cls.parse_until(rest, b">", b"@>")
        rest = _tag(rest, b">")
        if rest:
            raise Invalid(f"trailing data after address: {rest[:32]!r}")
        return email

    def to_bytes(self) -> bytes:
        """Return the wire form of the address, without brackets."""
        if self.hostname is None:
            return self.localpart.to_bytes()
        return self.localpart.to_bytes() + b"@" + self.hostname.to_bytes()

    def __str__(self) -> str:
        if self.hostname is None:
            return f"<{self.localpart}>"
        return f"<{self.localpart}@{self.hostname}>"


@dataclass
class Path:
    """A source route (``@one,@two``) that may precede an address."""

    domains: list[Hostname] = field(default_factory=list)

    @classmethod
    def parse_until(cls, buf: bytes, term_with_comma: bytes) -> tuple[bytes, Path]:
        """Parse a route; ``term_with_comma`` is the terminator with ``,`` added."""
        rest, host = Hostname.parse_until(_tag(buf, b"@"), term_with_comma)
        domains = [host]
        while True:
            try:
                after_at = _tag(_tag(rest, b","), b"@")
                after_host, host = Hostname.parse_until(after_at, term_with_comma)
            except Invalid:
                return rest, cls(domains)
            domains.append(host)
            rest = after_host

    def to_bytes(self) -> bytes:
        """Return the wire form of the route."""
        return b",".join(b"@" + domain.to_bytes() for domain in self.domains)


def unbracketed_email_with_path(
    buf: bytes, term: bytes, term_with_atsign: bytes
) -> tuple[bytes, tuple[Optional[Path], Email]]:
    """Parse an optional route followed by ``:`` and an address."""
    path: Optional[Path]
    try:
        after_path, path = Path.parse_until(buf, b":,")
        rest = _tag(after_path, b":")
    except Invalid:
        path, rest = None, buf
    rest, email = Email.parse_until(rest, term, term_with_atsign)
    return rest, (path, email)


def email_with_path(
    buf: bytes,
    term: bytes,
    term_with_atsign: bytes,
    term_with_bracket: bytes,
    term_with_bracket_atsign: bytes,
) -> tuple[bytes, tuple[Optional[Path], Email]]:
    """Parse an address with optional route, in angle brackets or bare.

    The terminators are ``term``, ``term + b"@"``, ``term + b">"`` and
    ``term + b"@>"``.
    """
    try:
        inner = _tag(buf, b"<")
        rest, result = unbracketed_email_with_path(
            inner, term_with_bracket, term_with_bracket_atsign
        )
        return _tag(rest, b">"), result
    except Invalid:
        pass
    return unbracketed_email_with_path(buf, term, term_with_atsign)