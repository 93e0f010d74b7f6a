"""ESMTP parameters as carried by MAIL and RCPT commands."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Optional

from smtpwire.hostname import _NON_ASCII_CHAR, _PARTIAL_NON_ASCII_CHAR
from smtpwire.parsing import Incomplete, Invalid, MaybeUtf8, apply_regex, terminate

_PARAMETER_NAME = (rb"[0-9A-Za-z][-0-9A-Za-z]*", rb"")
_PARAMETER_VALUE_ASCII = (rb"[\x21-\x3c\x3e-\x7e]+", rb"")
_PARAMETER_VALUE_UTF8 = (
    rb"(?:[\x21-\x3c\x3e-\x7e]|" + _NON_ASCII_CHAR + rb")+",
    rb"(?:" + _PARTIAL_NON_ASCII_CHAR + rb")?",
)

Parameter = tuple[str, Optional[MaybeUtf8]]


def parse_parameter_name(buf: bytes) -> tuple[bytes, str]:
    """Parse a parameter keyword at the start of ``buf``; return ``(rest, name)``."""
    rest, matched = apply_regex(_PARAMETER_NAME, buf)
    return rest, matched.decode("ascii")


def _skip_blanks(buf: bytes) -> bytes:
    if not buf:
        raise Incomplete("need more data to find blanks")
    if buf[0] not in b" \t":
        raise Invalid(f"expected a blank, got {buf[:1]!r}")
    rest = buf.lstrip(b" \t")
    if not rest:
        raise Incomplete("need more data after blanks")
    return rest


def _parse_value(buf: bytes, term: bytes) -> tuple[bytes, Optional[MaybeUtf8]]:
    if not buf:
        raise Incomplete("need more data to find a parameter value")
    if buf[0] != ord("="):
        return buf, None
    value_buf = buf[1:]
    for pattern, utf8 in ((_PARAMETER_VALUE_ASCII, False), (_PARAMETER_VALUE_UTF8, True)):
        try:
            rest, matched = apply_regex(pattern, value_buf)
            terminate(rest, term)
        except Invalid:
            continue
        return rest, MaybeUtf8(matched.decode("utf-8"), utf8=utf8)
    return buf, None


@dataclass
class Parameters:
    """An ordered list of ``(name, value)`` parameters; the wire form has a leading blank."""

    items: list[Parameter] = field(default_factory=list)

    @classmethod
    def parse_until(cls, buf: bytes, term_with_sp_tab: bytes) -> tuple[bytes, Parameters]:
        """Parse blank-separated parameters.

        ``term_with_sp_tab`` is the wanted terminator with space and tab added.
        """
        items: list[Parameter] = []
        while True:
            try:
                after_blanks = _skip_blanks(buf)
                after_name, name = parse_parameter_name(after_blanks)
                after_value, value = _parse_value(after_name, term_with_sp_tab)
            except Invalid:
                return buf, cls(items)
            items.append((name, value))
            buf = after_value

    def to_bytes(self) -> bytes:
        """Return the wire form, each parameter preceded by a space."""
        parts = []
        for name, value in self.items:
            parts.append(b" " + name.encode("ascii"))
            if value is not None:
                parts.append(b"=" + value.to_bytes())
        return b"".join(parts)

    def __iter__(self) -> Iterator[Parameter]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)