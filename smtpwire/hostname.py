"""Hostnames as they appear in SMTP commands: domains and address literals."""

from __future__ import annotations

import enum
import ipaddress
from dataclasses import dataclass
from typing import Optional, Union

import idna

from smtpwire.parsing import Invalid, apply_regex, terminate

IpAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]

_ALNUM = rb"0-9A-Za-z"
_LABEL = rb"[" + _ALNUM + rb"](?:[-" + _ALNUM + rb"]*[" + _ALNUM + rb"])?"

_HOSTNAME_ASCII = (
    rb"\[IPv6:[:.0-9A-Fa-f]+\]"
    rb"|\[[.0-9]+\]"
    rb"|" + _LABEL + rb"(?:\." + _LABEL + rb")*",
    rb"(?:\[(?:I(?:P(?:v(?:6(?::[:.0-9A-Fa-f]*)?)?)?)?|[.0-9]*)?)?",
)

# One complete non-ASCII character, spelled out as its UTF-8 byte sequences.
_NON_ASCII_CHAR = (
    rb"[\xc2-\xdf][\x80-\xbf]"
    rb"|\xe0[\xa0-\xbf][\x80-\xbf]"
    rb"|[\xe1-\xec\xee\xef][\x80-\xbf]{2}"
    rb"|\xed[\x80-\x9f][\x80-\xbf]"
    rb"|\xf0[\x90-\xbf][\x80-\xbf]{2}"
    rb"|[\xf1-\xf3][\x80-\xbf]{3}"
    rb"|\xf4[\x80-\x8f][\x80-\xbf]{2}"
)

# A truncated non-ASCII character, which could still become a whole one.
_PARTIAL_NON_ASCII_CHAR = (
    rb"[\xc2-\xdf]"
    rb"|\xe0[\xa0-\xbf]?"
    rb"|[\xe1-\xec\xee\xef][\x80-\xbf]?"
    rb"|\xed[\x80-\x9f]?"
    rb"|\xf0(?:[\x90-\xbf][\x80-\xbf]?)?"
    rb"|[\xf1-\xf3](?:[\x80-\xbf]{1,2})?"
    rb"|\xf4(?:[\x80-\x8f][\x80-\xbf]?)?"
)

_HOSTNAME_UTF8 = (
    rb"(?:[-." + _ALNUM + rb"]|" + _NON_ASCII_CHAR + rb")+",
    rb"(?:" + _PARTIAL_NON_ASCII_CHAR + rb")?",
)


class HostnameKind(enum.Enum):
    """The syntactic form a hostname was written in."""

    UTF8_DOMAIN = "utf8_domain"
    ASCII_DOMAIN = "ascii_domain"
    IPV6 = "ipv6"
    IPV4 = "ipv4"


@dataclass(frozen=True, eq=False)
class Hostname:
    """A hostname, remembered exactly as written in ``raw``.

    Equality and hashing look at ``raw`` only; use :meth:`deep_equal` to also
    compare the kind and the derived punycode or IP address.
    """

    raw: str
    kind: HostnameKind = HostnameKind.ASCII_DOMAIN
    punycode: Optional[str] = None
    ip: Optional[IpAddress] = None

    @classmethod
    def parse(cls, data: bytes) -> tuple[bytes, Hostname]:
        """Parse ``data``, which must consist of exactly one hostname."""
        return cls._parse(data, expected_length=len(data), term=None)

    @classmethod
    def parse_until(cls, buf: bytes, term: bytes) -> tuple[bytes, Hostname]:
        """Parse a hostname at the start of ``buf`` that is followed by a byte of ``term``.

        The terminator is not consumed.
        """
        return cls._parse(buf, expected_length=None, term=term)

    @classmethod
    def _parse(
        cls, buf: bytes, expected_length: Optional[int], term: Optional[bytes]
    ) -> tuple[bytes, Hostname]:
        try:
            rest, matched = apply_regex(_HOSTNAME_ASCII, buf)
            if term is not None:
                terminate(rest, term)
            if expected_length is None or len(matched) == expected_length:
                host = cls._from_ascii(matched)
                if host is not None:
                    return rest, host
        except Invalid:
            pass

        rest, matched = apply_regex(_HOSTNAME_UTF8, buf)
        if term is not None:
            terminate(rest, term)
        if expected_length is not None and len(matched) != expected_length:
            raise Invalid(f"trailing data after hostname: {buf[:32]!r}")
        host = cls._from_utf8(matched)
        if host is None:
            raise Invalid(f"invalid internationalized domain: {matched[:32]!r}")
        return rest, host

    @classmethod
    def _from_ascii(cls, matched: bytes) -> Optional[Hostname]:
        raw = matched.decode("ascii")
        if not raw.startswith("["):
            return cls(raw, HostnameKind.ASCII_DOMAIN)
        try:
            if raw[1] == "I":
                return cls(raw, HostnameKind.IPV6, ip=ipaddress.IPv6Address(raw[6:-1]))
            return cls(raw, HostnameKind.IPV4, ip=ipaddress.IPv4Address(raw[1:-1]))
        except ValueError:
            return None

    @classmethod
    def _from_utf8(cls, matched: bytes) -> Optional[Hostname]:
        raw = matched.decode("utf-8")
        try:
            punycode = idna.encode(raw, uts46=True, std3_rules=True).decode("ascii")
        except (idna.IDNAError, UnicodeError):
            return None
        return cls(raw, HostnameKind.UTF8_DOMAIN, punycode=punycode)

    def deep_equal(self, other: Hostname) -> bool:
        """Compare every field, not only ``raw``."""
        return (
            self.kind is other.kind
            and self.raw == other.raw
            and self.punycode == other.punycode
            and self.ip == other.ip
        )

    def to_bytes(self) -> bytes:
        """Return the wire form of the hostname."""
        return self.raw.encode("utf-8")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Hostname):
            return NotImplemented
        return self.raw == other.raw

    def __hash__(self) -> int:
        return hash(self.raw)

    def __str__(self) -> str:
        return self.raw