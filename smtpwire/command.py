"""SMTP commands sent by a client, and their wire form."""

from __future__ import annotations

import abc
from dataclasses import dataclass, field
from typing import Optional

from smtpwire.address import Email, Path
from smtpwire.hostname import Hostname
from smtpwire.parameters import Parameters
from smtpwire.parsing import MaybeUtf8

_CRLF = b"\r\n"


def _route_and_address(path: Optional[Path], email: Optional[Email]) -> bytes:
    parts = [b"<"]
    if path is not None:
        parts.append(path.to_bytes() + b":")
    if email is not None:
        parts.append(email.to_bytes())
    parts.append(b">")
    return b"".join(parts)


class Command(abc.ABC):
    """Base class of every SMTP command."""

    @abc.abstractmethod
    def to_bytes(self) -> bytes:
        """Return the wire form of the command, CRLF included."""


@dataclass(frozen=True)
class Data(Command):
    """``DATA``"""

    def to_bytes(self) -> bytes:
        return b"DATA" + _CRLF


@dataclass(frozen=True)
class Ehlo(Command):
    """``EHLO <hostname>``"""

    hostname: Hostname

    def to_bytes(self) -> bytes:
        return b"EHLO " + self.hostname.to_bytes() + _CRLF


@dataclass(frozen=True)
class Expn(Command):
    """``EXPN <name>``"""

    name: MaybeUtf8

    def to_bytes(self) -> bytes:
        return b"EXPN " + self.name.to_bytes() + _CRLF


@dataclass(frozen=True)
class Helo(Command):
    """``HELO <hostname>``"""

    hostname: Hostname

    def to_bytes(self) -> bytes:
        return b"HELO " + self.hostname.to_bytes() + _CRLF


@dataclass(frozen=True)
class Help(Command):
    """``HELP [<subject>]``"""

    subject: MaybeUtf8 = MaybeUtf8("")

    def to_bytes(self) -> bytes:
        return b"HELP " + self.subject.to_bytes() + _CRLF


@dataclass(frozen=True)
class Mail(Command):
    """``MAIL FROM:<[route:]address> [parameters]``; no address means the null sender."""

    path: Optional[Path] = None
    email: Optional[Email] = None
    params: Parameters = field(default_factory=Parameters)

    def to_bytes(self) -> bytes:
        return (
            b"MAIL FROM:"
            + _route_and_address(self.path, self.email)
            + self.params.to_bytes()
            + _CRLF
        )


@dataclass(frozen=True)
class Noop(Command):
    """``NOOP [<string>]``"""

    string: MaybeUtf8 = MaybeUtf8("")

    def to_bytes(self) -> bytes:
        return b"NOOP " + self.string.to_bytes() + _CRLF


@dataclass(frozen=True)
class Quit(Command):
    """``QUIT``"""

    def to_bytes(self) -> bytes:
        return b"QUIT" + _CRLF


@dataclass(frozen=True)
class Rcpt(Command):
    """``RCPT TO:<[route:]address> [parameters]``"""

    email: Email
    path: Optional[Path] = None
    params: Parameters = field(default_factory=Parameters)

    def to_bytes(self) -> bytes:
        return (
            b"RCPT TO:"
            + _route_and_address(self.path, self.email)
            + self.params.to_bytes()
            + _CRLF
        )


@dataclass(frozen=True)
class Rset(Command):
    """``RSET``"""

    def to_bytes(self) -> bytes:
        return b"RSET" + _CRLF


@dataclass(frozen=True)
class Starttls(Command):
    """``STARTTLS``"""

    def to_bytes(self) -> bytes:
        return b"STARTTLS" + _CRLF


@dataclass(frozen=True)
class Vrfy(Command):
    """``VRFY <name>``"""

    name: MaybeUtf8

    def to_bytes(self) -> bytes:
        return b"VRFY " + self.name.to_bytes() + _CRLF