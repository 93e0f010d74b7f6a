import pytest
from hypothesis import given
from hypothesis import strategies as st

from smtpwire.address import Email, Localpart, LocalpartKind, Path
from smtpwire.command import (
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
from smtpwire.command_parser import parse_command
from smtpwire.hostname import Hostname
from smtpwire.parameters import Parameters
from smtpwire.parsing import Incomplete, Invalid, MaybeUtf8, ParseError


def _email(local, host=None):
    return Email(Localpart(local), Hostname(host) if host is not None else None)


VALID = [
    (b"DATA \t  \t \r\n", Data()),
    (b"daTa\r\n", Data()),
    (b"eHlO \t hello.world \t \r\n", Ehlo(Hostname("hello.world"))),
    (b"EHLO hello.world\r\n", Ehlo(Hostname("hello.world"))),
    (b"EXpN \t hello.world \t \r\n", Expn(MaybeUtf8("\t hello.world \t "))),
    (b"hElO\t hello.world \t \r\n", Helo(Hostname("hello.world"))),
    (b"HELO hello.world\r\n", Helo(Hostname("hello.world"))),
    (b"help \t hello.world \t \r\n", Help(MaybeUtf8("\t hello.world \t "))),
    (b"HELP\r\n", Help(MaybeUtf8(""))),
    (b"hElP \r\n", Help(MaybeUtf8(""))),
    (
        b"Mail FROM:<@one,@two:foo@example.com>\r\n",
        Mail(
            path=Path([Hostname("one"), Hostname("two")]),
            email=_email("foo", "example.com"),
            params=Parameters(),
        ),
    ),
    (
        b"MaiL FrOm: quux@example.com  \t \r\n",
        Mail(path=None, email=_email("quux", "example.com"), params=Parameters()),
    ),
    (
        b"MaiL FrOm: quux@example.com\r\n",
        Mail(path=None, email=_email("quux", "example.com"), params=Parameters()),
    ),
    (b"mail FROM:<>\r\n", Mail(path=None, email=None, params=Parameters())),
    (
        b"MAIL FROM:<> hello=world foo\r\n",
        Mail(
            path=None,
            email=None,
            params=Parameters([("hello", MaybeUtf8("world")), ("foo", None)]),
        ),
    ),
    (b"NOOP \t hello.world \t \r\n", Noop(MaybeUtf8("\t hello.world \t "))),
    (b"nOoP\r\n", Noop(MaybeUtf8(""))),
    (b"noop \r\n", Noop(MaybeUtf8(""))),
    (b"QUIT \t  \t \r\n", Quit()),
    (b"quit\r\n", Quit()),
    (
        b"RCPT TO:<@one,@two:foo@example.com>\r\n",
        Rcpt(
            email=_email("foo", "example.com"),
            path=Path([Hostname("one"), Hostname("two")]),
            params=Parameters(),
        ),
    ),
    (
        b"Rcpt tO: quux@example.com  \t \r\n",
        Rcpt(email=_email("quux", "example.com"), path=None, params=Parameters()),
    ),
    (
        b"rcpt TO:<Postmaster>\r\n",
        Rcpt(email=_email("Postmaster"), path=None, params=Parameters()),
    ),
    (
        b"RcPt TO: \t poStmaster\r\n",
        Rcpt(email=_email("poStmaster"), path=None, params=Parameters()),
    ),
    (b"RSET \t  \t \r\n", Rset()),
    (b"rSet\r\n", Rset()),
    (b"STARTTLS \t  \t \r\n", Starttls()),
    (b"starttls\r\n", Starttls()),
    (b"VrFY \t hello.world \t \r\n", Vrfy(MaybeUtf8("\t hello.world \t "))),
]


@pytest.mark.parametrize("inp,expected", VALID)
def test_command_valid(inp, expected):
    rest, command = parse_command(inp)
    assert rest == b""
    assert command == expected


@pytest.mark.parametrize(
    "inp", [b"MAIL FROM:<foo@example.com", b"mail from:foo@example.com"]
)
def test_command_incomplete(inp):
    with pytest.raises(Incomplete):
        parse_command(inp)


@pytest.mark.parametrize("inp", [b"HELPfoo"])
def test_command_invalid(inp):
    with pytest.raises(Invalid):
        parse_command(inp)


@pytest.mark.parametrize("inp", [b"", b"DA", b"QUIT", b"RCPT TO:<foo@"])
def test_short_prefixes_are_incomplete(inp):
    with pytest.raises(Incomplete):
        parse_command(inp)


def test_unknown_verb_is_invalid():
    with pytest.raises(Invalid):
        parse_command(b"XYZZ\r\n")


def test_invalid_utf8_argument_is_invalid():
    with pytest.raises(Invalid):
        parse_command(b"EXPN \xff\r\n")


def test_trailing_data_is_returned():
    rest, command = parse_command(b"QUIT\r\nRSET\r\n")
    assert command == Quit()
    assert rest == b"RSET\r\n"


def test_utf8_argument_is_flagged():
    _, command = parse_command("VRFY élan\r\n".encode("utf-8"))
    assert command == Vrfy(MaybeUtf8("élan", utf8=True))


def test_rcpt_localpart_kind_is_quoted():
    _, command = parse_command(b'RCPT TO:<"quoted\\"name"@example.com>\r\n')
    assert command.email.localpart.kind is LocalpartKind.QUOTED_ASCII
    assert command.email.hostname == Hostname("example.com")


BUILT = [
    Data(),
    Ehlo(Hostname("test.example.org")),
    Expn(MaybeUtf8("foobar")),
    Helo(Hostname("test.example.org")),
    Help(MaybeUtf8("topic")),
    Mail(path=None, email=_email("foo", "example.com"), params=Parameters()),
    Mail(
        path=Path([Hostname("test"), Hostname("foo.bar")]),
        email=_email("foo", "example.com"),
        params=Parameters(),
    ),
    Mail(path=None, email=None, params=Parameters()),
    Mail(
        path=None,
        email=_email("hello", "example.com"),
        params=Parameters(
            [("foo", MaybeUtf8("bar")), ("baz", None), ("helloworld", MaybeUtf8("bleh"))]
        ),
    ),
    Noop(MaybeUtf8("useless string")),
    Quit(),
    Rcpt(email=_email("foo", "example.com"), path=None, params=Parameters()),
    Rcpt(email=_email("Postmaster"), path=None, params=Parameters()),
    Rset(),
    Starttls(),
    Vrfy(MaybeUtf8("postmaster")),
]


@pytest.mark.parametrize("command", BUILT)
def test_build_then_parse_round_trips(command):
    rest, parsed = parse_command(command.to_bytes())
    assert rest == b""
    assert parsed == command


@given(st.binary(max_size=64))
def test_arbitrary_input_only_raises_parse_errors(data):
    try:
        rest, _ = parse_command(data)
    except ParseError:
        return_value = None
    else:
        return_value = rest
    assert return_value is None or data.endswith(return_value)