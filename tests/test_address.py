import pytest
from hypothesis import given
from hypothesis import strategies as st

from smtpwire.address import (
    Email,
    Localpart,
    LocalpartKind,
    Path,
    email_with_path,
    unbracketed_email_with_path,
)
from smtpwire.hostname import Hostname, HostnameKind
from smtpwire.parsing import Incomplete, Invalid, MaybeUtf8


@pytest.mark.parametrize(
    "inp, raw, kind",
    [
        (b"helloooo@", "helloooo", LocalpartKind.ASCII),
        (b"test.ing>", "test.ing", LocalpartKind.ASCII),
        (b'"hello"@', '"hello"', LocalpartKind.QUOTED_ASCII),
        (
            b'"hello world. This |$ a g#eat place to experiment !">',
            '"hello world. This |$ a g#eat place to experiment !"',
            LocalpartKind.QUOTED_ASCII,
        ),
        (
            rb'"\"escapes\", useless like h\ere, except for quotes and backslashes\\"@',
            r'"\"escapes\", useless like h\ere, except for quotes and backslashes\\"',
            LocalpartKind.QUOTED_ASCII,
        ),
        ("tést@".encode(), "tést", LocalpartKind.UTF8),
        ('"tést"@'.encode(), '"tést"', LocalpartKind.QUOTED_UTF8),
    ],
)
def test_localpart_valid(inp, raw, kind):
    rest, lp = Localpart.parse_until(inp, b"@>")
    assert rest in (b"@", b">")
    assert lp.raw == raw
    assert lp.kind is kind


@pytest.mark.parametrize("inp", [b'""@', b'"""@', b"\r@"])
def test_localpart_invalid(inp):
    with pytest.raises(Invalid):
        Localpart.parse_until(inp, b"@>")


@pytest.mark.parametrize("inp", [b"", b'"abc', b"abc", b'"ab\\'])
def test_localpart_incomplete(inp):
    with pytest.raises(Incomplete):
        Localpart.parse_until(inp, b"@>")


@pytest.mark.parametrize(
    "inp, out",
    [
        (b"t+e-s.t_i+n-g@example.com ", MaybeUtf8("t+e-s.t_i+n-g")),
        (rb'"quoted\"example"@example.com ', MaybeUtf8('quoted"example')),
        (rb'"escaped\\exa\mple"@example.com ', MaybeUtf8(r"escaped\example")),
    ],
)
def test_localpart_unquoting(inp, out):
    _, email = Email.parse_until(inp, b" ", b" @")
    assert email.localpart.unquote() == out


def test_unquote_utf8_is_flagged():
    lp = Localpart('"tést\\"x"', LocalpartKind.QUOTED_UTF8)
    assert lp.unquote() == MaybeUtf8('tést"x', utf8=True)


def test_localpart_equality_uses_raw_only():
    assert Localpart("abc", LocalpartKind.ASCII) == Localpart("abc", LocalpartKind.UTF8)
    assert hash(Localpart("abc")) == hash(Localpart("abc", LocalpartKind.UTF8))
    assert Localpart("abc") != Localpart("abd")


@pytest.mark.parametrize(
    "inp, email",
    [
        (
            b"t+e-s.t_i+n-g@example.com>",
            Email(Localpart("t+e-s.t_i+n-g"), Hostname("example.com")),
        ),
        (
            rb'"quoted\"example"@example.com>',
            Email(Localpart(r'"quoted\"example"', LocalpartKind.QUOTED_ASCII), Hostname("example.com")),
        ),
        (b"postmaster>", Email(Localpart("postmaster"), None)),
        (b"test>", Email(Localpart("test"), None)),
        ("tést>".encode(), Email(Localpart("tést", LocalpartKind.UTF8), None)),
    ],
)
def test_email_valid(inp, email):
    rest, parsed = Email.parse_until(inp, b">", b">@")
    assert rest == b">"
    assert parsed == email


def test_email_utf8_localpart_kind():
    _, parsed = Email.parse_until("tést>".encode(), b">", b">@")
    assert parsed.localpart.kind is LocalpartKind.UTF8
    assert parsed.hostname is None


def test_email_invalid():
    with pytest.raises(Invalid):
        Email.parse_until(b"@foo.bar", b">", b">@")


def test_email_bad_hostname_leaves_atsign():
    rest, parsed = Email.parse_until(b"foo@-bad>", b">", b">@")
    assert rest == b"@-bad>"
    assert parsed == Email(Localpart("foo"), None)


def test_parse_bracketed():
    assert Email.parse_bracketed(b"<foo@example.com>") == Email(
        Localpart("foo"), Hostname("example.com")
    )
    assert Email.parse_bracketed(b"<Postmaster>") == Email(Localpart("Postmaster"))


@pytest.mark.parametrize(
    "inp, error",
    [
        (b"<foo@example.com>x", Invalid),
        (b"foo@example.com", Invalid),
        (b"<foo@exa", Incomplete),
        (b"", Incomplete),
    ],
)
def test_parse_bracketed_errors(inp, error):
    with pytest.raises(error):
        Email.parse_bracketed(inp)


def test_email_to_bytes_and_str():
    email = Email(Localpart("foo"), Hostname("example.com"))
    assert email.to_bytes() == b"foo@example.com"
    assert str(email) == "<foo@example.com>"
    bare = Email(Localpart("Postmaster"))
    assert bare.to_bytes() == b"Postmaster"
    assert str(bare) == "<Postmaster>"


@given(st.from_regex(r"[a-z0-9]{1,8}(\.[a-z0-9]{1,8}){0,2}", fullmatch=True))
def test_email_roundtrip(localpart):
    email = Email(Localpart(localpart), Hostname("example.com"))
    assert Email.parse_bracketed(b"<" + email.to_bytes() + b">") == email


def test_path_parse_and_build():
    rest, path = Path.parse_until(b"@a.example,@b.example:", b":,")
    assert rest == b":"
    assert path == Path([Hostname("a.example"), Hostname("b.example")])
    assert path.to_bytes() == b"@a.example,@b.example"


def test_path_invalid():
    with pytest.raises(Invalid):
        Path.parse_until(b"foo:", b":,")


def test_path_with_utf8_domain():
    rest, path = Path.parse_until("@élégance.fr:".encode(), b":,")
    assert rest == b":"
    assert path.domains[0].kind is HostnameKind.UTF8_DOMAIN
    assert path.domains[0].punycode == "xn--lgance-9uab.fr"


@pytest.mark.parametrize(
    "inp, out",
    [
        (
            b"@foo.bar,@baz.quux:test@example.com>",
            (
                Path([Hostname("foo.bar"), Hostname("baz.quux")]),
                Email(Localpart("test"), Hostname("example.com")),
            ),
        ),
        (
            b"foo.bar@example.com>",
            (None, Email(Localpart("foo.bar"), Hostname("example.com"))),
        ),
    ],
)
def test_unbracketed_email_with_path_valid(inp, out):
    rest, res = unbracketed_email_with_path(inp, b">", b">@")
    assert rest == b">"
    assert res == out


_ROUTED = (
    Path([Hostname("foo.bar"), Hostname("baz.quux")]),
    Email(Localpart("test"), Hostname("example.com")),
)


@pytest.mark.parametrize(
    "inp, out",
    [
        (b"@foo.bar,@baz.quux:test@example.com ", _ROUTED),
        (b"<@foo.bar,@baz.quux:test@example.com> ", _ROUTED),
        (b"<foo@example.com> ", (None, Email(Localpart("foo"), Hostname("example.com")))),
        (b"foo@example.com ", (None, Email(Localpart("foo"), Hostname("example.com")))),
        (b"foobar ", (None, Email(Localpart("foobar"), None))),
    ],
)
def test_email_with_path_valid(inp, out):
    rest, res = email_with_path(inp, b" ", b" @", b" >", b" @>")
    assert rest == b" "
    assert res == out


def test_email_with_path_incomplete():
    with pytest.raises(Incomplete):
        email_with_path(b"<foo@example.com", b" ", b" @", b" >", b" @>")