import pytest

from smtpwire.enhanced_code import (
    EnhancedReplyCode,
    EnhancedReplyCodeClass,
    EnhancedReplyCodeSubject,
)
from smtpwire.parsing import Incomplete, Invalid


@pytest.mark.parametrize(
    "inp,code_class,subject,detail",
    [
        (b"2.1.23", EnhancedReplyCodeClass.SUCCESS, 1, 23),
        (b"5.243.567", EnhancedReplyCodeClass.PERMANENT_FAILURE, 243, 567),
    ],
)
def test_parse_valid(inp, code_class, subject, detail):
    rest, code = EnhancedReplyCode.parse(inp)
    assert rest == b""
    assert code == EnhancedReplyCode(inp.decode(), code_class, subject, detail)


@pytest.mark.parametrize("inp", [b"4.", b"5.23"])
def test_parse_incomplete(inp):
    with pytest.raises(Incomplete):
        EnhancedReplyCode.parse(inp)


@pytest.mark.parametrize("inp", [b"foo", b"3.5.1", b"1.1000.2"])
def test_parse_invalid(inp):
    with pytest.raises(Invalid):
        EnhancedReplyCode.parse(inp)


def test_parse_leaves_trailing_data():
    rest, code = EnhancedReplyCode.parse(b"4.7.1 try later")
    assert rest == b" try later"
    assert code.raw == "4.7.1"
    assert code.code_class is EnhancedReplyCodeClass.PERSISTENT_TRANSIENT


def test_parse_matches_named_constant():
    _, code = EnhancedReplyCode.parse(b"5.1.1")
    assert code == EnhancedReplyCode.PERMANENT_BAD_DEST_MAILBOX


def test_named_constant_wire_form():
    assert EnhancedReplyCode.PERMANENT_DELIVERY_NOT_AUTHORIZED.to_bytes() == b"5.7.1"
    assert EnhancedReplyCode.TRANSIENT_MAILBOX_FULL.to_bytes() == b"4.2.2"
    assert EnhancedReplyCode.SUCCESS_UNDEFINED.to_bytes() == b"2.0.0"


@pytest.mark.parametrize(
    "inp,subject",
    [
        (b"2.0.0", EnhancedReplyCodeSubject.UNDEFINED),
        (b"5.1.1", EnhancedReplyCodeSubject.ADDRESSING),
        (b"4.2.2", EnhancedReplyCodeSubject.MAILBOX),
        (b"5.3.4", EnhancedReplyCodeSubject.MAIL_SYSTEM),
        (b"4.4.7", EnhancedReplyCodeSubject.NETWORK),
        (b"5.5.1", EnhancedReplyCodeSubject.MAIL_DELIVERY),
        (b"5.6.1", EnhancedReplyCodeSubject.CONTENT),
        (b"5.7.1", EnhancedReplyCodeSubject.POLICY),
        (b"4.9.1", EnhancedReplyCodeSubject.UNDEFINED),
    ],
)
def test_subject(inp, subject):
    assert EnhancedReplyCode.parse(inp)[1].subject() is subject


def test_roundtrip_through_bytes():
    original = EnhancedReplyCode.PERMANENT_REQUIRETLS_SUPPORT_REQUIRED
    rest, parsed = EnhancedReplyCode.parse(original.to_bytes())
    assert rest == b""
    assert parsed == original
    assert str(parsed) == "5.7.30"