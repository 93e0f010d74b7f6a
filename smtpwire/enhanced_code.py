"""Enhanced mail system status codes (class.subject.detail)."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from smtpwire.parsing import apply_regex

_EXTENDED_REPLY_CODE = (
    rb"[245]\.[0-9]{1,3}\.[0-9]{1,3}",
    rb"(?:[245](?:\.(?:[0-9]{1,3}\.?)?)?)?",
)


class EnhancedReplyCodeClass(enum.IntEnum):
    """The class digit of an enhanced status code."""

    SUCCESS = 2
    PERSISTENT_TRANSIENT = 4
    PERMANENT_FAILURE = 5


class EnhancedReplyCodeSubject(enum.Enum):
    """The subject an enhanced status code is about."""

    UNDEFINED = "undefined"
    ADDRESSING = "addressing"
    MAILBOX = "mailbox"
    MAIL_SYSTEM = "mail_system"
    NETWORK = "network"
    MAIL_DELIVERY = "mail_delivery"
    CONTENT = "content"
    POLICY = "policy"


_SUBJECTS = {
    1: EnhancedReplyCodeSubject.ADDRESSING,
    2: EnhancedReplyCodeSubject.MAILBOX,
    3: EnhancedReplyCodeSubject.MAIL_SYSTEM,
    4: EnhancedReplyCodeSubject.NETWORK,
    5: EnhancedReplyCodeSubject.MAIL_DELIVERY,
    6: EnhancedReplyCodeSubject.CONTENT,
    7: EnhancedReplyCodeSubject.POLICY,
}


@dataclass(frozen=True)
class EnhancedReplyCode:
    """An enhanced status code such as ``5.1.1``; ``raw`` is always ASCII."""

    raw: str
    code_class: EnhancedReplyCodeClass
    raw_subject: int
    raw_detail: int

    @classmethod
    def parse(cls, buf: bytes) -> tuple[bytes, EnhancedReplyCode]:
        """Parse an enhanced code at the start of ``buf``; return ``(rest, code)``."""
        rest, matched = apply_regex(_EXTENDED_REPLY_CODE, buf)
        raw = matched.decode("ascii")
        klass, subject, detail = raw.split(".")
        return rest, cls(raw, EnhancedReplyCodeClass(int(klass)), int(subject), int(detail))

    def subject(self) -> EnhancedReplyCodeSubject:
        """Interpret the subject number."""
        return _SUBJECTS.get(self.raw_subject, EnhancedReplyCodeSubject.UNDEFINED)

    def to_bytes(self) -> bytes:
        """Return the wire form of the code."""
        return self.raw.encode("ascii")

    def __str__(self) -> str:
        return self.raw


# (success, transient, permanent, subject, detail); None where no code is defined.
_KNOWN_CODES = (
    ("SUCCESS_UNDEFINED", "TRANSIENT_UNDEFINED", "PERMANENT_UNDEFINED", 0, 0),
    ("SUCCESS_ADDRESS_OTHER", "TRANSIENT_ADDRESS_OTHER", "PERMANENT_ADDRESS_OTHER", 1, 0),
    (None, None, "PERMANENT_BAD_DEST_MAILBOX", 1, 1),
    (None, None, "PERMANENT_BAD_DEST_SYSTEM", 1, 2),
    (None, None, "PERMANENT_BAD_DEST_MAILBOX_SYNTAX", 1, 3),
    ("SUCCESS_DEST_MAILBOX_AMBIGUOUS", "TRANSIENT_DEST_MAILBOX_AMBIGUOUS", "PERMANENT_DEST_MAILBOX_AMBIGUOUS", 1, 4),
    ("SUCCESS_DEST_VALID", None, None, 1, 5),
    (None, None, "PERMANENT_DEST_MAILBOX_HAS_MOVED", 1, 6),
    (None, None, "PERMANENT_BAD_SENDER_MAILBOX_SYNTAX", 1, 7),
    (None, "TRANSIENT_BAD_SENDER_SYSTEM", "PERMANENT_BAD_SENDER_SYSTEM", 1, 8),
    ("SUCCESS_MESSAGE_RELAYED_TO_NON_COMPLIANT_MAILER", None, "PERMANENT_MESSAGE_RELAYED_TO_NON_COMPLIANT_MAILER", 1, 9),
    (None, None, "PERMANENT_RECIPIENT_ADDRESS_HAS_NULL_MX", 1, 10),
    ("SUCCESS_MAILBOX_OTHER", "TRANSIENT_MAILBOX_OTHER", "PERMANENT_MAILBOX_OTHER", 2, 0),
    (None, "TRANSIENT_MAILBOX_DISABLED", "PERMANENT_MAILBOX_DISABLED", 2, 1),
    (None, "TRANSIENT_MAILBOX_FULL", None, 2, 2),
    (None, None, "PERMANENT_MESSAGE_TOO_LONG_FOR_MAILBOX", 2, 3),
    (None, "TRANSIENT_MAILING_LIST_EXPANSION_ISSUE", "PERMANENT_MAILING_LIST_EXPANSION_ISSUE", 2, 4),
    ("SUCCESS_SYSTEM_OTHER", "TRANSIENT_SYSTEM_OTHER", "PERMANENT_SYSTEM_OTHER", 3, 0),
    (None, "TRANSIENT_SYSTEM_FULL", None, 3, 1),
    (None, "TRANSIENT_SYSTEM_NOT_ACCEPTING_MESSAGES", "PERMANENT_SYSTEM_NOT_ACCEPTING_MESSAGES", 3, 2),
    (None, "TRANSIENT_SYSTEM_INCAPABLE_OF_FEATURE", "PERMANENT_SYSTEM_INCAPABLE_OF_FEATURE", 3, 3),
    (None, None, "PERMANENT_MESSAGE_TOO_BIG", 3, 4),
    (None, "TRANSIENT_SYSTEM_INCORRECTLY_CONFIGURED", "PERMANENT_SYSTEM_INCORRECTLY_CONFIGURED", 3, 5),
    ("SUCCESS_REQUESTED_PRIORITY_WAS_CHANGED", None, None, 3, 6),
    ("SUCCESS_NETWORK_OTHER", "TRANSIENT_NETWORK_OTHER", "PERMANENT_NETWORK_OTHER", 4, 0),
    (None, "TRANSIENT_NO_ANSWER_FROM_HOST", None, 4, 1),
    (None, "TRANSIENT_BAD_CONNECTION", None, 4, 2),
    (None, "TRANSIENT_DIRECTORY_SERVER_FAILURE", None, 4, 3),
    (None, "TRANSIENT_UNABLE_TO_ROUTE", "PERMANENT_UNABLE_TO_ROUTE", 4, 4),
    (None, "TRANSIENT_SYSTEM_CONGESTION", None, 4, 5),
    (None, "TRANSIENT_ROUTING_LOOP_DETECTED", None, 4, 6),
    (None, "TRANSIENT_DELIVERY_TIME_EXPIRED", "PERMANENT_DELIVERY_TIME_EXPIRED", 4, 7),
    ("SUCCESS_DELIVERY_OTHER", "TRANSIENT_DELIVERY_OTHER", "PERMANENT_DELIVERY_OTHER", 5, 0),
    (None, None, "PERMANENT_INVALID_COMMAND", 5, 1),
    (None, None, "PERMANENT_SYNTAX_ERROR", 5, 2),
    (None, "TRANSIENT_TOO_MANY_RECIPIENTS", "PERMANENT_TOO_MANY_RECIPIENTS", 5, 3),
    (None, None, "PERMANENT_INVALID_COMMAND_ARGUMENTS", 5, 4),
    (None, "TRANSIENT_WRONG_PROTOCOL_VERSION", "PERMANENT_WRONG_PROTOCOL_VERSION", 5, 5),
    (None, "TRANSIENT_AUTH_EXCHANGE_LINE_TOO_LONG", "PERMANENT_AUTH_EXCHANGE_LINE_TOO_LONG", 5, 6),
    ("SUCCESS_CONTENT_OTHER", "TRANSIENT_CONTENT_OTHER", "PERMANENT_CONTENT_OTHER", 6, 0),
    (None, None, "PERMANENT_MEDIA_NOT_SUPPORTED", 6, 1),
    (None, "TRANSIENT_CONVERSION_REQUIRED_AND_PROHIBITED", "PERMANENT_CONVERSION_REQUIRED_AND_PROHIBITED", 6, 2),
    (None, "TRANSIENT_CONVERSION_REQUIRED_BUT_NOT_SUPPORTED", "PERMANENT_CONVERSION_REQUIRED_BUT_NOT_SUPPORTED", 6, 3),
    ("SUCCESS_CONVERSION_WITH_LOSS_PERFORMED", "TRANSIENT_CONVERSION_WITH_LOSS_PERFORMED", "PERMANENT_CONVERSION_WITH_LOSS_PERFORMED", 6, 4),
    (None, "TRANSIENT_CONVERSION_FAILED", "PERMANENT_CONVERSION_FAILED", 6, 5),
    (None, "TRANSIENT_MESSAGE_CONTENT_NOT_AVAILABLE", "PERMANENT_MESSAGE_CONTENT_NOT_AVAILABLE", 6, 6),
    (None, None, "PERMANENT_NON_ASCII_ADDRESSES_NOT_PERMITTED", 6, 7),
    ("SUCCESS_UTF8_WOULD_BE_REQUIRED", "TRANSIENT_UTF8_WOULD_BE_REQUIRED", "PERMANENT_UTF8_WOULD_BE_REQUIRED", 6, 8),
    (None, None, "PERMANENT_UTF8_MESSAGE_CANNOT_BE_TRANSMITTED", 6, 9),
    ("SUCCESS_UTF8_WOULD_BE_REQUIRED_BIS", "TRANSIENT_UTF8_WOULD_BE_REQUIRED_BIS", "PERMANENT_UTF8_WOULD_BE_REQUIRED_BIS", 6, 10),
    ("SUCCESS_POLICY_OTHER", "TRANSIENT_POLICY_OTHER", "PERMANENT_POLICY_OTHER", 7, 0),
    (None, None, "PERMANENT_DELIVERY_NOT_AUTHORIZED", 7, 1),
    (None, None, "PERMANENT_MAILING_LIST_EXPANSION_PROHIBITED", 7, 2),
    (None, None, "PERMANENT_SECURITY_CONVERSION_REQUIRED_BUT_NOT_POSSIBLE", 7, 3),
    (None, None, "PERMANENT_SECURITY_FEATURES_NOT_SUPPORTED", 7, 4),
    (None, "TRANSIENT_CRYPTO_FAILURE", "PERMANENT_CRYPTO_FAILURE", 7, 5),
    (None, "TRANSIENT_CRYPTO_ALGO_NOT_SUPPORTED", "PERMANENT_CRYPTO_ALGO_NOT_SUPPORTED", 7, 6),
    ("SUCCESS_MESSAGE_INTEGRITY_FAILURE", "TRANSIENT_MESSAGE_INTEGRITY_FAILURE", "PERMANENT_MESSAGE_INTEGRITY_FAILURE", 7, 7),
    (None, None, "PERMANENT_AUTH_CREDENTIALS_INVALID", 7, 8),
    (None, None, "PERMANENT_AUTH_MECHANISM_TOO_WEAK", 7, 9),
    (None, None, "PERMANENT_ENCRYPTION_NEEDED", 7, 10),
    (None, None, "PERMANENT_ENCRYPTION_REQUIRED_FOR_REQUESTED_AUTH_MECHANISM", 7, 11),
    (None, "TRANSIENT_PASSWORD_TRANSITION_NEEDED", None, 7, 12),
    (None, None, "PERMANENT_USER_ACCOUNT_DISABLED", 7, 13),
    (None, None, "PERMANENT_TRUST_RELATIONSHIP_REQUIRED", 7, 14),
    (None, "TRANSIENT_PRIORITY_TOO_LOW", "PERMANENT_PRIORITY_TOO_LOW", 7, 15),
    (None, "TRANSIENT_MESSAGE_TOO_BIG_FOR_PRIORITY", "PERMANENT_MESSAGE_TOO_BIG_FOR_PRIORITY", 7, 16),
    (None, None, "PERMANENT_MAILBOX_OWNER_HAS_CHANGED", 7, 17),
    (None, None, "PERMANENT_DOMAIN_OWNER_HAS_CHANGED", 7, 18),
    (None, None, "PERMANENT_RRVS_CANNOT_BE_COMPLETED", 7, 19),
    (None, None, "PERMANENT_NO_PASSING_DKIM_SIGNATURE_FOUND", 7, 20),
    (None, None, "PERMANENT_NO_ACCEPTABLE_DKIM_SIGNATURE_FOUND", 7, 21),
    (None, None, "PERMANENT_NO_AUTHOR_MATCHED_DKIM_SIGNATURE_FOUND", 7, 22),
    (None, None, "PERMANENT_SPF_VALIDATION_FAILED", 7, 23),
    (None, "TRANSIENT_SPF_VALIDATION_ERROR", "PERMANENT_SPF_VALIDATION_ERROR", 7, 24),
    (None, None, "PERMANENT_REVERSE_DNS_VALIDATION_FAILED", 7, 25),
    (None, None, "PERMANENT_MULTIPLE_AUTH_CHECKS_FAILED", 7, 26),
    (None, None, "PERMANENT_SENDER_ADDRESS_HAS_NULL_MX", 7, 27),
    ("SUCCESS_MAIL_FLOOD_DETECTED", "TRANSIENT_MAIL_FLOOD_DETECTED", "PERMANENT_MAIL_FLOOD_DETECTED", 7, 28),
    (None, None, "PERMANENT_ARC_VALIDATION_FAILURE", 7, 29),
    (None, None, "PERMANENT_REQUIRETLS_SUPPORT_REQUIRED", 7, 30),
)

_CLASS_ORDER = (
    EnhancedReplyCodeClass.SUCCESS,
    EnhancedReplyCodeClass.PERSISTENT_TRANSIENT,
    EnhancedReplyCodeClass.PERMANENT_FAILURE,
)

for *_names, _subject, _detail in _KNOWN_CODES:
    for _name, _klass in zip(_names, _CLASS_ORDER):
        if _name is not None:
            setattr(
                EnhancedReplyCode,
                _name,
                EnhancedReplyCode(f"{int(_klass)}.{_subject}.{_detail}", _klass, _subject, _detail),
            )
del _names, _subject, _detail, _name, _klass