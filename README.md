# smtpwire

Parsing and building of pieces of the SMTP wire protocol: client commands,
mailbox addresses and hostnames, ESMTP parameters, enhanced status codes and
the dot-escaped `DATA` stream.

The parsers work on `bytes` as they arrive from the network and return a
`(rest, value)` pair, where `rest` is the input left after the parsed part.
When the input ends before a decision can be made they raise `Incomplete`,
so the caller can read more and try again. When the input can never become
valid they raise `Invalid`. Both derive from `ParseError`, and all three live
in `smtpwire.parsing`.

## Installation

```
pip install smtpwire
```

## Commands

```python
from smtpwire.command_parser import parse_command

rest, cmd = parse_command(b"MAIL FROM:<user@example.com> SIZE=1000\r\n")
assert rest == b""
print(cmd.to_bytes())  # b"MAIL FROM:<user@example.com> SIZE=1000\r\n"
```

`parse_command` recognises `DATA`, `EHLO`, `EXPN`, `HELO`, `HELP`,
`MAIL FROM:`, `NOOP`, `QUIT`, `RCPT TO:`, `RSET`, `STARTTLS` and `VRFY`,
case-insensitively. The resulting classes (`Data`, `Ehlo`, `Expn`, `Helo`,
`Help`, `Mail`, `Noop`, `Quit`, `Rcpt`, `Rset`, `Starttls`, `Vrfy`) live in
`smtpwire.command`, derive from `Command`, and each has `to_bytes()`
returning the CRLF-terminated wire form. A `Mail` with no `email` is the
null sender, `MAIL FROM:<>`.

## Addresses, hostnames and parameters

- `smtpwire.hostname.Hostname` parses ASCII domains, internationalised
  domains (checked and given their punycode form through `idna`), and
  `[1.2.3.4]` / `[IPv6:...]` address literals. Its `kind` is a
  `HostnameKind`. Equality looks at `raw` only; `deep_equal` compares every
  field.
- `smtpwire.address` has `Localpart` (with `unquote()`), `Email`
  (`parse_until`, `parse_bracketed`), `Path` for source routes such as
  `@one,@two`, and the helpers `unbracketed_email_with_path` and
  `email_with_path`.
- `smtpwire.parameters.Parameters` parses and rebuilds the
  `NAME[=VALUE]` parameters of `MAIL` and `RCPT`; `parse_parameter_name`
  parses a single keyword.
- `smtpwire.parsing.MaybeUtf8` is text flagged as ASCII or UTF-8, and
  `next_crlf` / `NextCrLfState` find line ends across successive buffers.

## Enhanced status codes

```python
from smtpwire.enhanced_code import EnhancedReplyCode, EnhancedReplyCodeSubject

rest, code = EnhancedReplyCode.parse(b"5.1.1 rest")
assert rest == b" rest"
assert code.subject() is EnhancedReplyCodeSubject.ADDRESSING
assert code == EnhancedReplyCode.PERMANENT_BAD_DEST_MAILBOX
```

The registered codes are available as class attributes such as
`EnhancedReplyCode.PERMANENT_BAD_DEST_MAILBOX` or
`EnhancedReplyCode.TRANSIENT_MAILBOX_FULL`.

## The DATA stream

- `smtpwire.data_reader.EscapedDataReader(unhandled, stream)` reads the
  still-escaped body from a stream up to and including the `.\r\n` end
  line. After `complete()`, `get_unhandled()` returns the bytes that
  followed the end line. If the stream ends first, `read` raises
  `ConnectionAbortedError`.
- `smtpwire.data_codec.DataUnescaper` removes the dot-escaping, buffer after
  buffer; each call returns a `DataUnescapeRes` with the `unescaped` bytes
  and the `unhandled_idx` from which the input must be carried over to the
  next call.
- `smtpwire.data_codec.EscapingDataWriter` doubles line-starting dots as a
  body is written to a stream, and `finish()` appends the end line.

```python
import io
from smtpwire.data_codec import DataUnescaper
from smtpwire.data_reader import EscapedDataReader
from smtpwire.roundtrip import escape_data

assert escape_data([[b".hi"]]) == b"..hi\r\n.\r\n"

reader = EscapedDataReader(b"", io.BytesIO(b"..hi\r\n.\r\nQUIT\r\n"))
wire = reader.read(1024)            # b"..hi\r\n.\r\n"
reader.complete()
assert reader.get_unhandled() == b"QUIT\r\n"
assert DataUnescaper().unescape(wire).unescaped == b".hi\r\n"
```

`smtpwire.roundtrip.escaping_then_unescaping` escapes a body, reads it back
in chunks of the given sizes, unescapes it and raises `AssertionError` if
the result differs from the original.

## What it does not do

The package covers what a client sends. It does not parse or build server
reply lines (`250 OK`, multi-line replies or their three-digit codes); only
the enhanced status codes that such replies may carry are handled. It opens
no connections and contains no SMTP client or server: it works on bytes and
streams supplied by the caller.

## Running the tests

```
pip install "smtpwire[test]"
pytest
```