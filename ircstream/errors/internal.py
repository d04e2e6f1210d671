"""Centralized error hierarchy for the IRC codec and framer.

Construction, serialization and parse errors are local and recoverable: the
caller can log the offending value and carry on. Transport errors mean the
underlying byte stream is unusable and are fatal to the stream that raised
them.

Classes:
  IrcError            – Base for all errors raised by this package.
  CommandError        – Invalid word / numeric command construction.
  PrefixError         – Malformed user prefix construction.
  SerializationError  – Message cannot be represented on the wire.
  ParseError          – Grammar mismatch on a received line.
  LineTooLongError    – Framer buffer overflowed without a line feed.
  IncompleteMessage   – Not enough bytes yet to hold a full line.
  TransportError      – Read / write / flush failure or end of stream.
"""

from __future__ import annotations

from collections.abc import Mapping


class IrcError(Exception):
    """Base class for all package errors with metadata support.

    Attributes:
        data: Dictionary containing arbitrary structured context data.

    Args:
        message: Descriptive error message.
        data: Optional mapping of additional context data.
    """

    data: dict[str, object]

    def __init__(
        self, message: str, *, data: Mapping[str, object] | None = None
    ) -> None:
        super().__init__(message)
        # Copy into a plain dict to avoid unexpected mutations from caller.
        self.data = dict(data) if data else {}


class CommandError(IrcError, ValueError):
    """Raised when a word or numeric command fails validation."""


class PrefixError(IrcError, ValueError):
    """Raised when a user prefix is built with an impossible shape."""


class SerializationError(IrcError, ValueError):
    """Raised when a message cannot be written as a single wire line."""


class ParseError(IrcError):
    """Raised when a received line does not match the message grammar.

    Attributes:
        raw: The bytes of the offending line, for diagnostics.
        position: Byte offset into ``raw`` where matching failed.
    """

    def __init__(self, message: str, raw: bytes, position: int = 0) -> None:
        super().__init__(message, data={"raw": raw, "position": position})
        self.raw = raw
        self.position = position


class LineTooLongError(ParseError):
    """Raised when no line feed arrives within the configured line length."""


class IncompleteMessage(IrcError):
    """Raised by the parser when the input holds no complete line yet.

    This is a request for more bytes, not a grammar failure.
    """


class TransportError(IrcError):
    """Raised when the underlying byte stream fails or reaches end of stream.

    Attributes:
        eof: True when the stream closed cleanly rather than erroring.
    """

    def __init__(self, message: str, *, eof: bool = False) -> None:
        super().__init__(message, data={"eof": eof})
        self.eof = eof


__all__ = [
    "IrcError",
    "CommandError",
    "PrefixError",
    "SerializationError",
    "ParseError",
    "LineTooLongError",
    "IncompleteMessage",
    "TransportError",
]
