"""Error hierarchy package exports."""

from .internal import (  # noqa: F401
    CommandError,
    IncompleteMessage,
    IrcError,
    LineTooLongError,
    ParseError,
    PrefixError,
    SerializationError,
    TransportError,
)

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
