"""Client-side IRC (RFC 2812) message codec and line framer.

Parses raw protocol lines into structured messages, serializes messages back
to wire text, and frames a blocking byte stream into a sequence of messages.
"""

from .catalog import COMMANDS, RESPONSES, lookup, response_name  # noqa: F401
from .command import Command, Number, Word, display, number, word  # noqa: F401
from .config import ConnectionConfig  # noqa: F401
from .errors import (  # noqa: F401
    CommandError,
    IncompleteMessage,
    IrcError,
    LineTooLongError,
    ParseError,
    PrefixError,
    SerializationError,
    TransportError,
)
from .message import Message, Prefix, Server, UserInfo, serialize  # noqa: F401
from .messages import (  # noqa: F401
    Ping,
    Privmsg,
    as_ping,
    as_privmsg,
    join,
    nick,
    pong,
    privmsg,
    user,
)
from .parser import parse, parse_line  # noqa: F401
from .stream import IrcStream  # noqa: F401
from .transport import SocketTransport, connect  # noqa: F401

__all__ = [
    "COMMANDS",
    "RESPONSES",
    "Command",
    "CommandError",
    "ConnectionConfig",
    "IncompleteMessage",
    "IrcError",
    "IrcStream",
    "LineTooLongError",
    "Message",
    "Number",
    "ParseError",
    "Ping",
    "Prefix",
    "PrefixError",
    "Privmsg",
    "SerializationError",
    "Server",
    "SocketTransport",
    "TransportError",
    "UserInfo",
    "Word",
    "as_ping",
    "as_privmsg",
    "connect",
    "display",
    "join",
    "lookup",
    "nick",
    "number",
    "parse",
    "parse_line",
    "pong",
    "privmsg",
    "response_name",
    "serialize",
    "user",
    "word",
]
