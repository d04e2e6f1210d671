"""Structured IRC messages and their wire serialization."""

from __future__ import annotations

from dataclasses import dataclass, field

from .command import Command, Number, Word
from .errors import PrefixError, SerializationError

CRLF = b"\r\n"

_FORBIDDEN = frozenset("\0\r\n")


def _check_field(kind: str, value: str | None, extra: str = "") -> None:
    if value is None:
        return
    if not isinstance(value, str) or not value:
        raise PrefixError(f"{kind} must be non-empty text", data={kind: value})
    bad = _FORBIDDEN.union(" " + extra)
    if any(c in bad for c in value):
        raise PrefixError(
            f"{kind} [{value}] contains a character not allowed in a prefix",
            data={kind: value},
        )


@dataclass(frozen=True, slots=True)
class UserInfo:
    """Information about a user, as provided in the prefix of a message.

    Three shapes are allowed: nickname only (``:nick``), nickname and host
    (``:nick@host``) and nickname, username and host (``:nick!user@host``).
    A username without a host has no wire form and is rejected.
    """

    nickname: str
    username: str | None = None
    host: str | None = None

    def __post_init__(self) -> None:
        _check_field("nickname", self.nickname, "!@")
        _check_field("username", self.username, "@")
        _check_field("host", self.host)
        if self.username is not None and self.host is None:
            raise PrefixError(
                "A username can only be given together with a host",
                data={"nickname": self.nickname, "username": self.username},
            )

    def to_prefix(self) -> UserInfo:
        """Return this value for use as a message prefix."""
        return self

    def __str__(self) -> str:
        if self.host is None:
            return self.nickname
        if self.username is None:
            return f"{self.nickname}@{self.host}"
        return f"{self.nickname}!{self.username}@{self.host}"


@dataclass(frozen=True, slots=True)
class Server:
    """A server hostname used as a message prefix."""

    hostname: str

    def __post_init__(self) -> None:
        _check_field("hostname", self.hostname)

    def __str__(self) -> str:
        return self.hostname


# None means no prefix: the local connection is the author.
Prefix = Server | UserInfo | None


def _coerce_command(command: Command | str) -> Command:
    if isinstance(command, (Word, Number)):
        return command
    if isinstance(command, str):
        if command.isascii() and command.isdigit():
            return Number(int(command))
        return Word(command)
    raise TypeError(f"command must be a Word, Number or str, not {type(command).__name__}")


@dataclass(frozen=True, slots=True)
class Message:
    """A single IRC message, as sent to and from server and client.

    ``arguments`` is stored as a tuple; any iterable of strings is accepted.
    """

    prefix: Prefix
    command: Command
    arguments: tuple[str, ...] = field(default=())

    def __post_init__(self) -> None:
        if self.prefix is not None and not isinstance(self.prefix, (Server, UserInfo)):
            raise TypeError(
                f"prefix must be Server, UserInfo or None, not {type(self.prefix).__name__}"
            )
        object.__setattr__(self, "command", _coerce_command(self.command))
        arguments = tuple(self.arguments)
        for argument in arguments:
            if not isinstance(argument, str):
                raise TypeError(
                    f"arguments must be str, not {type(argument).__name__}"
                )
        object.__setattr__(self, "arguments", arguments)

    @classmethod
    def from_args(cls, prefix: Prefix, command: Command | str, *args: str) -> Message:
        return cls(prefix, command, args)

    @classmethod
    def parse(cls, data: bytes | bytearray | memoryview) -> tuple[Message, bytes]:
        """Parse one line from ``data``; see :func:`ircstream.parser.parse`."""
        from .parser import parse

        return parse(data)

    def __str__(self) -> str:
        return serialize(self)

    def to_bytes(self) -> bytes:
        """UTF-8 wire form including the CR LF terminator."""
        return serialize(self).encode("utf-8") + CRLF


def _check_argument(index: int, argument: str, is_last: bool) -> None:
    if any(c in _FORBIDDEN for c in argument):
        raise SerializationError(
            f"Argument {index} contains NUL, CR or LF", data={"argument": argument}
        )
    if is_last:
        return
    if not argument or argument.startswith(":") or " " in argument:
        raise SerializationError(
            f"Argument {index} [{argument}] can only be sent as the final argument",
            data={"argument": argument, "index": index},
        )


def _needs_trailing(argument: str) -> bool:
    return not argument or " " in argument or argument.startswith(":")


def serialize(message: Message) -> str:
    """Wire text for ``message`` without the line terminator.

    The final argument gets a leading ``:`` when it contains a space, is empty
    or itself starts with ``:``; otherwise it is written bare.

    Raises:
        SerializationError: If an argument cannot be represented on one line.
    """
    parts: list[str] = []
    if message.prefix is not None:
        parts.append(f":{message.prefix}")
    parts.append(str(message.command))

    last = len(message.arguments) - 1
    for i, argument in enumerate(message.arguments):
        _check_argument(i, argument, i == last)
        if i == last and _needs_trailing(argument):
            parts.append(f":{argument}")
        else:
            parts.append(argument)
    return " ".join(parts)


__all__ = [
    "CRLF",
    "Message",
    "Prefix",
    "Server",
    "UserInfo",
    "serialize",
]
