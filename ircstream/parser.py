"""Recursive-descent parser for RFC 2812 message lines.

Grammar handled here::

    message  =  [ ":" prefix SPACE ] command *( SPACE param ) [ CR ] LF
    prefix   =  nickname "!" user "@" host
             /  nickname "@" host
             /  nickname
    command  =  1*letter / 1*3digit
    param    =  ":" *( any octet except NUL, CR, LF )      ; trailing
             /  nospcrlfcl *( any octet except NUL, CR, LF, SPACE )

Every rule is a function ``(buf, pos) -> (value, new_pos) | None``. A rule
either matches its whole shape or returns None without side effects, so
ordered alternatives can be tried one after another (see ``_first_match``).

A bare prefix token is always read as a nickname: the grammar cannot tell a
bare server name from a bare nickname, and ``Server`` prefixes are only ever
built by application code.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

from .command import Command, Number, Word
from .errors import IncompleteMessage, ParseError
from .message import Message, UserInfo

Rule = Callable[[bytes, int], "tuple[object, int] | None"]

_LETTERS = frozenset(b"ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz")
_DIGITS = frozenset(b"0123456789")

# Bytes that end a run inside each production.
_NICK_STOP = frozenset(b" !@\0\r\n")
_USER_STOP = frozenset(b" @\0\r\n")
_HOST_STOP = frozenset(b" \0\r\n")
_MIDDLE_STOP = frozenset(b" \0\r\n")
_TRAILING_STOP = frozenset(b"\0\r\n")

_SPACE = 0x20
_COLON = 0x3A
_BANG = 0x21
_AT = 0x40
_MAX_NUMERIC_DIGITS = 3


def _text(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace")


def _span_until(buf: bytes, pos: int, stop: frozenset[int]) -> int:
    """Index just past the maximal run starting at ``pos`` with no byte in ``stop``."""
    end = pos
    size = len(buf)
    while end < size and buf[end] not in stop:
        end += 1
    return end


def _span_while(buf: bytes, pos: int, allowed: frozenset[int]) -> int:
    end = pos
    size = len(buf)
    while end < size and buf[end] in allowed:
        end += 1
    return end


def _byte_at(buf: bytes, pos: int) -> int | None:
    return buf[pos] if pos < len(buf) else None


def _first_match(
    buf: bytes, pos: int, rules: Sequence[Rule]
) -> tuple[object, int] | None:
    """Try ``rules`` in order at ``pos``; return the first successful match."""
    for rule in rules:
        result = rule(buf, pos)
        if result is not None:
            return result
    return None


# -- prefix ---------------------------------------------------------------


def _nickname(buf: bytes, pos: int) -> tuple[str, int] | None:
    end = _span_until(buf, pos, _NICK_STOP)
    if end == pos:
        return None
    return _text(buf[pos:end]), end


def _expect(buf: bytes, pos: int, byte: int) -> int | None:
    return pos + 1 if _byte_at(buf, pos) == byte else None


def _full_user_prefix(buf: bytes, pos: int) -> tuple[UserInfo, int] | None:
    """``nick!user@host`` followed by the separating space."""
    nick = _nickname(buf, pos)
    if nick is None:
        return None
    nickname, pos = nick
    user_start = _expect(buf, pos, _BANG)
    if user_start is None:
        return None
    user_end = _span_until(buf, user_start, _USER_STOP)
    if user_end == user_start:
        return None
    host_start = _expect(buf, user_end, _AT)
    if host_start is None:
        return None
    host_end = _span_until(buf, host_start, _HOST_STOP)
    if host_end == host_start:
        return None
    after = _expect(buf, host_end, _SPACE)
    if after is None:
        return None
    info = UserInfo(
        nickname, _text(buf[user_start:user_end]), _text(buf[host_start:host_end])
    )
    return info, after


def _host_user_prefix(buf: bytes, pos: int) -> tuple[UserInfo, int] | None:
    """``nick@host`` followed by the separating space."""
    nick = _nickname(buf, pos)
    if nick is None:
        return None
    nickname, pos = nick
    host_start = _expect(buf, pos, _AT)
    if host_start is None:
        return None
    host_end = _span_until(buf, host_start, _HOST_STOP)
    if host_end == host_start:
        return None
    after = _expect(buf, host_end, _SPACE)
    if after is None:
        return None
    return UserInfo(nickname, host=_text(buf[host_start:host_end])), after


def _bare_prefix(buf: bytes, pos: int) -> tuple[UserInfo, int] | None:
    """A lone token followed by the separating space, read as a nickname."""
    nick = _nickname(buf, pos)
    if nick is None:
        return None
    nickname, pos = nick
    after = _expect(buf, pos, _SPACE)
    if after is None:
        return None
    return UserInfo(nickname), after


# Longest form first: "nick@host" is a strict prefix of what the bare form
# would otherwise stop at.
_PREFIX_RULES: tuple[Rule, ...] = (
    _full_user_prefix,
    _host_user_prefix,
    _bare_prefix,
)


# -- command --------------------------------------------------------------


def _word_command(buf: bytes, pos: int) -> tuple[Command, int] | None:
    end = _span_while(buf, pos, _LETTERS)
    if end == pos:
        return None
    return Word(buf[pos:end].decode("ascii")), end


def _numeric_command(buf: bytes, pos: int) -> tuple[Command, int] | None:
    end = _span_while(buf, pos, _DIGITS)
    if end == pos or end - pos > _MAX_NUMERIC_DIGITS:
        return None
    return Number(int(buf[pos:end])), end


_COMMAND_RULES: tuple[Rule, ...] = (_word_command, _numeric_command)


# -- params ---------------------------------------------------------------


def _trailing_param(buf: bytes, pos: int) -> tuple[str, int] | None:
    start = _expect(buf, pos, _COLON)
    if start is None:
        return None
    end = _span_until(buf, start, _TRAILING_STOP)
    return _text(buf[start:end]), end


def _middle_param(buf: bytes, pos: int) -> tuple[str, int] | None:
    first = _byte_at(buf, pos)
    if first is None or first == _COLON or first in _MIDDLE_STOP:
        return None
    # Interior colons are data, not separators.
    end = _span_until(buf, pos + 1, _MIDDLE_STOP)
    return _text(buf[pos:end]), end


_PARAM_RULES: tuple[Rule, ...] = (_trailing_param, _middle_param)


def _params(buf: bytes, pos: int) -> tuple[list[str], int]:
    """Zero or more parameters, each after exactly one space.

    Stops before a space that does not introduce a parameter; the terminator
    check then rejects the line.
    """
    arguments: list[str] = []
    while _byte_at(buf, pos) == _SPACE:
        result = _first_match(buf, pos + 1, _PARAM_RULES)
        if result is None:
            break
        argument, pos = result
        arguments.append(argument)
    return arguments, pos


def _terminator(buf: bytes, pos: int) -> int | None:
    """Optional CR then LF, which must be the last byte of the line."""
    if buf[pos:] == b"\r\n":
        return pos + 2
    if buf[pos:] == b"\n":
        return pos + 1
    return None


# -- entry points ---------------------------------------------------------


def parse_line(line: bytes) -> Message:
    """Parse exactly one line, terminator included.

    Raises:
        ParseError: If ``line`` does not match the message grammar.
    """
    pos = 0
    prefix = None
    if _byte_at(line, 0) == _COLON:
        matched = _first_match(line, 1, _PREFIX_RULES)
        if matched is None:
            raise ParseError("Malformed message prefix", line, 1)
        prefix, pos = matched

    matched_command = _first_match(line, pos, _COMMAND_RULES)
    if matched_command is None:
        raise ParseError(
            "Expected a command of letters or up to 3 digits", line, pos
        )
    command, pos = matched_command

    arguments, pos = _params(line, pos)
    if _terminator(line, pos) is None:
        raise ParseError("Unexpected data before end of line", line, pos)
    return Message(prefix, command, tuple(arguments))


def parse(data: bytes | bytearray | memoryview | str) -> tuple[Message, bytes]:
    """Parse the first line in ``data``.

    Returns:
        The parsed message and the bytes following its line feed.

    Raises:
        IncompleteMessage: If ``data`` holds no line feed yet.
        ParseError: If the first line does not match the grammar.
    """
    buf = data.encode("utf-8") if isinstance(data, str) else bytes(data)
    newline = buf.find(b"\n")
    if newline == -1:
        raise IncompleteMessage(
            "No complete line in input yet", data={"buffered": len(buf)}
        )
    line = buf[: newline + 1]
    return parse_line(line), buf[newline + 1 :]


__all__ = ["parse", "parse_line"]
