"""Builders for common outgoing messages and typed views over incoming ones."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from .catalog import JOIN, NICK, PING, PONG, PRIVMSG, USER
from .logs.logger import logger
from .message import Message, UserInfo


def nick(nickname: str) -> Message:
    return Message(None, NICK, (nickname,))


def user(username: str, realname: str) -> Message:
    """USER registration with mode ``0`` and the unused ``*`` field."""
    return Message(None, USER, (username, "0", "*", realname))


def join(channel: str) -> Message:
    return Message(None, JOIN, (channel,))


def privmsg(target: str, text: str) -> Message:
    return Message(None, PRIVMSG, (target, text))


def pong(arguments: Iterable[str]) -> Message:
    """PONG echoing ``arguments`` unchanged."""
    return Message(None, PONG, tuple(arguments))


@dataclass(frozen=True, slots=True)
class Ping:
    """A received PING message."""

    arguments: tuple[str, ...]

    def pong(self) -> Message:
        """Creates the PONG message corresponding to this PING message."""
        return pong(self.arguments)


@dataclass(frozen=True, slots=True)
class Privmsg:
    """A received PRIVMSG: who sent it, where to, and the text."""

    sender: UserInfo
    target: str
    text: str


def as_ping(message: Message) -> Ping | None:
    if message.command != PING:
        return None
    return Ping(message.arguments)


def as_privmsg(message: Message) -> Privmsg | None:
    """Read ``message`` as a PRIVMSG, or return None if it has any other shape.

    Requires the PRIVMSG command, a user prefix and exactly two arguments.
    """
    if message.command != PRIVMSG:
        return None
    if len(message.arguments) != 2:
        logger.log_event(
            "messages",
            "not_privmsg",
            level=logging.DEBUG,
            reason=f"expected 2 arguments, got {len(message.arguments)}",
        )
        return None
    if not isinstance(message.prefix, UserInfo):
        logger.log_event(
            "messages",
            "not_privmsg",
            level=logging.DEBUG,
            reason="expected a user prefix",
        )
        return None
    target, text = message.arguments
    return Privmsg(sender=message.prefix, target=target, text=text)


__all__ = [
    "Ping",
    "Privmsg",
    "as_ping",
    "as_privmsg",
    "join",
    "nick",
    "pong",
    "privmsg",
    "user",
]
