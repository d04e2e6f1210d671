"""IRC commands: alphabetic verbs and three-digit numeric replies."""

from __future__ import annotations

import string
from dataclasses import dataclass

from .errors import CommandError

_LETTERS = frozenset(string.ascii_letters)


@dataclass(frozen=True, slots=True)
class Word:
    """A command made of ASCII letters only, such as ``PRIVMSG``.

    Only the character set is validated, not whether the verb exists in any
    RFC. Case is preserved as given.
    """

    text: str

    def __post_init__(self) -> None:
        if not isinstance(self.text, str) or not self.text:
            raise CommandError(
                "Word IRC commands must be non-empty text", data={"text": self.text}
            )
        for i, c in enumerate(self.text):
            if c not in _LETTERS:
                raise CommandError(
                    f"Word IRC commands must contain only chars A-Za-z but "
                    f"[{self.text}] index {i} is [{c}]",
                    data={"text": self.text, "index": i},
                )

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True, slots=True)
class Number:
    """A numeric reply code, always rendered as three zero-padded digits."""

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise CommandError(
                "Numeric IRC commands must be integers", data={"value": self.value}
            )
        if not 0 <= self.value <= 999:
            raise CommandError(
                f"Numeric IRC commands must be representable as a 3-digit number "
                f"but got {self.value}",
                data={"value": self.value},
            )

    def __str__(self) -> str:
        return f"{self.value:03d}"


Command = Word | Number


def word(text: str) -> Word:
    return Word(text)


def number(value: int) -> Number:
    return Number(value)


def display(command: Command) -> str:
    """Wire form of ``command``: verbatim word or zero-padded number."""
    return str(command)


__all__ = ["Command", "Word", "Number", "word", "number", "display"]
