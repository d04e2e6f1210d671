"""Tests for the error hierarchy."""

import pytest

from ircstream.errors import (
    CommandError,
    IncompleteMessage,
    IrcError,
    LineTooLongError,
    ParseError,
    PrefixError,
    SerializationError,
    TransportError,
)


@pytest.mark.parametrize("cls", [CommandError, PrefixError, SerializationError])
def test_construction_errors_are_value_errors(cls):
    err = cls("bad value", data={"value": "x"})
    assert isinstance(err, IrcError)
    assert isinstance(err, ValueError)
    assert err.data == {"value": "x"}


def test_data_is_copied():
    source = {"k": 1}
    err = IrcError("boom", data=source)
    source["k"] = 2
    assert err.data == {"k": 1}


def test_parse_error_carries_raw_and_position():
    err = ParseError("Malformed message prefix", b":x\r\n", 1)
    assert err.raw == b":x\r\n"
    assert err.position == 1
    assert err.data == {"raw": b":x\r\n", "position": 1}
    assert str(err) == "Malformed message prefix"


def test_line_too_long_is_parse_error():
    err = LineTooLongError("too long", b"xxxx")
    assert isinstance(err, ParseError)
    assert err.position == 0


def test_transport_error_eof_flag():
    assert TransportError("closed", eof=True).eof is True
    assert TransportError("reset").eof is False


def test_incomplete_and_transport_are_not_parse_errors():
    assert not issubclass(IncompleteMessage, ParseError)
    assert not issubclass(TransportError, ParseError)
